"""Finding Module - Data models for findings produced by analysis phases."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


# Phase identifiers
PHASE_STATIC_ANALYSIS = "static_analysis"
PHASE_DATABASE_SIMULATION = "database_simulation"
PHASE_SECURITY_AUDIT = "security_audit"
PHASE_PERFORMANCE_ANALYSIS = "performance_analysis"
PHASE_CONFIGURATION_AUDIT = "configuration_audit"

ALL_PHASES = [
    PHASE_STATIC_ANALYSIS,
    PHASE_DATABASE_SIMULATION,
    PHASE_SECURITY_AUDIT,
    PHASE_PERFORMANCE_ANALYSIS,
    PHASE_CONFIGURATION_AUDIT,
]


class _UpperEnum(Enum):
    """Enum parsed case-insensitively from document values."""

    @classmethod
    def parse(cls, value: Any):
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().upper())


class FindingStatus(_UpperEnum):
    """Outcome of a single check."""
    PASS = "PASS"
    FAIL = "FAIL"
    PENDING = "PENDING"
    CONDITIONAL = "CONDITIONAL"
    SKIPPED = "SKIPPED"


class Severity(_UpperEnum):
    """Severity levels for findings."""
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    INFO = "INFO"

    @property
    def color(self) -> str:
        """Get color code for severity."""
        colors = {
            Severity.CRITICAL: "red",
            Severity.HIGH: "orange1",
            Severity.MEDIUM: "yellow",
            Severity.LOW: "blue",
            Severity.INFO: "dim",
        }
        return colors[self]


class FindingCategory(_UpperEnum):
    """Area of the application a finding belongs to."""
    NATIVE = "NATIVE"
    BRIDGE = "BRIDGE"
    DATABASE = "DATABASE"
    SECURITY = "SECURITY"
    PERFORMANCE = "PERFORMANCE"
    CONFIG = "CONFIG"


# Category assigned to the synthetic finding of a failed phase
PHASE_CATEGORIES: Dict[str, FindingCategory] = {
    PHASE_STATIC_ANALYSIS: FindingCategory.NATIVE,
    PHASE_DATABASE_SIMULATION: FindingCategory.DATABASE,
    PHASE_SECURITY_AUDIT: FindingCategory.SECURITY,
    PHASE_PERFORMANCE_ANALYSIS: FindingCategory.PERFORMANCE,
    PHASE_CONFIGURATION_AUDIT: FindingCategory.CONFIG,
}

PHASE_NAMES: Dict[str, str] = {
    PHASE_STATIC_ANALYSIS: "Static Analysis",
    PHASE_DATABASE_SIMULATION: "Database Simulation",
    PHASE_SECURITY_AUDIT: "Security Audit",
    PHASE_PERFORMANCE_ANALYSIS: "Performance Analysis",
    PHASE_CONFIGURATION_AUDIT: "Configuration Audit",
}


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _mapping(value: Any, what: str) -> Dict[str, Any]:
    """Check that a document node is a mapping; None counts as empty."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{what} must be a mapping, got {type(value).__name__}")
    return value


def _sequence(value: Any, what: str) -> List[Any]:
    """Check that a document node is a list; None counts as empty."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{what} must be a list, got {type(value).__name__}")
    return value


def _text(value: Any, default: str = "") -> str:
    return default if value is None else str(value)


@dataclass(frozen=True)
class Evidence:
    """A piece of supporting evidence attached to a finding."""
    type: str
    location: str
    details: str
    severity: Optional[Severity] = None
    line_number: Optional[int] = None
    code_snippet: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "location": self.location,
            "details": self.details,
            "severity": self.severity.value if self.severity else None,
            "line_number": self.line_number,
            "code_snippet": self.code_snippet,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Evidence":
        data = _mapping(data, "Evidence entry")
        return cls(
            type=_text(data.get("type"), "CODE_REFERENCE"),
            location=_text(data.get("location")),
            details=_text(data.get("details")),
            severity=Severity.parse(data["severity"]) if data.get("severity") else None,
            line_number=data.get("line_number"),
            code_snippet=data.get("code_snippet"),
        )


@dataclass(frozen=True)
class Finding:
    """A single raw observation emitted by an analysis phase."""
    id: str
    name: str
    status: FindingStatus
    severity: Severity
    category: FindingCategory
    message: str
    details: Optional[Union[str, Dict[str, Any]]] = field(default=None, hash=False)
    evidence: Tuple[Evidence, ...] = ()
    recommendations: Tuple[str, ...] = ()
    timestamp: Optional[datetime] = None

    def __post_init__(self):
        # Lists from callers are stored as tuples
        object.__setattr__(self, "evidence", tuple(self.evidence))
        object.__setattr__(self, "recommendations", tuple(self.recommendations))

    @property
    def details_text(self) -> str:
        """Details rendered as plain text; empty when absent.

        Mapping keys are ordered by their text so mixed key types still sort.
        """
        if self.details is None:
            return ""
        if isinstance(self.details, dict):
            return " ".join(f"{k}: {self.details[k]}" for k in sorted(self.details, key=str))
        return str(self.details)

    @property
    def has_evidence(self) -> bool:
        return len(self.evidence) > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert finding to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status.value,
            "severity": self.severity.value,
            "category": self.category.value,
            "message": self.message,
            "details": self.details,
            "evidence": [e.to_dict() for e in self.evidence],
            "recommendations": list(self.recommendations),
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Finding":
        """Create finding from dictionary.

        Raises:
            ValueError: If the entry is not a mapping, a required field is
                missing or an enum value is unknown
        """
        data = _mapping(data, "Finding entry")
        try:
            return cls(
                id=str(data["id"]),
                name=_text(data.get("name"), str(data["id"])),
                status=FindingStatus.parse(data.get("status", "FAIL")),
                severity=Severity.parse(data["severity"]),
                category=FindingCategory.parse(data["category"]),
                message=_text(data.get("message")),
                details=data.get("details"),
                evidence=[Evidence.from_dict(e) for e in _sequence(data.get("evidence"), "evidence")],
                recommendations=[str(r) for r in _sequence(data.get("recommendations"), "recommendations")],
                timestamp=_parse_timestamp(data.get("timestamp")),
            )
        except KeyError as e:
            raise ValueError(f"Finding is missing required field {e}") from e


@dataclass
class PhaseResult:
    """Result of one analysis phase."""
    phase_name: str
    status: FindingStatus
    results: List[Finding] = field(default_factory=list)
    critical_issues: List[Finding] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    summary: str = ""
    capacity_estimate: Optional[int] = None

    @property
    def finding_count(self) -> int:
        return len(self.results)

    def count_by_severity(self, severity: Severity) -> int:
        return len([f for f in self.results if f.severity == severity])

    def to_dict(self) -> Dict[str, Any]:
        """Convert phase result to dictionary."""
        return {
            "phase_name": self.phase_name,
            "status": self.status.value,
            "results": [f.to_dict() for f in self.results],
            "critical_issues": [f.to_dict() for f in self.critical_issues],
            "recommendations": list(self.recommendations),
            "summary": self.summary,
            "capacity_estimate": self.capacity_estimate,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PhaseResult":
        """Create phase result from dictionary.

        Raises:
            ValueError: If an entry has the wrong shape or an invalid value
        """
        data = _mapping(data, "Phase entry")
        capacity = data.get("capacity_estimate")
        try:
            capacity = int(capacity) if capacity is not None else None
        except (TypeError, ValueError) as e:
            raise ValueError(f"capacity_estimate must be a whole number, got {capacity!r}") from e
        return cls(
            phase_name=_text(data.get("phase_name")),
            status=FindingStatus.parse(data.get("status", "PENDING")),
            results=[Finding.from_dict(f) for f in _sequence(data.get("results"), "results")],
            critical_issues=[
                Finding.from_dict(f) for f in _sequence(data.get("critical_issues"), "critical_issues")
            ],
            recommendations=[str(r) for r in _sequence(data.get("recommendations"), "recommendations")],
            summary=_text(data.get("summary")),
            capacity_estimate=capacity,
        )


@dataclass
class ValidationRun:
    """All phase results plus findings not attached to any single phase."""
    phases: Dict[str, PhaseResult] = field(default_factory=dict)
    critical_issues: List[Finding] = field(default_factory=list)

    def phase(self, phase_id: str) -> Optional[PhaseResult]:
        return self.phases.get(phase_id)

    @property
    def executed_phases(self) -> int:
        return len([p for p in ALL_PHASES if p in self.phases])

    @property
    def passing_phases(self) -> int:
        return len([
            p for p in ALL_PHASES
            if p in self.phases and self.phases[p].status == FindingStatus.PASS
        ])

    @property
    def phase_results(self) -> List[Finding]:
        """The `results` of every phase in phase order, without critical issues."""
        return [f for p in ALL_PHASES if p in self.phases for f in self.phases[p].results]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phases": {
                phase_id: self.phases[phase_id].to_dict()
                for phase_id in ALL_PHASES if phase_id in self.phases
            },
            "critical_issues": [f.to_dict() for f in self.critical_issues],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ValidationRun":
        """Create a validation run from a document.

        Raises:
            ValueError: If the document names an unknown phase or a section
                has the wrong shape
        """
        data = _mapping(data, "Validation run")
        phases: Dict[str, PhaseResult] = {}
        for phase_id, phase_data in _mapping(data.get("phases"), "phases").items():
            if phase_id not in ALL_PHASES:
                raise ValueError(
                    f"Unknown phase '{phase_id}' (expected one of: {', '.join(ALL_PHASES)})"
                )
            phase_data = dict(_mapping(phase_data, f"Phase '{phase_id}'"))
            if not phase_data.get("phase_name"):
                phase_data["phase_name"] = PHASE_NAMES[phase_id]
            phases[phase_id] = PhaseResult.from_dict(phase_data)

        return cls(
            phases=phases,
            critical_issues=[
                Finding.from_dict(f) for f in _sequence(data.get("critical_issues"), "critical_issues")
            ],
        )
