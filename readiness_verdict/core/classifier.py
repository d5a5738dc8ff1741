"""Issue Classifier Module - Rule-based classification of findings.

Every classification axis is an ordered table of rules evaluated top-down;
the first matching rule decides the value and unmatched findings fall
through to the axis default. Classification reads only the finding itself,
so findings can be classified independently and in any order.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Sequence, Tuple

from .finding import Finding, FindingCategory, Severity


class Priority(Enum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class Impact(Enum):
    DEPLOYMENT_BLOCKER = "DEPLOYMENT_BLOCKER"
    PERFORMANCE_DEGRADATION = "PERFORMANCE_DEGRADATION"
    USER_EXPERIENCE = "USER_EXPERIENCE"
    CODE_QUALITY = "CODE_QUALITY"


class RemediationEffort(Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    EXTENSIVE = "EXTENSIVE"


class ImpactLevel(Enum):
    """Graded impact used for user experience and performance."""
    SEVERE = "SEVERE"
    MODERATE = "MODERATE"
    MINOR = "MINOR"
    NONE = "NONE"


class RiskLevel(Enum):
    """Graded risk used for reliability and security."""
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    NONE = "NONE"


class Frequency(Enum):
    ALWAYS = "ALWAYS"
    FREQUENT = "FREQUENT"
    OCCASIONAL = "OCCASIONAL"
    RARE = "RARE"


CRITICAL_TERMS: Tuple[str, ...] = (
    "security vulnerability", "sql injection", "rls bypass", "authentication bypass",
    "memory leak", "crash", "deadlock", "data corruption", "privilege escalation",
    "information disclosure", "token collision", "session hijacking",
)

HIGH_PRIORITY_TERMS: Tuple[str, ...] = (
    "performance bottleneck", "scalability limit", "frequent failure",
    "race condition", "threading issue", "connection pool exhaustion",
    "timeout", "resource exhaustion", "concurrent user limit",
)

MEDIUM_PRIORITY_TERMS: Tuple[str, ...] = (
    "suboptimal implementation", "occasional failure", "error handling gap",
    "missing validation", "inefficient query", "code duplication",
    "configuration issue", "permission handling",
)


Predicate = Callable[[Finding, str], bool]


@dataclass(frozen=True)
class Rule:
    """One row of a classification table.

    A rule matches when the finding's severity is listed, when any term is
    a substring of the content, or when the predicate holds.
    """
    result: Any
    terms: Tuple[str, ...] = ()
    severities: FrozenSet[Severity] = frozenset()
    predicate: Optional[Predicate] = None

    def matches(self, finding: Finding, content: str) -> bool:
        if finding.severity in self.severities:
            return True
        if any(term in content for term in self.terms):
            return True
        return self.predicate is not None and self.predicate(finding, content)


def first_match(rules: Sequence[Rule], finding: Finding, content: str, default: Any) -> Any:
    """Evaluate rules top-down and return the first matching result."""
    for rule in rules:
        if rule.matches(finding, content):
            return rule.result
    return default


def finding_content(finding: Finding) -> str:
    """Lowercase text of message and details used for term matching."""
    return f"{finding.message} {finding.details_text}".lower()


PRIORITY_RULES: Tuple[Rule, ...] = (
    Rule(Priority.CRITICAL, CRITICAL_TERMS, frozenset({Severity.CRITICAL})),
    Rule(Priority.HIGH, HIGH_PRIORITY_TERMS, frozenset({Severity.HIGH})),
    Rule(Priority.MEDIUM, MEDIUM_PRIORITY_TERMS, frozenset({Severity.MEDIUM})),
)

IMPACT_RULES: Tuple[Rule, ...] = (
    Rule(Impact.DEPLOYMENT_BLOCKER, ("deployment", "blocker", "critical"),
         frozenset({Severity.CRITICAL})),
    Rule(Impact.PERFORMANCE_DEGRADATION, ("performance", "scalability", "bottleneck", "timeout")),
    Rule(Impact.USER_EXPERIENCE, ("user", "experience", "workflow", "usability")),
)

EFFORT_RULES: Tuple[Rule, ...] = (
    Rule(RemediationEffort.EXTENSIVE, ("redesign", "refactor", "architecture", "major change")),
    Rule(
        RemediationEffort.HIGH,
        ("native module", "rls policy"),
        predicate=lambda f, content: (
            (f.category == FindingCategory.SECURITY and f.severity == Severity.CRITICAL)
            or (f.category == FindingCategory.DATABASE and "schema" in content)
        ),
    ),
    Rule(
        RemediationEffort.MEDIUM,
        ("configuration", "integration"),
        predicate=lambda f, content: f.category in (FindingCategory.CONFIG, FindingCategory.BRIDGE),
    ),
)

DEPLOYMENT_BLOCKER_RULES: Tuple[Rule, ...] = (
    Rule(
        True,
        CRITICAL_TERMS + ("deployment blocker", "production blocker"),
        frozenset({Severity.CRITICAL}),
        predicate=lambda f, content: (
            f.category == FindingCategory.SECURITY and f.severity == Severity.HIGH
        ),
    ),
)

USER_EXPERIENCE_RULES: Tuple[Rule, ...] = (
    Rule(ImpactLevel.SEVERE, ("crash", "hang", "data loss", "authentication fail")),
    Rule(ImpactLevel.MODERATE, ("slow", "timeout", "error message", "retry")),
    Rule(ImpactLevel.MINOR, ("ui", "display", "minor", "cosmetic")),
)

RELIABILITY_RULES: Tuple[Rule, ...] = (
    Rule(RiskLevel.CRITICAL, ("crash", "deadlock", "data corruption", "memory leak")),
    Rule(RiskLevel.HIGH, ("race condition", "threading", "connection pool", "resource exhaustion")),
    Rule(RiskLevel.MEDIUM, ("error handling", "validation", "retry logic", "fallback")),
    Rule(RiskLevel.LOW, ("logging", "monitoring", "metrics")),
)

SECURITY_RULES: Tuple[Rule, ...] = (
    Rule(RiskLevel.CRITICAL, ("sql injection", "rls bypass", "privilege escalation",
                              "authentication bypass")),
    Rule(RiskLevel.HIGH, ("information disclosure", "token collision", "session hijacking",
                          "access control")),
    Rule(RiskLevel.MEDIUM, ("validation", "sanitization", "permission", "authorization")),
    Rule(RiskLevel.LOW, ("logging", "audit", "monitoring")),
)

PERFORMANCE_RULES: Tuple[Rule, ...] = (
    Rule(ImpactLevel.SEVERE, ("bottleneck", "scalability limit", "timeout", "resource exhaustion")),
    Rule(ImpactLevel.MODERATE, ("slow query", "inefficient", "optimization", "concurrent users")),
    Rule(ImpactLevel.MINOR, ("minor performance", "small optimization", "caching")),
)

FREQUENCY_RULES: Tuple[Rule, ...] = (
    Rule(Frequency.ALWAYS, ("always", "every time", "consistent"), frozenset({Severity.CRITICAL})),
    Rule(Frequency.FREQUENT, ("frequent", "often", "regular"), frozenset({Severity.HIGH})),
    Rule(Frequency.OCCASIONAL, ("occasional", "sometimes", "intermittent"),
         frozenset({Severity.MEDIUM})),
)

FIX_TIME_BY_EFFORT: Dict[RemediationEffort, str] = {
    RemediationEffort.LOW: "1-4 hours",
    RemediationEffort.MEDIUM: "1-2 days",
    RemediationEffort.HIGH: "3-5 days",
    RemediationEffort.EXTENSIVE: "1-2 weeks",
}

# Base steps per category, then (term, step) pairs added when the term appears
REMEDIATION_STEPS: Dict[FindingCategory, Tuple[List[str], List[Tuple[str, str]]]] = {
    FindingCategory.SECURITY: (
        [
            "Review security implications with security team",
            "Implement proper input validation and sanitization",
        ],
        [
            ("sql", "Replace string concatenation with parameterized queries"),
            ("rls", "Review and test RLS policies thoroughly"),
        ],
    ),
    FindingCategory.PERFORMANCE: (
        [
            "Profile the affected code path",
            "Identify specific performance bottlenecks",
        ],
        [
            ("query", "Optimize database queries and add appropriate indexes"),
            ("concurrent", "Implement proper connection pooling and rate limiting"),
        ],
    ),
    FindingCategory.NATIVE: (
        [
            "Review native module implementation",
            "Test on multiple device types and OS versions",
        ],
        [
            ("memory", "Implement proper memory management and cleanup"),
        ],
    ),
    FindingCategory.CONFIG: (
        [
            "Review configuration files and settings",
            "Validate all required permissions and capabilities",
        ],
        [],
    ),
}

DEFAULT_REMEDIATION_STEPS = [
    "Analyze the specific issue in detail",
    "Implement appropriate fix based on root cause",
]

TESTING_STEPS = [
    "Write or update tests to cover the fix",
    "Verify fix resolves the issue without introducing regressions",
]


@dataclass
class ClassifiedIssue:
    """A finding enriched with its classification on every axis."""
    finding: Finding
    priority: Priority
    impact: Impact
    remediation_effort: RemediationEffort
    deployment_blocker: bool
    user_experience_impact: ImpactLevel
    system_reliability_impact: RiskLevel
    security_risk: RiskLevel
    performance_impact: ImpactLevel
    frequency_of_occurrence: Frequency
    remediation_steps: List[str] = field(default_factory=list)
    estimated_fix_time: str = ""
    dependencies: List[str] = field(default_factory=list)
    risk_if_unfixed: str = ""

    @property
    def id(self) -> str:
        return self.finding.id

    @property
    def category(self) -> FindingCategory:
        return self.finding.category

    @property
    def message(self) -> str:
        return self.finding.message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.finding.name,
            "category": self.category.value,
            "severity": self.finding.severity.value,
            "message": self.message,
            "priority": self.priority.value,
            "impact": self.impact.value,
            "remediation_effort": self.remediation_effort.value,
            "deployment_blocker": self.deployment_blocker,
            "user_experience_impact": self.user_experience_impact.value,
            "system_reliability_impact": self.system_reliability_impact.value,
            "security_risk": self.security_risk.value,
            "performance_impact": self.performance_impact.value,
            "frequency_of_occurrence": self.frequency_of_occurrence.value,
            "remediation_steps": list(self.remediation_steps),
            "estimated_fix_time": self.estimated_fix_time,
            "dependencies": list(self.dependencies),
            "risk_if_unfixed": self.risk_if_unfixed,
        }


class IssueClassifier:
    """Classifies findings along priority, impact, effort and risk axes."""

    def classify(self, finding: Finding) -> ClassifiedIssue:
        """Classify a single finding.

        Args:
            finding: Finding to classify

        Returns:
            ClassifiedIssue with exactly one value per axis
        """
        content = finding_content(finding)
        effort = first_match(EFFORT_RULES, finding, content, RemediationEffort.LOW)

        return ClassifiedIssue(
            finding=finding,
            priority=first_match(PRIORITY_RULES, finding, content, Priority.LOW),
            impact=first_match(IMPACT_RULES, finding, content, Impact.CODE_QUALITY),
            remediation_effort=effort,
            deployment_blocker=first_match(DEPLOYMENT_BLOCKER_RULES, finding, content, False),
            user_experience_impact=first_match(
                USER_EXPERIENCE_RULES, finding, content, ImpactLevel.NONE
            ),
            system_reliability_impact=first_match(
                RELIABILITY_RULES, finding, content, RiskLevel.NONE
            ),
            security_risk=first_match(SECURITY_RULES, finding, content, RiskLevel.NONE),
            performance_impact=first_match(PERFORMANCE_RULES, finding, content, ImpactLevel.NONE),
            frequency_of_occurrence=first_match(FREQUENCY_RULES, finding, content, Frequency.RARE),
            remediation_steps=self._remediation_steps(finding, content),
            estimated_fix_time=FIX_TIME_BY_EFFORT[effort],
            dependencies=self._dependencies(content),
            risk_if_unfixed=self._risk_if_unfixed(finding, content),
        )

    def classify_all(self, findings: List[Finding]) -> List[ClassifiedIssue]:
        """Classify findings, keeping input order."""
        return [self.classify(finding) for finding in findings]

    def _remediation_steps(self, finding: Finding, content: str) -> List[str]:
        if finding.category in REMEDIATION_STEPS:
            base_steps, conditional_steps = REMEDIATION_STEPS[finding.category]
            steps = list(base_steps)
            steps.extend(step for term, step in conditional_steps if term in content)
        else:
            steps = list(DEFAULT_REMEDIATION_STEPS)
        steps.extend(TESTING_STEPS)
        return steps

    def _dependencies(self, content: str) -> List[str]:
        dependencies = []
        if "database" in content and "schema" in content:
            dependencies.append("Database schema migration")
        if "native module" in content:
            dependencies.append("Native module rebuild and testing")
        if "configuration" in content:
            dependencies.append("Environment configuration update")
        if "security" in content and "policy" in content:
            dependencies.append("Security policy review and approval")
        return dependencies

    def _risk_if_unfixed(self, finding: Finding, content: str) -> str:
        if finding.severity == Severity.CRITICAL:
            if "security" in content:
                return "Critical security vulnerability could lead to data breach or system compromise"
            if "crash" in content or "deadlock" in content:
                return "System instability could cause complete service outage"
            return "Critical system failure preventing production deployment"

        if finding.severity == Severity.HIGH:
            if "performance" in content:
                return "Significant performance degradation affecting user experience and scalability"
            return "High impact on system reliability and user satisfaction"

        if finding.severity == Severity.MEDIUM:
            return "Moderate impact on system quality and maintainability"

        return "Minor impact on code quality and long-term maintainability"
