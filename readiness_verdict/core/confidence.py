"""Confidence Assessor Module - How far the verdict can be trusted."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .config import VerdictConfig
from .finding import ALL_PHASES, PHASE_NAMES, Finding, FindingStatus, ValidationRun


class ConfidenceLevel(Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class EvidenceQuality(Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def score(self) -> float:
        scores = {
            EvidenceQuality.HIGH: 90.0,
            EvidenceQuality.MEDIUM: 70.0,
            EvidenceQuality.LOW: 50.0,
        }
        return scores[self]


@dataclass
class ConfidenceFactor:
    factor: str
    impact: str  # POSITIVE or NEGATIVE
    weight: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "factor": self.factor,
            "impact": self.impact,
            "weight": self.weight,
            "description": self.description,
        }


@dataclass
class ConfidenceLevelAssessment:
    overall_confidence: ConfidenceLevel
    overall_score: float
    validation_completeness: float  # 0-100%
    test_coverage: float  # 0-100%
    evidence_quality: EvidenceQuality
    assumption_risks: List[str] = field(default_factory=list)
    untestable_scenarios: List[str] = field(default_factory=list)
    confidence_factors: List[ConfidenceFactor] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall_confidence": self.overall_confidence.value,
            "overall_score": round(self.overall_score, 2),
            "validation_completeness": round(self.validation_completeness, 2),
            "test_coverage": self.test_coverage,
            "evidence_quality": self.evidence_quality.value,
            "assumption_risks": list(self.assumption_risks),
            "untestable_scenarios": list(self.untestable_scenarios),
            "confidence_factors": [f.to_dict() for f in self.confidence_factors],
        }


UNTESTABLE_SCENARIOS = [
    "Behaviour on physical devices in the field",
    "Real network conditions and radio interference",
    "Real-world user adoption patterns",
]


class ConfidenceAssessor:
    """Rates confidence from phase completeness and evidence density."""

    def __init__(self, config: VerdictConfig = None):
        self.config = config or VerdictConfig()

    def completeness(self, run: ValidationRun) -> float:
        """Percentage of the expected phases that were executed."""
        executed = min(run.executed_phases, self.config.total_phases)
        return executed / self.config.total_phases * 100.0

    def evidence_quality(self, findings: List[Finding]) -> EvidenceQuality:
        """Rate the share of findings that carry evidence.

        A run without findings has nothing unsupported and rates HIGH.
        """
        if not findings:
            return EvidenceQuality.HIGH

        ratio = len([f for f in findings if f.has_evidence]) / len(findings)
        if ratio >= 0.8:
            return EvidenceQuality.HIGH
        if ratio >= 0.5:
            return EvidenceQuality.MEDIUM
        return EvidenceQuality.LOW

    def assess(
        self,
        run: ValidationRun,
        findings: Optional[List[Finding]] = None,
    ) -> ConfidenceLevelAssessment:
        """Build the confidence assessment.

        Args:
            run: Validation run (for phase completeness)
            findings: Findings rated for evidence density (default: the phase
                results of the run, leaving out critical issues)

        Returns:
            ConfidenceLevelAssessment
        """
        completeness = self.completeness(run)
        coverage = self.config.test_coverage_estimate
        quality = self.evidence_quality(run.phase_results if findings is None else findings)
        score = (completeness + coverage + quality.score) / 3

        if score >= 80:
            level = ConfidenceLevel.HIGH
        elif score >= 60:
            level = ConfidenceLevel.MEDIUM
        else:
            level = ConfidenceLevel.LOW

        return ConfidenceLevelAssessment(
            overall_confidence=level,
            overall_score=score,
            validation_completeness=completeness,
            test_coverage=coverage,
            evidence_quality=quality,
            assumption_risks=self._assumption_risks(run),
            untestable_scenarios=list(UNTESTABLE_SCENARIOS),
            confidence_factors=self._confidence_factors(run, quality),
        )

    def _missing_phases(self, run: ValidationRun) -> List[str]:
        return [PHASE_NAMES[p] for p in ALL_PHASES if run.phase(p) is None]

    def _failed_phases(self, run: ValidationRun) -> List[str]:
        return [
            PHASE_NAMES[p] for p in ALL_PHASES
            if run.phase(p) is not None and run.phases[p].status == FindingStatus.FAIL
        ]

    def _assumption_risks(self, run: ValidationRun) -> List[str]:
        risks = [
            f"{name} phase not executed; its area is assumed healthy"
            for name in self._missing_phases(run)
        ]
        risks.append(f"Test coverage estimated at {self.config.test_coverage_estimate:g}%")
        return risks

    def _confidence_factors(
        self,
        run: ValidationRun,
        quality: EvidenceQuality,
    ) -> List[ConfidenceFactor]:
        factors = []
        missing = self._missing_phases(run)
        if not missing:
            factors.append(ConfidenceFactor(
                factor="All analysis phases executed",
                impact="POSITIVE",
                weight="HIGH",
                description="Every component area was analyzed",
            ))
        else:
            factors.append(ConfidenceFactor(
                factor=f"{len(missing)} analysis phases missing",
                impact="NEGATIVE",
                weight="HIGH",
                description=f"Not analyzed: {', '.join(missing)}",
            ))

        failed = self._failed_phases(run)
        if failed:
            factors.append(ConfidenceFactor(
                factor=f"{len(failed)} phases failed",
                impact="NEGATIVE",
                weight="MEDIUM",
                description=f"Failed: {', '.join(failed)}",
            ))

        factors.append(ConfidenceFactor(
            factor=f"{quality.value.title()} evidence quality",
            impact="NEGATIVE" if quality == EvidenceQuality.LOW else "POSITIVE",
            weight="MEDIUM",
            description="Share of findings backed by code references, metrics or test results",
        ))
        return factors
