"""Health Scorer Module - Converts issue counts into a 0-100 health score."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .aggregator import IssueCategorizationResult
from .finding import (
    ALL_PHASES,
    PHASE_CONFIGURATION_AUDIT,
    PHASE_DATABASE_SIMULATION,
    PHASE_NAMES,
    PHASE_PERFORMANCE_ANALYSIS,
    PHASE_SECURITY_AUDIT,
    PHASE_STATIC_ANALYSIS,
    FindingCategory,
    FindingStatus,
    PhaseResult,
    Severity,
    ValidationRun,
)


class HealthRating(Enum):
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    ACCEPTABLE = "ACCEPTABLE"
    POOR = "POOR"
    CRITICAL = "CRITICAL"


# Phase whose results describe each category
CATEGORY_PHASES: Dict[FindingCategory, str] = {
    FindingCategory.NATIVE: PHASE_STATIC_ANALYSIS,
    FindingCategory.BRIDGE: PHASE_STATIC_ANALYSIS,
    FindingCategory.DATABASE: PHASE_DATABASE_SIMULATION,
    FindingCategory.SECURITY: PHASE_SECURITY_AUDIT,
    FindingCategory.PERFORMANCE: PHASE_PERFORMANCE_ANALYSIS,
    FindingCategory.CONFIG: PHASE_CONFIGURATION_AUDIT,
}


@dataclass
class SystemHealthAssessment:
    """Overall health of the audited application."""
    overall_rating: HealthRating
    health_score: float  # 0-100
    component_health: Dict[FindingCategory, HealthRating] = field(default_factory=dict)
    critical_gaps: List[str] = field(default_factory=list)
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    risk_factors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall_rating": self.overall_rating.value,
            "health_score": self.health_score,
            "component_health": {k.value: v.value for k, v in self.component_health.items()},
            "critical_gaps": list(self.critical_gaps),
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "risk_factors": list(self.risk_factors),
        }


class HealthScorer:
    """Calculates the system health score from categorized issues."""

    # Points deducted per issue in each view
    PENALTIES: Dict[str, float] = {
        "critical": 25.0,
        "high": 10.0,
        "medium": 5.0,
        "deployment_blocker": 30.0,
        "security_vulnerability": 20.0,
        "performance_bottleneck": 15.0,
    }

    # Points added per phase that passed
    PASSING_PHASE_BONUS = 5.0

    RATING_THRESHOLDS = [
        (90.0, HealthRating.EXCELLENT),
        (75.0, HealthRating.GOOD),
        (60.0, HealthRating.ACCEPTABLE),
        (30.0, HealthRating.POOR),
    ]

    def calculate_score(
        self,
        categorization: IssueCategorizationResult,
        passing_phases: int = 0,
    ) -> float:
        """Calculate the clamped health score.

        Args:
            categorization: Aggregated issue views
            passing_phases: Number of phases whose status is PASS

        Returns:
            Score between 0 and 100
        """
        penalty = (
            len(categorization.critical_issues) * self.PENALTIES["critical"]
            + len(categorization.high_priority_issues) * self.PENALTIES["high"]
            + len(categorization.medium_priority_issues) * self.PENALTIES["medium"]
            + len(categorization.deployment_blockers) * self.PENALTIES["deployment_blocker"]
            + len(categorization.security_vulnerabilities) * self.PENALTIES["security_vulnerability"]
            + len(categorization.performance_bottlenecks) * self.PENALTIES["performance_bottleneck"]
        )
        score = 100.0 - penalty + passing_phases * self.PASSING_PHASE_BONUS
        return max(0.0, min(100.0, score))

    def rate(self, score: float) -> HealthRating:
        """Get the rating for a health score."""
        for threshold, rating in self.RATING_THRESHOLDS:
            if score >= threshold:
                return rating
        return HealthRating.CRITICAL

    def assess(
        self,
        categorization: IssueCategorizationResult,
        run: Optional[ValidationRun] = None,
    ) -> SystemHealthAssessment:
        """Build the full health assessment.

        Args:
            categorization: Aggregated issue views
            run: Validation run supplying phase statuses (none means no phases)

        Returns:
            SystemHealthAssessment
        """
        run = run or ValidationRun()
        score = self.calculate_score(categorization, run.passing_phases)

        return SystemHealthAssessment(
            overall_rating=self.rate(score),
            health_score=score,
            component_health={
                category: self._phase_health(run.phase(phase_id))
                for category, phase_id in CATEGORY_PHASES.items()
            },
            critical_gaps=[issue.message for issue in categorization.deployment_blockers],
            strengths=self._strengths(run),
            weaknesses=self._weaknesses(categorization),
            risk_factors=[
                f"{issue.impact.value}: {issue.message}"
                for issue in categorization.deployment_blockers
            ],
        )

    def _phase_health(self, phase: Optional[PhaseResult]) -> HealthRating:
        if phase is None:
            return HealthRating.POOR

        critical_count = phase.count_by_severity(Severity.CRITICAL)
        high_count = phase.count_by_severity(Severity.HIGH)

        if critical_count > 0:
            return HealthRating.CRITICAL
        if high_count > 2:
            return HealthRating.POOR
        if high_count > 0:
            return HealthRating.ACCEPTABLE
        if phase.status == FindingStatus.PASS:
            return HealthRating.EXCELLENT
        return HealthRating.GOOD

    def _strengths(self, run: ValidationRun) -> List[str]:
        return [
            f"{PHASE_NAMES[phase_id]} phase passed"
            for phase_id in ALL_PHASES
            if run.phase(phase_id) is not None and run.phases[phase_id].status == FindingStatus.PASS
        ]

    def _weaknesses(self, categorization: IssueCategorizationResult) -> List[str]:
        weaknesses = []
        if categorization.critical_issues:
            weaknesses.append(f"{len(categorization.critical_issues)} critical issues identified")
        if categorization.security_vulnerabilities:
            weaknesses.append(
                f"{len(categorization.security_vulnerabilities)} security vulnerabilities found"
            )
        if categorization.performance_bottlenecks:
            weaknesses.append(
                f"{len(categorization.performance_bottlenecks)} performance bottlenecks found"
            )
        return weaknesses
