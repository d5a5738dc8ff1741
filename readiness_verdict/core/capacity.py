"""Capacity Assessor Module - Concurrent user capacity against the target."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .aggregator import IssueCategorizationResult
from .config import VerdictConfig
from .finding import PHASE_PERFORMANCE_ANALYSIS, FindingStatus, PhaseResult, ValidationRun

USER_COUNT_PATTERN = re.compile(r"(\d+)\s*users?", re.IGNORECASE)

SOURCE_STRUCTURED = "structured"
SOURCE_FINDING_TEXT = "finding_text"
SOURCE_BASELINE = "baseline"


class CapacityRating(Enum):
    EXCEEDS_REQUIREMENTS = "EXCEEDS_REQUIREMENTS"
    MEETS_REQUIREMENTS = "MEETS_REQUIREMENTS"
    LIMITED_CAPACITY = "LIMITED_CAPACITY"
    INSUFFICIENT = "INSUFFICIENT"


@dataclass
class ConcurrentUserAssessment:
    target_capacity: int
    estimated_capacity: int
    capacity_rating: CapacityRating
    estimate_source: str
    bottlenecks: List[str] = field(default_factory=list)
    scalability_limitations: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target_capacity": self.target_capacity,
            "estimated_capacity": self.estimated_capacity,
            "capacity_rating": self.capacity_rating.value,
            "estimate_source": self.estimate_source,
            "bottlenecks": list(self.bottlenecks),
            "scalability_limitations": list(self.scalability_limitations),
            "recommendations": list(self.recommendations),
        }


class CapacityAssessor:
    """Estimates concurrent user capacity and rates it against the target."""

    def __init__(self, config: VerdictConfig = None):
        self.config = config or VerdictConfig()

    def estimate(self, performance_phase: Optional[PhaseResult]) -> Tuple[int, str]:
        """Get the capacity estimate and where it came from.

        Args:
            performance_phase: Result of the performance analysis phase, if run

        Returns:
            Tuple of (estimated concurrent users, estimate source)
        """
        if performance_phase is None:
            return self.config.baseline_capacity, SOURCE_BASELINE

        if performance_phase.capacity_estimate is not None:
            return performance_phase.capacity_estimate, SOURCE_STRUCTURED

        for finding in performance_phase.results:
            message = finding.message.lower()
            if "concurrent" not in message and "capacity" not in message:
                continue
            for text in (finding.details_text, finding.message):
                match = USER_COUNT_PATTERN.search(text)
                if match:
                    return int(match.group(1)), SOURCE_FINDING_TEXT

        return self.config.baseline_capacity, SOURCE_BASELINE

    def rate(self, estimated_capacity: int) -> CapacityRating:
        """Rate an estimate against the configured target."""
        target = self.config.target_concurrent_users
        if estimated_capacity >= target * 1.5:
            return CapacityRating.EXCEEDS_REQUIREMENTS
        if estimated_capacity >= target:
            return CapacityRating.MEETS_REQUIREMENTS
        if estimated_capacity >= target * 0.7:
            return CapacityRating.LIMITED_CAPACITY
        return CapacityRating.INSUFFICIENT

    def assess(
        self,
        run: ValidationRun,
        categorization: Optional[IssueCategorizationResult] = None,
    ) -> ConcurrentUserAssessment:
        """Build the concurrent user assessment."""
        performance_phase = run.phase(PHASE_PERFORMANCE_ANALYSIS)
        estimated, source = self.estimate(performance_phase)

        bottlenecks = []
        if categorization is not None:
            bottlenecks = [issue.message for issue in categorization.performance_bottlenecks]

        limitations = []
        if performance_phase is not None:
            limitations = [
                finding.message for finding in performance_phase.results
                if finding.status == FindingStatus.FAIL
            ]

        return ConcurrentUserAssessment(
            target_capacity=self.config.target_concurrent_users,
            estimated_capacity=estimated,
            capacity_rating=self.rate(estimated),
            estimate_source=source,
            bottlenecks=bottlenecks,
            scalability_limitations=limitations,
            recommendations=self._recommendations(estimated),
        )

    def _recommendations(self, estimated_capacity: int) -> List[str]:
        if estimated_capacity >= self.config.target_concurrent_users:
            return []
        return [
            "Optimize database queries for better performance",
            "Implement connection pooling and rate limiting",
            "Consider horizontal scaling for the database",
        ]
