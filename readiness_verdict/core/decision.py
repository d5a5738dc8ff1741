"""Decision Synthesizer Module - Ordered rules that produce the Go/No-Go recommendation."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Tuple

from .capacity import CapacityRating
from .confidence import ConfidenceLevel
from .risk import DeploymentRisk


class Recommendation(Enum):
    GO = "GO"
    CONDITIONAL_GO = "CONDITIONAL_GO"
    NO_GO = "NO_GO"
    MAJOR_REDESIGN_REQUIRED = "MAJOR_REDESIGN_REQUIRED"

    @property
    def color(self) -> str:
        colors = {
            Recommendation.GO: "green",
            Recommendation.CONDITIONAL_GO: "yellow",
            Recommendation.NO_GO: "red",
            Recommendation.MAJOR_REDESIGN_REQUIRED: "bold red",
        }
        return colors[self]

    @property
    def blocks_deployment(self) -> bool:
        return self in (Recommendation.NO_GO, Recommendation.MAJOR_REDESIGN_REQUIRED)


@dataclass(frozen=True)
class DecisionInputs:
    """Everything the decision rules look at."""
    deployment_blocker_count: int
    health_score: float
    overall_risk: DeploymentRisk
    confidence: ConfidenceLevel
    capacity_rating: CapacityRating


@dataclass(frozen=True)
class DecisionRule:
    """A guard and the recommendation it yields when the guard holds."""
    name: str
    guard: Callable[[DecisionInputs], bool]
    outcome: Recommendation


# Evaluated top-down, first matching rule wins
DECISION_RULES: Tuple[DecisionRule, ...] = (
    DecisionRule(
        "deployment_blockers",
        lambda i: i.deployment_blocker_count > 0,
        Recommendation.NO_GO,
    ),
    DecisionRule(
        "health_below_redesign_threshold",
        lambda i: i.health_score < 30,
        Recommendation.MAJOR_REDESIGN_REQUIRED,
    ),
    DecisionRule(
        "critical_risk",
        lambda i: i.overall_risk == DeploymentRisk.CRITICAL,
        Recommendation.NO_GO,
    ),
    DecisionRule(
        "insufficient_capacity",
        lambda i: i.capacity_rating == CapacityRating.INSUFFICIENT,
        Recommendation.NO_GO,
    ),
    DecisionRule(
        "conditions_outstanding",
        lambda i: (
            i.health_score < 70
            or i.overall_risk == DeploymentRisk.HIGH
            or i.confidence == ConfidenceLevel.LOW
            or i.capacity_rating == CapacityRating.LIMITED_CAPACITY
        ),
        Recommendation.CONDITIONAL_GO,
    ),
    DecisionRule(
        "ready",
        lambda i: True,
        Recommendation.GO,
    ),
)


@dataclass
class GoNoGoRecommendationResult:
    """Final recommendation with its supporting guidance."""
    recommendation: Recommendation
    justification: str
    decided_by: str
    conditions: List[str] = field(default_factory=list)
    timeline: str = ""
    next_steps: List[str] = field(default_factory=list)
    rollback_plan: List[str] = field(default_factory=list)
    monitoring_requirements: List[str] = field(default_factory=list)
    success_criteria: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recommendation": self.recommendation.value,
            "justification": self.justification,
            "decided_by": self.decided_by,
            "conditions": list(self.conditions),
            "timeline": self.timeline,
            "next_steps": list(self.next_steps),
            "rollback_plan": list(self.rollback_plan),
            "monitoring_requirements": list(self.monitoring_requirements),
            "success_criteria": list(self.success_criteria),
        }


ROLLBACK_PLAN = [
    "Monitor system health metrics post-deployment",
    "Prepare immediate rollback procedures",
    "Define rollback trigger conditions",
    "Maintain previous version availability",
]

MONITORING_REQUIREMENTS = [
    "Session creation success rate",
    "Data submission accuracy",
    "System response times",
    "Error rates and types",
    "User experience metrics",
]

TIMELINES: Dict[Recommendation, str] = {
    Recommendation.GO: "Immediate deployment possible",
    Recommendation.CONDITIONAL_GO: "1-2 weeks to address {blockers} critical issues",
    Recommendation.NO_GO: "4-6 weeks minimum to resolve blocking issues",
    Recommendation.MAJOR_REDESIGN_REQUIRED: "2-3 months for major redesign and re-validation",
}

JUSTIFICATIONS: Dict[Recommendation, str] = {
    Recommendation.GO: (
        "System health score of {health:g}% with {blockers} deployment blockers "
        "and {risk} risk level supports immediate deployment."
    ),
    Recommendation.CONDITIONAL_GO: (
        "System shows promise but requires addressing {blockers} critical issues "
        "before deployment. Risk level: {risk}."
    ),
    Recommendation.NO_GO: (
        "{blockers} deployment blockers and {risk} risk level prevent safe deployment."
    ),
    Recommendation.MAJOR_REDESIGN_REQUIRED: (
        "System health score of {health:g}% indicates fundamental issues requiring major redesign."
    ),
}


class DecisionSynthesizer:
    """Applies the decision rules and fills in the recommendation templates."""

    def __init__(self, rules: Tuple[DecisionRule, ...] = DECISION_RULES):
        self.rules = rules

    def decide(self, inputs: DecisionInputs) -> Tuple[Recommendation, str]:
        """Pick the recommendation of the first rule whose guard holds.

        Args:
            inputs: Blocker count and the four assessment ratings

        Returns:
            Tuple of (recommendation, name of the deciding rule)
        """
        for rule in self.rules:
            if rule.guard(inputs):
                return rule.outcome, rule.name
        return Recommendation.GO, "ready"

    def synthesize(
        self,
        inputs: DecisionInputs,
        target_capacity: int,
    ) -> GoNoGoRecommendationResult:
        """Decide and build the full recommendation.

        Args:
            inputs: Blocker count and the four assessment ratings
            target_capacity: Concurrent users the release must support

        Returns:
            GoNoGoRecommendationResult
        """
        recommendation, rule_name = self.decide(inputs)
        values = {
            "health": inputs.health_score,
            "blockers": inputs.deployment_blocker_count,
            "risk": inputs.overall_risk.value,
        }

        return GoNoGoRecommendationResult(
            recommendation=recommendation,
            justification=JUSTIFICATIONS[recommendation].format(**values),
            decided_by=rule_name,
            conditions=self._conditions(recommendation, inputs),
            timeline=TIMELINES[recommendation].format(**values),
            next_steps=self._next_steps(recommendation),
            rollback_plan=list(ROLLBACK_PLAN),
            monitoring_requirements=list(MONITORING_REQUIREMENTS),
            success_criteria=[
                f"Support {target_capacity} concurrent users",
                "Maintain 99% uptime",
                "Average response time under 2 seconds",
                "Error rate below 1%",
                "User satisfaction above 85%",
            ],
        )

    def _conditions(self, recommendation: Recommendation, inputs: DecisionInputs) -> List[str]:
        if recommendation != Recommendation.CONDITIONAL_GO:
            return []

        conditions = []
        if inputs.health_score < 70:
            conditions.append(f"Raise system health score from {inputs.health_score:g} to at least 70")
        if inputs.overall_risk == DeploymentRisk.HIGH:
            conditions.append("Mitigate high deployment risk")
        if inputs.confidence == ConfidenceLevel.LOW:
            conditions.append("Complete missing validation phases to raise confidence")
        if inputs.capacity_rating == CapacityRating.LIMITED_CAPACITY:
            conditions.append("Implement performance optimizations to reach target capacity")
        conditions.append("Complete configuration requirements")
        return conditions

    def _next_steps(self, recommendation: Recommendation) -> List[str]:
        if recommendation == Recommendation.GO:
            return [
                "Proceed with deployment preparation",
                "Set up production monitoring",
                "Prepare rollback procedures",
            ]
        return [
            "Prioritize critical issue resolution",
            "Assign development resources",
            "Schedule re-validation after fixes",
        ]
