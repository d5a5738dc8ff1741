"""Risk Assessor Module - Rates deployment risk across independent dimensions."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from .aggregator import IssueCategorizationResult
from .classifier import ClassifiedIssue, Frequency, ImpactLevel, RiskLevel


class DeploymentRisk(Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


# Dimension constants
DIMENSION_SECURITY = "SECURITY"
DIMENSION_PERFORMANCE = "PERFORMANCE"
DIMENSION_RELIABILITY = "RELIABILITY"
DIMENSION_USER_EXPERIENCE = "USER_EXPERIENCE"

ALL_DIMENSIONS = [
    DIMENSION_SECURITY,
    DIMENSION_PERFORMANCE,
    DIMENSION_RELIABILITY,
    DIMENSION_USER_EXPERIENCE,
]


@dataclass
class RiskFactor:
    """A single issue that drives deployment risk."""
    dimension: str
    description: str
    probability: str
    impact: str
    risk_level: DeploymentRisk
    evidence: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dimension": self.dimension,
            "description": self.description,
            "probability": self.probability,
            "impact": self.impact,
            "risk_level": self.risk_level.value,
            "evidence": list(self.evidence),
        }


@dataclass
class MitigationStrategy:
    """How to reduce the risk of one dimension."""
    dimension: str
    strategy: str
    implementation: List[str] = field(default_factory=list)
    timeframe: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dimension": self.dimension,
            "strategy": self.strategy,
            "implementation": list(self.implementation),
            "timeframe": self.timeframe,
        }


@dataclass
class RiskAssessment:
    """Per-dimension and combined deployment risk."""
    overall_risk: DeploymentRisk
    security_risk: DeploymentRisk
    performance_risk: DeploymentRisk
    reliability_risk: DeploymentRisk
    user_experience_risk: DeploymentRisk
    risk_factors: List[RiskFactor] = field(default_factory=list)
    mitigation_strategies: List[MitigationStrategy] = field(default_factory=list)

    @property
    def dimension_risks(self) -> Dict[str, DeploymentRisk]:
        return {
            DIMENSION_SECURITY: self.security_risk,
            DIMENSION_PERFORMANCE: self.performance_risk,
            DIMENSION_RELIABILITY: self.reliability_risk,
            DIMENSION_USER_EXPERIENCE: self.user_experience_risk,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall_risk": self.overall_risk.value,
            "security_risk": self.security_risk.value,
            "performance_risk": self.performance_risk.value,
            "reliability_risk": self.reliability_risk.value,
            "user_experience_risk": self.user_experience_risk.value,
            "risk_factors": [f.to_dict() for f in self.risk_factors],
            "mitigation_strategies": [m.to_dict() for m in self.mitigation_strategies],
        }


MITIGATIONS: Dict[str, MitigationStrategy] = {
    DIMENSION_SECURITY: MitigationStrategy(
        dimension=DIMENSION_SECURITY,
        strategy="Run a focused security review before release",
        implementation=[
            "Review all security vulnerabilities",
            "Implement fixes",
            "Conduct security testing",
        ],
        timeframe="1-2 weeks",
    ),
    DIMENSION_PERFORMANCE: MitigationStrategy(
        dimension=DIMENSION_PERFORMANCE,
        strategy="Remove bottlenecks and load test at target concurrency",
        implementation=[
            "Profile the slowest code paths",
            "Add connection pooling and rate limiting",
            "Repeat the load simulation",
        ],
        timeframe="1-2 weeks",
    ),
    DIMENSION_RELIABILITY: MitigationStrategy(
        dimension=DIMENSION_RELIABILITY,
        strategy="Harden failure handling in the affected components",
        implementation=[
            "Fix crash and deadlock sources",
            "Add retry and fallback paths",
            "Add health monitoring",
        ],
        timeframe="1-3 weeks",
    ),
    DIMENSION_USER_EXPERIENCE: MitigationStrategy(
        dimension=DIMENSION_USER_EXPERIENCE,
        strategy="Stage the rollout to a limited audience first",
        implementation=[
            "Release to a pilot group",
            "Collect feedback and error reports",
            "Widen the rollout once stable",
        ],
        timeframe="1 week",
    ),
}


class RiskAssessor:
    """Converts categorized issue counts into deployment risk ratings."""

    def assess(self, categorization: IssueCategorizationResult) -> RiskAssessment:
        """Rate every risk dimension and combine them.

        Args:
            categorization: Aggregated issue views

        Returns:
            RiskAssessment
        """
        security = self.assess_security(categorization)
        performance = self.assess_performance(categorization)
        reliability = self.assess_reliability(categorization)
        user_experience = self.assess_user_experience(categorization)
        overall = self.combine([security, performance, reliability, user_experience])

        assessment = RiskAssessment(
            overall_risk=overall,
            security_risk=security,
            performance_risk=performance,
            reliability_risk=reliability,
            user_experience_risk=user_experience,
            risk_factors=[self._risk_factor(i) for i in categorization.critical_issues],
        )
        assessment.mitigation_strategies = [
            MITIGATIONS[dimension]
            for dimension, risk in assessment.dimension_risks.items()
            if risk != DeploymentRisk.LOW
        ]
        return assessment

    def assess_security(self, categorization: IssueCategorizationResult) -> DeploymentRisk:
        vulnerabilities = categorization.security_vulnerabilities
        critical = len([i for i in vulnerabilities if i.security_risk == RiskLevel.CRITICAL])
        high = len([i for i in vulnerabilities if i.security_risk == RiskLevel.HIGH])

        if critical > 0:
            return DeploymentRisk.CRITICAL
        if high > 2:
            return DeploymentRisk.HIGH
        if high > 0:
            return DeploymentRisk.MEDIUM
        return DeploymentRisk.LOW

    def assess_performance(self, categorization: IssueCategorizationResult) -> DeploymentRisk:
        bottlenecks = categorization.performance_bottlenecks
        severe = len([i for i in bottlenecks if i.performance_impact == ImpactLevel.SEVERE])
        moderate = len([i for i in bottlenecks if i.performance_impact == ImpactLevel.MODERATE])

        if severe > 0:
            return DeploymentRisk.HIGH
        if moderate > 2:
            return DeploymentRisk.MEDIUM
        return DeploymentRisk.LOW

    def assess_reliability(self, categorization: IssueCategorizationResult) -> DeploymentRisk:
        critical = len([
            i for i in categorization.critical_issues
            if i.system_reliability_impact == RiskLevel.CRITICAL
        ])
        high = len([
            i for i in categorization.high_priority_issues
            if i.system_reliability_impact == RiskLevel.HIGH
        ])

        if critical > 0:
            return DeploymentRisk.CRITICAL
        if high > 1:
            return DeploymentRisk.HIGH
        if high > 0:
            return DeploymentRisk.MEDIUM
        return DeploymentRisk.LOW

    def assess_user_experience(self, categorization: IssueCategorizationResult) -> DeploymentRisk:
        severe = len([
            i for i in categorization.critical_issues
            if i.user_experience_impact == ImpactLevel.SEVERE
        ])
        moderate = len([
            i for i in categorization.high_priority_issues
            if i.user_experience_impact == ImpactLevel.MODERATE
        ])

        if severe > 0:
            return DeploymentRisk.HIGH
        if moderate > 2:
            return DeploymentRisk.MEDIUM
        return DeploymentRisk.LOW

    def combine(self, risks: List[DeploymentRisk]) -> DeploymentRisk:
        """Combine dimension ratings into the overall rating."""
        if DeploymentRisk.CRITICAL in risks:
            return DeploymentRisk.CRITICAL
        if DeploymentRisk.HIGH in risks:
            return DeploymentRisk.HIGH
        if risks.count(DeploymentRisk.MEDIUM) >= 2:
            return DeploymentRisk.HIGH
        if DeploymentRisk.MEDIUM in risks:
            return DeploymentRisk.MEDIUM
        return DeploymentRisk.LOW

    def _risk_factor(self, issue: ClassifiedIssue) -> RiskFactor:
        if issue.security_risk in (RiskLevel.CRITICAL, RiskLevel.HIGH):
            dimension = DIMENSION_SECURITY
        elif issue.system_reliability_impact in (RiskLevel.CRITICAL, RiskLevel.HIGH):
            dimension = DIMENSION_RELIABILITY
        elif issue.performance_impact in (ImpactLevel.SEVERE, ImpactLevel.MODERATE):
            dimension = DIMENSION_PERFORMANCE
        elif issue.user_experience_impact != ImpactLevel.NONE:
            dimension = DIMENSION_USER_EXPERIENCE
        else:
            # Critical issues with no specific signal still threaten reliability
            dimension = DIMENSION_RELIABILITY

        return RiskFactor(
            dimension=dimension,
            description=issue.message,
            probability="HIGH" if issue.frequency_of_occurrence in (Frequency.ALWAYS, Frequency.FREQUENT) else "MEDIUM",
            impact="SEVERE" if issue.deployment_blocker else "MODERATE",
            risk_level=DeploymentRisk.CRITICAL if issue.deployment_blocker else DeploymentRisk.HIGH,
            evidence=[issue.finding.details_text] if issue.finding.details_text else [],
        )
