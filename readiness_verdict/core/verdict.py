"""Verdict Engine Module - Runs the full production-readiness pipeline."""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .aggregator import IssueAggregator, IssueCategorizationResult
from .capacity import CapacityAssessor, ConcurrentUserAssessment
from .classifier import ClassifiedIssue, IssueClassifier
from .confidence import ConfidenceAssessor, ConfidenceLevelAssessment
from .config import VerdictConfig
from .decision import DecisionInputs, DecisionSynthesizer, GoNoGoRecommendationResult, Recommendation
from .finding import FindingCategory, ValidationRun
from .normalizer import FindingNormalizer
from .risk import RiskAssessment, RiskAssessor
from .scorer import HealthScorer, SystemHealthAssessment

logger = logging.getLogger(__name__)

# Days of work per issue at each priority
FIX_DAYS_CRITICAL = 2.0
FIX_DAYS_HIGH = 1.0
FIX_DAYS_MEDIUM = 0.5


def format_fix_time(days: float) -> str:
    """Render a number of working days as a short duration."""
    if days < 1:
        return "<1 day"
    if days < 7:
        whole_days = math.ceil(days)
        return "1 day" if whole_days == 1 else f"{whole_days} days"
    weeks = math.ceil(days / 7)
    return "1 week" if weeks == 1 else f"{weeks} weeks"


def estimate_fix_days(categorization: IssueCategorizationResult) -> float:
    return (
        len(categorization.critical_issues) * FIX_DAYS_CRITICAL
        + len(categorization.high_priority_issues) * FIX_DAYS_HIGH
        + len(categorization.medium_priority_issues) * FIX_DAYS_MEDIUM
    )


@dataclass
class CriticalGapAnalysis:
    """Blocking issues and what can wait until after release."""
    deployment_blocking_issues: List[ClassifiedIssue] = field(default_factory=list)
    security_vulnerabilities: List[ClassifiedIssue] = field(default_factory=list)
    performance_limitations: List[ClassifiedIssue] = field(default_factory=list)
    configuration_gaps: List[ClassifiedIssue] = field(default_factory=list)
    must_fix_before_deployment: List[ClassifiedIssue] = field(default_factory=list)
    can_fix_after_deployment: List[ClassifiedIssue] = field(default_factory=list)

    @property
    def total_blockers(self) -> int:
        return len(self.deployment_blocking_issues)

    @classmethod
    def from_categorization(cls, categorization: IssueCategorizationResult) -> "CriticalGapAnalysis":
        blockers = list(categorization.deployment_blockers)
        return cls(
            deployment_blocking_issues=blockers,
            security_vulnerabilities=list(categorization.security_vulnerabilities),
            performance_limitations=list(categorization.performance_bottlenecks),
            configuration_gaps=list(categorization.issues_by_category.get(FindingCategory.CONFIG, [])),
            must_fix_before_deployment=blockers,
            can_fix_after_deployment=[i for i in categorization.all_issues if not i.deployment_blocker],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_blockers": self.total_blockers,
            "deployment_blocking_issues": [i.id for i in self.deployment_blocking_issues],
            "security_vulnerabilities": [i.id for i in self.security_vulnerabilities],
            "performance_limitations": [i.id for i in self.performance_limitations],
            "configuration_gaps": [i.id for i in self.configuration_gaps],
            "must_fix_before_deployment": [i.id for i in self.must_fix_before_deployment],
            "can_fix_after_deployment": [i.id for i in self.can_fix_after_deployment],
        }


@dataclass
class ProductionReadinessVerdictResult:
    """Everything a report needs to present the verdict."""
    system_health_assessment: SystemHealthAssessment
    concurrent_user_assessment: ConcurrentUserAssessment
    critical_gap_analysis: CriticalGapAnalysis
    risk_assessment: RiskAssessment
    confidence_level_assessment: ConfidenceLevelAssessment
    go_no_go_recommendation: GoNoGoRecommendationResult
    categorization: IssueCategorizationResult
    total_issues_analyzed: int
    critical_issues_count: int
    deployment_blockers_count: int
    estimated_fix_time: str
    recommended_deployment_date: str

    @property
    def recommendation(self) -> Recommendation:
        return self.go_no_go_recommendation.recommendation

    def to_dict(self) -> Dict[str, Any]:
        return {
            "system_health_assessment": self.system_health_assessment.to_dict(),
            "concurrent_user_assessment": self.concurrent_user_assessment.to_dict(),
            "critical_gap_analysis": self.critical_gap_analysis.to_dict(),
            "risk_assessment": self.risk_assessment.to_dict(),
            "confidence_level_assessment": self.confidence_level_assessment.to_dict(),
            "go_no_go_recommendation": self.go_no_go_recommendation.to_dict(),
            "categorization": self.categorization.to_dict(),
            "total_issues_analyzed": self.total_issues_analyzed,
            "critical_issues_count": self.critical_issues_count,
            "deployment_blockers_count": self.deployment_blockers_count,
            "estimated_fix_time": self.estimated_fix_time,
            "recommended_deployment_date": self.recommended_deployment_date,
        }


class ProductionReadinessVerdictEngine:
    """Turns a validation run into a production-readiness verdict.

    Normalizes findings, classifies them, aggregates the classified issues,
    rates health, risk, confidence and capacity, and then applies the
    decision rules. The engine holds no state between runs.
    """

    def __init__(self, config: VerdictConfig = None):
        self.config = config or VerdictConfig()
        self.normalizer = FindingNormalizer()
        self.classifier = IssueClassifier()
        self.aggregator = IssueAggregator()
        self.health_scorer = HealthScorer()
        self.risk_assessor = RiskAssessor()
        self.confidence_assessor = ConfidenceAssessor(self.config)
        self.capacity_assessor = CapacityAssessor(self.config)
        self.decision_synthesizer = DecisionSynthesizer()

    def categorize(self, run: ValidationRun) -> IssueCategorizationResult:
        """Normalize, classify and aggregate the findings of a run."""
        findings = self.normalizer.normalize(run)
        issues = self.classifier.classify_all(findings)
        return self.aggregator.aggregate(issues)

    def evaluate(self, run: ValidationRun) -> ProductionReadinessVerdictResult:
        """Run the full pipeline.

        Args:
            run: Phase results and run-level critical issues

        Returns:
            ProductionReadinessVerdictResult
        """
        findings = self.normalizer.normalize(run)
        logger.info(
            "Evaluating %d findings from %d phases", len(findings), run.executed_phases
        )

        issues = self.classifier.classify_all(findings)
        categorization = self.aggregator.aggregate(issues)
        logger.debug(
            "Categorized issues: %d critical, %d blockers",
            len(categorization.critical_issues),
            len(categorization.deployment_blockers),
        )

        health = self.health_scorer.assess(categorization, run)
        risk = self.risk_assessor.assess(categorization)
        confidence = self.confidence_assessor.assess(run)
        capacity = self.capacity_assessor.assess(run, categorization)
        gaps = CriticalGapAnalysis.from_categorization(categorization)

        inputs = DecisionInputs(
            deployment_blocker_count=gaps.total_blockers,
            health_score=health.health_score,
            overall_risk=risk.overall_risk,
            confidence=confidence.overall_confidence,
            capacity_rating=capacity.capacity_rating,
        )
        recommendation = self.decision_synthesizer.synthesize(
            inputs, self.config.target_concurrent_users
        )
        logger.info(
            "Recommendation %s (rule: %s)",
            recommendation.recommendation.value,
            recommendation.decided_by,
        )

        fix_time = format_fix_time(estimate_fix_days(categorization))
        return ProductionReadinessVerdictResult(
            system_health_assessment=health,
            concurrent_user_assessment=capacity,
            critical_gap_analysis=gaps,
            risk_assessment=risk,
            confidence_level_assessment=confidence,
            go_no_go_recommendation=recommendation,
            categorization=categorization,
            total_issues_analyzed=categorization.total_issues,
            critical_issues_count=len(categorization.critical_issues),
            deployment_blockers_count=gaps.total_blockers,
            estimated_fix_time=fix_time,
            recommended_deployment_date=self._deployment_date(
                recommendation.recommendation, fix_time
            ),
        )

    def _deployment_date(self, recommendation: Recommendation, fix_time: str) -> str:
        if recommendation == Recommendation.GO:
            return "Immediate deployment recommended"
        if recommendation == Recommendation.CONDITIONAL_GO:
            return f"After addressing conditions (estimated: {fix_time})"
        if recommendation == Recommendation.NO_GO:
            return "Deployment not recommended until critical issues resolved"
        return "Major redesign required - deployment timeline TBD"
