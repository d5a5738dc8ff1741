"""Core modules for the Readiness Verdict pipeline."""

from .aggregator import IssueAggregator, IssueCategorizationResult
from .capacity import CapacityAssessor, CapacityRating, ConcurrentUserAssessment
from .classifier import ClassifiedIssue, IssueClassifier, Priority
from .confidence import ConfidenceAssessor, ConfidenceLevel, ConfidenceLevelAssessment
from .config import ConfigError, VerdictConfig
from .decision import DecisionSynthesizer, GoNoGoRecommendationResult, Recommendation
from .finding import Finding, FindingCategory, FindingStatus, PhaseResult, Severity, ValidationRun
from .normalizer import FindingNormalizer
from .phase_executor import BaseAnalysisPhase, ExecutionResult, PhaseExecutor
from .risk import DeploymentRisk, RiskAssessment, RiskAssessor
from .scorer import HealthRating, HealthScorer, SystemHealthAssessment
from .verdict import ProductionReadinessVerdictEngine, ProductionReadinessVerdictResult

__all__ = [
    "IssueAggregator",
    "IssueCategorizationResult",
    "CapacityAssessor",
    "CapacityRating",
    "ConcurrentUserAssessment",
    "ClassifiedIssue",
    "IssueClassifier",
    "Priority",
    "ConfidenceAssessor",
    "ConfidenceLevel",
    "ConfidenceLevelAssessment",
    "ConfigError",
    "VerdictConfig",
    "DecisionSynthesizer",
    "GoNoGoRecommendationResult",
    "Recommendation",
    "Finding",
    "FindingCategory",
    "FindingStatus",
    "PhaseResult",
    "Severity",
    "ValidationRun",
    "FindingNormalizer",
    "BaseAnalysisPhase",
    "ExecutionResult",
    "PhaseExecutor",
    "DeploymentRisk",
    "RiskAssessment",
    "RiskAssessor",
    "HealthRating",
    "HealthScorer",
    "SystemHealthAssessment",
    "ProductionReadinessVerdictEngine",
    "ProductionReadinessVerdictResult",
]
