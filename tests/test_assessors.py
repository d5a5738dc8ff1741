"""Tests for the health, risk, confidence and capacity assessors."""

import pytest

from readiness_verdict.core.aggregator import IssueAggregator
from readiness_verdict.core.capacity import (
    SOURCE_BASELINE,
    SOURCE_FINDING_TEXT,
    SOURCE_STRUCTURED,
    CapacityAssessor,
    CapacityRating,
)
from readiness_verdict.core.classifier import IssueClassifier
from readiness_verdict.core.confidence import ConfidenceAssessor, ConfidenceLevel, EvidenceQuality
from readiness_verdict.core.config import VerdictConfig
from readiness_verdict.core.finding import (
    ALL_PHASES,
    Evidence,
    Finding,
    FindingCategory,
    FindingStatus,
    PhaseResult,
    Severity,
    ValidationRun,
)
from readiness_verdict.core.risk import DeploymentRisk, RiskAssessor
from readiness_verdict.core.scorer import HealthRating, HealthScorer


def make_finding(
    message,
    severity=Severity.LOW,
    category=FindingCategory.NATIVE,
    id="F-001",
    details=None,
    evidence=None,
):
    return Finding(
        id=id,
        name=id,
        status=FindingStatus.FAIL,
        severity=severity,
        category=category,
        message=message,
        details=details,
        evidence=evidence or [],
    )


def categorize(findings):
    return IssueAggregator().aggregate(IssueClassifier().classify_all(findings))


def passing_run():
    return ValidationRun(phases={
        phase_id: PhaseResult(phase_name=phase_id, status=FindingStatus.PASS)
        for phase_id in ALL_PHASES
    })


class TestHealthScorer:
    """Tests for HealthScorer class."""

    def test_clean_run_clamped_to_100(self):
        """Test that phase bonuses never push the score above 100."""
        assessment = HealthScorer().assess(categorize([]), passing_run())

        assert assessment.health_score == 100.0
        assert assessment.overall_rating == HealthRating.EXCELLENT
        assert len(assessment.strengths) == 5

    def test_sql_injection_penalties(self):
        """Test critical, blocker and security penalties stacking."""
        finding = make_finding(
            "SQL injection risk in add_attendance_secure",
            severity=Severity.CRITICAL,
            category=FindingCategory.SECURITY,
        )
        assessment = HealthScorer().assess(categorize([finding]))

        assert assessment.health_score == 25.0
        assert assessment.overall_rating == HealthRating.CRITICAL
        assert assessment.critical_gaps == ["SQL injection risk in add_attendance_secure"]

    def test_score_floor(self):
        """Test that adversarial input is clamped to 0."""
        findings = [
            make_finding("SQL injection in handler", severity=Severity.CRITICAL,
                         category=FindingCategory.SECURITY, id=f"F-{i}")
            for i in range(20)
        ]
        assert HealthScorer().assess(categorize(findings)).health_score == 0.0

    @pytest.mark.parametrize("score,rating", [
        (95, HealthRating.EXCELLENT),
        (90, HealthRating.EXCELLENT),
        (75, HealthRating.GOOD),
        (60, HealthRating.ACCEPTABLE),
        (30, HealthRating.POOR),
        (29.5, HealthRating.CRITICAL),
    ])
    def test_rating_thresholds(self, score, rating):
        assert HealthScorer().rate(score) == rating

    def test_component_health(self):
        """Test per-category health from phase results."""
        run = ValidationRun(phases={
            "security_audit": PhaseResult(
                phase_name="Security Audit",
                status=FindingStatus.FAIL,
                results=[make_finding("x", severity=Severity.CRITICAL)],
            ),
            "configuration_audit": PhaseResult(
                phase_name="Configuration Audit",
                status=FindingStatus.PASS,
            ),
        })
        assessment = HealthScorer().assess(categorize([]), run)

        assert assessment.component_health[FindingCategory.SECURITY] == HealthRating.CRITICAL
        assert assessment.component_health[FindingCategory.CONFIG] == HealthRating.EXCELLENT
        assert assessment.component_health[FindingCategory.DATABASE] == HealthRating.POOR


class TestRiskAssessor:
    """Tests for RiskAssessor class."""

    def test_no_issues_low(self):
        """Test that a clean run is LOW risk everywhere."""
        assessment = RiskAssessor().assess(categorize([]))

        assert assessment.overall_risk == DeploymentRisk.LOW
        assert assessment.mitigation_strategies == []

    def test_critical_security(self):
        """Test that a critical security vulnerability is CRITICAL risk."""
        assessment = RiskAssessor().assess(categorize([
            make_finding("SQL injection risk", severity=Severity.CRITICAL,
                         category=FindingCategory.SECURITY),
        ]))

        assert assessment.security_risk == DeploymentRisk.CRITICAL
        assert assessment.overall_risk == DeploymentRisk.CRITICAL
        assert assessment.risk_factors[0].dimension == "SECURITY"

    def test_security_high_threshold(self):
        """Test that more than two high security issues is HIGH."""
        findings = [
            make_finding("Information disclosure in logs", id=f"F-{i}")
            for i in range(3)
        ]
        assert RiskAssessor().assess_security(categorize(findings)) == DeploymentRisk.HIGH
        assert RiskAssessor().assess_security(categorize(findings[:1])) == DeploymentRisk.MEDIUM

    def test_performance_severe(self):
        assessment = RiskAssessor().assess(categorize([
            make_finding("Connection bottleneck", category=FindingCategory.PERFORMANCE),
        ]))
        assert assessment.performance_risk == DeploymentRisk.HIGH
        assert assessment.overall_risk == DeploymentRisk.HIGH

    def test_reliability_medium(self):
        """Test one high priority threading issue is MEDIUM reliability risk."""
        assessment = RiskAssessor().assess(categorize([
            make_finding("Threading hazard in worker", severity=Severity.HIGH),
        ]))
        assert assessment.reliability_risk == DeploymentRisk.MEDIUM
        assert assessment.overall_risk == DeploymentRisk.MEDIUM
        assert [m.dimension for m in assessment.mitigation_strategies] == ["RELIABILITY"]

    @pytest.mark.parametrize("risks,expected", [
        ([DeploymentRisk.LOW] * 4, DeploymentRisk.LOW),
        ([DeploymentRisk.MEDIUM] + [DeploymentRisk.LOW] * 3, DeploymentRisk.MEDIUM),
        ([DeploymentRisk.MEDIUM] * 2 + [DeploymentRisk.LOW] * 2, DeploymentRisk.HIGH),
        ([DeploymentRisk.HIGH] + [DeploymentRisk.LOW] * 3, DeploymentRisk.HIGH),
        ([DeploymentRisk.CRITICAL] + [DeploymentRisk.HIGH] * 3, DeploymentRisk.CRITICAL),
    ])
    def test_combine(self, risks, expected):
        assert RiskAssessor().combine(risks) == expected


class TestConfidenceAssessor:
    """Tests for ConfidenceAssessor class."""

    def test_all_phases_no_findings(self):
        """Test that a complete clean run has HIGH confidence."""
        assessment = ConfidenceAssessor().assess(passing_run(), [])

        assert assessment.validation_completeness == 100.0
        assert assessment.evidence_quality == EvidenceQuality.HIGH
        assert assessment.overall_confidence == ConfidenceLevel.HIGH

    def test_no_phases_low(self):
        """Test that a run with no phases has LOW confidence."""
        findings = [make_finding("x")]
        assessment = ConfidenceAssessor().assess(ValidationRun(), findings)

        assert assessment.validation_completeness == 0.0
        assert assessment.evidence_quality == EvidenceQuality.LOW
        assert assessment.overall_confidence == ConfidenceLevel.LOW
        assert len(assessment.assumption_risks) == 6

    @pytest.mark.parametrize("with_evidence,quality", [
        (8, EvidenceQuality.HIGH),
        (5, EvidenceQuality.MEDIUM),
        (4, EvidenceQuality.LOW),
    ])
    def test_evidence_thresholds(self, with_evidence, quality):
        evidence = [Evidence(type="METRIC", location="perf", details="p95")]
        findings = [
            make_finding("x", id=f"F-{i}", evidence=evidence if i < with_evidence else None)
            for i in range(10)
        ]
        assert ConfidenceAssessor().evidence_quality(findings) == quality

    def test_test_coverage_from_config(self):
        """Test that the coverage estimate feeds the mean."""
        config = VerdictConfig(test_coverage_estimate=30.0)
        assessment = ConfidenceAssessor(config).assess(passing_run(), [])

        # (100 + 30 + 90) / 3
        assert assessment.overall_score == pytest.approx(73.333, rel=1e-3)
        assert assessment.overall_confidence == ConfidenceLevel.MEDIUM

    def test_failed_phase_factor(self):
        run = passing_run()
        run.phases["security_audit"].status = FindingStatus.FAIL
        assessment = ConfidenceAssessor().assess(run, [])

        factors = [f.factor for f in assessment.confidence_factors]
        assert "1 phases failed" in factors


class TestCapacityAssessor:
    """Tests for CapacityAssessor class."""

    def _run_with(self, results=None, capacity_estimate=None):
        return ValidationRun(phases={
            "performance_analysis": PhaseResult(
                phase_name="Performance Analysis",
                status=FindingStatus.CONDITIONAL,
                results=results or [],
                capacity_estimate=capacity_estimate,
            ),
        })

    def test_baseline_when_phase_missing(self):
        assessment = CapacityAssessor().assess(ValidationRun())

        assert assessment.estimated_capacity == 120
        assert assessment.estimate_source == SOURCE_BASELINE
        assert assessment.capacity_rating == CapacityRating.LIMITED_CAPACITY

    def test_structured_estimate_preferred(self):
        """Test that a structured estimate beats free text."""
        run = self._run_with(
            results=[make_finding("Concurrent capacity around 90 users")],
            capacity_estimate=240,
        )
        assessment = CapacityAssessor().assess(run)

        assert assessment.estimated_capacity == 240
        assert assessment.estimate_source == SOURCE_STRUCTURED
        assert assessment.capacity_rating == CapacityRating.EXCEEDS_REQUIREMENTS

    def test_estimate_from_details_then_message(self):
        """Test that details are searched before the message."""
        run = self._run_with(results=[
            make_finding("Concurrent load of 300 users tested", details="Sustained 160 users"),
        ])
        assessment = CapacityAssessor().assess(run)

        assert assessment.estimated_capacity == 160
        assert assessment.estimate_source == SOURCE_FINDING_TEXT
        assert assessment.capacity_rating == CapacityRating.MEETS_REQUIREMENTS

    def test_message_must_mention_capacity(self):
        """Test that unrelated findings are ignored."""
        run = self._run_with(results=[make_finding("Checked 40 users of the admin panel")])
        assessment = CapacityAssessor().assess(run)

        assert assessment.estimate_source == SOURCE_BASELINE

    @pytest.mark.parametrize("estimate,rating", [
        (225, CapacityRating.EXCEEDS_REQUIREMENTS),
        (150, CapacityRating.MEETS_REQUIREMENTS),
        (106, CapacityRating.LIMITED_CAPACITY),
        (104, CapacityRating.INSUFFICIENT),
    ])
    def test_rating_thresholds(self, estimate, rating):
        assert CapacityAssessor().rate(estimate) == rating

    def test_recommendations_under_target(self):
        under = CapacityAssessor().assess(self._run_with(capacity_estimate=100))
        over = CapacityAssessor().assess(self._run_with(capacity_estimate=200))

        assert under.recommendations
        assert over.recommendations == []
