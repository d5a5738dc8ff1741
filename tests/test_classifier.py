"""Tests for the issue classifier."""

import pytest

from readiness_verdict.core.classifier import (
    EFFORT_RULES,
    PRIORITY_RULES,
    Frequency,
    Impact,
    ImpactLevel,
    IssueClassifier,
    Priority,
    RemediationEffort,
    RiskLevel,
    Rule,
    finding_content,
    first_match,
)
from readiness_verdict.core.finding import Finding, FindingCategory, FindingStatus, Severity


def make_finding(
    message,
    severity=Severity.LOW,
    category=FindingCategory.NATIVE,
    details=None,
    id="F-001",
):
    return Finding(
        id=id,
        name=id,
        status=FindingStatus.FAIL,
        severity=severity,
        category=category,
        message=message,
        details=details,
    )


class TestRuleTables:
    """Tests for rule evaluation."""

    def test_first_match_wins(self):
        """Test that the earlier rule decides when several match."""
        rules = (
            Rule("first", ("alpha",)),
            Rule("second", ("alpha", "beta")),
        )
        finding = make_finding("alpha beta")
        assert first_match(rules, finding, finding_content(finding), "default") == "first"

    def test_default_when_nothing_matches(self):
        """Test fall-through to the axis default."""
        finding = make_finding("nothing to see")
        assert first_match(PRIORITY_RULES, finding, finding_content(finding), Priority.LOW) == Priority.LOW

    def test_rule_matches_on_severity(self):
        """Test that a listed severity matches regardless of text."""
        rule = Rule(Priority.HIGH, severities=frozenset({Severity.HIGH}))
        finding = make_finding("quiet", severity=Severity.HIGH)
        assert rule.matches(finding, finding_content(finding))

    def test_rule_matches_on_predicate(self):
        """Test predicate-based matching."""
        finding = make_finding("anything", category=FindingCategory.BRIDGE)
        assert first_match(EFFORT_RULES, finding, finding_content(finding), None) == RemediationEffort.MEDIUM

    def test_content_concatenates_message_and_details(self):
        """Test that content is lowercase message plus details."""
        finding = make_finding("Crash On Start", details="Seen ALWAYS")
        assert finding_content(finding) == "crash on start seen always"


class TestPriority:
    """Tests for the priority axis."""

    @pytest.mark.parametrize("message", [
        "Nothing notable",
        "Button label typo",
        "Performance bottleneck in loader",
    ])
    def test_critical_severity_always_critical(self, message):
        """Test that CRITICAL severity yields CRITICAL priority whatever the text."""
        issue = IssueClassifier().classify(make_finding(message, severity=Severity.CRITICAL))
        assert issue.priority == Priority.CRITICAL

    def test_critical_term_escalates(self):
        """Test that critical terms raise low severity findings."""
        issue = IssueClassifier().classify(make_finding("Possible deadlock in scanner"))
        assert issue.priority == Priority.CRITICAL

    def test_high_term(self):
        """Test high priority terms."""
        issue = IssueClassifier().classify(make_finding("Race condition on session start"))
        assert issue.priority == Priority.HIGH

    def test_medium_term(self):
        """Test medium priority terms."""
        issue = IssueClassifier().classify(make_finding("Missing validation on form"))
        assert issue.priority == Priority.MEDIUM

    def test_default_low(self):
        """Test the LOW default."""
        issue = IssueClassifier().classify(make_finding("Unused constant"))
        assert issue.priority == Priority.LOW


class TestImpactAndEffort:
    """Tests for the impact and remediation effort axes."""

    def test_impact_order(self):
        """Test each impact rule in turn."""
        classifier = IssueClassifier()
        assert classifier.classify(make_finding("Production deployment risk")).impact == Impact.DEPLOYMENT_BLOCKER
        assert classifier.classify(make_finding("Query timeout")).impact == Impact.PERFORMANCE_DEGRADATION
        assert classifier.classify(make_finding("Confusing workflow")).impact == Impact.USER_EXPERIENCE
        assert classifier.classify(make_finding("Unused constant")).impact == Impact.CODE_QUALITY

    def test_extensive_effort(self):
        """Test that architecture work is EXTENSIVE."""
        issue = IssueClassifier().classify(make_finding("Needs refactor of the sync layer"))
        assert issue.remediation_effort == RemediationEffort.EXTENSIVE
        assert issue.estimated_fix_time == "1-2 weeks"

    def test_high_effort_security_critical(self):
        """Test that critical security findings are HIGH effort."""
        issue = IssueClassifier().classify(make_finding(
            "Token leak", severity=Severity.CRITICAL, category=FindingCategory.SECURITY,
        ))
        assert issue.remediation_effort == RemediationEffort.HIGH

    def test_high_effort_database_schema(self):
        """Test that database schema findings are HIGH effort."""
        issue = IssueClassifier().classify(make_finding(
            "Schema lacks index", category=FindingCategory.DATABASE,
        ))
        assert issue.remediation_effort == RemediationEffort.HIGH

    def test_medium_effort_config(self):
        """Test that config findings are MEDIUM effort."""
        issue = IssueClassifier().classify(make_finding("Key missing", category=FindingCategory.CONFIG))
        assert issue.remediation_effort == RemediationEffort.MEDIUM
        assert issue.estimated_fix_time == "1-2 days"

    def test_low_effort_default(self):
        """Test the LOW effort default."""
        issue = IssueClassifier().classify(make_finding("Unused constant"))
        assert issue.remediation_effort == RemediationEffort.LOW


class TestDeploymentBlocker:
    """Tests for the deployment blocker flag."""

    def test_critical_severity(self):
        issue = IssueClassifier().classify(make_finding("Anything", severity=Severity.CRITICAL))
        assert issue.deployment_blocker

    def test_explicit_blocker_text(self):
        issue = IssueClassifier().classify(make_finding("Marked as production blocker"))
        assert issue.deployment_blocker

    def test_high_security(self):
        """Test that HIGH security findings block deployment."""
        issue = IssueClassifier().classify(make_finding(
            "Weak token entropy", severity=Severity.HIGH, category=FindingCategory.SECURITY,
        ))
        assert issue.deployment_blocker

    def test_high_non_security(self):
        issue = IssueClassifier().classify(make_finding(
            "Weak token entropy", severity=Severity.HIGH, category=FindingCategory.NATIVE,
        ))
        assert not issue.deployment_blocker


class TestRiskDimensions:
    """Tests for the four risk dimensions and frequency."""

    def test_sql_injection(self):
        """Test classification of a critical SQL injection finding."""
        issue = IssueClassifier().classify(make_finding(
            "SQL injection risk in add_attendance_secure",
            severity=Severity.CRITICAL,
            category=FindingCategory.SECURITY,
        ))

        assert issue.priority == Priority.CRITICAL
        assert issue.security_risk == RiskLevel.CRITICAL
        assert issue.deployment_blocker
        assert issue.frequency_of_occurrence == Frequency.ALWAYS
        assert "Replace string concatenation with parameterized queries" in issue.remediation_steps

    def test_defaults(self):
        """Test that unmatched findings get the safest defaults."""
        issue = IssueClassifier().classify(make_finding("Unused constant"))

        assert issue.user_experience_impact == ImpactLevel.NONE
        assert issue.system_reliability_impact == RiskLevel.NONE
        assert issue.security_risk == RiskLevel.NONE
        assert issue.performance_impact == ImpactLevel.NONE
        assert issue.frequency_of_occurrence == Frequency.RARE

    def test_graded_levels(self):
        """Test intermediate levels of each dimension."""
        classifier = IssueClassifier()
        assert classifier.classify(make_finding("Slow startup")).user_experience_impact == ImpactLevel.MODERATE
        assert classifier.classify(make_finding("Threading hazard")).system_reliability_impact == RiskLevel.HIGH
        assert classifier.classify(make_finding("Access control gap")).security_risk == RiskLevel.HIGH
        assert classifier.classify(make_finding("Inefficient loop")).performance_impact == ImpactLevel.MODERATE
        assert classifier.classify(make_finding("Fails sometimes")).frequency_of_occurrence == Frequency.OCCASIONAL


class TestDetailsHandling:
    """Tests for optional details."""

    def test_missing_details_do_not_change_axes(self):
        """Test that details add nothing when the message already matches."""
        classifier = IssueClassifier()
        without = classifier.classify(make_finding("Race condition in session cache"))
        with_text = classifier.classify(make_finding(
            "Race condition in session cache", details="Seen under load testing",
        ))
        with_dict = classifier.classify(make_finding(
            "Race condition in session cache", details={"occurrences": 3},
        ))

        for issue in (with_text, with_dict):
            assert issue.priority == without.priority
            assert issue.impact == without.impact
            assert issue.remediation_effort == without.remediation_effort

    def test_details_can_match(self):
        """Test that terms in details are matched."""
        issue = IssueClassifier().classify(make_finding("Sync job", details="memory leak over time"))
        assert issue.priority == Priority.CRITICAL


class TestRemediationGuidance:
    """Tests for remediation steps, dependencies and risk text."""

    def test_category_steps(self):
        """Test category base steps and conditional steps."""
        issue = IssueClassifier().classify(make_finding(
            "Slow query under concurrent load", category=FindingCategory.PERFORMANCE,
        ))

        assert issue.remediation_steps[0] == "Profile the affected code path"
        assert "Optimize database queries and add appropriate indexes" in issue.remediation_steps
        assert "Implement proper connection pooling and rate limiting" in issue.remediation_steps
        assert issue.remediation_steps[-1] == (
            "Verify fix resolves the issue without introducing regressions"
        )

    def test_default_steps(self):
        """Test steps for categories without specific guidance."""
        issue = IssueClassifier().classify(make_finding("Odd value", category=FindingCategory.DATABASE))
        assert issue.remediation_steps[0] == "Analyze the specific issue in detail"

    def test_dependencies(self):
        issue = IssueClassifier().classify(make_finding("Configuration drift in native module"))
        assert issue.dependencies == [
            "Native module rebuild and testing",
            "Environment configuration update",
        ]

    def test_risk_if_unfixed(self):
        issue = IssueClassifier().classify(make_finding(
            "App crash on resume", severity=Severity.CRITICAL,
        ))
        assert issue.risk_if_unfixed == "System instability could cause complete service outage"

    def test_classify_all_keeps_order(self):
        """Test that batch classification keeps input order."""
        findings = [make_finding("x", id=f"F-{i}") for i in range(5)]
        issues = IssueClassifier().classify_all(findings)
        assert [i.id for i in issues] == [f.id for f in findings]
