"""Issue Aggregator Module - Grouped and counted views over classified issues."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .classifier import ClassifiedIssue, Impact, ImpactLevel, Priority, RemediationEffort, RiskLevel
from .finding import FindingCategory


@dataclass
class IssueCategorizationResult:
    """Aggregate view over all classified issues of a run."""
    total_issues: int = 0
    critical_issues: List[ClassifiedIssue] = field(default_factory=list)
    high_priority_issues: List[ClassifiedIssue] = field(default_factory=list)
    medium_priority_issues: List[ClassifiedIssue] = field(default_factory=list)
    low_priority_issues: List[ClassifiedIssue] = field(default_factory=list)
    deployment_blockers: List[ClassifiedIssue] = field(default_factory=list)
    security_vulnerabilities: List[ClassifiedIssue] = field(default_factory=list)
    performance_bottlenecks: List[ClassifiedIssue] = field(default_factory=list)
    code_quality_issues: List[ClassifiedIssue] = field(default_factory=list)
    issues_by_category: Dict[FindingCategory, List[ClassifiedIssue]] = field(default_factory=dict)
    issues_by_impact: Dict[Impact, List[ClassifiedIssue]] = field(default_factory=dict)
    issues_by_effort: Dict[RemediationEffort, List[ClassifiedIssue]] = field(default_factory=dict)
    all_issues: List[ClassifiedIssue] = field(default_factory=list)

    @property
    def priority_distribution(self) -> Dict[Priority, int]:
        return {
            Priority.CRITICAL: len(self.critical_issues),
            Priority.HIGH: len(self.high_priority_issues),
            Priority.MEDIUM: len(self.medium_priority_issues),
            Priority.LOW: len(self.low_priority_issues),
        }

    @property
    def impact_distribution(self) -> Dict[Impact, int]:
        return {impact: len(self.issues_by_impact.get(impact, [])) for impact in Impact}

    @property
    def effort_distribution(self) -> Dict[RemediationEffort, int]:
        return {effort: len(self.issues_by_effort.get(effort, [])) for effort in RemediationEffort}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_issues": self.total_issues,
            "critical_issues": len(self.critical_issues),
            "high_priority_issues": len(self.high_priority_issues),
            "medium_priority_issues": len(self.medium_priority_issues),
            "low_priority_issues": len(self.low_priority_issues),
            "deployment_blockers": len(self.deployment_blockers),
            "security_vulnerabilities": len(self.security_vulnerabilities),
            "performance_bottlenecks": len(self.performance_bottlenecks),
            "code_quality_issues": len(self.code_quality_issues),
            "category_distribution": {
                category.value: len(issues) for category, issues in self.issues_by_category.items()
            },
            "priority_distribution": {k.value: v for k, v in self.priority_distribution.items()},
            "impact_distribution": {k.value: v for k, v in self.impact_distribution.items()},
            "effort_distribution": {k.value: v for k, v in self.effort_distribution.items()},
        }


class IssueAggregator:
    """Partitions classified issues into the categorization views."""

    def aggregate(self, issues: List[ClassifiedIssue]) -> IssueCategorizationResult:
        """Build a fresh categorization result.

        Args:
            issues: Classified issues in pipeline order

        Returns:
            IssueCategorizationResult whose distributions sum to the issue count
        """
        result = IssueCategorizationResult(
            total_issues=len(issues),
            issues_by_category={category: [] for category in FindingCategory},
            issues_by_impact={impact: [] for impact in Impact},
            issues_by_effort={effort: [] for effort in RemediationEffort},
            all_issues=list(issues),
        )
        by_priority = {
            Priority.CRITICAL: result.critical_issues,
            Priority.HIGH: result.high_priority_issues,
            Priority.MEDIUM: result.medium_priority_issues,
            Priority.LOW: result.low_priority_issues,
        }

        for issue in issues:
            by_priority[issue.priority].append(issue)
            result.issues_by_category[issue.category].append(issue)
            result.issues_by_impact[issue.impact].append(issue)
            result.issues_by_effort[issue.remediation_effort].append(issue)

            if issue.deployment_blocker:
                result.deployment_blockers.append(issue)
            if issue.security_risk in (RiskLevel.CRITICAL, RiskLevel.HIGH):
                result.security_vulnerabilities.append(issue)
            if issue.performance_impact in (ImpactLevel.SEVERE, ImpactLevel.MODERATE):
                result.performance_bottlenecks.append(issue)
            if issue.impact == Impact.CODE_QUALITY:
                result.code_quality_issues.append(issue)

        return result
