"""JSON Reporter Module - Generate JSON format verdict reports."""

import json
from typing import Any, Dict, Optional

from .. import __version__
from ..core.classifier import ClassifiedIssue
from .base_reporter import BaseReporter, ReportData


class JSONReporter(BaseReporter):
    """Generate reports in JSON format."""

    def __init__(
        self,
        output_dir: Optional[str] = None,
        indent: int = 2,
        include_metadata: bool = True,
    ):
        """Initialize the JSON reporter.

        Args:
            output_dir: Directory to save reports
            indent: JSON indentation level
            include_metadata: Include metadata in the report
        """
        super().__init__(output_dir)
        self.indent = indent
        self.include_metadata = include_metadata

    @property
    def format(self) -> str:
        return "json"

    @property
    def extension(self) -> str:
        return "json"

    def generate(self, report_data: ReportData) -> bytes:
        report_dict = self.build_report(report_data)
        json_str = json.dumps(report_dict, indent=self.indent, ensure_ascii=False)
        return json_str.encode("utf-8")

    def build_report(self, report_data: ReportData) -> Dict[str, Any]:
        """Build the JSON report structure.

        Schema:
        {
          "report_info": { project_name, generated_at, version },
          "summary": { recommendation, health_score, counts, fix time, ... },
          "assessments": { health, capacity, risk, confidence, critical_gaps },
          "recommendation": { full Go/No-Go guidance },
          "issues": [ one entry per classified issue ]
        }

        Args:
            report_data: Report data

        Returns:
            Dictionary for JSON serialization
        """
        verdict = report_data.verdict
        health = verdict.system_health_assessment

        report = {
            "report_info": {
                "project_name": report_data.project_name,
                "generated_at": report_data.generated_at.isoformat(),
                "version": __version__,
            },
            "summary": {
                "recommendation": verdict.recommendation.value,
                "health_score": round(health.health_score, 2),
                "health_rating": health.overall_rating.value,
                "overall_risk": verdict.risk_assessment.overall_risk.value,
                "confidence": verdict.confidence_level_assessment.overall_confidence.value,
                "capacity_rating": verdict.concurrent_user_assessment.capacity_rating.value,
                "total_issues_analyzed": report_data.total_issues,
                "critical_issues_count": verdict.critical_issues_count,
                "deployment_blockers_count": verdict.deployment_blockers_count,
                "estimated_fix_time": verdict.estimated_fix_time,
                "recommended_deployment_date": verdict.recommended_deployment_date,
                "priority_distribution": {
                    k.value: v for k, v in verdict.categorization.priority_distribution.items()
                },
            },
            "assessments": {
                "system_health": health.to_dict(),
                "concurrent_users": verdict.concurrent_user_assessment.to_dict(),
                "risk": verdict.risk_assessment.to_dict(),
                "confidence": verdict.confidence_level_assessment.to_dict(),
                "critical_gaps": verdict.critical_gap_analysis.to_dict(),
            },
            "recommendation": verdict.go_no_go_recommendation.to_dict(),
            "issues": [self._format_issue(issue) for issue in report_data.all_issues],
        }

        if self.include_metadata:
            report["metadata"] = report_data.metadata

        return report

    def _format_issue(self, issue: ClassifiedIssue) -> Dict[str, Any]:
        formatted = issue.to_dict()
        formatted["evidence"] = [e.to_dict() for e in issue.finding.evidence]
        return formatted
