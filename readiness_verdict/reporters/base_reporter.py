"""Base Reporter Module - Abstract base class for report generators."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..core.classifier import ClassifiedIssue
from ..core.verdict import ProductionReadinessVerdictResult


@dataclass
class ReportData:
    """Data structure containing all information for a report."""
    project_name: str
    verdict: ProductionReadinessVerdictResult
    generated_at: datetime = field(default_factory=datetime.now)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "project_name": self.project_name,
            "verdict": self.verdict.to_dict(),
            "generated_at": self.generated_at.isoformat(),
            "metadata": self.metadata,
        }

    @property
    def total_issues(self) -> int:
        return self.verdict.total_issues_analyzed

    @property
    def all_issues(self) -> List[ClassifiedIssue]:
        return self.verdict.categorization.all_issues


class BaseReporter(ABC):
    """Abstract base class for report generators."""

    def __init__(self, output_dir: Optional[str] = None):
        """Initialize the reporter.

        Args:
            output_dir: Directory to save reports (default: current directory)
        """
        self.output_dir = Path(output_dir) if output_dir else Path.cwd()
        self.output_dir.mkdir(parents=True, exist_ok=True)

    @property
    @abstractmethod
    def format(self) -> str:
        """Report format identifier."""
        pass

    @property
    @abstractmethod
    def extension(self) -> str:
        """File extension for the report format."""
        pass

    @abstractmethod
    def generate(self, report_data: ReportData) -> bytes:
        """Generate the report content.

        Args:
            report_data: Data to include in the report

        Returns:
            Report content as bytes
        """
        pass

    def generate_filename(
        self,
        project_name: str,
        timestamp: Optional[datetime] = None,
    ) -> str:
        """Generate a filename such as prv_report_<name>_<YYYYmmdd_HHMMSS>.<ext>."""
        ts = timestamp or datetime.now()
        safe_name = "".join(c if c.isalnum() else "_" for c in project_name)
        return f"prv_report_{safe_name}_{ts.strftime('%Y%m%d_%H%M%S')}.{self.extension}"

    def save(
        self,
        report_data: ReportData,
        filename: Optional[str] = None,
    ) -> str:
        """Generate and save the report to a file.

        Args:
            report_data: Data to include in the report
            filename: Custom filename (default: auto-generated)

        Returns:
            Path to the saved report
        """
        content = self.generate(report_data)
        filename = filename or self.generate_filename(
            report_data.project_name,
            report_data.generated_at,
        )

        output_path = self.output_dir / filename
        output_path.write_bytes(content)
        return str(output_path)
