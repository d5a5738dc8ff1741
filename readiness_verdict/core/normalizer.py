"""Finding Normalizer Module - Flatten and deduplicate findings across phases."""

import logging
from typing import List, Set, Tuple

from .finding import ALL_PHASES, Finding, ValidationRun

logger = logging.getLogger(__name__)


def deduplicate_findings(findings: List[Finding]) -> Tuple[List[Finding], int]:
    """Remove findings whose id was already seen.

    Args:
        findings: Findings in collection order

    Returns:
        Tuple of (unique findings in original order, count of duplicates removed)
    """
    seen_ids: Set[str] = set()
    unique_findings: List[Finding] = []
    duplicates_removed = 0

    for finding in findings:
        if finding.id not in seen_ids:
            seen_ids.add(finding.id)
            unique_findings.append(finding)
        else:
            duplicates_removed += 1

    return unique_findings, duplicates_removed


class FindingNormalizer:
    """Collects findings from every phase into one ordered, duplicate-free list."""

    def collect(self, run: ValidationRun) -> List[Finding]:
        """Concatenate all findings of a run without deduplication.

        Phase results come first, in phase order, each followed by that
        phase's critical issues; the run-level critical issues come last.
        """
        collected: List[Finding] = []
        for phase_id in ALL_PHASES:
            phase = run.phase(phase_id)
            if phase is None:
                continue
            collected.extend(phase.results)
            collected.extend(phase.critical_issues)
        collected.extend(run.critical_issues)
        return collected

    def normalize(self, run: ValidationRun) -> List[Finding]:
        """Get the deduplicated finding list for a run."""
        findings, duplicates = deduplicate_findings(self.collect(run))
        if duplicates:
            logger.debug("Dropped %d duplicate findings", duplicates)
        return findings
