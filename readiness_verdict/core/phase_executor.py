"""Phase Executor Module - Runs analysis phases concurrently and contains their failures."""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .finding import (
    PHASE_CATEGORIES,
    PHASE_NAMES,
    Finding,
    FindingStatus,
    PhaseResult,
    Severity,
    ValidationRun,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


class BaseAnalysisPhase(ABC):
    """Abstract base class for analyzers that produce a phase result."""

    def __init__(self, phase_id: str, name: Optional[str] = None):
        """Initialize the phase.

        Args:
            phase_id: One of the known phase identifiers
            name: Display name (defaults to the standard phase name)

        Raises:
            ValueError: If the phase id is unknown
        """
        if phase_id not in PHASE_NAMES:
            raise ValueError(f"Unknown phase '{phase_id}'")
        self.phase_id = phase_id
        self.name = name or PHASE_NAMES[phase_id]

    @abstractmethod
    async def analyze(self) -> PhaseResult:
        """Run the analysis.

        Returns:
            PhaseResult holding the findings of this phase
        """
        pass

    def is_available(self) -> bool:
        """Check if the phase can run in this environment."""
        return True


def phase_error_result(phase_id: str, phase_name: str, error: str) -> PhaseResult:
    """Build the FAIL result recorded for a phase that could not complete.

    Args:
        phase_id: Identifier of the failed phase
        phase_name: Display name of the failed phase
        error: Description of what went wrong

    Returns:
        PhaseResult holding one CRITICAL finding
    """
    finding = Finding(
        id=f"{phase_id}_error",
        name=f"{phase_name} Phase Error",
        status=FindingStatus.FAIL,
        severity=Severity.CRITICAL,
        category=PHASE_CATEGORIES[phase_id],
        message=f"Phase execution failed: {error}",
    )
    return PhaseResult(
        phase_name=phase_name,
        status=FindingStatus.FAIL,
        results=[finding],
        recommendations=[f"Fix {phase_name} phase execution error before proceeding"],
        summary=f"Phase failed due to execution error: {error}",
    )


@dataclass
class ExecutionResult:
    """Result of running all registered phases."""
    run: ValidationRun = field(default_factory=ValidationRun)
    errors: Dict[str, str] = field(default_factory=dict)
    successful_phases: int = 0
    failed_phases: int = 0
    durations: Dict[str, int] = field(default_factory=dict)  # milliseconds

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run": self.run.to_dict(),
            "errors": dict(self.errors),
            "successful_phases": self.successful_phases,
            "failed_phases": self.failed_phases,
            "durations": dict(self.durations),
        }


class PhaseExecutor:
    """Executes analysis phases in parallel."""

    def __init__(
        self,
        max_concurrent: int = 4,
        timeout_per_phase: float = 300,
    ):
        """Initialize the executor.

        Args:
            max_concurrent: Maximum number of phases running at once
            timeout_per_phase: Timeout in seconds for each phase
        """
        self.max_concurrent = max_concurrent
        self.timeout_per_phase = timeout_per_phase
        self.phases: List[BaseAnalysisPhase] = []

    def add_phase(self, phase: BaseAnalysisPhase) -> "PhaseExecutor":
        """Add a phase to execute.

        Returns:
            Self for chaining
        """
        self.phases.append(phase)
        return self

    def add_phases(self, phases: List[BaseAnalysisPhase]) -> "PhaseExecutor":
        """Add multiple phases to execute.

        Returns:
            Self for chaining
        """
        self.phases.extend(phases)
        return self

    def clear_phases(self) -> "PhaseExecutor":
        """Clear all registered phases.

        Returns:
            Self for chaining
        """
        self.phases.clear()
        return self

    async def execute(self, progress_callback: Optional[ProgressCallback] = None) -> ExecutionResult:
        """Execute all phases in parallel.

        A phase that raises or times out is recorded as a FAIL result with
        one synthetic CRITICAL finding; the other phases keep running.

        Args:
            progress_callback: Optional callback called with
                (completed_count, total_count, phase_name) as each phase finishes

        Returns:
            ExecutionResult whose run holds one PhaseResult per available phase
        """
        result = ExecutionResult()
        if not self.phases:
            return result

        completed_count = 0
        total_phases = len(self.phases)
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def run_phase(phase: BaseAnalysisPhase) -> Optional[PhaseResult]:
            nonlocal completed_count
            phase_result = None
            async with semaphore:
                started = time.monotonic()
                try:
                    if not phase.is_available():
                        result.errors[phase.phase_id] = "Phase not available"
                        logger.warning("Skipping %s phase: not available", phase.name)
                    else:
                        phase_result = await asyncio.wait_for(
                            phase.analyze(),
                            timeout=self.timeout_per_phase,
                        )
                        result.successful_phases += 1

                except asyncio.TimeoutError:
                    error = f"Phase timed out after {self.timeout_per_phase}s"
                    logger.warning("%s phase timed out after %ss", phase.name, self.timeout_per_phase)
                    result.errors[phase.phase_id] = error
                    result.failed_phases += 1
                    phase_result = phase_error_result(phase.phase_id, phase.name, error)

                except Exception as e:
                    logger.error("Error in %s phase: %s", phase.name, e)
                    result.errors[phase.phase_id] = str(e)
                    result.failed_phases += 1
                    phase_result = phase_error_result(phase.phase_id, phase.name, str(e))

                finally:
                    result.durations[phase.phase_id] = int((time.monotonic() - started) * 1000)
                    completed_count += 1
                    if progress_callback:
                        progress_callback(completed_count, total_phases, phase.name)

            return phase_result

        phase_results = await asyncio.gather(*[run_phase(phase) for phase in self.phases])

        # Registration order, not completion order
        for phase, phase_result in zip(self.phases, phase_results):
            if phase_result is not None:
                result.run.phases[phase.phase_id] = phase_result

        return result
