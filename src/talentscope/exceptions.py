"""TalentScope exception hierarchy.

All exceptions inherit from TalentScopeError and carry a three-part structure:
message (what happened), detail (technical context), suggestion (what to do next).

Ineligible outcomes and undersized cohorts are not errors; the engine skips
them and logs the reason.
"""


class TalentScopeError(Exception):
    """Base exception for all TalentScope errors."""

    def __init__(
        self,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.detail:
            parts.append(f"Detail: {self.detail}")
        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")
        return " | ".join(parts)


class DataAccessError(TalentScopeError):
    """Raised when reading benchmark data points fails."""

    def __init__(
        self,
        message: str = "Failed to read benchmark data",
        detail: str | None = None,
        suggestion: str | None = "Check database connectivity, then re-run the recalculation",
    ) -> None:
        super().__init__(message, detail, suggestion)


class ProfileWriteError(TalentScopeError):
    """Raised when replacing the stored top performer profiles fails.

    The replace runs in one transaction, but callers must still treat this
    as "re-run the job" rather than trying to patch the stored result.
    """

    def __init__(
        self,
        message: str = "Failed to store top performer profiles",
        detail: str | None = None,
        suggestion: str | None = "Re-run the recalculation for this benchmark",
    ) -> None:
        super().__init__(message, detail, suggestion)


class EngineCancelledError(TalentScopeError):
    """Raised when a recalculation is cancelled or exceeds its time budget.

    Nothing is persisted for a cancelled job.
    """

    def __init__(
        self,
        message: str = "Top performer recalculation was cancelled",
        detail: str | None = None,
        suggestion: str | None = "Raise TALENTSCOPE_JOB_TIMEOUT_SECONDS or re-run when the database is less busy",
    ) -> None:
        super().__init__(message, detail, suggestion)


class BenchmarkNotFoundError(TalentScopeError):
    """Raised when a benchmark cannot be found."""

    def __init__(
        self,
        message: str = "Benchmark not found",
        detail: str | None = None,
        suggestion: str | None = "Check the benchmark id or upload the benchmark first",
    ) -> None:
        super().__init__(message, detail, suggestion)
