"""Errors raised while talking to the metadata API or converging tables."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, Literal

if TYPE_CHECKING:
    from .model import TableIdentity

ALREADY_TRACKED: Final = "already-tracked"
ALREADY_EXISTS: Final = "already-exists"

IDEMPOTENT_CODES: Final[frozenset[str]] = frozenset({ALREADY_TRACKED, ALREADY_EXISTS})

type ConvergePhase = Literal["track", "customize", "relationship"]


class MetadataError(RuntimeError):
    """Base class for every metadata failure."""


class MetadataTransportError(MetadataError):
    """The request could not be sent or the response could not be read."""


class MetadataResponseError(MetadataError):
    """A successful response carried a body that could not be parsed."""


class MetadataAPIError(MetadataError):
    """The API rejected the request with a non-idempotent error."""

    def __init__(self, status_code: int, body: str, *, code: str | None = None) -> None:
        super().__init__(f"status_code: {status_code}\nresponse: {body}")
        self.status_code = status_code
        self.body = body
        self.code = code


class MetadataConflictError(MetadataError):
    """The requested change already holds (``already-tracked``/``already-exists``)."""

    def __init__(self, message: str, *, code: str, path: str | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.path = path


class ConvergenceError(MetadataError):
    """A fatal failure during a convergence run, tagged with where it happened."""

    def __init__(
        self,
        table: TableIdentity,
        *,
        phase: ConvergePhase,
        relationship: str | None = None,
        cause: MetadataError,
    ) -> None:
        self.table = table
        self.phase = phase
        self.relationship = relationship
        self.cause = cause
        super().__init__(self._describe())

    def _describe(self) -> str:
        match self.phase:
            case "track":
                action = f"problem adding metadata for table {self.table}"
            case "customize":
                action = f"problem updating customization for table {self.table}"
            case "relationship":
                action = (
                    f"problem creating relationship {self.relationship} for table {self.table}"
                )
        return f"{action}: {self.cause}"
