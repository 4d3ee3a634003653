"""Unified engine exception taxonomy.

Every domain exception inherits from ``GeoEngineError`` and carries
structured context fields plus a plain-language ``user_message`` that the
surrounding screen can show the operator as-is.

Taxonomy categories
-------------------
- ``ValidationError``: bad geometry or input, never retryable.
- ``TransientError``: collaborator failures (save), retryable.
- ``ContractError``: caller used an operation in the wrong state.

The user messages keep three situations apart: keep drawing
(``IncompleteShape``), retry (``PersistenceError``) and abandon
(``InvalidGeometry``).
"""

from __future__ import annotations


class GeoEngineError(Exception):
    """Base exception for all engine-domain errors.

    Attributes:
        message: Developer-facing error description.
        stage: Engine stage where the error occurred
            (e.g. ``"transform"``, ``"drawing"``).
        code: Machine-readable error code (e.g. ``"INVALID_GEOMETRY"``).
        retryable: Whether the caller may retry the same operation.
        user_message: Operator-facing message.
    """

    default_stage: str = ""
    default_code: str = ""
    default_user_message: str = "Something went wrong."

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        user_message: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.user_message = user_message or self.default_user_message
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ContractError):
            return "contract"
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, TransientError):
            return "transient"
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "user_message": self.user_message,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(GeoEngineError):
    """Input or domain-model validation failure. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class TransientError(GeoEngineError):
    """Temporary failure that may succeed on retry."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class ContractError(GeoEngineError):
    """Operation invoked outside the state or contract it is defined for."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Concrete errors
# ---------------------------------------------------------------------------


class InvalidGeometry(ValidationError):
    """Malformed ring, degenerate point count, bad radius or coordinate."""

    default_stage = "transform"
    default_code = "INVALID_GEOMETRY"
    default_user_message = "Invalid location data. This shape cannot be used."


class IncompleteShape(ValidationError):
    """The drawing does not meet the minimum for its shape yet."""

    default_stage = "drawing"
    default_code = "INCOMPLETE_SHAPE"
    default_user_message = "Not enough points yet. Keep tapping the map."


class DraftDetailsError(ValidationError):
    """The draft's operator-entered details are unusable (e.g. blank name)."""

    default_stage = "drawing"
    default_code = "DRAFT_DETAILS_INVALID"
    default_user_message = "Name is required."


class SourceRecordError(ValidationError):
    """A single upstream record could not be turned into a feature.

    Attributes:
        source: Name of the source the record came from.
        index: Zero-based position of the record within its source.
        record_id: The record's id, when it had one.
    """

    default_stage = "aggregate"
    default_code = "SOURCE_RECORD_SKIPPED"
    default_user_message = "Some map items have invalid location data and are hidden."

    def __init__(
        self,
        message: str = "",
        *,
        source: str = "",
        index: int = -1,
        record_id: object = None,
        **kwargs: object,
    ) -> None:
        self.source = source
        self.index = index
        self.record_id = record_id
        super().__init__(message, **kwargs)

    def to_error_dict(self) -> dict[str, object]:
        payload = super().to_error_dict()
        payload.update(source=self.source, index=self.index, record_id=self.record_id)
        return payload


class PersistenceError(TransientError):
    """The persistence collaborator rejected or failed to store a draft."""

    default_stage = "save"
    default_code = "PERSISTENCE_FAILED"
    default_user_message = "Save failed. Try again."


class InvalidTransitionError(ContractError):
    """A drawing-session operation was invoked in a state that does not define it."""

    default_stage = "drawing"
    default_code = "INVALID_TRANSITION"
    default_user_message = "That action is not available right now."
