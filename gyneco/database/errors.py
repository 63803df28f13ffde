# gyneco/database/errors.py
"""
Error taxonomy of the record store.

Repositories translate store-level exceptions into these classes and chain
the original exception, so callers never see SQLAlchemy or sqlite3 shapes.
An absent record on a point lookup is *not* an error: lookups return ``None``.
"""
from typing import Optional


class RecordStoreError(Exception):
    """Base class for every error raised by the data-access layer."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class OperationFailedError(RecordStoreError):
    """A store operation failed for a reason with no more specific class."""


class RecordNotFoundError(RecordStoreError):
    """An update or delete targeted an id that does not exist."""

    def __init__(self, entity: str, record_id: str):
        super().__init__(f"{entity} not found: {record_id}")
        self.entity = entity
        self.record_id = record_id


class ConstraintViolationError(RecordStoreError):
    """A uniqueness, foreign-key or not-null rule of the store was violated."""


class StoreUnavailableError(RecordStoreError):
    """The record store could not be opened or initialized."""


class FeatureNotSupportedError(RecordStoreError):
    """The active backing store does not offer this operation."""

    def __init__(self, feature: str, backend: str):
        super().__init__(f"{feature} is not supported by {backend}")
        self.feature = feature
        self.backend = backend
