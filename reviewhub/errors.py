"""Failure kinds raised by the service layer.

The API boundary translates these into transport errors using :attr:`code`;
nothing below the boundary knows about GraphQL or HTTP.
"""
from typing import Any


class IntegrityViolation(Exception):
    """Base class for every failure the services raise on purpose."""

    code = 'INTEGRITY_VIOLATION'
    kind = 'INTEGRITY_VIOLATION'

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFound(IntegrityViolation):
    """The requested or referenced entity does not exist."""

    code = 'NOT_FOUND'
    kind = 'NOT_FOUND'

    def __init__(self, entity: str, key: Any, message: str = '') -> None:
        super().__init__(message or f"{entity} with ID {key} not found")
        self.entity = entity
        self.key = key


class Conflict(IntegrityViolation):
    """A write would break a uniqueness rule."""

    code = 'CONFLICT'
    kind = 'CONFLICT'

    def __init__(self, entity: str, field: str, value: Any) -> None:
        super().__init__(f"{entity} with {field} {value} already exists")
        self.entity = entity
        self.field = field
        self.value = value


class InternalInconsistency(NotFound):
    """A Review points at a User or Game that is gone.

    Surfaced to callers like :class:`NotFound`, but it means an invariant was
    broken (a cascade ran in the wrong order or the store was edited
    out-of-band), so it carries its own :attr:`kind`.
    """

    kind = 'INTERNAL_INCONSISTENCY'
