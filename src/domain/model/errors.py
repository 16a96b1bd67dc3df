"""Domain-level exceptions.

Services and repositories raise these errors to express business rule
violations and storage failures. Route handlers catch them and map to
appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class InvalidPayloadError(ValidationError):
    """Identity provider callback payload is malformed or lacks a uid."""


class DuplicateUidError(DuplicateError):
    """A user with this provider uid already exists.

    Raised by repositories on insert. The callback service catches it once
    and retries as an update, so it never reaches route handlers.
    """

    def __init__(self, provider_uid: str):
        self.provider_uid = provider_uid
        super().__init__(f"User with provider uid {provider_uid!r} already exists")


class PersistenceError(DomainError):
    """Storage read/write failed, or a uid conflict survived the retry."""
