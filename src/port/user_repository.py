from typing import Protocol
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Implementations raise PersistenceError on storage failures instead of
    returning None, and DuplicateUidError when an insert hits an existing
    provider uid.
    """
    def get_by_provider_uid(self, provider_uid: str) -> User | None:
        """Find a user by provider uid. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def create(self, provider_uid: str, fields: dict[str, str], provider: str | None = None) -> User:
        """Insert a new user. Raise DuplicateUidError if the provider uid is taken."""
        ...

    def update(self, user_id: str, fields: dict[str, str]) -> User:
        """Set the given profile fields and bump updated_at. Return the updated User."""
        ...
