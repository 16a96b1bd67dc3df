"""In-memory implementation of UserRepository for testing."""

import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone

from domain.model.errors import DuplicateUidError, PersistenceError
from domain.model.user import User


class FakeUserRepository:
    """Thread-safe store keyed by user id, unique on provider_uid.

    Set ``fail_with`` to an exception instance to make every call raise it.
    """

    def __init__(self):
        self.store: dict[str, User] = {}
        self.fail_with: Exception | None = None
        self.writes = 0
        self._lock = threading.Lock()

    def _check_failure(self):
        if self.fail_with is not None:
            raise self.fail_with

    # ── write operations ─────────────────────────────────────

    def create(self, provider_uid: str, fields: dict[str, str], provider: str | None = None) -> User:
        self._check_failure()
        with self._lock:
            if any(u.provider_uid == provider_uid for u in self.store.values()):
                raise DuplicateUidError(provider_uid)

            user_id = uuid.uuid4().hex
            now = datetime.now(timezone.utc)
            user = User(
                id=user_id,
                provider_uid=provider_uid,
                created_at=now,
                updated_at=now,
                provider=provider,
                **fields,
            )
            self.store[user_id] = user
            self.writes += 1
            return replace(user)

    def update(self, user_id: str, fields: dict[str, str]) -> User:
        self._check_failure()
        with self._lock:
            user = self.store.get(user_id)
            if not user:
                raise PersistenceError(f"User {user_id} not found for update")

            user = replace(user, updated_at=datetime.now(timezone.utc), **fields)
            self.store[user_id] = user
            self.writes += 1
            return replace(user)

    # ── read operations ──────────────────────────────────────

    def get_by_provider_uid(self, provider_uid: str) -> User | None:
        self._check_failure()
        with self._lock:
            for user in self.store.values():
                if user.provider_uid == provider_uid:
                    return replace(user)
        return None

    def get_by_id(self, user_id: str) -> User | None:
        self._check_failure()
        with self._lock:
            user = self.store.get(user_id)
            return replace(user) if user else None
