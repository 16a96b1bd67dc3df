"""Callback service — turns identity provider callbacks into user records.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

from collections.abc import Mapping
from logging import getLogger
from typing import Any

from domain.model.callback import CallbackPayload, CallbackResult
from domain.model.errors import DuplicateUidError, PersistenceError
from domain.model.user import User
from port.user_repository import UserRepository

logger = getLogger(__name__)


def _changed_fields(user: User, fields: dict[str, str]) -> dict[str, str]:
    return {key: value for key, value in fields.items() if getattr(user, key) != value}


def _refresh(repo: UserRepository, user: User, fields: dict[str, str]) -> User:
    """Apply a partial profile update. Skip the write when nothing changed."""
    changes = _changed_fields(user, fields)
    if not changes:
        return user
    return repo.update(user.id, changes)


def _retry_as_update(repo: UserRepository, callback: CallbackPayload, fields: dict[str, str]) -> User:
    """Another callback inserted the same uid first; update its row instead."""
    logger.warning("Concurrent insert for provider uid, retrying as update", extra={"providerUid": callback.uid})

    existing = repo.get_by_provider_uid(callback.uid)
    if not existing:
        raise PersistenceError(f"User with provider uid {callback.uid!r} vanished after uid conflict")
    return _refresh(repo, existing, fields)


def process_callback(
    repo: UserRepository,
    payload: CallbackPayload | Mapping[str, Any],
    provider: str | None = None,
) -> CallbackResult:
    """Upsert the user identified by the callback's provider uid.

    Creates the user on first sight, otherwise refreshes name/email/image with
    the non-empty values the provider sent. Fields missing from the payload are
    left as stored.

    Args:
        repo: persistence collaborator
        payload: validated CallbackPayload or the raw callback mapping
        provider: identity provider name, recorded on insert

    Returns:
        CallbackResult with the stored user and whether it was created

    Raises:
        InvalidPayloadError: uid missing/empty or payload malformed
        PersistenceError: storage failure, or a uid conflict the retry could not resolve
    """
    if isinstance(payload, CallbackPayload):
        callback = payload
    else:
        callback = CallbackPayload.from_mapping(payload, provider=provider)
    provider = provider or callback.provider
    fields = callback.profile_fields()

    existing = repo.get_by_provider_uid(callback.uid)
    if existing:
        user = _refresh(repo, existing, fields)
        logger.info("User updated from callback", extra={"userId": user.id, "providerUid": callback.uid})
        return CallbackResult(user=user, created=False)

    try:
        user = repo.create(callback.uid, fields, provider=provider)
    except DuplicateUidError:
        user = _retry_as_update(repo, callback, fields)
        logger.info("User updated from callback", extra={"userId": user.id, "providerUid": callback.uid})
        return CallbackResult(user=user, created=False)

    logger.info("User created from callback", extra={"userId": user.id, "providerUid": callback.uid})
    return CallbackResult(user=user, created=True)
