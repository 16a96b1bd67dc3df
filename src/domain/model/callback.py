"""Identity provider callback payload and processing result."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from domain.model.errors import InvalidPayloadError
from domain.model.user import PROFILE_FIELDS, User


@dataclass(frozen=True)
class CallbackInfo:
    """Profile data the provider sent along with the uid."""
    name: str | None = None
    email: str | None = None
    image: str | None = None

    @classmethod
    def from_mapping(cls, data: Any) -> 'CallbackInfo':
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise InvalidPayloadError("Callback info must be an object")

        values = {}
        for key in PROFILE_FIELDS:
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise InvalidPayloadError(f"Callback info field '{key}' must be a string")
            values[key] = value
        return cls(**values)


@dataclass(frozen=True)
class CallbackPayload:
    """Validated callback payload.

    Shape: ``{uid, info?: {name?, email?, image?}}``. Unknown keys at either
    level are ignored.
    """
    uid: str
    info: CallbackInfo = field(default_factory=CallbackInfo)
    provider: str | None = None

    @classmethod
    def from_mapping(cls, data: Any, provider: str | None = None) -> 'CallbackPayload':
        """Validate a raw callback mapping and normalize its uid to a string.

        Raises:
            InvalidPayloadError: payload is not an object, uid is missing, empty
                or not a string/integer, or info is malformed
        """
        if not isinstance(data, Mapping):
            raise InvalidPayloadError("Callback payload must be an object")

        uid = data.get('uid')
        # bool is an int subclass but never a valid uid
        if isinstance(uid, bool) or not isinstance(uid, (str, int)):
            if uid is None:
                raise InvalidPayloadError("Callback payload is missing uid")
            raise InvalidPayloadError("Callback uid must be a string or integer")

        uid = str(uid)
        if not uid.strip():
            raise InvalidPayloadError("Callback uid must not be empty")

        provider = provider or data.get('provider')
        if provider is not None and not isinstance(provider, str):
            provider = None

        return cls(uid=uid, info=CallbackInfo.from_mapping(data.get('info')), provider=provider or None)

    def profile_fields(self) -> dict[str, str]:
        """Return only the non-empty profile values; absent fields stay untouched on update."""
        fields = {}
        for key in PROFILE_FIELDS:
            value = getattr(self.info, key)
            if value:
                fields[key] = value
        return fields


@dataclass
class CallbackResult:
    """Outcome of processing a callback: the stored user and whether it was inserted."""
    user: User
    created: bool
