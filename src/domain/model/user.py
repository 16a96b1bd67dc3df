from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """Domain model representing a user signed in through an identity provider."""
    id: str
    provider_uid: str
    created_at: datetime
    updated_at: datetime
    name: str | None = None
    email: str | None = None
    image: str | None = None
    provider: str | None = None


# Profile fields refreshed from the provider on every callback.
PROFILE_FIELDS = ('name', 'email', 'image')
