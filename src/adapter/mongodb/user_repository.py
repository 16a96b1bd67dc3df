"""MongoDB implementation of UserRepository."""

import uuid
from datetime import datetime, timezone
from logging import getLogger
from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from adapter.mongodb import USERS_COLLECTION_NAME
from domain.model.errors import DuplicateUidError, PersistenceError
from domain.model.user import PROFILE_FIELDS, User

logger = getLogger(__name__)


def _now() -> datetime:
    """Current UTC time at BSON precision, so a created User equals its stored copy."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('provider_uid', 1)], 'idx_users_provider_uid', unique=True)
            create_index_safe(self.collection, [('created_at', -1)], 'idx_users_created_at')
            return True
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            provider_uid=doc['provider_uid'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            name=doc.get('name'),
            email=doc.get('email'),
            image=doc.get('image'),
            provider=doc.get('provider'),
        )

    def create(self, provider_uid: str, fields: dict[str, str], provider: str | None = None) -> User:
        """Insert a new user document and return the User object."""
        user_id = uuid.uuid4().hex
        now = _now()
        user_doc = {
            '_id': user_id,
            'provider_uid': provider_uid,
            'provider': provider,
            'created_at': now,
            'updated_at': now,
        }
        for key in PROFILE_FIELDS:
            user_doc[key] = fields.get(key)

        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError as e:
            logger.warning("User creation failed: provider uid already exists", extra={"providerUid": provider_uid})
            raise DuplicateUidError(provider_uid) from e
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"providerUid": provider_uid, "error": str(e)})
            raise PersistenceError("Failed to create user") from e

        logger.info("User created", extra={"userId": user_id, "providerUid": provider_uid})
        return self._to_domain(user_doc)

    def update(self, user_id: str, fields: dict[str, str]) -> User:
        """Set profile fields on an existing user and return the updated User."""
        changes = {key: value for key, value in fields.items() if key in PROFILE_FIELDS}
        changes['updated_at'] = _now()

        try:
            doc = self.collection.find_one_and_update(
                {'_id': user_id},
                {'$set': changes},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Failed to update user", extra={"userId": user_id, "error": str(e)})
            raise PersistenceError("Failed to update user") from e

        if doc is None:
            raise PersistenceError(f"User {user_id} not found for update")
        logger.debug("User updated", extra={"userId": user_id, "fields": sorted(fields)})
        return self._to_domain(doc)

    def get_by_provider_uid(self, provider_uid: str) -> User | None:
        """Find a user by provider uid. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'provider_uid': provider_uid})
        except PyMongoError as e:
            logger.error("Failed to get user by provider uid", extra={"providerUid": provider_uid, "error": str(e)})
            raise PersistenceError("Failed to read user") from e
        return self._to_domain(doc) if doc else None

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)})
            raise PersistenceError("Failed to read user") from e
        return self._to_domain(doc) if doc else None
