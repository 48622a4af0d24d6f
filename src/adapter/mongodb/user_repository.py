"""MongoDB implementation of UserRepository."""

import uuid
from datetime import datetime, timezone
from logging import getLogger
from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from adapter.mongodb.connection import USERS_COLLECTION_NAME
from adapter.mongodb.indexes import IndexSpec, apply_indexes
from domain.model.errors import DuplicateError, StorageError
from domain.model.user import User

logger = getLogger(__name__)

USER_INDEXES = [
    IndexSpec('idx_users_email', [('email', 1)], {'unique': True}),
    IndexSpec('idx_users_reset_token', [('reset_token', 1)], {'unique': True, 'sparse': True}),
]


def _as_utc(value: datetime | None) -> datetime | None:
    # Clients built without tz_aware hand back naive UTC datetimes
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        try:
            return apply_indexes(self.collection, USER_INDEXES)
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            email=doc['email'],
            password_hash=doc['password_hash'],
            created_at=_as_utc(doc['created_at']),
            updated_at=_as_utc(doc['updated_at']),
            is_verified=doc.get('is_verified', False),
            reset_token=doc.get('reset_token'),
            reset_token_expiry=_as_utc(doc.get('reset_token_expiry')),
        )

    def create(self, email: str, password_hash: str) -> User:
        """Insert a new unverified user and return it."""
        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        user_doc = {
            '_id': user_id,
            'email': email,
            'password_hash': password_hash,
            'is_verified': False,
            'created_at': now,
            'updated_at': now,
        }
        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError:
            logger.warning("User creation failed: email already exists", extra={"email": email})
            raise DuplicateError("Email already exists")
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"email": email, "error": str(e)})
            raise StorageError("Failed to create user") from e

        logger.info("User created", extra={"userId": user_id, "email": email})
        return self._to_domain(user_doc)

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'email': email})
        except PyMongoError as e:
            logger.error("Failed to get user by email", extra={"email": email, "error": str(e)})
            raise StorageError("Failed to look up user") from e
        return self._to_domain(doc) if doc else None

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)})
            raise StorageError("Failed to look up user") from e
        return self._to_domain(doc) if doc else None

    def mark_verified(self, email: str) -> User | None:
        """Flip is_verified on. Repeating it on a verified user is harmless."""
        try:
            doc = self.collection.find_one_and_update(
                {'email': email},
                {'$set': {'is_verified': True, 'updated_at': datetime.now(timezone.utc)}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Failed to mark user verified", extra={"email": email, "error": str(e)})
            raise StorageError("Failed to verify user") from e
        return self._to_domain(doc) if doc else None

    def set_reset_token(self, user_id: str, token: str, expiry: datetime) -> bool:
        """Store reset_token and reset_token_expiry in one update."""
        try:
            result = self.collection.update_one(
                {'_id': user_id},
                {'$set': {
                    'reset_token': token,
                    'reset_token_expiry': expiry,
                    'updated_at': datetime.now(timezone.utc),
                }}
            )
        except PyMongoError as e:
            logger.error("Failed to store reset token", extra={"userId": user_id, "error": str(e)})
            raise StorageError("Failed to store reset token") from e
        return result.matched_count > 0

    def find_by_reset_token(self, token: str, now: datetime) -> User | None:
        try:
            doc = self.collection.find_one({
                'reset_token': token,
                'reset_token_expiry': {'$gt': now},
            })
        except PyMongoError as e:
            logger.error("Failed to look up reset token", extra={"error": str(e)})
            raise StorageError("Failed to look up reset token") from e
        return self._to_domain(doc) if doc else None

    def consume_reset_token(self, token: str, now: datetime, password_hash: str) -> User | None:
        """Match-and-clear in a single find_one_and_update.

        Two concurrent calls with the same token cannot both match: the
        first one unsets reset_token before the second is evaluated.
        """
        try:
            doc = self.collection.find_one_and_update(
                {'reset_token': token, 'reset_token_expiry': {'$gt': now}},
                {
                    '$set': {'password_hash': password_hash, 'updated_at': now},
                    '$unset': {'reset_token': '', 'reset_token_expiry': ''},
                },
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Failed to consume reset token", extra={"error": str(e)})
            raise StorageError("Failed to reset password") from e

        if doc:
            logger.info("Password reset completed", extra={"userId": doc['_id']})
            return self._to_domain(doc)
        return None
