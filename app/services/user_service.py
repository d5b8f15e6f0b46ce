from typing import List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from app.core.db_client import USERS_COLLECTION
from app.core.exceptions import (
    UserAlreadyExistsError,
    UserNotFoundError,
    ValidationError,
)
from app.core.logging import get_service_logger
from app.models.user import User
from app.models.schemas import UserResponse

logger = get_service_logger("user")


def parse_object_id(value: Optional[str]) -> Optional[ObjectId]:
    """Return the ObjectId for a string id, or None if it is not one."""
    if value and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


class UserService:
    """Service for creating, listing and resolving users."""

    def __init__(self, database: AsyncIOMotorDatabase):
        self.collection = database[USERS_COLLECTION]
        self.logger = logger

    def _to_response(self, user: User) -> UserResponse:
        return UserResponse(username=user.username, _id=user.id)

    async def create_user(self, username: Optional[str]) -> UserResponse:
        """
        Create a new user.

        Args:
            username: Requested username, already stripped

        Returns:
            Created user response

        Raises:
            ValidationError: If username is empty
            UserAlreadyExistsError: If the username is taken
        """
        if not username:
            raise ValidationError("Username is required")

        user = User(username=username)
        try:
            result = await self.collection.insert_one(user.to_dict())
        except DuplicateKeyError:
            self.logger.info("Duplicate username rejected", username=username)
            raise UserAlreadyExistsError(username=username)

        user.id = str(result.inserted_id)
        self.logger.info("User created", user_id=user.id, username=username)

        return self._to_response(user)

    async def list_users(self) -> List[UserResponse]:
        """List all users, projected to username and id."""
        cursor = self.collection.find({}, {"username": 1})
        documents = await cursor.to_list(length=None)

        return [self._to_response(User.from_dict(doc)) for doc in documents]

    async def get_user(self, user_id: str) -> User:
        """
        Resolve a user by id.

        A string that is not a valid ObjectId cannot name a stored user
        and is reported the same way as an unknown id.

        Raises:
            UserNotFoundError: If no user has this id
        """
        object_id = parse_object_id(user_id)
        if object_id is None:
            raise UserNotFoundError(user_id=user_id)

        document = await self.collection.find_one({"_id": object_id})
        if document is None:
            raise UserNotFoundError(user_id=user_id)

        return User.from_dict(document)
