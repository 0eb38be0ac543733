"""Authentication service - registration, login and user lookup."""
from datetime import datetime
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId

from performance_track.exceptions import BadRequestError, NotFoundError, UnauthorizedError
from performance_track.models.user import User, UserRole
from performance_track.utils.auth import create_access_token, hash_password, verify_password


class AuthService:
    """Service for handling user authentication."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.users = db["users"]

    def _doc_to_user(self, doc: dict) -> User:
        """Convert database document to User model (never exposes the hash)."""
        return User(
            _id=str(doc["_id"]),
            email=doc["email"],
            name=doc["name"],
            role=doc.get("role", UserRole.EMPLOYEE.value),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    async def register_user(
        self,
        email: str,
        password: str,
        name: str,
        role: UserRole = UserRole.EMPLOYEE,
    ) -> User:
        """
        Register a new user.

        Returns:
            User object (without password)

        Raises:
            BadRequestError: If email is already registered
        """
        existing = await self.users.find_one({"email": email})
        if existing:
            raise BadRequestError("Email already registered")

        now = datetime.utcnow()
        user_doc = {
            "email": email,
            "hashed_password": hash_password(password),
            "name": name,
            "role": UserRole(role).value,
            "created_at": now,
            "updated_at": now,
        }

        result = await self.users.insert_one(user_doc)
        user_doc["_id"] = result.inserted_id

        return self._doc_to_user(user_doc)

    async def login(self, email: str, password: str) -> str:
        """
        Login user and return JWT token.

        Raises:
            UnauthorizedError: If credentials are invalid
        """
        user_doc = await self.users.find_one({"email": email})
        if not user_doc:
            raise UnauthorizedError("Invalid email or password")

        if not verify_password(password, user_doc["hashed_password"]):
            raise UnauthorizedError("Invalid email or password")

        return create_access_token(
            user_id=str(user_doc["_id"]),
            role=user_doc.get("role", UserRole.EMPLOYEE.value),
        )

    async def find_user_doc(self, user_id: str) -> Optional[dict]:
        """Return the raw user document, or None for unknown/malformed IDs."""
        try:
            object_id = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None

        return await self.users.find_one({"_id": object_id})

    async def get_user_by_id(self, user_id: str) -> User:
        """
        Get user by ID.

        Raises:
            NotFoundError: If user not found
        """
        user_doc = await self.find_user_doc(user_id)
        if not user_doc:
            raise NotFoundError("User not found")

        return self._doc_to_user(user_doc)
