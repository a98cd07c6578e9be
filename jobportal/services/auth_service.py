"""
Auth Service - registration and login.

Registration input is a tagged variant on role: students may send a
skills list, recruiters a company name. Only the field that belongs to the
role is ever stored.
"""

import logging
from typing import Union

from pymongo.errors import DuplicateKeyError

from jobportal.core.auth import hash_password, verify_password, create_access_token
from jobportal.core.errors import Conflict, InvalidCredentials, NotFound
from jobportal.schemas.schemas import StudentRegistration, RecruiterRegistration
from jobportal.services.mongo_service import UserCollection

logger = logging.getLogger(__name__)


class AuthService:

    def __init__(self):
        self.users = UserCollection()

    def register(self, registration: Union[StudentRegistration, RecruiterRegistration]) -> dict:
        """Create a user and return it with a fresh token. Conflict if the email is taken."""
        if self.users.get_by_email(registration.email):
            raise Conflict("User already exists")

        user = {
            "name": registration.name,
            "email": registration.email,
            "password_hash": hash_password(registration.password),
            "role": registration.role
        }
        if isinstance(registration, RecruiterRegistration):
            user["company"] = registration.company
        else:
            user["skills"] = registration.skills

        try:
            created = self.users.insert(user)
        except DuplicateKeyError:
            raise Conflict("User already exists")

        logger.info("Registered %s %s", created["role"], created["id"])
        return self._with_token(created)

    def login(self, email: str, password: str) -> dict:
        user = self.users.get_by_email(email)
        if not user or not verify_password(password, user["password_hash"]):
            raise InvalidCredentials("Invalid credentials")
        return self._with_token(user)

    def get_user(self, user_id: str) -> dict:
        user = self.users.get_by_id(user_id)
        if not user:
            raise NotFound("User not found")
        user.pop("password_hash", None)
        return user

    @staticmethod
    def _with_token(user: dict) -> dict:
        return {
            "id": user["id"],
            "name": user["name"],
            "email": user["email"],
            "role": user["role"],
            "token": create_access_token(data={"sub": user["id"], "role": user["role"]})
        }


def get_auth_service() -> AuthService:
    """Get auth service instance."""
    return AuthService()
