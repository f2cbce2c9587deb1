"""In-memory user accounts."""

import hashlib
import hmac
import os
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional

from occ_assistant.analytics.logger import logger


PBKDF2_ITERATIONS = 200_000


def hash_password(password: str, salt: Optional[bytes] = None) -> str:
    """Salted PBKDF2-SHA256 hash encoded as ``salt$digest`` in hex."""
    salt = salt or os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    try:
        salt_hex, _ = encoded.split("$", 1)
        salt = bytes.fromhex(salt_hex)
    except ValueError:
        return False
    return hmac.compare_digest(hash_password(password, salt), encoded)


class UserExistsError(Exception):
    pass


@dataclass
class User:
    id: str
    email: str
    password_hash: str
    first_name: str = ""
    last_name: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def public_profile(self) -> Dict[str, str]:
        return {"email": self.email, "firstName": self.first_name, "lastName": self.last_name}


class UserStore:
    """Users keyed by email, with lookup by id."""

    def __init__(self):
        self._by_email: Dict[str, User] = {}
        self._by_id: Dict[str, User] = {}

    def register(
        self, email: str, password: str, first_name: str = "", last_name: str = ""
    ) -> User:
        if email in self._by_email:
            raise UserExistsError(email)
        user = User(
            id=str(uuid.uuid4()),
            email=email,
            password_hash=hash_password(password),
            first_name=first_name or "",
            last_name=last_name or "",
        )
        self._by_email[email] = user
        self._by_id[user.id] = user
        logger.info(f"Registered user {user.id}")
        return user

    def authenticate(self, email: str, password: str) -> Optional[User]:
        """User for valid credentials, otherwise None."""
        user = self._by_email.get(email)
        if user is None or not verify_password(password, user.password_hash):
            return None
        return user

    def get_by_email(self, email: str) -> Optional[User]:
        return self._by_email.get(email)

    def get_by_id(self, user_id: Optional[str]) -> Optional[User]:
        if not user_id:
            return None
        return self._by_id.get(user_id)

    def clear(self):
        self._by_email.clear()
        self._by_id.clear()


# Global user store
user_store = UserStore()
