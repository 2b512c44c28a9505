import logging
from typing import Any, Dict, Optional

from scheduler.core.security import create_user_token, verify_password
from scheduler.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Username/password authentication for staff users and API clients."""

    def __init__(self, repo: UserRepository) -> None:
        self.repo = repo

    def authenticate(self, username: str, password: str) -> Optional[Dict[str, Any]]:
        """Check credentials of any staff user.

        Returns:
            Dict with ``user_id``, ``username`` and ``role`` on success,
            None otherwise
        """
        if not username or not password:
            return None

        credentials = self.repo.find_credentials(username)
        if credentials is None or not verify_password(
            password, credentials["password_hash"]
        ):
            logger.warning(
                "Authentication failed",
                extra={"context": {"username": username}},
            )
            return None

        logger.info(
            "User authenticated",
            extra={
                "context": {
                    "user_id": credentials["user_id"],
                    "role": credentials["role"],
                }
            },
        )
        return {
            "user_id": credentials["user_id"],
            "username": credentials["username"],
            "role": credentials["role"],
        }

    def issue_token(self, user_data: Dict[str, Any]) -> str:
        return create_user_token(
            user_data["user_id"], user_data["username"], user_data["role"]
        )
