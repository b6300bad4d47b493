import logging
from typing import Optional

from odonto.core.security import verify_password
from odonto.domain.entities import User as DomainUser
from odonto.domain.interfaces import IUserReader

logger = logging.getLogger(__name__)


class UserService:
    """Application service for user-related use-cases following SOLID principles.

    This service:
    - Keeps business rules separate from controllers and repositories (Single Responsibility)
    - Depends on abstractions (IUserReader) not concrete implementations (Dependency Inversion)
    - Works with domain entities, not database models
    """

    def __init__(self, repo: IUserReader) -> None:
        self.repo = repo

    def authenticate_local(self, email: str, password: str) -> Optional[DomainUser]:
        """Authenticate a user with email and password.

        Business Rules:
        - Unknown emails, inactive accounts and wrong passwords all fail
          the same way (None) so callers cannot tell them apart

        Returns:
            User domain entity if authentication successful, None otherwise
        """
        email = (email or "").strip().lower()
        if not email or not password:
            return None

        user = self.repo.get_by_email(email)
        if user is None or not user.is_active:
            logger.info("Login refused", extra={"context": {"email": email}})
            return None

        if not verify_password(password, self.repo.get_password_hash(email)):
            logger.info(
                "Login refused: wrong password",
                extra={"context": {"user_id": user.id}},
            )
            return None

        return user
