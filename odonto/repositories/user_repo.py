from typing import Optional

from odonto.db.base import User as DbUser
from odonto.domain.entities import Role
from odonto.domain.entities import User as DomainUser
from odonto.domain.interfaces import IUserReader


class UserRepository(IUserReader):
    """Repository for User persistence operations following SOLID principles.

    This implementation:
    - Implements IUserReader interface (Dependency Inversion)
    - Handles data access only (Single Responsibility)
    - Maps between domain entities and database models
    """

    def __init__(self, db_session) -> None:
        self.db = db_session

    def get_db_by_id(self, user_id: int) -> Optional[DbUser]:
        """Get user by ID, returning the database model passed to login_user()."""
        return self.db.query(DbUser).filter_by(id=user_id).first()

    def get_db_by_email(self, email: str) -> Optional[DbUser]:
        """Get user by email, returning database model."""
        return self.db.query(DbUser).filter_by(email=email).first()

    def get_by_email(self, email: str) -> Optional[DomainUser]:
        """Get user by email, returning domain entity."""
        db_user = self.get_db_by_email(email)
        return self._to_domain(db_user) if db_user else None

    def get_password_hash(self, email: str) -> Optional[str]:
        db_user = self.get_db_by_email(email)
        return db_user.password_hash if db_user else None

    def _to_domain(self, db_user: DbUser) -> DomainUser:
        """Convert database model to domain entity."""
        return DomainUser(
            id=db_user.id,
            email=db_user.email,
            name=db_user.name,
            # Unknown claims fall back to the least privileged role
            role=Role.from_claim(db_user.role) or Role.GUARDIAN,
            is_active=bool(db_user.active_flag),
            created_at=db_user.created_at,
        )
