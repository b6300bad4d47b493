"""
Database seeding and initialization functions.

This module contains functions that ensure critical data exists in the
database: the bootstrap administrator and the default work schedules.
Every function is idempotent and can be called multiple times safely.
"""

import logging
from typing import List, Optional

from odonto.core.security import hash_password
from odonto.db.base import User, WorkSchedule
from odonto.db.session import SessionLocal
from odonto.domain.entities import Role

logger = logging.getLogger(__name__)

DEFAULT_WORK_SCHEDULES = (
    ("Morning", "Monday to Saturday, 08:00 to 12:00"),
    ("Afternoon", "Monday to Saturday, 14:00 to 18:00"),
    ("Full day", "Monday to Saturday, 08:00 to 12:00 and 14:00 to 18:00"),
)


def ensure_admin_user(email: str, password: str, name: str = "Administrator") -> bool:
    """
    Ensure an administrator account exists for `email`.

    If the user doesn't exist, it is created with the given password. If it
    exists, it is promoted to admin and re-activated; the password is only
    replaced when the account has none.

    Returns:
        True if anything was created or changed, False otherwise
    """
    email = email.strip().lower()
    with SessionLocal() as db:
        user: Optional[User] = db.query(User).filter(User.email == email).first()

        if user is None:
            db.add(
                User(
                    email=email,
                    name=name,
                    role=Role.ADMIN.value,
                    active_flag=True,
                    password_hash=hash_password(password),
                )
            )
            db.commit()
            logger.info("Admin user created", extra={"context": {"email": email}})
            return True

        updated = False
        if user.role != Role.ADMIN.value:
            user.role = Role.ADMIN.value
            updated = True
        if not user.active_flag:
            user.active_flag = True
            updated = True
        if not user.password_hash:
            user.password_hash = hash_password(password)
            updated = True

        if updated:
            db.commit()
            logger.info(
                "Admin user updated",
                extra={"context": {"user_id": user.id, "email": email}},
            )
        else:
            logger.debug(
                "Admin user already exists and is correct",
                extra={"context": {"user_id": user.id}},
            )
        return updated


def seed_work_schedules() -> List[str]:
    """Create the default work schedules that are missing; return their names."""
    created = []
    with SessionLocal() as db:
        existing = {name for (name,) in db.query(WorkSchedule.name).all()}
        for name, description in DEFAULT_WORK_SCHEDULES:
            if name in existing:
                continue
            db.add(WorkSchedule(name=name, description=description))
            created.append(name)
        if created:
            db.commit()
            logger.info(
                "Work schedules seeded", extra={"context": {"created": created}}
            )
    return created
