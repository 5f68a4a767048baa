"""UserRepository — concrete implementation of UserRepositoryProtocol.

All queries use raw text() SQL (no ORM). Transactions are owned by the
caller; this layer only executes statements on the session it is given.
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.svc_user.domain.models import NewUser, User

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_INSERT_USER_SQL = text("""
    INSERT INTO users (username, email)
    VALUES (:username, :email)
    RETURNING id
""")

_LIST_USERS_SQL = text("""
    SELECT id, username, email
    FROM users
    ORDER BY id
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_user(row: Any) -> User:
    return User(id=row.id, username=row.username, email=row.email)


class UserRepository:
    async def insert_user(self, db: AsyncSession, user: NewUser) -> int:
        result = await db.execute(
            _INSERT_USER_SQL,
            {"username": user.username, "email": user.email},
        )
        return int(result.scalar_one())

    async def list_users(self, db: AsyncSession) -> list[User]:
        result = await db.execute(_LIST_USERS_SQL)
        return [_row_to_user(row) for row in result.fetchall()]
