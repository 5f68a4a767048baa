"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.svc_user.domain.models import NewUser, User


class UserRepositoryProtocol(Protocol):
    async def insert_user(self, db: AsyncSession, user: NewUser) -> int: ...

    async def list_users(self, db: AsyncSession) -> list[User]: ...
