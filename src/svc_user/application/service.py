"""UserService — batch insert transaction and user listing.

The caller (router) passes the request's db session; the service owns the
transaction boundary for writes so that begin/commit/rollback are logged in
one place.
"""

import asyncio
import logging
from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.svc_common.errors import StoreError, ValidationError
from src.svc_user.domain.models import BatchInsertResult, NewUser, User
from src.svc_user.domain.repository import UserRepositoryProtocol
from src.svc_user.infrastructure.persistence import UserRepository

logger = logging.getLogger(__name__)

# Driver-level connection failures can surface as OSError before SQLAlchemy wraps them
_STORE_FAILURES = (SQLAlchemyError, OSError)


def validate_batch(users: Sequence[NewUser]) -> list[NewUser]:
    """Reject an empty batch or any record without a username and email.

    Runs before any store I/O. Values are stripped of surrounding whitespace.
    """
    if not users:
        raise ValidationError("users must be a non-empty list")

    cleaned: list[NewUser] = []
    for index, user in enumerate(users):
        username = (user.username or "").strip()
        email = (user.email or "").strip()
        if not username:
            raise ValidationError(f"users[{index}]: username is required")
        if not email:
            raise ValidationError(f"users[{index}]: email is required")
        cleaned.append(NewUser(username=username, email=email))
    return cleaned


class UserService:
    def __init__(
        self,
        repo: UserRepositoryProtocol | None = None,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._repo: UserRepositoryProtocol = repo or UserRepository()
        self._timeout = timeout_seconds

    async def list_users(self, db: AsyncSession) -> list[User]:
        try:
            return await self._repo.list_users(db)
        except _STORE_FAILURES as exc:
            raise StoreError("Listing users failed") from exc

    async def batch_insert(
        self, db: AsyncSession, users: Sequence[NewUser]
    ) -> BatchInsertResult:
        """Insert every record in submission order, or none of them.

        Raises ValidationError before touching the store, StoreError (chained
        to the driver error or timeout) after the transaction is rolled back.
        """
        records = validate_batch(users)
        size = len(records)
        ids: list[int] = []

        logger.info("batch insert begin: %d records", size)
        try:
            async with asyncio.timeout(self._timeout):
                async with db.begin():
                    for record in records:
                        ids.append(await self._repo.insert_user(db, record))
        except (*_STORE_FAILURES, TimeoutError) as exc:
            logger.warning("batch insert rolled back: %d records (%r)", size, exc)
            raise StoreError(f"Batch insert of {size} records failed") from exc
        except asyncio.CancelledError:
            logger.warning("batch insert rolled back: %d records (cancelled)", size)
            raise

        logger.info("batch insert commit: %d records", size)
        return BatchInsertResult(inserted=size, ids=ids)
