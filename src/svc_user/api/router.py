"""User REST endpoints.

GET  /users             — all users, straight from the store
POST /batchInsertUsers  — atomic batch insert
GET  /cachedData        — all users through the cache-aside lookup
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.svc_cache.cache_aside import CacheAside
from src.svc_common.database import get_db_session
from src.svc_user.api.dependencies import cache_key_for, get_cache, get_user_service
from src.svc_user.application.schemas import (
    BatchInsertRequest,
    BatchInsertResponse,
    BatchInsertResultOut,
    CachedUsersResponse,
    UserOut,
)
from src.svc_user.application.service import UserService

router = APIRouter(tags=["users"])


@router.get("/users", response_model=list[UserOut])
async def list_users(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> list[UserOut]:
    users = await service.list_users(db)
    return [UserOut.from_domain(u) for u in users]


@router.post(
    "/batchInsertUsers",
    status_code=status.HTTP_201_CREATED,
    response_model=BatchInsertResponse,
    summary="Insert a list of users atomically",
)
async def batch_insert_users(
    body: BatchInsertRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> BatchInsertResponse:
    result = await service.batch_insert(db, [u.to_domain() for u in body.users])
    return BatchInsertResponse(result=BatchInsertResultOut.from_domain(result))


@router.get("/cachedData", response_model=CachedUsersResponse)
async def cached_data(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[UserService, Depends(get_user_service)],
    cache: Annotated[CacheAside, Depends(get_cache)],
) -> Any:
    async def load_users() -> dict[str, Any]:
        users = await service.list_users(db)
        return CachedUsersResponse(
            users=[UserOut.from_domain(u) for u in users]
        ).model_dump()

    return await cache.get_or_load(
        cache_key_for(request),
        load_users,
        validate=CachedUsersResponse.model_validate,
    )
