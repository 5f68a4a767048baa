"""Pydantic request/response schemas for svc_user.

Response shapes are fixed by the public HTTP contract and are returned
unwrapped (no envelope).
"""

from pydantic import BaseModel

from src.svc_user.domain.models import BatchInsertResult, NewUser, User


class UserIn(BaseModel):
    # Optional here so that missing fields reach UserService validation
    username: str | None = None
    email: str | None = None

    def to_domain(self) -> NewUser:
        return NewUser(username=self.username, email=self.email)


class BatchInsertRequest(BaseModel):
    users: list[UserIn]


class UserOut(BaseModel):
    id: int
    username: str
    email: str

    @classmethod
    def from_domain(cls, user: User) -> "UserOut":
        return cls(id=user.id, username=user.username, email=user.email)


class BatchInsertResultOut(BaseModel):
    inserted: int
    ids: list[int]

    @classmethod
    def from_domain(cls, result: BatchInsertResult) -> "BatchInsertResultOut":
        return cls(inserted=result.inserted, ids=list(result.ids))


class BatchInsertResponse(BaseModel):
    message: str = "Batch insert successful"
    result: BatchInsertResultOut


class CachedUsersResponse(BaseModel):
    users: list[UserOut]
