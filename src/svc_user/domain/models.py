"""Domain models for svc_user — pure dataclasses, no business logic."""

from dataclasses import dataclass, field


@dataclass
class User:
    id: int
    username: str
    email: str


@dataclass
class NewUser:
    """Candidate record from a batch request; fields may still be missing."""

    username: str | None
    email: str | None


@dataclass
class BatchInsertResult:
    inserted: int
    ids: list[int] = field(default_factory=list)  # submission order
