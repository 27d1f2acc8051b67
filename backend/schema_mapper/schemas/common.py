"""Response envelopes shared by the validation endpoints."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Consistent JSON envelope wrapping a single payload."""

    data: T


class ApiListResponse(BaseModel, Generic[T]):
    """Envelope for list payloads; ``count`` always equals ``len(data)``."""

    data: list[T] = Field(default_factory=list)
    count: int = 0

    @classmethod
    def of(cls, items: list[T]) -> "ApiListResponse[T]":
        return cls(data=items, count=len(items))
