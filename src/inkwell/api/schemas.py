"""Response envelope shared by all endpoints."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """``{success, message?, data?, count?}``.

    Routes use ``response_model_exclude_none=True`` so absent parts are
    omitted rather than sent as null.
    """

    success: bool = True
    message: str | None = None
    data: T | None = None
    count: int | None = None
