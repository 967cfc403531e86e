from typing import TypeVar

from fastapi import Depends, Header, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from socialmedia.config import settings
from socialmedia.database import get_db
from socialmedia.repositories.post_repository import PostRepository
from socialmedia.result import ErrorType, Result
from socialmedia.services.post_service import PostService
from socialmedia.storage import BlobStore, get_blob_store
from socialmedia.validators import is_valid_identifier

T = TypeVar("T")

STATUS_BY_ERROR_TYPE: dict[ErrorType, int] = {
    ErrorType.BAD_REQUEST: 400,
    ErrorType.NOT_FOUND: 404,
    ErrorType.PROBLEM: 500,
}


def get_caller_id(x_user_id: str | None = Header(None)) -> str:
    """
    Identity of the authenticated caller.

    Authentication happens in front of this service; the gateway forwards
    the verified user id in the ``X-User-Id`` header.
    """
    if not is_valid_identifier(x_user_id):
        raise HTTPException(status_code=401, detail="Not authenticated")
    return x_user_id


def get_post_service(
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
) -> PostService:
    return PostService(PostRepository(db), blob_store)


def unwrap_result(result: Result[T]) -> T:
    """Return the value of a successful *result*, or raise the matching HTTPException."""
    if result.succeeded:
        return result.value
    fault = result.fault
    raise HTTPException(
        status_code=STATUS_BY_ERROR_TYPE[fault.error_type],
        detail=fault.error_message,
    )


class FeedParams:
    """
    Reusable dependency parsing the ``limit`` query parameter of the feed.

    ``limit`` may be zero or negative, which yields an empty feed rather
    than a validation error; it is clamped to ``settings.MAX_FEED_SIZE``.
    """

    def __init__(
        self,
        limit: int = Query(
            settings.DEFAULT_FEED_SIZE,
            description="Maximum number of posts to return.",
        ),
    ) -> None:
        self.limit = min(limit, settings.MAX_FEED_SIZE)
