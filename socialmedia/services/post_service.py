"""
Post service: lifecycle of a post across the database and the blob store.

Design notes
------------
- The two stores fail independently and share no transaction, so the
  order of calls is what keeps them consistent:

  * create: upload the media, then insert the row.  A row never points at
    a blob that was not stored; a failed insert leaves an orphaned blob,
    which is logged and left for garbage collection.
  * delete: delete the blob, then remove the row.  If the blob delete
    fails the row survives and still names the blob, so the caller can
    retry the whole delete.

- Every mutating operation returns a ``Result``.  Only storage failures
  (``BlobStoreError``, ``SQLAlchemyError``) are converted to a
  ``Problem``; anything else, including cancellation, propagates.
- The caller's identity is an explicit ``caller_id`` argument.  Lookups
  for update and delete match on id and owner in one predicate.
- No retries and no caching happen here.
"""
import logging
import os
from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError

from socialmedia.models import Post
from socialmedia.repositories.post_repository import PostRepository
from socialmedia.result import (
    INVALID_ID,
    INVALID_INPUT,
    POST_NOT_FOUND,
    UNEXPECTED_PROBLEM,
    ErrorType,
    Result,
)
from socialmedia.schemas import CreatePostRequest, UpdatePostRequest
from socialmedia.storage import BlobContent, BlobStore, BlobStoreError
from socialmedia.validators import (
    is_valid_identifier,
    validate_create_post,
    validate_update_post,
)

logger = logging.getLogger(__name__)


class PostService:
    def __init__(self, repository: PostRepository, blob_store: BlobStore) -> None:
        self.repository = repository
        self.blob_store = blob_store

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_post_by_id(self, post_id: str) -> Post | None:
        """Return the post, or None when it does not exist or *post_id* is malformed."""
        if not is_valid_identifier(post_id):
            return None
        return await self.repository.find(post_id)

    async def get_relevant_posts(self, caller_id: str, limit: int) -> Sequence[Post]:
        """
        Return the newest *limit* posts written by users *caller_id*
        follows.  A non-positive *limit* yields an empty list without
        touching the database.
        """
        if limit <= 0:
            return []
        return await self.repository.feed_for(caller_id, limit)

    async def get_post_content(self, file_name: str) -> BlobContent | None:
        return await self.blob_store.download(file_name)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def post(self, request: CreatePostRequest, caller_id: str) -> Result[Post]:
        if not validate_create_post(request).is_valid:
            return Result.failure(ErrorType.BAD_REQUEST, INVALID_INPUT)

        payload = request.file
        extension = os.path.splitext(payload.filename or "")[1]
        try:
            file_name = await self.blob_store.upload(
                payload.data, payload.content_type, extension
            )
        except BlobStoreError:
            logger.exception("Media upload failed for user %s", caller_id)
            return Result.failure(ErrorType.PROBLEM, UNEXPECTED_PROBLEM)

        post = Post(
            caption=request.caption or "",
            description=request.description or "",
            user_id=caller_id,
            file_name=file_name,
        )
        try:
            await self.repository.insert(post)
        except SQLAlchemyError:
            await self.repository.rollback()
            logger.exception(
                "Persisting post %s failed; blob %s is orphaned", post.id, file_name
            )
            return Result.failure(ErrorType.PROBLEM, UNEXPECTED_PROBLEM)

        logger.info("User %s created post %s (%s)", caller_id, post.id, file_name)
        return Result.success(post)

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    async def update_post(
        self, post_id: str, request: UpdatePostRequest, caller_id: str
    ) -> Result[Post]:
        validation = validate_update_post(request)
        if not validation.is_valid:
            return Result.failure(ErrorType.BAD_REQUEST, validation.error_message())

        # The path id and the body id must agree.
        if not is_valid_identifier(post_id) or post_id != request.id:
            return Result.failure(ErrorType.BAD_REQUEST, INVALID_ID)

        try:
            post = await self.repository.find_owned(post_id, caller_id)
            if post is None:
                return Result.failure(ErrorType.NOT_FOUND, POST_NOT_FOUND)

            if request.caption is not None:
                post.caption = request.caption
            if request.description is not None:
                post.description = request.description
            post.date_modified = datetime.now(timezone.utc)

            await self.repository.update(post)
        except SQLAlchemyError:
            await self.repository.rollback()
            logger.exception("Updating post %s failed", post_id)
            return Result.failure(ErrorType.PROBLEM, UNEXPECTED_PROBLEM)

        logger.info("User %s updated post %s", caller_id, post_id)
        return Result.success(post)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def delete_post(self, post_id: str, caller_id: str) -> Result[bool]:
        if not is_valid_identifier(post_id):
            return Result.failure(ErrorType.BAD_REQUEST, INVALID_INPUT)

        try:
            post = await self.repository.find_owned(post_id, caller_id)
        except SQLAlchemyError:
            await self.repository.rollback()
            logger.exception("Looking up post %s for deletion failed", post_id)
            return Result.failure(ErrorType.PROBLEM, UNEXPECTED_PROBLEM)
        if post is None:
            return Result.failure(ErrorType.NOT_FOUND, POST_NOT_FOUND)

        # Read before any rollback: rollback expires the instance.
        file_name = post.file_name
        try:
            await self.blob_store.delete(file_name)
        except BlobStoreError:
            # Keep the row: it is the only record of the blob to retry against.
            logger.exception("Deleting blob %s failed; post %s kept", file_name, post_id)
            return Result.failure(ErrorType.PROBLEM, UNEXPECTED_PROBLEM)

        try:
            await self.repository.remove(post)
        except SQLAlchemyError:
            await self.repository.rollback()
            logger.exception(
                "Removing post %s failed after its blob %s was deleted",
                post_id,
                file_name,
            )
            return Result.failure(ErrorType.PROBLEM, UNEXPECTED_PROBLEM)

        logger.info("User %s deleted post %s", caller_id, post_id)
        return Result.success(True)
