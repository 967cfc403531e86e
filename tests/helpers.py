"""Shared test doubles and builders."""
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from socialmedia.models import User
from socialmedia.storage import BlobContent, BlobStore, BlobStoreError


class InMemoryBlobStore(BlobStore):
    """Dict-backed blob store with switches that make upload or delete fail."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.blobs: dict[str, tuple[bytes, str]] = {}
        self.fail_upload = False
        self.fail_delete = False
        self.uploads: list[str] = []
        self.deletes: list[str] = []

    async def upload(self, data: bytes, content_type: str | None = None, extension: str = "") -> str:
        if self.fail_upload:
            raise BlobStoreError("upload unavailable")
        name = self.new_name("posts", extension)
        self.blobs[name] = (data, content_type or "application/octet-stream")
        self.uploads.append(name)
        return name

    async def download(self, name: str) -> BlobContent | None:
        if name not in self.blobs:
            return None
        data, content_type = self.blobs[name]
        return BlobContent(name=name, content_type=content_type, chunks=iter([data]))

    async def delete(self, name: str) -> None:
        self.deletes.append(name)
        if self.fail_delete:
            raise BlobStoreError("delete unavailable")
        self.blobs.pop(name, None)


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def as_user(user_id: str) -> dict[str, str]:
    """Request headers identifying the authenticated caller."""
    return {"X-User-Id": user_id}


def random_id() -> str:
    return str(uuid.uuid4())


async def create_user(db: AsyncSession, username: str) -> User:
    user = User(username=username, email=f"{username}@example.com")
    db.add(user)
    await db.commit()
    return user
