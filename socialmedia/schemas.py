from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime


# --- User ---

class UserBase(BaseModel):
    username: str = Field(max_length=50)
    email: str = Field(max_length=255)
    display_name: str | None = None
    bio: str | None = None


class UserCreate(UserBase):
    pass


class UserResponse(UserBase):
    id: str
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class UserDetail(UserResponse):
    posts: list["PostResponse"] = []


# --- Follower ---

class FollowerResponse(BaseModel):
    follower_id: str
    followee_id: str
    date_created: datetime
    model_config = ConfigDict(from_attributes=True)


# --- Post ---

class FilePayload(BaseModel):
    """Media uploaded with a new post, already read into memory."""

    filename: str | None = None
    content_type: str | None = None
    data: bytes = b""


class CreatePostRequest(BaseModel):
    caption: str | None = None
    description: str | None = None
    file: FilePayload | None = None


class UpdatePostRequest(BaseModel):
    # Lengths are checked by validators.validate_update_post so that a
    # violation is reported as a BadRequest result, not a 422.
    id: str | None = None
    caption: str | None = None
    description: str | None = None


class PostResponse(BaseModel):
    id: str
    caption: str
    description: str
    file_name: str
    user_id: str
    date_created: datetime
    date_modified: datetime | None
    model_config = ConfigDict(from_attributes=True)


# Required for forward-reference resolution (UserDetail.posts)
UserDetail.model_rebuild()
