from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from socialmedia.database import get_db
from socialmedia.dependencies import get_caller_id, unwrap_result
from socialmedia.schemas import FollowerResponse
from socialmedia.services import follower_service

router = APIRouter(prefix="/api/v1/followers", tags=["followers"])

@router.get("", response_model=list[FollowerResponse])
async def list_followers(
    caller_id: str = Depends(get_caller_id),
    db: AsyncSession = Depends(get_db),
):
    return await follower_service.get_followers(db, caller_id)

@router.get("/following", response_model=list[FollowerResponse])
async def list_following(
    caller_id: str = Depends(get_caller_id),
    db: AsyncSession = Depends(get_db),
):
    return await follower_service.get_following(db, caller_id)

@router.get("/following/{user_id}", response_model=FollowerResponse)
async def get_followee(
    user_id: str,
    caller_id: str = Depends(get_caller_id),
    db: AsyncSession = Depends(get_db),
):
    edge = await follower_service.get_followee(db, caller_id, user_id)
    if edge is None:
        raise HTTPException(status_code=404, detail="Not following this user.")
    return edge

@router.get("/{user_id}", response_model=FollowerResponse)
async def get_follower(
    user_id: str,
    caller_id: str = Depends(get_caller_id),
    db: AsyncSession = Depends(get_db),
):
    edge = await follower_service.get_follower(db, caller_id, user_id)
    if edge is None:
        raise HTTPException(status_code=404, detail="This user does not follow you.")
    return edge

@router.post("/{user_id}", status_code=201, response_model=FollowerResponse)
async def follow(
    user_id: str,
    caller_id: str = Depends(get_caller_id),
    db: AsyncSession = Depends(get_db),
):
    return unwrap_result(await follower_service.follow(db, caller_id, user_id))

@router.delete("/{user_id}", status_code=204)
async def unfollow(
    user_id: str,
    caller_id: str = Depends(get_caller_id),
    db: AsyncSession = Depends(get_db),
):
    unwrap_result(await follower_service.unfollow(db, caller_id, user_id))
