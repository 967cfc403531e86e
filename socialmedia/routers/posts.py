from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import StreamingResponse

from socialmedia.dependencies import FeedParams, get_caller_id, get_post_service, unwrap_result
from socialmedia.schemas import CreatePostRequest, FilePayload, PostResponse, UpdatePostRequest
from socialmedia.services.post_service import PostService

router = APIRouter(prefix="/api/v1/posts", tags=["posts"])

@router.get("/feed", response_model=list[PostResponse])
async def get_feed(
    params: FeedParams = Depends(),
    caller_id: str = Depends(get_caller_id),
    service: PostService = Depends(get_post_service),
):
    return await service.get_relevant_posts(caller_id, params.limit)

@router.get("/content/{file_name:path}")
async def get_post_content(
    file_name: str,
    caller_id: str = Depends(get_caller_id),
    service: PostService = Depends(get_post_service),
):
    content = await service.get_post_content(file_name)
    if content is None:
        raise HTTPException(status_code=404, detail="File not found")
    return StreamingResponse(content.chunks, media_type=content.content_type)

@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: str,
    caller_id: str = Depends(get_caller_id),
    service: PostService = Depends(get_post_service),
):
    post = await service.get_post_by_id(post_id)
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found.")
    return post

@router.post("", status_code=201, response_model=PostResponse)
async def create_post(
    file: UploadFile | None = File(None),
    caption: str | None = Form(None),
    description: str | None = Form(None),
    caller_id: str = Depends(get_caller_id),
    service: PostService = Depends(get_post_service),
):
    payload = None
    if file is not None:
        payload = FilePayload(
            filename=file.filename,
            content_type=file.content_type,
            data=await file.read(),
        )
    request = CreatePostRequest(caption=caption, description=description, file=payload)
    return unwrap_result(await service.post(request, caller_id))

@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    data: UpdatePostRequest,
    caller_id: str = Depends(get_caller_id),
    service: PostService = Depends(get_post_service),
):
    return unwrap_result(await service.update_post(post_id, data, caller_id))

@router.delete("/{post_id}", status_code=204)
async def delete_post(
    post_id: str,
    caller_id: str = Depends(get_caller_id),
    service: PostService = Depends(get_post_service),
):
    unwrap_result(await service.delete_post(post_id, caller_id))
