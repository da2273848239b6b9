from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from filevault.api.common import ERROR_RESPONSES, node_data
from filevault.api.deps import get_upload_service
from filevault.schemas.node import NodeResponse
from filevault.schemas.response import ApiResponse
from filevault.schemas.upload import (
    ChunkResponse, CompleteUploadRequest, CompleteUploadResponse, InitiateUploadRequest, InitiateUploadResponse,
)
from filevault.services import UploadService
from filevault.utils.api_response import created, ok
from filevault.utils.verify_token import get_current_user_id

router = APIRouter(tags=["Uploads"], responses=ERROR_RESPONSES)


@router.post(
    "",
    response_model=ApiResponse[NodeResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Upload File",
    description="Single-request upload: the bytes go to storage, then the metadata is recorded",
)
async def upload_file(
    file: Optional[UploadFile] = File(None),
    parent_id: Optional[str] = Form(None),
    user_id: str = Depends(get_current_user_id),
    service: UploadService = Depends(get_upload_service),
):
    data = await file.read() if file else None
    node = await service.upload_file(
        user_id,
        data,
        file.filename if file else None,
        size_bytes=len(data) if data is not None else None,
        mime_type=file.content_type if file else None,
        parent_id=parent_id,
    )
    return created(node_data(node), message="File uploaded successfully")


@router.post(
    "/initiate",
    response_model=ApiResponse[InitiateUploadResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Start Multipart Upload",
)
async def initiate_upload(
    body: InitiateUploadRequest,
    user_id: str = Depends(get_current_user_id),
    service: UploadService = Depends(get_upload_service),
):
    result = await service.initiate_upload(user_id, body.name, body.size_bytes, body.mime_type)
    return created(InitiateUploadResponse(**result).model_dump(), message="Upload initiated")


@router.post("/chunk", response_model=ApiResponse[ChunkResponse], summary="Upload Chunk")
async def upload_chunk(
    upload_id: Optional[str] = Form(None, alias="uploadId"),
    part_number: Optional[int] = Form(None, alias="partNumber"),
    key: Optional[str] = Form(None),
    chunk: Optional[UploadFile] = File(None),
    user_id: str = Depends(get_current_user_id),
    service: UploadService = Depends(get_upload_service),
):
    data = await chunk.read() if chunk else None
    result = await service.put_chunk(upload_id, part_number, key, data, user_id=user_id)
    body = ChunkResponse(etag=result["etag"], part_number=result["part_number"]).model_dump(by_alias=True)
    return ok(data=body, message="Chunk uploaded successfully")


@router.post(
    "/complete",
    response_model=ApiResponse[CompleteUploadResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Complete Multipart Upload",
)
async def complete_upload(
    body: CompleteUploadRequest,
    user_id: str = Depends(get_current_user_id),
    service: UploadService = Depends(get_upload_service),
):
    node, location = await service.complete_upload(
        user_id,
        body.upload_id,
        body.key,
        body.parts,
        name=body.name,
        size_bytes=body.size_bytes,
        mime_type=body.mime_type,
        parent_id=body.parent_id,
    )
    data = CompleteUploadResponse(file_id=str(node.id), location=location).model_dump(by_alias=True)
    data["file"] = node_data(node)
    return created(data, message="Upload completed successfully")
