from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import StreamingResponse

from filevault.api.common import ERROR_RESPONSES, grant_data, link_data, node_data
from filevault.api.deps import get_node_service, get_search_service, get_sharing_service
from filevault.configs.settings import settings
from filevault.consts.node_type import NodeType
from filevault.schemas.node import (
    CopyRequest, DeleteResult, MoveRequest, NodeResponse, RenameRequest, SignedUrlResponse,
)
from filevault.schemas.permission import PermissionResponse, PermissionUpdateRequest, ShareRequest
from filevault.schemas.public_link import PublicLinkResponse
from filevault.schemas.response import ApiResponse
from filevault.services import NodeService, SearchService, SharingService
from filevault.utils.api_response import created, ok, paginated
from filevault.utils.verify_token import get_current_user_id

router = APIRouter(tags=["Files"], responses=ERROR_RESPONSES)


@router.get("", response_model=ApiResponse[List[NodeResponse]], summary="List Files")
async def list_files(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    user_id: str = Depends(get_current_user_id),
    service: NodeService = Depends(get_node_service),
):
    items, total = await service.list_nodes(user_id, NodeType.FILE, page, limit)
    return paginated(
        request=request,
        items=[node_data(n) for n in items],
        total=total,
        page=page,
        limit=limit,
        message="Files retrieved successfully",
    )


@router.get(
    "/recent",
    response_model=ApiResponse[List[NodeResponse]],
    summary="Recent Files",
    description="Most recently updated files, newest first",
)
async def recent_files(
    user_id: str = Depends(get_current_user_id),
    service: SearchService = Depends(get_search_service),
):
    files = await service.recent(user_id)
    return ok(data=[node_data(f) for f in files], message="Recent files retrieved successfully")


@router.get("/starred", response_model=ApiResponse[List[NodeResponse]], summary="Starred Files")
async def starred_files(
    user_id: str = Depends(get_current_user_id),
    service: SearchService = Depends(get_search_service),
):
    files = await service.starred(user_id)
    return ok(data=[node_data(f) for f in files], message="Starred files retrieved successfully")


@router.get("/{file_id}", response_model=ApiResponse[NodeResponse], summary="Get File Metadata")
async def get_file(
    file_id: str,
    user_id: str = Depends(get_current_user_id),
    service: NodeService = Depends(get_node_service),
):
    file = await service.get_node(user_id, file_id, NodeType.FILE)
    return ok(data=node_data(file), message="File retrieved successfully")


@router.patch("/{file_id}/rename", response_model=ApiResponse[NodeResponse], summary="Rename File")
async def rename_file(
    file_id: str,
    body: RenameRequest,
    user_id: str = Depends(get_current_user_id),
    service: NodeService = Depends(get_node_service),
):
    file = await service.rename(user_id, file_id, body.name, NodeType.FILE)
    return ok(data=node_data(file), message="File renamed successfully")


@router.patch("/{file_id}/move", response_model=ApiResponse[NodeResponse], summary="Move File")
async def move_file(
    file_id: str,
    body: MoveRequest,
    user_id: str = Depends(get_current_user_id),
    service: NodeService = Depends(get_node_service),
):
    file = await service.move_file(user_id, file_id, body.target_folder_id)
    return ok(data=node_data(file), message="File moved successfully")


@router.post(
    "/{file_id}/copy",
    response_model=ApiResponse[NodeResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Copy File",
    description="Create a new file record pointing at the same stored object",
)
async def copy_file(
    file_id: str,
    body: Optional[CopyRequest] = None,
    user_id: str = Depends(get_current_user_id),
    service: NodeService = Depends(get_node_service),
):
    copy = await service.copy_file(user_id, file_id, body.parent_id if body else None)
    return created(node_data(copy), message="File copied successfully")


@router.delete("/{file_id}", response_model=ApiResponse[DeleteResult], summary="Delete File")
async def delete_file(
    file_id: str,
    user_id: str = Depends(get_current_user_id),
    service: NodeService = Depends(get_node_service),
):
    result = await service.soft_delete(user_id, file_id, NodeType.FILE)
    return ok(data=DeleteResult(**result).model_dump(mode="json"), message="File moved to trash")


@router.get("/{file_id}/download", summary="Download File", response_class=StreamingResponse)
async def download_file(
    file_id: str,
    user_id: str = Depends(get_current_user_id),
    service: SharingService = Depends(get_sharing_service),
):
    file, stream = await service.open_download(user_id, file_id)
    headers = {"Content-Disposition": f"attachment; filename*=UTF-8''{quote(file.name)}"}
    return StreamingResponse(
        stream,
        media_type=file.mime_type or "application/octet-stream",
        headers=headers,
    )


@router.get("/{file_id}/signed-url", response_model=ApiResponse[SignedUrlResponse], summary="Signed Download URL")
async def signed_url(
    file_id: str,
    expires_in: int = Query(settings.SIGNED_URL_DEFAULT_TTL, ge=1, le=7 * 24 * 3600),
    user_id: str = Depends(get_current_user_id),
    service: SharingService = Depends(get_sharing_service),
):
    url, ttl = await service.create_signed_download_url(user_id, file_id, expires_in)
    return ok(data=SignedUrlResponse(url=url, expires_in=ttl).model_dump(), message="Signed URL generated")


@router.post(
    "/{file_id}/share",
    response_model=ApiResponse[List[PermissionResponse]],
    status_code=status.HTTP_201_CREATED,
    summary="Share File",
)
async def share_file(
    file_id: str,
    body: ShareRequest,
    user_id: str = Depends(get_current_user_id),
    service: SharingService = Depends(get_sharing_service),
):
    grants = await service.grant(user_id, file_id, body.users, NodeType.FILE)
    return created([grant_data(g) for g in grants], message="File shared successfully")


@router.get("/{file_id}/permissions", response_model=ApiResponse[List[PermissionResponse]], summary="List Permissions")
async def list_permissions(
    file_id: str,
    user_id: str = Depends(get_current_user_id),
    service: SharingService = Depends(get_sharing_service),
):
    grants = await service.list_grants(user_id, file_id)
    return ok(data=[grant_data(g) for g in grants], message="Permissions retrieved successfully")


@router.patch(
    "/{file_id}/permissions/{permission_id}",
    response_model=ApiResponse[PermissionResponse],
    summary="Update Permission",
)
async def update_permission(
    file_id: str,
    permission_id: str,
    body: PermissionUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    service: SharingService = Depends(get_sharing_service),
):
    grant = await service.update_grant(user_id, file_id, permission_id, body.permission)
    return ok(data=grant_data(grant), message="Permission updated successfully")


@router.delete("/{file_id}/permissions/{permission_id}", response_model=ApiResponse[None], summary="Remove Permission")
async def remove_permission(
    file_id: str,
    permission_id: str,
    user_id: str = Depends(get_current_user_id),
    service: SharingService = Depends(get_sharing_service),
):
    await service.revoke_grant(user_id, file_id, permission_id)
    return ok(message="Permission removed successfully")


@router.post("/{file_id}/public-link", response_model=ApiResponse[PublicLinkResponse], summary="Create Public Link")
async def create_file_link(
    file_id: str,
    user_id: str = Depends(get_current_user_id),
    service: SharingService = Depends(get_sharing_service),
):
    link, is_new = await service.create_public_link(user_id, file_id, NodeType.FILE)
    if is_new:
        return created(link_data(link), message="Public link created")
    return ok(data=link_data(link), message="Public link already exists")


@router.post("/{file_id}/star", response_model=ApiResponse[dict], summary="Star File")
async def star_file(
    file_id: str,
    user_id: str = Depends(get_current_user_id),
    service: SearchService = Depends(get_search_service),
):
    star, is_new = await service.star(user_id, file_id)
    data = {"id": str(star.id), "file_id": star.file_id}
    if is_new:
        return created(data, message="File starred")
    return ok(data=data, message="File is already starred")


@router.delete("/{file_id}/star", response_model=ApiResponse[dict], summary="Unstar File")
async def unstar_file(
    file_id: str,
    user_id: str = Depends(get_current_user_id),
    service: SearchService = Depends(get_search_service),
):
    removed = await service.unstar(user_id, file_id)
    message = "File unstarred" if removed else "File is not starred"
    return ok(data={"file_id": file_id, "removed": removed}, message=message)
