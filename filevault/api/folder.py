from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from filevault.api.common import ERROR_RESPONSES, grant_data, link_data, node_data
from filevault.api.deps import get_node_service, get_sharing_service
from filevault.configs.settings import settings
from filevault.consts.node_type import NodeType
from filevault.schemas.node import DeleteResult, FolderCreateRequest, MoveRequest, NodeResponse, RenameRequest
from filevault.schemas.permission import PermissionResponse, ShareRequest
from filevault.schemas.public_link import PublicLinkResponse
from filevault.schemas.response import ApiResponse
from filevault.services import NodeService, SharingService
from filevault.utils.api_response import created, ok, paginated
from filevault.utils.verify_token import get_current_user_id

router = APIRouter(tags=["Folders"], responses=ERROR_RESPONSES)


@router.post(
    "",
    response_model=ApiResponse[NodeResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create Folder",
)
async def create_folder(
    body: FolderCreateRequest,
    user_id: str = Depends(get_current_user_id),
    service: NodeService = Depends(get_node_service),
):
    folder = await service.create_folder(user_id, body.name, body.parent_id)
    return created(node_data(folder), message="Folder created successfully")


@router.get("", response_model=ApiResponse[List[NodeResponse]], summary="List Folders")
async def list_folders(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    user_id: str = Depends(get_current_user_id),
    service: NodeService = Depends(get_node_service),
):
    items, total = await service.list_nodes(user_id, NodeType.FOLDER, page, limit)
    return paginated(
        request=request,
        items=[node_data(n) for n in items],
        total=total,
        page=page,
        limit=limit,
        message="Folders retrieved successfully",
    )


@router.get(
    "/contents",
    response_model=ApiResponse[List[NodeResponse]],
    summary="List Folder Contents",
    description="Direct children of a folder (or of the root when parent_id is omitted), folders first then by name",
)
async def list_contents(
    request: Request,
    parent_id: Optional[str] = Query(None, description="Folder id, omit for the root"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    user_id: str = Depends(get_current_user_id),
    service: NodeService = Depends(get_node_service),
):
    items, total = await service.list_children(user_id, parent_id, page, limit)
    return paginated(
        request=request,
        items=[node_data(n) for n in items],
        total=total,
        page=page,
        limit=limit,
        message="Folder contents retrieved successfully",
    )


@router.get("/{folder_id}", response_model=ApiResponse[NodeResponse], summary="Get Folder")
async def get_folder(
    folder_id: str,
    user_id: str = Depends(get_current_user_id),
    service: NodeService = Depends(get_node_service),
):
    folder = await service.get_node(user_id, folder_id, NodeType.FOLDER)
    return ok(data=node_data(folder), message="Folder retrieved successfully")


@router.patch("/{folder_id}/rename", response_model=ApiResponse[NodeResponse], summary="Rename Folder")
async def rename_folder(
    folder_id: str,
    body: RenameRequest,
    user_id: str = Depends(get_current_user_id),
    service: NodeService = Depends(get_node_service),
):
    folder = await service.rename(user_id, folder_id, body.name, NodeType.FOLDER)
    return ok(data=node_data(folder), message="Folder renamed successfully")


@router.patch("/{folder_id}/move", response_model=ApiResponse[NodeResponse], summary="Move Folder")
async def move_folder(
    folder_id: str,
    body: MoveRequest,
    user_id: str = Depends(get_current_user_id),
    service: NodeService = Depends(get_node_service),
):
    folder = await service.move_folder(user_id, folder_id, body.target_folder_id)
    return ok(data=node_data(folder), message="Folder moved successfully")


@router.delete(
    "/{folder_id}",
    response_model=ApiResponse[DeleteResult],
    summary="Delete Folder",
    description="Move the folder and its current contents to the trash",
)
async def delete_folder(
    folder_id: str,
    user_id: str = Depends(get_current_user_id),
    service: NodeService = Depends(get_node_service),
):
    result = await service.soft_delete(user_id, folder_id, NodeType.FOLDER)
    return ok(data=DeleteResult(**result).model_dump(mode="json"), message="Folder moved to trash")


@router.post(
    "/{folder_id}/share",
    response_model=ApiResponse[List[PermissionResponse]],
    status_code=status.HTTP_201_CREATED,
    summary="Share Folder",
)
async def share_folder(
    folder_id: str,
    body: ShareRequest,
    user_id: str = Depends(get_current_user_id),
    service: SharingService = Depends(get_sharing_service),
):
    grants = await service.grant(user_id, folder_id, body.users, NodeType.FOLDER)
    return created([grant_data(g) for g in grants], message="Folder shared successfully")


@router.post("/{folder_id}/public-link", response_model=ApiResponse[PublicLinkResponse], summary="Create Public Link")
async def create_folder_link(
    folder_id: str,
    user_id: str = Depends(get_current_user_id),
    service: SharingService = Depends(get_sharing_service),
):
    link, is_new = await service.create_public_link(user_id, folder_id, NodeType.FOLDER)
    if is_new:
        return created(link_data(link), message="Public link created")
    return ok(data=link_data(link), message="Public link already exists")
