from typing import List

from fastapi import APIRouter, Depends, Query, Request

from filevault.api.common import ERROR_RESPONSES, node_data
from filevault.api.deps import get_node_service
from filevault.configs.settings import settings
from filevault.schemas.node import NodeResponse
from filevault.schemas.response import ApiResponse
from filevault.services import NodeService
from filevault.utils.api_response import paginated
from filevault.utils.verify_token import get_current_user_id

router = APIRouter(tags=["Trash"], responses=ERROR_RESPONSES)


@router.get("", response_model=ApiResponse[List[NodeResponse]], summary="List Trash")
async def list_trash(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    user_id: str = Depends(get_current_user_id),
    service: NodeService = Depends(get_node_service),
):
    items, total = await service.list_trash(user_id, page, limit)
    return paginated(
        request=request,
        items=[node_data(n) for n in items],
        total=total,
        page=page,
        limit=limit,
        message="Trash retrieved successfully",
    )
