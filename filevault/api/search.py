from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from filevault.api.common import ERROR_RESPONSES, node_data
from filevault.api.deps import get_search_service
from filevault.consts.node_type import NodeType
from filevault.schemas.node import NodeResponse
from filevault.schemas.response import ApiResponse
from filevault.services import SearchService
from filevault.utils.api_response import ok
from filevault.utils.verify_token import get_current_user_id

router = APIRouter(tags=["Search"], responses=ERROR_RESPONSES)


@router.get(
    "",
    response_model=ApiResponse[List[NodeResponse]],
    summary="Search",
    description="Case-insensitive name search over the requester's files and folders, newest first",
)
async def search(
    q: Optional[str] = Query(None, description="Text contained in the name"),
    type: Optional[NodeType] = Query(None, description="file or folder"),
    user_id: str = Depends(get_current_user_id),
    service: SearchService = Depends(get_search_service),
):
    results = await service.search(user_id, q, type)
    return ok(data=[node_data(n) for n in results], message="Search completed successfully")
