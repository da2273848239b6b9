from fastapi import APIRouter, Depends

from filevault.api.common import ERROR_RESPONSES, node_data
from filevault.api.deps import get_sharing_service
from filevault.schemas.public_link import PublicResourceResponse
from filevault.schemas.response import ApiResponse
from filevault.services import SharingService
from filevault.utils.api_response import ok

router = APIRouter(tags=["Public"], responses=ERROR_RESPONSES)


@router.get(
    "/{token}",
    response_model=ApiResponse[PublicResourceResponse],
    summary="Open Public Link",
    description="No authentication. Files come with a download URL valid for one hour",
)
async def get_public_resource(
    token: str,
    service: SharingService = Depends(get_sharing_service),
):
    node, download_url = await service.resolve_public_resource(token)
    return ok(
        data={"node": node_data(node), "download_url": download_url},
        message="Public resource retrieved successfully",
    )
