from filevault.schemas.node import NodeResponse
from filevault.schemas.response import ApiError
from filevault.schemas.permission import PermissionResponse
from filevault.schemas.public_link import PublicLinkResponse
from filevault.services.sharing_service import SharingService

ERROR_RESPONSES = {
    400: {"model": ApiError, "description": "Bad Request"},
    401: {"model": ApiError, "description": "Unauthorized"},
    403: {"model": ApiError, "description": "Access Denied"},
    404: {"model": ApiError, "description": "Not Found"},
    422: {"model": ApiError, "description": "Validation Error"},
    500: {"model": ApiError, "description": "Internal Server Error"},
}


def node_data(node) -> dict:
    return NodeResponse.from_node(node).model_dump(mode="json")


def grant_data(grant) -> dict:
    return PermissionResponse.from_grant(grant).model_dump(mode="json")


def link_data(link) -> dict:
    return PublicLinkResponse(
        id=str(link.id),
        node_id=link.node_id,
        token=link.token,
        url=SharingService.public_url(link.token),
        created_at=link.created_at,
    ).model_dump(mode="json")
