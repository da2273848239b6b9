from typing import AsyncIterator, List, Optional, Sequence, Tuple

from starlette.status import (
    HTTP_404_NOT_FOUND,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
)

from filevault.configs.settings import settings
from filevault.consts.error_codes import ErrorCode
from filevault.consts.node_type import NodeType, PermissionLevel
from filevault.core.exceptions import AppError
from filevault.crud.permission import PermissionCRUD, permission_crud
from filevault.crud.public_link import PublicLinkCRUD, public_link_crud
from filevault.models.node import Node
from filevault.models.permission import Permission
from filevault.models.public_link import PublicLink
from filevault.schemas.permission import PermissionCreate, ShareEntry
from filevault.schemas.public_link import PublicLinkCreate
from filevault.services.node_service import NodeService
from filevault.services.object_store import ObjectStore
from filevault.utils import get_logger, generate_link_token

logger = get_logger(__name__)


def _permission_not_found() -> AppError:
    return AppError("Permission not found", status_code=HTTP_404_NOT_FOUND, code=ErrorCode.PERMISSION_NOT_FOUND)


class SharingService:
    """Permission grants, public links and signed access to file bytes.

    Grants are recorded and listed but do not widen access: every operation
    here still requires the requester to own the node.
    """

    def __init__(
        self,
        nodes: Optional[NodeService] = None,
        crud: Optional[PermissionCRUD] = None,
        link_crud: Optional[PublicLinkCRUD] = None,
        object_store: Optional[ObjectStore] = None,
    ):
        self.nodes = nodes or NodeService()
        self.crud = crud or permission_crud
        self.link_crud = link_crud or public_link_crud
        self._object_store = object_store

    @property
    def object_store(self) -> ObjectStore:
        if self._object_store is None:
            self._object_store = ObjectStore()
        return self._object_store

    # Grants

    async def grant(
        self,
        user_id: str,
        node_id: str,
        entries: Sequence[ShareEntry],
        node_type: Optional[NodeType] = None,
    ) -> List[Permission]:
        """Share a node with other accounts

        Args:
            user_id: Requester, must own the node
            node_id: Node to share
            entries: One (user_id, permission) pair per grantee
            node_type: Expected type for type-specific routes
        """
        if not entries:
            raise AppError(
                "Users array is required",
                status_code=HTTP_422_UNPROCESSABLE_ENTITY,
                code=ErrorCode.VALIDATION_ERROR,
                field="users",
            )
        node = await self.nodes.get_node(user_id, node_id, node_type)

        try:
            grants = []
            # Repeated grants for the same grantee are stored as separate rows
            for entry in entries:
                grants.append(await self.crud.create(PermissionCreate(
                    node_id=str(node.id),
                    owner_id=user_id,
                    shared_with=entry.user_id,
                    level=entry.permission,
                )))
            logger.info(f"[SHARE] {node_id} shared with {len(grants)} users by {user_id}")
            return grants
        except Exception as e:
            logger.error(f"[SHARE] Failed - node_id: {node_id}, error: {str(e)}")
            raise AppError(
                f"Failed to share: {str(e)}",
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.DB_INSERT_FAILED,
            )

    async def list_grants(self, user_id: str, node_id: str) -> List[Permission]:
        node = await self.nodes.get_node(user_id, node_id)
        return await self.crud.list_by_node(str(node.id))

    async def _owned_grant(self, user_id: str, node_id: str, permission_id: str) -> Permission:
        node = await self.nodes.get_node(user_id, node_id)
        grant = await self.crud.get_by_id(permission_id)
        if not grant or grant.node_id != str(node.id):
            raise _permission_not_found()
        return grant

    async def update_grant(
        self, user_id: str, node_id: str, permission_id: str, level: PermissionLevel
    ) -> Permission:
        grant = await self._owned_grant(user_id, node_id, permission_id)
        try:
            return await self.crud.update(grant, {"level": level})
        except Exception as e:
            logger.error(f"Failed to update permission {permission_id}: {str(e)}")
            raise AppError(
                f"Failed to update permission: {str(e)}",
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.DB_UPDATE_FAILED,
            )

    async def revoke_grant(self, user_id: str, node_id: str, permission_id: str) -> None:
        grant = await self._owned_grant(user_id, node_id, permission_id)
        try:
            await self.crud.delete(grant)
            logger.info(f"[SHARE] Permission {permission_id} revoked on {node_id}")
        except Exception as e:
            logger.error(f"Failed to delete permission {permission_id}: {str(e)}")
            raise AppError(
                f"Failed to remove permission: {str(e)}",
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.DB_DELETE_FAILED,
            )

    # Public links

    @staticmethod
    def public_url(token: str) -> str:
        return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/public/{token}"

    async def create_public_link(
        self, user_id: str, node_id: str, node_type: Optional[NodeType] = None
    ) -> Tuple[PublicLink, bool]:
        """Return the node's link, minting one on first use; second value tells whether it is new"""
        node = await self.nodes.get_node(user_id, node_id, node_type)

        existing = await self.link_crud.get_by_node(str(node.id))
        if existing:
            return existing, False

        try:
            link = await self.link_crud.create(PublicLinkCreate(
                node_id=str(node.id),
                token=generate_link_token(),
                owner_id=user_id,
            ))
            logger.info(f"[PUBLIC_LINK] Created link for {node_id}")
            return link, True
        except Exception as e:
            logger.error(f"[PUBLIC_LINK] Failed - node_id: {node_id}, error: {str(e)}")
            raise AppError(
                f"Failed to create public link: {str(e)}",
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.DB_INSERT_FAILED,
            )

    async def resolve_public_resource(self, token: str) -> Tuple[Node, Optional[str]]:
        """Unauthenticated lookup by token, returns the node and a signed URL for files"""
        if not token or not token.strip():
            raise AppError(
                "Token is required",
                status_code=HTTP_422_UNPROCESSABLE_ENTITY,
                code=ErrorCode.VALIDATION_ERROR,
                field="token",
            )

        link = await self.link_crud.get_by_token(token.strip())
        if not link:
            raise AppError("Link not found", status_code=HTTP_404_NOT_FOUND, code=ErrorCode.LINK_NOT_FOUND)

        node = await self.nodes.crud.get_by_id(link.node_id)
        if not node or node.deleted_at:
            raise AppError("Resource not found", status_code=HTTP_404_NOT_FOUND, code=ErrorCode.RESOURCE_NOT_FOUND)

        download_url = None
        if node.node_type == NodeType.FILE and node.storage_path:
            try:
                download_url = await self.object_store.sign(node.storage_path, settings.PUBLIC_LINK_TTL)
            except Exception as e:
                logger.warning(f"[PUBLIC_LINK] Could not sign {node.storage_path}: {str(e)}")
        return node, download_url

    # File bytes

    async def _owned_file(self, user_id: str, file_id: str) -> Node:
        node = await self.nodes.get_node(user_id, file_id, NodeType.FILE)
        if not node.storage_path:
            raise AppError("File has no stored content", status_code=HTTP_404_NOT_FOUND, code=ErrorCode.FILE_NOT_FOUND)
        return node

    async def create_signed_download_url(
        self, user_id: str, file_id: str, expires_in: Optional[int] = None
    ) -> Tuple[str, int]:
        node = await self._owned_file(user_id, file_id)
        ttl = expires_in or settings.SIGNED_URL_DEFAULT_TTL
        try:
            return await self.object_store.sign(node.storage_path, ttl), ttl
        except Exception as e:
            logger.error(f"Failed to sign {node.storage_path}: {str(e)}")
            raise AppError(
                f"Failed to generate signed URL: {str(e)}",
                status_code=HTTP_502_BAD_GATEWAY,
                code=ErrorCode.SIGNED_URL_FAILED,
            )

    async def open_download(self, user_id: str, file_id: str) -> Tuple[Node, AsyncIterator[bytes]]:
        """Owner-only byte stream of a file"""
        node = await self._owned_file(user_id, file_id)
        try:
            stream = await self.object_store.get_stream(node.storage_path)
            logger.info(f"[FILE_DOWNLOAD] Streaming {node.storage_path} to {user_id}")
            return node, stream
        except Exception as e:
            logger.error(f"[FILE_DOWNLOAD] Failed - key: {node.storage_path}, error: {str(e)}")
            raise AppError(
                f"Download failed: {str(e)}",
                status_code=HTTP_502_BAD_GATEWAY,
                code=ErrorCode.DOWNLOAD_FAILED,
            )
