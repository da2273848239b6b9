from collections import defaultdict, deque
from datetime import datetime
from typing import List, Optional, Set, Tuple

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from filevault.consts.error_codes import ErrorCode
from filevault.consts.node_type import NodeType
from filevault.core.exceptions import AppError
from filevault.crud.node import NodeCRUD, node_crud
from filevault.models.node import Node
from filevault.schemas.node import NodeCreate
from filevault.utils import get_logger, page_window

logger = get_logger(__name__)

_NOT_FOUND = {
    NodeType.FILE: (ErrorCode.FILE_NOT_FOUND, "File not found"),
    NodeType.FOLDER: (ErrorCode.FOLDER_NOT_FOUND, "Folder not found"),
    None: (ErrorCode.NODE_NOT_FOUND, "Node not found"),
}


def require_name(name: Optional[str], field: str = "name") -> str:
    """Trimmed name, VALIDATION_ERROR when nothing is left"""
    cleaned = (name or "").strip()
    if not cleaned:
        raise AppError(
            f"{field.capitalize()} is required",
            status_code=HTTP_422_UNPROCESSABLE_ENTITY,
            code=ErrorCode.VALIDATION_ERROR,
            field=field,
        )
    return cleaned


def require_target(target_id: Optional[str]) -> None:
    if not target_id:
        raise AppError(
            "Target folder id is required",
            status_code=HTTP_422_UNPROCESSABLE_ENTITY,
            code=ErrorCode.VALIDATION_ERROR,
            field="target_folder_id",
        )


def not_found(node_type: Optional[NodeType] = None) -> AppError:
    code, message = _NOT_FOUND[node_type]
    return AppError(message, status_code=HTTP_404_NOT_FOUND, code=code)


def access_denied(message: str = "Access denied") -> AppError:
    return AppError(message, status_code=HTTP_403_FORBIDDEN, code=ErrorCode.ACCESS_DENIED)


class NodeService:
    """Tree operations over an owner's files and folders.

    Every operation authorizes by strict ownership and completes all checks
    before its first write.
    """

    def __init__(self, crud: Optional[NodeCRUD] = None):
        self.crud = crud or node_crud

    # Lookups

    async def _load(self, node_id: str, node_type: Optional[NodeType] = None) -> Node:
        """Fetch a node (trashed included) and check its type"""
        node = await self.crud.get_by_id(node_id)
        if not node:
            raise not_found(node_type)
        if node_type and node.node_type != node_type:
            raise AppError(
                f"Node is not a {node_type.value}",
                status_code=HTTP_400_BAD_REQUEST,
                code=ErrorCode.INVALID_NODE_TYPE,
            )
        return node

    async def get_node(
        self, user_id: str, node_id: str, node_type: Optional[NodeType] = None
    ) -> Node:
        """Visible node owned by the requester

        Args:
            user_id: Requester account id
            node_id: Node id
            node_type: Expected type, None accepts both
        """
        node = await self._load(node_id, node_type)
        if node.deleted_at:
            raise not_found(node_type)
        if node.owner_id != user_id:
            raise access_denied()
        return node

    async def _resolve_target_folder(
        self,
        user_id: str,
        target_id: Optional[str],
        missing_code: ErrorCode = ErrorCode.FOLDER_NOT_FOUND,
    ) -> Node:
        require_target(target_id)
        target = await self.crud.get_by_id(target_id)
        if not target or target.deleted_at:
            raise AppError("Target folder not found", status_code=HTTP_404_NOT_FOUND, code=missing_code)
        if target.node_type != NodeType.FOLDER:
            raise AppError("Target is not a folder", status_code=HTTP_400_BAD_REQUEST, code=ErrorCode.INVALID_TARGET)
        if target.owner_id != user_id:
            raise access_denied("Access denied to target folder")
        return target

    async def descendant_ids(self, user_id: str, folder_id: str) -> Set[str]:
        """Ids of every node below folder_id, the folder itself excluded"""
        children = defaultdict(list)
        for node_id, parent_id in (await self.crud.parent_links(user_id)).items():
            if parent_id:
                children[parent_id].append(node_id)

        found: Set[str] = set()
        queue = deque([folder_id])
        while queue:
            for child_id in children.get(queue.popleft(), []):
                if child_id not in found:
                    found.add(child_id)
                    queue.append(child_id)
        found.discard(folder_id)
        return found

    # Mutations

    async def create_folder(self, user_id: str, name: str, parent_id: Optional[str] = None) -> Node:
        """Create a folder at the root or inside an owned folder"""
        folder_name = require_name(name, "name")
        try:
            logger.info(f"[FOLDER_CREATE] user_id: {user_id}, name: {folder_name}, parent_id: {parent_id}")
            if parent_id:
                await self._resolve_target_folder(user_id, parent_id)

            folder = await self.crud.create(NodeCreate(
                owner_id=user_id,
                node_type=NodeType.FOLDER,
                name=folder_name,
                parent_id=parent_id,
            ))
            logger.info(f"[FOLDER_CREATE] Created folder {folder.id}")
            return folder

        except AppError:
            raise
        except Exception as e:
            logger.error(f"[FOLDER_CREATE] Failed - user_id: {user_id}, error: {str(e)}", exc_info=True)
            raise AppError(
                f"Failed to create folder: {str(e)}",
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.DB_INSERT_FAILED,
            )

    async def rename(
        self, user_id: str, node_id: str, new_name: str, node_type: Optional[NodeType] = None
    ) -> Node:
        """Change a node's display name

        Args:
            user_id: Requester account id
            node_id: Node to rename
            new_name: New name, trimmed before storing
            node_type: Expected type for type-specific routes
        """
        name = require_name(new_name, "name")
        node = await self.get_node(user_id, node_id, node_type)
        try:
            updated = await self.crud.update(node, {"name": name})
            logger.info(f"[NODE_RENAME] {node_id} renamed to {name}")
            return updated
        except Exception as e:
            logger.error(f"[NODE_RENAME] Failed - node_id: {node_id}, error: {str(e)}")
            raise AppError(
                f"Rename failed: {str(e)}",
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.DB_UPDATE_FAILED,
            )

    async def _reparent(self, node: Node, target_id: str, tag: str) -> Node:
        try:
            updated = await self.crud.update(node, {"parent_id": target_id})
            logger.info(f"[{tag}] {node.id} moved under {target_id}")
            return updated
        except Exception as e:
            logger.error(f"[{tag}] Failed - node_id: {node.id}, error: {str(e)}")
            raise AppError(
                f"Move failed: {str(e)}",
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.DB_UPDATE_FAILED,
            )

    async def move_file(self, user_id: str, file_id: str, target_folder_id: Optional[str]) -> Node:
        require_target(target_folder_id)
        node = await self.get_node(user_id, file_id, NodeType.FILE)
        target = await self._resolve_target_folder(user_id, target_folder_id, ErrorCode.FOLDER_NOT_FOUND)
        return await self._reparent(node, str(target.id), "FILE_MOVE")

    async def move_folder(self, user_id: str, folder_id: str, target_folder_id: Optional[str]) -> Node:
        """Move a folder under another folder, rejecting moves that would form a cycle"""
        require_target(target_folder_id)
        folder = await self.get_node(user_id, folder_id, NodeType.FOLDER)
        if folder_id == target_folder_id:
            raise AppError(
                "Cannot move a folder into itself",
                status_code=HTTP_400_BAD_REQUEST,
                code=ErrorCode.INVALID_MOVE,
            )
        target = await self._resolve_target_folder(user_id, target_folder_id, ErrorCode.TARGET_FOLDER_NOT_FOUND)

        # O(owner's node count) per move
        if str(target.id) in await self.descendant_ids(user_id, folder_id):
            logger.warning(f"[FOLDER_MOVE] Cycle rejected - folder: {folder_id}, target: {target_folder_id}")
            raise AppError(
                "Cannot move a folder into its own subtree",
                status_code=HTTP_400_BAD_REQUEST,
                code=ErrorCode.INVALID_MOVE,
            )
        return await self._reparent(folder, str(target.id), "FOLDER_MOVE")

    async def copy_file(self, user_id: str, file_id: str, target_parent_id: Optional[str] = None) -> Node:
        """Duplicate a file's metadata; the copy points at the same stored object"""
        source = await self.get_node(user_id, file_id, NodeType.FILE)
        parent_id = source.parent_id
        if target_parent_id:
            target = await self._resolve_target_folder(user_id, target_parent_id)
            parent_id = str(target.id)

        try:
            copy = await self.crud.create(NodeCreate(
                owner_id=user_id,
                node_type=NodeType.FILE,
                name=f"{source.name}_copy",
                parent_id=parent_id,
                size_bytes=source.size_bytes,
                mime_type=source.mime_type,
                storage_path=source.storage_path,
            ))
            logger.info(f"[FILE_COPY] {file_id} copied to {copy.id}")
            return copy
        except Exception as e:
            logger.error(f"[FILE_COPY] Failed - file_id: {file_id}, error: {str(e)}")
            raise AppError(
                f"Copy failed: {str(e)}",
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.DB_INSERT_FAILED,
            )

    async def soft_delete(
        self, user_id: str, node_id: str, node_type: Optional[NodeType] = None
    ) -> dict:
        """Move a node to the trash.

        A folder takes its whole current subtree with it: every descendant that is
        not already trashed gets the same deleted_at. Nodes added afterwards are
        unaffected.
        """
        node = await self._load(node_id, node_type)
        if node.owner_id != user_id:
            raise access_denied()
        if node.deleted_at:
            raise AppError("Node is already deleted", status_code=HTTP_400_BAD_REQUEST, code=ErrorCode.ALREADY_DELETED)

        try:
            ids = [str(node.id)]
            if node.node_type == NodeType.FOLDER:
                ids.extend(await self.descendant_ids(user_id, str(node.id)))

            deleted_at = datetime.utcnow()
            affected = await self.crud.mark_deleted(ids, deleted_at)
            logger.info(f"[NODE_DELETE] {node_id} trashed, {affected} nodes affected")
            return {"node_id": str(node.id), "deleted_at": deleted_at, "affected": affected}

        except Exception as e:
            logger.error(f"[NODE_DELETE] Failed - node_id: {node_id}, error: {str(e)}", exc_info=True)
            raise AppError(
                f"Delete failed: {str(e)}",
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.DB_UPDATE_FAILED,
            )

    # Listings

    async def list_children(
        self, user_id: str, parent_id: Optional[str], page: int = 1, limit: int = 10
    ) -> Tuple[List[Node], int]:
        """One page of a folder's visible children, folders first then by name

        Args:
            user_id: Requester account id
            parent_id: Folder id, None for the root
            page: 1-based page number
            limit: Page size
        """
        if parent_id:
            await self.get_node(user_id, parent_id, NodeType.FOLDER)

        skip, limit = page_window(page, limit)
        try:
            total = await self.crud.count_children(user_id, parent_id)
            items = await self.crud.list_children(user_id, parent_id, skip=skip, limit=limit)
            return items, total
        except Exception as e:
            logger.error(f"[FOLDER_CONTENTS] Failed - parent_id: {parent_id}, error: {str(e)}")
            raise AppError(
                f"Failed to list folder contents: {str(e)}",
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.DB_QUERY_FAILED,
            )

    async def list_nodes(
        self, user_id: str, node_type: NodeType, page: int = 1, limit: int = 10
    ) -> Tuple[List[Node], int]:
        """Every visible file (or folder) of the owner, by name"""
        skip, limit = page_window(page, limit)
        try:
            total = await self.crud.count_by_type(user_id, node_type)
            items = await self.crud.list_by_type(user_id, node_type, skip=skip, limit=limit)
            return items, total
        except Exception as e:
            logger.error(f"Failed to list {node_type.value}s for {user_id}: {str(e)}")
            raise AppError(
                f"Failed to list {node_type.value}s: {str(e)}",
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.DB_QUERY_FAILED,
            )

    async def list_trash(self, user_id: str, page: int = 1, limit: int = 10) -> Tuple[List[Node], int]:
        skip, limit = page_window(page, limit)
        try:
            total = await self.crud.count_trash(user_id)
            items = await self.crud.list_trash(user_id, skip=skip, limit=limit)
            return items, total
        except Exception as e:
            logger.error(f"Failed to list trash for {user_id}: {str(e)}")
            raise AppError(
                f"Failed to list trash: {str(e)}",
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.DB_QUERY_FAILED,
            )
