from typing import List, Optional, Tuple

from starlette.status import HTTP_422_UNPROCESSABLE_ENTITY, HTTP_500_INTERNAL_SERVER_ERROR

from filevault.configs.settings import settings
from filevault.consts.error_codes import ErrorCode
from filevault.consts.node_type import NodeType
from filevault.core.exceptions import AppError
from filevault.crud.star import StarCRUD, star_crud
from filevault.models.node import Node
from filevault.models.star import Star
from filevault.services.node_service import NodeService
from filevault.utils import get_logger

logger = get_logger(__name__)


class SearchService:
    """Name search, recent files and stars"""

    def __init__(self, nodes: Optional[NodeService] = None, crud: Optional[StarCRUD] = None):
        self.nodes = nodes or NodeService()
        self.crud = crud or star_crud

    async def search(self, user_id: str, q: Optional[str], node_type: Optional[NodeType] = None) -> List[Node]:
        """Case-insensitive substring match on names, newest first

        Args:
            user_id: Requester account id
            q: Search term, matched literally
            node_type: Restrict results to files or folders
        """
        term = (q or "").strip()
        if not term:
            raise AppError(
                "Search query is required",
                status_code=HTTP_422_UNPROCESSABLE_ENTITY,
                code=ErrorCode.VALIDATION_ERROR,
                field="q",
            )
        try:
            results = await self.nodes.crud.search_by_name(user_id, term, node_type)
        except Exception as e:
            logger.error(f"[SEARCH] Failed - user_id: {user_id}, q: {term}, error: {str(e)}")
            raise AppError(
                f"Search failed: {str(e)}",
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.DB_QUERY_FAILED,
            )
        # Results must never leak another owner's nodes
        return [node for node in results if node.owner_id == user_id]

    async def recent(self, user_id: str) -> List[Node]:
        try:
            return await self.nodes.crud.recent_files(user_id, limit=settings.RECENT_FILES_LIMIT)
        except Exception as e:
            logger.error(f"Failed to load recent files for {user_id}: {str(e)}")
            raise AppError(
                f"Failed to load recent files: {str(e)}",
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.DB_QUERY_FAILED,
            )

    async def star(self, user_id: str, file_id: str) -> Tuple[Star, bool]:
        """Star a file; starring twice keeps a single row and reports created=False"""
        file = await self.nodes.get_node(user_id, file_id, NodeType.FILE)
        try:
            star, created = await self.crud.add(user_id, str(file.id))
        except Exception as e:
            logger.error(f"[STAR] Failed - file_id: {file_id}, error: {str(e)}")
            raise AppError(
                f"Failed to star file: {str(e)}",
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.DB_INSERT_FAILED,
            )
        if created:
            logger.info(f"[STAR] {user_id} starred {file_id}")
        return star, created

    async def unstar(self, user_id: str, file_id: str) -> int:
        """Remove a star, returns the number of rows removed (0 when it was not starred)"""
        file = await self.nodes.get_node(user_id, file_id, NodeType.FILE)
        try:
            return await self.crud.remove(user_id, str(file.id))
        except Exception as e:
            logger.error(f"[STAR] Unstar failed - file_id: {file_id}, error: {str(e)}")
            raise AppError(
                f"Failed to unstar file: {str(e)}",
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.DB_DELETE_FAILED,
            )

    async def starred(self, user_id: str) -> List[Node]:
        try:
            file_ids = await self.crud.list_file_ids(user_id)
            nodes = await self.nodes.crud.get_visible_many(file_ids)
        except Exception as e:
            logger.error(f"Failed to load starred files for {user_id}: {str(e)}")
            raise AppError(
                f"Failed to load starred files: {str(e)}",
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.DB_QUERY_FAILED,
            )
        return [node for node in nodes if node.owner_id == user_id]
