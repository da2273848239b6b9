from .object_store import ObjectStore
from .node_service import NodeService
from .sharing_service import SharingService
from .upload_service import UploadService
from .search_service import SearchService

__all__ = ["ObjectStore", "NodeService", "SharingService", "UploadService", "SearchService"]
