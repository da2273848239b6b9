from functools import lru_cache

from filevault.services import NodeService, ObjectStore, SearchService, SharingService, UploadService


@lru_cache
def get_object_store() -> ObjectStore:
    return ObjectStore()


def get_node_service() -> NodeService:
    return NodeService()


def get_sharing_service() -> SharingService:
    return SharingService(object_store=get_object_store())


def get_upload_service() -> UploadService:
    return UploadService(object_store=get_object_store())


def get_search_service() -> SearchService:
    return SearchService()
