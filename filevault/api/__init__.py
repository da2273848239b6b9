from filevault.api.folder import router as folder_router
from filevault.api.file import router as file_router
from filevault.api.upload import router as upload_router
from filevault.api.search import router as search_router
from filevault.api.public import router as public_router
from filevault.api.trash import router as trash_router

__all__ = ["folder_router", "file_router", "upload_router", "search_router", "public_router", "trash_router"]
