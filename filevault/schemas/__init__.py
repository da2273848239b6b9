from filevault.schemas.response import ApiResponse, ApiError, ErrorDetail, Pagination, HealthCheck
from filevault.schemas.node import (
    NodeCreate, NodeResponse, FolderCreateRequest, RenameRequest, MoveRequest, CopyRequest,
    DeleteResult, SignedUrlResponse,
)
from filevault.schemas.permission import (
    ShareEntry, ShareRequest, PermissionCreate, PermissionUpdateRequest, PermissionResponse,
)
from filevault.schemas.public_link import PublicLinkCreate, PublicLinkResponse, PublicResourceResponse
from filevault.schemas.upload import (
    InitiateUploadRequest, InitiateUploadResponse, ChunkResponse, CompletedPart,
    CompleteUploadRequest, CompleteUploadResponse,
)

__all__ = [
    "ApiResponse", "ApiError", "ErrorDetail", "Pagination", "HealthCheck",
    "NodeCreate", "NodeResponse", "FolderCreateRequest", "RenameRequest", "MoveRequest", "CopyRequest",
    "DeleteResult", "SignedUrlResponse",
    "ShareEntry", "ShareRequest", "PermissionCreate", "PermissionUpdateRequest", "PermissionResponse",
    "PublicLinkCreate", "PublicLinkResponse", "PublicResourceResponse",
    "InitiateUploadRequest", "InitiateUploadResponse", "ChunkResponse", "CompletedPart",
    "CompleteUploadRequest", "CompleteUploadResponse",
]
