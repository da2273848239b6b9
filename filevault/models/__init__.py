from filevault.models.time_mixin import TimeMixin
from filevault.models.soft_delete_mixin import SoftDeleteMixin
from filevault.models.node import Node
from filevault.models.permission import Permission
from filevault.models.public_link import PublicLink
from filevault.models.star import Star
from filevault.models.upload_session import UploadSession, UploadedPart, TargetMetadata

# Export all models for easy import
__all__ = [
    "TimeMixin",
    "SoftDeleteMixin",
    "Node",
    "Permission",
    "PublicLink",
    "Star",
    "UploadSession",
    "UploadedPart",
    "TargetMetadata",
]

# List of all document models for Beanie initialization
DOCUMENT_MODELS = [
    Node,
    Permission,
    PublicLink,
    Star,
    UploadSession,
]
