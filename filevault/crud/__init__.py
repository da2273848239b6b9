from filevault.crud.node import node_crud, NodeCRUD
from filevault.crud.permission import permission_crud, PermissionCRUD
from filevault.crud.public_link import public_link_crud, PublicLinkCRUD
from filevault.crud.star import star_crud, StarCRUD
from filevault.crud.upload_session import upload_session_crud, UploadSessionCRUD

__all__ = [
    "node_crud", "NodeCRUD",
    "permission_crud", "PermissionCRUD",
    "public_link_crud", "PublicLinkCRUD",
    "star_crud", "StarCRUD",
    "upload_session_crud", "UploadSessionCRUD",
]
