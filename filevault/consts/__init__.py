from filevault.consts.error_codes import ErrorCode
from filevault.consts.node_type import NodeType, PermissionLevel

__all__ = ["ErrorCode", "NodeType", "PermissionLevel"]
