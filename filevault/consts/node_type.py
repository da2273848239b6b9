from enum import Enum


class NodeType(str, Enum):
    FILE = "file"
    FOLDER = "folder"


class PermissionLevel(str, Enum):
    READ = "read"
    WRITE = "write"
    COMMENT = "comment"
