from enum import Enum


class ErrorCode(str, Enum):
    """Machine-readable error identifiers returned as `errorCode`"""

    UNAUTHORIZED = "UNAUTHORIZED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    ACCESS_DENIED = "ACCESS_DENIED"

    NODE_NOT_FOUND = "NODE_NOT_FOUND"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    FOLDER_NOT_FOUND = "FOLDER_NOT_FOUND"
    TARGET_FOLDER_NOT_FOUND = "TARGET_FOLDER_NOT_FOUND"
    PERMISSION_NOT_FOUND = "PERMISSION_NOT_FOUND"
    LINK_NOT_FOUND = "LINK_NOT_FOUND"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

    INVALID_NODE_TYPE = "INVALID_NODE_TYPE"
    INVALID_TARGET = "INVALID_TARGET"
    INVALID_MOVE = "INVALID_MOVE"
    ALREADY_DELETED = "ALREADY_DELETED"

    FILE_MISSING = "FILE_MISSING"
    CHUNK_MISSING = "CHUNK_MISSING"
    CHUNK_UPLOAD_FAILED = "CHUNK_UPLOAD_FAILED"
    UPLOAD_PARTS_MISMATCH = "UPLOAD_PARTS_MISMATCH"
    UPLOAD_COMPLETE_FAILED = "UPLOAD_COMPLETE_FAILED"
    UPLOAD_FAILED = "UPLOAD_FAILED"
    SIGNED_URL_FAILED = "SIGNED_URL_FAILED"
    DOWNLOAD_FAILED = "DOWNLOAD_FAILED"

    DB_INSERT_FAILED = "DB_INSERT_FAILED"
    DB_UPDATE_FAILED = "DB_UPDATE_FAILED"
    DB_QUERY_FAILED = "DB_QUERY_FAILED"
    DB_DELETE_FAILED = "DB_DELETE_FAILED"

    HTTP_ERROR = "HTTP_ERROR"
