from enum import Enum
from typing import Any, Dict, List, Optional, Union
from starlette import status

from filevault.consts.error_codes import ErrorCode


class AppError(Exception):
    def __init__(
        self,
        message: str,
        *,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        code: Union[ErrorCode, str] = ErrorCode.VALIDATION_ERROR,
        field: Optional[str] = None,
        errors: Optional[List[dict]] = None,  # [{'code':..., 'message':..., 'field':...}]
        details: Optional[Dict[str, Any]] = None,  # Additional details for the error
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code.value if isinstance(code, Enum) else code
        self.field = field
        self.errors = errors
        self.details = details

    def __repr__(self) -> str:
        return f"AppError(code={self.code!r}, status_code={self.status_code}, message={self.message!r})"
