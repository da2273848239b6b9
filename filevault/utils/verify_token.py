from typing import Optional

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from starlette.status import HTTP_401_UNAUTHORIZED

from filevault.consts.error_codes import ErrorCode
from filevault.core.exceptions import AppError
from filevault.utils.jwt_verification import decode_token

security = HTTPBearer(auto_error=False)

async def verify_token(
    authorization_credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
):
    """Verify the bearer JWT and return its claims"""
    if authorization_credentials is None:
        raise AppError("Unauthorized", status_code=HTTP_401_UNAUTHORIZED, code=ErrorCode.UNAUTHORIZED)
    return decode_token(authorization_credentials.credentials)

async def get_current_user_id(claims: dict = Depends(verify_token)) -> str:
    """Requester account id, taken from the `sub` claim"""
    user_id = claims.get("sub")
    if not user_id:
        raise AppError("Unauthorized", status_code=HTTP_401_UNAUTHORIZED, code=ErrorCode.UNAUTHORIZED)
    return user_id
