import jwt
from jwt import PyJWKClient
from typing import Dict, Any, Optional
from starlette.status import HTTP_401_UNAUTHORIZED

from filevault.configs.settings import settings
from filevault.consts.error_codes import ErrorCode
from filevault.core.exceptions import AppError

_jwk_client: Optional[PyJWKClient] = None


def _get_jwk_client() -> PyJWKClient:
    global _jwk_client
    if _jwk_client is None:
        _jwk_client = PyJWKClient(settings.AUTH_JWKS_URL)
    return _jwk_client


def _unauthorized(message: str) -> AppError:
    return AppError(message, status_code=HTTP_401_UNAUTHORIZED, code=ErrorCode.UNAUTHORIZED)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and verify a bearer JWT.

    Tokens are checked against the identity provider's JWKS when AUTH_JWKS_URL is
    set, otherwise against the shared AUTH_SECRET_KEY (HS256).
    """
    try:
        if settings.AUTH_JWKS_URL:
            key = _get_jwk_client().get_signing_key_from_jwt(token).key
            algorithms = [settings.AUTH_ALGORITHM]
        elif settings.AUTH_SECRET_KEY:
            key = settings.AUTH_SECRET_KEY
            algorithms = ["HS256"]
        else:
            raise _unauthorized("Token verification is not configured")

        payload = jwt.decode(
            token,
            key,
            algorithms=algorithms,
            issuer=settings.AUTH_ISSUER or None,
            options={"verify_aud": False, "verify_iss": bool(settings.AUTH_ISSUER)}
        )

        return payload

    except AppError:
        raise
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.InvalidTokenError as e:
        raise _unauthorized(f"Invalid token: {str(e)}")
    except Exception as e:
        raise _unauthorized(f"Token verification failed: {str(e)}")
