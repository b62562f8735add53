"""FastAPI dependency: get_caller_id.

Usage in any protected router:
    from src.pm_gateway.auth.dependencies import get_caller_id

    @router.post("/protected")
    async def protected(caller: str = Depends(get_caller_id)):
        ...
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from src.pm_common.errors import InvalidCredentialsError
from src.pm_gateway.auth.jwt_handler import decode_token

# Tokens are minted out-of-band; tokenUrl only feeds Swagger UI's Authorize button
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_caller_id(token: str = Depends(oauth2_scheme)) -> str:
    """Validate the Bearer token and return the caller identity (`sub`).

    Raises HTTP 401 if the token is missing, invalid, or expired.
    """
    try:
        payload = decode_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    caller: str | None = payload.get("sub")
    if not caller:
        raise _CREDENTIALS_EXCEPTION
    return caller
