"""JWT token creation and verification.

The `sub` claim is the caller identity the registry compares against
creator / owner / resolver. Tokens are issued out-of-band with
`python mint_token.py <identity>` (for users and for the resolver process);
the service only verifies.

MVP NOTE: Using HS256 (symmetric HMAC). All services share one JWT_SECRET.
For production with multiple services, upgrade to RS256 (asymmetric RSA).

MVP NOTE: No token revocation. Once issued, tokens are valid until expiry.
Rotating the resolver identity (PUT /admin/resolver) is the revocation path
for a compromised resolver token.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.pm_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)


def create_access_token(identity: str, expires_in: timedelta | None = None) -> str:
    """Issue an access token whose subject is `identity`.

    `expires_in` defaults to JWT_EXPIRE_MINUTES; mint_token.py passes a longer
    lifetime for the resolver process.
    """
    now = datetime.now(UTC)
    payload = {
        "sub": identity,
        "type": "access",
        "iat": now,
        "exp": now + (expires_in or _ACCESS_EXPIRE),
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_token(token: str) -> dict[str, str]:
    """Decode and validate an access token.

    Raises:
        InvalidCredentialsError: Token invalid, expired, or not an access token.
    """
    try:
        payload: dict[str, str] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if payload.get("type") != "access":
        raise InvalidCredentialsError()

    return payload
