from datetime import datetime, timedelta, UTC
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext
import tasktracker.config as _cfg
from tasktracker.errors import UnauthorizedError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

BCRYPT_MAX_BYTES = 72


def hash_password(password: str):
    """Hash a password after validating bcrypt's 72-byte limit.

    Raises ValueError if the UTF-8 encoding of the password exceeds 72 bytes.
    """
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValueError("password too long: must be at most 72 bytes when UTF-8 encoded")
    return pwd_context.hash(password)


def verify_password(plain, hashed):
    """Verify a plaintext password against a hash.

    If verification raises a ValueError (for example plain >72 bytes), return False
    to allow the caller to respond with an authentication failure instead of an error.
    """
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def create_token(user):
    claims = {
        "sub": user.id,
        "userId": user.id,
        "username": user.username,
        "email": user.email,
    }
    # read expiry at call-time so tests (and runtime overrides) that modify
    # tasktracker.config.ACCESS_TOKEN_EXPIRE_MINUTES take effect immediately
    expire = datetime.now(UTC) + timedelta(minutes=_cfg.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims["exp"] = int(expire.timestamp())  # JWT spec uses Unix timestamp
    return jwt.encode(claims, _cfg.SECRET_KEY, algorithm=_cfg.ALGORITHM)


def decode_token(token: str) -> dict:
    """Validate signature and expiry and return the claims.

    Raises UnauthorizedError for a missing, expired or otherwise invalid token.
    """
    if not token:
        raise UnauthorizedError("No token provided")
    try:
        # jwt.decode validates exp automatically
        payload = jwt.decode(token, _cfg.SECRET_KEY, algorithms=[_cfg.ALGORITHM])
    except ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except JWTError:
        raise UnauthorizedError("Invalid token")
    if not payload.get("sub"):
        raise UnauthorizedError("Invalid token: missing user")
    return payload


def extract_token(authorization, cookie_token):
    """Return token from Authorization header (Bearer ...) or the token cookie.
    Header has precedence.
    """
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
    return cookie_token
