from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from jose import jwt, JWTError
from jose.utils import base64url_decode, base64url_encode
from passlib.context import CryptContext

from tiri.core.config import settings
from tiri.core.session import Role


pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def _normalize_password(password: str) -> str:
    """
    bcrypt only looks at the first 72 bytes.
    Truncate on a UTF-8 safe boundary.
    """
    return password.encode("utf-8")[:72].decode("utf-8", errors="ignore")


def hash_password(password: str) -> str:
    return pwd_context.hash(_normalize_password(password))


def verify_password(password: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(_normalize_password(password), hashed)
    except (ValueError, TypeError):
        # unknown or corrupted hash format
        return False


# =====================================================
# SESSION TOKENS
# =====================================================

class TokenError(Exception):
    pass


class InvalidToken(TokenError):
    """Bad signature, malformed input or expired."""


class MalformedClaims(TokenError):
    """Signature is fine but a required claim is missing or unusable."""


class SigningKeyMissing(RuntimeError):
    """JWT_SECRET is not configured. Not a token problem, a deployment one."""


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    studio_id: str
    role: Role
    phone: str
    issued_at: datetime
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _check_segments(token: str) -> None:
    """
    Each segment must be exactly what base64url-encoding its bytes produces.

    python-jose ignores the unused low bits of the last character.
    """
    segments = token.split(".") if isinstance(token, str) else []
    if len(segments) != 3:
        raise InvalidToken("Token must have three segments")

    for segment in segments:
        raw = segment.encode("ascii", errors="replace")
        try:
            canonical = base64url_encode(base64url_decode(raw))
        except (ValueError, TypeError) as e:
            raise InvalidToken("Invalid segment encoding") from e
        if canonical != raw:
            raise InvalidToken("Non-canonical segment encoding")


class TokenCodec:
    """
    Signs and verifies the studio session token (HS256 JWT).

    The secret is handed in at construction so tests can run with a fixed
    key and a fake clock. Expiry is checked against ``clock`` rather than
    the wall clock used inside python-jose.
    """

    def __init__(
        self,
        secret: Optional[str],
        ttl_seconds: int,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.secret = secret
        self.ttl_seconds = ttl_seconds
        self.algorithm = algorithm
        self.clock = clock

    def _require_secret(self) -> str:
        if not self.secret:
            raise SigningKeyMissing("JWT_SECRET is not configured.")
        return self.secret

    def issue(self, user_id: str, studio_id: str, role: Role, phone: str) -> str:
        secret = self._require_secret()
        issued_at = int(self.clock().timestamp())

        payload = {
            "sub": str(user_id),
            "studioId": str(studio_id),
            "role": Role(role).value,
            "phone": phone,
            "iat": issued_at,
            "exp": issued_at + self.ttl_seconds,
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        secret = self._require_secret()
        _check_segments(token)

        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError as e:
            raise InvalidToken(str(e)) from e

        expires_at = payload.get("exp")
        if not isinstance(expires_at, (int, float)):
            raise InvalidToken("Token has no expiry")
        if self.clock().timestamp() >= expires_at:
            raise InvalidToken("Token has expired")

        user_id = payload.get("sub")
        studio_id = payload.get("studioId")
        role = payload.get("role")
        if not user_id or not studio_id or not role:
            raise MalformedClaims("Token payload missing required fields.")

        try:
            role = Role(role)
        except ValueError as e:
            raise MalformedClaims(f"Unknown role: {role}") from e

        issued_at = payload.get("iat", expires_at - self.ttl_seconds)
        return TokenClaims(
            user_id=str(user_id),
            studio_id=str(studio_id),
            role=role,
            phone=str(payload.get("phone") or ""),
            issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc),
        )
