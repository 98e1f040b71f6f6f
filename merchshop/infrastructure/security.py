"""Security Primitives — bcrypt password hashing and HS256 access tokens.

Invariants:
    - Plaintext passwords are never stored or logged
    - Tokens carry the account id in the "user_id" claim plus iat/exp
    - Every token failure (expired, bad signature, malformed, missing claim)
      surfaces as AuthenticationError, never as a PyJWT exception

Design Decisions:
    - bcrypt calls are CPU-bound: callers run them via asyncio.to_thread
    - Signing algorithm pinned on decode to block alg-confusion tokens
"""

from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from merchshop.core.domain_types import AccountId
from merchshop.core.errors import AuthenticationError

_ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(
            password.encode("utf-8"), password_hash.encode("utf-8"),
        )
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


class TokenManager:
    """Issues and parses signed access tokens."""

    def __init__(self, signing_key: str, ttl: timedelta):
        if not signing_key:
            raise ValueError("empty signing key")
        self._signing_key = signing_key
        self._ttl = ttl

    def issue(self, account_id: AccountId) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "user_id": account_id,
            "iat": now,
            "exp": now + self._ttl,
        }
        return jwt.encode(claims, self._signing_key, algorithm=_ALGORITHM)

    def parse(self, token: str) -> AccountId:
        """Return the account id carried by a valid token."""
        try:
            claims = jwt.decode(
                token, self._signing_key, algorithms=[_ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid token")

        user_id = claims.get("user_id")
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise AuthenticationError("Invalid token claims")
        return AccountId(user_id)
