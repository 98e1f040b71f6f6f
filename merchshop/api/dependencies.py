"""API Dependencies — auth, token manager and unit-of-work runner providers.

Invariants:
    - Protected routes receive an authenticated AccountId, never a raw token
    - Missing or malformed Authorization header -> AuthenticationError (401)

Design Decisions:
    - HTTPBearer(auto_error=False): the 401 is raised as AuthenticationError so it
      flows through the same error envelope as every other failure
    - Providers are plain functions so tests swap them via dependency_overrides
"""

from datetime import timedelta

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from merchshop.config import get_settings
from merchshop.core.domain_types import AccountId
from merchshop.core.errors import AuthenticationError
from merchshop.infrastructure.database import DatabaseSessionManager, get_db_manager
from merchshop.infrastructure.security import TokenManager
from merchshop.services.unit_of_work import UnitOfWorkRunner

_bearer = HTTPBearer(auto_error=False)


def get_token_manager() -> TokenManager:
    settings = get_settings()
    return TokenManager(
        settings.jwt_signing_key,
        timedelta(minutes=settings.jwt_token_ttl_minutes),
    )


def get_runner(
    manager: DatabaseSessionManager = Depends(get_db_manager),
) -> UnitOfWorkRunner:
    return UnitOfWorkRunner.from_settings(manager, get_settings())


async def get_current_account_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    tokens: TokenManager = Depends(get_token_manager),
) -> AccountId:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Missing bearer token")
    return tokens.parse(credentials.credentials)
