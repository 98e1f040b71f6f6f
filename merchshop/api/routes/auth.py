"""Auth Route — sign-in-or-register, returns a bearer token.

Invariants:
    - Unknown username -> account created with the configured starting balance
    - Known username + wrong password -> 401 via AuthenticationError
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from merchshop.api.dependencies import get_token_manager
from merchshop.config import get_settings
from merchshop.core.domain_types import AccountId
from merchshop.infrastructure.database import get_db
from merchshop.infrastructure.security import TokenManager
from merchshop.schemas.shop import AuthRequest, AuthResponse
from merchshop.services.accounts import sign_in

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/auth", response_model=AuthResponse)
async def authenticate(
    body: AuthRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenManager = Depends(get_token_manager),
):
    """Sign in, registering the username on first use."""
    account = await sign_in(
        db, body.username, body.password, get_settings().starting_balance,
    )
    return AuthResponse(token=tokens.issue(AccountId(account.id)))
