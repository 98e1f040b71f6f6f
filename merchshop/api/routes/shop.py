"""Shop Routes — info, coin transfer, purchase and catalog.

Invariants:
    - Every route except the catalog requires a bearer token
    - Routes hold no business logic: engines raise typed errors, the global
      handlers turn them into JSON envelopes
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from merchshop.api.dependencies import get_current_account_id, get_runner
from merchshop.core.domain_types import AccountId
from merchshop.infrastructure.database import (
    DatabaseSessionManager, get_db, get_db_manager,
)
from merchshop.schemas.shop import (
    InfoResponse, MerchItem, OperationResult, SendCoinRequest,
)
from merchshop.services.account_queries import get_account_info, list_merchandise
from merchshop.services.shop import buy_item, send_coins
from merchshop.services.unit_of_work import UnitOfWorkRunner

router = APIRouter(prefix="/api", tags=["shop"])


@router.get("/info", response_model=InfoResponse)
async def info(
    account_id: AccountId = Depends(get_current_account_id),
    db: AsyncSession = Depends(get_db),
):
    """Coins, inventory and coin history of the caller."""
    return InfoResponse.from_account_info(await get_account_info(db, account_id))


@router.post("/sendCoin", response_model=OperationResult)
async def send_coin(
    body: SendCoinRequest,
    account_id: AccountId = Depends(get_current_account_id),
    runner: UnitOfWorkRunner = Depends(get_runner),
    manager: DatabaseSessionManager = Depends(get_db_manager),
):
    """Transfer coins to another user by username."""
    await send_coins(runner, manager, account_id, body.to_user, body.amount)
    return OperationResult(message="Coins sent")


@router.get("/buy/{item}", response_model=OperationResult)
async def buy(
    item: str,
    quantity: int = Query(1),
    account_id: AccountId = Depends(get_current_account_id),
    runner: UnitOfWorkRunner = Depends(get_runner),
):
    """Buy an item from the catalog."""
    await buy_item(runner, account_id, item, quantity)
    return OperationResult(message="Purchase completed")


@router.get("/merch", response_model=list[MerchItem])
async def merch(db: AsyncSession = Depends(get_db)):
    """List the merchandise catalog."""
    return [MerchItem.model_validate(m) for m in await list_merchandise(db)]
