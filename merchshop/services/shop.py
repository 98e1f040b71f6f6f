"""Shop Operations — request-level entry points wrapping the engines in units of work.

Invariants:
    - Input checks that need no data (quantity, amount) run before the receiver
      lookup and before a unit of work is opened: a rejected request never
      touches the store
    - Self-transfer needs the resolved receiver id, so it is checked after lookup
    - Each balance-mutating call goes through UnitOfWorkRunner (retry + deadline)
"""

from merchshop.core.domain_types import AccountId, Coins, ItemName
from merchshop.core.errors import InvalidAmountError, InvalidQuantityError
from merchshop.infrastructure.database import DatabaseSessionManager
from merchshop.models.purchase import Purchase
from merchshop.models.transfer import Transfer
from merchshop.services.account_queries import get_account_by_username
from merchshop.services.purchase_engine import purchase
from merchshop.services.transfer_engine import transfer, validate_transfer
from merchshop.services.unit_of_work import UnitOfWorkRunner


async def buy_item(
    runner: UnitOfWorkRunner, account_id: AccountId, item_name: str, quantity: int = 1,
) -> Purchase:
    if quantity <= 0:
        raise InvalidQuantityError(quantity)
    return await runner.run(
        lambda db: purchase(db, account_id, quantity, ItemName(item_name)),
    )


async def send_coins(
    runner: UnitOfWorkRunner,
    manager: DatabaseSessionManager,
    sender_id: AccountId,
    receiver_username: str,
    amount: Coins,
) -> Transfer:
    if amount <= 0:
        raise InvalidAmountError(amount)

    async with manager.session() as db:
        receiver = await get_account_by_username(db, receiver_username)
    receiver_id = AccountId(receiver.id)

    validate_transfer(sender_id, receiver_id, amount)
    return await runner.run(
        lambda db: transfer(db, sender_id, receiver_id, amount),
    )
