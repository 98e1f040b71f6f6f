"""Shop Schemas — auth, info, transfer and catalog payloads.

Invariants:
    - AuthRequest.username: 1-50 chars, stripped, non-empty
    - Responses serialize by alias so clients see the camelCase contract
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from merchshop.core.account_info import AccountInfo


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AuthRequest(BaseModel):
    """Sign-in-or-register credentials."""
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=1, max_length=128)

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("username cannot be empty or whitespace")
        return v


class AuthResponse(BaseModel):
    token: str


class SendCoinRequest(_CamelModel):
    to_user: str = Field(alias="toUser", min_length=1, max_length=50)
    amount: int


class InventoryItem(BaseModel):
    type: str
    quantity: int


class ReceivedCoins(_CamelModel):
    from_user: str = Field(alias="fromUser")
    amount: int


class SentCoins(_CamelModel):
    to_user: str = Field(alias="toUser")
    amount: int


class CoinHistory(BaseModel):
    received: list[ReceivedCoins]
    sent: list[SentCoins]


class InfoResponse(_CamelModel):
    """Balance, inventory and coin history of the calling account."""
    coins: int
    inventory: list[InventoryItem]
    coin_history: CoinHistory = Field(alias="coinHistory")

    @classmethod
    def from_account_info(cls, info: AccountInfo) -> "InfoResponse":
        return cls(
            coins=info.balance,
            inventory=[
                InventoryItem(type=line.item_name, quantity=line.quantity)
                for line in info.inventory
            ],
            coin_history=CoinHistory(
                received=[
                    ReceivedCoins(from_user=op.counterparty, amount=op.amount)
                    for op in info.received
                ],
                sent=[
                    SentCoins(to_user=op.counterparty, amount=op.amount)
                    for op in info.sent
                ],
            ),
        )


class MerchItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    price: int


class OperationResult(BaseModel):
    message: str
