"""
Boundaries of the external collaborators the strategy drives.

The strategy never recomputes what these report: the auction's final
price and raised amount are authoritative inputs.
"""
from typing import ContextManager, Protocol, Sequence

from ..planning.actions import ActionParams
from ..planning.types import PoolKey


class Auction(Protocol):
    address: str

    def is_final(self) -> bool:
        """True once the clearing price and raised amount can be read."""
        ...

    def final_price(self) -> int:
        """Clearing price, Q96 currency per token."""
        ...

    def raised_amount(self) -> int:
        ...


class AuctionFactory(Protocol):
    def create_auction(self, token: str, amount: int, funds_recipient: str) -> Auction:
        ...


class AssetLedger(Protocol):
    def balance_of(self, asset: str, holder: str) -> int:
        ...

    def transfer(self, asset: str, sender: str, recipient: str, amount: int) -> None:
        ...

    def atomic(self) -> ContextManager[None]:
        """Roll back every ledger, pool and executor side effect if the block raises."""
        ...


class PoolLedger(Protocol):
    def initialize_pool(self, pool_key: PoolKey, sqrt_price: int) -> int:
        """Initialize the pool and return its starting tick; rejects re-initialization."""
        ...


class PositionExecutor(Protocol):
    address: str

    def submit_plan(self, actions: bytes, params: Sequence[ActionParams], deadline: int) -> None:
        ...
