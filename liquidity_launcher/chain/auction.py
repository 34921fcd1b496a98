"""
Fixed clearing-price auction

Minimal stand-in for the price-discovery process: bids accumulate currency
until ``end_block``; after that the clearing price and raised amount are
final and the raised currency can be swept to the funds recipient.
"""

from typing import Dict

from ..constants import Q96
from ..errors import AuctionNotFinalError, ExecutionError
from .ledger import InMemoryChain


class FixedPriceAuction:
    def __init__(
        self,
        chain: InMemoryChain,
        address: str,
        token: str,
        currency: str,
        supply: int,
        clearing_price: int,
        end_block: int,
        funds_recipient: str,
    ):
        self.chain = chain
        self.address = address.lower()
        self.token = token
        self.currency = currency
        self.supply = supply
        self.clearing_price = clearing_price
        self.end_block = end_block
        self.funds_recipient = funds_recipient
        self.bids: Dict[str, int] = {}
        self._raised = 0

    def is_final(self) -> bool:
        return self.chain.current_block() >= self.end_block

    def _require_final(self) -> None:
        if not self.is_final():
            raise AuctionNotFinalError(f"auction ends at block {self.end_block}")

    def final_price(self) -> int:
        self._require_final()
        return self.clearing_price

    def raised_amount(self) -> int:
        self._require_final()
        return self._raised

    def bid(self, bidder: str, amount: int) -> None:
        if self.is_final():
            raise ExecutionError("auction has ended")
        self.chain.transfer(self.currency, bidder, self.address, amount)
        self.bids[bidder] = self.bids.get(bidder, 0) + amount
        self._raised += amount

    def tokens_for(self, currency_amount: int) -> int:
        """currency 수량으로 받는 token 수량 (청산 가격 기준, 리저브 무관)"""
        return min(currency_amount * Q96 // self.clearing_price, self.supply)

    def claim(self, bidder: str) -> int:
        self._require_final()
        amount = self.tokens_for(self.bids.pop(bidder, 0))
        if amount:
            self.chain.transfer(self.token, self.address, bidder, amount)
        return amount

    def sweep_currency(self) -> int:
        """모금된 currency를 funds_recipient에게 보낸다"""
        self._require_final()
        amount = self.chain.balance_of(self.currency, self.address)
        if amount:
            self.chain.transfer(self.currency, self.address, self.funds_recipient, amount)
        return amount


class FixedPriceAuctionFactory:
    """create_auction() 호출마다 새 FixedPriceAuction을 만든다"""

    def __init__(self, chain: InMemoryChain, currency: str, clearing_price: int, end_block: int):
        self.chain = chain
        self.currency = currency
        self.clearing_price = clearing_price
        self.end_block = end_block
        self.created = []

    def create_auction(self, token: str, amount: int, funds_recipient: str) -> FixedPriceAuction:
        address = f"0x{0xa0c7 + len(self.created):040x}"
        auction = FixedPriceAuction(
            chain=self.chain,
            address=address,
            token=token,
            currency=self.currency,
            supply=amount,
            clearing_price=self.clearing_price,
            end_block=self.end_block,
            funds_recipient=funds_recipient,
        )
        self.created.append(auction)
        return auction
