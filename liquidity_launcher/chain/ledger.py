"""
In-memory chain: asset balances and AMM pool state

Stands in for the token contracts and the pool ledger. ``atomic()`` snapshots
everything so a failing block leaves no partial state behind.
"""

import copy
from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..errors import (
    ExecutionError,
    InsufficientBalanceError,
    InvalidPriceError,
    PoolAlreadyInitializedError,
    TickLiquidityOverflowError,
)
from ..math.liquidity_math import get_amounts_for_liquidity
from ..math.tick_math import (
    get_sqrt_price_at_tick,
    get_tick_at_sqrt_price,
    max_liquidity_per_tick,
    max_usable_tick,
    min_usable_tick,
)
from ..planning.types import PoolKey

# 풀에 예치된 자산을 보유하는 계정
POOL_MANAGER = "0x00000000000000000000000000000000000000aa"


@dataclass
class PositionRecord:
    """민트된 포지션"""
    position_id: int
    owner: str
    tick_lower: int
    tick_upper: int
    liquidity: int


@dataclass
class PoolState:
    """풀 상태

    - sqrt_price / tick: 현재 가격
    - liquidity: 현재 가격에서 활성화된 유동성
    - liquidity_gross: 틱별 경계 유동성 합계 (틱당 상한 검사용)
    """
    key: PoolKey
    sqrt_price: int
    tick: int
    liquidity: int = 0
    liquidity_gross: Dict[int, int] = field(default_factory=dict)
    positions: List[PositionRecord] = field(default_factory=list)

    def modify_liquidity(self, owner: str, tick_lower: int, tick_upper: int, liquidity: int) -> Tuple[int, int]:
        """유동성 추가 후 필요한 (amount0, amount1) 반환 (올림)

        Raises:
            ExecutionError: 틱이 정렬되지 않았거나 범위를 벗어난 경우
            TickLiquidityOverflowError: 틱당 유동성 상한 초과
        """
        spacing = self.key.tick_spacing
        if tick_lower >= tick_upper:
            raise ExecutionError(f"invalid tick range [{tick_lower}, {tick_upper}]")
        if tick_lower % spacing or tick_upper % spacing:
            raise ExecutionError(f"ticks [{tick_lower}, {tick_upper}] not aligned to spacing {spacing}")
        if tick_lower < min_usable_tick(spacing) or tick_upper > max_usable_tick(spacing):
            raise ExecutionError(f"ticks [{tick_lower}, {tick_upper}] outside usable range")

        if liquidity == 0:
            return 0, 0

        cap = max_liquidity_per_tick(spacing)
        for tick in (tick_lower, tick_upper):
            gross = self.liquidity_gross.get(tick, 0) + liquidity
            if gross > cap:
                raise TickLiquidityOverflowError(f"tick {tick} liquidity {gross} exceeds {cap}")

        for tick in (tick_lower, tick_upper):
            self.liquidity_gross[tick] = self.liquidity_gross.get(tick, 0) + liquidity
        if tick_lower <= self.tick < tick_upper:
            self.liquidity += liquidity

        self.positions.append(PositionRecord(
            position_id=len(self.positions) + 1,
            owner=owner,
            tick_lower=tick_lower,
            tick_upper=tick_upper,
            liquidity=liquidity,
        ))

        return get_amounts_for_liquidity(
            self.sqrt_price,
            get_sqrt_price_at_tick(tick_lower),
            get_sqrt_price_at_tick(tick_upper),
            liquidity,
            round_up=True,
        )


class InMemoryChain:
    """자산 원장 + 풀 원장 + 블록 시계

    사용법:
        chain = InMemoryChain(block=100)
        chain.mint(token, deployer, 10**24)
        chain.transfer(token, deployer, strategy, 10**24)
        chain.advance(50)
    """

    def __init__(self, block: int = 0):
        self.block = block
        self._balances: Dict[Tuple[str, str], int] = defaultdict(int)
        self._pools: Dict[PoolKey, PoolState] = {}

    def current_block(self) -> int:
        return self.block

    def advance(self, blocks: int = 1) -> int:
        self.block += blocks
        return self.block

    def mint(self, asset: str, holder: str, amount: int) -> None:
        self._balances[(asset.lower(), holder.lower())] += amount

    def balance_of(self, asset: str, holder: str) -> int:
        return self._balances.get((asset.lower(), holder.lower()), 0)

    def transfer(self, asset: str, sender: str, recipient: str, amount: int) -> None:
        if amount < 0:
            raise ExecutionError(f"negative transfer amount: {amount}")
        asset, sender, recipient = asset.lower(), sender.lower(), recipient.lower()
        balance = self._balances.get((asset, sender), 0)
        if balance < amount:
            raise InsufficientBalanceError(f"{sender} holds {balance} of {asset}, needs {amount}")
        self._balances[(asset, sender)] = balance - amount
        self._balances[(asset, recipient)] += amount

    @contextmanager
    def atomic(self):
        """블록이 예외로 끝나면 잔액과 풀 상태를 모두 되돌린다"""
        snapshot = (self.block, copy.deepcopy(self._balances), copy.deepcopy(self._pools))
        try:
            yield
        except BaseException:
            self.block, self._balances, self._pools = snapshot
            raise

    def initialize_pool(self, pool_key: PoolKey, sqrt_price: int) -> int:
        """풀 초기화, 시작 틱 반환

        Raises:
            PoolAlreadyInitializedError: 이미 초기화된 풀
            InvalidPriceError: 가격이 0이거나 허용 범위를 벗어난 경우
        """
        if pool_key in self._pools:
            raise PoolAlreadyInitializedError(f"pool {pool_key} already initialized")
        try:
            tick = get_tick_at_sqrt_price(sqrt_price)
        except ValueError:
            raise InvalidPriceError(sqrt_price) from None
        self._pools[pool_key] = PoolState(key=pool_key, sqrt_price=sqrt_price, tick=tick)
        return tick

    def pool(self, pool_key: PoolKey) -> PoolState:
        if pool_key not in self._pools:
            raise ExecutionError(f"pool {pool_key} not initialized")
        return self._pools[pool_key]

    def is_initialized(self, pool_key: PoolKey) -> bool:
        return pool_key in self._pools
