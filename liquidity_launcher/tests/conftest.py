"""
공통 fixture

주소 상수와 StrategyConfig 생성 헬퍼, 메모리 체인 위에 구성한 전략 환경.
"""

import pytest

from ..chain import FixedPriceAuctionFactory, InMemoryChain, InMemoryPositionExecutor
from ..constants import Q96
from ..strategy import LBPStrategy, StrategyConfig

LOW = "0x1000000000000000000000000000000000000001"
HIGH = "0x2000000000000000000000000000000000000002"
RECIPIENT = "0x00000000000000000000000000000000000000f1"
OPERATOR = "0x00000000000000000000000000000000000000f2"
DEPLOYER = "0x00000000000000000000000000000000000000d1"
BIDDER = "0x00000000000000000000000000000000000000b1"
STRATEGY = "0x00000000000000000000000000000000000000c1"
EXECUTOR = "0x00000000000000000000000000000000000000e1"

MIGRATION_BLOCK = 100
SWEEP_BLOCK = 200


def make_config(**overrides) -> StrategyConfig:
    """기본값: token=LOW(asset0), currency=HIGH(asset1), 공급량 절반 옥션"""
    params = dict(
        token=LOW,
        currency=HIGH,
        total_supply=10 ** 24,
        token_split_to_auction=5_000_000,
        fee=3000,
        tick_spacing=60,
        position_recipient=RECIPIENT,
        migration_allowed_at=MIGRATION_BLOCK,
        sweep_allowed_at=SWEEP_BLOCK,
        operator=OPERATOR,
    )
    params.update(overrides)
    return StrategyConfig(**params)


class Launch:
    """체인 + 전략 + 옥션을 묶은 테스트 환경"""

    def __init__(self, config: StrategyConfig, clearing_price: int = Q96, auction_end: int = MIGRATION_BLOCK,
                 executor=None):
        self.config = config
        self.chain = InMemoryChain(block=0)
        self.factory = FixedPriceAuctionFactory(self.chain, config.currency, clearing_price, auction_end)
        self.executor = executor or InMemoryPositionExecutor(self.chain, EXECUTOR, caller=STRATEGY)
        self.strategy = LBPStrategy(
            STRATEGY, config, self.chain, self.chain, self.executor, self.factory, self.chain.current_block
        )

    def fund(self, amount: int = None):
        amount = self.config.total_supply if amount is None else amount
        self.chain.mint(self.config.token, DEPLOYER, amount)
        self.chain.transfer(self.config.token, DEPLOYER, STRATEGY, amount)

    def run_auction(self, raised: int):
        """펀딩 → 옥션 생성 → 입찰 → 마이그레이션 블록까지 진행 → 모금액 회수"""
        self.fund()
        auction = self.strategy.on_funded()
        self.chain.mint(self.config.currency, BIDDER, raised)
        auction.bid(BIDDER, raised)
        self.chain.advance(MIGRATION_BLOCK - self.chain.current_block())
        auction.sweep_currency()
        return auction


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def launch(config):
    return Launch(config)
