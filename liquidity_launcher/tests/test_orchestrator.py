"""
LBP Strategy 테스트

펀딩 → 옥션 → 마이그레이션 → 스윕 전체 흐름을 메모리 체인 위에서 검증합니다.
"""

import pytest

from ..chain.ledger import POOL_MANAGER
from ..constants import Q96
from ..errors import (
    AlreadyMigratedError,
    AuctionAlreadyCreatedError,
    AuctionNotFinalError,
    ExecutionError,
    InsufficientCurrencyError,
    InvalidAmountReceivedError,
    InvalidFeeError,
    InvalidPriceError,
    InvalidTransitionError,
    MigrationNotAllowedError,
    NotOperatorError,
    PoolAlreadyInitializedError,
    SweepNotAllowedError,
)
from ..strategy.state import MigrationState
from .conftest import (
    BIDDER,
    EXECUTOR,
    HIGH,
    LOW,
    MIGRATION_BLOCK,
    OPERATOR,
    RECIPIENT,
    STRATEGY,
    SWEEP_BLOCK,
    Launch,
    make_config,
)


class FailingExecutor:
    """계획을 받으면 항상 실패하는 실행기"""
    address = EXECUTOR

    def submit_plan(self, actions, params, deadline):
        raise ExecutionError("executor reverted")


def token_holdings(launch, auction):
    chain, token = launch.chain, launch.config.token
    return sum(chain.balance_of(token, holder) for holder in (STRATEGY, POOL_MANAGER, RECIPIENT, auction.address))


class TestConstruction:
    """생성 시 검증 테스트"""

    def test_invalid_config_rejected(self):
        with pytest.raises(InvalidFeeError):
            Launch(make_config(fee=2_000_000))

    def test_accessors(self, launch):
        strategy = launch.strategy
        assert strategy.token == LOW
        assert strategy.currency == HIGH
        assert strategy.total_supply == 10 ** 24
        assert strategy.auction_supply == 5 * 10 ** 23
        assert strategy.reserve_supply == 5 * 10 ** 23
        assert strategy.state is MigrationState.CONSTRUCTED
        assert strategy.auction is None
        assert strategy.sqrt_price is None
        assert strategy.liquidity is None


class TestOnFunded:
    """on_funded 테스트"""

    def test_exact_amount(self, launch):
        launch.fund()
        auction = launch.strategy.on_funded()
        assert launch.strategy.state is MigrationState.AUCTION_ACTIVE
        assert launch.chain.balance_of(LOW, auction.address) == 5 * 10 ** 23
        assert launch.chain.balance_of(LOW, STRATEGY) == 5 * 10 ** 23
        assert auction.funds_recipient == STRATEGY

    def test_amount_mismatch(self, launch):
        launch.fund(10 ** 24 - 1)
        with pytest.raises(InvalidAmountReceivedError):
            launch.strategy.on_funded()
        assert launch.strategy.state is MigrationState.CONSTRUCTED
        assert launch.factory.created == []

    def test_funded_twice(self, launch):
        launch.fund()
        launch.strategy.on_funded()
        with pytest.raises(AuctionAlreadyCreatedError):
            launch.strategy.on_funded()
        assert len(launch.factory.created) == 1


class TestMigrate:
    """migrate 테스트"""

    def test_before_migration_block(self, launch):
        launch.fund()
        auction = launch.strategy.on_funded()
        launch.chain.mint(HIGH, BIDDER, 10 ** 23)
        auction.bid(BIDDER, 10 ** 23)
        launch.chain.advance(MIGRATION_BLOCK - 1)
        with pytest.raises(MigrationNotAllowedError):
            launch.strategy.migrate()

    def test_auction_not_final(self):
        launch = Launch(make_config(), auction_end=MIGRATION_BLOCK + 10)
        launch.fund()
        launch.strategy.on_funded()
        launch.chain.advance(MIGRATION_BLOCK)
        assert launch.strategy.state is MigrationState.AUCTION_ACTIVE
        with pytest.raises(AuctionNotFinalError):
            launch.strategy.migrate()

    def test_not_funded(self, launch):
        launch.chain.advance(MIGRATION_BLOCK)
        with pytest.raises(InvalidTransitionError):
            launch.strategy.migrate()

    def test_one_sided_token(self, launch):
        """가격 1, 모금액 4e23: 풀 범위 + token 한쪽 포지션"""
        auction = launch.run_auction(4 * 10 ** 23)
        assert launch.strategy.state is MigrationState.MIGRATION_READY

        data = launch.strategy.migrate()

        assert launch.strategy.state is MigrationState.MIGRATED
        assert data.has_one_sided_params
        assert launch.strategy.sqrt_price == Q96
        assert launch.strategy.token_amount == 4 * 10 ** 23
        assert launch.strategy.currency_amount == 4 * 10 ** 23

        pool = launch.chain.pool(launch.config.pool_key)
        assert pool.sqrt_price == Q96
        assert [(p.tick_lower, p.tick_upper) for p in pool.positions] == [(-887220, 887220), (60, 887220)]
        assert all(p.owner == RECIPIENT for p in pool.positions)

        # 전략과 실행기에는 아무것도 남지 않음
        for asset in (LOW, HIGH):
            assert launch.chain.balance_of(asset, STRATEGY) == 0
            assert launch.chain.balance_of(asset, EXECUTOR) == 0
        assert token_holdings(launch, auction) == launch.config.total_supply

    def test_one_sided_currency(self, launch):
        """모금액 6e23: token은 리저브로 잘리고 currency 한쪽 포지션은 가격 아래"""
        launch.run_auction(6 * 10 ** 23)
        data = launch.strategy.migrate()
        assert data.token_amount == 5 * 10 ** 23
        assert data.leftover_currency == 10 ** 23

        pool = launch.chain.pool(launch.config.pool_key)
        assert (pool.positions[1].tick_lower, pool.positions[1].tick_upper) == (-887220, 0)

    def test_currency_is_asset0(self):
        launch = Launch(make_config(token=HIGH, currency=LOW), clearing_price=4 * Q96)
        auction = launch.run_auction(4 * 10 ** 23)
        data = launch.strategy.migrate()
        assert data.sqrt_price == Q96 // 2
        assert data.token_amount == 10 ** 23
        pool = launch.chain.pool(launch.config.pool_key)
        assert pool.positions[1].tick_upper <= pool.tick
        assert token_holdings(launch, auction) == launch.config.total_supply

    def test_exact_match_no_one_sided(self):
        config = make_config(total_supply=1000)
        launch = Launch(config)
        launch.run_auction(500)
        data = launch.strategy.migrate()
        assert not data.should_create_one_sided
        assert len(launch.chain.pool(config.pool_key).positions) == 1

    def test_currency_cap_excess_returned(self):
        """LP 상한을 넘는 currency는 포지션 수령인에게"""
        launch = Launch(make_config(max_currency_amount_for_lp=10 ** 23))
        launch.run_auction(4 * 10 ** 23)
        data = launch.strategy.migrate()
        assert data.currency_amount == 10 ** 23
        assert launch.chain.balance_of(HIGH, RECIPIENT) >= 3 * 10 ** 23

    def test_migrate_twice(self, launch):
        launch.run_auction(4 * 10 ** 23)
        launch.strategy.migrate()
        with pytest.raises(AlreadyMigratedError):
            launch.strategy.migrate()

    def test_insufficient_currency(self, launch):
        """옥션 모금액을 회수하지 않은 상태"""
        launch.fund()
        auction = launch.strategy.on_funded()
        launch.chain.mint(HIGH, BIDDER, 10 ** 23)
        auction.bid(BIDDER, 10 ** 23)
        launch.chain.advance(MIGRATION_BLOCK)
        with pytest.raises(InsufficientCurrencyError):
            launch.strategy.migrate()

    def test_invalid_price(self):
        """청산 가격이 uint160 폭을 넘음"""
        launch = Launch(make_config(), clearing_price=2 ** 161)
        launch.run_auction(10 ** 18)
        with pytest.raises(InvalidPriceError):
            launch.strategy.migrate()
        assert launch.strategy.state is MigrationState.MIGRATION_READY

    def test_executor_failure_rolls_back(self):
        launch = Launch(make_config(), executor=FailingExecutor())
        launch.run_auction(4 * 10 ** 23)
        before = (launch.chain.balance_of(LOW, STRATEGY), launch.chain.balance_of(HIGH, STRATEGY))

        with pytest.raises(ExecutionError):
            launch.strategy.migrate()

        assert (launch.chain.balance_of(LOW, STRATEGY), launch.chain.balance_of(HIGH, STRATEGY)) == before
        assert launch.chain.balance_of(LOW, EXECUTOR) == 0
        assert not launch.chain.is_initialized(launch.config.pool_key)
        assert launch.strategy.state is MigrationState.MIGRATION_READY
        assert launch.strategy.migration_data is None

    def test_pool_already_initialized(self, launch):
        launch.run_auction(4 * 10 ** 23)
        launch.chain.initialize_pool(launch.config.pool_key, Q96)
        with pytest.raises(PoolAlreadyInitializedError):
            launch.strategy.migrate()
        assert launch.chain.balance_of(LOW, STRATEGY) == 5 * 10 ** 23
        assert launch.strategy.state is MigrationState.MIGRATION_READY


class TestSweep:
    """sweep_token / sweep_currency 테스트"""

    def test_before_sweep_block(self, launch):
        launch.run_auction(4 * 10 ** 23)
        with pytest.raises(SweepNotAllowedError):
            launch.strategy.sweep_token(OPERATOR)
        with pytest.raises(SweepNotAllowedError):
            launch.strategy.sweep_currency(BIDDER)

    def test_not_operator(self, launch):
        launch.run_auction(4 * 10 ** 23)
        launch.chain.advance(SWEEP_BLOCK)
        with pytest.raises(NotOperatorError):
            launch.strategy.sweep_token(BIDDER)

    def test_sweep_unmigrated_funds(self, launch):
        """마이그레이션이 없었으면 운영자가 리저브와 모금액을 회수"""
        launch.run_auction(4 * 10 ** 23)
        launch.chain.advance(SWEEP_BLOCK)
        assert launch.strategy.sweep_eligible
        assert launch.strategy.sweep_token(OPERATOR) == 5 * 10 ** 23
        assert launch.strategy.sweep_currency(OPERATOR) == 4 * 10 ** 23
        assert launch.chain.balance_of(LOW, OPERATOR) == 5 * 10 ** 23
        assert launch.chain.balance_of(HIGH, OPERATOR) == 4 * 10 ** 23

    def test_zero_balance_is_noop(self, launch):
        launch.run_auction(4 * 10 ** 23)
        launch.strategy.migrate()
        launch.chain.advance(SWEEP_BLOCK)
        assert launch.strategy.sweep_token(OPERATOR) == 0
        assert launch.strategy.sweep_currency(OPERATOR) == 0
        assert launch.chain.balance_of(LOW, OPERATOR) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
