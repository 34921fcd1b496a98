"""
LBP Strategy - 옥션 결과를 AMM 유동성으로 옮기는 오케스트레이터

흐름:
    1. on_funded(): 정확한 총 공급량을 받으면 옥션을 만들고 옥션 몫을 넘김
    2. (옥션 진행, 외부)
    3. migrate(): 마이그레이션 블록 이후, 옥션의 최종 가격과 모금액으로
       포지션 계획을 만들어 실행기에 한 번에 제출하고 남은 잔액을 수령인에게 반환
    4. sweep_token() / sweep_currency(): 스윕 블록 이후 운영자만 호출 가능

migrate()는 전부 아니면 전무입니다. 어느 단계든 실패하면 원장 상태와
전략 상태 모두 호출 이전으로 남습니다.
"""
from typing import Callable, Optional

from ..errors import (
    AuctionNotFinalError,
    InsufficientCurrencyError,
    InvalidAmountReceivedError,
    MigrationNotAllowedError,
    NotOperatorError,
    SweepNotAllowedError,
)
from ..logging_utils import get_logger
from ..planning.planner import build_migration_plan, create_migration_data, plan_final_take_pair
from ..planning.types import MigrationData
from ..settings import settings
from .config import StrategyConfig
from .interfaces import AssetLedger, Auction, AuctionFactory, PoolLedger, PositionExecutor
from .state import MigrationState, StrategyEvent, next_state

logger = get_logger(__name__)


class LBPStrategy:
    """옥션 → AMM 마이그레이션 상태 머신

    사용법:
        strategy = LBPStrategy(address, config, ledger, pool_ledger, executor, factory, clock)
        ledger.transfer(token, deployer, address, config.total_supply)
        strategy.on_funded()
        ...
        strategy.migrate()
    """

    def __init__(
        self,
        address: str,
        config: StrategyConfig,
        ledger: AssetLedger,
        pool_ledger: PoolLedger,
        executor: PositionExecutor,
        auction_factory: AuctionFactory,
        clock: Callable[[], int],
    ):
        """
        Args:
            address: 전략 자신의 계정 주소 (잔액 보유자)
            config: 전략 설정 (생성 시 검증, 이후 불변)
            ledger: 자산 원장
            pool_ledger: 풀 초기화를 담당하는 원장
            executor: 작업 계획을 원자적으로 실행하는 포지션 실행기
            auction_factory: 옥션 생성기
            clock: 현재 블록 번호를 반환하는 함수

        Raises:
            ConfigurationError: 설정이 유효하지 않은 경우 (인스턴스 생성 안 됨)
        """
        config.validate_parameters()
        self.address = address.lower()
        self._config = config
        self._accounting = config.reserve_accounting()
        self._ledger = ledger
        self._pool_ledger = pool_ledger
        self._executor = executor
        self._auction_factory = auction_factory
        self._clock = clock

        self._phase = MigrationState.CONSTRUCTED
        self._auction: Optional[Auction] = None
        self._migration: Optional[MigrationData] = None

    # ------------------------------------------------------------------
    # 읽기 전용 접근자
    # ------------------------------------------------------------------

    @property
    def config(self) -> StrategyConfig:
        return self._config

    @property
    def token(self) -> str:
        return self._config.token

    @property
    def currency(self) -> str:
        return self._config.currency

    @property
    def fee(self) -> int:
        return self._config.fee

    @property
    def tick_spacing(self) -> int:
        return self._config.tick_spacing

    @property
    def position_recipient(self) -> str:
        return self._config.position_recipient

    @property
    def operator(self) -> str:
        return self._config.operator

    @property
    def migration_allowed_at(self) -> int:
        return self._config.migration_allowed_at

    @property
    def sweep_allowed_at(self) -> int:
        return self._config.sweep_allowed_at

    @property
    def max_currency_amount_for_lp(self) -> int:
        return self._config.max_currency_amount_for_lp

    @property
    def total_supply(self) -> int:
        return self._accounting.total_supply

    @property
    def auction_supply(self) -> int:
        return self._accounting.auction_supply

    @property
    def reserve_supply(self) -> int:
        return self._accounting.reserve_supply

    @property
    def auction(self) -> Optional[Auction]:
        return self._auction

    @property
    def migration_data(self) -> Optional[MigrationData]:
        return self._migration

    @property
    def sqrt_price(self) -> Optional[int]:
        return self._migration.sqrt_price if self._migration else None

    @property
    def token_amount(self) -> Optional[int]:
        return self._migration.token_amount if self._migration else None

    @property
    def currency_amount(self) -> Optional[int]:
        return self._migration.currency_amount if self._migration else None

    @property
    def liquidity(self) -> Optional[int]:
        return self._migration.liquidity if self._migration else None

    @property
    def state(self) -> MigrationState:
        """현재 상태 (MIGRATION_READY는 블록 높이와 옥션 상태로 판정)"""
        if self._phase is MigrationState.AUCTION_ACTIVE and self._migration_window_open():
            return MigrationState.MIGRATION_READY
        return self._phase

    @property
    def sweep_eligible(self) -> bool:
        return self._clock() >= self._config.sweep_allowed_at

    def _migration_window_open(self) -> bool:
        return (
            self._clock() >= self._config.migration_allowed_at
            and self._auction is not None
            and self._auction.is_final()
        )

    # ------------------------------------------------------------------
    # 상태 전이
    # ------------------------------------------------------------------

    def on_funded(self) -> Auction:
        """총 공급량 수령 콜백: 옥션을 만들고 옥션 몫을 넘긴다

        Returns:
            새로 만든 옥션

        Raises:
            AuctionAlreadyCreatedError: 이미 옥션이 만들어진 경우
            InvalidAmountReceivedError: 잔액이 설정된 총 공급량과 다른 경우
        """
        funded = next_state(self.state, StrategyEvent.TOKENS_RECEIVED)

        received = self._ledger.balance_of(self.token, self.address)
        if received != self.total_supply:
            raise InvalidAmountReceivedError(self.total_supply, received)

        active = next_state(funded, StrategyEvent.AUCTION_CREATED)
        with self._ledger.atomic():
            auction = self._auction_factory.create_auction(self.token, self.auction_supply, self.address)
            self._ledger.transfer(self.token, self.address, auction.address, self.auction_supply)

        self._auction = auction
        self._phase = active
        logger.info(
            f"Funded with {received} tokens: {self.auction_supply} to auction {auction.address}, "
            f"{self.reserve_supply} held in reserve"
        )
        return auction

    def migrate(self) -> MigrationData:
        """옥션 결과로 풀을 초기화하고 포지션을 민트한다

        Returns:
            기록된 MigrationData

        Raises:
            AlreadyMigratedError: 이미 마이그레이션한 경우
            MigrationNotAllowedError: 마이그레이션 블록 이전
            AuctionNotFinalError: 옥션 가격이 아직 확정되지 않은 경우
            InsufficientCurrencyError: 모금액만큼 currency를 보유하지 않은 경우
            InvalidPriceError / InvalidLiquidityError: 옥션 결과가 풀 파라미터와 맞지 않는 경우
            ExecutionError: 풀 초기화 또는 실행기 실패
        """
        current_block = self._clock()
        if self._phase is not MigrationState.MIGRATED:
            if current_block < self._config.migration_allowed_at:
                raise MigrationNotAllowedError(self._config.migration_allowed_at, current_block)
            if self._phase is MigrationState.AUCTION_ACTIVE and not self._auction.is_final():
                raise AuctionNotFinalError(f"auction {self._auction.address} has not settled")
        migrated = next_state(self.state, StrategyEvent.MIGRATE)

        currency_raised = self._auction.raised_amount()
        clearing_price = self._auction.final_price()

        available = self._ledger.balance_of(self.currency, self.address)
        if available < currency_raised:
            raise InsufficientCurrencyError(currency_raised, available)

        data = create_migration_data(self._config, clearing_price, currency_raised)
        plan, data = build_migration_plan(self._config, data)
        batch = plan.then(plan_final_take_pair(self._config, self.address))

        with self._ledger.atomic():
            for asset, amount in plan.settlement_totals().items():
                self._ledger.transfer(asset, self.address, self._executor.address, amount)
            self._pool_ledger.initialize_pool(self._config.pool_key, data.sqrt_price)
            actions, params = batch.encode()
            self._executor.submit_plan(actions, params, current_block + settings.DEADLINE_BLOCKS)
            token_dust = self._transfer_balance(self.token, self.position_recipient)
            currency_dust = self._transfer_balance(self.currency, self.position_recipient)

        self._migration = data
        self._phase = migrated
        logger.info(
            f"Migrated at block {current_block}: sqrtPriceX96={data.sqrt_price} "
            f"token={data.token_amount} currency={data.currency_amount} liquidity={data.liquidity} "
            f"one_sided={data.has_one_sided_params}"
        )
        if token_dust or currency_dust:
            logger.info(f"Returned {token_dust} token / {currency_dust} currency to {self.position_recipient}")
        return data

    # ------------------------------------------------------------------
    # 스윕
    # ------------------------------------------------------------------

    def sweep_token(self, caller: str) -> int:
        """남은 token 잔액을 운영자에게 보낸다 (잔액 0이면 아무것도 하지 않음)"""
        return self._sweep(self.token, caller)

    def sweep_currency(self, caller: str) -> int:
        """남은 currency 잔액을 운영자에게 보낸다 (잔액 0이면 아무것도 하지 않음)"""
        return self._sweep(self.currency, caller)

    def _sweep(self, asset: str, caller: str) -> int:
        current_block = self._clock()
        if current_block < self._config.sweep_allowed_at:
            raise SweepNotAllowedError(self._config.sweep_allowed_at, current_block)
        if caller.lower() != self.operator:
            raise NotOperatorError(caller)
        amount = self._transfer_balance(asset, self.operator)
        if amount:
            logger.info(f"Swept {amount} of {asset} to operator {self.operator}")
        return amount

    def _transfer_balance(self, asset: str, recipient: str) -> int:
        amount = self._ledger.balance_of(asset, self.address)
        if amount > 0:
            self._ledger.transfer(asset, self.address, recipient, amount)
        return amount
