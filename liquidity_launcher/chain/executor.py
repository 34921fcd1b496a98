"""
In-memory position executor

Interprets an encoded plan against an ``InMemoryChain``: settles pre-funded
balances into the pool, mints positions, and clears or takes what is left.
Open balances are tracked per asset; every one of them must be zero when
the plan ends.
"""

from collections import defaultdict
from typing import Dict, Sequence

from ..errors import CurrencyNotSettledError, DeadlinePassedError, ExecutionError
from ..logging_utils import get_logger
from ..planning.actions import (
    Action,
    ActionParams,
    ClearOrTakeParams,
    MintPositionParams,
    SettleParams,
    TakePairParams,
)
from .ledger import POOL_MANAGER, InMemoryChain

logger = get_logger(__name__)


class InMemoryPositionExecutor:
    """
    Args:
        chain: 실행 대상 체인
        address: 실행기 계정 (사전 입금된 자산 보유)
        caller: 계획을 제출하는 계정 (take 수령인, payer_is_user 지불인)
    """

    def __init__(self, chain: InMemoryChain, address: str, caller: str):
        self.chain = chain
        self.address = address.lower()
        self.caller = caller.lower()

    def submit_plan(self, actions: bytes, params: Sequence[ActionParams], deadline: int) -> None:
        if self.chain.current_block() > deadline:
            raise DeadlinePassedError(f"deadline {deadline} passed at block {self.chain.current_block()}")
        if len(actions) != len(params):
            raise ExecutionError(f"{len(actions)} actions but {len(params)} params")

        with self.chain.atomic():
            deltas: Dict[str, int] = defaultdict(int)
            for code, param in zip(actions, params):
                try:
                    action = Action(code)
                except ValueError:
                    raise ExecutionError(f"unsupported action 0x{code:02x}") from None
                self._dispatch(action, param, deltas)

            open_deltas = {asset: delta for asset, delta in deltas.items() if delta != 0}
            if open_deltas:
                raise CurrencyNotSettledError(f"open balances after plan: {open_deltas}")

        logger.debug(f"Executed plan of {len(actions)} actions")

    def _dispatch(self, action: Action, param: ActionParams, deltas: Dict[str, int]) -> None:
        if action is Action.SETTLE and isinstance(param, SettleParams):
            payer = self.caller if param.payer_is_user else self.address
            self.chain.transfer(param.asset, payer, POOL_MANAGER, param.amount)
            deltas[param.asset] += param.amount

        elif action is Action.MINT_POSITION and isinstance(param, MintPositionParams):
            pool = self.chain.pool(param.pool_key)
            amount0, amount1 = pool.modify_liquidity(
                param.owner, param.tick_lower, param.tick_upper, param.liquidity
            )
            if amount0 > param.amount0_max or amount1 > param.amount1_max:
                raise ExecutionError(
                    f"mint needs ({amount0}, {amount1}), max ({param.amount0_max}, {param.amount1_max})"
                )
            deltas[param.pool_key.asset0] -= amount0
            deltas[param.pool_key.asset1] -= amount1

        elif action is Action.CLEAR_OR_TAKE and isinstance(param, ClearOrTakeParams):
            credit = deltas[param.asset]
            if credit <= 0:
                return
            if credit > param.amount_max:
                self.chain.transfer(param.asset, POOL_MANAGER, self.caller, credit)
            deltas[param.asset] = 0

        elif action is Action.TAKE_PAIR and isinstance(param, TakePairParams):
            for asset in (param.asset0, param.asset1):
                credit = deltas[asset]
                if credit > 0:
                    self.chain.transfer(asset, POOL_MANAGER, param.recipient, credit)
                    deltas[asset] = 0

        else:
            raise ExecutionError(f"params {type(param).__name__} do not match action {action.name}")
