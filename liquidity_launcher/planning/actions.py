"""
Executor opcodes and their parameter payloads.

Opcode values follow the v4 position manager action numbering so an
encoded plan can be decoded by any executor that speaks it.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Union

from .types import PoolKey


class Action(IntEnum):
    MINT_POSITION = 0x02
    SETTLE = 0x0b
    TAKE_PAIR = 0x11
    CLEAR_OR_TAKE = 0x13


@dataclass(frozen=True)
class SettleParams:
    asset: str
    amount: int
    payer_is_user: bool = False


@dataclass(frozen=True)
class MintPositionParams:
    pool_key: PoolKey
    tick_lower: int
    tick_upper: int
    liquidity: int
    amount0_max: int
    amount1_max: int
    owner: str
    hook_data: bytes = b""


@dataclass(frozen=True)
class ClearOrTakeParams:
    # credits at or below amount_max are forfeited, larger credits are taken
    asset: str
    amount_max: int = 0


@dataclass(frozen=True)
class TakePairParams:
    asset0: str
    asset1: str
    recipient: str


ActionParams = Union[SettleParams, MintPositionParams, ClearOrTakeParams, TakePairParams]


@dataclass(frozen=True)
class Operation:
    action: Action
    params: ActionParams
