"""
Planning value types

틱 경계, 풀 키, 마이그레이션 데이터 등 계획 단계에서 쓰는 불변 값들.
자산 식별자는 0x 접두 hex 주소 문자열이며, 정수 값으로 정렬합니다.
"""

from dataclasses import dataclass
from typing import Tuple


def asset_sort_key(asset: str) -> int:
    """자산 식별자의 정렬 키 (주소의 정수 값)"""
    return int(asset, 16)


def sort_assets(asset_a: str, asset_b: str) -> Tuple[str, str]:
    """두 자산을 (asset0, asset1) 순서로 정렬"""
    if asset_sort_key(asset_a) < asset_sort_key(asset_b):
        return asset_a, asset_b
    return asset_b, asset_a


@dataclass(frozen=True)
class PoolKey:
    """AMM 풀 식별자 (asset0 < asset1)"""
    asset0: str
    asset1: str
    fee: int
    tick_spacing: int

    @classmethod
    def from_assets(cls, asset_a: str, asset_b: str, fee: int, tick_spacing: int) -> "PoolKey":
        asset0, asset1 = sort_assets(asset_a, asset_b)
        return cls(asset0=asset0, asset1=asset1, fee=fee, tick_spacing=tick_spacing)


@dataclass(frozen=True)
class TickBounds:
    """포지션의 틱 경계

    (0, 0)은 "유효한 범위 없음" 센티넬입니다. 호출자는 0과 비교하지 말고
    is_valid()로 구분해야 합니다. 유효한 범위는 항상 lower < upper 입니다.
    """
    lower: int
    upper: int

    def is_valid(self) -> bool:
        return self.lower < self.upper


EMPTY_TICK_BOUNDS = TickBounds(0, 0)


@dataclass(frozen=True)
class MigrationData:
    """마이그레이션 한 번에 대해 계산되는 값들

    - sqrt_price: 풀 초기화 가격 (sqrtPriceX96)
    - token_amount / currency_amount: 풀 범위 포지션에 실제 투입되는 수량
    - leftover_currency: 상한 가격에서 token과 매칭되지 않은 currency
    - liquidity: 풀 범위 포지션 유동성
    - should_create_one_sided: 정책상 한쪽 포지션을 시도할지 여부
    - has_one_sided_params: 경계/상한 검사 후 실제로 포함되었는지 여부
    """
    sqrt_price: int
    token_amount: int
    currency_amount: int
    leftover_currency: int
    liquidity: int
    should_create_one_sided: bool
    has_one_sided_params: bool = False


@dataclass(frozen=True)
class OneSidedPosition:
    """한쪽 자산만으로 구성된 선택적 포지션"""
    asset: str
    amount: int
    bounds: TickBounds
    liquidity: int
    is_asset0: bool
