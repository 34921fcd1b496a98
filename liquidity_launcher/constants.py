"""
Liquidity Launcher 상수 정의

마이그레이션 계획 엔진에서 사용하는 상수들:
- Q96/Q192: sqrt price 및 price 고정소수점 인코딩
- MIN_TICK/MAX_TICK, MIN_SQRT_PRICE/MAX_SQRT_PRICE: AMM 전역 가격 범위
- UINT128_MAX/UINT160_MAX: 수량·유동성·sqrt price 정수 폭
- MAX_LP_FEE, MIN/MAX_TICK_SPACING: 풀 파라미터 한계
- TOKEN_SPLIT_DENOMINATOR: 옥션/리저브 분할 비율의 분모
"""

from typing import FrozenSet

# Fixed-point 인코딩 상수
Q96: int = 2 ** 96
Q192: int = 2 ** 192

# 틱 범위 상수
MIN_TICK: int = -887272
MAX_TICK: int = 887272

# sqrt price 범위 (MIN_SQRT_PRICE <= sqrtPrice < MAX_SQRT_PRICE)
MIN_SQRT_PRICE: int = 4295128739
MAX_SQRT_PRICE: int = 1461446703485210103287273052203988822378723970342

# 정수 폭
UINT128_MAX: int = 2 ** 128 - 1
UINT160_MAX: int = 2 ** 160 - 1

# 풀 파라미터 한계
MAX_LP_FEE: int = 1_000_000  # 100% (pips)
MIN_TICK_SPACING: int = 1
MAX_TICK_SPACING: int = 32767

# 토큰 분할 비율: 10_000_000 = 100%
TOKEN_SPLIT_DENOMINATOR: int = 10_000_000
MAX_TOKEN_SPLIT: int = TOKEN_SPLIT_DENOMINATOR

# 포지션 수령인으로 쓸 수 없는 예약 주소
# (0 주소, "msg.sender" 및 "address(this)" 센티넬)
RESERVED_RECIPIENTS: FrozenSet[str] = frozenset({
    "0x0000000000000000000000000000000000000000",
    "0x0000000000000000000000000000000000000001",
    "0x0000000000000000000000000000000000000002",
})
