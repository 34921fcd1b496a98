"""
Liquidity Launcher

옥션에서 발견된 가격과 남은 리저브 토큰으로 AMM 집중 유동성 포지션을
한 번에, 원자적으로 만드는 마이그레이션 계획 엔진.
"""

__version__ = "0.1.0"

from .constants import Q96, Q192, MIN_TICK, MAX_TICK, TOKEN_SPLIT_DENOMINATOR
