"""
Planning layer

실행기에 넘길 작업 계획을 만드는 모듈들:
- actions: 작업 코드와 파라미터
- builder: 용량 제한 append-only builder와 확정된 Plan
- planner: 풀 범위 / 한쪽 포지션 계획
"""

from .actions import (
    Action,
    ClearOrTakeParams,
    MintPositionParams,
    Operation,
    SettleParams,
    TakePairParams,
)
from .builder import FULL_RANGE_SIZE, MAX_PLAN_LENGTH, ONE_SIDED_SIZE, Plan, PlanBuilder
from .types import (
    EMPTY_TICK_BOUNDS,
    MigrationData,
    OneSidedPosition,
    PoolKey,
    TickBounds,
    sort_assets,
)
from .planner import (
    build_migration_plan,
    create_migration_data,
    ensure_full_range_liquidity,
    full_range_bounds,
    left_side_bounds,
    one_sided_position,
    plan_final_take_pair,
    plan_full_range_position,
    plan_one_sided_position,
    right_side_bounds,
)
