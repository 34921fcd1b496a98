"""
Strategy layer

설정, 외부 협력자 인터페이스, 상태 머신, 오케스트레이터.
"""

from .config import ReserveAccounting, StrategyConfig, load_strategy_config
from .orchestrator import LBPStrategy
from .state import MigrationState, StrategyEvent, next_state
