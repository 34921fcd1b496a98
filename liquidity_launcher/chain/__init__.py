"""
In-memory reference collaborators

전략이 구동하는 외부 시스템(자산 원장, 풀 원장, 포지션 실행기, 옥션)의
메모리 구현. CLI 시뮬레이션과 테스트에서 사용합니다.
"""

from .ledger import POOL_MANAGER, InMemoryChain, PoolState, PositionRecord
from .executor import InMemoryPositionExecutor
from .auction import FixedPriceAuction, FixedPriceAuctionFactory
