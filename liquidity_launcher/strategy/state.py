"""
Strategy lifecycle

    CONSTRUCTED → FUNDED → AUCTION_ACTIVE → MIGRATION_READY → MIGRATED

MIGRATION_READY has no transition call of its own: it is derived from the
block height and the auction having a final price. Sweep eligibility is
orthogonal and tracked separately by the strategy.
"""
from enum import Enum
from typing import Dict, Tuple, Type

from ..errors import AlreadyMigratedError, AuctionAlreadyCreatedError, InvalidTransitionError


class MigrationState(Enum):
    CONSTRUCTED = "constructed"
    FUNDED = "funded"
    AUCTION_ACTIVE = "auction_active"
    MIGRATION_READY = "migration_ready"
    MIGRATED = "migrated"


class StrategyEvent(Enum):
    TOKENS_RECEIVED = "tokens_received"
    AUCTION_CREATED = "auction_created"
    MIGRATE = "migrate"


_TRANSITIONS: Dict[Tuple[MigrationState, StrategyEvent], MigrationState] = {
    (MigrationState.CONSTRUCTED, StrategyEvent.TOKENS_RECEIVED): MigrationState.FUNDED,
    (MigrationState.FUNDED, StrategyEvent.AUCTION_CREATED): MigrationState.AUCTION_ACTIVE,
    (MigrationState.MIGRATION_READY, StrategyEvent.MIGRATE): MigrationState.MIGRATED,
}

_REJECTIONS: Dict[Tuple[MigrationState, StrategyEvent], Type[InvalidTransitionError]] = {
    (MigrationState.FUNDED, StrategyEvent.TOKENS_RECEIVED): AuctionAlreadyCreatedError,
    (MigrationState.AUCTION_ACTIVE, StrategyEvent.TOKENS_RECEIVED): AuctionAlreadyCreatedError,
    (MigrationState.MIGRATION_READY, StrategyEvent.TOKENS_RECEIVED): AuctionAlreadyCreatedError,
    (MigrationState.MIGRATED, StrategyEvent.TOKENS_RECEIVED): AuctionAlreadyCreatedError,
    (MigrationState.MIGRATED, StrategyEvent.MIGRATE): AlreadyMigratedError,
}


def next_state(state: MigrationState, event: StrategyEvent) -> MigrationState:
    """Resolve a transition or raise the typed error for rejecting it."""
    key = (state, event)
    if key in _TRANSITIONS:
        return _TRANSITIONS[key]
    error_cls = _REJECTIONS.get(key, InvalidTransitionError)
    raise error_cls(event.value, state.value)
