"""
Bounded plan builder

A single-owner, append-only list of (opcode, params) pairs backed by a
fixed number of slots. ``truncate()`` finalizes it exactly once and
returns an immutable ``Plan``.
"""

from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from ..errors import PlanBuilderInUseError, PlanFinalizedError, PlanLengthOverflowError
from .actions import Action, ActionParams, Operation, SettleParams

# settle x2 + mint + clear x2
FULL_RANGE_SIZE = 5
# settle + mint + clear
ONE_SIDED_SIZE = 3
MAX_PLAN_LENGTH = FULL_RANGE_SIZE + ONE_SIDED_SIZE


@dataclass(frozen=True)
class Plan:
    """Finalized, ordered batch of operations for the position executor."""
    actions: Tuple[Action, ...]
    params: Tuple[ActionParams, ...]

    def __post_init__(self):
        if len(self.actions) != len(self.params):
            raise ValueError("actions and params must have equal length")

    def __len__(self) -> int:
        return len(self.actions)

    def __iter__(self) -> Iterator[Operation]:
        for action, params in zip(self.actions, self.params):
            yield Operation(action, params)

    @property
    def position_count(self) -> int:
        return sum(1 for action in self.actions if action is Action.MINT_POSITION)

    def then(self, operation: Operation) -> "Plan":
        """Return a new plan with ``operation`` appended."""
        return Plan(self.actions + (operation.action,), self.params + (operation.params,))

    def settlement_totals(self) -> Dict[str, int]:
        """Amount each asset must be pre-funded with for the SETTLE steps."""
        totals: Dict[str, int] = defaultdict(int)
        for action, params in zip(self.actions, self.params):
            if action is Action.SETTLE and isinstance(params, SettleParams) and not params.payer_is_user:
                totals[params.asset] += params.amount
        return dict(totals)

    def encode(self) -> Tuple[bytes, Tuple[ActionParams, ...]]:
        return bytes(int(action) for action in self.actions), self.params


class PlanBuilder:
    """Fixed-capacity operation list.

    Usage:
        builder = PlanBuilder()
        with builder.session():
            builder.append(Action.SETTLE, params)
            plan = builder.truncate()
    """

    def __init__(self, capacity: int = MAX_PLAN_LENGTH):
        self.capacity = capacity
        self._in_session = False
        self.init()

    def init(self) -> None:
        """Allocate empty slots and reset the length counter."""
        if self._in_session:
            raise PlanBuilderInUseError("cannot reset a builder bound to a planning call")
        self._actions: List[Optional[Action]] = [None] * self.capacity
        self._params: List[Optional[ActionParams]] = [None] * self.capacity
        self._length = 0
        self._finalized = False

    def __len__(self) -> int:
        return self._length

    @property
    def is_finalized(self) -> bool:
        return self._finalized

    @property
    def remaining(self) -> int:
        return self.capacity - self._length

    @contextmanager
    def session(self):
        """Bind the builder to one planning call."""
        if self._in_session:
            raise PlanBuilderInUseError("builder is already bound to a planning call")
        self._in_session = True
        try:
            yield self
        finally:
            self._in_session = False

    def append(self, action: Action, params: ActionParams) -> None:
        if self._finalized:
            raise PlanFinalizedError("cannot append to a finalized plan")
        if self._length >= self.capacity:
            raise PlanLengthOverflowError(self.capacity)
        self._actions[self._length] = action
        self._params[self._length] = params
        self._length += 1

    def truncate(self) -> Plan:
        """Finalize the builder; may be called once."""
        if self._finalized:
            raise PlanFinalizedError("plan already finalized")
        self._finalized = True
        return Plan(
            tuple(self._actions[:self._length]),
            tuple(self._params[:self._length]),
        )
