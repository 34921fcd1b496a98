"""
Error taxonomy for the migration engine.

Every failure is raised synchronously to the caller of the failing
operation. Nothing is retried internally. Degraded one-sided positions
are not errors and never surface here.
"""


class LaunchError(Exception):
    """Base class for all liquidity launcher errors."""


# Configuration -------------------------------------------------------------

class ConfigurationError(LaunchError, ValueError):
    """Strategy parameters rejected at construction."""


class TokenSplitTooHighError(ConfigurationError):
    pass


class InvalidTickSpacingError(ConfigurationError):
    pass


class InvalidFeeError(ConfigurationError):
    pass


class InvalidPositionRecipientError(ConfigurationError):
    pass


class InvalidSweepBlockError(ConfigurationError):
    """sweep_allowed_at must come strictly after migration_allowed_at."""


class InvalidTokenAndCurrencyError(ConfigurationError):
    pass


class AuctionSupplyIsZeroError(ConfigurationError):
    pass


# Funding -------------------------------------------------------------------

class FundingError(LaunchError):
    """Funding attempt rejected; retry with the configured amount."""


class InvalidAmountReceivedError(FundingError):
    def __init__(self, expected: int, received: int):
        super().__init__(f"expected {expected} tokens, received {received}")
        self.expected = expected
        self.received = received


class InsufficientCurrencyError(FundingError):
    def __init__(self, required: int, available: int):
        super().__init__(f"currency balance {available} below raised amount {required}")
        self.required = required
        self.available = available


# Timing / authorization ----------------------------------------------------

class TimingError(LaunchError):
    """Operation called before its block threshold."""


class MigrationNotAllowedError(TimingError):
    def __init__(self, allowed_at: int, current: int):
        super().__init__(f"migration allowed at block {allowed_at}, current block {current}")
        self.allowed_at = allowed_at
        self.current = current


class AuctionNotFinalError(TimingError):
    """Auction has not produced a final price yet."""


class SweepNotAllowedError(TimingError):
    def __init__(self, allowed_at: int, current: int):
        super().__init__(f"sweep allowed at block {allowed_at}, current block {current}")
        self.allowed_at = allowed_at
        self.current = current


class AuthorizationError(LaunchError):
    pass


class NotOperatorError(AuthorizationError):
    def __init__(self, caller: str):
        super().__init__(f"caller {caller} is not the operator")
        self.caller = caller


# Numeric -------------------------------------------------------------------

class NumericError(LaunchError, ValueError):
    """Auction outcome incompatible with the configured pool parameters."""


class InvalidPriceError(NumericError):
    def __init__(self, price: int):
        super().__init__(f"invalid price: {price}")
        self.price = price


class InvalidLiquidityError(NumericError):
    def __init__(self, max_liquidity: int, liquidity: int):
        super().__init__(f"liquidity {liquidity} exceeds per-tick cap {max_liquidity}")
        self.max_liquidity = max_liquidity
        self.liquidity = liquidity


class AmountOverflowError(NumericError):
    pass


# Planning ------------------------------------------------------------------

class PlanError(LaunchError):
    pass


class PlanLengthOverflowError(PlanError):
    def __init__(self, capacity: int):
        super().__init__(f"plan capacity of {capacity} operations exceeded")
        self.capacity = capacity


class PlanFinalizedError(PlanError):
    pass


class PlanBuilderInUseError(PlanError):
    pass


# State machine -------------------------------------------------------------

class InvalidTransitionError(LaunchError):
    def __init__(self, event: str, state: str):
        super().__init__(f"cannot handle {event} in state {state}")
        self.event = event
        self.state = state


class AuctionAlreadyCreatedError(InvalidTransitionError):
    pass


class AlreadyMigratedError(InvalidTransitionError):
    pass


# Execution (external collaborators) ----------------------------------------

class ExecutionError(LaunchError):
    """Raised by the pool ledger or position executor."""


class PoolAlreadyInitializedError(ExecutionError):
    pass


class InsufficientBalanceError(ExecutionError):
    pass


class DeadlinePassedError(ExecutionError):
    pass


class CurrencyNotSettledError(ExecutionError):
    pass


class TickLiquidityOverflowError(ExecutionError):
    pass
