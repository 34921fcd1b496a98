"""
Plan Builder 테스트

용량 제한, 한 번만 가능한 확정(truncate), 세션 독점을 검증합니다.
"""

import pytest

from ..errors import PlanBuilderInUseError, PlanFinalizedError, PlanLengthOverflowError
from ..planning.actions import Action, ClearOrTakeParams, Operation, SettleParams, TakePairParams
from ..planning.builder import MAX_PLAN_LENGTH, Plan, PlanBuilder

TOKEN = "0x1000000000000000000000000000000000000001"
CURRENCY = "0x2000000000000000000000000000000000000002"


def settle(asset=TOKEN, amount=1):
    return SettleParams(asset, amount)


class TestPlanBuilder:
    """PlanBuilder 테스트"""

    def test_empty_after_init(self):
        builder = PlanBuilder()
        assert len(builder) == 0
        assert builder.remaining == MAX_PLAN_LENGTH
        assert len(builder.truncate()) == 0

    def test_truncate_keeps_order(self):
        builder = PlanBuilder()
        builder.append(Action.SETTLE, settle(TOKEN, 5))
        builder.append(Action.CLEAR_OR_TAKE, ClearOrTakeParams(TOKEN))
        plan = builder.truncate()
        assert plan.actions == (Action.SETTLE, Action.CLEAR_OR_TAKE)
        assert plan.params[0] == SettleParams(TOKEN, 5)

    def test_overflow(self):
        """용량을 넘는 append는 실패"""
        builder = PlanBuilder(capacity=2)
        builder.append(Action.SETTLE, settle())
        builder.append(Action.SETTLE, settle())
        with pytest.raises(PlanLengthOverflowError):
            builder.append(Action.SETTLE, settle())
        assert len(builder) == 2

    def test_default_capacity_is_eight(self):
        builder = PlanBuilder()
        for _ in range(8):
            builder.append(Action.SETTLE, settle())
        with pytest.raises(PlanLengthOverflowError):
            builder.append(Action.SETTLE, settle())

    def test_truncate_twice(self):
        builder = PlanBuilder()
        builder.truncate()
        with pytest.raises(PlanFinalizedError):
            builder.truncate()

    def test_append_after_truncate(self):
        builder = PlanBuilder()
        builder.truncate()
        assert builder.is_finalized
        with pytest.raises(PlanFinalizedError):
            builder.append(Action.SETTLE, settle())

    def test_init_resets(self):
        builder = PlanBuilder()
        builder.append(Action.SETTLE, settle())
        builder.truncate()
        builder.init()
        assert len(builder) == 0
        assert not builder.is_finalized

    def test_session_is_exclusive(self):
        """이미 세션에 묶인 builder는 다시 묶거나 초기화할 수 없음"""
        builder = PlanBuilder()
        with builder.session():
            with pytest.raises(PlanBuilderInUseError):
                with builder.session():
                    pass
            with pytest.raises(PlanBuilderInUseError):
                builder.init()
        # 세션 종료 후에는 다시 사용 가능
        with builder.session():
            pass

    def test_session_released_on_error(self):
        builder = PlanBuilder()
        with pytest.raises(PlanLengthOverflowError):
            with builder.session():
                for _ in range(MAX_PLAN_LENGTH + 1):
                    builder.append(Action.SETTLE, settle())
        builder.init()
        assert len(builder) == 0


class TestPlan:
    """Plan 테스트"""

    def test_mismatched_lengths(self):
        with pytest.raises(ValueError):
            Plan((Action.SETTLE,), ())

    def test_then_returns_new_plan(self):
        plan = Plan((Action.SETTLE,), (settle(),))
        take = Operation(Action.TAKE_PAIR, TakePairParams(TOKEN, CURRENCY, TOKEN))
        extended = plan.then(take)
        assert len(plan) == 1
        assert len(extended) == 2
        assert list(extended)[-1] == take

    def test_encode(self):
        plan = Plan(
            (Action.SETTLE, Action.MINT_POSITION, Action.CLEAR_OR_TAKE, Action.TAKE_PAIR),
            (settle(), settle(), settle(), settle()),
        )
        actions, params = plan.encode()
        assert actions == bytes([0x0b, 0x02, 0x13, 0x11])
        assert len(params) == 4

    def test_settlement_totals(self):
        """SETTLE 수량을 자산별로 합산 (사용자 지불분 제외)"""
        plan = Plan(
            (Action.SETTLE, Action.SETTLE, Action.SETTLE, Action.SETTLE),
            (settle(TOKEN, 3), settle(CURRENCY, 4), settle(TOKEN, 5), SettleParams(CURRENCY, 9, payer_is_user=True)),
        )
        assert plan.settlement_totals() == {TOKEN: 8, CURRENCY: 4}

    def test_position_count(self):
        plan = Plan((Action.SETTLE, Action.MINT_POSITION), (settle(), settle()))
        assert plan.position_count == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
