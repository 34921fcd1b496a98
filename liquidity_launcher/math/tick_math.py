"""
Tick Math - Tick ↔ sqrtPrice 변환 및 틱 경계 계산

AMM의 틱 수학 함수들. 온체인 컨트랙트와 동일한 정밀도로 구현.
모든 포지션 경계는 이 모듈의 반올림 함수를 통해서만 계산해야
포지션 간 틱 정렬이 어긋나지 않습니다.

References:
- Uniswap V4 Core: src/libraries/TickMath.sol
- Uniswap V4 Core: src/libraries/Pool.sol (tickSpacingToMaxLiquidityPerTick)

핵심 공식:
    price = 1.0001^tick
    sqrtPriceX96 = sqrt(price) * 2^96
    maxLiquidityPerTick = (2^128 - 1) / numTicks
"""

from ..constants import MIN_TICK, MAX_TICK, MIN_SQRT_PRICE, MAX_SQRT_PRICE, UINT128_MAX


def get_sqrt_price_at_tick(tick: int) -> int:
    """틱에서 sqrtPriceX96 계산

    Solidity TickMath.getSqrtPriceAtTick()과 동일한 구현.
    온체인 수준의 정밀도를 위해 정수 연산만 사용.

    Args:
        tick: 틱 인덱스 (-887272 ~ 887272)

    Returns:
        sqrtPriceX96 (Q64.96 형식)

    Raises:
        ValueError: 틱이 유효 범위를 벗어난 경우
    """
    if tick < MIN_TICK or tick > MAX_TICK:
        raise ValueError(f"틱이 유효 범위를 벗어났습니다: {tick} (범위: {MIN_TICK} ~ {MAX_TICK})")

    abs_tick = abs(tick)

    # 매직 넘버를 사용한 비트 연산 (Solidity 구현과 동일)
    ratio = 0x100000000000000000000000000000000 if abs_tick & 0x1 == 0 \
        else 0xfffcb933bd6fad37aa2d162d1a594001

    if abs_tick & 0x2:
        ratio = (ratio * 0xfff97272373d413259a46990580e213a) >> 128
    if abs_tick & 0x4:
        ratio = (ratio * 0xfff2e50f5f656932ef12357cf3c7fdcc) >> 128
    if abs_tick & 0x8:
        ratio = (ratio * 0xffe5caca7e10e4e61c3624eaa0941cd0) >> 128
    if abs_tick & 0x10:
        ratio = (ratio * 0xffcb9843d60f6159c9db58835c926644) >> 128
    if abs_tick & 0x20:
        ratio = (ratio * 0xff973b41fa98c081472e6896dfb254c0) >> 128
    if abs_tick & 0x40:
        ratio = (ratio * 0xff2ea16466c96a3843ec78b326b52861) >> 128
    if abs_tick & 0x80:
        ratio = (ratio * 0xfe5dee046a99a2a811c461f1969c3053) >> 128
    if abs_tick & 0x100:
        ratio = (ratio * 0xfcbe86c7900a88aedcffc83b479aa3a4) >> 128
    if abs_tick & 0x200:
        ratio = (ratio * 0xf987a7253ac413176f2b074cf7815e54) >> 128
    if abs_tick & 0x400:
        ratio = (ratio * 0xf3392b0822b70005940c7a398e4b70f3) >> 128
    if abs_tick & 0x800:
        ratio = (ratio * 0xe7159475a2c29b7443b29c7fa6e889d9) >> 128
    if abs_tick & 0x1000:
        ratio = (ratio * 0xd097f3bdfd2022b8845ad8f792aa5825) >> 128
    if abs_tick & 0x2000:
        ratio = (ratio * 0xa9f746462d870fdf8a65dc1f90e061e5) >> 128
    if abs_tick & 0x4000:
        ratio = (ratio * 0x70d869a156d2a1b890bb3df62baf32f7) >> 128
    if abs_tick & 0x8000:
        ratio = (ratio * 0x31be135f97d08fd981231505542fcfa6) >> 128
    if abs_tick & 0x10000:
        ratio = (ratio * 0x9aa508b5b7a84e1c677de54f3e99bc9) >> 128
    if abs_tick & 0x20000:
        ratio = (ratio * 0x5d6af8dedb81196699c329225ee604) >> 128
    if abs_tick & 0x40000:
        ratio = (ratio * 0x2216e584f5fa1ea926041bedfe98) >> 128
    if abs_tick & 0x80000:
        ratio = (ratio * 0x48a170391f7dc42444e8fa2) >> 128

    if tick > 0:
        ratio = (2**256 - 1) // ratio

    # Q128.128 -> Q64.96 (올림)
    return (ratio >> 32) + (1 if ratio % (1 << 32) != 0 else 0)


def get_tick_at_sqrt_price(sqrt_price_x96: int) -> int:
    """sqrtPriceX96에서 틱 계산

    getSqrtPriceAtTick(tick) <= sqrtPriceX96 를 만족하는 가장 큰 틱을 반환.
    Solidity TickMath.getTickAtSqrtPrice()와 동일한 구현.

    Args:
        sqrt_price_x96: sqrtPriceX96 (Q64.96 형식)

    Returns:
        틱 인덱스

    Raises:
        ValueError: sqrtPriceX96이 유효 범위를 벗어난 경우
    """
    if sqrt_price_x96 < MIN_SQRT_PRICE or sqrt_price_x96 >= MAX_SQRT_PRICE:
        raise ValueError(
            f"sqrtPriceX96이 유효 범위를 벗어났습니다: {sqrt_price_x96}"
        )

    ratio = sqrt_price_x96 << 32
    msb = ratio.bit_length() - 1

    if msb >= 128:
        r = ratio >> (msb - 127)
    else:
        r = ratio << (127 - msb)

    log_2 = (msb - 128) << 64

    # 로그 계산 (소수부 14비트)
    for i in range(14):
        r = (r * r) >> 127
        f = r >> 128
        log_2 |= f << (63 - i)
        r >>= f

    log_sqrt10001 = log_2 * 255738958999603826347141

    tick_low = (log_sqrt10001 - 3402992956809132418596140100660247210) >> 128
    tick_high = (log_sqrt10001 + 291339464771989622907027621153398088495) >> 128

    if tick_low == tick_high:
        return tick_low

    if get_sqrt_price_at_tick(tick_high) <= sqrt_price_x96:
        return tick_high
    return tick_low


def tick_floor(tick: int, tick_spacing: int) -> int:
    """틱을 tick_spacing 배수로 내림 (음의 무한대 방향)"""
    return (tick // tick_spacing) * tick_spacing


def tick_ceil(tick: int, tick_spacing: int) -> int:
    """틱을 tick_spacing 배수로 올림 (이미 정렬된 경우 그대로)"""
    floored = tick_floor(tick, tick_spacing)
    return floored if floored == tick else floored + tick_spacing


def tick_strict_ceil(tick: int, tick_spacing: int) -> int:
    """틱보다 엄격히 큰 가장 작은 tick_spacing 배수

    이미 정렬된 틱이라도 입력값을 그대로 반환하지 않습니다.
    현재 가격 틱 위에 놓이는 포지션이 현재 틱을 포함하지 않게 할 때 사용.
    """
    return tick_floor(tick, tick_spacing) + tick_spacing


def _div_toward_zero(a: int, b: int) -> int:
    # Solidity의 정수 나눗셈 (0 방향 절삭)
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def min_usable_tick(tick_spacing: int) -> int:
    """주어진 간격에서 사용 가능한 최소 틱"""
    return _div_toward_zero(MIN_TICK, tick_spacing) * tick_spacing


def max_usable_tick(tick_spacing: int) -> int:
    """주어진 간격에서 사용 가능한 최대 틱"""
    return _div_toward_zero(MAX_TICK, tick_spacing) * tick_spacing


def max_liquidity_per_tick(tick_spacing: int) -> int:
    """틱 하나에 배치할 수 있는 최대 유동성

    전체 uint128 유동성 예산을 간격이 만드는 서로 다른 틱 개수로 나눈 값.

    Args:
        tick_spacing: 틱 간격

    Returns:
        틱당 최대 유동성
    """
    min_compressed = MIN_TICK // tick_spacing
    max_compressed = _div_toward_zero(MAX_TICK, tick_spacing)
    num_ticks = max_compressed - min_compressed + 1
    return UINT128_MAX // num_ticks

