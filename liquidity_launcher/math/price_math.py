"""
Price Math - 옥션 가격 → AMM 가격 변환

옥션의 청산 가격(Q96, currency per token)을 AMM 고유 표현으로 변환합니다.
AMM 가격은 항상 asset1/asset0 기준이므로, currency가 asset0이면 가격을 뒤집습니다.

    priceX192 = price << 96
    sqrtPriceX96 = floor(sqrt(priceX192))

References:
- Uniswap V4 Core: src/libraries/FullMath.sol
"""

import math
from typing import Tuple

from ..constants import Q96, Q192, MIN_SQRT_PRICE, MAX_SQRT_PRICE, UINT128_MAX, UINT160_MAX
from ..errors import AmountOverflowError, InvalidPriceError


def mul_div(a: int, b: int, denominator: int) -> int:
    """(a * b) / denominator 내림"""
    return (a * b) // denominator


def mul_div_rounding_up(a: int, b: int, denominator: int) -> int:
    """(a * b) / denominator 올림"""
    result = (a * b) // denominator
    if (a * b) % denominator > 0:
        result += 1
    return result


def div_rounding_up(numerator: int, denominator: int) -> int:
    """numerator / denominator 올림"""
    result = numerator // denominator
    if numerator % denominator > 0:
        result += 1
    return result


def convert_to_price_x192(price: int, currency_is_asset0: bool) -> int:
    """Q96 옥션 가격을 Q192 AMM 가격으로 변환

    Args:
        price: 옥션 청산 가격 (Q96, token 1개당 currency)
        currency_is_asset0: currency 식별자가 token보다 작은 경우 True

    Returns:
        priceX192 (asset1/asset0, Q192)

    Raises:
        InvalidPriceError: 가격이 0이거나, 뒤집은 가격이 0이거나, uint160 폭을 넘는 경우
    """
    if price <= 0:
        raise InvalidPriceError(price)

    if currency_is_asset0:
        # 2^192 / priceQ96 == (1 / 실제가격) * 2^96
        price = mul_div(Q96, Q96, price)
        if price == 0:
            raise InvalidPriceError(price)

    if price > UINT160_MAX:
        raise InvalidPriceError(price)

    return price << 96


def convert_to_sqrt_price(price_x192: int) -> int:
    """priceX192에서 sqrtPriceX96 계산

    Raises:
        InvalidPriceError: sqrtPrice가 AMM 전역 허용 범위를 벗어난 경우
    """
    sqrt_price_x96 = math.isqrt(price_x192)
    if sqrt_price_x96 < MIN_SQRT_PRICE or sqrt_price_x96 >= MAX_SQRT_PRICE:
        raise InvalidPriceError(sqrt_price_x96)
    return sqrt_price_x96


def calculate_amounts(
    price_x192: int,
    currency_amount: int,
    currency_is_asset0: bool,
    reserve_supply: int
) -> Tuple[int, int, int]:
    """currency 수량에 대응하는 token 수량 계산 (리저브 상한 적용)

    가격이 요구하는 token 수량이 리저브를 넘으면 리저브로 잘라내고,
    그만큼 줄어든 currency 수량과 남는 currency를 반환합니다.
    항상 corresponding + leftover == currency_amount 가 성립합니다.

    Args:
        price_x192: AMM 가격 (asset1/asset0, Q192)
        currency_amount: LP에 투입할 currency 수량
        currency_is_asset0: currency가 asset0인지 여부
        reserve_supply: token 수량 상한 (리저브 공급량)

    Returns:
        (token_amount, leftover_currency, corresponding_currency_amount)

    Raises:
        AmountOverflowError: 대응 currency 수량이 uint128 폭을 넘는 경우
    """
    if currency_is_asset0:
        # 가격 = token / currency
        token_amount = mul_div(price_x192, currency_amount, Q192)
    else:
        # 가격 = currency / token
        token_amount = mul_div(currency_amount, Q192, price_x192)

    if token_amount <= reserve_supply:
        return token_amount, 0, currency_amount

    if currency_is_asset0:
        corresponding = mul_div(reserve_supply, Q192, price_x192)
    else:
        corresponding = mul_div(reserve_supply, price_x192, Q192)

    if corresponding > UINT128_MAX:
        raise AmountOverflowError(f"corresponding currency amount overflows uint128: {corresponding}")

    return reserve_supply, currency_amount - corresponding, corresponding


def sqrt_price_x96_to_price(
    sqrt_price_x96: int,
    decimal0: int = 18,
    decimal1: int = 18
) -> float:
    """sqrtPriceX96을 human-readable 가격으로 변환 (표시용)

    가격 = (sqrtPriceX96 / 2^96)^2 / 10^(decimal1 - decimal0)
    """
    sqrt_price = sqrt_price_x96 / Q96
    return sqrt_price ** 2 / 10 ** (decimal1 - decimal0)
