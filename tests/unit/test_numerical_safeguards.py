"""
Тесты для модуля Numerical Safeguards

Проверяет:
1. Деление с NaN при нулевом делителе
2. IEEE-семантику pow/log/reciprocal/remainder
3. Обёртку guarded для domain errors и overflow
4. Округление и знак
"""

import math

import pytest

from src.core.math.numerical_safeguards import (
    INF,
    ceil_value,
    floor_value,
    guarded,
    is_valid_float,
    round_half_up,
    safe_divide,
    safe_log,
    safe_pow,
    safe_reciprocal,
    safe_remainder,
    sign_of,
)


# =============================================================================
# ДЕЛЕНИЕ
# =============================================================================


class TestSafeDivide:
    """Тесты для safe_divide"""

    def test_regular_division(self) -> None:
        assert safe_divide(10.0, 4.0) == 2.5

    def test_division_by_zero_is_nan(self) -> None:
        """Деление на ноль даёт NaN, не исключение"""
        assert math.isnan(safe_divide(5.0, 0.0))
        assert math.isnan(safe_divide(0.0, 0.0))

    def test_nan_propagates(self) -> None:
        assert math.isnan(safe_divide(float("nan"), 2.0))


class TestSafeReciprocal:
    """Тесты для safe_reciprocal"""

    def test_regular(self) -> None:
        assert safe_reciprocal(4.0) == 0.25

    def test_zero_gives_signed_infinity(self) -> None:
        assert safe_reciprocal(0.0) == INF
        assert safe_reciprocal(-0.0) == -INF


class TestSafeRemainder:
    """Тесты для safe_remainder"""

    def test_sign_follows_dividend(self) -> None:
        assert safe_remainder(7.0, 3.0) == 1.0
        assert safe_remainder(-7.0, 3.0) == -1.0
        assert safe_remainder(7.0, -3.0) == 1.0

    def test_zero_divisor_is_nan(self) -> None:
        assert math.isnan(safe_remainder(7.0, 0.0))


# =============================================================================
# СТЕПЕНИ И ЛОГАРИФМЫ
# =============================================================================


class TestSafePow:
    """Тесты для safe_pow"""

    def test_regular(self) -> None:
        assert safe_pow(2.0, 10.0) == 1024.0
        assert safe_pow(-2.0, 3.0) == -8.0

    def test_negative_base_fractional_exponent_is_nan(self) -> None:
        assert math.isnan(safe_pow(-8.0, 1 / 3))

    def test_zero_to_negative_power(self) -> None:
        assert safe_pow(0.0, -1.0) == INF
        assert safe_pow(-0.0, -1.0) == -INF
        assert safe_pow(-0.0, -2.0) == INF

    def test_overflow_gives_signed_infinity(self) -> None:
        assert safe_pow(10.0, 400.0) == INF
        assert safe_pow(-10.0, 401.0) == -INF
        assert safe_pow(-10.0, 400.0) == INF

    def test_nan_exponent(self) -> None:
        assert math.isnan(safe_pow(1.0, float("nan")))

    def test_unit_base_infinite_exponent(self) -> None:
        assert math.isnan(safe_pow(1.0, INF))
        assert math.isnan(safe_pow(-1.0, -INF))


class TestSafeLog:
    """Тесты для safe_log"""

    def test_regular(self) -> None:
        assert safe_log(math.log10, 1000.0) == pytest.approx(3.0)

    def test_zero_is_negative_infinity(self) -> None:
        assert safe_log(math.log, 0.0) == -INF

    def test_negative_is_nan(self) -> None:
        assert math.isnan(safe_log(math.log2, -1.0))

    def test_nan_is_nan(self) -> None:
        assert math.isnan(safe_log(math.log, float("nan")))


class TestGuarded:
    """Тесты для guarded"""

    def test_domain_error_is_nan(self) -> None:
        assert math.isnan(guarded(math.sqrt)(-1.0))
        assert math.isnan(guarded(math.asin)(2.0))

    def test_overflow_default_uses_argument_sign(self) -> None:
        assert guarded(math.sinh)(1000.0) == INF
        assert guarded(math.sinh)(-1000.0) == -INF

    def test_overflow_custom(self) -> None:
        assert guarded(math.cosh, overflow=lambda x: INF)(-1000.0) == INF

    def test_regular_value_passes_through(self) -> None:
        assert guarded(math.sqrt)(9.0) == 3.0


# =============================================================================
# ОКРУГЛЕНИЕ
# =============================================================================


class TestRounding:
    """Тесты для floor/ceil/round/sign"""

    def test_floor_and_ceil(self) -> None:
        assert floor_value(2.7) == 2.0
        assert floor_value(-2.3) == -3.0
        assert ceil_value(2.1) == 3.0

    def test_non_finite_passthrough(self) -> None:
        assert floor_value(INF) == INF
        assert math.isnan(ceil_value(float("nan")))
        assert round_half_up(-INF) == -INF

    @pytest.mark.parametrize(
        "value, expected",
        [(2.5, 3.0), (2.4, 2.0), (-2.5, -2.0), (-2.6, -3.0), (0.49999999999999994, 0.0)],
    )
    def test_round_half_up(self, value: float, expected: float) -> None:
        assert round_half_up(value) == expected

    def test_sign(self) -> None:
        assert sign_of(-5.0) == -1.0
        assert sign_of(3.0) == 1.0
        assert sign_of(0.0) == 0.0
        assert math.isnan(sign_of(float("nan")))

    def test_is_valid_float(self) -> None:
        assert is_valid_float(1.0)
        assert not is_valid_float(INF)
        assert not is_valid_float(float("nan"))
