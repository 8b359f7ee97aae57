"""Tests for ScalarNode operations and their local gradient rules."""

import math
import warnings

import pytest

from scalargrad import ScalarNode, GradientWarning
from scalargrad.ops import add, mul, pow, tanh, total, dot


class TestForward:
    def test_leaf(self):
        x = ScalarNode(2.5, label="x")
        assert x.value == 2.5
        assert x.gradient == 0.0
        assert x.operands == ()
        assert x.is_leaf

    def test_rejects_non_numeric(self):
        with pytest.raises(TypeError):
            ScalarNode("1.0")

    def test_add_mul(self):
        a, b = ScalarNode(2.0), ScalarNode(3.0)
        assert add(a, b).value == 5.0
        assert mul(a, b).value == 6.0
        assert (a + b).operands == (a, b)
        assert (a * b).op_tag == "*"

    def test_inputs_not_mutated(self):
        a, b = ScalarNode(2.0), ScalarNode(3.0)
        c = a * b + a
        assert (a.value, b.value) == (2.0, 3.0)
        assert a.operands == () and b.operands == ()
        assert c.value == 8.0

    def test_literal_overloads(self):
        a = ScalarNode(4.0)
        assert (a + 1).value == 5.0
        assert (1 + a).value == 5.0
        assert (a - 1).value == 3.0
        assert (1 - a).value == -3.0
        assert (2 * a).value == 8.0
        assert (a / 2).value == 2.0
        assert (2 / a).value == 0.5
        assert (-a).value == -4.0
        assert (a ** 0.5).value == pytest.approx(2.0)

    def test_pow_requires_constant_exponent(self):
        with pytest.raises(TypeError):
            pow(ScalarNode(2.0), ScalarNode(3.0))

    def test_tanh_value(self):
        for x in (-3.0, -0.5, 0.0, 0.7, 4.0):
            assert tanh(ScalarNode(x)).value == pytest.approx(math.tanh(x), abs=1e-12)

    def test_tanh_saturates(self):
        assert ScalarNode(1000.0).tanh().value == 1.0
        assert ScalarNode(-1000.0).tanh().value == -1.0
        assert ScalarNode(math.inf).tanh().value == 1.0


class TestGradients:
    def test_product_rule(self):
        a, b = ScalarNode(2.0), ScalarNode(3.0)
        c = a * b
        c.backward()
        assert c.gradient == 1.0
        assert a.gradient == 3.0
        assert b.gradient == 2.0

    def test_power_rule(self):
        a = ScalarNode(2.0)
        c = a ** 3
        c.backward()
        assert c.value == 8.0
        assert a.gradient == pytest.approx(12.0)

    def test_tanh_derivative(self):
        a = ScalarNode(0.5)
        c = a.tanh()
        c.backward()
        assert a.gradient == pytest.approx(1 - c.value ** 2, abs=1e-9)

    def test_sub_and_div(self):
        a, b = ScalarNode(6.0), ScalarNode(3.0)
        c = a / b
        c.backward()
        assert c.value == pytest.approx(2.0)
        assert a.gradient == pytest.approx(1 / 3)
        assert b.gradient == pytest.approx(-6.0 / 9.0)

        x, y = ScalarNode(5.0), ScalarNode(2.0)
        d = x - y
        d.backward()
        assert d.value == 3.0
        assert (x.gradient, y.gradient) == (1.0, -1.0)

    def test_fan_out_accumulates(self):
        # y = 2x + x², dy/dx = 2 + 2x
        x = ScalarNode(3.0)
        y = x * 2 + x * x
        y.backward()
        assert y.value == 15.0
        assert x.gradient == pytest.approx(8.0)

    def test_same_operand_twice(self):
        x = ScalarNode(-1.5)
        y = x * x
        y.backward()
        assert x.gradient == pytest.approx(-3.0)

    def test_total(self):
        xs = [ScalarNode(v) for v in (1.0, 2.0, 3.5)]
        s = total(xs)
        s.backward()
        assert s.value == 6.5
        assert [x.gradient for x in xs] == [1.0, 1.0, 1.0]

    def test_dot(self):
        a = [ScalarNode(v) for v in (1.0, 2.0, 3.0)]
        b = [ScalarNode(v) for v in (4.0, -5.0, 6.0)]
        d = dot(a, b)
        d.backward()
        assert d.value == 12.0
        assert [x.gradient for x in a] == [4.0, -5.0, 6.0]
        assert [x.gradient for x in b] == [1.0, 2.0, 3.0]

    def test_dot_length_mismatch(self):
        with pytest.raises(ValueError):
            dot([ScalarNode(1.0)], [ScalarNode(1.0), ScalarNode(2.0)])


class TestNaNPolicy:
    def test_division_by_zero(self):
        a, b = ScalarNode(1.0), ScalarNode(0.0)
        with pytest.warns(GradientWarning, match="division by zero"):
            c = a / b
        assert math.isnan(c.value)
        # still linked to both operands
        assert a in c.operands

    def test_literal_division_by_zero(self):
        with pytest.warns(GradientWarning):
            c = ScalarNode(2.0) / 0
        assert math.isnan(c.value)

    def test_undefined_power(self):
        with pytest.warns(GradientWarning, match="undefined"):
            c = ScalarNode(-8.0) ** 0.5
        assert math.isnan(c.value)

    def test_division_by_zero_backward(self):
        a, b = ScalarNode(1.0), ScalarNode(0.0)
        with pytest.warns(GradientWarning):
            c = a / b
        with pytest.warns(GradientWarning, match="undefined"):
            c.backward()
        assert math.isnan(b.gradient)
        assert math.isnan(a.gradient)

    def test_undefined_power_backward(self):
        x = ScalarNode(-8.0)
        with pytest.warns(GradientWarning):
            c = x ** 0.5
        with pytest.warns(GradientWarning):
            c.backward()
        assert math.isnan(x.gradient)

    def test_zero_exponent_at_zero(self):
        x = ScalarNode(0.0)
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            c = x ** 0
            c.backward()
        assert c.value == 1.0
        assert x.gradient == 0.0


class TestOverflow:
    def test_odd_power_keeps_sign(self):
        assert (ScalarNode(-1e200) ** 3).value == -math.inf
        assert (ScalarNode(1e200) ** 3).value == math.inf

    def test_even_power_is_positive(self):
        assert (ScalarNode(-1e200) ** 2).value == math.inf

    def test_gradient_overflow_keeps_sign(self):
        x = ScalarNode(-1e200)
        (x ** 4).backward()
        assert x.gradient == -math.inf
