"""Forward-mode automatic differentiation with dual numbers.

A :class:`Dual` carries ``(value, deriv)`` where ``deriv`` is the derivative
of ``value`` with respect to whichever input was seeded with derivative one.
Arithmetic follows the sum, difference and product rules, so any function
written with ``+``, ``-`` and ``*`` (or the named :class:`Ring` operations)
can be differentiated exactly by evaluating it once on a seeded dual.

Only single-variable, scalar-valued functions are supported.
"""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Number
from typing import Any, Callable, Generic, Protocol, Tuple, TypeVar

T = TypeVar("T")


def _sign(x: Any) -> int:
    return (x > 0) - (x < 0)


@dataclass(frozen=True)
class Dual(Generic[T]):
    """A value paired with its derivative."""

    value: T
    deriv: T

    @classmethod
    def constant(cls, value: T) -> "Dual[T]":
        return cls(value, 0 * value)

    @classmethod
    def variable(cls, value: T) -> "Dual[T]":
        return cls(value, 0 * value + 1)

    from_constant = constant

    @staticmethod
    def lift(other: Any) -> "Dual":
        if isinstance(other, Dual):
            return other
        return Dual.constant(other)

    # Named ring operations -------------------------------------------------

    def add(self, other: Any) -> "Dual[T]":
        other = Dual.lift(other)
        return Dual(self.value + other.value, self.deriv + other.deriv)

    def sub(self, other: Any) -> "Dual[T]":
        other = Dual.lift(other)
        return Dual(self.value - other.value, self.deriv - other.deriv)

    def mul(self, other: Any) -> "Dual[T]":
        other = Dual.lift(other)
        return Dual(
            self.value * other.value,
            self.deriv * other.value + self.value * other.deriv,
        )

    def negate(self) -> "Dual[T]":
        return Dual(-self.value, -self.deriv)

    def abs(self) -> "Dual[T]":
        return Dual(abs(self.value), self.deriv * _sign(self.value))

    def signum(self) -> "Dual[T]":
        return Dual(_sign(self.value), 0 * self.deriv)

    # Operator sugar ----------------------------------------------------------

    def __add__(self, other: Any) -> "Dual[T]":
        if not isinstance(other, (Dual, Number)):
            return NotImplemented
        return self.add(other)

    def __radd__(self, other: Any) -> "Dual[T]":
        if not isinstance(other, Number):
            return NotImplemented
        return Dual.lift(other).add(self)

    def __sub__(self, other: Any) -> "Dual[T]":
        if not isinstance(other, (Dual, Number)):
            return NotImplemented
        return self.sub(other)

    def __rsub__(self, other: Any) -> "Dual[T]":
        if not isinstance(other, Number):
            return NotImplemented
        return Dual.lift(other).sub(self)

    def __mul__(self, other: Any) -> "Dual[T]":
        if not isinstance(other, (Dual, Number)):
            return NotImplemented
        return self.mul(other)

    def __rmul__(self, other: Any) -> "Dual[T]":
        if not isinstance(other, Number):
            return NotImplemented
        return Dual.lift(other).mul(self)

    def __neg__(self) -> "Dual[T]":
        return self.negate()

    def __pos__(self) -> "Dual[T]":
        return self

    def __abs__(self) -> "Dual[T]":
        return self.abs()


def signum(x: Any) -> Any:
    """Sign of ``x``; on a :class:`Dual` the derivative is zero."""

    if isinstance(x, Dual):
        return x.signum()
    return _sign(x)


class Ring(Protocol[T]):
    """Explicit arithmetic interface for code written against a ring object."""

    def add(self, a: T, b: T) -> T: ...

    def sub(self, a: T, b: T) -> T: ...

    def mul(self, a: T, b: T) -> T: ...

    def negate(self, a: T) -> T: ...

    def from_constant(self, n: Any) -> T: ...


class RealRing:
    """Ring operations on plain numbers."""

    def add(self, a, b):
        return a + b

    def sub(self, a, b):
        return a - b

    def mul(self, a, b):
        return a * b

    def negate(self, a):
        return -a

    def from_constant(self, n):
        return n


class DualRing:
    """Ring operations on :class:`Dual` values."""

    def add(self, a: Dual, b: Dual) -> Dual:
        return Dual.lift(a).add(b)

    def sub(self, a: Dual, b: Dual) -> Dual:
        return Dual.lift(a).sub(b)

    def mul(self, a: Dual, b: Dual) -> Dual:
        return Dual.lift(a).mul(b)

    def negate(self, a: Dual) -> Dual:
        return Dual.lift(a).negate()

    def from_constant(self, n: Any) -> Dual:
        return Dual.constant(n)


REAL = RealRing()
DUAL = DualRing()


def value_and_derivative(f: Callable[[Any], Any], x: T) -> Tuple[T, T]:
    """Evaluate ``f`` at ``x`` and return ``(f(x), f'(x))``."""

    out = f(Dual.variable(x))
    if not isinstance(out, Dual):
        # f ignored its argument, so it is constant in x
        return out, 0 * out
    return out.value, out.deriv


def differentiate(f: Callable[[Any], Any], x: T) -> T:
    """Return ``f'(x)`` for a function built from ring arithmetic."""

    return value_and_derivative(f, x)[1]


def differentiate_in_ring(f: Callable[[Ring, Any], Any], x: T) -> T:
    """Differentiate ``f(ring, x)`` written against the :class:`Ring` interface."""

    return differentiate(lambda d: f(DUAL, d), x)


__all__ = [
    "Dual",
    "Ring",
    "RealRing",
    "DualRing",
    "REAL",
    "DUAL",
    "signum",
    "value_and_derivative",
    "differentiate",
    "differentiate_in_ring",
]
