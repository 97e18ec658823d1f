"""
Fixed-Point Decimal Arithmetic

This module provides FixedPointDecimal, an exact decimal number type used for
every rate and percentage the analyzer reports. Values are stored as a single
integer scaled by 10**DECIMALS, so 1.2345 is held as 1234500000000000000.
All operations work on that scaled integer and never touch binary floats,
except the explicitly lossy to_number() and fractional-exponent pow().
"""

import decimal
import enum
import fractions
import math
import random as _random
import re
import warnings


class FixedPointError(ValueError):
    """Base class for FixedPointDecimal errors."""


class ConstructionError(FixedPointError):
    """Raised when a value cannot be converted to a FixedPointDecimal."""


class DecimalDomainError(FixedPointError, ArithmeticError):
    """Raised for values outside the representable domain (infinity)."""


class DivisionByZeroError(DecimalDomainError, ZeroDivisionError):
    """Raised when dividing by zero."""


class NotWholeNumberError(FixedPointError):
    """Raised when an operation requires an integer argument."""


class PrecisionLossWarning(UserWarning):
    """Emitted when a computation falls back to floating point."""


class RoundingMode(enum.Enum):
    HALF_UP = "half_up"
    TRUNCATE = "truncate"


DECIMALS = 18
SHIFT = 10 ** DECIMALS
MAX_SAFE_INTEGER = 2 ** 53 - 1
ZERO_PAD = "0" * DECIMALS

_THOUSANDS = re.compile(r"\B(?=(\d{3})+(?!\d))")

# Interned instances keyed by their textual input, filled once at import.
_COMMON_CACHE = {}
_max_cache_key_length = 0


def _is_safe_integer(value):
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer() and abs(value) <= MAX_SAFE_INTEGER


def _div_round(dividend, divisor):
    """Divide two scaled integers, rounding half away from zero."""
    quotient, remainder = divmod(abs(dividend), abs(divisor))
    if FixedPointDecimal.rounding is RoundingMode.HALF_UP and remainder * 2 >= abs(divisor):
        quotient += 1
    if (dividend < 0) != (divisor < 0):
        return -quotient
    return quotient


def _parse_decimal_string(text):
    """Convert a decimal string into a scaled integer."""
    text = text.strip()
    if not text:
        raise ConstructionError("FixedPointDecimal cannot parse empty string")

    # ASCII digits with an optional sign, with or without a fractional part
    ints, _, decis = text.partition(".")
    negative = ints.startswith("-")
    digits = ints.lstrip("+-")
    if ints[:len(ints) - len(digits)] not in ("", "-", "+"):
        raise ConstructionError(f"FixedPointDecimal cannot parse {text!r}")
    if not (digits + decis).isdigit() or not (digits + decis).isascii():
        raise ConstructionError(f"FixedPointDecimal cannot parse {text!r}")

    magnitude = int((digits or "0") + decis[:DECIMALS].ljust(DECIMALS, "0"))
    if (FixedPointDecimal.rounding is RoundingMode.HALF_UP
            and len(decis) > DECIMALS and decis[DECIMALS] >= "5"):
        magnitude += 1
    return -magnitude if negative else magnitude


def _float_to_string(value):
    # repr gives the shortest round-tripping form; Decimal expands exponents
    return format(decimal.Decimal(repr(value)), "f")


def _scaled_from(value):
    """Return the scaled integer for any supported input."""
    if isinstance(value, bool):
        raise ConstructionError("FixedPointDecimal invalid input type: bool")
    if isinstance(value, int):
        return value * SHIFT
    if isinstance(value, float):
        if _is_safe_integer(value):
            return int(value) * SHIFT
        if math.isinf(value):
            raise DecimalDomainError("FixedPointDecimal cannot represent Infinity")
        return _parse_decimal_string(_float_to_string(value))
    if isinstance(value, str):
        return _parse_decimal_string(value)
    raise ConstructionError(f"FixedPointDecimal invalid input type: {type(value).__name__}")


class FixedPointDecimal:
    """
    Immutable decimal number with DECIMALS fractional digits.

    Accepts another FixedPointDecimal, an int, a float, or a decimal string.
    Common values are interned; NaN is a singleton available as
    FixedPointDecimal.NaN.
    """

    __slots__ = ("_n", "_str")

    DECIMALS = DECIMALS
    SHIFT = SHIFT
    rounding = RoundingMode.HALF_UP
    NaN = None

    def __new__(cls, value):
        if isinstance(value, FixedPointDecimal):
            return value

        key = None
        if isinstance(value, str):
            key = value
        elif type(value) is int and abs(value) <= 10 ** _max_cache_key_length:
            key = str(value)
        if key is not None and len(key) <= _max_cache_key_length:
            cached = _COMMON_CACHE.get(key)
            if cached is not None:
                return cached

        if isinstance(value, float) and math.isnan(value):
            return cls.NaN

        return cls._from_scaled(_scaled_from(value))

    @classmethod
    def _from_scaled(cls, scaled):
        instance = object.__new__(cls)
        instance._n = scaled
        instance._str = None
        return instance

    @property
    def scaled(self):
        """The underlying integer, value * 10**DECIMALS (None for NaN)."""
        return self._n

    def is_nan(self):
        return self is FixedPointDecimal.NaN

    def clone(self):
        if self.is_nan():
            return self
        return FixedPointDecimal._from_scaled(self._n)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def add(self, num):
        if _is_literal(num, 0):
            return self
        other = _coerce(num)
        if self.is_nan() or other.is_nan():
            return FixedPointDecimal.NaN
        return FixedPointDecimal._from_scaled(self._n + other._n)

    def subtract(self, num):
        if _is_literal(num, 0):
            return self
        other = _coerce(num)
        if self.is_nan() or other.is_nan():
            return FixedPointDecimal.NaN
        return FixedPointDecimal._from_scaled(self._n - other._n)

    def multiply(self, num):
        if self.is_nan():
            return self
        if _is_literal(num, 1):
            return self
        if _is_literal(num, 0):
            return ZERO
        if _is_literal(num, -1):
            return FixedPointDecimal._from_scaled(-self._n)
        if _is_safe_integer(num):
            # the scale factor is already carried by self
            return FixedPointDecimal._from_scaled(self._n * int(num))
        other = _coerce(num)
        if other.is_nan():
            return other
        return FixedPointDecimal._from_scaled(_div_round(self._n * other._n, SHIFT))

    def divide(self, num):
        if _is_literal(num, 1):
            return self
        other = _coerce(num)
        if self.is_nan() or other.is_nan():
            return FixedPointDecimal.NaN
        if other._n == 0:
            raise DivisionByZeroError("FixedPointDecimal division by zero")
        return FixedPointDecimal._from_scaled(_div_round(self._n * SHIFT, other._n))

    def pow(self, exponent):
        """
        Raise to a power.

        Integer exponents are computed exactly by repeated squaring; negative
        ones take the reciprocal. Fractional exponents fall back to floats and
        emit a PrecisionLossWarning.
        """
        exp = _coerce(exponent)
        if self.is_nan() or exp.is_nan():
            return FixedPointDecimal.NaN

        if exp.eq(0):
            return ONE
        if exp.eq(1):
            return self
        if self.eq(0):
            if exp.lt(0):
                raise DivisionByZeroError("FixedPointDecimal cannot raise zero to a negative power")
            return ZERO
        if self.eq(1):
            return ONE

        if exp.significant_digits() == 0:
            n = exp._n // SHIFT
            if n < 0:
                return ONE.divide(self.pow(-n))

            result = ONE
            base = self
            while n > 0:
                if n % 2 == 1:
                    result = result.multiply(base)
                base = base.multiply(base)
                n //= 2
            return result

        warnings.warn(
            "FixedPointDecimal.pow with a fractional exponent uses floating point",
            PrecisionLossWarning,
            stacklevel=2,
        )
        try:
            value = math.pow(self.to_number(), exp.to_number())
        except ValueError:
            return FixedPointDecimal.NaN
        except OverflowError:
            raise DecimalDomainError("FixedPointDecimal cannot represent Infinity") from None
        return FixedPointDecimal(value)

    @classmethod
    def pow10(cls, exponent):
        """Return 10**exponent exactly, including negative exponents."""
        if not _is_safe_integer(exponent):
            raise NotWholeNumberError("pow10 only accepts whole numbers")
        exponent = int(exponent)

        if exponent == 0:
            return ONE
        if exponent == 1:
            return cls(10)
        if exponent < 0:
            return ONE.divide("1" + "0" * -exponent)
        return cls("1" + "0" * exponent)

    def shift_pow10(self, exponent):
        """Move the decimal point right (positive) or left (negative)."""
        if not _is_safe_integer(exponent):
            raise NotWholeNumberError("shift_pow10 only accepts whole numbers")
        exponent = int(exponent)

        if exponent == 0 or self.is_nan():
            return self
        if exponent > 0:
            return FixedPointDecimal._from_scaled(self._n * 10 ** exponent)
        return FixedPointDecimal._from_scaled(_div_round(self._n, 10 ** -exponent))

    def round(self, significant_digits):
        """Round to the given number of fractional digits (half away from zero)."""
        if self.is_nan() or significant_digits >= DECIMALS:
            return self
        shift = 10 ** (DECIMALS - significant_digits)
        return FixedPointDecimal._from_scaled(_div_round(self._n, shift) * shift)

    def truncate(self, significant_digits):
        """Cut the fractional part to the given number of digits."""
        if self.is_nan():
            return self
        text = str(self)
        dot = text.find(".")
        if dot == -1:
            return self
        return FixedPointDecimal(text[:dot + significant_digits + 1])

    def abs(self):
        if self.is_nan() or self._n >= 0:
            return self
        return FixedPointDecimal._from_scaled(-self._n)

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def _compare_operand(self, num):
        """Scaled integer of the operand, or None when NaN is involved."""
        if self.is_nan():
            return None
        if _is_safe_integer(num):
            return int(num) * SHIFT
        if num == "0":
            return 0
        other = _coerce(num)
        if other.is_nan():
            return None
        return other._n

    def lt(self, num):
        other = self._compare_operand(num)
        return other is not None and self._n < other

    def lte(self, num):
        other = self._compare_operand(num)
        return other is not None and self._n <= other

    def gt(self, num):
        other = self._compare_operand(num)
        return other is not None and self._n > other

    def gte(self, num):
        other = self._compare_operand(num)
        return other is not None and self._n >= other

    def eq(self, num):
        other = self._compare_operand(num)
        return other is not None and self._n == other

    def cmp(self, num):
        """Three-way comparison for sorting: -1, 0 or 1."""
        other = _coerce(num)
        if self.is_nan() or other.is_nan():
            raise DecimalDomainError("FixedPointDecimal cannot order NaN")
        return (self._n > other._n) - (self._n < other._n)

    def min(self, *args):
        smallest = self
        for arg in args:
            check = _coerce(arg)
            if check.lt(smallest):
                smallest = check
        return smallest

    def max(self, *args):
        largest = self
        for arg in args:
            check = _coerce(arg)
            if check.gt(largest):
                largest = check
        return largest

    def is_close(self, num):
        """
        Whether two values are close, with tolerances scaled by magnitude
        (in the spirit of math.isclose).
        """
        other = _coerce(num)
        if self.is_nan() or other.is_nan():
            return False
        if self.eq(other):
            return True

        diff = self.subtract(other).abs()
        max_val = self.abs().max(other.abs())

        if max_val.gte("1000"):
            relative_tolerance = FixedPointDecimal("0.000001")
            absolute_tolerance = FixedPointDecimal("0.0001")
        elif max_val.gte("1"):
            relative_tolerance = FixedPointDecimal("0.0000001")
            absolute_tolerance = FixedPointDecimal("0.0000001")
        else:
            relative_tolerance = FixedPointDecimal("0.0000000001")
            absolute_tolerance = FixedPointDecimal("0.0000000001")

        threshold = relative_tolerance.multiply(max_val).max(absolute_tolerance)
        return diff.lte(threshold)

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def __str__(self):
        if self._str is not None:
            return self._str
        if self.is_nan():
            text = "NaN"
        elif self._n == 0:
            text = "0"
        elif self._n == SHIFT:
            text = "1"
        else:
            int_part, frac_part = divmod(abs(self._n), SHIFT)
            frac = str(frac_part).rjust(DECIMALS, "0").rstrip("0") if frac_part else ""
            text = ("-" if self._n < 0 else "") + str(int_part) + ("." + frac if frac else "")
        self._str = text
        return text

    def __repr__(self):
        return f"FixedPointDecimal('{self}')"

    def to_fixed(self, length, with_commas=False, prefix=""):
        """
        Format with exactly `length` fractional digits.

        Extra digits are cut, not rounded; missing ones are zero padded.

        Args:
            length: Number of fractional digits
            with_commas: Group the integer part in thousands
            prefix: String placed in front of the number (e.g. a currency sign)
        """
        if self.is_nan():
            return "NaN"

        if self._n == 0 or self._n == SHIFT:
            base = str(self)
            if length == 0:
                return prefix + base
            return f"{prefix}{base}.{ZERO_PAD[:length]}"

        int_raw, _, frac_raw = str(self).partition(".")
        int_str = _THOUSANDS.sub(",", int_raw) if with_commas else int_raw

        frac = frac_raw[:length].ljust(length, "0")
        return prefix + int_str + (f".{frac}" if length else "")

    def to_number(self):
        """Convert to a native number. Lossy for values beyond float precision."""
        if self.is_nan():
            return float("nan")
        text = str(self)
        if "." in text:
            return float(text)
        return int(text)

    def to_json(self):
        return str(self)

    def significant_digits(self):
        """Number of fractional digits without trailing zeros."""
        if self.is_nan():
            return 0
        rem = self._n % SHIFT
        if rem == 0:
            return 0
        digits = DECIMALS
        while rem % 10 == 0:
            rem //= 10
            digits -= 1
        return digits

    @classmethod
    def random(cls, minimum, maximum):
        """Uniformly distributed value in [minimum, maximum)."""
        low = _coerce(minimum)
        span = _coerce(maximum).subtract(low)
        return cls(_random.random()).multiply(span).add(low)

    # ------------------------------------------------------------------
    # Python protocols
    # ------------------------------------------------------------------

    def __add__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.add(other)

    __radd__ = __add__

    def __sub__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.subtract(other)

    def __rsub__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return _coerce(other).subtract(self)

    def __mul__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.multiply(other)

    __rmul__ = __mul__

    def __truediv__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.divide(other)

    def __rtruediv__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return _coerce(other).divide(self)

    def __neg__(self):
        return self.multiply(-1)

    def __abs__(self):
        return self.abs()

    def __lt__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.lt(other)

    def __le__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.lte(other)

    def __gt__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.gt(other)

    def __ge__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.gte(other)

    def __eq__(self, other):
        if isinstance(other, str) or not _is_operand(other):
            return NotImplemented
        if isinstance(other, float):
            # exact against the binary value, so equal operands hash alike
            if self.is_nan() or not math.isfinite(other):
                return False
            return fractions.Fraction(self._n, SHIFT) == fractions.Fraction(other)
        return self.eq(other)

    def __hash__(self):
        if self.is_nan():
            return object.__hash__(self)
        # matches hash() of equal ints and floats
        return hash(fractions.Fraction(self._n, SHIFT))

    def __float__(self):
        return float(self.to_number())

    def __bool__(self):
        return self.is_nan() or self._n != 0


def _is_operand(value):
    return isinstance(value, (FixedPointDecimal, int, float, str)) and not isinstance(value, bool)


def _is_literal(value, literal):
    """True for the int/float literal or its plain string form."""
    if isinstance(value, str):
        return value == str(literal)
    return _is_safe_integer(value) and value == literal


def _coerce(value):
    return value if isinstance(value, FixedPointDecimal) else FixedPointDecimal(value)


def _create_nan():
    if FixedPointDecimal.NaN is not None:
        raise FixedPointError("FixedPointDecimal NaN already initialized")
    nan = object.__new__(FixedPointDecimal)
    nan._n = None
    nan._str = "NaN"
    FixedPointDecimal.NaN = nan


def _initialize_common_cache():
    global _max_cache_key_length

    common_values = [
        0, 1, -1, 2, 10, 100, 1000, 10000, 100000, 1000000, 10000000,
        100000000, 1000000000, 10000000000,
        "0.1", "0.01", "0.001", "0.0001", "0.00001", "0.000001",
        "0.5", "0.25", "0.75",
    ]
    for value in common_values:
        key = str(value)
        instance = FixedPointDecimal._from_scaled(_scaled_from(value))
        str(instance)
        _COMMON_CACHE[key] = instance
        _max_cache_key_length = max(_max_cache_key_length, len(key))


_create_nan()
_initialize_common_cache()

ZERO = _COMMON_CACHE["0"]
ONE = _COMMON_CACHE["1"]
