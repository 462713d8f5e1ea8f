import re
from dataclasses import dataclass
from typing import Union

DECIMAL_PLACES = 4
SCALE = 10 ** DECIMAL_PLACES

# 900 trillion major units, scaled. Still fits a signed 64-bit integer.
MAX_UNITS = 900_000_000_000_000 * SCALE

_AMOUNT_PATTERN = re.compile(r"^([+-]?)(\d+)(?:\.(\d*))?$")


class CurrencyError(ValueError):
    pass


class CurrencyParseError(CurrencyError):
    pass


class CurrencyOverflowError(CurrencyError):
    pass


def _check_range(units: int) -> int:
    if abs(units) > MAX_UNITS:
        raise CurrencyOverflowError(f"Amount {units / SCALE:.4f} exceeds the {MAX_UNITS // SCALE} unit cap")
    return units


def _fraction_to_units(digits: str) -> int:
    if len(digits) > DECIMAL_PLACES:
        raise CurrencyParseError(f"Too many decimal places in '{digits}' (max {DECIMAL_PLACES})")
    if digits and not digits.isdecimal():
        raise CurrencyParseError(f"Invalid fractional digits '{digits}'")
    return int(digits.ljust(DECIMAL_PLACES, "0"))


@dataclass(frozen=True, order=True)
class Currency:
    """
    Fixed-point amount with 4 implied decimal places.
    `units` is the amount scaled by 10,000, so Currency(15000) is 1.5.
    Arithmetic is exact and raises CurrencyOverflowError past MAX_UNITS.
    """

    units: int = 0

    def __post_init__(self):
        _check_range(self.units)

    @classmethod
    def from_decimal(cls, integer_part: int, fractional_part: Union[int, str] = 0) -> "Currency":
        """
        Build from the digits either side of the decimal point.

        `fractional_part` is read as the digits after the point and right padded,
        so from_decimal(10, 5) is 10.5 and from_decimal(0, "0005") is 0.0005.
        """
        fraction = _fraction_to_units(str(fractional_part))
        magnitude = abs(integer_part) * SCALE + fraction
        return cls(_check_range(-magnitude if integer_part < 0 else magnitude))

    @classmethod
    def parse(cls, text: str) -> "Currency":
        """Parse text such as '1', '-2.5' or '0.0001'."""
        match = _AMOUNT_PATTERN.match(text.strip())
        if match is None:
            raise CurrencyParseError(f"Invalid amount '{text}'")

        sign, whole, fraction = match.groups()
        if len(whole.lstrip("0")) > len(str(MAX_UNITS // SCALE)):
            raise CurrencyOverflowError(f"Amount '{text}' exceeds the {MAX_UNITS // SCALE} unit cap")
        magnitude = int(whole) * SCALE + _fraction_to_units(fraction or "")
        return cls(_check_range(-magnitude if sign == "-" else magnitude))

    def checked_add(self, other: "Currency") -> "Currency":
        return Currency(_check_range(self.units + other.units))

    def checked_sub(self, other: "Currency") -> "Currency":
        return Currency(_check_range(self.units - other.units))

    __add__ = checked_add
    __sub__ = checked_sub

    def __neg__(self) -> "Currency":
        return Currency(-self.units)

    def is_positive(self) -> bool:
        return self.units > 0

    def is_negative(self) -> bool:
        return self.units < 0

    def to_string(self) -> str:
        sign = "-" if self.units < 0 else ""
        whole, fraction = divmod(abs(self.units), SCALE)
        return f"{sign}{whole}.{fraction:0{DECIMAL_PLACES}d}"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Currency({self.to_string()})"


Currency.ZERO = Currency(0)
