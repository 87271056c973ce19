from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Union

Number = Union[int, float]

_TWO_PLACES = Decimal('0.01')


def round_half_up(value: Optional[Union[Number, Decimal]], places: int = 2) -> Optional[float]:
    # Half away from zero, like ROUND() on a numeric column
    if value is None:
        return None
    exp = _TWO_PLACES if places == 2 else Decimal(1).scaleb(-places)
    dec = value if isinstance(value, Decimal) else Decimal(repr(value))
    return float(dec.quantize(exp, rounding=ROUND_HALF_UP))


def safe_percentage(numerator: Optional[Number], denominator: Optional[Number]) -> Optional[float]:
    """Return ``numerator * 100 / denominator`` rounded to 2 places.

    None when either side is absent or the denominator is zero. The ratio is
    computed in Decimal so rounding sees the exact quotient.
    """
    if numerator is None or denominator is None or denominator == 0:
        return None
    ratio = Decimal(repr(numerator)) * 100 / Decimal(repr(denominator))
    return round_half_up(ratio)


def death_percentage(total_deaths: Optional[Number], total_cases: Optional[Number]) -> Optional[float]:
    return safe_percentage(total_deaths, total_cases)


def full_vaccination_rate(people_fully_vaccinated: Optional[Number],
                          population: Optional[Number]) -> Optional[float]:
    return safe_percentage(people_fully_vaccinated, population)


def exact_mean(values: List[Optional[Number]]) -> Optional[Decimal]:
    """Decimal mean of the present values, like AVG() over a numeric column.

    None values count toward neither the sum nor the count.
    """
    present = [Decimal(repr(v)) for v in values if v is not None]
    if not present:
        return None
    return sum(present) / len(present)
