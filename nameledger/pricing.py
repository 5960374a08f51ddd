"""
nameledger.pricing — registration and renewal fees.

    length_multiplier = LENGTH_MULTIPLIERS[min(len(name), 5)]
    year_discount     = max(55, 100 - (term_years * 5 if term_years > 1 else 0))
    fee = base_fee * length_multiplier * tld_multiplier * term_years * year_discount // 10000

`len(name)` is the UTF-8 byte length. The product is formed left to right and
truncated exactly once at the end; reordering or truncating earlier changes
results for some inputs, so the order is part of the fee contract.

Length multipliers are in hundredths (2000 = 20.00x) and the discount is a
percentage, which is why the single divisor is 100 * 100.
"""

from __future__ import annotations

from typing import Mapping

from .errors import InvalidInput, InvalidTerm, UnsupportedTld

# name-length bucket -> multiplier in hundredths; bucket 5 means "5 or more"
LENGTH_MULTIPLIERS: Mapping[int, int] = {1: 2000, 2: 1000, 3: 500, 4: 200, 5: 100}

MIN_TERM_YEARS = 1
MAX_TERM_YEARS = 10
YEAR_DISCOUNT_STEP = 5
YEAR_DISCOUNT_FLOOR = 55
FEE_DIVISOR = 10_000


def name_length(name: str) -> int:
    return len(name.encode("utf-8"))


def check_name(name: str) -> None:
    if not isinstance(name, str) or not name:
        raise InvalidInput("name must be a non-empty string", name=name)


def check_term(term_years: int) -> None:
    if isinstance(term_years, bool) or not isinstance(term_years, int):
        raise InvalidTerm(term_years=term_years)
    if not MIN_TERM_YEARS <= term_years <= MAX_TERM_YEARS:
        raise InvalidTerm(term_years=term_years)


def year_discount(term_years: int) -> int:
    reduction = term_years * YEAR_DISCOUNT_STEP if term_years > 1 else 0
    return max(YEAR_DISCOUNT_FLOOR, 100 - reduction)


def compute_fee(
    name: str,
    tld: str,
    term_years: int,
    *,
    base_fee: int,
    tld_multipliers: Mapping[str, int],
    length_multipliers: Mapping[int, int] = LENGTH_MULTIPLIERS,
) -> int:
    """
    Pure fee computation.

    Raises:
        InvalidInput    – empty name
        UnsupportedTld  – tld absent from `tld_multipliers` (or multiplier ≤ 0)
        InvalidTerm     – term_years outside 1..10
    """
    check_name(name)
    tld_multiplier = int(tld_multipliers.get(tld, 0))
    if tld_multiplier <= 0:
        raise UnsupportedTld(tld=tld)
    check_term(term_years)

    length_multiplier = length_multipliers[min(name_length(name), 5)]
    return (
        base_fee
        * length_multiplier
        * tld_multiplier
        * term_years
        * year_discount(term_years)
        // FEE_DIVISOR
    )


class PricingEngine:
    """
    Binds `compute_fee` to the store's live base fee, TLD catalog and length
    table. Holds no state of its own: an admin update is visible to the next
    call, and fees already settled are never recomputed.
    """

    def __init__(self, store) -> None:
        self._store = store

    def compute_fee(self, name: str, tld: str, term_years: int) -> int:
        s = self._store
        return compute_fee(
            name,
            tld,
            term_years,
            base_fee=int(s.meta("base_fee")),
            tld_multipliers=dict(s.items("tlds")),
            length_multipliers=dict(s.items("length_multipliers")),
        )


__all__ = [
    "FEE_DIVISOR",
    "LENGTH_MULTIPLIERS",
    "MAX_TERM_YEARS",
    "MIN_TERM_YEARS",
    "PricingEngine",
    "check_name",
    "check_term",
    "compute_fee",
    "name_length",
    "year_discount",
]
