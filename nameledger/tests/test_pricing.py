from __future__ import annotations

import pytest
from hypothesis import given, settings, strategies as st

from nameledger.errors import InvalidInput, InvalidTerm, UnsupportedTld
from nameledger.pricing import LENGTH_MULTIPLIERS, compute_fee, name_length, year_discount

TLDS = {"com": 200, "io": 1}


def fee(name: str, term: int, *, tld: str = "com", base_fee: int = 10_000) -> int:
    return compute_fee(name, tld, term, base_fee=base_fee, tld_multipliers=TLDS)


def test_reference_quotes():
    assert fee("hello", 1) == 2_000_000
    assert fee("hello", 10) == 11_000_000


@pytest.mark.parametrize(
    "name, multiplier",
    [("a", 2000), ("ab", 1000), ("abc", 500), ("abcd", 200), ("abcde", 100), ("a-much-longer-name", 100)],
)
def test_length_buckets(name, multiplier):
    assert fee(name, 1) == 10_000 * multiplier * 200 * 100 // 10_000


@pytest.mark.parametrize(
    "term, discount",
    [(1, 100), (2, 90), (3, 85), (5, 75), (8, 60), (9, 55), (10, 55)],
)
def test_year_discount_has_floor(term, discount):
    assert year_discount(term) == discount


def test_length_is_counted_in_utf8_bytes():
    # "é" is two bytes: priced like a two-character name
    assert name_length("é") == 2
    assert fee("é", 1) == fee("ab", 1)


def test_single_final_truncation():
    # 7 * 100 * 1 * 2 * 90 = 126_000 -> 12.6 truncated once to 12
    assert compute_fee("hello", "io", 2, base_fee=7, tld_multipliers=TLDS) == 12


def test_zero_base_fee_is_free():
    assert fee("hello", 3, base_fee=0) == 0


@pytest.mark.parametrize("term", [0, 11, -1, True, "1", 1.0])
def test_invalid_terms(term):
    with pytest.raises(InvalidTerm):
        fee("hello", term)


def test_invalid_term_is_an_invalid_input():
    with pytest.raises(InvalidInput):
        fee("hello", 0)


def test_unsupported_tld_is_checked_before_term():
    with pytest.raises(UnsupportedTld):
        compute_fee("hello", "xyz", 0, base_fee=10_000, tld_multipliers=TLDS)


def test_empty_name_rejected():
    with pytest.raises(InvalidInput):
        fee("", 1)


def test_length_table_is_fixed():
    assert dict(LENGTH_MULTIPLIERS) == {1: 2000, 2: 1000, 3: 500, 4: 200, 5: 100}


@settings(max_examples=200, deadline=None)
@given(
    short=st.text(min_size=1, max_size=12),
    extra=st.text(min_size=1, max_size=12),
    term=st.integers(min_value=1, max_value=10),
    base_fee=st.integers(min_value=0, max_value=10**9),
)
def test_fee_non_increasing_as_name_grows(short, extra, term, base_fee):
    longer = short + extra
    assert fee(longer, term, base_fee=base_fee) <= fee(short, term, base_fee=base_fee)


@settings(max_examples=100, deadline=None)
@given(
    name=st.text(min_size=1, max_size=20),
    term=st.integers(min_value=1, max_value=10),
)
def test_fee_is_deterministic(name, term):
    assert fee(name, term) == fee(name, term)
