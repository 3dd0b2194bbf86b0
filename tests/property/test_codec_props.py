# SPDX-License-Identifier: Apache-2.0
"""
Property tests for the term codec:
- decode(encode(v)) equals the decoded projection of v
- encoding is idempotent through a decode
- map insertion order never changes the bytes
- decoded map keys are strictly increasing by encoded bytes
- arbitrary bytes either decode canonically or raise DecodeError
"""
from __future__ import annotations

from typing import Any

import pytest
from hypothesis import HealthCheck, given, settings, strategies as st

from vecpack.encoding import SAFE_INTEGER_MAX, Bool, Integer, KeyedCollection, List, decode, encode
from vecpack.encoding.values import freeze
from vecpack.errors import DecodeError, ErrorCode

pytestmark = pytest.mark.property

ints = st.integers(min_value=-SAFE_INTEGER_MAX, max_value=SAFE_INTEGER_MAX)
# Keys avoid str, whose encoding collides with the equal bytes key.
keys = st.one_of(st.binary(max_size=8), ints, st.booleans())
scalars = st.one_of(st.none(), st.booleans(), ints, st.binary(max_size=32), st.text(max_size=16))

values = st.recursive(
    scalars,
    lambda children: st.one_of(
        st.lists(children, max_size=5),
        st.dictionaries(keys, children, max_size=5),
    ),
    max_leaves=25,
)


def projection(v: Any) -> Any:
    """What `decode(encode(v))` should return for a native value."""
    if isinstance(v, str):
        return v.encode("utf-8")
    if isinstance(v, (list, tuple)):
        return [projection(x) for x in v]
    if isinstance(v, dict):
        return {freeze(projection(k)): projection(x) for k, x in v.items()}
    return v


@settings(max_examples=200, deadline=None)
@given(values)
def test_round_trip_matches_projection(v) -> None:
    assert decode(encode(v)) == projection(v)


@settings(max_examples=200, deadline=None)
@given(values)
def test_reencode_is_idempotent(v) -> None:
    data = encode(v)
    assert encode(decode(data)) == data


@settings(max_examples=100, deadline=None)
@given(st.dictionaries(keys, scalars, min_size=2, max_size=8), st.randoms(use_true_random=False))
def test_insertion_order_is_irrelevant(m, rnd) -> None:
    items = list(m.items())
    rnd.shuffle(items)
    assert encode(dict(items)) == encode(m)


@settings(max_examples=100, deadline=None)
@given(st.dictionaries(keys, scalars, min_size=1, max_size=12))
def test_decoded_keys_strictly_increase(m) -> None:
    decoded = decode(encode(m))
    encoded_keys = [encode(k) for k in decoded]
    assert all(a < b for a, b in zip(encoded_keys, encoded_keys[1:]))


@settings(max_examples=500, deadline=None, suppress_health_check=[HealthCheck.too_slow])
@given(st.binary(max_size=64))
def test_arbitrary_bytes_are_canonical_or_rejected(data) -> None:
    try:
        v = decode(data)
    except DecodeError as e:
        assert isinstance(e.code, ErrorCode)
        return
    assert encode(v) == data


@settings(max_examples=100, deadline=None)
@given(values, st.binary(min_size=1, max_size=8))
def test_trailing_garbage_is_rejected(v, tail) -> None:
    with pytest.raises(DecodeError) as ei:
        decode(encode(v) + tail)
    assert ei.value.code == ErrorCode.TRAILING_BYTES


@settings(max_examples=100, deadline=None)
@given(
    st.integers(min_value=SAFE_INTEGER_MAX + 1, max_value=(1 << 128) - 1),
    st.booleans(),
)
def test_integers_past_safe_bound_do_not_decode(n, negative) -> None:
    data = encode(-n if negative else n)
    with pytest.raises(DecodeError) as ei:
        decode(data)
    assert ei.value.code == ErrorCode.LENGTH_OVERFLOW


@settings(max_examples=50, deadline=None)
@given(st.lists(ints, min_size=1, max_size=10))
def test_list_order_is_preserved(xs) -> None:
    assert decode(encode(xs)) == xs


bool_or_small_int = st.one_of(
    st.booleans().map(Bool),
    st.integers(min_value=-1, max_value=2).map(Integer),
)
mixed_keys = st.one_of(
    bool_or_small_int,
    st.lists(bool_or_small_int, max_size=2).map(lambda xs: List(tuple(xs))),
)


@settings(max_examples=200, deadline=None)
@given(st.lists(mixed_keys, min_size=1, max_size=8, unique_by=lambda t: encode(t)))
def test_bool_and_int_keys_never_merge(key_terms) -> None:
    m = KeyedCollection(tuple((k, Integer(i)) for i, k in enumerate(key_terms)))
    data = encode(m)
    out = decode(data)
    assert len(out) == len(key_terms)
    assert encode(out) == data
