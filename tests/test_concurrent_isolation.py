# tests/test_concurrent_isolation.py
"""
Concurrent serialization

Structured errors are immutable and every encoder is per call, so many
threads can serialize the same value at once and all see the same output.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from erreur import integer, new, string, wrap


def test_concurrent_json_is_identical():
    err = wrap(
        wrap(new("root", integer("code", 7)), "mid", string("f", "1")),
        "top",
        string("g", "2"),
    )
    expected = err.json()

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: err.json(), range(200)))

    assert set(results) == {expected}


def test_concurrent_to_dict_does_not_share_state():
    err = new("m", string("k", "v"))

    with ThreadPoolExecutor(max_workers=4) as pool:
        dicts = list(pool.map(lambda _: err.to_dict(), range(50)))

    dicts[0]["k"] = "mutated"
    assert all(d == {"msg": "m", "k": "v"} for d in dicts[1:])
    assert err.to_dict() == {"msg": "m", "k": "v"}
