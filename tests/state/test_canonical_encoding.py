# [TESTER] v1

from __future__ import annotations

import pytest

from fillreactor.state.canonical import (
    ZERO_ADDRESS,
    canonical_address,
    canonical_json_bytes,
    domain_sep_bytes,
    encode_bytes,
    hex_to_bytes,
    hex_to_bytes_fixed,
    is_zero_address,
    require_uint,
)


def test_canonical_json_sorts_keys_and_drops_whitespace() -> None:
    assert canonical_json_bytes({"b": 1, "a": [2, {"d": 3, "c": 4}]}) == b'{"a":[2,{"c":4,"d":3}],"b":1}'


def test_canonical_json_rejects_floats_and_non_str_keys() -> None:
    with pytest.raises(TypeError):
        canonical_json_bytes({"amount": 1.5})
    with pytest.raises(TypeError):
        canonical_json_bytes({1: "x"})


def test_domain_separator_is_nul_terminated_and_versioned() -> None:
    assert domain_sep_bytes("cosigner") == b"fillreactor:cosigner:v1\x00"
    assert domain_sep_bytes("cosigner", version=2) != domain_sep_bytes("cosigner")
    with pytest.raises(ValueError):
        domain_sep_bytes("bad\x00label")


def test_encode_bytes_is_length_prefixed() -> None:
    assert encode_bytes(b"") == b"\x00"
    assert encode_bytes(b"ab") == b"\x02ab"
    assert encode_bytes(b"x" * 200)[:2] == b"\xc8\x01"


def test_canonical_address_lowercases_and_requires_20_bytes() -> None:
    mixed = "0x" + "AbCd" * 10
    assert canonical_address(mixed) == mixed.lower()
    assert canonical_address("ab" * 20) == "0x" + "ab" * 20
    with pytest.raises(ValueError):
        canonical_address("0x1234")
    with pytest.raises(TypeError):
        canonical_address(None)  # type: ignore[arg-type]


def test_zero_address_detection() -> None:
    assert is_zero_address(ZERO_ADDRESS)
    assert is_zero_address("0x" + "00" * 20)
    assert not is_zero_address("0x" + "00" * 19 + "01")


def test_hex_parsing_requires_prefix_and_even_length() -> None:
    assert hex_to_bytes("0x", name="data") == b""
    assert hex_to_bytes("0x0a0B", name="data") == b"\x0a\x0b"
    with pytest.raises(ValueError):
        hex_to_bytes("0a0b", name="data")
    with pytest.raises(ValueError):
        hex_to_bytes("0xabc", name="data")
    with pytest.raises(ValueError):
        hex_to_bytes_fixed("0x" + "zz" * 32, nbytes=32, name="hash")


def test_require_uint_rejects_bools_and_negatives() -> None:
    assert require_uint(0, name="n") == 0
    with pytest.raises(TypeError):
        require_uint(True, name="n")
    with pytest.raises(ValueError):
        require_uint(-1, name="n")
