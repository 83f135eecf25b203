"""Unit tests for salt normalization."""

import pytest
from eth_utils import keccak

from create2_deployer.exceptions import InvalidSaltError
from create2_deployer.salts import (
    IntegerSalt,
    RawSalt,
    StringSalt,
    normalize_salt,
    salt_to_hex,
    to_salt,
)

HELLO_SALT = "0x1c8aff950685c2ed4bc3174f3472287b56d9517b9c948127319a09a7a36deac8"


class TestToSalt:
    """Test resolution of loosely-typed salts into variants."""

    def test_int_resolves_to_integer_salt(self):
        assert isinstance(to_salt(1234), IntegerSalt)

    def test_bytes_resolve_to_raw_salt(self):
        assert isinstance(to_salt(b"\x01" * 32), RawSalt)

    def test_prefixed_hex_resolves_to_raw_salt(self):
        assert isinstance(to_salt("0x04d2"), RawSalt)

    def test_bare_64_digit_hex_resolves_to_raw_salt(self):
        assert isinstance(to_salt("ab" * 32), RawSalt)

    def test_plain_string_resolves_to_string_salt(self):
        assert isinstance(to_salt("hello"), StringSalt)

    def test_short_bare_hex_is_treated_as_string(self):
        """Test that unprefixed hex shorter than 64 digits is hashed, not parsed."""
        assert isinstance(to_salt("cafe"), StringSalt)

    def test_salt_instance_passes_through(self):
        salt = IntegerSalt(7)
        assert to_salt(salt) is salt

    def test_rejects_bool(self):
        with pytest.raises(InvalidSaltError):
            to_salt(True)

    @pytest.mark.parametrize("value", [None, 1.5, ["hello"]])
    def test_rejects_unsupported_types(self, value):
        with pytest.raises(InvalidSaltError):
            to_salt(value)


class TestIntegerSalt:
    """Test integer salt encoding."""

    def test_zero(self):
        assert normalize_salt(0) == bytes(32)

    def test_big_endian_zero_padded(self):
        assert normalize_salt(1234) == bytes(30) + b"\x04\xd2"

    def test_max_value(self):
        assert normalize_salt(2**256 - 1) == b"\xff" * 32

    def test_rejects_negative(self):
        with pytest.raises(InvalidSaltError):
            normalize_salt(-1)

    def test_rejects_too_large(self):
        with pytest.raises(InvalidSaltError):
            normalize_salt(2**256)


class TestHexSalt:
    """Test hex literal salts."""

    def test_full_length_hex_used_verbatim(self):
        value = "0x" + "ab" * 32
        assert salt_to_hex(value) == value

    def test_short_hex_left_padded(self):
        assert normalize_salt("0x04d2") == bytes(30) + b"\x04\xd2"

    def test_odd_length_hex_left_padded(self):
        assert normalize_salt("0x4d2") == bytes(30) + b"\x04\xd2"

    def test_uppercase_hex_normalized_to_lowercase(self):
        assert salt_to_hex("0X" + "AB" * 32) == "0x" + "ab" * 32

    def test_rejects_hex_longer_than_32_bytes(self):
        with pytest.raises(InvalidSaltError):
            normalize_salt("0x" + "00" * 33)

    @pytest.mark.parametrize("value", ["0xhello", "0x", "0xzz", "0x12g4"])
    def test_prefixed_non_hex_is_hashed(self, value):
        assert isinstance(to_salt(value), StringSalt)
        assert normalize_salt(value) == keccak(text=value)

    def test_from_hex_rejects_non_hex(self):
        with pytest.raises(InvalidSaltError):
            RawSalt.from_hex("0xhello")


class TestRawSalt:
    """Test byte salts."""

    def test_short_bytes_left_padded(self):
        assert normalize_salt(b"\x01") == bytes(31) + b"\x01"

    def test_rejects_more_than_32_bytes(self):
        with pytest.raises(InvalidSaltError):
            RawSalt(b"\x00" * 33)


class TestStringSalt:
    """Test opaque string salts."""

    def test_hello_is_keccak_of_utf8(self):
        assert salt_to_hex("hello") == HELLO_SALT

    def test_deterministic(self):
        assert normalize_salt("deploy-v1") == normalize_salt("deploy-v1")

    def test_different_strings_differ(self):
        assert normalize_salt("deploy-v1") != normalize_salt("deploy-v2")

    def test_unicode_strings_supported(self):
        assert len(normalize_salt("sél")) == 32


class TestSaltEquality:
    """Test that equality is defined on the normalized form."""

    def test_integer_equals_its_hex_encoding(self):
        hex_form = "0x" + (1234).to_bytes(32, "big").hex()
        assert to_salt(1234) == to_salt(hex_form)
        assert hash(to_salt(1234)) == hash(to_salt(hex_form))

    def test_string_equals_raw_hash(self):
        assert StringSalt("hello") == RawSalt(bytes.fromhex(HELLO_SALT[2:]))

    def test_different_salts_not_equal(self):
        assert IntegerSalt(1) != IntegerSalt(2)

    def test_usable_as_set_members(self):
        salts = {IntegerSalt(1), RawSalt(b"\x01"), StringSalt("x")}
        assert len(salts) == 2

    def test_hex_method(self):
        assert IntegerSalt(1).hex() == "0x" + "00" * 31 + "01"
