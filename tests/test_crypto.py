"""
Tests for tanglesig/crypto/

Tests ternary conversion, the Kerl sponge and the one-time signature
primitives.
"""

import pytest

from tanglesig.config import (
    EMPTY_FRAGMENT,
    HASH_LENGTH,
    KEY_FRAGMENT_TRITS,
    MAX_TRYTE_VALUE,
    MIN_TRYTE_VALUE,
)
from tanglesig.crypto import signing
from tanglesig.crypto.converter import (
    increment_trits,
    int_to_trits,
    int_to_trytes,
    is_filler,
    is_trytes,
    pad_trytes,
    trits_to_int,
    trits_to_trytes,
    tryte_value,
    trytes_to_trits,
)
from tanglesig.crypto.kerl import Kerl, bytes_to_trits, kerl_hash, trits_to_bytes


SEED = "SEED9FOR9CRYPTO9TESTS" + "9" * 60


# ============================================================================
# CONVERTER TESTS
# ============================================================================

class TestConverter:
    """Tests for balanced ternary conversion."""

    def test_tryte_values(self):
        """Test the tryte alphabet maps to -13..13."""
        assert tryte_value("9") == 0
        assert tryte_value("A") == 1
        assert tryte_value("M") == 13
        assert tryte_value("N") == -13
        assert tryte_value("Z") == -1

    def test_trytes_to_trits(self):
        """Test tryte to trit conversion is little-endian."""
        assert trytes_to_trits("9") == [0, 0, 0]
        assert trytes_to_trits("A") == [1, 0, 0]
        assert trytes_to_trits("M") == [1, 1, 1]
        assert trytes_to_trits("N") == [-1, -1, -1]

    def test_trits_to_trytes(self):
        """Test trit to tryte conversion."""
        assert trits_to_trytes([1, 0, 0, -1, -1, -1]) == "AN"

    def test_trits_to_trytes_bad_length(self):
        """Test partial trytes are rejected."""
        with pytest.raises(ValueError):
            trits_to_trytes([1, 0])

    def test_invalid_tryte_character(self):
        """Test lowercase characters are rejected."""
        with pytest.raises(ValueError):
            trytes_to_trits("abc")

    def test_int_conversion(self):
        """Test integers survive a trit round trip, including negatives."""
        for value in (0, 1, -1, 50, -80, 2779530283277761):
            assert trits_to_int(int_to_trits(value)) == value

    def test_int_to_trits_padding(self):
        """Test padding to a fixed width."""
        assert int_to_trits(1, 5) == [1, 0, 0, 0, 0]

    def test_int_to_trits_overflow(self):
        """Test values that do not fit are rejected."""
        with pytest.raises(ValueError):
            int_to_trits(100, 3)

    def test_int_to_trytes(self):
        """Test integer to tryte encoding."""
        assert int_to_trytes(0, 9) == "9" * 9
        assert int_to_trytes(1, 2) == "A9"

    def test_increment_trits(self):
        """Test ternary increment with carry."""
        assert increment_trits([0, 0]) == [1, 0]
        assert increment_trits([1, 0]) == [-1, 1]
        assert trits_to_int(increment_trits(int_to_trits(41, 6))) == 42

    def test_is_trytes(self):
        """Test tryte string detection."""
        assert is_trytes("ABC9")
        assert is_trytes("")
        assert is_trytes("ABC", 3)
        assert not is_trytes("ABC", 4)
        assert not is_trytes("abc")
        assert not is_trytes(123)

    def test_is_filler(self):
        """Test filler detection."""
        assert is_filler(EMPTY_FRAGMENT)
        assert is_filler("999")
        assert not is_filler("99A")
        assert not is_filler("")

    def test_pad_trytes(self):
        """Test filler padding."""
        assert pad_trytes("AB", 5) == "AB999"


# ============================================================================
# KERL TESTS
# ============================================================================

class TestKerl:
    """Tests for the Kerl sponge."""

    def test_byte_conversion(self):
        """Test 243-trit blocks survive the byte encoding."""
        block = int_to_trits(-123456789, HASH_LENGTH)
        block[-1] = 0
        data = trits_to_bytes(block)
        assert len(data) == 48
        assert bytes_to_trits(data) == block

    def test_squeeze_length(self):
        """Test squeeze returns the requested trits with last trit zero."""
        out = kerl_hash(trytes_to_trits(SEED))
        assert len(out) == HASH_LENGTH
        assert out[-1] == 0
        assert set(out) <= {-1, 0, 1}

    def test_deterministic(self):
        """Test the same input hashes the same."""
        trits = trytes_to_trits(SEED)
        assert kerl_hash(trits) == kerl_hash(trits)

    def test_different_inputs(self):
        """Test different inputs hash differently."""
        assert kerl_hash(trytes_to_trits("A" * 81)) != kerl_hash(trytes_to_trits("B" * 81))

    def test_absorb_in_parts(self):
        """Test absorbing block by block equals absorbing at once."""
        first = trytes_to_trits("A" * 81)
        second = trytes_to_trits("B" * 81)

        whole = Kerl()
        whole.absorb(first + second)

        parts = Kerl()
        parts.absorb(first)
        parts.absorb(second)

        assert whole.squeeze() == parts.squeeze()

    def test_multi_block_squeeze(self):
        """Test squeezing twice continues the sponge."""
        kerl = Kerl()
        kerl.absorb(trytes_to_trits(SEED))
        out = kerl.squeeze(HASH_LENGTH * 2)
        assert len(out) == HASH_LENGTH * 2
        assert out[:HASH_LENGTH] != out[HASH_LENGTH:]

    def test_reset(self):
        """Test reset discards absorbed state."""
        kerl = Kerl()
        kerl.absorb(trytes_to_trits("A" * 81))
        kerl.reset()
        kerl.absorb(trytes_to_trits(SEED))
        assert kerl.squeeze() == kerl_hash(trytes_to_trits(SEED))

    def test_absorb_bad_length(self):
        """Test partial blocks are rejected."""
        with pytest.raises(ValueError):
            Kerl().absorb([0] * 10)


# ============================================================================
# SIGNING TESTS
# ============================================================================

class TestSigning:
    """Tests for one-time signature primitives."""

    def test_key_length(self):
        """Test key length scales with security."""
        for security in (1, 2):
            key = signing.key(trytes_to_trits(SEED), 0, security)
            assert len(key) == security * KEY_FRAGMENT_TRITS

    def test_key_depends_on_index(self):
        """Test different indexes give different keys."""
        seed = trytes_to_trits(SEED)
        assert signing.key(seed, 0, 1) != signing.key(seed, 1, 1)

    def test_key_invalid_security(self):
        """Test security outside 1..3 is rejected."""
        with pytest.raises(ValueError):
            signing.key(trytes_to_trits(SEED), 0, 4)

    def test_digests_length(self):
        """Test one digest per key block."""
        key = signing.key(trytes_to_trits(SEED), 0, 2)
        assert len(signing.digests(key)) == 2 * HASH_LENGTH

    def test_normalized_bundle_sums_to_zero(self):
        """Test each third of a normalized hash sums to zero."""
        bundle_hash = trits_to_trytes(kerl_hash(trytes_to_trits(SEED)))
        normalized = signing.normalized_bundle(bundle_hash)

        assert len(normalized) == 81
        for i in range(3):
            assert sum(normalized[i * 27:(i + 1) * 27]) == 0
        assert all(MIN_TRYTE_VALUE <= n <= MAX_TRYTE_VALUE for n in normalized)

    def test_normalized_fragments(self):
        """Test the normalized hash splits into three 27-value thirds."""
        bundle_hash = trits_to_trytes(kerl_hash(trytes_to_trits(SEED)))
        fragments = signing.normalized_fragments(bundle_hash)
        assert len(fragments) == 3
        assert sum(fragments, []) == signing.normalized_bundle(bundle_hash)

    def test_sign_and_recover_digest(self):
        """Test a signature fragment resolves to the key block digest."""
        key = signing.key(trytes_to_trits(SEED), 0, 1)
        bundle_hash = trits_to_trytes(kerl_hash(trytes_to_trits("C" * 81)))
        fragment = signing.normalized_fragments(bundle_hash)[0]

        signature = signing.signature_fragment(fragment, key)

        assert len(signature) == KEY_FRAGMENT_TRITS
        assert signing.digest(fragment, signature) == signing.digests(key)

    def test_signature_fragment_bad_key(self):
        """Test a key block of the wrong size is rejected."""
        with pytest.raises(ValueError):
            signing.signature_fragment([0] * 27, [0] * 100)

    def test_validate_signatures(self):
        """Test single-key signature validation against its address."""
        key = signing.key(trytes_to_trits(SEED), 0, 1)
        address = trits_to_trytes(signing.address(signing.digests(key)))
        bundle_hash = trits_to_trytes(kerl_hash(trytes_to_trits("D" * 81)))
        fragment = signing.normalized_fragments(bundle_hash)[0]
        signature = trits_to_trytes(signing.signature_fragment(fragment, key))

        assert signing.validate_signatures(address, [signature], bundle_hash)
        assert not signing.validate_signatures("9" * 81, [signature], bundle_hash)
