"""Tests for ChMask parsing and generation."""

import random

import pytest

from lorawan.band.channel_mask import (
    ChMaskCntlPair,
    apply_ch_mask_pairs,
    ch_mask_from_bytes,
    ch_mask_to_bytes,
    equal_ch_masks,
    generate_ch_mask16,
    generate_ch_mask48,
    generate_ch_mask64,
    generate_ch_mask72,
    generate_ch_mask96,
    make_generate_ch_mask72,
    parse_ch_mask16,
    parse_ch_mask48,
    parse_ch_mask64,
    parse_ch_mask72,
    parse_ch_mask96,
)
from lorawan.core.errors import FieldLengthMismatch, InvalidChannelCount, UnsupportedChMaskCntl

FALSE16 = [False] * 16
TRUE16 = [True] * 16

FAMILIES = [
    (16, generate_ch_mask16, parse_ch_mask16),
    (48, generate_ch_mask48, parse_ch_mask48),
    (64, generate_ch_mask64, parse_ch_mask64),
    (72, generate_ch_mask72, parse_ch_mask72),
    (96, generate_ch_mask96, parse_ch_mask96),
]


def mask(*on):
    """16-bit ChMask with the given bits set."""
    return tuple(i in on for i in range(16))


def channels(n, *on):
    return [i in on for i in range(n)]


def random_channels(n):
    return [random.random() < 0.5 for _ in range(n)]


def matrix_length(current, desired):
    """Number of pairs plain matrix mode would need."""
    n = 0
    for i in range(0, min(len(desired), 64), 16):
        if current[i : i + 16] != desired[i : i + 16]:
            n += 1
    if len(desired) == 72:
        n += current[64:] != desired[64:]
    elif len(desired) > 64:
        for i in range(64, len(desired), 16):
            n += current[i : i + 16] != desired[i : i + 16]
    return n


class TestChMaskBytes:
    """Test ChMask wire packing."""

    def test_to_bytes(self):
        """Test channel 0 is the least significant bit."""
        assert ch_mask_to_bytes(mask(2, 9)) == b"\x04\x02"
        assert ch_mask_to_bytes(TRUE16) == b"\xff\xff"

    def test_from_bytes(self):
        """Test unpacking."""
        assert ch_mask_from_bytes(b"\x04\x02") == mask(2, 9)

    def test_wrong_size(self):
        """Test masks that are not 16 bits."""
        with pytest.raises(FieldLengthMismatch):
            ch_mask_to_bytes([True] * 15)
        with pytest.raises(FieldLengthMismatch):
            ch_mask_from_bytes(b"\x00")

    def test_equal(self):
        """Test channel vector comparison."""
        assert equal_ch_masks([True, False], (True, False))
        assert not equal_ch_masks([True, False], [True, True])
        assert not equal_ch_masks([True], [True, False])


class TestParseChMask:
    """Test per-family parsing."""

    def test_16(self):
        """Test 16-channel parsing."""
        assert parse_ch_mask16(mask(0, 3), 0) == dict(enumerate(mask(0, 3)))
        assert parse_ch_mask16(FALSE16, 6) == {i: True for i in range(16)}
        with pytest.raises(UnsupportedChMaskCntl):
            parse_ch_mask16(FALSE16, 1)

    def test_48(self):
        """Test 48-channel parsing."""
        chs = parse_ch_mask48(mask(1), 2)
        assert set(chs) == set(range(32, 48))
        assert chs[33] and not chs[32]
        assert parse_ch_mask48(FALSE16, 3) == {i: True for i in range(48)}
        assert parse_ch_mask48(TRUE16, 4) == {i: False for i in range(48)}
        with pytest.raises(UnsupportedChMaskCntl):
            parse_ch_mask48(FALSE16, 5)

    def test_64(self):
        """Test 64-channel parsing."""
        assert set(parse_ch_mask64(FALSE16, 3)) == set(range(48, 64))
        assert parse_ch_mask64(FALSE16, 6) == {i: True for i in range(64)}
        assert parse_ch_mask64(FALSE16, 7) == {i: False for i in range(64)}
        with pytest.raises(UnsupportedChMaskCntl):
            parse_ch_mask64(FALSE16, 4)

    def test_72_banks(self):
        """Test 72-channel 125 kHz banks and the 500 kHz channels."""
        assert set(parse_ch_mask72(FALSE16, 1)) == set(range(16, 32))
        chs = parse_ch_mask72(mask(0, 7, 8), 4)
        assert set(chs) == set(range(64, 72))
        assert chs[64] and chs[71]

    def test_72_fsb(self):
        """Test ChMaskCntl 5 selects 8-channel sub-bands."""
        chs = parse_ch_mask72(mask(1), 5)
        assert set(chs) == set(range(64))
        assert [i for i, on in chs.items() if on] == list(range(8, 16))

    def test_72_fsb_unsupported(self):
        """Test ChMaskCntl 5 on versions without FSB selection."""
        with pytest.raises(UnsupportedChMaskCntl):
            parse_ch_mask72(mask(1), 5, support_cntl5=False)

    def test_72_all_on_off(self):
        """Test ChMaskCntl 6 and 7 also set the 500 kHz channels."""
        chs = parse_ch_mask72(mask(0), 6)
        assert all(chs[i] for i in range(64))
        assert chs[64] and not chs[65]
        chs = parse_ch_mask72(mask(1), 7)
        assert not any(chs[i] for i in range(64))
        assert chs[65] and not chs[64]

    def test_96(self):
        """Test 96-channel parsing."""
        assert set(parse_ch_mask96(FALSE16, 5)) == set(range(80, 96))
        assert parse_ch_mask96(FALSE16, 6) == {i: True for i in range(96)}
        with pytest.raises(UnsupportedChMaskCntl):
            parse_ch_mask96(FALSE16, 7)


class TestGenerateChMask:
    """Test ChMask pair generation."""

    @pytest.mark.parametrize("n, generate, parse", FAMILIES)
    def test_no_op(self, n, generate, parse):
        """Test identical vectors give one pair that changes nothing."""
        chs = random_channels(n)
        pairs = generate(chs, chs)
        assert len(pairs) == 1
        assert pairs[0].cntl == 0
        assert list(pairs[0].mask) == chs[:16]
        assert apply_ch_mask_pairs(parse, chs, pairs) == chs

    @pytest.mark.parametrize("n, generate, parse", FAMILIES)
    def test_reaches_desired(self, n, generate, parse):
        """Test applying the generated pairs yields the desired state."""
        for _ in range(50):
            current = random_channels(n)
            desired = random_channels(n)
            pairs = generate(current, desired)
            assert apply_ch_mask_pairs(parse, current, pairs) == desired

    @pytest.mark.parametrize("n, generate, parse", FAMILIES[1:])
    def test_not_longer_than_matrix(self, n, generate, parse):
        """Test the result never exceeds the plain matrix encoding."""
        for _ in range(50):
            current = random_channels(n)
            desired = random_channels(n)
            if current == desired:
                continue
            assert len(generate(current, desired)) <= matrix_length(current, desired)

    @pytest.mark.parametrize("n, generate, parse", FAMILIES)
    def test_invalid_channel_count(self, n, generate, parse):
        """Test vectors of the wrong size."""
        with pytest.raises(InvalidChannelCount):
            generate([True] * (n + 1), [True] * n)
        with pytest.raises(InvalidChannelCount):
            generate([True] * n, [True] * (n - 1))

    def test_16_always_one_pair(self):
        """Test 16-channel bands always use ChMaskCntl 0."""
        assert generate_ch_mask16(channels(16), channels(16, 1, 2)) == [ChMaskCntlPair(0, mask(1, 2))]

    def test_48_all_on(self):
        """Test the all-on prime for 48 channels."""
        assert generate_ch_mask48(channels(48), [True] * 48) == [ChMaskCntlPair(3, mask())]

    def test_48_two_blocks_stay_matrix(self):
        """Test two differing blocks are sent as matrix pairs."""
        desired = channels(48, 0, 20)
        assert generate_ch_mask48(channels(48), desired) == [
            ChMaskCntlPair(0, mask(0)),
            ChMaskCntlPair(1, mask(4)),
        ]

    def test_64_all_off_prime(self):
        """Test the all-off prime for 64 channels."""
        assert generate_ch_mask64([True] * 64, channels(64, 0)) == [
            ChMaskCntlPair(7, mask()),
            ChMaskCntlPair(0, mask(0)),
        ]

    def test_72_single_500khz_channel(self):
        """Test only the 500 kHz channels changing."""
        current = [True] * 64 + [False] * 8
        desired = [True] * 65 + [False] * 7
        assert generate_ch_mask72(current, desired) == [ChMaskCntlPair(4, mask(0))]

    def test_72_all_125khz(self):
        """Test all 125 kHz channels on or off use ChMaskCntl 6 / 7."""
        current = channels(72, 3, 17, 40)
        assert generate_ch_mask72(current, [True] * 64 + channels(8, 1)) == [ChMaskCntlPair(6, mask(1))]
        assert generate_ch_mask72(current, channels(72, 64)) == [ChMaskCntlPair(7, mask(0))]

    def test_72_fsb(self):
        """Test selecting a single sub-band with ChMaskCntl 5."""
        desired = channels(72, *range(8, 16), 65)
        assert generate_ch_mask72([True] * 72, desired) == [
            ChMaskCntlPair(5, mask(1)),
            ChMaskCntlPair(4, mask(1)),
        ]

    def test_72_non_atomic_sorted(self):
        """Test non-atomic devices get matrix pairs, most enabled first."""
        desired = channels(72, *range(8, 16), 65)
        pairs = generate_ch_mask72([True] * 72, desired, support_cntl5=False)
        assert [pair.cntl for pair in pairs] == [0, 4, 1, 2, 3]

    def test_72_atomic_off_prime(self):
        """Test atomic devices may be primed with ChMaskCntl 7."""
        desired = channels(72, *range(8, 16), 65)
        generate = make_generate_ch_mask72(support_cntl5=False, atomic=True)
        assert generate([True] * 72, desired) == [
            ChMaskCntlPair(7, mask(1)),
            ChMaskCntlPair(0, mask(*range(8, 16))),
        ]

    def test_72_non_atomic_never_muted(self):
        """Test every intermediate state keeps a channel enabled."""
        for _ in range(50):
            current = random_channels(72)
            desired = random_channels(72)
            state = current
            for pair in generate_ch_mask72(current, desired, support_cntl5=False):
                state = apply_ch_mask_pairs(parse_ch_mask72, state, [pair])
                assert any(state)

    def test_72_non_atomic_block_swap(self):
        """Test moving to another 125 kHz block enables it before disabling the old one."""
        generate = make_generate_ch_mask72(support_cntl5=False, atomic=False)
        current = channels(72, *range(16))
        desired = channels(72, *range(16, 32))
        assert generate(current, desired) == [ChMaskCntlPair(1, tuple(TRUE16)), ChMaskCntlPair(0, mask())]

    @pytest.mark.parametrize("support_cntl5", [False, True])
    def test_72_non_atomic_sparse_never_muted(self, support_cntl5):
        """Test sparse channel plans keep a channel enabled after every pair."""
        generate = make_generate_ch_mask72(support_cntl5=support_cntl5, atomic=False)
        for _ in range(200):
            current = [random.random() < 0.1 for _ in range(72)]
            desired = [random.random() < 0.1 for _ in range(72)]
            if not any(current) or not any(desired):
                continue
            state = current
            for pair in generate(current, desired):
                state = apply_ch_mask_pairs(parse_ch_mask72, state, [pair])
                assert any(state)
            assert state == desired

    def test_96_all_on(self):
        """Test the all-on shortcut for 96 channels."""
        assert generate_ch_mask96(channels(96, 5), [True] * 96) == [ChMaskCntlPair(6, mask())]

    def test_96_on_prime(self):
        """Test priming with all-on when most blocks become full."""
        desired = [True] * 96
        desired[0] = False
        pairs = generate_ch_mask96(channels(96), desired)
        assert pairs == [ChMaskCntlPair(6, mask()), ChMaskCntlPair(0, mask(*range(1, 16)))]
