"""
LoRaWAN Channel Mask Codec

LinkADRReq carries a 16-bit ChMask and a 3-bit ChMaskCntl. How the pair
applies to the device's channel plan depends on the plan size:

    16 channels  (EU-like):   0 -> ch 0-15,          6 -> all on
    48 channels  (CN 26 MHz): 0-2 -> 16-ch block,    3 -> all on, 4 -> all off
    64 channels  (CN 20 MHz): 0-3 -> 16-ch block,    6 -> all on, 7 -> all off
    72 channels  (US/AU):     0-3 -> 125 kHz block,  4 -> ch 64-71,
                              5 -> FSB selection,    6/7 -> 125 kHz on/off + ch 64-71
    96 channels  (CN 470):    0-5 -> 16-ch block,    6 -> all on

``parse_ch_mask*`` returns only the channels a single pair controls; the
caller merges them onto the prior state. ``generate_ch_mask*`` returns the
shortest pair sequence that takes the device from ``current`` to
``desired`` when applied in order.

Channel vectors are handled as numpy boolean arrays internally; the public
functions accept any boolean sequence.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Callable, Dict, List, NamedTuple, Sequence, Tuple

import numpy as np

from lorawan.core.constants import CH_MASK_SIZE
from lorawan.core.errors import FieldLengthMismatch, InvalidChannelCount, UnsupportedChMaskCntl

__all__ = [
    "ChMask",
    "ChMaskCntlPair",
    "ParseChMaskFunc",
    "GenerateChMasksFunc",
    # Parsing
    "parse_ch_mask16",
    "parse_ch_mask48",
    "parse_ch_mask64",
    "parse_ch_mask72",
    "parse_ch_mask96",
    # Generation
    "generate_ch_mask16",
    "generate_ch_mask48",
    "generate_ch_mask64",
    "generate_ch_mask72",
    "generate_ch_mask96",
    "make_generate_ch_mask72",
    # Helpers
    "equal_ch_masks",
    "apply_ch_mask_pairs",
    "ch_mask_to_bytes",
    "ch_mask_from_bytes",
]

logger = logging.getLogger(__name__)

ChMask = Tuple[bool, ...]


class ChMaskCntlPair(NamedTuple):
    """One LinkADRReq (ChMaskCntl, ChMask) pair."""

    cntl: int
    mask: ChMask


ParseChMaskFunc = Callable[[Sequence[bool], int], Dict[int, bool]]
GenerateChMasksFunc = Callable[[Sequence[bool], Sequence[bool]], List[ChMaskCntlPair]]

_ZERO_MASK: ChMask = (False,) * CH_MASK_SIZE


# =============================================================================
# Helpers
# =============================================================================


def _as_mask(mask: Sequence[bool]) -> np.ndarray:
    arr = np.asarray(mask, dtype=bool)
    if arr.shape != (CH_MASK_SIZE,):
        raise FieldLengthMismatch("ch_mask", CH_MASK_SIZE, arr.size)
    return arr


def _to_mask(chs: np.ndarray) -> ChMask:
    """Pad a slice of at most 16 channels to a ChMask tuple."""
    padded = np.zeros(CH_MASK_SIZE, dtype=bool)
    padded[: len(chs)] = chs
    return tuple(bool(v) for v in padded)


def _as_channels(chs: Sequence[bool], n: int) -> np.ndarray:
    arr = np.asarray(chs, dtype=bool)
    if arr.ndim != 1 or arr.size != n:
        raise InvalidChannelCount(n, arr.size)
    return arr


def _slice_mapping(offset: int, values: Sequence[bool]) -> Dict[int, bool]:
    return {offset + i: bool(v) for i, v in enumerate(values)}


def _count(chs: np.ndarray) -> int:
    return int(np.count_nonzero(chs))


def equal_ch_masks(a: Sequence[bool], b: Sequence[bool]) -> bool:
    """Return True if both channel vectors have the same length and state."""
    return bool(np.array_equal(np.asarray(a, dtype=bool), np.asarray(b, dtype=bool)))


def ch_mask_to_bytes(mask: Sequence[bool]) -> bytes:
    """
    Pack a ChMask into its 2-byte little-endian wire form.

    Channel 0 is the least significant bit of the first byte.

    Examples:
        >>> ch_mask_to_bytes([False, False, True] + [False] * 6 + [True] + [False] * 6).hex()
        '0402'
    """
    return np.packbits(_as_mask(mask), bitorder="little").tobytes()


def ch_mask_from_bytes(data: bytes) -> ChMask:
    """Unpack a 2-byte ChMask."""
    if len(data) != 2:
        raise FieldLengthMismatch("ch_mask", 2, len(data))
    bits = np.unpackbits(np.frombuffer(data, dtype=np.uint8), bitorder="little")
    return tuple(bool(v) for v in bits)


def apply_ch_mask_pairs(
    parse: ParseChMaskFunc,
    current: Sequence[bool],
    pairs: Sequence[ChMaskCntlPair],
) -> List[bool]:
    """
    Apply ``pairs`` in order to ``current`` as a device would.

    Args:
        parse: Band family parser, e.g. :func:`parse_ch_mask72`.
        current: Channel state before the first pair.
        pairs: (ChMaskCntl, ChMask) pairs to apply.

    Returns:
        Channel state after the last pair.
    """
    state = [bool(v) for v in current]
    for pair in pairs:
        for index, enabled in parse(pair.mask, pair.cntl).items():
            state[index] = enabled
    return state


# =============================================================================
# Parsing
# =============================================================================


def parse_ch_mask16(mask: Sequence[bool], cntl: int) -> Dict[int, bool]:
    """Parse a ChMask for 16-channel bands."""
    mask = _as_mask(mask)
    if cntl == 0:
        return _slice_mapping(0, mask)
    if cntl == 6:
        return _slice_mapping(0, [True] * 16)
    raise UnsupportedChMaskCntl(cntl)


def parse_ch_mask48(mask: Sequence[bool], cntl: int) -> Dict[int, bool]:
    """Parse a ChMask for 48-channel bands."""
    mask = _as_mask(mask)
    if cntl in (0, 1, 2):
        return _slice_mapping(cntl * 16, mask)
    if cntl == 3:
        return _slice_mapping(0, [True] * 48)
    if cntl == 4:
        return _slice_mapping(0, [False] * 48)
    raise UnsupportedChMaskCntl(cntl)


def parse_ch_mask64(mask: Sequence[bool], cntl: int) -> Dict[int, bool]:
    """Parse a ChMask for 64-channel bands."""
    mask = _as_mask(mask)
    if cntl in (0, 1, 2, 3):
        return _slice_mapping(cntl * 16, mask)
    if cntl == 6:
        return _slice_mapping(0, [True] * 64)
    if cntl == 7:
        return _slice_mapping(0, [False] * 64)
    raise UnsupportedChMaskCntl(cntl)


def parse_ch_mask72(mask: Sequence[bool], cntl: int, support_cntl5: bool = True) -> Dict[int, bool]:
    """
    Parse a ChMask for 72-channel bands (64 x 125 kHz + 8 x 500 kHz).

    Args:
        mask: 16-bit ChMask.
        cntl: ChMaskCntl.
        support_cntl5: Whether the band version defines FSB selection (cntl=5).

    Returns:
        Mapping of the affected channel indices to their new state.

    Raises:
        UnsupportedChMaskCntl: If ``cntl`` is not defined.
    """
    mask = _as_mask(mask)
    if cntl in (0, 1, 2, 3):
        return _slice_mapping(cntl * 16, mask)
    if cntl == 4:
        return _slice_mapping(64, mask[:8])
    if cntl == 5 and support_cntl5:
        return {i: bool(mask[i // 8]) for i in range(64)}
    if cntl == 6:
        chs = _slice_mapping(0, [True] * 64)
        chs.update(_slice_mapping(64, mask[:8]))
        return chs
    if cntl == 7:
        chs = _slice_mapping(0, [False] * 64)
        chs.update(_slice_mapping(64, mask[:8]))
        return chs
    raise UnsupportedChMaskCntl(cntl)


def parse_ch_mask96(mask: Sequence[bool], cntl: int) -> Dict[int, bool]:
    """Parse a ChMask for 96-channel bands."""
    mask = _as_mask(mask)
    if 0 <= cntl <= 5:
        return _slice_mapping(cntl * 16, mask)
    if cntl == 6:
        return _slice_mapping(0, [True] * 96)
    raise UnsupportedChMaskCntl(cntl)


# =============================================================================
# Generation
# =============================================================================


def _matrix_pairs(current: np.ndarray, desired: np.ndarray) -> List[ChMaskCntlPair]:
    """One pair per differing 16-channel block, ChMaskCntl = block index."""
    pairs = []
    for i in range(len(desired) // 16):
        block = slice(16 * i, 16 * i + 16)
        if not np.array_equal(current[block], desired[block]):
            pairs.append(ChMaskCntlPair(i, _to_mask(desired[block])))
    return pairs


def _pick_primed(
    pairs: List[ChMaskCntlPair],
    on: Tuple[ChMaskCntlPair, List[ChMaskCntlPair]],
    off: Tuple[ChMaskCntlPair, List[ChMaskCntlPair]],
) -> List[ChMaskCntlPair]:
    """Choose between plain matrix pairs and all-on/all-off primed sequences.

    Ties favour the matrix pairs, then the all-on prime.
    """
    on_prime, on_pairs = on
    off_prime, off_pairs = off
    if len(pairs) <= 1 + len(on_pairs) and len(pairs) <= 1 + len(off_pairs):
        return pairs
    if len(on_pairs) <= len(off_pairs):
        logger.debug(f"ChMaskCntl {on_prime.cntl} prime saves {len(pairs) - 1 - len(on_pairs)} pair(s)")
        return [on_prime] + on_pairs
    logger.debug(f"ChMaskCntl {off_prime.cntl} prime saves {len(pairs) - 1 - len(off_pairs)} pair(s)")
    return [off_prime] + off_pairs


def generate_ch_mask16(current: Sequence[bool], desired: Sequence[bool]) -> List[ChMaskCntlPair]:
    """Generate the ChMask pair for 16-channel bands."""
    _as_channels(current, 16)
    des = _as_channels(desired, 16)
    return [ChMaskCntlPair(0, _to_mask(des))]


def generate_ch_mask48(current: Sequence[bool], desired: Sequence[bool]) -> List[ChMaskCntlPair]:
    """Generate ChMask pairs for 48-channel bands."""
    cur = _as_channels(current, 48)
    des = _as_channels(desired, 48)
    if np.array_equal(cur, des):
        return [ChMaskCntlPair(0, _to_mask(des[:16]))]
    pairs = _matrix_pairs(cur, des)
    if len(pairs) <= 2:
        return pairs
    return _pick_primed(
        pairs,
        (ChMaskCntlPair(3, _ZERO_MASK), _matrix_pairs(np.ones(48, dtype=bool), des)),
        (ChMaskCntlPair(4, _ZERO_MASK), _matrix_pairs(np.zeros(48, dtype=bool), des)),
    )


def generate_ch_mask64(current: Sequence[bool], desired: Sequence[bool]) -> List[ChMaskCntlPair]:
    """Generate ChMask pairs for 64-channel bands."""
    cur = _as_channels(current, 64)
    des = _as_channels(desired, 64)
    if np.array_equal(cur, des):
        return [ChMaskCntlPair(0, _to_mask(des[:16]))]
    pairs = _matrix_pairs(cur, des)
    if len(pairs) <= 2:
        return pairs
    return _pick_primed(
        pairs,
        (ChMaskCntlPair(6, _ZERO_MASK), _matrix_pairs(np.ones(64, dtype=bool), des)),
        (ChMaskCntlPair(7, _ZERO_MASK), _matrix_pairs(np.zeros(64, dtype=bool), des)),
    )


def _enabled_first(pairs: List[ChMaskCntlPair]) -> List[ChMaskCntlPair]:
    # Matrix pairs touch disjoint channels, so any order reaches the same state
    return sorted(pairs, key=lambda pair: sum(pair.mask), reverse=True)


def _generate_ch_mask72_generic(cur: np.ndarray, des: np.ndarray, atomic: bool) -> List[ChMaskCntlPair]:
    des500 = _to_mask(des[64:72])
    pairs = _matrix_pairs(cur[:64], des[:64])
    if not np.array_equal(cur[64:72], des[64:72]):
        pairs.append(ChMaskCntlPair(4, des500))
    if len(pairs) <= 1:
        return pairs

    on125 = _count(des[:64])
    if on125 == 0:
        return [ChMaskCntlPair(7, des500)]
    if on125 == 64:
        return [ChMaskCntlPair(6, des500)]
    if not atomic:
        # A non-atomic device applies each pair on its own, so none may leave it muted
        pairs = _enabled_first(pairs)
    if len(pairs) <= 2:
        return pairs

    on_pairs = _matrix_pairs(np.ones(64, dtype=bool), des[:64])
    off_pairs = _matrix_pairs(np.zeros(64, dtype=bool), des[:64])
    if len(pairs) <= 1 + len(on_pairs) and len(pairs) <= 1 + len(off_pairs):
        return pairs
    if len(on_pairs) <= len(off_pairs):
        return [ChMaskCntlPair(6, des500)] + on_pairs
    if not atomic:
        # ChMaskCntl 7 would disable all 125 kHz channels until the next pair lands
        logger.debug("non-atomic LinkADRReq block, ordering matrix pairs by enabled channels")
        return pairs
    return [ChMaskCntlPair(7, des500)] + off_pairs


def generate_ch_mask72(
    current: Sequence[bool],
    desired: Sequence[bool],
    support_cntl5: bool = True,
    atomic: bool = False,
) -> List[ChMaskCntlPair]:
    """
    Generate ChMask pairs for 72-channel bands.

    Args:
        current: Current state of the 72 channels.
        desired: Desired state of the 72 channels.
        support_cntl5: Whether FSB selection (ChMaskCntl 5) may be used.
        atomic: Whether the device applies a LinkADRReq block atomically.
            When it does not, a ChMaskCntl 7 prime is never emitted.

    Returns:
        Pairs to send, in order.

    Raises:
        InvalidChannelCount: If either vector is not 72 channels long.
    """
    cur = _as_channels(current, 72)
    des = _as_channels(desired, 72)
    if np.array_equal(cur, des):
        return [ChMaskCntlPair(0, _to_mask(des[:16]))]

    pairs = _generate_ch_mask72_generic(cur, des, atomic)
    if not support_cntl5 or len(pairs) <= 1:
        return pairs

    # A sub-band is selectable with ChMaskCntl 5 when all its 8 channels are on
    fsbs = des[:64].reshape(8, 8).all(axis=1)
    if _count(fsbs) in (0, 8):
        return pairs
    fsb_pairs = _matrix_pairs(np.repeat(fsbs, 8), des[:64])
    if not np.array_equal(cur[64:72], des[64:72]):
        fsb_pairs.append(ChMaskCntlPair(4, _to_mask(des[64:72])))
    if len(pairs) <= 1 + len(fsb_pairs):
        return pairs
    logger.debug(f"ChMaskCntl 5 prime saves {len(pairs) - 1 - len(fsb_pairs)} pair(s)")
    return [ChMaskCntlPair(5, _to_mask(fsbs))] + fsb_pairs


def make_generate_ch_mask72(support_cntl5: bool, atomic: bool) -> GenerateChMasksFunc:
    """Bind the 72-channel generator to a band version's capabilities."""
    return partial(generate_ch_mask72, support_cntl5=support_cntl5, atomic=atomic)


def generate_ch_mask96(current: Sequence[bool], desired: Sequence[bool]) -> List[ChMaskCntlPair]:
    """Generate ChMask pairs for 96-channel bands."""
    cur = _as_channels(current, 96)
    des = _as_channels(desired, 96)
    if np.array_equal(cur, des):
        return [ChMaskCntlPair(0, _to_mask(des[:16]))]
    if _count(des) == 96:
        return [ChMaskCntlPair(6, _ZERO_MASK)]
    pairs = _matrix_pairs(cur, des)
    if len(pairs) <= 2:
        return pairs
    on_pairs = _matrix_pairs(np.ones(96, dtype=bool), des)
    if len(pairs) <= 1 + len(on_pairs):
        return pairs
    return [ChMaskCntlPair(6, _ZERO_MASK)] + on_pairs
