"""A 16-bit toy substitution-permutation cipher and a differential key-nibble attack.

Values are held as four 4-bit nibbles, most significant first.  The cipher
runs five rounds of key mixing, substitution and (except in the last round)
a bit transposition, then adds a sixth round key.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

SIZE_STATISTIC_TABLE = 16
ROUNDS = 5

SUB_NIBBLES = (0x7, 0x3, 0xD, 0x9, 0xC, 0x2, 0x4, 0x8, 0xA, 0xB, 0x1, 0x0, 0xE, 0xF, 0x5, 0x6)
INV_SUB_NIBBLES = (0xB, 0xA, 0x5, 0x1, 0x6, 0xE, 0xF, 0x0, 0x7, 0x3, 0x8, 0x9, 0x4, 0x2, 0xC, 0xD)

INPUT_DIFFERENCE = 0x0400
_EXPECTED_DIFFERENCES = frozenset({0x1, 0x4, 0x6, 0x9, 0xB})
_TARGET_DIFFERENCE = 0x4

Nibbles = tuple[int, int, int, int]


def _check_nibbles(nibbles: Sequence[int]) -> Nibbles:
    values = tuple(nibbles)
    if len(values) != 4:
        raise ValueError(f"expected 4 nibbles, got {len(values)}")
    if any(not 0 <= value < 16 for value in values):
        raise ValueError(f"nibbles must lie in 0..15, got {values}")
    return values  # type: ignore[return-value]


def _join(nibbles: Sequence[int]) -> int:
    a, b, c, d = nibbles
    return (a << 12) | (b << 8) | (c << 4) | d


def _xor(left: Sequence[int], right: Sequence[int]) -> Nibbles:
    return tuple(x ^ y for x, y in zip(left, right))  # type: ignore[return-value]


def split_nibbles(value: int) -> Nibbles:
    """Split a 16-bit value into four nibbles, most significant first."""
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"value must fit in 16 bits, got {value}")
    return ((value >> 12) & 0xF, (value >> 8) & 0xF, (value >> 4) & 0xF, value & 0xF)


def bit_permutation(nibbles: Sequence[int]) -> Nibbles:
    """Transpose the 4x4 bit matrix formed by the nibbles."""
    n = _check_nibbles(nibbles)
    return tuple(  # type: ignore[return-value]
        sum(((n[j] >> (3 - i)) & 1) << (3 - j) for j in range(4)) for i in range(4)
    )


def key_permutation(nibbles: Sequence[int]) -> Nibbles:
    """Rotate the 16-bit key left by five bits."""
    value = _join(_check_nibbles(nibbles))
    return split_nibbles(((value << 5) | (value >> 11)) & 0xFFFF)


def sub_nibbles(nibbles: Sequence[int]) -> Nibbles:
    """Apply the cipher's S-box to every nibble."""
    return tuple(SUB_NIBBLES[value] for value in _check_nibbles(nibbles))  # type: ignore[return-value]


def round_keys(key: int) -> tuple[Nibbles, ...]:
    """Derive the six round keys from a 16-bit key."""
    keys = [split_nibbles(key)]
    for index in range(1, ROUNDS + 1):
        previous = keys[-1]
        keys.append(
            key_permutation(
                (SUB_NIBBLES[previous[0]], previous[1] ^ index, previous[2], previous[3])
            )
        )
    return tuple(keys)


def encrypt_rounds(plaintext: int, keys: Sequence[Sequence[int]], rounds: int) -> Nibbles:
    """The state of ``plaintext`` after ``rounds + 1`` rounds.

    ``-1`` gives the plaintext itself; ``4`` stops before the final key
    addition; ``5`` (or any other value) gives the full ciphertext.
    """
    if len(keys) != ROUNDS + 1:
        raise ValueError(f"expected {ROUNDS + 1} round keys, got {len(keys)}")
    state = split_nibbles(plaintext)
    stop = rounds + 1
    for index in range(ROUNDS):
        if index == stop:
            return state
        state = sub_nibbles(_xor(state, keys[index]))
        if index != ROUNDS - 1:
            state = bit_permutation(state)
    if stop == ROUNDS:
        return state
    return _xor(state, keys[ROUNDS])


def encrypt(message: int, key: int) -> Nibbles:
    """Encrypt a 16-bit message under a 16-bit key."""
    return encrypt_rounds(message, round_keys(key), ROUNDS)


def good_pairs(key: int, a: int, b: int) -> list[Nibbles]:
    """Ciphertexts ``E(x)`` of every ``x`` such that ``E(x) ^ b == E(x ^ a)``."""
    split_nibbles(a)
    difference = split_nibbles(b)
    keys = round_keys(key)
    codebook = [encrypt_rounds(value, keys, ROUNDS) for value in range(1 << 16)]
    return [
        cipher
        for value, cipher in enumerate(codebook)
        if _xor(cipher, difference) == codebook[value ^ a]
    ]


def hprd(
    size: int, key: int, rng: Optional[random.Random] = None
) -> tuple[tuple[int, ...], int]:
    """Score every guess of nibble 1 of the last round key over ``size`` random pairs.

    Returns the 16 scores and the true value of that nibble.
    """
    generator = rng if rng is not None else random.Random()
    keys = round_keys(key)
    counts = [0] * SIZE_STATISTIC_TABLE
    for _ in range(size):
        x0 = generator.randrange(1 << 16)
        c0 = encrypt_rounds(x0, keys, ROUNDS)
        c1 = encrypt_rounds(x0 ^ INPUT_DIFFERENCE, keys, ROUNDS)
        if c0[0] != c1[0] or c0[2] != c1[2] or c0[3] != c1[3]:
            continue
        if c0[1] ^ c1[1] not in _EXPECTED_DIFFERENCES:
            continue
        for guess in range(SIZE_STATISTIC_TABLE):
            y0 = INV_SUB_NIBBLES[c0[1] ^ guess]
            y1 = INV_SUB_NIBBLES[c1[1] ^ guess]
            if y0 ^ y1 == _TARGET_DIFFERENCE:
                counts[guess] += 1
    return tuple(counts), keys[ROUNDS][1]


def bits_identical(a: int, b: int) -> int:
    """How many of the low four bits of ``a`` and ``b`` agree."""
    return 4 - bin((a ^ b) & 0xF).count("1")


def format_nibbles(nibbles: Sequence[int]) -> str:
    """Render nibbles as ``[d]`` cells, using A to F above nine."""
    values = _check_nibbles(nibbles)
    return " ".join(f"[{value}]" if value < 10 else f"[{chr(ord('A') + value - 10)}]" for value in values)


@dataclass(frozen=True)
class KeyScore:
    """A key guess and the score it received."""

    index: int
    value: int


def rank_scores(counts: Sequence[int]) -> list[KeyScore]:
    """Key guesses ordered from highest to lowest score."""
    scores = [KeyScore(index, value) for index, value in enumerate(counts)]
    return sorted(scores, key=lambda score: score.value, reverse=True)


@dataclass(frozen=True)
class Statistics:
    """How well the attack ranks the true key nibble over many random keys.

    ``rank_proportions[k]`` is the share of keys whose true nibble ranked in
    the ``k``-th quarter of the guesses; ``bits_identified[k]`` is the share
    of keys whose best guess agreed with the true nibble on more than ``k`` bits.
    """

    coef: int
    n_keys: int
    rank_proportions: tuple[float, ...]
    bits_identified: tuple[float, ...]

    def report(self) -> str:
        """A printable summary of the statistics."""
        lines = [f"Proportion : (C = {self.coef}, Number Keys = {self.n_keys})"]
        for quarter, share in enumerate(self.rank_proportions):
            upper = 100 - 25 * quarter
            lines.append(f"\t{upper} - {upper - 25}%    \t: {100 * share:.1f}%")
        lines.append("")
        for bits in range(3, -1, -1):
            lines.append(f"\t{bits + 1} Bits identify\t: {100 * self.bits_identified[bits]:.1f}%")
        return "\n".join(lines) + "\n"


def statistics(
    q: int, n_keys: int, coef: int, rng: Optional[random.Random] = None
) -> Statistics:
    """Run the attack with ``q * coef`` pairs against ``n_keys`` random keys."""
    if not coef or not q:
        raise ValueError("0 keys")
    generator = rng if rng is not None else random.Random()
    ranks = [0.0] * 4
    bits = [0.0] * 4
    for _ in range(n_keys):
        counts, good = hprd(q * coef, generator.randrange(1 << SIZE_STATISTIC_TABLE), generator)
        ranked = rank_scores(counts)
        position = next(rank for rank, score in enumerate(ranked) if score.index == good)
        ranks[min(position // 4, 3)] += 1.0 / n_keys
        for level in range(bits_identical(ranked[0].index, good)):
            bits[level] += 1.0 / n_keys
    return Statistics(coef, n_keys, tuple(ranks), tuple(bits))