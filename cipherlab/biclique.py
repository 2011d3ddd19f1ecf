"""Biclique key-recovery attack on the last three rounds of AES-128.

A biclique is a 256 x 256 grid of keys that differ from a base round-8 key
by two independent byte differences ``i`` and ``j``.  Cell ``(i, j)`` holds
the key ``K[i][j]``, a ciphertext ``C_i`` and an intermediate state ``S_j``
(the state entering round 8).  The grid is built so that
``encrypt_last_rounds(K[i][j], S_j)`` gives ``C_i`` for every cell.  This
lets an attacker test 65536 keys with only 256 oracle decryptions.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from cipherlab.aes import (
    KeySchedule,
    State,
    StateLike,
    decrypt,
    encrypt_last_rounds,
)

DIMENSION = 256

# Column-order positions of the round-8 key cells touched by the differences.
_DELTA_I_CELLS = (4 * 2 + 0, 4 * 3 + 0)  # (0, 2) and (0, 3)
_DELTA_J_CELLS = (4 * 0 + 1, 4 * 2 + 1)  # (1, 0) and (1, 2)
_ZEROED_CELLS = (4 * 3 + 0, 4 * 0 + 1)  # (0, 3) and (1, 0)


@dataclass(frozen=True)
class BicliqueCell:
    """One cell of the biclique: its ciphertext, its state and its round-8 key."""

    ciphertext: State
    sub_state: State
    round8: State

    @property
    def keys(self) -> KeySchedule:
        """The full key schedule derived from this cell's round-8 key."""
        return KeySchedule.from_round8(self.round8)


def _base_round8(initial_key: StateLike) -> State:
    data = bytearray(State.from_bytes(initial_key).to_bytes())
    for position in _ZEROED_CELLS:
        data[position] = 0
    return State(bytes(data))


def _round8(base: State, i: int, j: int) -> State:
    data = bytearray(base.to_bytes())
    for position in _DELTA_I_CELLS:
        data[position] ^= i
    for position in _DELTA_J_CELLS:
        data[position] ^= j
    return State(bytes(data))


def _last_rounds_schedule(base: State, i: int, j: int) -> KeySchedule:
    schedule = KeySchedule()
    schedule.round_keys[8] = base
    schedule.apply_delta_i(i)
    schedule.apply_delta_j(j)
    schedule.recompute_last_rounds()
    return schedule


def _biclique_parts(initial_key: StateLike) -> tuple[State, list[State], list[State]]:
    """The base round-8 key, the ciphertexts ``C_i`` and the states ``S_j``."""
    base = _base_round8(initial_key)
    zero = State.zero()
    ciphertexts = [
        encrypt_last_rounds(_last_rounds_schedule(base, i, 0), zero)[21] for i in range(DIMENSION)
    ]
    first_ciphertext = ciphertexts[0]
    sub_states = [
        decrypt(_last_rounds_schedule(base, 0, j), first_ciphertext)[15] for j in range(DIMENSION)
    ]
    return base, ciphertexts, sub_states


def build_biclique(initial_key: StateLike) -> list[list[BicliqueCell]]:
    """Build the 256 x 256 biclique around a 16-byte round-8 key.

    Cells (0, 3) and (1, 0) of the initial key are cleared; cell ``[i][j]``
    of the result carries the key shifted by the differences ``i`` and ``j``.
    """
    base, ciphertexts, sub_states = _biclique_parts(initial_key)
    return [
        [
            BicliqueCell(ciphertext, sub_states[j], _round8(base, i, j))
            for j in range(DIMENSION)
        ]
        for i, ciphertext in enumerate(ciphertexts)
    ]


def count_distinct_states(traces: Iterable[Sequence[State]], index: int) -> int:
    """Count the distinct states found at position ``index`` of the traces."""
    return len({trace[index] for trace in traces})


def biclique_attack(secret_key: KeySchedule) -> State | None:
    """Recover the round-8 key of ``secret_key`` using it as a decryption oracle.

    The search covers every key whose round-8 key has cell (2, 0) and all
    cells outside (0, 0), (0, 2), (0, 3), (1, 0), (1, 2) equal to zero, with
    (0, 2) = (0, 3) and (1, 0) = (1, 2).  Returns ``None`` when no key of
    that family matches.
    """
    for first in range(DIMENSION):
        initial_key = bytes([first]) + bytes(15)
        base, ciphertexts, sub_states = _biclique_parts(initial_key)
        columns: dict[State, int] = {}
        for j, sub_state in enumerate(sub_states):
            columns.setdefault(sub_state, j)
        for i, ciphertext in enumerate(ciphertexts):
            j = columns.get(decrypt(secret_key, ciphertext)[15])
            if j is not None:
                return _round8(base, i, j)
    return None