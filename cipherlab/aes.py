"""AES-128 primitives with full round-by-round traces and key-schedule helpers.

A block is held column by column, as in the AES specification: byte ``4*c + r``
of a 16-byte block sits at row ``r``, column ``c`` of the state.

Traces hold 22 states:

* 0: the plaintext;
* 1: after the first AddRoundKey;
* ``2*i``: after SubBytes, ShiftRows and MixColumns of round ``i`` (1 to 9);
* ``2*i + 1``: after AddRoundKey of round ``i``;
* 20: after SubBytes and ShiftRows of round 10;
* 21: the ciphertext.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Union

BLOCK_SIZE = 16
ROUNDS = 10
TRACE_LENGTH = 22

SBOX = bytes.fromhex(
    "637c777bf26b6fc53001672bfed7ab76"
    "ca82c97dfa5947f0add4a2af9ca472c0"
    "b7fd9326363ff7cc34a5e5f171d83115"
    "04c723c31896059a071280e2eb27b275"
    "09832c1a1b6e5aa0523bd6b329e32f84"
    "53d100ed20fcb15b6acbbe394a4c58cf"
    "d0efaafb434d338545f9027f503c9fa8"
    "51a3408f929d38f5bcb6da2110fff3d2"
    "cd0c13ec5f974417c4a77e3d645d1973"
    "60814fdc222a908846eeb814de5e0bdb"
    "e0323a0a4906245cc2d3ac629195e479"
    "e7c8376d8dd54ea96c56f4ea657aae08"
    "ba78252e1ca6b4c6e8dd741f4bbd8b8a"
    "703eb5664803f60e613557b986c11d9e"
    "e1f8981169d98e949b1e87e9ce5528df"
    "8ca1890dbfe6426841992d0fb054bb16"
)


def _invert(table: bytes) -> bytes:
    inverse = bytearray(256)
    for index, value in enumerate(table):
        inverse[value] = index
    return bytes(inverse)


INV_SBOX = _invert(SBOX)

RCON = (0x01, 0x02, 0x04, 0x08, 0x10, 0x20, 0x40, 0x80, 0x1B, 0x36)


def gf_mul(a: int, b: int) -> int:
    """Multiply two bytes in GF(2^8) modulo x^8 + x^4 + x^3 + x + 1."""
    if not (0 <= a < 256 and 0 <= b < 256):
        raise ValueError("gf_mul operands must be bytes (0..255)")
    result = 0
    while b:
        if b & 1:
            result ^= a
        a <<= 1
        if a & 0x100:
            a ^= 0x11B
        b >>= 1
    return result


_MUL = {factor: bytes(gf_mul(x, factor) for x in range(256)) for factor in (2, 3, 9, 11, 13, 14)}


@dataclass(frozen=True)
class State:
    """A 4x4 byte matrix stored column by column."""

    data: bytes = bytes(BLOCK_SIZE)

    def __post_init__(self) -> None:
        data = bytes(self.data)
        if len(data) != BLOCK_SIZE:
            raise ValueError(f"a state holds {BLOCK_SIZE} bytes, got {len(data)}")
        object.__setattr__(self, "data", data)

    @classmethod
    def from_bytes(cls, data: Iterable[int]) -> State:
        """Build a state from a 16-byte block in column order."""
        return cls(bytes(data))

    @classmethod
    def zero(cls) -> State:
        """The all-zero state."""
        return cls()

    def to_bytes(self) -> bytes:
        """The 16-byte block in column order."""
        return self.data

    def __getitem__(self, position: tuple[int, int]) -> int:
        row, col = position
        if not (0 <= row < 4 and 0 <= col < 4):
            raise IndexError("state position out of range")
        return self.data[4 * col + row]

    @property
    def rows(self) -> tuple[tuple[int, ...], ...]:
        """The matrix as a tuple of four rows."""
        return tuple(tuple(self.data[4 * col + row] for col in range(4)) for row in range(4))

    def _xor_cell(self, row: int, col: int, value: int) -> State:
        data = bytearray(self.data)
        data[4 * col + row] ^= value
        return State(bytes(data))


StateLike = Union[State, bytes, bytearray, Sequence[int]]


def _as_state(value: StateLike) -> State:
    return value if isinstance(value, State) else State.from_bytes(value)


def add_round_key(state: State, key: State) -> State:
    """XOR the state with a round key."""
    return State(bytes(a ^ b for a, b in zip(state.data, key.data)))


def sub_bytes(state: State) -> State:
    """Apply the S-box to every byte."""
    return State(state.data.translate(SBOX))


def inv_sub_bytes(state: State) -> State:
    """Apply the inverse S-box to every byte."""
    return State(state.data.translate(INV_SBOX))


def shift_rows(state: State) -> State:
    """Rotate row ``r`` left by ``r`` positions."""
    data = state.data
    return State(bytes(data[4 * ((col + row) % 4) + row] for col in range(4) for row in range(4)))


def inv_shift_rows(state: State) -> State:
    """Rotate row ``r`` right by ``r`` positions."""
    data = state.data
    return State(bytes(data[4 * ((col - row) % 4) + row] for col in range(4) for row in range(4)))


def _mix(state: State, matrix: tuple[tuple[int, ...], ...]) -> State:
    data = state.data
    out = bytearray()
    for col in range(4):
        column = data[4 * col : 4 * col + 4]
        for coefficients in matrix:
            value = 0
            for factor, byte in zip(coefficients, column):
                value ^= byte if factor == 1 else _MUL[factor][byte]
            out.append(value)
    return State(bytes(out))


_MIX = ((2, 3, 1, 1), (1, 2, 3, 1), (1, 1, 2, 3), (3, 1, 1, 2))
_INV_MIX = ((14, 11, 13, 9), (9, 14, 11, 13), (13, 9, 14, 11), (11, 13, 9, 14))


def mix_columns(state: State) -> State:
    """Multiply every column by the MixColumns matrix."""
    return _mix(state, _MIX)


def inv_mix_columns(state: State) -> State:
    """Multiply every column by the inverse MixColumns matrix."""
    return _mix(state, _INV_MIX)


def _next_round_key(previous: State, rcon: int) -> State:
    x = [SBOX[previous[(row + 1) % 4, 3]] for row in range(4)]
    x[0] ^= rcon
    out = bytearray(BLOCK_SIZE)
    for row in range(4):
        out[row] = previous[row, 0] ^ x[row]
    for col in range(1, 4):
        for row in range(4):
            out[4 * col + row] = previous[row, col] ^ out[4 * (col - 1) + row]
    return State(bytes(out))


def _previous_round_key(following: State, rcon: int) -> State:
    out = bytearray(BLOCK_SIZE)
    for col in range(1, 4):
        for row in range(4):
            out[4 * col + row] = following[row, col] ^ following[row, col - 1]
    x = [SBOX[out[4 * 3 + (row + 1) % 4]] for row in range(4)]
    x[0] ^= rcon
    for row in range(4):
        out[row] = x[row] ^ following[row, 0]
    return State(bytes(out))


def _check_byte(value: int, name: str) -> int:
    if not 0 <= value < 256:
        raise ValueError(f"{name} must be a byte (0..255), got {value}")
    return value


@dataclass
class KeySchedule:
    """The eleven round keys of AES-128."""

    round_keys: list[State] = field(default_factory=lambda: [State() for _ in range(ROUNDS + 1)])

    def __post_init__(self) -> None:
        self.round_keys = [_as_state(key) for key in self.round_keys]
        if len(self.round_keys) != ROUNDS + 1:
            raise ValueError(f"a key schedule holds {ROUNDS + 1} round keys")

    @classmethod
    def from_cipher_key(cls, key: StateLike) -> KeySchedule:
        """Expand a 16-byte cipher key forward into all round keys."""
        keys = [_as_state(key)]
        for rcon in RCON:
            keys.append(_next_round_key(keys[-1], rcon))
        return cls(keys)

    @classmethod
    def from_last_round_key(cls, key: StateLike) -> KeySchedule:
        """Rebuild every round key backward from the round-10 key."""
        keys = [_as_state(key)]
        for rcon in reversed(RCON):
            keys.append(_previous_round_key(keys[-1], rcon))
        return cls(list(reversed(keys)))

    @classmethod
    def from_round8(cls, round8: StateLike) -> KeySchedule:
        """Rebuild every round key from the round-8 key."""
        schedule = cls()
        schedule.round_keys[8] = _as_state(round8)
        schedule.recompute_from_round8()
        return schedule

    def copy(self) -> KeySchedule:
        """An independent copy of the schedule."""
        return KeySchedule(list(self.round_keys))

    def apply_delta_i(self, i: int) -> None:
        """XOR ``i`` into cells (0, 2) and (0, 3) of the round-8 key."""
        _check_byte(i, "delta i")
        self.round_keys[8] = self.round_keys[8]._xor_cell(0, 2, i)._xor_cell(0, 3, i)

    def apply_delta_j(self, j: int) -> None:
        """XOR ``j`` into cells (1, 0) and (1, 2) of the round-8 key."""
        _check_byte(j, "delta j")
        self.round_keys[8] = self.round_keys[8]._xor_cell(1, 0, j)._xor_cell(1, 2, j)

    def recompute_last_rounds(self) -> None:
        """Derive the round-9 and round-10 keys from the round-8 key."""
        for index in (9, 10):
            self.round_keys[index] = _next_round_key(self.round_keys[index - 1], RCON[index - 1])

    def recompute_from_round8(self) -> None:
        """Derive every other round key from the round-8 key."""
        self.recompute_last_rounds()
        for index in range(7, -1, -1):
            self.round_keys[index] = _previous_round_key(self.round_keys[index + 1], RCON[index])


def encrypt(schedule: KeySchedule, plaintext: StateLike) -> tuple[State, ...]:
    """Encrypt one block and return the full 22-state trace."""
    keys = schedule.round_keys
    state = _as_state(plaintext)
    trace = [state]
    state = add_round_key(state, keys[0])
    trace.append(state)
    for round_index in range(1, ROUNDS):
        state = mix_columns(shift_rows(sub_bytes(state)))
        trace.append(state)
        state = add_round_key(state, keys[round_index])
        trace.append(state)
    state = shift_rows(sub_bytes(state))
    trace.append(state)
    trace.append(add_round_key(state, keys[ROUNDS]))
    return tuple(trace)


def decrypt(schedule: KeySchedule, ciphertext: StateLike) -> tuple[State, ...]:
    """Decrypt one block and return the 22-state trace, indexed as for encryption."""
    keys = schedule.round_keys
    trace: list[State] = [State()] * TRACE_LENGTH
    state = _as_state(ciphertext)
    trace[21] = state
    state = add_round_key(state, keys[ROUNDS])
    trace[20] = state
    state = inv_sub_bytes(inv_shift_rows(state))
    trace[19] = state
    position = 18
    for round_index in range(ROUNDS - 1, 0, -1):
        state = add_round_key(state, keys[round_index])
        trace[position] = state
        state = inv_sub_bytes(inv_shift_rows(inv_mix_columns(state)))
        trace[position - 1] = state
        position -= 2
    trace[0] = add_round_key(state, keys[0])
    return tuple(trace)


def encrypt_last_rounds(
    schedule: KeySchedule, state: StateLike, base: Sequence[State] | None = None
) -> tuple[State, ...]:
    """Run rounds 8 to 10 from the state reached after round 7.

    States 16 to 21 of the returned trace are computed; states 0 to 15 are
    taken from ``base``. Without a base they are zero, except state 15, which
    is the starting state.
    """
    start = _as_state(state)
    if base is None:
        trace = [State()] * TRACE_LENGTH
        trace[15] = start
    else:
        trace = list(base)
        if len(trace) != TRACE_LENGTH:
            raise ValueError(f"a trace holds {TRACE_LENGTH} states, got {len(trace)}")
    keys = schedule.round_keys
    current = start
    position = 16
    for round_index in (8, 9):
        current = mix_columns(shift_rows(sub_bytes(current)))
        trace[position] = current
        current = add_round_key(current, keys[round_index])
        trace[position + 1] = current
        position += 2
    current = shift_rows(sub_bytes(current))
    trace[20] = current
    trace[21] = add_round_key(current, keys[ROUNDS])
    return tuple(trace)


def encrypt_first_rounds(schedule: KeySchedule, plaintext: StateLike) -> tuple[State, ...]:
    """Run the whitening and rounds 1 to 7; return trace states 0 to 15."""
    keys = schedule.round_keys
    state = _as_state(plaintext)
    trace = [state]
    state = add_round_key(state, keys[0])
    trace.append(state)
    for round_index in range(1, 8):
        state = mix_columns(shift_rows(sub_bytes(state)))
        trace.append(state)
        state = add_round_key(state, keys[round_index])
        trace.append(state)
    return tuple(trace)