"""Differential and linear profiles of the 4-bit S-box of the toy cipher."""

from __future__ import annotations

from collections.abc import Sequence
from os import PathLike
from pathlib import Path
from typing import Union

S_BOX_SIZE = 16
SUB_BYTES = (0x6, 0xB, 0x5, 0x4, 0x2, 0xE, 0x7, 0xA, 0x9, 0xD, 0xF, 0xC, 0x3, 0x1, 0x0, 0x8)

Table = tuple[tuple[int, ...], ...]


def differential_table() -> Table:
    """Count, for every input difference ``a`` and output difference ``b``,
    the inputs ``x`` with ``S[x] ^ S[x ^ a] == b``."""
    rows = []
    for a in range(S_BOX_SIZE):
        counts = [0] * S_BOX_SIZE
        for x in range(S_BOX_SIZE):
            counts[SUB_BYTES[x] ^ SUB_BYTES[x ^ a]] += 1
        rows.append(tuple(counts))
    return tuple(rows)


def parity_dot(a: int, b: int) -> int:
    """The dot product over GF(2) of the low four bits of ``a`` and ``b``."""
    return bin(a & b & 0xF).count("1") % 2


def linear_table() -> Table:
    """Squared correlations of every linear approximation, scaled by 16.

    Entry ``[a][b]`` is ``(2 * n - 16) ** 2 // 16``, where ``n`` counts the
    inputs ``x`` with ``a . x == b . S[x]``.
    """
    rows = []
    for a in range(S_BOX_SIZE):
        row = []
        for b in range(S_BOX_SIZE):
            matches = sum(
                1 for x in range(S_BOX_SIZE) if parity_dot(a, x) == parity_dot(SUB_BYTES[x], b)
            )
            bias = 2 * matches - S_BOX_SIZE
            row.append((bias * bias // S_BOX_SIZE) & 0xFF)
        rows.append(tuple(row))
    return tuple(rows)


def format_table(table: Sequence[Sequence[int]]) -> str:
    """Render a table with ``[value]`` cells and ``[.]`` for zeros, one row per line."""
    return "".join(
        "".join(f"[{value}] " if value else "[.] " for value in row) + "\n" for row in table
    )


def write_table(table: Sequence[Sequence[int]], path: Union[str, PathLike]) -> None:
    """Write :func:`format_table` of ``table`` to ``path``."""
    Path(path).write_text(format_table(table))