"""Check that a row of the biclique is consistent with the last AES rounds."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable, Sequence

from cipherlab.aes import StateLike, encrypt_last_rounds
from cipherlab.biclique import DIMENSION, build_biclique

DEFAULT_ROW = 56


def verify_biclique_row(initial_key: StateLike, row: int) -> list[bool]:
    """For each cell of ``row``, whether its key maps its state to its ciphertext."""
    if not 0 <= row < DIMENSION:
        raise ValueError(f"row must lie in 0..{DIMENSION - 1}, got {row}")
    cells = build_biclique(initial_key)[row]
    return [
        encrypt_last_rounds(cell.keys, cell.sub_state)[21] == cell.ciphertext for cell in cells
    ]


def format_verification(results: Iterable[bool]) -> str:
    """One ``Verif`` line per cell, reading ``good`` or ``bad``."""
    return "".join(
        f"Verif : {index}\t state : {'good' if ok else 'bad'}\n"
        for index, ok in enumerate(results)
    )


def _parse_key(text: str) -> bytes:
    try:
        key = bytes.fromhex(text)
    except ValueError as error:
        raise argparse.ArgumentTypeError(f"invalid hex key: {text}") from error
    if len(key) != 16:
        raise argparse.ArgumentTypeError("the key must be 16 bytes")
    return key


def main(argv: Sequence[str] | None = None) -> int:
    """Build the biclique and print whether each cell of one row checks out."""
    parser = argparse.ArgumentParser(
        prog="biclique-verify", description="Verify one row of the AES-128 biclique."
    )
    parser.add_argument(
        "--key", type=_parse_key, default=bytes(16), help="round-8 key as 32 hex digits"
    )
    parser.add_argument("--row", type=int, default=DEFAULT_ROW, help="row to check (0 to 255)")
    args = parser.parse_args(list(sys.argv[1:] if argv is None else argv))
    if not 0 <= args.row < DIMENSION:
        parser.error(f"--row must lie in 0..{DIMENSION - 1}")
    print(format_verification(verify_biclique_row(args.key, args.row)), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())