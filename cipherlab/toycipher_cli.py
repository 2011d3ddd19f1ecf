"""Command-line experiment measuring the differential attack on the toy cipher."""

from __future__ import annotations

import argparse
import random
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from cipherlab.sbox import differential_table, linear_table, write_table
from cipherlab.toycipher import SIZE_STATISTIC_TABLE, bits_identical, hprd, rank_scores

DEFAULT_Q = 1 << 7
DEFAULT_COEF = 1
DEFAULT_KEYS = 1500
DIFFERENTIAL_PATH = "differentialProbability.txt"
LINEAR_PATH = "linearProbability.txt"


@dataclass(frozen=True)
class Experiment:
    """Outcome of the attack over many random keys.

    ``rank_proportions[k]`` is the share of keys whose true nibble ranked in
    the ``k``-th quarter of the guesses.  ``bits_identified[k]`` is the share
    of keys whose best guess agreed with the true nibble on at least ``k``
    bits, for ``k`` from 0 to 4.
    """

    coef: int
    n_keys: int
    rank_proportions: tuple[float, ...]
    bits_identified: tuple[float, ...]

    def report(self) -> str:
        """A printable summary of the experiment."""
        lines = [f"Proportion : (C = {self.coef}, Number Keys = {self.n_keys})"]
        for quarter, share in enumerate(self.rank_proportions):
            upper = 100 - 25 * quarter
            lines.append(f"\t{upper} - {upper - 25}%    \t: {100 * share:.1f}%")
        lines.append("")
        for bits in range(4, -1, -1):
            lines.append(f"\t{bits} Bits identify\t: {100 * self.bits_identified[bits]:.1f}%")
        return "\n".join(lines) + "\n"


def run_experiment(
    q: int, coef: int, n_keys: int, rng: Optional[random.Random] = None
) -> Experiment:
    """Attack ``n_keys`` random keys with ``q * coef`` random pairs each."""
    if n_keys < 0:
        raise ValueError(f"the number of keys must not be negative, got {n_keys}")
    if q * coef < 0:
        raise ValueError("the number of pairs must not be negative")
    generator = rng if rng is not None else random.Random()
    ranks = [0.0] * 4
    bits = [0.0] * 5
    for _ in range(n_keys):
        key = generator.randrange(1 << SIZE_STATISTIC_TABLE)
        counts, good = hprd(q * coef, key, generator)
        ranked = rank_scores(counts)
        position = next(rank for rank, score in enumerate(ranked) if score.index == good)
        ranks[min(position // 4, 3)] += 1.0 / n_keys
        for level in range(bits_identical(ranked[0].index, good) + 1):
            bits[level] += 1.0 / n_keys
    return Experiment(coef, n_keys, tuple(ranks), tuple(bits))


def main(argv: Sequence[str] | None = None) -> int:
    """Run the key-ranking experiment and optionally write the S-box tables."""
    parser = argparse.ArgumentParser(
        prog="toycipher", description="Differential attack statistics on the toy cipher."
    )
    parser.add_argument("--q", type=int, default=DEFAULT_Q, help="base number of pairs")
    parser.add_argument("--coef", type=int, default=DEFAULT_COEF, help="multiplier of q")
    parser.add_argument("--keys", type=int, default=DEFAULT_KEYS, help="number of random keys")
    parser.add_argument("--seed", type=int, default=None, help="seed of the random generator")
    parser.add_argument(
        "--differential",
        nargs="?",
        const=DIFFERENTIAL_PATH,
        default=None,
        metavar="PATH",
        help="write the S-box differential table",
    )
    parser.add_argument(
        "--linear",
        nargs="?",
        const=LINEAR_PATH,
        default=None,
        metavar="PATH",
        help="write the S-box linear table",
    )
    parser.add_argument(
        "--skip-experiment", action="store_true", help="do not run the key-ranking experiment"
    )
    args = parser.parse_args(list(sys.argv[1:] if argv is None else argv))
    if args.keys < 0:
        parser.error("--keys must not be negative")
    if args.q * args.coef < 0:
        parser.error("the number of pairs must not be negative")

    if args.differential is not None:
        write_table(differential_table(), args.differential)
    if args.linear is not None:
        write_table(linear_table(), args.linear)

    if not args.skip_experiment:
        rng = random.Random(args.seed)
        experiment = run_experiment(args.q, args.coef, args.keys, rng)
        print(experiment.report(), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())