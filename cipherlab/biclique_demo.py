"""Interactive demonstrations of the biclique attack on AES-128."""

from __future__ import annotations

import argparse
import subprocess
import sys
import time
from collections.abc import Sequence

from cipherlab.aes import (
    KeySchedule,
    State,
    StateLike,
    decrypt,
    encrypt,
    encrypt_last_rounds,
)
from cipherlab.biclique import biclique_attack

DEMO_KEY = bytes([0x1F, 0x00, 0x00, 0x10]) + bytes(12)
DEMO_DELTA = 0xF
SEARCH_SPACE = 1 << 24


def make_secret_key(first: int, second: int, third: int) -> KeySchedule:
    """A key whose round-8 key is set by three bytes, each taken modulo 256.

    ``first`` goes to cell (0, 0), ``second`` to cells (0, 2) and (0, 3),
    ``third`` to cells (1, 0) and (1, 2); every other cell is zero.
    """
    round8 = bytearray(16)
    round8[0] = first % 256
    round8[4 * 3] = second % 256
    round8[4 * 2] = second % 256
    round8[1] = third % 256
    round8[4 * 2 + 1] = third % 256
    return KeySchedule.from_round8(State(bytes(round8)))


def brute_force(ciphertext: StateLike, plaintext: StateLike) -> KeySchedule | None:
    """Search the 2^24 keys of :func:`make_secret_key` for one that maps
    ``plaintext`` to ``ciphertext``."""
    target = ciphertext if isinstance(ciphertext, State) else State.from_bytes(ciphertext)
    for first in range(256):
        for second in range(256):
            for third in range(256):
                candidate = make_secret_key(first, second, third)
                if encrypt(candidate, plaintext)[21] == target:
                    return candidate
    return None


def difference_traces(
    cipher_key: StateLike, delta_i: int, delta_j: int
) -> tuple[tuple[State, ...], tuple[State, ...], tuple[State, ...]]:
    """Three traces showing how the key differences spread over the last rounds.

    The first decrypts the all-zero ciphertext under the cipher key; the
    second re-encrypts its round-8 input under the key shifted by
    ``delta_i``; the third decrypts the zero ciphertext under the key
    shifted by ``delta_j``.
    """
    key0 = KeySchedule.from_cipher_key(cipher_key)
    key1 = key0.copy()
    key2 = key0.copy()
    key1.apply_delta_i(delta_i)
    key1.recompute_last_rounds()
    key2.apply_delta_j(delta_j)
    key2.recompute_last_rounds()

    zero = State.zero()
    trace0 = decrypt(key0, zero)
    trace1 = encrypt_last_rounds(key1, trace0[15], base=trace0)
    trace2 = decrypt(key2, zero)
    return trace0, trace1, trace2


def format_difference_traces(traces: Sequence[Sequence[State]]) -> str:
    """Show states 15 to 21 of each trace side by side in hex."""
    parts: list[str] = []
    for index in range(15, 22):
        parts.append(f"#{index}\n")
        for row in range(4):
            groups = ("".join(f"[{trace[index][row, col]:02x}]" for col in range(4)) for trace in traces)
            parts.append("\t".join(groups) + "\n")
        parts.append("\n")
    parts.append("\n")
    return "".join(parts)


def _format_state(state: State) -> str:
    return "".join("".join(f"[{value:x}]" for value in row) + "\n" for row in state.rows)


def format_round_key(schedule: KeySchedule, round_index: int) -> str:
    """One round key as four rows of bracketed hex values."""
    return _format_state(schedule.round_keys[round_index])


def _read_int(prompt: str) -> int:
    while True:
        text = input(prompt)
        try:
            return int(text.strip())
        except ValueError:
            continue


def _clear_screen() -> None:
    if sys.stdout.isatty():
        try:
            subprocess.run(["clear"], check=False)
        except OSError:
            pass


def _choose_demo() -> int:
    print("Vous pouvez choisir plusieurs demonstration :")
    print("\t1 - Observation des differences sur les 3 derniers tours")
    print("\t2 - Montrer une partie de la matrice de clefs")
    print(
        "\t3 - Montrer la différence entre une attaque biclique et le brute force "
        f"sur {SEARCH_SPACE} clef differente"
    )
    choice = _read_int("Demo : ")
    while not 1 <= choice <= 4:
        print("\nErreur lors de la selection de la demo, veuillez reessayer")
        choice = _read_int("Demo : ")
    return choice


def _demo_differences() -> None:
    print("key : " + DEMO_KEY.hex())
    print(f"\nVariation i : {DEMO_DELTA:x}\tj : {DEMO_DELTA:x}")
    traces = difference_traces(DEMO_KEY, DEMO_DELTA, DEMO_DELTA)
    print(format_difference_traces(traces), end="")


def _demo_attack(values: Sequence[int]) -> None:
    prompts = (
        "Premiere variable (modulo 256) : ",
        "\nDeuxieme variable (modulo 256) : ",
        "\nTroiseme variable (modulo 256) : ",
    )
    numbers = list(values[:3])
    for prompt in prompts[len(numbers):]:
        numbers.append(_read_int(prompt))
    secret = make_secret_key(*numbers)

    word = bytes(16)
    ciphertext = encrypt(secret, word)[21]

    print("\nCalcule de l'attaque biclique")
    start = time.process_time()
    result = biclique_attack(secret)
    attack = KeySchedule.from_round8(result if result is not None else State.zero())
    end_biclique = time.process_time()

    print("\nCalcule de l'attaque Brute Force")
    found = brute_force(ciphertext, word)
    end = time.process_time()

    biclique_time = end_biclique - start
    brute_time = end - end_biclique

    print("Clef secrete")
    print(format_round_key(secret, 8), end="")
    print(f"\nClef retrouve avec l'attaque en {biclique_time:.2f} s")
    print(format_round_key(attack, 8), end="")
    print(f"\nClef retrouve avec le brute force en {brute_time:.2f} s")
    brute_key = found.round_keys[8] if found is not None else State.zero()
    print(_format_state(brute_key), end="")
    reduction = (1 - biclique_time / brute_time) * 100 if brute_time else 0.0
    print(f"\n\nUne diminution de {reduction:.2f}%")


def main(argv: Sequence[str] | None = None) -> int:
    """Run one of the demonstrations, asking for what the arguments leave out."""
    parser = argparse.ArgumentParser(prog="biclique-demo", description=__doc__)
    parser.add_argument("demo", nargs="?", type=int, help="demonstration number (1 to 4)")
    parser.add_argument("values", nargs="*", type=int, help="key bytes for demonstration 3")
    args = parser.parse_args(list(sys.argv[1:] if argv is None else argv))
    if args.demo is not None and not 1 <= args.demo <= 4:
        parser.error("demo must be between 1 and 4")

    try:
        if args.demo is None:
            _clear_screen()
            choice = _choose_demo()
        else:
            choice = args.demo

        if choice == 3:
            _demo_attack(args.values)
        elif choice == 1:
            _demo_differences()
        else:
            print("2 - Montrer une partie de la matrice de clefs")
    except EOFError:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())