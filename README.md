# cipherlab

A small laboratory for studying block-cipher cryptanalysis, written in
pure Python with no dependencies outside the standard library.

## Modules

- **`cipherlab.aes`**: AES-128 on single 16-byte blocks, recording every
  intermediate state. `encrypt` and `decrypt` return a 22-state trace
  (plaintext, state after the first AddRoundKey, then after each
  SubBytes/ShiftRows/MixColumns step and each AddRoundKey, up to the
  ciphertext). `State` is an immutable 4×4 byte matrix stored column by
  column (`State.from_bytes`, `State.zero`, `to_bytes`, `rows`).
  `KeySchedule` holds the eleven round keys and can be built with
  `from_cipher_key`, `from_last_round_key` or `from_round8`; its round-8
  key can be shifted with `apply_delta_i` / `apply_delta_j`, after which
  `recompute_last_rounds` or `recompute_from_round8` rederives the other
  round keys. `encrypt_first_rounds` (whitening and rounds 1 to 7) and
  `encrypt_last_rounds` (rounds 8 to 10) give the two halves of an
  encryption. The round steps (`sub_bytes`, `shift_rows`, `mix_columns`,
  `add_round_key` and their inverses) and `gf_mul` are exposed as well.
- **`cipherlab.biclique`**: `build_biclique` builds the 256 × 256 grid of
  `BicliqueCell` objects (ciphertext, state entering round 8, round-8 key)
  around a round-8 key. `biclique_attack` uses a `KeySchedule` as a
  decryption oracle and recovers its round-8 key when it lies in the
  searched family (cell (2, 0) and all cells outside (0, 0), (0, 2),
  (0, 3), (1, 0), (1, 2) zero, with (0, 2) = (0, 3) and (1, 0) = (1, 2));
  it returns `None` otherwise. `count_distinct_states` counts the distinct
  states at one position of a set of traces.
- **`cipherlab.biclique_demo`**: demonstrations of the attack.
  `make_secret_key` builds a key of the searched family from three bytes,
  `brute_force` searches the same 2^24 keys exhaustively,
  `difference_traces` and `format_difference_traces` show how the two key
  differences spread over the last rounds, and `format_round_key` prints
  one round key.
- **`cipherlab.sbox`**: the difference distribution table
  (`differential_table`) and scaled linear approximation table
  (`linear_table`) of the toy cipher's 4-bit S-box, with `parity_dot`,
  `format_table` and `write_table`.
- **`cipherlab.toycipher`**: a 16-bit, five-round substitution–permutation
  cipher on four nibbles (`encrypt`, `encrypt_rounds`, `round_keys`,
  `sub_nibbles`, `bit_permutation`, `key_permutation`, `split_nibbles`,
  `format_nibbles`), `good_pairs` for a given input and output difference,
  `hprd` to score the 16 guesses of one nibble of the last round key,
  `rank_scores`, `bits_identical`, and `statistics`, which runs the attack
  against many random keys and returns a `Statistics` summary with a
  printable `report()`.
- **`cipherlab.toycipher_cli`**: `run_experiment` returns an `Experiment`
  with the rank distribution of the true key nibble and the share of keys
  whose best guess matches it on at least 0 to 4 bits.
- **`cipherlab.verify`**: `verify_biclique_row` checks, for each cell of
  one biclique row, that its key maps its state to its ciphertext;
  `format_verification` prints the result.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Commands

```
cipherlab-biclique [DEMO] [VALUES ...]
```

Without arguments, clears the terminal and asks for a demonstration:

1. the differences over the last three AES rounds for the key
   `1f000000100000000000000000000000` with both differences equal to `f`;
2. prints only the demonstration's title;
3. asks for three numbers (taken modulo 256) that fix a secret key, runs
   the biclique attack and the brute-force search, and prints the secret
   round-8 key, the keys each method found, their processor times and the
   reduction in time.

The demonstration number, and for demonstration 3 the three numbers, may
be given on the command line instead.

```
cipherlab-toycipher [--q Q] [--coef C] [--keys N] [--seed S]
                    [--differential [PATH]] [--linear [PATH]] [--skip-experiment]
```

Runs the toy-cipher key-recovery experiment with `Q * C` random pairs
(default 128 × 1) against `N` random keys (default 1500) and prints the
report. `--differential` and `--linear` write the S-box tables to a file
(by default `differentialProbability.txt` and `linearProbability.txt`);
`--skip-experiment` writes only the tables.

```
cipherlab-verify [--key HEX] [--row ROW]
```

Builds the biclique around a round-8 key given as 32 hex digits (all zero
by default) and prints `good` or `bad` for every cell of one row (56 by
default).

## Library use

```python
from cipherlab.sbox import differential_table, format_table

print(format_table(differential_table()))
```

```python
from cipherlab.toycipher import encrypt, format_nibbles

print(format_nibbles(encrypt(0x1234, 0xBEEF)))
```

```python
from cipherlab.aes import KeySchedule, encrypt

schedule = KeySchedule.from_cipher_key(bytes(16))
trace = encrypt(schedule, bytes(16))
ciphertext = trace[21].to_bytes()
```

## What it does not do

- The AES functions work on single 16-byte blocks only: there are no
  block-cipher modes, no padding, and no command to encrypt or decrypt
  messages or files.
- Demonstration 2 of `cipherlab-biclique` shows no part of the key grid;
  it prints its title and stops.
- Everything runs in pure Python. Building a biclique and the attack go
  over 65 536 keys per biclique, and the brute-force search in
  demonstration 3 may try up to 2^24 keys, so these are slow: they are
  meant for study, not for speed.