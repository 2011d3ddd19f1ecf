import pytest

from cipherlab.aes import (
    INV_SBOX,
    SBOX,
    KeySchedule,
    State,
    add_round_key,
    decrypt,
    encrypt,
    encrypt_first_rounds,
    encrypt_last_rounds,
    gf_mul,
    inv_mix_columns,
    inv_shift_rows,
    inv_sub_bytes,
    mix_columns,
    shift_rows,
    sub_bytes,
)

FIPS_KEY = bytes(range(16))
FIPS_PLAINTEXT = bytes.fromhex("00112233445566778899aabbccddeeff")
SAMPLE = bytes((7 * i + 3) % 256 for i in range(16))


def test_fips_vector_encrypts():
    schedule = KeySchedule.from_cipher_key(FIPS_KEY)
    trace = encrypt(schedule, FIPS_PLAINTEXT)
    assert len(trace) == 22
    assert trace[0].to_bytes() == FIPS_PLAINTEXT
    assert trace[21].to_bytes() == bytes.fromhex("69c4e0d86a7b0430d8cdb78070b4c55a")


def test_fips_key_expansion_last_round():
    schedule = KeySchedule.from_cipher_key(bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c"))
    assert schedule.round_keys[10].to_bytes() == bytes.fromhex("d014f9a8c9ee2589e13f0cc8b6630ca6")


def test_gf_mul_worked_example():
    assert gf_mul(0x57, 0x83) == 0xC1


def test_gf_mul_identity_and_commutative():
    for x in (0, 1, 0x57, 0x80, 0xFF):
        assert gf_mul(x, 1) == x
        assert gf_mul(x, 0x13) == gf_mul(0x13, x)


def test_gf_mul_rejects_out_of_range():
    with pytest.raises(ValueError):
        gf_mul(256, 2)


def test_sbox_values_from_table():
    substituted = sub_bytes(State.zero())
    assert substituted.to_bytes() == bytes([0x63] * 16)
    assert inv_sub_bytes(substituted) == State.zero()
    state = State.from_bytes(SAMPLE)
    assert sub_bytes(state).to_bytes() == bytes(SBOX[b] for b in SAMPLE)
    assert inv_sub_bytes(state).to_bytes() == bytes(INV_SBOX[b] for b in SAMPLE)


def test_state_layout_is_column_major():
    state = State.from_bytes(range(16))
    assert state[1, 0] == 1
    assert state[0, 1] == 4
    assert state.rows[0] == (0, 4, 8, 12)
    assert state.to_bytes() == bytes(range(16))


def test_state_zero_and_errors():
    assert State.zero().to_bytes() == bytes(16)
    with pytest.raises(ValueError):
        State.from_bytes(b"\x00" * 15)
    with pytest.raises(IndexError):
        State.zero()[4, 0]


def test_add_round_key_is_involution():
    state = State.from_bytes(SAMPLE)
    key = State.from_bytes(FIPS_KEY)
    assert add_round_key(add_round_key(state, key), key) == state
    assert add_round_key(state, State.zero()) == state


def test_layer_inverses():
    state = State.from_bytes(SAMPLE)
    assert inv_sub_bytes(sub_bytes(state)) == state
    assert inv_shift_rows(shift_rows(state)) == state
    assert inv_mix_columns(mix_columns(state)) == state


def test_shift_rows_keeps_first_row_and_rotates_second():
    state = State.from_bytes(range(16))
    shifted = shift_rows(state)
    assert shifted.rows[0] == state.rows[0]
    assert shifted.rows[1] == state.rows[1][1:] + state.rows[1][:1]


def test_decrypt_inverts_encrypt_with_matching_trace():
    schedule = KeySchedule.from_cipher_key(SAMPLE)
    forward = encrypt(schedule, FIPS_PLAINTEXT)
    backward = decrypt(schedule, forward[21])
    assert backward[0].to_bytes() == FIPS_PLAINTEXT
    assert backward == forward


def test_from_last_round_key_inverts_expansion():
    schedule = KeySchedule.from_cipher_key(SAMPLE)
    rebuilt = KeySchedule.from_last_round_key(schedule.round_keys[10])
    assert rebuilt.round_keys == schedule.round_keys


def test_from_round8_rebuilds_schedule():
    schedule = KeySchedule.from_cipher_key(SAMPLE)
    rebuilt = KeySchedule.from_round8(schedule.round_keys[8])
    assert rebuilt.round_keys == schedule.round_keys


def test_recompute_from_round8_in_place():
    schedule = KeySchedule.from_cipher_key(FIPS_KEY)
    partial = KeySchedule()
    partial.round_keys[8] = schedule.round_keys[8]
    partial.recompute_from_round8()
    assert partial.round_keys[0].to_bytes() == FIPS_KEY


def test_recompute_last_rounds_only_touches_last_two():
    schedule = KeySchedule.from_cipher_key(SAMPLE)
    partial = KeySchedule()
    partial.round_keys[8] = schedule.round_keys[8]
    partial.recompute_last_rounds()
    assert partial.round_keys[9:] == schedule.round_keys[9:]
    assert partial.round_keys[7] == State.zero()


def test_delta_i_and_j_touch_expected_cells():
    schedule = KeySchedule()
    schedule.apply_delta_i(0xAB)
    schedule.apply_delta_j(0x0F)
    key = schedule.round_keys[8]
    assert key[0, 2] == 0xAB and key[0, 3] == 0xAB
    assert key[1, 0] == 0x0F and key[1, 2] == 0x0F
    assert sum(1 for b in key.to_bytes() if b) == 4


def test_delta_is_involution():
    schedule = KeySchedule.from_cipher_key(SAMPLE)
    original = schedule.round_keys[8]
    schedule.apply_delta_i(0x5C)
    schedule.apply_delta_i(0x5C)
    schedule.apply_delta_j(0x31)
    schedule.apply_delta_j(0x31)
    assert schedule.round_keys[8] == original


def test_delta_rejects_non_byte():
    with pytest.raises(ValueError):
        KeySchedule().apply_delta_i(256)
    with pytest.raises(ValueError):
        KeySchedule().apply_delta_j(-1)


def test_copy_is_independent():
    schedule = KeySchedule.from_cipher_key(SAMPLE)
    clone = schedule.copy()
    clone.apply_delta_i(1)
    assert clone.round_keys[8] != schedule.round_keys[8]
    assert clone.round_keys[:8] == schedule.round_keys[:8]


def test_schedule_length_checked():
    with pytest.raises(ValueError):
        KeySchedule([State()] * 10)


def test_encrypt_last_rounds_matches_full_encryption():
    schedule = KeySchedule.from_cipher_key(SAMPLE)
    full = encrypt(schedule, FIPS_PLAINTEXT)
    tail = encrypt_last_rounds(schedule, full[15].to_bytes(), full)
    assert tail == full


def test_encrypt_last_rounds_without_base():
    schedule = KeySchedule.from_cipher_key(SAMPLE)
    full = encrypt(schedule, FIPS_PLAINTEXT)
    tail = encrypt_last_rounds(schedule, full[15])
    assert tail[15] == full[15]
    assert tail[16:] == full[16:]
    assert tail[0] == State.zero()


def test_encrypt_last_rounds_rejects_short_base():
    with pytest.raises(ValueError):
        encrypt_last_rounds(KeySchedule(), bytes(16), [State()] * 5)


def test_encrypt_first_rounds_matches_full_encryption():
    schedule = KeySchedule.from_cipher_key(FIPS_KEY)
    head = encrypt_first_rounds(schedule, FIPS_PLAINTEXT)
    full = encrypt(schedule, FIPS_PLAINTEXT)
    assert len(head) == 16
    assert head == full[:16]


def test_encrypt_and_decrypt_reject_wrong_block_size():
    with pytest.raises(ValueError):
        encrypt(KeySchedule(), b"short")
    with pytest.raises(ValueError):
        decrypt(KeySchedule(), b"short")