import pytest

from cipherlab.sbox import (
    S_BOX_SIZE,
    differential_table,
    format_table,
    linear_table,
    parity_dot,
    write_table,
)


def test_differential_zero_difference():
    table = differential_table()
    assert table[0][0] == S_BOX_SIZE
    assert all(value == 0 for value in table[0][1:])


def test_differential_rows_sum_to_size_and_are_even():
    for row in differential_table():
        assert sum(row) == S_BOX_SIZE
        assert all(value % 2 == 0 for value in row)


def test_differential_nonzero_input_never_gives_zero_output():
    table = differential_table()
    assert all(table[a][0] == 0 for a in range(1, S_BOX_SIZE))


def test_linear_trivial_approximation():
    table = linear_table()
    assert table[0][0] == S_BOX_SIZE
    assert all(value == 0 for value in table[0][1:])


def test_linear_rows_follow_parseval():
    for row in linear_table():
        assert sum(row) == S_BOX_SIZE


def test_linear_table_shape():
    table = linear_table()
    assert len(table) == S_BOX_SIZE
    assert all(len(row) == S_BOX_SIZE for row in table)


def test_parity_dot_properties():
    for a in range(16):
        assert parity_dot(a, 0) == 0
        for b in range(16):
            assert parity_dot(a, b) == parity_dot(b, a)
    assert parity_dot(0b0111, 0b0111) == 1


def test_parity_dot_ignores_high_bits():
    assert parity_dot(0x10, 0x10) == 0


def test_format_table():
    assert format_table([[0, 2], [4, 0]]) == "[.] [2] \n[4] [.] \n"


def test_write_table_round_trip(tmp_path):
    table = differential_table()
    path = tmp_path / "differential.txt"
    write_table(table, path)
    text = path.read_text()
    assert text == format_table(table)
    assert len(text.splitlines()) == S_BOX_SIZE


@pytest.mark.parametrize("table_fn", [differential_table, linear_table])
def test_format_has_one_cell_per_entry(table_fn):
    lines = format_table(table_fn()).splitlines()
    assert all(line.count("[") == S_BOX_SIZE for line in lines)