from __future__ import annotations

import pytest

from csvchunker.domain.context import RowContext
from csvchunker.domain.transform.transformers import (
    add_chunk_row_no_transformer,
    add_constant_column_transformer,
    add_row_no_transformer,
    chain_transformers,
    no_op_transformer,
    replace_values_transformer,
)

HEADER_CTX = RowContext.for_header(chunk_no=1, chunk_size=100)


def _ctx(row_no: int, chunk_size: int = 100) -> RowContext:
    return RowContext(chunk_no=1, row_no=row_no, chunk_size=chunk_size)


def test_no_op_returns_row_unchanged():
    assert no_op_transformer()(_ctx(1), ["a", "b"]) == ["a", "b"]


def test_add_row_no_on_data_and_header():
    transformer = add_row_no_transformer("test column")

    assert transformer(_ctx(1), ["a", "b"]) == ["1", "a", "b"]
    assert transformer(HEADER_CTX, ["a", "b"]) == ["test column", "a", "b"]


def test_add_row_no_at_custom_index():
    transformer = add_row_no_transformer("no", column_index=2)

    assert transformer(_ctx(7), ["a", "b", "c"]) == ["a", "b", "7", "c"]
    assert transformer(_ctx(7), ["a"]) == ["a", "7"]


@pytest.mark.parametrize(
    "row_no,chunk_size,expected",
    [
        (1, 100, "1"),
        (100, 100, "100"),
        (202, 100, "2"),
        (3, 1, "1"),
    ],
)
def test_add_chunk_row_no(row_no, chunk_size, expected):
    transformer = add_chunk_row_no_transformer("test column")

    assert transformer(_ctx(row_no, chunk_size), ["b", "c"]) == [expected, "b", "c"]


def test_add_chunk_row_no_header():
    transformer = add_chunk_row_no_transformer("test column")

    assert transformer(HEADER_CTX, ["b", "c"]) == ["test column", "b", "c"]


def test_replace_values():
    transformer = replace_values_transformer({"a": "A", "": "NULL"})

    assert transformer(_ctx(1), ["a", "b", ""]) == ["A", "b", "NULL"]


def test_replace_values_skips_header():
    transformer = replace_values_transformer({"a": "A"})

    assert transformer(HEADER_CTX, ["a", "b"]) == ["a", "b"]


def test_replace_values_does_not_mutate_input():
    row = ["a", "b"]
    replace_values_transformer({"a": "A"})(_ctx(1), row)

    assert row == ["a", "b"]


def test_add_constant_column():
    transformer = add_constant_column_transformer("source", "crm", 1)

    assert transformer(_ctx(5), ["a", "b"]) == ["a", "crm", "b"]
    assert transformer(HEADER_CTX, ["x", "y"]) == ["x", "source", "y"]


def test_chain_applies_in_order():
    transformer = chain_transformers(
        add_row_no_transformer("S.no"),
        replace_values_transformer({"1": "one"}),
    )

    # номер строки вставлен первым, затем заменён
    assert transformer(_ctx(1), ["a", "1"]) == ["one", "a", "one"]
    assert transformer(HEADER_CTX, ["a"]) == ["S.no", "a"]


def test_chain_equals_nested_calls():
    a = add_constant_column_transformer("A", "a", 0)
    b = add_row_no_transformer("B")
    ctx = _ctx(3)

    assert chain_transformers(a, b)(ctx, ["x"]) == b(ctx, a(ctx, ["x"]))
    assert chain_transformers(chain_transformers(a, b), a)(ctx, ["x"]) == chain_transformers(
        a, chain_transformers(b, a)
    )(ctx, ["x"])


def test_empty_chain_is_identity():
    assert chain_transformers()(_ctx(1), ["a"]) == ["a"]


def test_header_context_uses_sentinel_row_no():
    assert HEADER_CTX.row_no == -1
    assert HEADER_CTX.is_header
