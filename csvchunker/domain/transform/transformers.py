from __future__ import annotations

from typing import Mapping

from csvchunker.domain.context import RowContext
from csvchunker.domain.ports import RowTransformer


def no_op_transformer() -> RowTransformer:
    """
    Назначение:
        Трансформер без изменений. Используется, когда нужно только разбиение.
    """

    def transform(ctx: RowContext, row: list[str]) -> list[str]:
        return row

    return transform


def add_row_no_transformer(column_name: str, column_index: int = 0) -> RowTransformer:
    """
    Назначение:
        Добавляет сквозной номер строки (по всем чанкам) в колонку column_index.
        Для номера внутри чанка см. add_chunk_row_no_transformer().

    Входные данные:
        column_name: str
            Имя колонки, подставляется в строку заголовка.
        column_index: int
            Позиция вставки (семантика list.insert).
    """

    def transform(ctx: RowContext, row: list[str]) -> list[str]:
        if ctx.is_header:
            return _insert_at(row, column_name, column_index)
        return _insert_at(row, str(ctx.row_no), column_index)

    return transform


def add_chunk_row_no_transformer(column_name: str, column_index: int = 0) -> RowTransformer:
    """
    Назначение:
        Добавляет номер строки внутри текущего чанка.

    Пример:
        row_no=202, chunk_size=100 -> "2"; row_no=100, chunk_size=100 -> "100".
    """

    def transform(ctx: RowContext, row: list[str]) -> list[str]:
        if ctx.is_header:
            return _insert_at(row, column_name, column_index)
        return _insert_at(row, str(ctx.chunk_row_no), column_index)

    return transform


def replace_values_transformer(replacements: Mapping[str, str]) -> RowTransformer:
    """
    Назначение:
        Заменяет значения полей по словарю replacements.
        Поля без совпадения остаются как есть, заголовок не изменяется.
    """
    lookup = dict(replacements)

    def transform(ctx: RowContext, row: list[str]) -> list[str]:
        if ctx.is_header:
            return row
        return [lookup.get(value, value) for value in row]

    return transform


def add_constant_column_transformer(column_name: str, value: str, column_index: int) -> RowTransformer:
    """
    Назначение:
        Добавляет колонку с постоянным значением value.
        В строку заголовка вставляется column_name.
    """

    def transform(ctx: RowContext, row: list[str]) -> list[str]:
        if ctx.is_header:
            return _insert_at(row, column_name, column_index)
        return _insert_at(row, value, column_index)

    return transform


def chain_transformers(*transformers: RowTransformer) -> RowTransformer:
    """
    Назначение:
        Последовательно применяет трансформеры к каждой строке.
        Все звенья получают один и тот же RowContext.

    Пример:
        chain_transformers(add_row_no_transformer("S.no"), replace_values_transformer(values))
        сначала добавит колонку "S.no", затем заменит значения.
    """
    chain = tuple(transformers)

    def transform(ctx: RowContext, row: list[str]) -> list[str]:
        for transformer in chain:
            row = transformer(ctx, row)
        return row

    return transform


def _insert_at(row: list[str], value: str, index: int) -> list[str]:
    result = list(row)
    result.insert(index, value)
    return result
