from __future__ import annotations

from typing import Callable

from csvchunker.domain.context import RowContext
from csvchunker.domain.ports import LogSink, RowTransformer

TransformerWrapper = Callable[[RowTransformer], RowTransformer]


def panic_safe(transformer: RowTransformer, log: LogSink) -> RowTransformer:
    """
    Назначение:
        Изолирует сбои трансформера: исключение логируется, строка
        проходит дальше без изменений. Пайплайн не прерывается.

    Инварианты/гарантии:
        - Перехватываются только исключения самого трансформера.
        - Трансформер получает копию строки, поэтому частичная мутация
          не попадает в результат.
    """

    def transform(ctx: RowContext, row: list[str]) -> list[str]:
        try:
            return transformer(ctx, list(row))
        except Exception as exc:
            log(
                "csvchunker: recovered from error in transformer (chunk=%d row=%d): %r",
                ctx.chunk_no,
                ctx.row_no,
                exc,
            )
            return row

    return transform


def debug_wrapper(transformer: RowTransformer, log: LogSink) -> RowTransformer:
    """
    Назначение:
        Логирует строку до и после трансформации.
    """

    def transform(ctx: RowContext, row: list[str]) -> list[str]:
        log("csvchunker: before transformation : %s", row)
        transformed = transformer(ctx, row)
        log("csvchunker: after transformation : %s", transformed)
        return transformed

    return transform
