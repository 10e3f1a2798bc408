from __future__ import annotations

from typing import Any, Iterator, Protocol, Sequence

from csvchunker.domain.context import RowContext


class RowSource(Protocol):
    """
    Назначение/ответственность:
        Источник строк CSV (упорядоченных последовательностей полей).
    """

    def __iter__(self) -> Iterator[Sequence[str]]:
        """
        Контракт:
            Штатное завершение итерации = конец данных.
            Любое исключение = ошибка источника, пайплайн прерывается.
        """
        ...


class ChunkWriter(Protocol):
    """
    Назначение/ответственность:
        Выходной чанк: принимает строки для буферизованной сериализации.
    """

    def write(self, row: Sequence[str]) -> None:
        ...

    def flush(self) -> None:
        ...

    def close(self) -> None:
        ...


class ChunkSinkFactory(Protocol):
    """
    Назначение/ответственность:
        Создаёт новый выходной чанк по его номеру (chunk_no > 0).
    """

    def __call__(self, chunk_no: int) -> ChunkWriter:
        ...


class RowTransformer(Protocol):
    """
    Назначение/ответственность:
        Чистая функция (context, row) -> row. Вызывается и для строки заголовка
        (context.is_header == True).
    """

    def __call__(self, ctx: RowContext, row: list[str]) -> list[str]:
        ...


class LogSink(Protocol):
    """
    Назначение/ответственность:
        Логирующий callback в стиле printf: log("%d rows", n).
    """

    def __call__(self, msg: str, *args: Any) -> None:
        ...


def noop_log(msg: str, *args: Any) -> None:
    """
    Назначение:
        Пустой лог-синк, отключает диагностику пайплайна.
    """
    return None
