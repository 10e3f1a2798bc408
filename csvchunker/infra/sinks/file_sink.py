from __future__ import annotations

import re
from typing import Callable, TextIO

from csvchunker.domain.ports import ChunkSinkFactory, ChunkWriter
from csvchunker.infra.sinks.csv_writer import DEFAULT_WRITE_BUFFER_SIZE, CsvChunkWriter

DEFAULT_OUTPUT_ENCODING = "utf-8"

StreamFactory = Callable[[int], TextIO]

# %-директива, не являющаяся экранированным "%%"
_DIRECTIVE_RE = re.compile(r"%(?!%)")


def has_chunk_placeholder(output_file_format: str) -> bool:
    """
    Назначение:
        Проверяет, что шаблон имени зависит от номера чанка.
        Без подстановки все чанки дописываются в один и тот же файл.
    """
    return chunk_file_name(output_file_format, 1) != chunk_file_name(output_file_format, 2)


def chunk_file_name(output_file_format: str, chunk_no: int) -> str:
    """
    Назначение:
        Формирует имя файла чанка: output_file_format % chunk_no.

    Поведение:
        - Ошибка форматирования не поднимается: подставляется номер чанка в
          директивы до ошибочной, имя обрезается перед ошибочной директивой.
        - Шаблон без директивы возвращается как есть для любого chunk_no.

    Пример:
        "out_%03d.csv", 7 -> "out_007.csv"
        "out_%z.csv", 7 -> "out_"
        "part_%d_%s.csv", 7 -> "part_7_"
    """
    try:
        return output_file_format % (chunk_no,)
    except (TypeError, ValueError):
        pass

    starts = [m.start() for m in _DIRECTIVE_RE.finditer(output_file_format.replace("%%", "\0\0"))]
    if not starts:
        return output_file_format.replace("%%", "%")
    if len(starts) > 1:
        # номер чанка уходит в первую директиву, ошибка на второй
        try:
            return output_file_format[: starts[1]] % (chunk_no,)
        except (TypeError, ValueError):
            pass
    return output_file_format[: starts[0]].replace("%%", "%")


def csv_chunk_sink_factory(
    stream_factory: StreamFactory,
    write_buffer_size: int = DEFAULT_WRITE_BUFFER_SIZE,
) -> ChunkSinkFactory:
    """
    Назначение:
        Оборачивает фабрику текстовых потоков в фабрику CSV-чанков.
    """

    def open_chunk(chunk_no: int) -> ChunkWriter:
        return CsvChunkWriter(stream_factory(chunk_no), write_buffer_size)

    return open_chunk


def file_stream_factory(output_file_format: str, encoding: str = DEFAULT_OUTPUT_ENCODING) -> StreamFactory:
    """
    Назначение:
        Открывает файл чанка по шаблону имени в режиме дозаписи (файл создаётся,
        если его нет).
    """

    def open_stream(chunk_no: int) -> TextIO:
        return open(chunk_file_name(output_file_format, chunk_no), "a", encoding=encoding, newline="")

    return open_stream


def single_stream_factory(stream: TextIO) -> StreamFactory:
    """
    Назначение:
        Все чанки пишутся в один переданный поток; close() потока не вызывается.
    """
    wrapped = NonClosingStream(stream)

    def open_stream(chunk_no: int) -> TextIO:
        return wrapped  # type: ignore[return-value]

    return open_stream


class NonClosingStream:
    """
    Назначение/ответственность:
        Обёртка потока, у которой close() ничего не делает.
        Поток остаётся во владении вызывающего кода.
    """

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def write(self, s: str) -> int:
        return self.stream.write(s)

    def flush(self) -> None:
        self.stream.flush()

    def close(self) -> None:
        return None
