from __future__ import annotations

import csv
import io
from typing import Sequence, TextIO

DEFAULT_WRITE_BUFFER_SIZE = 10 * 1024 * 1024


class CsvChunkWriter:
    """
    Назначение/ответственность:
        Сериализует строки в CSV и пишет их в выходной поток чанка через
        буфер размером buffer_size символов.

    Взаимодействия:
        - write() копит строки в буфере и сбрасывает его в поток при переполнении.
        - flush() сбрасывает буфер и вызывает flush() потока.
        - close() закрывает поток (без flush, его вызывает пайплайн).
    """

    def __init__(self, stream: TextIO, buffer_size: int = DEFAULT_WRITE_BUFFER_SIZE) -> None:
        self.stream = stream
        self.buffer_size = buffer_size
        self._buffer = io.StringIO()
        self._writer = csv.writer(self._buffer, lineterminator="\n")

    def write(self, row: Sequence[str]) -> None:
        self._writer.writerow(row)
        if self._buffer.tell() >= self.buffer_size:
            self._drain()

    def flush(self) -> None:
        self._drain()
        self.stream.flush()

    def close(self) -> None:
        self.stream.close()

    def _drain(self) -> None:
        pending = self._buffer.getvalue()
        if pending:
            self.stream.write(pending)
        self._buffer.seek(0)
        self._buffer.truncate(0)
