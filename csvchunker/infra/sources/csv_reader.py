from __future__ import annotations

import csv
from typing import Iterator, TextIO

DEFAULT_INPUT_ENCODING = "utf-8-sig"


def _iter_csv_rows(stream: TextIO) -> Iterator[list[str]]:
    # длина строк не проверяется: строки с разным числом полей допустимы
    reader = csv.reader(stream, delimiter=",", skipinitialspace=True)
    for row in reader:
        if not row:
            continue
        yield row


class CsvRowSource:
    """
    Назначение/ответственность:
        CSV-источник строк из файла. Файл открывается при начале итерации
        и закрывается по её завершении.
    """

    def __init__(self, path: str, encoding: str = DEFAULT_INPUT_ENCODING) -> None:
        self.path = path
        self.encoding = encoding

    def __iter__(self) -> Iterator[list[str]]:
        with open(self.path, "r", encoding=self.encoding, newline="") as f:
            yield from _iter_csv_rows(f)


class CsvStreamRowSource:
    """
    Назначение/ответственность:
        CSV-источник строк из уже открытого текстового потока (например, io.StringIO).
        Поток не закрывается.
    """

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def __iter__(self) -> Iterator[list[str]]:
        return _iter_csv_rows(self.stream)
