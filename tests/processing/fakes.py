from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class RecordingWriter:
    chunk_no: int
    rows: list[list[str]] = field(default_factory=list)
    flushed: int = 0
    closed: bool = False
    fail_on_write: int | None = None

    def write(self, row):
        if self.closed:
            raise AssertionError(f"write to closed chunk {self.chunk_no}")
        if self.fail_on_write is not None and len(self.rows) + 1 >= self.fail_on_write:
            raise OSError("disk full")
        self.rows.append(list(row))

    def flush(self):
        self.flushed += 1

    def close(self):
        self.closed = True


class RecordingSink:
    """Фабрика чанков в памяти; проверяет, что открыт максимум один чанк."""

    def __init__(self, fail_on_chunk: int | None = None, fail_on_write: int | None = None) -> None:
        self.writers: list[RecordingWriter] = []
        self.fail_on_chunk = fail_on_chunk
        self.fail_on_write = fail_on_write

    def __call__(self, chunk_no: int) -> RecordingWriter:
        if self.fail_on_chunk == chunk_no:
            raise PermissionError(f"cannot create chunk {chunk_no}")
        for writer in self.writers:
            assert writer.closed, f"chunk {writer.chunk_no} still open when opening {chunk_no}"
        writer = RecordingWriter(chunk_no=chunk_no, fail_on_write=self.fail_on_write)
        self.writers.append(writer)
        return writer

    @property
    def chunks(self) -> list[list[list[str]]]:
        return [w.rows for w in self.writers]


def rows_of(text: str) -> list[list[str]]:
    return [line.split(",") for line in text.splitlines() if line]


VERY_SMALL_CSV = "a,b,c\nd,e,f\ng,h,i\nj,k,l\n"
