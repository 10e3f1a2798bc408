from __future__ import annotations

import io
import threading

import pytest

from csvchunker.infra.sources.csv_reader import CsvRowSource, CsvStreamRowSource
from csvchunker.infra.sources.prefetch import PrefetchingRowSource


def test_file_source_reads_rows(tmp_path):
    path = tmp_path / "in.csv"
    path.write_text("\ufeffid,name\n1, Ann\n\n2,\"Bob, Jr\"\n", encoding="utf-8")

    assert list(CsvRowSource(str(path))) == [["id", "name"], ["1", "Ann"], ["2", "Bob, Jr"]]


def test_stream_source_allows_varying_field_count():
    source = CsvStreamRowSource(io.StringIO("a,b,c\n1\n1,2,3,4\n"))

    assert list(source) == [["a", "b", "c"], ["1"], ["1", "2", "3", "4"]]


def test_missing_file_raises_on_iteration(tmp_path):
    source = CsvRowSource(str(tmp_path / "missing.csv"))

    with pytest.raises(FileNotFoundError):
        list(source)


def test_prefetch_preserves_order():
    rows = [[str(i)] for i in range(500)]

    assert list(PrefetchingRowSource(rows, max_queue_size=2)) == rows


def test_prefetch_forwards_source_error_after_preceding_rows():
    def source():
        yield ["1"]
        yield ["2"]
        raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

    received = []
    with pytest.raises(UnicodeDecodeError):
        for row in PrefetchingRowSource(source(), max_queue_size=1):
            received.append(row)

    assert received == [["1"], ["2"]]


class ReaderAborted(BaseException):
    pass


def test_prefetch_forwards_base_exception_from_source():
    def source():
        yield ["1"]
        raise ReaderAborted()

    received = []
    with pytest.raises(ReaderAborted):
        for row in PrefetchingRowSource(source(), max_queue_size=1):
            received.append(row)

    assert received == [["1"]]


def test_prefetch_stops_reader_when_consumer_stops():
    rows = PrefetchingRowSource([[str(i)] for i in range(1000)], max_queue_size=3)
    iterator = iter(rows)

    assert next(iterator) == ["0"]
    iterator.close()

    assert not any(t.name == "csvchunker-reader" and t.is_alive() for t in threading.enumerate())


def test_prefetch_rejects_non_positive_queue_size():
    with pytest.raises(ValueError):
        PrefetchingRowSource([], max_queue_size=0)
