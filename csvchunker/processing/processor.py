from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Sequence

from csvchunker.domain.context import RowContext
from csvchunker.domain.exceptions import (
    ChunkSinkError,
    CsvChunkerError,
    ProcessorClosedError,
    RowSourceError,
    RowTransformError,
)
from csvchunker.domain.ports import ChunkSinkFactory, ChunkWriter, LogSink, RowSource, RowTransformer


class ProcessorState(str, Enum):
    AWAITING_CHUNK = "awaiting_chunk"
    AWAITING_HEADER = "awaiting_header"
    STREAMING = "streaming"
    CLOSED = "closed"


@dataclass
class ProcessResult:
    """
    Назначение:
        Итог обработки: сколько строк данных записано и как они распределены по чанкам.

    Поля:
        rows_total: int
            Число строк данных (без заголовков).
        chunk_rows: list[int]
            Число строк данных в каждом чанке, по порядку номеров.
        header_rows: int
            Сколько раз был записан заголовок.
    """

    rows_total: int = 0
    chunk_rows: list[int] = field(default_factory=list)
    header_rows: int = 0

    @property
    def chunks_written(self) -> int:
        return len(self.chunk_rows)


@dataclass
class _OpenChunk:
    chunk_no: int
    writer: ChunkWriter
    rows: int = 0


class ChunkProcessor:
    """
    Назначение/ответственность:
        Конечный автомат разбиения потока строк на чанки: решает, когда
        открыть новый чанк, когда (пере)записать заголовок и какой RowContext
        получает трансформер.

    Взаимодействия:
        - Читает строки из RowSource по одной.
        - Открывает чанки через ChunkSinkFactory строго по одному, по возрастанию номера.
        - Пишет результат RowTransformer в текущий ChunkWriter.

    Инварианты/гарантии:
        - Заголовок = первая строка источника, запоминается один раз.
        - Одновременно открыт не более одного чанка; перед открытием следующего
          предыдущий сбрасывается (flush) и закрывается.
        - Повторный вызов process() после завершения запрещён.

    Создаётся через csvchunker.processing.builder.new_processor().
    """

    def __init__(
        self,
        row_source: RowSource,
        chunk_sink_factory: ChunkSinkFactory,
        transformer: RowTransformer,
        chunk_size: int,
        skip_headers: bool,
        log: LogSink,
    ) -> None:
        self.row_source = row_source
        self.chunk_sink_factory = chunk_sink_factory
        self.transformer = transformer
        self.chunk_size = chunk_size
        self.skip_headers = skip_headers
        self.log = log

        self.state = ProcessorState.AWAITING_CHUNK
        self._header: tuple[str, ...] | None = None
        self._chunk: _OpenChunk | None = None
        self._last_chunk_no = 0
        self._result = ProcessResult()

    @property
    def header(self) -> tuple[str, ...] | None:
        return self._header

    @property
    def result(self) -> ProcessResult:
        """
        Назначение:
            Текущие счётчики, в том числе после прерванной обработки.
        """
        return self._result

    def process(self) -> ProcessResult:
        """
        Назначение:
            Читает источник до конца, трансформирует и раскладывает строки по чанкам.

        Выходные данные:
            ProcessResult

        Поведение:
            - Ошибка источника/чанка/трансформера прерывает обработку; открытый
              чанк сбрасывается и закрывается по возможности, исходная ошибка
              поднимается дальше. Уже закрытые чанки не откатываются.
        """
        if self.state is ProcessorState.CLOSED:
            raise ProcessorClosedError()

        rows = self._iter_rows()
        try:
            for row in rows:
                self._consume(row)
        except Exception:
            self._abort()
            raise
        finally:
            rows.close()

        self.log("%d total rows updated", self._result.rows_total)
        try:
            self._close_chunk()
        finally:
            self.state = ProcessorState.CLOSED
        return self._result

    def _iter_rows(self) -> Iterator[Sequence[str]]:
        try:
            rows = iter(self.row_source)
        except Exception as exc:
            raise RowSourceError(f"csvchunker: cannot read input: {exc}") from exc

        try:
            while True:
                try:
                    row = next(rows)
                except StopIteration:
                    return
                except CsvChunkerError:
                    raise
                except Exception as exc:
                    raise RowSourceError(
                        f"csvchunker: error while reading input: {exc}",
                        row_no=self._result.rows_total + 1,
                    ) from exc
                yield row
        finally:
            close = getattr(rows, "close", None)
            if close is not None:
                close()

    def _consume(self, row: Sequence[str]) -> None:
        if self.state is ProcessorState.AWAITING_CHUNK:
            self._open_next_chunk()

        if self.state is ProcessorState.AWAITING_HEADER:
            if self._header is None:
                self._header = tuple(row)
            self._write_header()
            self.state = ProcessorState.STREAMING
            if self._result.rows_total == 0:
                # первая строка потока уже записана как заголовок
                return

        self._write_data_row(row)
        if self._result.rows_total % self.chunk_size == 0:
            self.state = ProcessorState.AWAITING_CHUNK

    def _open_next_chunk(self) -> None:
        self._close_chunk()

        chunk_no = self._last_chunk_no + 1
        try:
            writer = self.chunk_sink_factory(chunk_no)
        except Exception as exc:
            raise ChunkSinkError(
                f"csvchunker: error while creating output chunk: {exc}", chunk_no=chunk_no
            ) from exc

        self._last_chunk_no = chunk_no
        self._chunk = _OpenChunk(chunk_no=chunk_no, writer=writer)
        self._result.chunk_rows.append(0)
        self.state = ProcessorState.STREAMING if self.skip_headers else ProcessorState.AWAITING_HEADER

    def _write_header(self) -> None:
        chunk = self._require_chunk()
        ctx = RowContext.for_header(chunk_no=chunk.chunk_no, chunk_size=self.chunk_size)
        self._write(chunk, self._transform(ctx, list(self._header or ())))
        self._result.header_rows += 1

    def _write_data_row(self, row: Sequence[str]) -> None:
        chunk = self._require_chunk()
        row_no = self._result.rows_total + 1
        ctx = RowContext(
            chunk_no=chunk.chunk_no,
            row_no=row_no,
            chunk_size=self.chunk_size,
            is_header=False,
        )
        self._write(chunk, self._transform(ctx, list(row)))
        # счётчики двигаются только после успешной записи
        self._result.rows_total = row_no
        chunk.rows += 1
        self._result.chunk_rows[-1] = chunk.rows

    def _transform(self, ctx: RowContext, row: list[str]) -> list[str]:
        try:
            return self.transformer(ctx, row)
        except CsvChunkerError:
            raise
        except Exception as exc:
            raise RowTransformError(
                f"csvchunker: transformer failed: {exc!r}",
                chunk_no=ctx.chunk_no,
                row_no=ctx.row_no,
            ) from exc

    def _write(self, chunk: _OpenChunk, row: Sequence[str]) -> None:
        try:
            chunk.writer.write(row)
        except Exception as exc:
            raise ChunkSinkError(
                f"csvchunker: error while writing to output chunk: {exc}", chunk_no=chunk.chunk_no
            ) from exc

    def _require_chunk(self) -> _OpenChunk:
        if self._chunk is None:
            raise RuntimeError(f"no open chunk in state {self.state.value}")
        return self._chunk

    def _close_chunk(self) -> None:
        chunk = self._chunk
        if chunk is None:
            return
        self._chunk = None
        self.log("chunk %d: %d rows processed", chunk.chunk_no, chunk.rows)

        try:
            chunk.writer.flush()
        except Exception as exc:
            self._close_quietly(chunk)
            raise ChunkSinkError(
                f"csvchunker: error while flushing to output chunk: {exc}", chunk_no=chunk.chunk_no
            ) from exc

        try:
            chunk.writer.close()
        except Exception as exc:
            raise ChunkSinkError(
                f"csvchunker: error while closing output chunk: {exc}", chunk_no=chunk.chunk_no
            ) from exc

    def _abort(self) -> None:
        chunk = self._chunk
        self._chunk = None
        self.state = ProcessorState.CLOSED
        if chunk is None:
            return
        try:
            chunk.writer.flush()
        except Exception as exc:
            self.log("csvchunker: flush failed while aborting chunk %d: %r", chunk.chunk_no, exc)
        self._close_quietly(chunk)

    def _close_quietly(self, chunk: _OpenChunk) -> None:
        try:
            chunk.writer.close()
        except Exception as exc:
            self.log("csvchunker: close failed for chunk %d: %r", chunk.chunk_no, exc)
