from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, replace
from typing import TextIO

from csvchunker.domain.exceptions import (
    InvalidChunkSizeError,
    MissingChunkSinkError,
    MissingRowSourceError,
)
from csvchunker.domain.ports import ChunkSinkFactory, LogSink, RowSource, RowTransformer
from csvchunker.domain.transform.transformers import no_op_transformer
from csvchunker.infra.sinks.csv_writer import DEFAULT_WRITE_BUFFER_SIZE
from csvchunker.infra.sinks.file_sink import (
    csv_chunk_sink_factory,
    file_stream_factory,
    has_chunk_placeholder,
    single_stream_factory,
)
from csvchunker.infra.sources.csv_reader import CsvRowSource, CsvStreamRowSource
from csvchunker.processing.processor import ChunkProcessor

logger = logging.getLogger("csvchunker")


@dataclass(frozen=True)
class ProcessorOptions:
    """
    Назначение:
        Полный набор настраиваемых параметров пайплайна.

    Поля:
        row_source: RowSource | None
            Источник строк.
        chunk_sink_factory: ChunkSinkFactory | None
            Фабрика выходных чанков. Имеет приоритет над output_file_format.
        output_file_format: str | None
            Шаблон имени файла чанка, например "out_%d.csv".
        transformer: RowTransformer | None
            None -> no_op_transformer().
        chunk_size: int
            Число строк данных в чанке, должно быть > 0.
        skip_headers: bool
            True -> заголовок не пишется ни в один чанк.
        log: LogSink | None
            None -> logging.getLogger("csvchunker").info.
        write_buffer_size: int
            Размер буфера записи (символы) для чанков по output_file_format.
    """

    row_source: RowSource | None = None
    chunk_sink_factory: ChunkSinkFactory | None = None
    output_file_format: str | None = None
    transformer: RowTransformer | None = None
    chunk_size: int = 0
    skip_headers: bool = False
    log: LogSink | None = None
    write_buffer_size: int = DEFAULT_WRITE_BUFFER_SIZE


def validate_options(options: ProcessorOptions) -> None:
    """
    Назначение:
        Однократная проверка конфигурации до чтения первой строки.

    Поведение:
        - MissingRowSourceError, MissingChunkSinkError, InvalidChunkSizeError
          (проверяются именно в этом порядке).
    """
    if options.row_source is None:
        raise MissingRowSourceError()
    if options.chunk_sink_factory is None and not options.output_file_format:
        raise MissingChunkSinkError()
    if isinstance(options.chunk_size, bool) or not isinstance(options.chunk_size, int) or options.chunk_size <= 0:
        raise InvalidChunkSizeError(options.chunk_size)


def new_processor(options: ProcessorOptions) -> ChunkProcessor:
    """
    Назначение:
        Собирает ChunkProcessor из ProcessorOptions, подставляя значения по умолчанию.
    """
    validate_options(options)

    log = options.log if options.log is not None else logger.info
    transformer = options.transformer if options.transformer is not None else no_op_transformer()

    sink_factory = options.chunk_sink_factory
    if sink_factory is None:
        output_file_format = options.output_file_format or ""
        if not has_chunk_placeholder(output_file_format):
            logger.warning(
                "Output file format %r does not depend on chunk number: all chunks go to the same file",
                output_file_format,
            )
        sink_factory = csv_chunk_sink_factory(
            file_stream_factory(output_file_format),
            options.write_buffer_size,
        )

    return ChunkProcessor(
        row_source=options.row_source,
        chunk_sink_factory=sink_factory,
        transformer=transformer,
        chunk_size=options.chunk_size,
        skip_headers=options.skip_headers,
        log=log,
    )


def new_file_processor(
    input_path: str,
    chunk_size: int,
    output_file_format: str,
    transformer: RowTransformer | None = None,
    **overrides,
) -> ChunkProcessor:
    """
    Назначение:
        Процессор "файл -> файлы чанков по шаблону имени".
    """
    options = ProcessorOptions(
        row_source=CsvRowSource(input_path),
        output_file_format=output_file_format,
        transformer=transformer,
        chunk_size=chunk_size,
    )
    return new_processor(replace(options, **overrides))


def new_buffer_processor(input_stream: TextIO | None, output_stream: TextIO | None, **overrides) -> ChunkProcessor:
    """
    Назначение:
        Процессор "поток -> поток" без разбиения (один чанк).
        Выходной поток не закрывается.
    """
    write_buffer_size = overrides.pop("write_buffer_size", DEFAULT_WRITE_BUFFER_SIZE)
    row_source = CsvStreamRowSource(input_stream) if input_stream is not None else None
    sink_factory = None
    if output_stream is not None:
        sink_factory = csv_chunk_sink_factory(single_stream_factory(output_stream), write_buffer_size)
    options = ProcessorOptions(
        row_source=row_source,
        chunk_sink_factory=sink_factory,
        chunk_size=sys.maxsize,
        write_buffer_size=write_buffer_size,
    )
    return new_processor(replace(options, **overrides))
