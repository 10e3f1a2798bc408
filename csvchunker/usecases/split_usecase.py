from __future__ import annotations

import logging
from dataclasses import dataclass, field

from csvchunker.domain.exceptions import CsvChunkerError
from csvchunker.domain.ports import LogSink, RowSource, RowTransformer
from csvchunker.domain.transform.transformers import (
    add_chunk_row_no_transformer,
    add_constant_column_transformer,
    add_row_no_transformer,
    chain_transformers,
    no_op_transformer,
    replace_values_transformer,
)
from csvchunker.domain.transform.wrappers import debug_wrapper, panic_safe
from csvchunker.infra.sinks.file_sink import (
    chunk_file_name,
    csv_chunk_sink_factory,
    file_stream_factory,
    has_chunk_placeholder,
)
from csvchunker.infra.sources.csv_reader import CsvRowSource
from csvchunker.infra.sources.prefetch import PrefetchingRowSource
from csvchunker.loggingSetup import logEvent, makeLogSink
from csvchunker.processing.builder import ProcessorOptions, new_processor
from csvchunker.processing.processor import ProcessResult


@dataclass(frozen=True)
class TransformOptions:
    """
    Назначение:
        Набор встроенных трансформаций, доступных из CLI.

    Порядок применения:
        replacements -> constant_columns -> chunk_row_no_column -> row_no_column
        (номер строки оказывается в самой левой колонке).
    """

    row_no_column: str | None = None
    chunk_row_no_column: str | None = None
    replacements: dict[str, str] = field(default_factory=dict)
    constant_columns: list[tuple[str, str]] = field(default_factory=list)
    constant_column_index: int = 0
    panic_safe: bool = False
    debug: bool = False


def build_transformer(options: TransformOptions, log: LogSink) -> RowTransformer | None:
    """
    Назначение:
        Собирает цепочку трансформеров из TransformOptions.
        None, если трансформации не заданы.
    """
    chain: list[RowTransformer] = []
    if options.replacements:
        chain.append(replace_values_transformer(options.replacements))
    for offset, (name, value) in enumerate(options.constant_columns):
        chain.append(add_constant_column_transformer(name, value, options.constant_column_index + offset))
    if options.chunk_row_no_column:
        chain.append(add_chunk_row_no_transformer(options.chunk_row_no_column))
    if options.row_no_column:
        chain.append(add_row_no_transformer(options.row_no_column))

    if not chain and not options.debug:
        return None

    if not chain:
        transformer = no_op_transformer()
    elif len(chain) == 1:
        transformer = chain[0]
    else:
        transformer = chain_transformers(*chain)
    if options.debug:
        transformer = debug_wrapper(transformer, log)
    if options.panic_safe:
        transformer = panic_safe(transformer, log)
    return transformer


class SplitUseCase:
    """
    Назначение/ответственность:
        Use-case разбиения CSV-файла на чанки-файлы по шаблону имени.
    """

    def __init__(
        self,
        chunk_size: int,
        skip_headers: bool,
        write_buffer_size: int,
        read_queue_size: int,
        input_encoding: str,
        output_encoding: str,
    ) -> None:
        self.chunk_size = chunk_size
        self.skip_headers = skip_headers
        self.write_buffer_size = write_buffer_size
        self.read_queue_size = read_queue_size
        self.input_encoding = input_encoding
        self.output_encoding = output_encoding

    def build_row_source(self, input_path: str) -> RowSource:
        source: RowSource = CsvRowSource(input_path, encoding=self.input_encoding)
        if self.read_queue_size > 0:
            source = PrefetchingRowSource(source, max_queue_size=self.read_queue_size)
        return source

    def run(
        self,
        input_path: str,
        output_file_format: str,
        transform_options: TransformOptions,
        logger: logging.Logger,
        run_id: str,
        report,
    ) -> int:
        """
        Назначение:
            Запускает разбиение и заполняет отчёт.

        Поведение:
            - Ошибки конфигурации/пайплайна (CsvChunkerError) записываются в отчёт
              и поднимаются дальше; отчёт содержит уже закрытые чанки.
        """
        log = makeLogSink(logger, run_id, "pipeline")
        report.meta.input_path = input_path
        report.meta.output_file_format = output_file_format
        report.meta.chunk_size = self.chunk_size
        report.meta.skip_headers = self.skip_headers

        if not has_chunk_placeholder(output_file_format):
            logEvent(
                logger,
                logging.WARNING,
                run_id,
                "config",
                f"Output file format {output_file_format!r} has no chunk placeholder: all chunks go to one file",
            )

        result: ProcessResult | None = None
        try:
            processor = new_processor(
                ProcessorOptions(
                    row_source=self.build_row_source(input_path),
                    chunk_sink_factory=csv_chunk_sink_factory(
                        file_stream_factory(output_file_format, encoding=self.output_encoding),
                        self.write_buffer_size,
                    ),
                    transformer=build_transformer(transform_options, log),
                    chunk_size=self.chunk_size,
                    skip_headers=self.skip_headers,
                    log=log,
                    write_buffer_size=self.write_buffer_size,
                )
            )
            try:
                processor.process()
            finally:
                result = processor.result
        except CsvChunkerError as exc:
            report.error = exc.to_dict()
            report.summary.failed = 1
            raise
        finally:
            if result is not None:
                self._fill_report(report, result, output_file_format)

        logEvent(
            logger,
            logging.INFO,
            run_id,
            "split",
            f"split done rows_total={result.rows_total} chunks={result.chunks_written}",
        )
        return 0

    @staticmethod
    def _fill_report(report, result: ProcessResult, output_file_format: str) -> None:
        report.summary.chunks_written = result.chunks_written
        report.summary.rows_total = result.rows_total
        report.summary.header_rows = result.header_rows
        report.items = [
            {
                "chunk_no": chunk_no,
                "file": chunk_file_name(output_file_format, chunk_no),
                "rows": rows,
            }
            for chunk_no, rows in enumerate(result.chunk_rows, start=1)
        ]
