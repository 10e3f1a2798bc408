from csvchunker.domain.context import HEADER_ROW_NO, RowContext
from csvchunker.domain.exceptions import (
    ChunkSinkError,
    CsvChunkerError,
    InvalidChunkSizeError,
    MissingChunkSinkError,
    MissingRowSourceError,
    ProcessorClosedError,
    ProcessorConfigError,
    RowSourceError,
    RowTransformError,
)
from csvchunker.domain.ports import noop_log
from csvchunker.domain.transform import (
    add_chunk_row_no_transformer,
    add_constant_column_transformer,
    add_row_no_transformer,
    chain_transformers,
    debug_wrapper,
    no_op_transformer,
    panic_safe,
    replace_values_transformer,
)
from csvchunker.processing import (
    ChunkProcessor,
    ProcessorOptions,
    ProcessResult,
    new_buffer_processor,
    new_file_processor,
    new_processor,
)

__all__ = [
    "HEADER_ROW_NO",
    "RowContext",
    "ChunkSinkError",
    "CsvChunkerError",
    "InvalidChunkSizeError",
    "MissingChunkSinkError",
    "MissingRowSourceError",
    "ProcessorClosedError",
    "ProcessorConfigError",
    "RowSourceError",
    "RowTransformError",
    "noop_log",
    "add_chunk_row_no_transformer",
    "add_constant_column_transformer",
    "add_row_no_transformer",
    "chain_transformers",
    "debug_wrapper",
    "no_op_transformer",
    "panic_safe",
    "replace_values_transformer",
    "ChunkProcessor",
    "ProcessorOptions",
    "ProcessResult",
    "new_buffer_processor",
    "new_file_processor",
    "new_processor",
]
