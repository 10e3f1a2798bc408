from csvchunker.processing.builder import (
    ProcessorOptions,
    new_buffer_processor,
    new_file_processor,
    new_processor,
    validate_options,
)
from csvchunker.processing.processor import ChunkProcessor, ProcessorState, ProcessResult

__all__ = [
    "ProcessorOptions",
    "new_buffer_processor",
    "new_file_processor",
    "new_processor",
    "validate_options",
    "ChunkProcessor",
    "ProcessorState",
    "ProcessResult",
]
