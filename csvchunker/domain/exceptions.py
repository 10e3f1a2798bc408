from __future__ import annotations

from typing import Any, Dict

from csvchunker.domain.error_codes import ErrorCode


class CsvChunkerError(Exception):
    """
    Назначение:
        Базовая ошибка пайплайна. Каждая ошибка несёт код ErrorCode и
        контекст (номер чанка/строки), если он известен.
    """

    code: ErrorCode = ErrorCode.UNEXPECTED_ERROR

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = {k: v for k, v in details.items() if v is not None}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "details": dict(self.details),
        }


class ProcessorConfigError(CsvChunkerError):
    """
    Назначение:
        Ошибка конфигурации. Поднимается до любого I/O, пайплайн не стартует.
    """


class MissingRowSourceError(ProcessorConfigError):
    code = ErrorCode.ROW_SOURCE_MISSING

    def __init__(self) -> None:
        super().__init__("csvchunker: input row source cannot be None")


class MissingChunkSinkError(ProcessorConfigError):
    code = ErrorCode.CHUNK_SINK_MISSING

    def __init__(self) -> None:
        super().__init__("csvchunker: chunk sink factory or output file format must be set")


class InvalidChunkSizeError(ProcessorConfigError):
    code = ErrorCode.INVALID_CHUNK_SIZE

    def __init__(self, chunk_size: Any) -> None:
        super().__init__(
            f"csvchunker: chunk size must be > 0, got {chunk_size!r}; "
            "to prevent splitting use sys.maxsize as chunk size",
            chunk_size=chunk_size,
        )


class RowSourceError(CsvChunkerError):
    """
    Назначение:
        Ошибка чтения входного потока (кроме штатного конца данных).
        Исходное исключение доступно через __cause__.
    """

    code = ErrorCode.ROW_SOURCE_ERROR


class ChunkSinkError(CsvChunkerError):
    """
    Назначение:
        Ошибка открытия/записи/flush/close выходного чанка.
    """

    code = ErrorCode.CHUNK_SINK_ERROR


class RowTransformError(CsvChunkerError):
    """
    Назначение:
        Сбой трансформера, не обёрнутого в panic_safe.
    """

    code = ErrorCode.TRANSFORM_ERROR


class ProcessorClosedError(CsvChunkerError):
    code = ErrorCode.PROCESSOR_CLOSED

    def __init__(self) -> None:
        super().__init__("csvchunker: processor already closed, create a new one to process again")


__all__ = [
    "CsvChunkerError",
    "ProcessorConfigError",
    "MissingRowSourceError",
    "MissingChunkSinkError",
    "InvalidChunkSizeError",
    "RowSourceError",
    "ChunkSinkError",
    "RowTransformError",
    "ProcessorClosedError",
]
