from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """
    Назначение:
        Единая таксономия кодов ошибок пайплайна разбиения CSV.
    """

    ROW_SOURCE_MISSING = "ROW_SOURCE_MISSING"
    CHUNK_SINK_MISSING = "CHUNK_SINK_MISSING"
    INVALID_CHUNK_SIZE = "INVALID_CHUNK_SIZE"
    ROW_SOURCE_ERROR = "ROW_SOURCE_ERROR"
    CHUNK_SINK_ERROR = "CHUNK_SINK_ERROR"
    TRANSFORM_ERROR = "TRANSFORM_ERROR"
    PROCESSOR_CLOSED = "PROCESSOR_CLOSED"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"

    @property
    def is_config_error(self) -> bool:
        """
        Назначение:
            Ошибка конфигурации (обнаруживается до чтения первой строки).
        """
        return self in (
            ErrorCode.ROW_SOURCE_MISSING,
            ErrorCode.CHUNK_SINK_MISSING,
            ErrorCode.INVALID_CHUNK_SIZE,
        )
