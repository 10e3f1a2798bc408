from __future__ import annotations

from dataclasses import dataclass

HEADER_ROW_NO = -1


@dataclass(frozen=True)
class RowContext:
    """
    Назначение:
        Метаданные текущей строки, которые видит трансформер.

    Поля:
        chunk_no: int
            Номер текущего чанка (с 1).
        row_no: int
            Сквозной номер строки данных (с 1). Для заголовка всегда HEADER_ROW_NO.
        chunk_size: int
            Максимальное число строк данных в чанке.
        is_header: bool
            True, если трансформируется строка заголовка.

    Инварианты/гарантии:
        - Создаётся заново для каждой строки и не изменяется после создания.
    """

    chunk_no: int
    row_no: int
    chunk_size: int
    is_header: bool = False

    @classmethod
    def for_header(cls, chunk_no: int, chunk_size: int) -> "RowContext":
        return cls(chunk_no=chunk_no, row_no=HEADER_ROW_NO, chunk_size=chunk_size, is_header=True)

    @property
    def chunk_row_no(self) -> int:
        """
        Назначение:
            Номер строки внутри текущего чанка (с 1).
            Последняя строка полного чанка получает chunk_size, а не 0.
        """
        if self.is_header:
            return HEADER_ROW_NO
        return ((self.row_no - 1) % self.chunk_size) + 1
