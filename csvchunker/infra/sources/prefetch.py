from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Iterator, Sequence

from csvchunker.domain.ports import RowSource

logger = logging.getLogger(__name__)

DEFAULT_READ_QUEUE_SIZE = 10
_PUT_TIMEOUT_SECONDS = 0.1


@dataclass(frozen=True)
class _SourceFailed:
    error: BaseException


_END = object()


class PrefetchingRowSource:
    """
    Назначение/ответственность:
        Читает строки исходного источника в фоновом потоке и передаёт их
        через ограниченную FIFO-очередь, чтобы чтение и запись перекрывались.

    Инварианты/гарантии:
        - Порядок строк не меняется.
        - Ошибка источника поднимается у потребителя на той же позиции.
        - Если потребитель прекращает итерацию, фоновый поток останавливается.
    """

    def __init__(self, source: RowSource, max_queue_size: int = DEFAULT_READ_QUEUE_SIZE) -> None:
        if max_queue_size <= 0:
            raise ValueError(f"max_queue_size must be > 0, got {max_queue_size}")
        self.source = source
        self.max_queue_size = max_queue_size

    def __iter__(self) -> Iterator[Sequence[str]]:
        rows: queue.Queue = queue.Queue(maxsize=self.max_queue_size)
        stop = threading.Event()
        producer = threading.Thread(
            target=self._produce,
            args=(rows, stop),
            name="csvchunker-reader",
            daemon=True,
        )
        producer.start()
        try:
            while True:
                item = rows.get()
                if item is _END:
                    return
                if isinstance(item, _SourceFailed):
                    raise item.error
                yield item
        finally:
            stop.set()
            producer.join()

    def _produce(self, rows: queue.Queue, stop: threading.Event) -> None:
        try:
            for row in self.source:
                if not self._put(rows, row, stop):
                    logger.debug("Reader stopped before end of source")
                    return
        except BaseException as exc:
            # включая BaseException: потребитель не должен ждать _END
            self._put(rows, _SourceFailed(exc), stop)
            return
        self._put(rows, _END, stop)

    @staticmethod
    def _put(rows: queue.Queue, item: object, stop: threading.Event) -> bool:
        while not stop.is_set():
            try:
                rows.put(item, timeout=_PUT_TIMEOUT_SECONDS)
                return True
            except queue.Full:
                continue
        return False
