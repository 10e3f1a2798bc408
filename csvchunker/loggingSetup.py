from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from csvchunker.domain.ports import LogSink


class EnsureFieldsFilter(logging.Filter):
    """
    Назначение:
        Гарантирует наличие полей runId и component в LogRecord,
        чтобы форматтер не падал KeyError.

    Входные данные:
        runId: str
            Идентификатор запуска.
        defaultComponent: str
            Компонент по умолчанию, если не задан.
    """

    def __init__(self, runId: str, defaultComponent: str = "core"):
        super().__init__()
        self.runId = runId
        self.defaultComponent = defaultComponent

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "runId"):
            record.runId = self.runId
        if not hasattr(record, "component"):
            record.component = self.defaultComponent
        return True


def mapLogLevel(levelName: str) -> int:
    """
    Назначение:
        Преобразует строковый уровень логирования в logging level.

    Входные данные:
        levelName: str
            ERROR|WARN|INFO|DEBUG

    Выходные данные:
        int
    """
    value = (levelName or "").strip().upper()
    if value == "ERROR":
        return logging.ERROR
    if value in ("WARN", "WARNING"):
        return logging.WARNING
    if value == "INFO":
        return logging.INFO
    if value == "DEBUG":
        return logging.DEBUG
    raise ValueError(f"Unsupported log level: {levelName}")


def createCommandLogger(commandName: str, logDir: str, runId: str, logLevel: str) -> tuple[logging.Logger, str]:
    """
    Назначение:
        Создаёт логгер для конкретной команды и возвращает путь к log-файлу.
        Логгер пакета "csvchunker" (предупреждения builder'а и т.п.) пишет
        в тот же файл.

    Входные данные:
        commandName: str
        logDir: str
        runId: str
        logLevel: str

    Выходные данные:
        (logger, logFilePath)
    """
    Path(logDir).mkdir(parents=True, exist_ok=True)

    logFilePath = str(Path(logDir) / f"{commandName}_{runId}.log")

    loggerName = f"csvchunker.{commandName}.{runId}"
    logger = logging.getLogger(loggerName)
    logger.handlers.clear()
    logger.propagate = False

    level = mapLogLevel(logLevel)
    logger.setLevel(level)

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s runId=%(runId)s comp=%(component)s msg=%(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    fileHandler = logging.FileHandler(logFilePath, encoding="utf-8")
    fileHandler.setLevel(level)
    fileHandler.setFormatter(formatter)
    fileHandler.addFilter(EnsureFieldsFilter(runId=runId))
    logger.addHandler(fileHandler)

    packageLogger = logging.getLogger("csvchunker")
    for handler in list(packageLogger.handlers):
        if getattr(handler, "_csvchunkerCommand", False):
            packageLogger.removeHandler(handler)
            handler.close()
    packageHandler = logging.FileHandler(logFilePath, encoding="utf-8")
    packageHandler.setLevel(logging.WARNING)
    packageHandler.setFormatter(formatter)
    packageHandler.addFilter(EnsureFieldsFilter(runId=runId, defaultComponent="pipeline"))
    packageHandler._csvchunkerCommand = True  # type: ignore[attr-defined]
    packageLogger.addHandler(packageHandler)

    return logger, logFilePath


def closeCommandLogger(logger: logging.Logger) -> None:
    """
    Назначение:
        Закрывает файловые хендлеры логгера команды и логгера пакета.
    """
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    packageLogger = logging.getLogger("csvchunker")
    for handler in list(packageLogger.handlers):
        if getattr(handler, "_csvchunkerCommand", False):
            packageLogger.removeHandler(handler)
            handler.close()


def logEvent(logger: logging.Logger, level: int, runId: str, component: str, message: str) -> None:
    """
    Назначение:
        Унифицированная запись событий с runId/component.
    """
    logger.log(level, message, extra={"runId": runId, "component": component})


def makeLogSink(logger: logging.Logger, runId: str, component: str, level: int = logging.INFO) -> LogSink:
    """
    Назначение:
        Адаптер logging.Logger к лог-синку пайплайна: log("%d rows", n).
    """

    def sink(msg: str, *args: Any) -> None:
        logger.log(level, msg, *args, extra={"runId": runId, "component": component})

    return sink
