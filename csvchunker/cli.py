from __future__ import annotations

import logging
import time
import uuid
from pathlib import Path

import typer

from .config import Settings, load_settings
from .domain.exceptions import CsvChunkerError, ProcessorConfigError
from .loggingSetup import closeCommandLogger, createCommandLogger, logEvent, mapLogLevel
from .reporter import createEmptyReport, finalizeReport, getDurationMs, writeReportJson
from .usecases.split_usecase import SplitUseCase, TransformOptions

app = typer.Typer(no_args_is_help=True, add_completion=False)


def requireInput(inputPath: str | None) -> None:
    """
    Назначение:
        Базовая проверка наличия входного CSV-файла.

    Поведение:
        - Если путь не задан или файл не существует: exit code 2.
    """
    if not inputPath:
        typer.echo("ERROR: --input is required", err=True)
        raise typer.Exit(code=2)

    p = Path(inputPath)
    if not p.exists() or not p.is_file():
        typer.echo(f"ERROR: input file not found: {inputPath}", err=True)
        raise typer.Exit(code=2)


def parseKeyValue(raw: str, optionName: str) -> tuple[str, str]:
    """
    Назначение:
        Разбирает значение опции вида KEY=VALUE (по первому "=").
    """
    if "=" not in raw:
        raise typer.BadParameter(f"expected KEY=VALUE, got {raw!r}", param_hint=optionName)
    key, value = raw.split("=", 1)
    return key, value


def printRunHeader(runId: str, command: str, settings: Settings, sources: list[str]) -> None:
    typer.echo(
        f"run_id={runId} command={command} "
        f"chunk_size={settings.chunk_size} skip_headers={settings.skip_headers} "
        f"output_file_format={settings.output_file_format} sources={sources} "
        f"log_level={settings.log_level}"
    )


def runWithReport(
    ctx: typer.Context,
    commandName: str,
    inputPath: str | None,
    runner,
) -> None:
    """
    Назначение:
        Унифицированная обвязка выполнения команд:
        - создаёт логгер + файл лога
        - создаёт report.json skeleton
        - валидирует входной файл
        - гарантирует запись отчёта в finally

    Поведение:
        - На ошибках обязательных параметров: пишет ошибку в лог и завершает exit code 2.
    """
    runId = ctx.obj["runId"]
    settings: Settings = ctx.obj["settings"]
    sources = ctx.obj["sources"]

    startMonotonic = time.monotonic()

    logger, logFilePath = createCommandLogger(
        commandName=commandName,
        logDir=settings.log_dir,
        runId=runId,
        logLevel=settings.log_level,
    )

    report = createEmptyReport(runId=runId, command=commandName, configSources=sources)
    report.meta.input_path = inputPath

    exitCode: int | None = None

    try:
        logEvent(logger, logging.INFO, runId, "core", "Command started")
        printRunHeader(runId, commandName, settings, sources)

        try:
            requireInput(inputPath)
        except typer.Exit:
            logEvent(logger, logging.ERROR, runId, "input", "Input CSV is missing or not accessible")
            exitCode = 2
            return

        exitCode = runner(logger, report)

    finally:
        durationMs = getDurationMs(startMonotonic, time.monotonic())
        finalizeReport(
            report=report,
            durationMs=durationMs,
            logFile=logFilePath,
            reportDir=settings.report_dir,
        )
        reportPath = writeReportJson(report, settings.report_dir, f"report_{commandName}_{runId}")
        logEvent(logger, logging.INFO, runId, "report", f"Report written: {reportPath}")
        closeCommandLogger(logger)

        if exitCode is not None:
            raise typer.Exit(code=exitCode)


def runSplitCommand(
    ctx: typer.Context,
    inputPath: str | None,
    outputFormat: str | None,
    transformOptions: TransformOptions,
) -> None:
    settings: Settings = ctx.obj["settings"]
    runId = ctx.obj["runId"]
    outputFileFormat = outputFormat or settings.output_file_format

    def execute(logger, report) -> int:
        if not outputFileFormat:
            logEvent(logger, logging.ERROR, runId, "config", "Output file format is not set")
            typer.echo("ERROR: --output-format is required (or output_file_format in config)", err=True)
            return 2

        usecase = SplitUseCase(
            chunk_size=settings.chunk_size,
            skip_headers=settings.skip_headers,
            write_buffer_size=settings.write_buffer_size,
            read_queue_size=settings.read_queue_size,
            input_encoding=settings.input_encoding,
            output_encoding=settings.output_encoding,
        )
        try:
            code = usecase.run(
                input_path=inputPath or "",
                output_file_format=outputFileFormat,
                transform_options=transformOptions,
                logger=logger,
                run_id=runId,
                report=report,
            )
        except ProcessorConfigError as exc:
            logEvent(logger, logging.ERROR, runId, "config", f"Invalid configuration: {exc}")
            typer.echo(f"ERROR: {exc}", err=True)
            return 2
        except CsvChunkerError as exc:
            logEvent(logger, logging.ERROR, runId, "split", f"Split failed: {exc}")
            typer.echo(f"ERROR: split failed: {exc} (see logs/report)", err=True)
            return 2

        typer.echo(
            f"chunks_written={report.summary.chunks_written} rows_total={report.summary.rows_total}"
        )
        return code

    runWithReport(
        ctx=ctx,
        commandName="split",
        inputPath=inputPath,
        runner=execute,
    )


@app.callback()
def main(
    ctx: typer.Context,
    config: str | None = typer.Option(None, "--config", help="Path to config.yml"),
    runId: str | None = typer.Option(None, "--run-id", help="Run identifier (UUID). If omitted, generated."),
    logLevel: str | None = typer.Option(None, "--log-level", help="Log level: ERROR|WARN|INFO|DEBUG"),
    logDir: str | None = typer.Option(None, "--log-dir", help="Directory for logs."),
    reportDir: str | None = typer.Option(None, "--report-dir", help="Directory for reports."),
):
    """
    Назначение:
        Глобальная инициализация CLI:
        - генерирует/принимает run_id
        - загружает глобальные настройки (CLI > ENV > config > defaults)
        - сохраняет всё в ctx.obj для подкоманд
    """
    if not runId:
        runId = str(uuid.uuid4())

    cliOverrides = {
        "log_level": logLevel,
        "log_dir": logDir,
        "report_dir": reportDir,
    }
    try:
        loaded = load_settings(config_path=config, cli_overrides=cliOverrides)
        mapLogLevel(loaded.settings.log_level)
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=2)

    ctx.obj = {
        "runId": runId,
        "configPath": config,
        "cliOverrides": cliOverrides,
        "settings": loaded.settings,
        "sources": loaded.sources_used,
    }


@app.command()
def split(
    ctx: typer.Context,
    input: str | None = typer.Option(None, "--input", help="Path to input CSV"),
    outputFormat: str | None = typer.Option(
        None, "--output-format", help="Output file name template, e.g. out_%03d.csv"
    ),
    chunkSize: int | None = typer.Option(None, "--chunk-size", help="Data rows per output chunk"),
    skipHeaders: bool | None = typer.Option(
        None,
        "--skip-headers/--no-skip-headers",
        help="Do not repeat the header row in output chunks",
        show_default=True,
    ),
    rowNoColumn: str | None = typer.Option(None, "--row-no-column", help="Add overall row number column"),
    chunkRowNoColumn: str | None = typer.Option(
        None, "--chunk-row-no-column", help="Add row number within chunk column"
    ),
    replace: list[str] | None = typer.Option(None, "--replace", help="Replace field value: OLD=NEW (repeatable)"),
    constantColumn: list[str] | None = typer.Option(
        None, "--constant-column", help="Add constant column: NAME=VALUE (repeatable)"
    ),
    constantColumnIndex: int = typer.Option(0, "--constant-column-index", help="Insert position of constant columns"),
    panicSafe: bool = typer.Option(False, "--panic-safe", help="Pass rows through unchanged when a transform fails"),
    debugTransform: bool = typer.Option(False, "--debug-transform", help="Log rows before/after transformation"),
    writeBufferSize: int | None = typer.Option(None, "--write-buffer-size", help="Write buffer size per chunk"),
    readQueueSize: int | None = typer.Option(
        None, "--read-queue-size", help="Rows prefetched by background reader (0 disables)"
    ),
):
    """
    Назначение:
        Разбивает CSV на чанки-файлы, опционально трансформируя строки.
    """
    replacements = dict(parseKeyValue(item, "--replace") for item in (replace or []))
    constantColumns = [parseKeyValue(item, "--constant-column") for item in (constantColumn or [])]

    overrides = {
        **ctx.obj["cliOverrides"],
        "chunk_size": chunkSize,
        "skip_headers": skipHeaders,
        "output_file_format": outputFormat,
        "write_buffer_size": writeBufferSize,
        "read_queue_size": readQueueSize,
    }
    try:
        loaded = load_settings(config_path=ctx.obj["configPath"], cli_overrides=overrides)
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=2)
    ctx.obj["settings"] = loaded.settings
    ctx.obj["sources"] = loaded.sources_used

    runSplitCommand(
        ctx=ctx,
        inputPath=input,
        outputFormat=outputFormat,
        transformOptions=TransformOptions(
            row_no_column=rowNoColumn,
            chunk_row_no_column=chunkRowNoColumn,
            replacements=replacements,
            constant_columns=constantColumns,
            constant_column_index=constantColumnIndex,
            panic_safe=panicSafe,
            debug=debugTransform,
        ),
    )
