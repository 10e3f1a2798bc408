from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
import os
import yaml

ENV_PREFIX = "CSVCHUNKER_"


@dataclass(frozen=True)
class Settings:
    # Split
    chunk_size: int = 100_000
    skip_headers: bool = False
    output_file_format: str | None = None

    # IO
    write_buffer_size: int = 10 * 1024 * 1024
    read_queue_size: int = 10
    input_encoding: str = "utf-8-sig"
    output_encoding: str = "utf-8"

    # Paths / logging
    log_level: str = "INFO"
    log_dir: str = "./logs"
    report_dir: str = "./reports"


@dataclass(frozen=True)
class LoadedSettings:
    settings: Settings
    sources_used: list[str]


_INT_FIELDS = ("chunk_size", "write_buffer_size", "read_queue_size")
_BOOL_FIELDS = ("skip_headers",)


def _read_yaml_config(path: Path) -> dict:
    if not path.exists():
        return {}
    if not path.is_file():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            return {}
        return data


def _env_get(name: str) -> str | None:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return None
    return v.strip()


def parse_int(v: str | None) -> int | None:
    if v is None:
        return None
    return int(v)


def parse_bool(v: str | None) -> bool | None:
    if v is None:
        return None
    vv = v.lower()
    if vv in ("1", "true", "yes", "y"):
        return True
    if vv in ("0", "false", "no", "n"):
        return False
    raise ValueError(f"Invalid boolean env value: {v}")


def load_settings(
    config_path: str | None,
    cli_overrides: dict,
) -> LoadedSettings:
    """
    Priority: CLI > ENV > config > defaults
    """
    sources: list[str] = []
    defaults = Settings()
    names = [f.name for f in fields(Settings)]

    # 1) config file
    cfg: dict = {}
    if config_path:
        cfg = _read_yaml_config(Path(config_path))
        if cfg:
            sources.append("config")

    # 2) env
    env = {name: _env_get(ENV_PREFIX + name.upper()) for name in names}
    if any(v is not None for v in env.values()):
        sources.append("env")

    merged = {name: cfg.get(name, getattr(defaults, name)) for name in names}

    for name, raw in env.items():
        if raw is None:
            continue
        if name in _INT_FIELDS:
            merged[name] = parse_int(raw)
        elif name in _BOOL_FIELDS:
            merged[name] = parse_bool(raw)
        else:
            merged[name] = raw

    # 3) apply CLI overrides (only those explicitly passed)
    if any(v is not None for v in cli_overrides.values()):
        sources.append("cli")

    for k, v in cli_overrides.items():
        if v is None:
            continue
        merged[k] = v

    settings = Settings(
        chunk_size=int(merged["chunk_size"]),
        skip_headers=bool(merged["skip_headers"]),
        output_file_format=merged["output_file_format"],
        write_buffer_size=int(merged["write_buffer_size"]),
        read_queue_size=int(merged["read_queue_size"]),
        input_encoding=merged["input_encoding"],
        output_encoding=merged["output_encoding"],
        log_level=merged["log_level"],
        log_dir=merged["log_dir"],
        report_dir=merged["report_dir"],
    )

    return LoadedSettings(settings=settings, sources_used=sources)
