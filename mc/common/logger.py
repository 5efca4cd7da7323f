import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler
from mc.common.setup import PATHS
from datetime import datetime

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# Handlers are looked up by name, so calling get_logger twice never doubles output.
def _has_handler(logger, handler_name):
    return any(h.get_name() == handler_name for h in logger.handlers)

def _attach(logger, handler, handler_name, level, fmt):
    handler.setLevel(level)
    handler.setFormatter(fmt)
    handler.set_name(handler_name)
    logger.addHandler(handler)

# Keeps the newest `keep` debug logs from earlier runs and deletes the rest.
def _prune_debug_runs(debug_dir: Path, prefix, keep):
    runs = sorted(debug_dir.glob(f"{prefix}_*.log"),key=lambda p: p.stat().st_mtime,reverse=True)
    for run in runs[keep:]:
        try: run.unlink()
        except OSError: pass

def get_logger(
        name = "metrochrono",
        level = logging.INFO,
        log_dir: Path | None = None,
        max_bytes = 5 * 1024 * 1024,
        backup_count = 5,
        persistent = True,
        console = False,
        historical_debugs: int = 10
) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(level)

    log_dir = log_dir or PATHS.logs
    log_dir.mkdir(parents=True,exist_ok=True)
    fmt = logging.Formatter(LOG_FORMAT,LOG_DATE_FORMAT)

    # metrochrono.log, rotated once it gets big
    if persistent and not _has_handler(logger, f"{name}:persistent"):
        handler = RotatingFileHandler(log_dir / f"{name}.log", maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        _attach(logger, handler, f"{name}:persistent", level, fmt)

    # latest.log, overwritten each run
    if not _has_handler(logger, f"{name}:latest"):
        handler = logging.FileHandler(log_dir / "latest.log", mode="w", encoding="utf-8")
        _attach(logger, handler, f"{name}:latest", level, fmt)

    # logs/debug/<name>_<start time>.log, always at DEBUG no matter the configured level
    if historical_debugs > 0 and not _has_handler(logger, f"{name}:historical_debug"):
        debug_dir = log_dir / "debug"
        debug_dir.mkdir(parents=True,exist_ok=True)
        handler = logging.FileHandler(debug_dir / f"{name}_{datetime.now():%Y-%m-%d_%H-%M-%S_%f}.log", encoding="utf-8")
        _attach(logger, handler, f"{name}:historical_debug", logging.DEBUG, fmt)
        _prune_debug_runs(debug_dir, name, historical_debugs)

    # Off unless asked for, the TUI owns the terminal
    if console and not _has_handler(logger, f"{name}:console"):
        _attach(logger, logging.StreamHandler(), f"{name}:console", level, fmt)

    return logger

# Applies the log_level setting to the persistent and latest logs. The per-run debug log keeps everything.
def set_level(logger: logging.Logger, level_name: str):
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level '{level_name}'")
    for h in logger.handlers:
        if not (h.get_name() or "").endswith(":historical_debug"):
            h.setLevel(level)
    logger.debug(f"Log level set to {level_name.upper()}")

log = get_logger(level=logging.DEBUG,console=False,historical_debugs=10)
log.info("=== INITIALIZED NEW SESSION ===")
