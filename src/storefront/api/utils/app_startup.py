"""Loguru setup shared by the HTTP server and the CLI."""

import logging
import sys
from pathlib import Path

from loguru import logger

from src.storefront.runtime.config.config_data import LoggingConfig
from src.storefront.runtime.context import get_config

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "[<cyan>{extra[request_id]}</cyan>] | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Library loggers and the level they are capped at
QUIET_LOGGERS = {
    "httpx": logging.WARNING,  # one INFO line per Supabase request
    "httpcore": logging.WARNING,
    "hpack": logging.WARNING,
    "uvicorn": logging.INFO,
    "uvicorn.error": logging.INFO,
    "uvicorn.access": logging.CRITICAL,
}


class InterceptHandler(logging.Handler):
    """Forward stdlib ``logging`` records into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # log_requests middleware already writes one line per request
        if record.name == "uvicorn.access":
            return

        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(depth=2, exception=record.exc_info).bind(
            logger_name=record.name
        ).log(level, record.getMessage())


def _add_file_sink(cfg: LoggingConfig, verbose_tracebacks: bool) -> None:
    path = Path(cfg.file)
    path.parent.mkdir(parents=True, exist_ok=True)
    as_json = cfg.format == "json"
    logger.add(
        str(path),
        level=cfg.level,
        format="{message}" if as_json else CONSOLE_FORMAT,
        serialize=as_json,
        rotation=f"{cfg.max_size_mb} MB",
        retention=cfg.backup_count,
        compression="zip",
        enqueue=True,
        backtrace=verbose_tracebacks,
        diagnose=verbose_tracebacks,
    )


def _route_stdlib_logging() -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in list(logging.root.manager.loggerDict):
        existing = logging.getLogger(name)
        existing.handlers = []
        existing.propagate = True

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def configure_logging() -> None:
    """Install the console sink, the optional file sink and the stdlib bridge."""
    config = get_config()
    cfg = config.logging
    # Variable values in tracebacks can include Supabase keys
    verbose_tracebacks = config.app.environment != "production"

    logger.remove()
    logger.configure(
        extra={"request_id": "-"},
        patcher=lambda record: record["extra"].setdefault("request_id", "-"),
    )
    logger.add(
        sys.stderr,
        level=cfg.level,
        format=CONSOLE_FORMAT,
        colorize=True,
        backtrace=verbose_tracebacks,
        diagnose=verbose_tracebacks,
    )
    if cfg.file:
        _add_file_sink(cfg, verbose_tracebacks)

    _route_stdlib_logging()

    logger.bind(
        level=cfg.level,
        format=cfg.format,
        file=cfg.file,
        backend=config.backend.provider,
    ).info("Logging configured for {} environment", config.app.environment)
