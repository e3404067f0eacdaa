"""Loguru setup for tfindex: human lines on stderr or Pino-style NDJSON.

Usage:
    from tfindex.utils.logging import logger, phase_logger
    logger.info("Message")

    log = phase_logger("scanning")
    log.bind(service="network").debug("Parsed 3 files")

Records bound with ``phase`` and ``service`` carry them as top-level NDJSON
fields, and human lines show them as ``[phase/service]``.

Environment Variables:
    TFINDEX_LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: INFO)
    TFINDEX_LOG_JSON: 0|1 (default: 0, human-readable)
    TFINDEX_LOG_FILE: path to an NDJSON log file (optional)
    TFINDEX_REQUEST_ID: correlation ID attached to JSON records
"""

import json
import os
import sys
import uuid

from loguru import logger

logger.remove()

# Pino numeric levels
PINO_LEVELS = {
    "TRACE": 10,
    "DEBUG": 20,
    "INFO": 30,
    "WARNING": 40,
    "ERROR": 50,
    "CRITICAL": 60,
}

# Extras promoted into the human-readable prefix, outermost first
SCOPE_FIELDS = ("phase", "service")

_log_level = os.environ.get("TFINDEX_LOG_LEVEL", "INFO").upper()
_json_mode = os.environ.get("TFINDEX_LOG_JSON", "0") == "1"
_log_file = os.environ.get("TFINDEX_LOG_FILE")
_request_id = os.environ.get("TFINDEX_REQUEST_ID") or str(uuid.uuid4())


def phase_logger(phase: str, **fields):
    """Logger bound to a pipeline phase ("scanning", "indexing")."""
    return logger.bind(phase=phase, **fields)


def scope_of(extra: dict) -> str:
    """``phase/service`` from whichever scope fields are bound, or ""."""
    return "/".join(str(extra[name]) for name in SCOPE_FIELDS if extra.get(name))


def _pino_record(message) -> dict:
    record = message.record
    extra = record["extra"]
    pino_log = {
        "level": PINO_LEVELS.get(record["level"].name, 30),
        "time": int(record["time"].timestamp() * 1000),
        "msg": record["message"],
        "pid": record["process"].id,
        "name": "tfindex",
        "request_id": extra.get("request_id", _request_id),
    }
    pino_log.update((key, value) for key, value in extra.items() if key != "request_id")

    if record["exception"]:
        exc = record["exception"]
        pino_log["err"] = {
            "type": exc.type.__name__ if exc.type else "Error",
            "message": str(exc.value) if exc.value else "",
        }
    return pino_log


def pino_compatible_sink(message):
    """Write one NDJSON line per record to stdout.

    Never call logger.* inside a sink; it recurses.
    """
    sys.stdout.write(json.dumps(_pino_record(message), default=str) + "\n")
    sys.stdout.flush()


def _human_format(record) -> str:
    # No emojis: Windows CP1252 consoles
    prefix = ""
    scope = scope_of(record["extra"])
    if scope:
        scope = scope.replace("{", "{{").replace("}", "}}").replace("<", r"\<")
        prefix = f"<magenta>[{scope}]</magenta> "
    return (
        "<green>{time:HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}:{line}</cyan> - "
        + prefix
        + "<level>{message}</level>\n{exception}"
    )


logger.level("DEBUG", color="<blue>")
logger.level("INFO", color="<white>")
logger.level("WARNING", color="<yellow>")
logger.level("ERROR", color="<red>")
logger.level("CRITICAL", color="<red><bold>")


def _add_human_sink(sink, colorize: bool | None) -> int:
    return logger.add(sink, level=_log_level, format=_human_format, colorize=colorize)


# Human-mode handler, swapped out while a Rich Live display owns the terminal
_human_handler_id: int | None = None

if _json_mode:
    logger.add(pino_compatible_sink, level=_log_level, colorize=False)
else:
    # colorize=None: colors on a TTY, plain when piped
    _human_handler_id = _add_human_sink(sys.stderr, None)

if _log_file:
    def _file_pino_sink(message):
        with open(_log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(_pino_record(message), default=str) + "\n")

    # The file always captures DEBUG
    logger.add(_file_pino_sink, level="DEBUG")


def get_request_id() -> str:
    """Correlation ID shared by every record of this process."""
    return _request_id


def swap_to_rich_sink(rich_sink_fn) -> int | None:
    """Send human log lines through a Rich console while a Live display runs.

    Returns the new handler ID, or None in JSON mode where nothing is swapped.
    """
    global _human_handler_id

    if _json_mode or _human_handler_id is None:
        return None

    logger.remove(_human_handler_id)
    _human_handler_id = None
    # Keep ANSI codes; Rich renders them
    return _add_human_sink(rich_sink_fn, True)


def restore_stderr_sink(rich_handler_id: int | None) -> None:
    """Put the stderr handler back once the Live display has stopped."""
    global _human_handler_id

    if _json_mode or rich_handler_id is None:
        return

    try:
        logger.remove(rich_handler_id)
    except ValueError:
        pass  # Already removed

    _human_handler_id = _add_human_sink(sys.stderr, None)


__all__ = [
    "logger",
    "phase_logger",
    "scope_of",
    "get_request_id",
    "swap_to_rich_sink",
    "restore_stderr_sink",
]
