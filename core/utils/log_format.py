"""JSON logging setup shared by the command-line scripts."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

_RESERVED = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname', 'levelno',
    'lineno', 'module', 'msecs', 'message', 'pathname', 'process', 'processName',
    'relativeCreated', 'thread', 'threadName', 'exc_info', 'exc_text', 'stack_info',
    'taskName',
}


class JSONFormatter(logging.Formatter):
    """One JSON object per record; ``extra`` fields are folded in."""

    def format(self, record):
        log_obj = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED and not key.startswith('_'):
                log_obj[key] = value
        return json.dumps(log_obj, default=str)


def setup_logging(prefix: str, log_dir: str = 'logs', console_level: int = logging.INFO) -> Path:
    """Setup JSON logging to file plus plain console output."""
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    log_file = log_path / f"{prefix}_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}.json"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(JSONFormatter())
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    root_logger.addHandler(console_handler)

    return log_file
