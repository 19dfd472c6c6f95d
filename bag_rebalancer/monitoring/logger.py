"""
Logging setup.

Text or JSON-lines records for the bag_rebalancer logger tree, with an
optional file handler under monitoring.log_dir.
"""

import json
import logging
import os
from datetime import datetime

from bag_rebalancer.core.config import Config

_RESERVED = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename', 'module',
    'lineno', 'funcName', 'created', 'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'taskName', 'exc_info', 'exc_text', 'stack_info', 'message',
}


class StructuredFormatter(logging.Formatter):
    """Formatter emitting either a plain line or one JSON object per record"""

    def __init__(self, fmt_type: str = 'text'):
        super().__init__()
        self.fmt_type = fmt_type

    def format(self, record):
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        # Extra fields passed via logger.x(..., extra={...})
        for key, value in record.__dict__.items():
            if key not in _RESERVED and key not in log_data:
                log_data[key] = value if isinstance(value, (str, int, float, bool)) or value is None else str(value)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        if self.fmt_type == 'json':
            return json.dumps(log_data)

        base_msg = f"{log_data['timestamp']} - {log_data['logger']} - {log_data['level']} - {log_data['message']}"
        if 'exception' in log_data:
            base_msg += f"\n{log_data['exception']}"
        return base_msg


def setup_logging(config: Config, logger_name: str = 'bag_rebalancer') -> logging.Logger:
    """Configure the package logger from monitoring settings (idempotent)"""
    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, config.monitoring.log_level, logging.INFO))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    formatter = StructuredFormatter(config.monitoring.log_format)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    if config.monitoring.log_dir:
        os.makedirs(config.monitoring.log_dir, exist_ok=True)
        file_handler = logging.FileHandler(os.path.join(config.monitoring.log_dir, 'bag_rebalancer.log'))
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
