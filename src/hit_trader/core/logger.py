import json
import logging
import os
from datetime import datetime
from typing import Optional


class JsonFormatter(logging.Formatter):
    def format(self, record):
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "component": record.name,
            "message": record.getMessage(),
        }
        if hasattr(record, "meta") and isinstance(record.meta, dict):
            log_entry["meta"] = record.meta
        elif record.args and isinstance(record.args, dict):
            # Support for logger.info("msg", {"extra": "data"}) style if meta not used
            log_entry["meta"] = record.args

        return json.dumps(log_entry, separators=(",", ":"), default=str)


def setup_logger(
    name: str = "hit_trader",
    log_dir: Optional[str] = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """Console logger, plus a JSON-lines file when ``log_dir`` is given."""
    logger = logging.getLogger(name)
    logger.setLevel(level)

    has_console = any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        for h in logger.handlers
    )
    if not has_console:
        # Console Handler (Human readable)
        ch = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        ch.setFormatter(formatter)
        logger.addHandler(ch)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        json_path = os.path.abspath(os.path.join(log_dir, "system.jsonl"))
        already = any(
            isinstance(h, logging.FileHandler) and h.baseFilename == json_path
            for h in logger.handlers
        )
        if not already:
            fh = logging.FileHandler(json_path)
            fh.setFormatter(JsonFormatter())
            logger.addHandler(fh)

    return logger


# Singleton-ish instance
logger = setup_logger()
