"""Logging utilities"""

import json
import logging
import sys
from datetime import datetime, timezone

from ats_autofill import config

LOGGER_NAME = "ats_autofill"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(level=None):
    """Attach a single stdout handler to the package logger (idempotent)"""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level or config.LOG_LEVEL)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def log_result(job_url, platform, status, report=None, path=None):
    """Append one autofill run result to the JSONL run log"""
    result = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "job_url": job_url,
        "platform": platform,
        "status": status,
    }
    if report is not None:
        result["native_autofill_detected"] = report.native_autofill_detected
        result["outcomes"] = report.summary()
        result["failed_fields"] = [o.field for o in report.failed]

    path = path or config.RUN_LOG_PATH
    with open(path, "a", encoding="utf-8") as f:
        f.write(json.dumps(result, ensure_ascii=False) + "\n")

    logging.getLogger(__name__).info("[%s] %s %s", status, platform or "unknown", job_url)
    return result
