"""紀錄器設定（console / JSON / 輪替檔案）。

套件內的模組紀錄器（``feed_dashboard.*``）不各自掛 handler，統一往上傳到
``feed_dashboard`` 套件紀錄器；套件紀錄器本身不再往 root 傳遞。
"""

from __future__ import annotations

import json
import logging
import os
import time
from logging import Logger
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, List

from feed_dashboard.config.settings import LoggingSettings, settings

PACKAGE_LOGGER = "feed_dashboard"


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        # 以 extra={"extra": {...}} 傳入的欄位直接併入
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _formatter(cfg: LoggingSettings) -> logging.Formatter:
    fmt: logging.Formatter
    if cfg.json:
        fmt = _JsonFormatter()
    else:
        fmt = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s", "%Y-%m-%d %H:%M:%S")
    fmt.converter = time.localtime if cfg.use_localtime else time.gmtime
    return fmt


def _handlers(cfg: LoggingSettings) -> List[logging.Handler]:
    console = logging.StreamHandler()
    console.setLevel(cfg.console_level or cfg.level)
    console.setFormatter(_formatter(cfg))
    handlers: List[logging.Handler] = [console]

    if cfg.file_enabled:
        log_dir = os.path.dirname(cfg.file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        rotating = RotatingFileHandler(
            cfg.file_path,
            maxBytes=cfg.max_bytes,
            backupCount=cfg.backup_count,
            encoding="utf-8",
        )
        rotating.setLevel(cfg.file_level or cfg.level)
        rotating.setFormatter(_formatter(cfg))
        handlers.append(rotating)
    return handlers


def _configure(logger: Logger, cfg: LoggingSettings) -> Logger:
    logger.setLevel(cfg.level)
    for handler in _handlers(cfg):
        logger.addHandler(handler)
    # 不向 root 傳遞，避免 uvicorn / streamlit 重複列印
    logger.propagate = False
    return logger


def get_logger(name: str) -> Logger:
    """取得紀錄器；第一次呼叫時依設定掛上 handler。"""
    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        if not package_logger.handlers:
            _configure(package_logger, settings.logging)
        return logging.getLogger(name)

    logger = logging.getLogger(name)
    if not logger.handlers:
        _configure(logger, settings.logging)
    return logger
