"""設定讀取模組（YAML 設定檔 + 環境變數覆寫）。"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel

BASE_DIR = Path(__file__).resolve().parents[1]
CONFIG_PATH = BASE_DIR / "config" / "settings.yaml"


class ConfigurationError(RuntimeError):
    """啟動時即無法修復的設定錯誤（例如缺少資料庫密碼）。"""


# =========================
# 設定模型
# =========================
class APISettings(BaseModel):
    prefix: str = "/api"
    docs_url: str = "/docs"
    openapi_url: str = "/openapi.json"


class AppSettings(BaseModel):
    name: str = "User Activity Dashboard"
    environment: str = "development"
    default_locale: str = "zh-TW"


class SourceDBSettings(BaseModel):
    """資料來源設定。backend=mysql 為正式環境；duckdb 供本機離線檢視。"""
    backend: str = "mysql"      # "mysql" / "duckdb"
    host: str = "localhost"
    port: int = 3306
    database: str = "mysqlTutorial"
    username: str = "admin"
    password: str = ""
    charset: str = "utf8mb4"
    connect_timeout: int = 10   # 秒
    duckdb_path: str = "./data/feeds.duckdb"


class FeedSettings(BaseModel):
    row_limit: int = 1000
    fetch_workers: int = 8


class LoggingSettings(BaseModel):
    level: str = "INFO"
    json: bool = False
    use_localtime: bool = False
    file_enabled: bool = False
    file_path: str = "logs/dashboard.log"
    file_level: Optional[str] = None
    max_bytes: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5
    console_level: Optional[str] = None


class Settings(BaseModel):
    app: AppSettings = AppSettings()
    api: APISettings = APISettings()
    source_db: SourceDBSettings = SourceDBSettings()
    feeds: FeedSettings = FeedSettings()
    logging: LoggingSettings = LoggingSettings()

    class Config:
        frozen = True


# =========================
# 載入與環境覆寫
# =========================
def _load_yaml_config(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        return data if isinstance(data, dict) else {}


def _env(key: str, default: Any) -> Any:
    val = os.getenv(key)
    return default if val is None or val == "" else val


def _env_flag(key: str, default: Any) -> bool:
    return str(_env(key, default)).lower() in ("1", "true", "yes")


def _apply_env_overrides(cfg: Dict[str, Any]) -> Dict[str, Any]:
    # api
    api = cfg.setdefault("api", {})
    api["prefix"] = _env("API_PREFIX", api.get("prefix", "/api"))
    api["docs_url"] = _env("API_DOCS_URL", api.get("docs_url", "/docs"))
    api["openapi_url"] = _env("API_OPENAPI_URL", api.get("openapi_url", "/openapi.json"))

    # app（表名結尾與顯示時區為固定約定，不在設定中）
    app = cfg.setdefault("app", {})
    app["environment"] = _env("APP_ENV", app.get("environment", "development"))
    app["default_locale"] = _env("APP_LOCALE", app.get("default_locale", "zh-TW"))

    # source_db（沿用原本 DB_* 環境變數命名）
    defaults = SourceDBSettings()
    src = cfg.setdefault("source_db", {})
    src["backend"] = str(_env("SOURCE_BACKEND", src.get("backend", defaults.backend))).lower()
    src["host"] = _env("DB_HOST", src.get("host", defaults.host))
    src["port"] = int(_env("DB_PORT", src.get("port", defaults.port)))
    src["database"] = _env("DB_NAME", src.get("database", defaults.database))
    src["username"] = _env("DB_USER", src.get("username", defaults.username))
    src["password"] = _env("DB_PASSWORD", src.get("password", defaults.password))
    src["charset"] = _env("DB_CHARSET", src.get("charset", defaults.charset))
    src["connect_timeout"] = int(_env("DB_CONNECT_TIMEOUT", src.get("connect_timeout", defaults.connect_timeout)))
    src["duckdb_path"] = _env("DUCKDB_PATH", src.get("duckdb_path", defaults.duckdb_path))

    # feeds
    feeds = cfg.setdefault("feeds", {})
    feeds["row_limit"] = int(_env("FEED_ROW_LIMIT", feeds.get("row_limit", 1000)))
    feeds["fetch_workers"] = int(_env("FEED_FETCH_WORKERS", feeds.get("fetch_workers", 8)))

    # logging
    log = cfg.setdefault("logging", {})
    log["level"] = _env("LOG_LEVEL", log.get("level", "INFO"))
    log["json"] = _env_flag("LOG_JSON", log.get("json", False))
    log["use_localtime"] = _env_flag("LOG_LOCALTIME", log.get("use_localtime", False))
    log["file_enabled"] = _env_flag("LOG_FILE_ENABLED", log.get("file_enabled", False))
    log["file_path"] = _env("LOG_FILE_PATH", log.get("file_path", "logs/dashboard.log"))
    log["file_level"] = _env("LOG_FILE_LEVEL", log.get("file_level", log.get("level", "INFO")))
    log["max_bytes"] = int(_env("LOG_MAX_BYTES", log.get("max_bytes", 10 * 1024 * 1024)))
    log["backup_count"] = int(_env("LOG_BACKUP_COUNT", log.get("backup_count", 5)))
    log["console_level"] = _env("LOG_CONSOLE_LEVEL", log.get("console_level", log.get("level", "INFO")))

    return cfg


def require_source_credentials(cfg: Settings) -> None:
    """MySQL 模式下缺少密碼視為啟動失敗，不做重試。"""
    if cfg.source_db.backend == "mysql" and not cfg.source_db.password:
        raise ConfigurationError("DB_PASSWORD environment variable is required")


@lru_cache
def get_settings() -> Settings:
    """取得設定，使用快取避免重複 IO。"""
    data = _load_yaml_config(CONFIG_PATH)
    merged = _apply_env_overrides(data)
    return Settings.model_validate(merged)


settings = get_settings()
