import os
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _defaults() -> Dict[str, Any]:
    return {
        "log_level": "INFO",
        "log_file": None,
        "string_buffer_size": 1024,
        "show_limit": 50,
        "secret_key": "dev-secret-key",
    }


def _load_yaml_config(path: str) -> Dict[str, Any]:
    cfg = _defaults()
    if not os.path.exists(path):
        return cfg
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    cfg.update(data)
    return cfg


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def load_config(base_dir: str = BASE_DIR) -> Dict[str, Any]:
    """
    settings/.env（あれば）と settings/config.yaml を読み込む。
    ファイルが無ければデフォルト値を返す。
    """
    env_path = os.path.join(base_dir, "settings", ".env")
    if os.path.exists(env_path):
        load_dotenv(env_path, override=False)

    cfg = _load_yaml_config(os.path.join(base_dir, "settings", "config.yaml"))

    cfg["log_level"] = os.getenv("LOG_LEVEL", cfg.get("log_level", "INFO"))
    cfg["log_file"] = os.getenv("LOG_FILE", cfg.get("log_file"))
    cfg["string_buffer_size"] = _env_int("QUEUE_BUFFER_SIZE", int(cfg["string_buffer_size"]))
    cfg["show_limit"] = _env_int("QUEUE_SHOW_LIMIT", int(cfg["show_limit"]))
    cfg["secret_key"] = os.getenv("FLASK_SECRET_KEY", cfg.get("secret_key"))

    # バッファは 1 バイト以上、表示件数は 0 以上
    defaults = _defaults()
    if cfg["string_buffer_size"] <= 0:
        cfg["string_buffer_size"] = defaults["string_buffer_size"]
    if cfg["show_limit"] < 0:
        cfg["show_limit"] = defaults["show_limit"]
    return cfg
