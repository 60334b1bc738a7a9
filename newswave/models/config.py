"""Config data model.

This module defines configuration keys, default values and per-key validation.
"""
from typing import Any

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "news.api_url": "https://newsapi.org",  # 新聞 API 端點
    "news.api_key": "",  # 新聞 API 金鑰 (僅限伺服器端)
    "news.country": "us",  # 頭條國家代碼
    "news.timeout": 10,  # 請求超時時間（秒）
    "client.mode": "proxy",  # 客戶端模式: proxy | direct
    "proxy.url": "http://localhost:8888/api/news",  # 代理端點
    "proxy.host": "127.0.0.1",  # 代理綁定位址
    "proxy.port": 8888,  # 代理綁定埠號
    "proxy.path": "/api/news",  # 代理路由
}

CLIENT_MODES = {"proxy", "direct"}

SENSITIVE_WORDS = ("password", "key", "token", "secret")


class ConfigKey:
    """Configuration key constants."""

    # News provider settings
    NEWS_API_URL = "news.api_url"
    NEWS_API_KEY = "news.api_key"
    NEWS_COUNTRY = "news.country"
    NEWS_TIMEOUT = "news.timeout"

    # Client settings
    CLIENT_MODE = "client.mode"

    # Proxy settings
    PROXY_URL = "proxy.url"
    PROXY_HOST = "proxy.host"
    PROXY_PORT = "proxy.port"
    PROXY_PATH = "proxy.path"


def is_sensitive_key(key: str) -> bool:
    """Check if configuration key holds a secret."""
    return any(word in key.lower() for word in SENSITIVE_WORDS)


def mask_value(key: str, value: Any) -> str:
    """Mask secret values for display."""
    if is_sensitive_key(key):
        return "***" if value else "(not set)"
    return str(value)


def _as_int(key: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} 必須為整數")


def validate_config_value(key: str, value: Any) -> None:
    """Validate configuration value for specific key.

    Raises:
        ValueError: when the value is invalid for the key
    """
    if key in (ConfigKey.NEWS_API_URL, ConfigKey.PROXY_URL):
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{key} 不可為空")
        if not (value.startswith("http://") or value.startswith("https://")):
            raise ValueError(f"{key} 必須為有效的 URL")

    elif key == ConfigKey.NEWS_TIMEOUT:
        timeout = _as_int(key, value)
        if not 1 <= timeout <= 120:
            raise ValueError(f"{key} 必須介於 1 與 120 之間")

    elif key == ConfigKey.PROXY_PORT:
        port = _as_int(key, value)
        if not 1 <= port <= 65535:
            raise ValueError(f"{key} 必須介於 1 與 65535 之間")

    elif key == ConfigKey.PROXY_PATH:
        if not isinstance(value, str) or not value.startswith("/"):
            raise ValueError(f"{key} 必須以 / 開頭")

    elif key == ConfigKey.CLIENT_MODE:
        if value not in CLIENT_MODES:
            raise ValueError(f"{key} 必須為以下值之一: {sorted(CLIENT_MODES)}")

    elif key == ConfigKey.NEWS_COUNTRY:
        if not isinstance(value, str) or len(value) != 2 or not value.isalpha():
            raise ValueError(f"{key} 必須為兩碼國家代碼")
