"""Configuration loader implementation.

This module implements configuration loading from defaults, config files and
environment variables.
"""
import json
import logging
import os
from pathlib import Path
from typing import Optional

from ..models.config import DEFAULT_CONFIG, mask_value, validate_config_value

logger = logging.getLogger(__name__)


class ConfigLoader:
    """配置載入器，支援環境變數和配置檔案載入."""

    def __init__(self, env_prefix: str = "NEWSWAVE_"):
        self._cached_config: Optional[dict[str, str]] = None
        self._config_sources: list[str] = []

        # 環境變數前綴
        self.env_prefix = env_prefix

        logger.debug("配置載入器初始化完成")

    async def load_config(
        self,
        config_file: Optional[Path] = None,
        use_environment: bool = True,
        use_defaults: bool = True,
    ) -> dict[str, str]:
        """
        載入配置，按優先順序合併不同來源.

        優先順序: 環境變數 > 配置檔案 > 預設值

        Args:
            config_file: 配置檔案路徑
            use_environment: 是否使用環境變數
            use_defaults: 是否使用預設值

        Returns:
            dict[str, str]: 合併後的配置
        """
        config: dict[str, str] = {}
        self._config_sources = []

        # 1. 載入預設值
        if use_defaults:
            for key, value in DEFAULT_CONFIG.items():
                config[key] = str(value)
            self._config_sources.append("defaults")
            logger.debug("載入預設配置")

        # 2. 載入配置檔案
        if config_file:
            file_config = await self.load_from_file(Path(config_file))
            config.update(file_config)
            self._config_sources.append(f"file:{config_file}")
            logger.debug(f"載入檔案配置: {config_file}")

        # 3. 載入環境變數 (最高優先順序)
        if use_environment:
            env_config = await self.load_from_environment()
            config.update(env_config)
            self._config_sources.append("environment")
            logger.debug("載入環境變數配置")

        # 4. 驗證配置
        validated_config = await self.validate_config(config)

        # 快取配置
        self._cached_config = validated_config

        logger.info(f"配置載入完成，來源: {', '.join(self._config_sources)}")
        return validated_config

    async def load_from_file(self, config_file: Path) -> dict[str, str]:
        """從配置檔案載入配置."""
        config: dict[str, str] = {}

        if not config_file.exists():
            logger.warning(f"配置檔案不存在: {config_file}")
            return config

        try:
            if config_file.suffix.lower() == ".json":
                # JSON 格式
                with open(config_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError(f"JSON 配置檔案必須為物件: {config_file}")
                for key, value in data.items():
                    config[key] = str(value)
            else:
                # .env 或純文字格式
                with open(config_file, "r", encoding="utf-8") as f:
                    for line_num, line in enumerate(f, 1):
                        line = line.strip()

                        # 跳過空行和註解
                        if not line or line.startswith("#"):
                            continue

                        # 解析 KEY=VALUE 格式
                        if "=" in line:
                            key, value = line.split("=", 1)
                            key = key.strip()
                            value = value.strip()

                            # 移除引號
                            if value.startswith('"') and value.endswith('"'):
                                value = value[1:-1]
                            elif value.startswith("'") and value.endswith("'"):
                                value = value[1:-1]

                            config[self._env_to_config_key(key)] = value
                        else:
                            logger.warning(f"無效的配置格式 ({config_file}:{line_num}): {line}")

            logger.debug(f"從檔案載入 {len(config)} 項配置: {config_file}")
            return config

        except Exception as e:
            logger.error(f"載入配置檔案失敗 ({config_file}): {e}")
            raise

    async def load_from_environment(self) -> dict[str, str]:
        """從環境變數載入配置."""
        config: dict[str, str] = {}

        for env_key, env_value in os.environ.items():
            if env_key.startswith(self.env_prefix):
                config[self._env_to_config_key(env_key)] = env_value

        logger.debug(f"從環境變數載入 {len(config)} 項配置")
        return config

    def _env_to_config_key(self, env_key: str) -> str:
        """轉換環境變數名稱為配置鍵."""
        if env_key.startswith(self.env_prefix):
            key = env_key[len(self.env_prefix):]
        else:
            key = env_key

        # 已知配置鍵的完整名稱，例如 NEWS_API_KEY -> news.api_key
        known_keys = {self._strip_prefix(self._config_to_env_key(k)): k for k in DEFAULT_CONFIG}
        if key.upper() in known_keys:
            return known_keys[key.upper()]

        # 處理常見的縮寫
        key = key.lower().replace("_", ".")
        key_mappings = {
            "api.key": "news.api_key",
            "api.url": "news.api_url",
            "country": "news.country",
            "timeout": "news.timeout",
            "mode": "client.mode",
        }

        return key_mappings.get(key, key)

    def _config_to_env_key(self, config_key: str) -> str:
        """轉換配置鍵為環境變數名稱."""
        env_key = config_key.upper().replace(".", "_")
        return f"{self.env_prefix}{env_key}"

    def _strip_prefix(self, env_key: str) -> str:
        return env_key[len(self.env_prefix):]

    async def validate_config(self, config: dict[str, str]) -> dict[str, str]:
        """驗證配置值."""
        errors = []

        for key, value in config.items():
            try:
                validate_config_value(key, value)
            except ValueError as e:
                errors.append(f"配置值無效: {key}={mask_value(key, value)} ({e})")

        if errors:
            error_message = "配置驗證失敗:\n" + "\n".join(errors)
            logger.error(error_message)
            raise ValueError(error_message)

        logger.debug(f"配置驗證通過: {len(config)} 項")
        return dict(config)

    def get_config_sources(self) -> list[str]:
        """取得配置來源列表."""
        return self._config_sources.copy()

    def get_cached_config(self) -> Optional[dict[str, str]]:
        """取得快取的配置."""
        return self._cached_config.copy() if self._cached_config else None

    def get_masked_config(self) -> dict[str, str]:
        """取得遮蔽敏感值後的配置，用於顯示."""
        if not self._cached_config:
            return {}
        return {key: mask_value(key, value) for key, value in self._cached_config.items()}
