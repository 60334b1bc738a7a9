"""News API integration service.

This module provides the fetch gateway for top headlines, either directly
against the news provider (server side only) or through the key-injecting
proxy.
"""
import asyncio
import json
import logging
from typing import Any, Optional, Union

import aiohttp

from ..models.article import Article, filter_valid_articles
from ..models.view_state import Category

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://newsapi.org"
DEFAULT_COUNTRY = "us"
DEFAULT_TIMEOUT = 10

HEADLINES_PATH = "/v2/top-headlines"

GENERIC_HTTP_ERROR = "Network response was not ok. Your API key might be invalid or has expired."


class NewsApiError(Exception):
    """News API error."""

    CONFIGURATION = "CONFIGURATION"
    TRANSPORT = "TRANSPORT"
    HTTP_ERROR = "HTTP_ERROR"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    INVALID_RESPONSE = "INVALID_RESPONSE"

    def __init__(self, message: str, error_code: str = "UNKNOWN", details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"


def parse_headlines(payload: Any) -> list[Article]:
    """
    解析頭條回應並建立工作集.

    Args:
        payload: 已解碼的 JSON 回應

    Returns:
        list[Article]: 過濾後的文章，保留原始順序

    Raises:
        NewsApiError: 供應商回報錯誤或回應格式無效
    """
    if not isinstance(payload, dict):
        raise NewsApiError("Response body is not a JSON object", NewsApiError.INVALID_RESPONSE)

    if payload.get("status") == "error":
        raise NewsApiError(
            payload.get("message") or "News provider reported an error",
            NewsApiError.PROVIDER_ERROR,
            {"code": payload.get("code")},
        )

    items = payload.get("articles")
    if not isinstance(items, list):
        raise NewsApiError("Response is missing the articles list", NewsApiError.INVALID_RESPONSE)

    return filter_valid_articles(item for item in items if isinstance(item, dict))


def _decode_json(body: bytes) -> Any:
    try:
        return json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError, TypeError):
        return None


class BaseNewsService:
    """頭條抓取的共用 HTTP 邏輯."""

    def __init__(self, timeout: Union[int, float, str] = DEFAULT_TIMEOUT, session: Optional[aiohttp.ClientSession] = None):
        self.timeout = float(timeout)
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "BaseNewsService":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """關閉自行建立的連線."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    async def _request(self, url: str, params: dict[str, str]) -> tuple[int, bytes]:
        """
        發送 GET 請求.

        Args:
            url: 請求 URL
            params: 查詢參數

        Returns:
            tuple[int, bytes]: HTTP 狀態碼與原始回應內容 (未解碼)

        Raises:
            NewsApiError: 連線失敗或逾時
        """
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        session = self._get_session()

        try:
            async with session.get(url, params=params, timeout=timeout) as response:
                body = await response.read()
                return response.status, body
        except asyncio.TimeoutError:
            logger.warning(f"請求逾時 ({self.timeout}s): {url}")
            raise NewsApiError(
                f"Request timed out after {self.timeout:g} seconds", NewsApiError.TRANSPORT
            )
        except aiohttp.ClientError as e:
            logger.warning(f"連線失敗: {url}: {e}")
            raise NewsApiError(str(e) or e.__class__.__name__, NewsApiError.TRANSPORT)

    def _interpret(self, status: int, body: bytes) -> list[Article]:
        payload = _decode_json(body)

        if not 200 <= status < 300:
            message = payload.get("message") if isinstance(payload, dict) else None
            raise NewsApiError(
                f"HTTP {status}: {message or GENERIC_HTTP_ERROR}",
                NewsApiError.HTTP_ERROR,
                {"status": status, "body": body.decode("utf-8", errors="replace")},
            )

        if payload is None:
            raise NewsApiError("Response body is not valid UTF-8 JSON", NewsApiError.INVALID_RESPONSE)

        return parse_headlines(payload)

    async def fetch_top_headlines(self, category: Union[Category, str]) -> list[Article]:
        raise NotImplementedError


class NewsApiService(BaseNewsService):
    """News API 直接存取服務 (僅供伺服器端使用)."""

    def __init__(self, config: dict[str, Any], session: Optional[aiohttp.ClientSession] = None):
        super().__init__(timeout=config.get("timeout") or DEFAULT_TIMEOUT, session=session)
        self.api_url = (config.get("api_url") or DEFAULT_API_URL).rstrip("/")
        self.api_key = config.get("api_key") or ""
        self.country = config.get("country") or DEFAULT_COUNTRY

        logger.info(f"News API 服務初始化: {self.api_url}")

    @property
    def headlines_url(self) -> str:
        return f"{self.api_url}{HEADLINES_PATH}"

    async def fetch_raw(self, category: Union[Category, str]) -> tuple[int, bytes]:
        """
        取得供應商的原始回應，不解讀 HTTP 狀態.

        Args:
            category: 新聞分類

        Returns:
            tuple[int, bytes]: HTTP 狀態碼與原始回應內容

        Raises:
            NewsApiError: 未設定 API 金鑰或連線失敗
        """
        if not self.api_key:
            raise NewsApiError(
                "API key is missing. Set NEWSWAVE_API_KEY in the environment.",
                NewsApiError.CONFIGURATION,
            )

        params = {"country": self.country, "category": str(category), "apiKey": self.api_key}
        logger.debug(f"GET {self.headlines_url}?country={self.country}&category={category}&apiKey=***")
        return await self._request(self.headlines_url, params)

    async def fetch_top_headlines(self, category: Union[Category, str]) -> list[Article]:
        """Fetch and validate top headlines for a category."""
        status, body = await self.fetch_raw(category)
        articles = self._interpret(status, body)
        logger.info(f"取得 {len(articles)} 篇頭條: {category}")
        return articles


class ProxyNewsService(BaseNewsService):
    """透過代理端點取得頭條，客戶端不持有 API 金鑰."""

    def __init__(self, config: dict[str, Any], session: Optional[aiohttp.ClientSession] = None):
        super().__init__(timeout=config.get("timeout") or DEFAULT_TIMEOUT, session=session)
        self.proxy_url = config.get("proxy_url") or ""

        logger.info(f"代理服務初始化: {self.proxy_url or '(未設定)'}")

    async def fetch_top_headlines(self, category: Union[Category, str]) -> list[Article]:
        """Fetch and validate top headlines for a category through the proxy."""
        if not self.proxy_url:
            raise NewsApiError(
                "Proxy URL is missing. Set NEWSWAVE_PROXY_URL in the environment.",
                NewsApiError.CONFIGURATION,
            )

        logger.debug(f"GET {self.proxy_url}?category={category}")
        status, body = await self._request(self.proxy_url, {"category": str(category)})
        articles = self._interpret(status, body)
        logger.info(f"取得 {len(articles)} 篇頭條: {category}")
        return articles


def create_news_service(
    config: dict[str, str], direct: Optional[bool] = None, session: Optional[aiohttp.ClientSession] = None
) -> BaseNewsService:
    """
    依配置建立抓取服務.

    Args:
        config: ConfigLoader 載入的配置
        direct: 強制直接模式；None 時依 ``client.mode`` 決定
        session: 共用的 aiohttp session

    Returns:
        BaseNewsService: NewsApiService 或 ProxyNewsService
    """
    if direct is None:
        direct = config.get("client.mode", "proxy") == "direct"

    if direct:
        return NewsApiService(
            {
                "api_url": config.get("news.api_url"),
                "api_key": config.get("news.api_key"),
                "country": config.get("news.country"),
                "timeout": config.get("news.timeout"),
            },
            session=session,
        )

    return ProxyNewsService(
        {"proxy_url": config.get("proxy.url"), "timeout": config.get("news.timeout")},
        session=session,
    )
