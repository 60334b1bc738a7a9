"""Headlines proxy server.

This module provides the aiohttp application that injects the provider API key
server-side and relays the provider's response to clients verbatim.
"""
import logging
from typing import Optional

from aiohttp import web

from ..models.view_state import Category
from .news_api_service import NewsApiError, NewsApiService

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "API key is not set."

SERVICE_KEY = web.AppKey("news_service", NewsApiService)


def _json_message(message: str, status: int) -> web.Response:
    return web.json_response({"message": message}, status=status)


async def handle_headlines(request: web.Request) -> web.Response:
    """
    代理頭條請求.

    Args:
        request: 需包含 ``category`` 查詢參數

    Returns:
        web.Response: 供應商的狀態碼與 JSON 內容 (原樣轉發)
    """
    service = request.app[SERVICE_KEY]
    category_param = request.query.get("category", "")

    try:
        category = Category.parse(category_param)
    except ValueError:
        logger.warning(f"無效的分類參數: {category_param!r}")
        return _json_message(f"Invalid category: {category_param}", 400)

    if not service.api_key:
        logger.error("代理未設定 API 金鑰")
        return _json_message(MISSING_KEY_MESSAGE, 500)

    try:
        status, body = await service.fetch_raw(category)
    except NewsApiError as e:
        logger.error(f"轉發請求失敗: {e}")
        status_code = 500 if e.error_code == NewsApiError.CONFIGURATION else 502
        return _json_message(e.message, status_code)

    if status >= 400:
        logger.warning(f"供應商回傳錯誤狀態 {status}: {category}")
    else:
        logger.info(f"轉發頭條: {category} ({status})")

    return web.Response(status=status, body=body, content_type="application/json")


async def handle_health(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok"})


async def _close_service(app: web.Application) -> None:
    await app[SERVICE_KEY].close()


def create_app(config: dict[str, str], service: Optional[NewsApiService] = None) -> web.Application:
    """
    建立代理應用程式.

    Args:
        config: ConfigLoader 載入的配置
        service: 注入的 NewsApiService (測試用)，未提供時依配置建立

    Returns:
        web.Application: aiohttp 應用程式
    """
    if service is None:
        service = NewsApiService(
            {
                "api_url": config.get("news.api_url"),
                "api_key": config.get("news.api_key"),
                "country": config.get("news.country"),
                "timeout": config.get("news.timeout"),
            }
        )

    app = web.Application()
    app[SERVICE_KEY] = service

    path = config.get("proxy.path") or "/api/news"
    app.router.add_get(path, handle_headlines)
    app.router.add_get("/health", handle_health)
    app.on_cleanup.append(_close_service)

    logger.info(f"代理路由: GET {path}")
    return app


def run_server(config: dict[str, str], host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Run the proxy until interrupted."""
    app = create_app(config)
    bind_host = host or config.get("proxy.host") or "127.0.0.1"
    bind_port = int(port or config.get("proxy.port") or 8888)

    logger.info(f"代理伺服器啟動: http://{bind_host}:{bind_port}")
    web.run_app(app, host=bind_host, port=bind_port, print=None)
