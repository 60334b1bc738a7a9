"""View state controller.

This module owns the reader's view state and exposes the four user intents:
category selection, search, article selection and back navigation.
"""
import logging
from typing import Optional, Union

from ..models.article import Article
from ..models.view_state import DEFAULT_CATEGORY, Category, RenderMode, ViewState
from .news_api_service import BaseNewsService, NewsApiError

logger = logging.getLogger(__name__)


class ViewStateController:
    """畫面狀態控制器."""

    def __init__(self, news_service: BaseNewsService, category: Union[Category, str] = DEFAULT_CATEGORY):
        self.news_service = news_service
        self._state = ViewState(category=Category.parse(category))
        # 每次切換分類遞增，用於丟棄過期回應
        self._fetch_seq = 0

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def render_mode(self) -> RenderMode:
        return self._state.render_mode

    @property
    def filtered_articles(self) -> list[Article]:
        return list(self._state.filtered_articles)

    @property
    def is_empty_feed(self) -> bool:
        """True when the provider returned no displayable articles."""
        return self.render_mode == RenderMode.LIST and not self._state.articles

    @property
    def has_no_matches(self) -> bool:
        """True when articles exist but none match the search term."""
        return (
            self.render_mode == RenderMode.LIST
            and bool(self._state.articles)
            and not self._state.filtered_articles
        )

    async def select_category(self, category: Union[Category, str]) -> None:
        """
        切換分類並重新抓取頭條.

        重置搜尋字串、已選文章、文章列表與錯誤；若在回應前又切換分類，
        此次結果 (成功或失敗) 會被丟棄. 閘道的任何例外都記錄為錯誤訊息，
        不會向外拋出.

        Args:
            category: 新聞分類
        """
        category = Category.parse(category)
        self._fetch_seq += 1
        seq = self._fetch_seq

        state = self._state
        state.category = category
        state.search_term = ""
        state.selected_article = None
        state.articles = []
        state.error = None
        state.loading = True
        state.refresh_filtered()

        logger.info(f"切換分類: {category} (#{seq})")

        articles: Optional[list[Article]] = None
        error: Optional[str] = None
        try:
            articles = await self.news_service.fetch_top_headlines(category)
        except NewsApiError as e:
            error = e.message
        except Exception as e:
            logger.error(f"抓取頭條時發生未預期錯誤 ({category}): {e!r}")
            error = f"Unexpected error: {str(e) or e.__class__.__name__}"

        if seq != self._fetch_seq:
            logger.debug(f"丟棄過期回應: {category} (#{seq}, 目前 #{self._fetch_seq})")
            return

        if error is not None:
            logger.warning(f"抓取頭條失敗 ({category}): {error}")
            state.error = error
        else:
            state.articles = list(articles or [])

        state.loading = False
        state.refresh_filtered()

    def set_search_term(self, text: str) -> None:
        """Update the search term and recompute the filtered list."""
        self._state.search_term = text or ""
        self._state.refresh_filtered()
        logger.debug(f"搜尋: {self._state.search_term!r} -> {len(self._state.filtered_articles)} 篇")

    def select_article(self, article: Article) -> None:
        """
        選取文章並切換至詳細模式.

        Raises:
            ValueError: 文章不在目前的工作集中
        """
        if article not in self._state.articles:
            raise ValueError(f"文章不在目前的列表中: {article.title}")

        self._state.selected_article = article
        self._state.refresh_filtered()

    def go_back(self) -> None:
        """Clear the selected article and return to the list."""
        self._state.selected_article = None
        self._state.refresh_filtered()
