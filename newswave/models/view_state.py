"""View state data model.

This module defines the Category and RenderMode enums, the ViewState data
class and the pure search filter applied to the working set.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .article import Article


class Category(Enum):
    """新聞分類枚舉."""

    GENERAL = "general"
    BUSINESS = "business"
    TECHNOLOGY = "technology"
    ENTERTAINMENT = "entertainment"
    HEALTH = "health"
    SCIENCE = "science"
    SPORTS = "sports"

    def __str__(self) -> str:
        """Return string representation of category."""
        return self.value

    @property
    def label(self) -> str:
        """Capitalized label for the category bar."""
        return self.value.capitalize()

    @classmethod
    def parse(cls, category: "str | Category") -> "Category":
        """Create category from string."""
        if isinstance(category, cls):
            return category
        for item in cls:
            if item.value == str(category).strip().lower():
                return item
        raise ValueError(f"無效的新聞分類: {category}")

    @classmethod
    def values(cls) -> list[str]:
        return [item.value for item in cls]


DEFAULT_CATEGORY = Category.GENERAL


class RenderMode(Enum):
    """畫面模式枚舉."""

    LOADING = "loading"
    ERROR = "error"
    LIST = "list"
    DETAIL = "detail"

    def __str__(self) -> str:
        return self.value


def filter_articles(articles: list[Article], search_term: str) -> list[Article]:
    """
    依搜尋字串篩選文章標題 (不分大小寫的子字串比對).

    Args:
        articles: 工作集
        search_term: 搜尋字串，空字串時回傳全部文章

    Returns:
        list[Article]: 篩選結果，保留原始順序
    """
    needle = search_term.lower()
    return [article for article in articles if needle in article.title.lower()]


@dataclass
class ViewState:
    """新聞閱讀器的畫面狀態."""

    category: Category = DEFAULT_CATEGORY
    search_term: str = ""
    articles: list[Article] = field(default_factory=list)
    filtered_articles: list[Article] = field(default_factory=list)
    selected_article: Optional[Article] = None
    loading: bool = False
    error: Optional[str] = None

    @property
    def render_mode(self) -> RenderMode:
        """Derive the current render mode."""
        if self.loading:
            return RenderMode.LOADING
        if self.error:
            return RenderMode.ERROR
        if self.selected_article is not None:
            return RenderMode.DETAIL
        return RenderMode.LIST

    def refresh_filtered(self) -> None:
        """Recompute ``filtered_articles`` from ``articles`` and ``search_term``."""
        self.filtered_articles = filter_articles(self.articles, self.search_term)

    def to_dict(self) -> dict:
        """Convert view state to dictionary."""
        return {
            "category": self.category.value,
            "search_term": self.search_term,
            "articles": [article.to_dict() for article in self.articles],
            "filtered_articles": [article.to_dict() for article in self.filtered_articles],
            "selected_article": self.selected_article.to_dict() if self.selected_article else None,
            "loading": self.loading,
            "error": self.error,
            "render_mode": self.render_mode.value,
        }
