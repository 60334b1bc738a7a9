"""Article data model.

This module defines the Article data class, the working-set filter and the
display helpers used by the list and detail views.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Optional, Union

REMOVED_TITLE = "[Removed]"

LIST_PLACEHOLDER_URL = "https://placehold.co/600x400/1e293b/94a3b8?text={source}"
DETAIL_PLACEHOLDER_URL = "https://placehold.co/800x400/1e293b/94a3b8?text=Full+Story"


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


@dataclass(frozen=True)
class ArticleSource:
    """新聞來源."""

    name: str = ""
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "ArticleSource":
        """Create source from the provider's ``source`` object; anything but a dict is ignored."""
        if not isinstance(data, dict):
            return cls()
        return cls(name=_text(data.get("name")) or "", id=_text(data.get("id")))


@dataclass(frozen=True)
class Article:
    """新聞文章資料模型 (唯讀)."""

    title: str
    source: ArticleSource = field(default_factory=ArticleSource)
    description: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None
    url_to_image: Optional[str] = None
    url: Optional[str] = None
    published_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Article":
        """Create article from a provider JSON object."""
        return cls(
            title=_text(data.get("title")) or "",
            source=ArticleSource.from_dict(data.get("source")),
            description=_text(data.get("description")),
            content=_text(data.get("content")),
            author=_text(data.get("author")),
            url_to_image=_text(data.get("urlToImage")),
            url=_text(data.get("url")),
            published_at=_text(data.get("publishedAt")),
        )

    def to_dict(self) -> dict:
        """Convert article to a dictionary using provider key names."""
        return {
            "source": {"id": self.source.id, "name": self.source.name},
            "author": self.author,
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "urlToImage": self.url_to_image,
            "publishedAt": self.published_at,
            "content": self.content,
        }

    @property
    def key(self) -> str:
        """Stable identity for list rendering."""
        return f"{self.url}-{self.published_at}"

    def image_url(self, detail: bool = False) -> str:
        """Return the article image or a placeholder."""
        if self.url_to_image:
            return self.url_to_image
        if detail:
            return DETAIL_PLACEHOLDER_URL
        return LIST_PLACEHOLDER_URL.format(source=self.source.name.replace(" ", "+"))

    def publication_date(self) -> str:
        """Format ``published_at`` as e.g. ``March 5, 2025``."""
        if not self.published_at:
            return ""

        try:
            published = datetime.fromisoformat(self.published_at.replace("Z", "+00:00"))
        except ValueError:
            return self.published_at

        return f"{published.strftime('%B')} {published.day}, {published.year}"

    def summary(self) -> str:
        return self.description or "No summary available."

    def body(self) -> str:
        return self.content or self.description or "Full content not available."

    def byline(self) -> str:
        return self.author or "Unknown Author"


def is_displayable(item: Union[Article, dict, None]) -> bool:
    """Check whether an article may enter the working set.

    Args:
        item: Article or raw provider dictionary

    Returns:
        bool: False for a missing, empty or non-string title or the ``[Removed]`` sentinel
    """
    if item is None:
        return False

    title = item.get("title") if isinstance(item, dict) else item.title
    return isinstance(title, str) and bool(title) and title != REMOVED_TITLE


def filter_valid_articles(items: Iterable[Any]) -> list[Article]:
    """
    建立工作集：移除無標題或已刪除的文章，保留原始順序.

    Args:
        items: 供應商回傳的文章 (dict 或 Article)

    Returns:
        list[Article]: 工作集
    """
    articles = []
    for item in items:
        if not is_displayable(item):
            continue
        articles.append(Article.from_dict(item) if isinstance(item, dict) else item)
    return articles
