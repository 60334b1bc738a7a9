"""Data models for articles, view state and configuration."""

from .article import Article, ArticleSource, filter_valid_articles, is_displayable
from .view_state import Category, RenderMode, ViewState, filter_articles

__all__ = [
    "Article",
    "ArticleSource",
    "Category",
    "RenderMode",
    "ViewState",
    "filter_articles",
    "filter_valid_articles",
    "is_displayable",
]
