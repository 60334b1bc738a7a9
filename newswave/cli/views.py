"""Terminal views for the news reader.

Renders the controller state as plain text: header, loading/error lines,
the article list, the article detail and the footer.
"""
import textwrap
from datetime import datetime
from typing import Optional

from ..models.article import Article
from ..models.view_state import Category, RenderMode
from ..services.view_controller import ViewStateController

APP_TITLE = "NewsWave"
LOADING_MESSAGE = "Loading headlines..."
EMPTY_FEED_MESSAGE = "No articles found for this category. Try a different category."
NO_MATCH_MESSAGE = "No articles match \"{term}\". Try a different search or category."

WRAP_WIDTH = 78


def _wrap(text: str, indent: str = "") -> str:
    return textwrap.fill(text, width=WRAP_WIDTH, initial_indent=indent, subsequent_indent=indent)


def render_header(active: Category, search_term: str) -> str:
    bar = " ".join(
        f"[{category.label}]" if category == active else category.label for category in Category
    )
    lines = [APP_TITLE, f"Search: {search_term}" if search_term else "Search: (none)", bar]
    return "\n".join(lines)


def render_item(index: int, article: Article) -> str:
    lines = [f"{index:>2}. {article.title}"]
    meta = " | ".join(part for part in (article.source.name, article.publication_date()) if part)
    if meta:
        lines.append(f"    {meta}")
    lines.append(_wrap(article.summary(), indent="    "))
    return "\n".join(lines)


def render_list(articles: list[Article], search_term: str = "", feed_size: int = 0) -> str:
    """Render the numbered article list or an empty-state message.

    ``feed_size`` is the size of the unfiltered working set: zero means the
    provider returned nothing, otherwise the search matched nothing.
    """
    if not articles:
        if feed_size and search_term:
            return NO_MATCH_MESSAGE.format(term=search_term)
        return EMPTY_FEED_MESSAGE
    return "\n\n".join(render_item(index, article) for index, article in enumerate(articles, 1))


def render_detail(article: Article) -> str:
    """Render a single article."""
    byline = f"By {article.byline()}"
    date = article.publication_date()
    lines = [
        "← Back to News (b)",
        "",
        article.title,
        f"{byline} | {date}" if date else byline,
        f"Image: {article.image_url(detail=True)}",
        "",
        _wrap(article.body()),
    ]
    if article.url:
        lines += ["", f"Read the full story on {article.source.name} → {article.url}"]
    return "\n".join(lines)


def render_footer(year: Optional[int] = None) -> str:
    year = year or datetime.now().year
    return f"© {year} NewsWave. All Rights Reserved.\nPowered by NewsAPI.org"


def render_body(controller: ViewStateController) -> str:
    """Render the main area for the current render mode."""
    state = controller.state
    mode = controller.render_mode

    if mode == RenderMode.LOADING:
        return LOADING_MESSAGE
    if mode == RenderMode.ERROR:
        return f"Error: {state.error}"
    if mode == RenderMode.DETAIL:
        return render_detail(state.selected_article)
    return render_list(state.filtered_articles, state.search_term, len(state.articles))


def render_screen(controller: ViewStateController, year: Optional[int] = None) -> str:
    """Render header, body and footer."""
    state = controller.state
    rule = "-" * WRAP_WIDTH
    return "\n".join(
        [
            render_header(state.category, state.search_term),
            rule,
            render_body(controller),
            rule,
            render_footer(year),
        ]
    )
