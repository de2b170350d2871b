"""Ordered fallback chains for pulling values out of scraped HTML.

Theater markup varies between pages, so each value is looked up by trying a
list of small strategies in turn; the first one that yields text wins.
"""

from collections.abc import Callable, Iterable

from bs4 import Tag

Strategy = Callable[[Tag], str | None]


def first_match(node: Tag, strategies: Iterable[Strategy]) -> str | None:
    """Return the first non-empty value produced by *strategies* for *node*."""
    for strategy in strategies:
        value = strategy(node)
        if value:
            return value
    return None


def child_text(selector: str) -> Strategy:
    """Text of the first descendant matching a CSS selector."""

    def strategy(node: Tag) -> str | None:
        found = node.select_one(selector)
        if found is None:
            return None
        return found.get_text(" ", strip=True) or None

    return strategy


def child_attr(selector: str, attr: str) -> Strategy:
    """Attribute of the first descendant matching a CSS selector."""

    def strategy(node: Tag) -> str | None:
        found = node.select_one(selector)
        if found is None:
            return None
        value = found.get(attr)
        return str(value).strip() if value else None

    return strategy


def own_attr(attr: str) -> Strategy:
    """Attribute of the node itself."""

    def strategy(node: Tag) -> str | None:
        value = node.get(attr)
        return str(value).strip() if value else None

    return strategy


def own_text() -> Strategy:
    """Text content of the node itself."""

    def strategy(node: Tag) -> str | None:
        return node.get_text(" ", strip=True) or None

    return strategy
