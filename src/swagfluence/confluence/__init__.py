"""Confluence page rendering and publishing.

:class:`PageFormatter` turns endpoints into storage-format markup;
:class:`ConfluenceClient` and :class:`ConsolePublisher` deliver it.
"""

from swagfluence.confluence.client import (
    ConfluenceClient,
    ConsolePublisher,
    PageClient,
    parent_page_title,
)
from swagfluence.confluence.formatter import PageFormatter, render_parent_page

__all__ = [
    "ConfluenceClient",
    "ConsolePublisher",
    "PageClient",
    "PageFormatter",
    "parent_page_title",
    "render_parent_page",
]
