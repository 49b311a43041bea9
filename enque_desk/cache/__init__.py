"""In-process query cache and the ticket conversation preloader."""

from enque_desk.cache.query_cache import QueryCache, QueryKey
from enque_desk.cache.ticket_preloader import (
    PreloaderRegistry,
    PreloadOptions,
    PreloadStats,
    TicketPreloader,
    ticket_html_key,
)

__all__ = [
    "PreloadOptions",
    "PreloadStats",
    "PreloaderRegistry",
    "QueryCache",
    "QueryKey",
    "TicketPreloader",
    "ticket_html_key",
]
