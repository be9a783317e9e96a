# asa_cli/http/pagination.py

from __future__ import annotations

import logging
from typing import Any, Iterator, List, Optional, Type, TypeVar

from asa_cli.models.selector import Selector

logger = logging.getLogger(__name__)

T = TypeVar("T")


def iter_pages(
    client: Any,
    path: str,
    selector: Selector,
    item_type: Type[T],
    max_pages: Optional[int] = None,
) -> Iterator[List[T]]:
    """
    Walk a POST .../find endpoint page by page.

    Parameters
    ----------
    client : ApiClient
        Anything with post(path, body=..., result_type=...) -> ApiResult.
    path : str
        The find endpoint, e.g. "/campaigns/find".
    selector : Selector
        Conditions, ordering and the starting offset/limit. Never mutated;
        each page goes out as selector.with_offset(offset).
    item_type : type
        Model each item is decoded into.
    max_pages : int | None
        Hard stop after this many requests. None means no cap.

    Stops after a page with no pagination info, once the running total
    reaches totalResults, or on an empty page. The next offset is the start
    offset plus the number of items received so far, not the nominal limit.
    Any error propagates and the pages already yielded are all the caller
    gets.
    """
    start = selector.pagination.offset
    offset = start
    received = 0
    pages = 0

    while True:
        result = client.post(
            path, body=selector.with_offset(offset), result_type=List[item_type]
        )
        page: List[T] = list(result.data or [])
        pages += 1
        received += len(page)
        yield page

        info = result.page_info
        if info is None or received >= info.total_results:
            break
        if not page:
            break
        if max_pages is not None and pages >= max_pages:
            logger.info("stopping %s after %d pages (max_pages)", path, pages)
            break

        offset = start + received
        logger.debug("next page %s offset=%d total=%d", path, offset, info.total_results)


def fetch_all(
    client: Any,
    path: str,
    selector: Selector,
    item_type: Type[T],
    max_pages: Optional[int] = None,
) -> List[T]:
    """Concatenate every page from iter_pages, in server order, no dedup."""
    items: List[T] = []
    for page in iter_pages(client, path, selector, item_type, max_pages=max_pages):
        items.extend(page)
    return items
