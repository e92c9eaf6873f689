"""Page-based "fetch all" aggregation.

Procore list endpoints take ``page`` (1-based) and ``per_page`` (max 100)
query parameters and expose no reliable total count, so a page shorter
than ``per_page`` is the only end-of-data signal.  When the total is an
exact multiple of the page size this costs one extra request that returns
zero items.
"""

from __future__ import annotations

import logging
from typing import Any

from procore_sdk.auth import AuthProvider
from procore_sdk.models import ARRAY, RequestDescriptor, ResponseShape
from procore_sdk.transport import API_VERSION, request

logger = logging.getLogger(__name__)

# Largest page Procore accepts.
PAGE_SIZE = 100


async def request_all(
    auth: AuthProvider,
    descriptor: RequestDescriptor,
    shape: ResponseShape = ARRAY,
    *,
    api_version: str = API_VERSION,
) -> list[Any]:
    """Fetch every page of *descriptor* and return the items in server order.

    *descriptor* must not carry ``page``/``per_page``; they are set here.
    A page whose payload does not match *shape* ends the listing.  Errors
    propagate as-is and discard whatever was accumulated.
    """
    results: list[Any] = []
    page = 1
    while True:
        payload = await request(
            auth,
            descriptor.with_query(page=page, per_page=PAGE_SIZE),
            api_version=api_version,
        )
        items = shape.extract(payload)
        if items is None:
            logger.debug("Page %d of %s is not a list, stopping", page, descriptor.endpoint)
            break

        results.extend(items)
        if len(items) < PAGE_SIZE:
            break
        page += 1

    logger.info("Fetched %d items from %s in %d page(s)", len(results), descriptor.endpoint, page)
    return results
