from typing import Any, List, Optional

from .api import DEFAULT_TIMEOUT, TRANSPORT_ERRORS, fetch_releases_page, page_items
from .errors import ListingFailed
from .models import Release


def collect_releases(
    session: Any,
    project_id: str,
    app_id: str,
    timeout: float = DEFAULT_TIMEOUT,
) -> List[Release]:
    """Return every release of ``app_id``, following ``nextPageToken``.

    Pages are concatenated in the order received. Any failed or malformed
    page aborts the listing with ListingFailed; partial inventories are
    never returned.
    """
    target = f"releases for app {app_id}"
    releases: List[Release] = []
    page_token: Optional[str] = None
    while True:
        try:
            resp = fetch_releases_page(
                session, project_id, app_id, page_token, timeout=timeout
            )
        except TRANSPORT_ERRORS as err:
            raise ListingFailed(target, None, str(err), app_id=app_id) from err
        if not resp.ok:
            raise ListingFailed(target, resp.status_code, resp.text, app_id=app_id)
        try:
            data = resp.json() or {}
            releases.extend(Release.from_api(r) for r in page_items(data, "releases"))
            page_token = data.get("nextPageToken")
            if page_token is not None and not isinstance(page_token, str):
                raise ValueError(f"'nextPageToken' is not a string: {page_token!r}")
        except (ValueError, TypeError, AttributeError) as err:
            raise ListingFailed(
                target, resp.status_code, f"invalid response: {err}", app_id=app_id
            ) from err
        if not page_token:
            return releases
