from typing import Any, Dict, List, Optional

from google.auth.exceptions import GoogleAuthError
import requests

from .errors import ListingFailed
from .models import App


API_ROOT = "https://firebaseappdistribution.googleapis.com/v1"
DEFAULT_TIMEOUT = 60
TRANSPORT_ERRORS = (requests.RequestException, GoogleAuthError)


def apps_url(project_id: str) -> str:
    return f"{API_ROOT}/projects/{project_id}/apps"


def releases_url(project_id: str, app_id: str) -> str:
    return f"{apps_url(project_id)}/{app_id}/releases"


def batch_delete_url(project_id: str, app_id: str) -> str:
    return f"{releases_url(project_id, app_id)}:batchDelete"


def page_items(data: Any, key: str) -> List[Any]:
    """Return the list stored under ``key`` of a decoded page.

    A missing or null key is an empty page; any other non-list value raises
    ValueError.
    """
    if not isinstance(data, dict):
        raise ValueError(f"page is not a JSON object: {data!r}")
    items = data.get(key)
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValueError(f"'{key}' is not a list: {items!r}")
    return items


def list_apps(
    session: Any, project_id: str, timeout: float = DEFAULT_TIMEOUT
) -> List[App]:
    target = f"apps for project {project_id}"
    try:
        resp = session.get(apps_url(project_id), timeout=timeout)
    except TRANSPORT_ERRORS as err:
        raise ListingFailed(target, None, str(err)) from err
    if not resp.ok:
        raise ListingFailed(target, resp.status_code, resp.text)
    try:
        return [App.from_api(entry) for entry in page_items(resp.json() or {}, "apps")]
    except (ValueError, TypeError, AttributeError) as err:
        raise ListingFailed(target, resp.status_code, f"invalid response: {err}") from err


def fetch_releases_page(
    session: Any,
    project_id: str,
    app_id: str,
    page_token: Optional[str] = None,
    timeout: float = DEFAULT_TIMEOUT,
):
    params: Dict[str, str] = {}
    if page_token:
        params["pageToken"] = page_token
    return session.get(
        releases_url(project_id, app_id), params=params or None, timeout=timeout
    )


def batch_delete(
    session: Any,
    project_id: str,
    app_id: str,
    names: List[str],
    timeout: float = DEFAULT_TIMEOUT,
):
    return session.post(
        batch_delete_url(project_id, app_id),
        json={"names": list(names)},
        timeout=timeout,
    )
