"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest

from firebase_pruner.models import Release


NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
PROJECT = "demo-project"
APP = "1:123456:android:abcdef"


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, payload: Any = None, text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Records every request and replays queued responses in order.

    A queued exception is raised instead of returned.
    """

    def __init__(self, get: Optional[List[Any]] = None, post: Optional[List[Any]] = None):
        self.get_queue = list(get or [])
        self.post_queue = list(post or [])
        self.get_calls: List[Dict[str, Any]] = []
        self.post_calls: List[Dict[str, Any]] = []

    def _next(self, queue: List[Any]) -> Any:
        if not queue:
            raise AssertionError("unexpected request")
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def get(self, url: str, params: Any = None, timeout: Any = None) -> Any:
        self.get_calls.append({"url": url, "params": params, "timeout": timeout})
        return self._next(self.get_queue)

    def post(self, url: str, json: Any = None, timeout: Any = None) -> Any:
        self.post_calls.append({"url": url, "json": json, "timeout": timeout})
        return self._next(self.post_queue)


def release_name(release_id: str, app_id: str = APP) -> str:
    return f"projects/{PROJECT}/apps/{app_id}/releases/{release_id}"


def make_release(release_id: str, days_old: float, now: datetime = NOW) -> Release:
    return Release(
        name=release_name(release_id),
        create_time=now - timedelta(days=days_old),
        display_version=f"1.0.{release_id}",
        build_version=release_id,
    )


def release_payload(release_id: str, days_old: float, now: datetime = NOW) -> Dict[str, Any]:
    created = now - timedelta(days=days_old)
    return {
        "name": release_name(release_id),
        "displayVersion": f"1.0.{release_id}",
        "buildVersion": release_id,
        "createTime": created.strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
        "releaseNotes": {"text": f"notes {release_id}"},
    }


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Remove every variable the pruner reads and run from an empty directory."""
    for name in (
        "FIREBASE_PROJECT_ID",
        "FIREBASE_APP_ID",
        "FIREBASE_SERVICE_ACCOUNT_KEY_JSON",
        "FIREBASE_SERVICE_ACCOUNT_KEY_PATH",
        "PRUNER_MIN_COUNT",
        "PRUNER_MAX_DAYS",
        "GOOGLE_APPLICATION_CREDENTIALS",
        "DOTENV_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
