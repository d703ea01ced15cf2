from typing import Any, List

from .api import list_apps
from .config import PrunerOptions
from .deleter import delete_releases
from .errors import ListingFailed
from .inventory import collect_releases
from .models import App, AppResult, Outcome, PruneReport, Release, RetentionPolicy
from .retention import select_for_deletion


def print_releases(releases: List[Release]) -> None:
    for release in releases:
        print(f"- {release.label}, Created: {release.create_time.isoformat()}")


def prune_app(
    session: Any,
    project_id: str,
    app_id: str,
    policy: RetentionPolicy,
    timeout: float,
) -> AppResult:
    """Collect, select and delete for one app.

    ListingFailed is captured in the returned result instead of raised, so a
    caller iterating over apps always reaches the next one.
    """
    try:
        releases = collect_releases(session, project_id, app_id, timeout=timeout)
    except ListingFailed as err:
        print(f"Error listing releases for app {app_id}: {err}")
        return AppResult(app_id=app_id, error=err)

    if not releases:
        print("No releases found for this app.")
        return AppResult(app_id=app_id, outcome=Outcome())

    print(f"Found {len(releases)} release(s).")
    to_delete = select_for_deletion(releases, policy)
    if not to_delete:
        print("No releases to delete based on current criteria.")
        return AppResult(app_id=app_id, outcome=Outcome())

    print(f"Found {len(to_delete)} release(s) to delete:")
    print_releases(to_delete)
    outcome = delete_releases(
        session, project_id, app_id, [r.name for r in to_delete], timeout=timeout
    )
    return AppResult(app_id=app_id, outcome=outcome, selected=to_delete)


def run_pruner(options: PrunerOptions, session: Any) -> PruneReport:
    """Prune one app, or every app of the project in listing order.

    Raises ListingFailed only when the project's app listing itself fails.
    """
    report = PruneReport(project_id=options.project_id)
    policy = options.policy
    print(
        f"Retention: keep at least {policy.min_keep} release(s), "
        f"delete older than {policy.max_age_days} day(s)."
    )

    if options.app_id:
        print(
            f"Processing specified app: {options.app_id} for project: {options.project_id}"
        )
        report.results.append(
            prune_app(session, options.project_id, options.app_id, policy, options.timeout)
        )
        return report

    print(f"Fetching apps for project: {options.project_id}")
    apps: List[App] = list_apps(session, options.project_id, timeout=options.timeout)
    if not apps:
        print("No apps found in this project.")
        return report

    print(f"Found {len(apps)} app(s):")
    for app in apps:
        print(f"- {app.name} (ID: {app.app_id}, Platform: {app.platform})")

    for app in apps:
        print(f"\nProcessing app: {app.name} ({app.app_id})")
        report.results.append(
            prune_app(session, options.project_id, app.app_id, policy, options.timeout)
        )
    return report
