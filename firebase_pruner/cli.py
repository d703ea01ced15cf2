from typing import Any, List, Optional
import argparse
import os

from dotenv import load_dotenv

from .api import list_apps
from .auth import create_session, resolve_credential_source
from .config import DEFAULT_MAX_DAYS, DEFAULT_MIN_COUNT, PrunerOptions, build_options, load_config
from .errors import ConfigurationInvalid, ListingFailed
from .inventory import collect_releases
from .pruner import print_releases, run_pruner
from .report import print_report
from .retention import sort_newest_first


EXIT_OK = 0
EXIT_RUN_FAILED = 1
EXIT_CONFIG_INVALID = 2


def print_extended_help() -> None:
    help_text = (
        "\n"
        "Firebase Artifact Pruner - Extended Help\n"
        "\n"
        "Deletes old Firebase App Distribution releases. A release is deleted\n"
        "only when it is not among the --min-count newest releases of its app\n"
        "AND it is older than --max-days days.\n"
        "\n"
        "Credentials (exactly one):\n"
        "  --service-account-key-json <json>   Inline service account key\n"
        "  -k, --service-account-key-path <f>  Service account key file\n"
        "  GOOGLE_APPLICATION_CREDENTIALS      Ambient default credentials\n"
        "\n"
        "Environment variables (override TOML, overridden by flags):\n"
        "  FIREBASE_PROJECT_ID, FIREBASE_APP_ID,\n"
        "  FIREBASE_SERVICE_ACCOUNT_KEY_JSON, FIREBASE_SERVICE_ACCOUNT_KEY_PATH,\n"
        "  PRUNER_MIN_COUNT, PRUNER_MAX_DAYS\n"
        "\n"
        "TOML Configuration:\n"
        "  [firebase] project_id, app_id, service_account_key_json,\n"
        "             service_account_key_path, timeout\n"
        "  [retention] min_count, max_days\n"
        "  dot_env = \".env\" | dot_envs = [\"a.env\", \"b.env\"] (optional)\n"
        "  Any value 'ENV_NAME' is replaced by $NAME from the environment (or .env).\n"
        "\n"
        "Exit codes:\n"
        "  0  all apps pruned cleanly\n"
        "  1  a listing or a delete chunk failed\n"
        "  2  invalid configuration, nothing was contacted\n"
        "\n"
        "Examples:\n"
        "  All apps:      firebase-pruner -p my-project -k key.json\n"
        "  One app:       firebase-pruner -p my-project -k key.json -a 1:123:android:abc\n"
        "  Keep 10/60d:   firebase-pruner -p my-project --min-count 10 --max-days 60\n"
        "  List apps:     firebase-pruner -p my-project -k key.json --list-apps\n"
    )
    print(help_text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Prune old Firebase App Distribution releases"
    )
    parser.add_argument("--config", "-c", help="Path to the TOML configuration file")
    parser.add_argument("--project-id", "-p", help="Firebase project ID")
    parser.add_argument(
        "--app-id", "-a", help="Process only this app (default: all apps in the project)"
    )
    parser.add_argument(
        "--service-account-key-json", help="Service account key as inline JSON"
    )
    parser.add_argument(
        "--service-account-key-path", "-k", help="Path to a service account key JSON file"
    )
    parser.add_argument(
        "--min-count",
        help=f"Minimum number of releases to keep (default: {DEFAULT_MIN_COUNT})",
    )
    parser.add_argument(
        "--max-days",
        help=f"Maximum age in days of releases to keep (default: {DEFAULT_MAX_DAYS})",
    )
    parser.add_argument(
        "--timeout", type=float, help="Per-request timeout in seconds (default: 60)"
    )
    parser.add_argument(
        "--list-apps", action="store_true", help="List the project's apps and exit"
    )
    parser.add_argument(
        "--list-releases",
        action="store_true",
        help="List releases of the target app(s), newest first, and exit",
    )
    parser.add_argument(
        "--help-extended", action="store_true", help="Show extended help and exit"
    )
    return parser


def _list_apps(session: Any, options: PrunerOptions) -> int:
    try:
        apps = list_apps(session, options.project_id, timeout=options.timeout)
    except ListingFailed as err:
        print(f"Error: {err}")
        return EXIT_RUN_FAILED
    if not apps:
        print("No apps found in this project.")
    for app in apps:
        print(f"- {app.name} (ID: {app.app_id}, Platform: {app.platform})")
    return EXIT_OK


def _list_releases(session: Any, options: PrunerOptions) -> int:
    try:
        if options.app_id:
            app_ids: List[str] = [options.app_id]
        else:
            app_ids = [
                a.app_id
                for a in list_apps(session, options.project_id, timeout=options.timeout)
            ]
    except ListingFailed as err:
        print(f"Error: {err}")
        return EXIT_RUN_FAILED
    code = EXIT_OK
    for app_id in app_ids:
        print(f"\nReleases for app {app_id}:")
        try:
            releases = collect_releases(
                session, options.project_id, app_id, timeout=options.timeout
            )
        except ListingFailed as err:
            print(f"Error: {err}")
            code = EXIT_RUN_FAILED
            continue
        if not releases:
            print("No releases found for this app.")
        print_releases(sort_newest_first(releases))
    return code


def run(argv: Optional[List[str]] = None) -> int:
    load_dotenv(dotenv_path=os.getenv("DOTENV_PATH", ".env"))

    args = build_parser().parse_args(argv)
    if args.help_extended:
        print_extended_help()
        return EXIT_OK

    try:
        options = build_options(args, load_config(args.config))
        source = resolve_credential_source(
            options.service_account_key_json, options.service_account_key_path
        )
        session = create_session(source)
    except ConfigurationInvalid as err:
        print(f"Configuration error: {err}")
        return EXIT_CONFIG_INVALID
    print(f"Using {source.describe()}")

    if args.list_apps:
        return _list_apps(session, options)
    if args.list_releases:
        return _list_releases(session, options)

    try:
        report = run_pruner(options, session)
    except ListingFailed as err:
        print(f"Error: {err}")
        return EXIT_RUN_FAILED
    print_report(report)
    return EXIT_RUN_FAILED if report.has_failures else EXIT_OK


def main() -> None:
    raise SystemExit(run())
