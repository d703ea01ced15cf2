"""GitHub Actions entrypoint.

Inputs arrive as ``INPUT_<NAME>`` environment variables (name upper-cased,
spaces replaced by underscores). The composite action in ``action.yml`` exports
them with underscores for hyphens as well. Failures are reported with the
``::error::`` workflow command.
"""

from types import SimpleNamespace
from typing import Mapping, Optional
import os

from .auth import create_session, resolve_credential_source
from .cli import EXIT_CONFIG_INVALID, EXIT_OK, EXIT_RUN_FAILED
from .config import build_options
from .errors import ConfigurationInvalid, ListingFailed
from .pruner import run_pruner
from .report import print_report


def get_input(
    name: str, required: bool = False, environ: Optional[Mapping[str, str]] = None
) -> str:
    environ = os.environ if environ is None else environ
    key = f"INPUT_{name.replace(' ', '_').upper()}"
    # composite actions can only export underscore names
    raw = environ.get(key)
    if raw is None:
        raw = environ.get(key.replace("-", "_"))
    value = (raw or "").strip()
    if required and not value:
        raise ConfigurationInvalid(f"Input required and not supplied: {name}")
    return value


def escape_data(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def set_failed(message: str) -> None:
    print(f"::error::{escape_data(message)}")


def run(environ: Optional[Mapping[str, str]] = None) -> int:
    environ = os.environ if environ is None else environ
    try:
        inputs = SimpleNamespace(
            project_id=get_input("project-id", required=True, environ=environ),
            service_account_key_json=get_input("service-account-key-json", environ=environ),
            service_account_key_path=get_input("service-account-key-path", environ=environ),
            app_id=get_input("app-id", environ=environ),
            min_count=get_input("min-count", environ=environ),
            max_days=get_input("max-days", environ=environ),
        )
        options = build_options(inputs, {}, environ)
        source = resolve_credential_source(
            options.service_account_key_json, options.service_account_key_path, environ
        )
        session = create_session(source)
    except ConfigurationInvalid as err:
        set_failed(str(err))
        return EXIT_CONFIG_INVALID

    try:
        report = run_pruner(options, session)
    except ListingFailed as err:
        set_failed(str(err))
        return EXIT_RUN_FAILED
    print_report(report)
    if report.has_failures:
        failed = ", ".join(r.app_id for r in report.results if not r.ok)
        set_failed(f"Pruning finished with failures for app(s): {failed}")
        return EXIT_RUN_FAILED
    print("Firebase Artifact Pruner action completed successfully.")
    return EXIT_OK


def main() -> None:
    raise SystemExit(run())
