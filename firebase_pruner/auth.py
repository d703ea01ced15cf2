from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional
from pathlib import Path
import json
import os

import google.auth
from google.auth.exceptions import DefaultCredentialsError
from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account

from .errors import ConfigurationInvalid


SCOPES = ["https://www.googleapis.com/auth/cloud-platform"]
AMBIENT_ENV_VAR = "GOOGLE_APPLICATION_CREDENTIALS"


class CredentialKind(Enum):
    INLINE_KEY = "inline_key"
    KEY_FILE = "key_file"
    AMBIENT = "ambient"


@dataclass(frozen=True)
class CredentialSource:
    kind: CredentialKind
    value: Optional[str] = None

    def describe(self) -> str:
        if self.kind is CredentialKind.INLINE_KEY:
            return "inline service account key"
        if self.kind is CredentialKind.KEY_FILE:
            return f"service account key file {self.value}"
        return f"ambient default credentials ({AMBIENT_ENV_VAR}={self.value})"


def resolve_credential_source(
    key_json: Optional[str],
    key_path: Optional[str],
    environ: Optional[Mapping[str, str]] = None,
) -> CredentialSource:
    """Pick the single credential source for the run.

    An explicit key (inline JSON or file path) wins over ambient credentials;
    giving both explicit forms is ambiguous and rejected.
    """
    environ = os.environ if environ is None else environ
    if key_json and key_path:
        raise ConfigurationInvalid(
            "Provide only one of service-account-key-json or service-account-key-path."
        )
    if key_json:
        return CredentialSource(CredentialKind.INLINE_KEY, key_json)
    if key_path:
        return CredentialSource(CredentialKind.KEY_FILE, key_path)
    ambient = environ.get(AMBIENT_ENV_VAR)
    if ambient:
        return CredentialSource(CredentialKind.AMBIENT, ambient)
    raise ConfigurationInvalid(
        'Either "service-account-key-json", "service-account-key-path", '
        f"or {AMBIENT_ENV_VAR} env must be provided."
    )


def load_credentials(source: CredentialSource) -> Any:
    if source.kind is CredentialKind.INLINE_KEY:
        try:
            info = json.loads(source.value or "")
        except ValueError as err:
            raise ConfigurationInvalid(f"Service account key JSON is malformed: {err}") from err
        if not isinstance(info, dict):
            raise ConfigurationInvalid("Service account key JSON must be an object.")
        try:
            return service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
        except ValueError as err:
            raise ConfigurationInvalid(f"Invalid service account key: {err}") from err

    if source.kind is CredentialKind.KEY_FILE:
        key_file = Path(source.value or "")
        if not key_file.is_file():
            raise ConfigurationInvalid(f"Service account key file not found: {key_file}")
        try:
            return service_account.Credentials.from_service_account_file(
                str(key_file), scopes=SCOPES
            )
        except ValueError as err:
            raise ConfigurationInvalid(f"Invalid service account key file {key_file}: {err}") from err

    try:
        credentials, _ = google.auth.default(scopes=SCOPES)
    except DefaultCredentialsError as err:
        raise ConfigurationInvalid(f"Default credentials unavailable: {err}") from err
    return credentials


def create_session(source: CredentialSource) -> AuthorizedSession:
    """Build the authorized HTTP session handed to every remote call.

    No request is made here; the token is fetched on first use.
    """
    return AuthorizedSession(load_credentials(source))
