"""Tests for credential source resolution."""

from unittest.mock import MagicMock, patch

import pytest
from google.auth.exceptions import DefaultCredentialsError

from firebase_pruner.auth import (
    SCOPES,
    CredentialKind,
    CredentialSource,
    create_session,
    load_credentials,
    resolve_credential_source,
)
from firebase_pruner.errors import ConfigurationInvalid


class TestResolveCredentialSource:
    """Tests for resolve_credential_source."""

    def test_inline_key(self) -> None:
        source = resolve_credential_source('{"type": "service_account"}', None, environ={})
        assert source.kind is CredentialKind.INLINE_KEY

    def test_key_file(self) -> None:
        source = resolve_credential_source(None, "/keys/sa.json", environ={})
        assert source == CredentialSource(CredentialKind.KEY_FILE, "/keys/sa.json")

    def test_explicit_key_wins_over_ambient(self) -> None:
        environ = {"GOOGLE_APPLICATION_CREDENTIALS": "/adc.json"}
        source = resolve_credential_source(None, "/keys/sa.json", environ=environ)
        assert source.kind is CredentialKind.KEY_FILE

    def test_ambient(self) -> None:
        environ = {"GOOGLE_APPLICATION_CREDENTIALS": "/adc.json"}
        source = resolve_credential_source(None, None, environ=environ)
        assert source == CredentialSource(CredentialKind.AMBIENT, "/adc.json")

    def test_no_source(self) -> None:
        with pytest.raises(ConfigurationInvalid) as exc_info:
            resolve_credential_source(None, "", environ={})
        assert "GOOGLE_APPLICATION_CREDENTIALS" in str(exc_info.value)

    def test_both_explicit_sources_rejected(self) -> None:
        with pytest.raises(ConfigurationInvalid):
            resolve_credential_source("{}", "/keys/sa.json", environ={})


class TestLoadCredentials:
    """Tests for load_credentials."""

    def test_malformed_inline_json(self) -> None:
        with pytest.raises(ConfigurationInvalid):
            load_credentials(CredentialSource(CredentialKind.INLINE_KEY, "{not json"))

    def test_inline_json_must_be_object(self) -> None:
        with pytest.raises(ConfigurationInvalid):
            load_credentials(CredentialSource(CredentialKind.INLINE_KEY, "[1, 2]"))

    def test_inline_key_uses_service_account_info(self) -> None:
        with patch(
            "firebase_pruner.auth.service_account.Credentials.from_service_account_info"
        ) as from_info:
            from_info.return_value = "creds"
            creds = load_credentials(
                CredentialSource(CredentialKind.INLINE_KEY, '{"client_email": "a@b"}')
            )

        assert creds == "creds"
        from_info.assert_called_once_with({"client_email": "a@b"}, scopes=SCOPES)

    def test_incomplete_inline_key(self) -> None:
        with pytest.raises(ConfigurationInvalid):
            load_credentials(CredentialSource(CredentialKind.INLINE_KEY, '{"type": "service_account"}'))

    def test_missing_key_file(self, tmp_path) -> None:
        with pytest.raises(ConfigurationInvalid):
            load_credentials(CredentialSource(CredentialKind.KEY_FILE, str(tmp_path / "nope.json")))

    def test_key_file(self, tmp_path) -> None:
        key_file = tmp_path / "sa.json"
        key_file.write_text("{}")
        with patch(
            "firebase_pruner.auth.service_account.Credentials.from_service_account_file"
        ) as from_file:
            load_credentials(CredentialSource(CredentialKind.KEY_FILE, str(key_file)))

        from_file.assert_called_once_with(str(key_file), scopes=SCOPES)

    def test_ambient_unavailable(self) -> None:
        with patch(
            "firebase_pruner.auth.google.auth.default",
            side_effect=DefaultCredentialsError("no adc"),
        ):
            with pytest.raises(ConfigurationInvalid):
                load_credentials(CredentialSource(CredentialKind.AMBIENT, "/adc.json"))

    def test_create_session_wraps_credentials(self) -> None:
        creds = MagicMock()
        with patch("firebase_pruner.auth.load_credentials", return_value=creds), patch(
            "firebase_pruner.auth.AuthorizedSession"
        ) as session_cls:
            create_session(CredentialSource(CredentialKind.AMBIENT, "/adc.json"))

        session_cls.assert_called_once_with(creds)
