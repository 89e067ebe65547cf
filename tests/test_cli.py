"""Command-line entry point."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest

from vipps_mobilepay import AuthError, InboundRequest, SignatureVerifier
from vipps_mobilepay.cli import build_parser, run_cli

CREDENTIALS = [
    "--set", "VIPPS_CLIENT_ID=id",
    "--set", "VIPPS_CLIENT_SECRET=secret",
    "--set", "VIPPS_SUBSCRIPTION_KEY=sub",
    "--set", "VIPPS_MSN=123456",
]


@pytest.fixture()
def env_file(tmp_path, monkeypatch):
    for key in (
        "VIPPS_CLIENT_ID",
        "VIPPS_CLIENT_SECRET",
        "VIPPS_SUBSCRIPTION_KEY",
        "VIPPS_MSN",
        "VIPPS_WEBHOOK_SECRET",
        "VIPPS_WEBHOOK_SIGNING_SCHEME",
    ):
        monkeypatch.delenv(key, raising=False)
    return str(tmp_path / "missing.env")


class TestParser:
    def test_override_must_be_key_value(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--set", "novalue", "token"])

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestRunCli:
    def test_missing_credentials_fail(self, env_file):
        assert run_cli(["--env-file", env_file, "token"]) == 1

    @patch("vipps_mobilepay.cli.create_client")
    def test_token_success(self, create_client, env_file):
        client = MagicMock()
        client.tokens.is_valid.return_value = True
        create_client.return_value = client

        assert run_cli(["--env-file", env_file, *CREDENTIALS, "token"]) == 0
        client.tokens.ensure_valid.assert_called_once_with()

    @patch("vipps_mobilepay.cli.create_client")
    def test_token_failure_returns_one(self, create_client, env_file):
        client = MagicMock()
        client.tokens.ensure_valid.side_effect = AuthError("status 401")
        create_client.return_value = client

        assert run_cli(["--env-file", env_file, *CREDENTIALS, "token"]) == 1

    @patch("vipps_mobilepay.cli.create_client")
    def test_webhooks_delete(self, create_client, env_file):
        client = MagicMock()
        create_client.return_value = client

        code = run_cli(["--env-file", env_file, *CREDENTIALS, "webhooks", "delete", "wh-1"])

        assert code == 0
        client.webhooks.delete.assert_called_once_with("wh-1")

    @patch("vipps_mobilepay.cli.create_client")
    def test_payment_prints_json(self, create_client, env_file, capsys):
        client = MagicMock()
        client.payments.get.return_value.raw = {"reference": "order-1", "state": "CREATED"}
        create_client.return_value = client

        assert run_cli(["--env-file", env_file, *CREDENTIALS, "payment", "order-1"]) == 0
        assert json.loads(capsys.readouterr().out)["state"] == "CREATED"

    def test_sign_requires_secret(self, env_file, tmp_path):
        body_file = tmp_path / "body.json"
        body_file.write_bytes(b"{}")

        assert run_cli(["--env-file", env_file, "sign", str(body_file)]) == 1

    def test_sign_prints_verifiable_headers(self, env_file, tmp_path, capsys):
        body = b'{"name": "CAPTURED", "reference": "order-1"}'
        body_file = tmp_path / "body.json"
        body_file.write_bytes(body)

        code = run_cli(
            [
                "--env-file", env_file,
                "--set", "VIPPS_WEBHOOK_SECRET=cli-secret",
                "sign", str(body_file),
                "--path", "/hook",
                "--host", "example.com",
            ]
        )

        assert code == 0
        headers = json.loads(capsys.readouterr().out)
        request = InboundRequest.build("POST", "/hook", headers, body)
        SignatureVerifier("cli-secret").verify(request)
