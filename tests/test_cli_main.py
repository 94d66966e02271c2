from __future__ import annotations

import io
import json
import types

import pytest
import requests

from ark_client.cli.main import main


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch) -> None:
    for name in ("ARK_SERVER", "ARK_TOKEN", "ARK_NAMESPACE"):
        monkeypatch.delenv(name, raising=False)


def test_version_json_has_expected_fields(tmp_path) -> None:
    out = io.StringIO()
    err = io.StringIO()

    rc = main(["--config", str(tmp_path / "missing.toml"), "version", "--json"], stdout=out, stderr=err)
    assert rc == 0
    assert err.getvalue() == ""

    payload = json.loads(out.getvalue())
    assert payload["cli"] == "ark"
    assert payload["api_version"] == "ark.heptio.com/v1"
    assert payload["namespace"] == "heptio-ark"
    assert isinstance(payload["client_version"], str)


def test_version_text_output(tmp_path) -> None:
    out = io.StringIO()
    err = io.StringIO()

    rc = main(["--config", str(tmp_path / "missing.toml"), "version"], stdout=out, stderr=err)
    assert rc == 0
    assert out.getvalue().startswith("ark ")
    assert "server: http://localhost:8001" in out.getvalue()


def test_invalid_config_returns_error(tmp_path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("timeout = -1\n", encoding="utf-8")

    out = io.StringIO()
    err = io.StringIO()

    rc = main(["--config", str(config_path), "restore", "create", "daily"], stdout=out, stderr=err)
    assert rc == 1
    assert "config error: timeout must be greater than zero" in err.getvalue()
    assert out.getvalue() == ""


def test_invalid_boolean_config_returns_error(tmp_path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text('verify_tls = "maybe"\n', encoding="utf-8")

    err = io.StringIO()
    rc = main(["--config", str(config_path), "version"], stdout=io.StringIO(), stderr=err)
    assert rc == 1
    assert "verify_tls must be a boolean" in err.getvalue()


def test_missing_subcommand_exits_with_usage() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["restore"], stdout=io.StringIO(), stderr=io.StringIO())
    assert excinfo.value.code == 2


def test_positional_after_version_is_rejected(tmp_path) -> None:
    err = io.StringIO()
    rc = main(["--config", str(tmp_path / "missing.toml"), "version", "extra"], stdout=io.StringIO(), stderr=err)
    assert rc == 1
    assert err.getvalue() == "An error occurred: unexpected arguments: extra\n"


def test_non_json_create_response_reports_error(tmp_path, monkeypatch) -> None:
    def fake_request(self, method, url, **kwargs):  # noqa: ANN001, ANN003
        def _json():
            raise ValueError("Expecting value: line 1 column 1 (char 0)")

        return types.SimpleNamespace(status_code=201, json=_json, text="<html>ok</html>")

    monkeypatch.setattr(requests.Session, "request", fake_request)

    out = io.StringIO()
    err = io.StringIO()
    rc = main(["--config", str(tmp_path / "missing.toml"), "restore", "create", "daily"], stdout=out, stderr=err)

    assert rc == 2
    assert out.getvalue() == ""
    assert err.getvalue().startswith("An error occurred: invalid response from server: Expecting value")
