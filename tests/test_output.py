from __future__ import annotations

import io
import json
from datetime import datetime

import pytest
import yaml

from ark_client.errors import UnsupportedOutputFormatError
from ark_client.output import OutputOptions, print_with_format, render_table, validate_output_format
from ark_client.restore import Restore, build_restore
from ark_client.selector import parse_selector


def _restore():
    return build_restore(
        backup_name="daily",
        now=datetime(2017, 8, 3, 4, 5, 6),
        labels={"team": "infra"},
        selector=parse_selector("app=web"),
    )


@pytest.mark.parametrize("fmt", ["", "table", "json", "yaml"])
def test_validate_accepts_known_formats(fmt: str) -> None:
    validate_output_format(fmt)


def test_validate_rejects_unknown_format() -> None:
    with pytest.raises(UnsupportedOutputFormatError, match="'xml'"):
        validate_output_format("xml")


def test_no_format_prints_nothing() -> None:
    out = io.StringIO()
    assert print_with_format(_restore(), OutputOptions(), out) is False
    assert out.getvalue() == ""


def test_json_output_is_the_api_object() -> None:
    out = io.StringIO()
    assert print_with_format(_restore(), OutputOptions(format="json"), out) is True
    payload = json.loads(out.getvalue())
    assert payload["kind"] == "Restore"
    assert payload["metadata"]["name"] == "daily-20170803040506"
    assert payload["spec"]["labelSelector"] == {"matchLabels": {"app": "web"}}


def test_yaml_output_is_the_api_object() -> None:
    out = io.StringIO()
    assert print_with_format(_restore(), OutputOptions(format="yaml"), out) is True
    payload = yaml.safe_load(out.getvalue())
    assert payload["apiVersion"] == "ark.heptio.com/v1"
    assert payload["spec"]["backupName"] == "daily"


def test_table_output_has_restore_columns() -> None:
    lines = render_table([_restore()], OutputOptions(format="table")).splitlines()
    assert lines[0].split() == ["NAME", "BACKUP", "STATUS", "WARNINGS", "ERRORS", "CREATED", "SELECTOR"]
    assert lines[1].split() == ["daily-20170803040506", "daily", "<none>", "0", "0", "<unknown>", "app=web"]


def test_table_output_label_columns_and_show_labels() -> None:
    options = OutputOptions(format="table", show_labels=True, label_columns=["team", "missing"])
    lines = render_table([_restore()], options).splitlines()
    assert lines[0].split()[-3:] == ["TEAM", "MISSING", "LABELS"]
    assert lines[1].endswith("team=infra")
    assert "infra" in lines[1].split()


def test_table_output_shows_server_phase() -> None:
    restore = Restore.from_dict({**_restore().to_dict(), "status": {"phase": "InProgress"}})
    lines = render_table([restore], OutputOptions(format="table")).splitlines()
    assert lines[1].split()[2] == "InProgress"
