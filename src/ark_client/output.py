"""Output-format gate for printing objects instead of submitting them."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from ark_client.errors import ArkError, UnsupportedOutputFormatError
from ark_client.restore import Restore
from ark_client.selector import format_selector

OUTPUT_TABLE = "table"
OUTPUT_JSON = "json"
OUTPUT_YAML = "yaml"
VALID_OUTPUT_FORMATS = (OUTPUT_TABLE, OUTPUT_JSON, OUTPUT_YAML)

RESTORE_COLUMNS = ("NAME", "BACKUP", "STATUS", "WARNINGS", "ERRORS", "CREATED", "SELECTOR")
_COLUMN_PADDING = 3


@dataclass
class OutputOptions:
    format: str = ""
    show_labels: bool = False
    label_columns: list[str] = field(default_factory=list)


def validate_output_format(output_format: str) -> None:
    if output_format == "" or output_format in VALID_OUTPUT_FORMATS:
        return
    raise UnsupportedOutputFormatError(
        f"invalid output format {output_format!r} - valid values are "
        "'table', 'json', and 'yaml'"
    )


def _load_yaml_module() -> Any:
    try:
        import yaml
    except Exception as exc:  # pragma: no cover
        raise ArkError("YAML output not available. Install PyYAML to use `-o yaml`.") from exc
    return yaml


def _format_labels(labels) -> str:
    if not labels:
        return "<none>"
    return ",".join(f"{key}={labels[key]}" for key in sorted(labels))


def _restore_row(restore: Restore, options: OutputOptions) -> list[str]:
    selector = format_selector(restore.spec.label_selector)
    row = [
        restore.name,
        restore.spec.backup_name,
        restore.status.phase or "<none>",
        str(restore.status.warnings),
        str(restore.status.errors),
        restore.metadata.creation_timestamp or "<unknown>",
        selector or "<none>",
    ]
    row.extend(restore.metadata.labels.get(key, "") for key in options.label_columns)
    if options.show_labels:
        row.append(_format_labels(restore.metadata.labels))
    return row


def render_table(restores: list[Restore], options: OutputOptions) -> str:
    headers = list(RESTORE_COLUMNS)
    headers.extend(key.upper() for key in options.label_columns)
    if options.show_labels:
        headers.append("LABELS")
    rows = [headers] + [_restore_row(restore, options) for restore in restores]
    widths = [max(len(row[idx]) for row in rows) for idx in range(len(headers))]
    lines = []
    for row in rows:
        cells = [cell.ljust(width + _COLUMN_PADDING) for cell, width in zip(row[:-1], widths)]
        cells.append(row[-1])
        lines.append("".join(cells).rstrip())
    return "\n".join(lines)


def render(restore: Restore, options: OutputOptions) -> str:
    if options.format == OUTPUT_JSON:
        return json.dumps(restore.to_dict(), indent=2)
    if options.format == OUTPUT_YAML:
        yaml = _load_yaml_module()
        return yaml.safe_dump(restore.to_dict(), default_flow_style=False, sort_keys=False).rstrip("\n")
    if options.format == OUTPUT_TABLE:
        return render_table([restore], options)
    raise UnsupportedOutputFormatError(f"unsupported output format {options.format!r}")


def print_with_format(restore: Restore, options: OutputOptions, stdout) -> bool:
    """Print *restore* when an output format is set.

    Returns ``False`` without printing anything when no format was requested,
    so the caller goes on to submit the object.
    """
    if not options.format:
        return False
    print(render(restore, options), file=stdout)
    return True


__all__ = [
    "OUTPUT_JSON",
    "OUTPUT_TABLE",
    "OUTPUT_YAML",
    "OutputOptions",
    "VALID_OUTPUT_FORMATS",
    "print_with_format",
    "render",
    "render_table",
    "validate_output_format",
]
