"""Delimited flag value types.

Each type parses raw option text into a structured value and serializes it
back to the canonical text form. Instances are callable so they can be used
directly as an argparse ``type=``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from ark_client.errors import MalformedEntryError

DEFAULT_ENTRY_DELIMITER = ","
DEFAULT_KEY_VALUE_DELIMITER = "="


@dataclass(frozen=True)
class StringArray:
    entry_delimiter: str = DEFAULT_ENTRY_DELIMITER

    def parse(self, raw: str) -> list[str]:
        if raw == "":
            return []
        return raw.split(self.entry_delimiter)

    def serialize(self, value: Sequence[str]) -> str:
        return self.entry_delimiter.join(value)

    def __call__(self, raw: str) -> list[str]:
        return self.parse(raw)


@dataclass(frozen=True)
class KeyValueMap:
    entry_delimiter: str = DEFAULT_ENTRY_DELIMITER
    key_value_delimiter: str = DEFAULT_KEY_VALUE_DELIMITER

    def with_entry_delimiter(self, delimiter: str) -> KeyValueMap:
        return KeyValueMap(entry_delimiter=delimiter, key_value_delimiter=self.key_value_delimiter)

    def with_key_value_delimiter(self, delimiter: str) -> KeyValueMap:
        return KeyValueMap(entry_delimiter=self.entry_delimiter, key_value_delimiter=delimiter)

    def parse(self, raw: str) -> dict[str, str]:
        data: dict[str, str] = {}
        if raw == "":
            return data
        for entry in raw.split(self.entry_delimiter):
            key, sep, value = entry.partition(self.key_value_delimiter)
            if not sep:
                raise MalformedEntryError(
                    f"error parsing {entry!r}: expected key{self.key_value_delimiter}value"
                )
            # later entries overwrite earlier ones
            data[key] = value
        return data

    def serialize(self, value: Mapping[str, str]) -> str:
        return self.entry_delimiter.join(
            f"{key}{self.key_value_delimiter}{value[key]}" for key in sorted(value)
        )

    def __call__(self, raw: str) -> dict[str, str]:
        return self.parse(raw)


def describe_default(help_text: str, flag_type, default) -> str:
    """Append the serialized default to *help_text* when it is non-empty."""
    rendered = flag_type.serialize(default)
    if not rendered:
        return help_text
    return f'{help_text} (default "{rendered}")'


__all__ = [
    "DEFAULT_ENTRY_DELIMITER",
    "DEFAULT_KEY_VALUE_DELIMITER",
    "KeyValueMap",
    "StringArray",
    "describe_default",
]
