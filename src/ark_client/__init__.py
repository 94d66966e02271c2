"""Ark client public surface."""

from ark_client.client import ArkClient
from ark_client.errors import (
    ArgumentCountError,
    ArkError,
    MalformedEntryError,
    MalformedSelectorError,
    ServerRequestError,
    SubmissionError,
    UnsupportedOutputFormatError,
)
from ark_client.flag import KeyValueMap, StringArray
from ark_client.output import VALID_OUTPUT_FORMATS, OutputOptions, print_with_format
from ark_client.restore import (
    DEFAULT_NAMESPACE,
    ObjectMeta,
    Restore,
    RestoreSpec,
    RestoreStatus,
    build_restore,
    restore_name,
)
from ark_client.selector import (
    LabelSelector,
    LabelSelectorFlag,
    SelectorRequirement,
    format_selector,
    parse_selector,
)

__all__ = [
    "ArkError",
    "ArgumentCountError",
    "UnsupportedOutputFormatError",
    "MalformedEntryError",
    "MalformedSelectorError",
    "SubmissionError",
    "ServerRequestError",
    "ArkClient",
    "StringArray",
    "KeyValueMap",
    "LabelSelector",
    "LabelSelectorFlag",
    "SelectorRequirement",
    "parse_selector",
    "format_selector",
    "DEFAULT_NAMESPACE",
    "ObjectMeta",
    "Restore",
    "RestoreSpec",
    "RestoreStatus",
    "build_restore",
    "restore_name",
    "OutputOptions",
    "VALID_OUTPUT_FORMATS",
    "print_with_format",
]
