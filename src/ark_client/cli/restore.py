"""``ark restore create`` options and lifecycle."""

from __future__ import annotations

import argparse
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Protocol

from ark_client.errors import ArgumentCountError
from ark_client.flag import KeyValueMap, StringArray, describe_default
from ark_client.logging_utils import LOG
from ark_client.output import OutputOptions, print_with_format, validate_output_format
from ark_client.restore import DEFAULT_NAMESPACE, Restore, build_restore
from ark_client.selector import LabelSelector, LabelSelectorFlag

LABELS_FLAG = KeyValueMap()
NAMESPACES_FLAG = StringArray()
NAMESPACE_MAPPINGS_FLAG = KeyValueMap().with_entry_delimiter(",").with_key_value_delimiter(":")
SELECTOR_FLAG = LabelSelectorFlag()
LABEL_COLUMNS_FLAG = StringArray()


class RestoreCreator(Protocol):
    def create_restore(self, namespace: str, body: dict) -> dict: ...


def _now() -> datetime:
    return datetime.now()


class CreateOptions:
    """Flag values for one ``restore create`` invocation."""

    def __init__(
        self,
        *,
        namespace: str = DEFAULT_NAMESPACE,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.backup_name = ""
        self.restore_volumes = False
        self.labels: dict[str, str] = {}
        self.namespaces: list[str] = []
        self.namespace_mappings: dict[str, str] = {}
        self.selector = LabelSelector()
        self.output = OutputOptions()
        self.namespace = namespace
        self._clock = clock or _now

    def bind_flags(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("args", nargs="*", metavar="BACKUP", help="name of the backup to restore")
        parser.add_argument(
            "--restore-volumes",
            action="store_true",
            default=self.restore_volumes,
            help="whether to restore volumes from snapshots",
        )
        parser.add_argument(
            "--labels",
            type=LABELS_FLAG,
            default=self.labels,
            help=describe_default("labels to apply to the restore", LABELS_FLAG, self.labels),
        )
        parser.add_argument(
            "--namespaces",
            type=NAMESPACES_FLAG,
            default=self.namespaces,
            help=describe_default(
                "comma-separated list of namespaces to restore",
                NAMESPACES_FLAG,
                self.namespaces,
            ),
        )
        parser.add_argument(
            "--namespace-mappings",
            type=NAMESPACE_MAPPINGS_FLAG,
            default=self.namespace_mappings,
            help=describe_default(
                "namespace mappings from name in the backup to desired restored name "
                "in the form src1:dst1,src2:dst2,...",
                NAMESPACE_MAPPINGS_FLAG,
                self.namespace_mappings,
            ),
        )
        parser.add_argument(
            "-l",
            "--selector",
            type=SELECTOR_FLAG,
            default=self.selector,
            help=describe_default(
                "only restore resources matching this label selector",
                SELECTOR_FLAG,
                self.selector,
            ),
        )
        parser.add_argument(
            "-o",
            "--output",
            default=self.output.format,
            help="output format: table, json or yaml; prints the restore instead of creating it",
        )
        parser.add_argument(
            "--show-labels",
            action="store_true",
            default=self.output.show_labels,
            help="show labels in the last column (table output)",
        )
        parser.add_argument(
            "--label-columns",
            type=LABEL_COLUMNS_FLAG,
            default=self.output.label_columns,
            help="comma-separated list of labels to show as columns (table output)",
        )

    def load_flags(self, args: argparse.Namespace) -> None:
        self.restore_volumes = args.restore_volumes
        self.labels = dict(args.labels)
        self.namespaces = list(args.namespaces)
        self.namespace_mappings = dict(args.namespace_mappings)
        self.selector = args.selector
        self.output = OutputOptions(
            format=args.output,
            show_labels=args.show_labels,
            label_columns=list(args.label_columns),
        )

    def validate(self, args: Sequence[str]) -> None:
        if len(args) != 1:
            raise ArgumentCountError("you must specify only one argument, the backup's name")
        validate_output_format(self.output.format)

    def complete(self, args: Sequence[str]) -> None:
        self.backup_name = args[0]

    def build(self) -> Restore:
        return build_restore(
            backup_name=self.backup_name,
            now=self._clock(),
            namespace=self.namespace,
            labels=self.labels,
            namespaces=self.namespaces,
            namespace_mapping=self.namespace_mappings,
            selector=self.selector,
            restore_pvs=self.restore_volumes,
        )

    def run(self, client_factory: Callable[[], RestoreCreator], *, stdout) -> Restore | None:
        restore = self.build()
        LOG.info("built restore %s/%s", restore.namespace, restore.name)

        if print_with_format(restore, self.output, stdout):
            return None

        client = client_factory()
        created = Restore.from_dict(client.create_restore(restore.namespace, restore.to_dict()))
        print(f'Restore "{created.name}" created successfully.', file=stdout)
        return created


def execute(
    options: CreateOptions,
    args: Sequence[str],
    client_factory: Callable[[], RestoreCreator],
    *,
    stdout,
) -> Restore | None:
    options.validate(args)
    options.complete(args)
    return options.run(client_factory, stdout=stdout)
