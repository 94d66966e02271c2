"""Restore request model and builder."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType

from ark_client.selector import LabelSelector

API_VERSION = "ark.heptio.com/v1"
RESTORE_KIND = "Restore"
DEFAULT_NAMESPACE = "heptio-ark"
NAME_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def _frozen_mapping(data: Mapping[str, str] | None) -> Mapping[str, str]:
    return MappingProxyType(dict(data or {}))


def _empty_mapping() -> Mapping[str, str]:
    return MappingProxyType({})


@dataclass(frozen=True)
class ObjectMeta:
    namespace: str
    name: str
    labels: Mapping[str, str] = field(default_factory=_empty_mapping)
    creation_timestamp: str | None = None
    uid: str | None = None


@dataclass(frozen=True)
class RestoreSpec:
    backup_name: str
    namespaces: tuple[str, ...] = ()
    namespace_mapping: Mapping[str, str] = field(default_factory=_empty_mapping)
    label_selector: LabelSelector = field(default_factory=LabelSelector)
    restore_pvs: bool = False


@dataclass(frozen=True)
class RestoreStatus:
    phase: str = ""
    validation_errors: tuple[str, ...] = ()
    warnings: int = 0
    errors: int = 0


def _count_results(result: object) -> int:
    # RestoreResult: {"ark": [...], "cluster": [...], "namespaces": {ns: [...]}}
    if not isinstance(result, dict):
        return 0
    count = len(result.get("ark") or []) + len(result.get("cluster") or [])
    namespaces = result.get("namespaces") or {}
    if isinstance(namespaces, dict):
        count += sum(len(items or []) for items in namespaces.values())
    return count


@dataclass(frozen=True)
class Restore:
    metadata: ObjectMeta
    spec: RestoreSpec
    status: RestoreStatus = field(default_factory=RestoreStatus)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    def to_dict(self) -> dict:
        metadata: dict = {"namespace": self.metadata.namespace, "name": self.metadata.name}
        if self.metadata.labels:
            metadata["labels"] = dict(self.metadata.labels)
        if self.metadata.creation_timestamp:
            metadata["creationTimestamp"] = self.metadata.creation_timestamp
        if self.metadata.uid:
            metadata["uid"] = self.metadata.uid

        selector = self.spec.label_selector
        status: dict = {}
        if self.status.phase:
            status["phase"] = self.status.phase
        if self.status.validation_errors:
            status["validationErrors"] = list(self.status.validation_errors)

        return {
            "apiVersion": API_VERSION,
            "kind": RESTORE_KIND,
            "metadata": metadata,
            "spec": {
                "backupName": self.spec.backup_name,
                "namespaces": list(self.spec.namespaces),
                "namespaceMapping": dict(self.spec.namespace_mapping),
                "labelSelector": None if selector.is_empty() else selector.to_dict(),
                "restorePVs": self.spec.restore_pvs,
            },
            "status": status,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Restore:
        metadata = data.get("metadata") or {}
        spec = data.get("spec") or {}
        status = data.get("status") or {}
        return cls(
            metadata=ObjectMeta(
                namespace=str(metadata.get("namespace", "")),
                name=str(metadata.get("name", "")),
                labels=_frozen_mapping(metadata.get("labels")),
                creation_timestamp=metadata.get("creationTimestamp"),
                uid=metadata.get("uid"),
            ),
            spec=RestoreSpec(
                backup_name=str(spec.get("backupName", "")),
                namespaces=tuple(spec.get("namespaces") or ()),
                namespace_mapping=_frozen_mapping(spec.get("namespaceMapping")),
                label_selector=LabelSelector.from_dict(spec.get("labelSelector")),
                restore_pvs=bool(spec.get("restorePVs", False)),
            ),
            status=RestoreStatus(
                phase=str(status.get("phase") or ""),
                validation_errors=tuple(status.get("validationErrors") or ()),
                warnings=_count_results(status.get("warnings")),
                errors=_count_results(status.get("errors")),
            ),
        )


def restore_name(backup_name: str, now: datetime) -> str:
    """Return ``<backup>-YYYYMMDDHHMMSS``.

    Two restores of the same backup created within the same second get the
    same name; the API server rejects the second one as already existing.
    """
    return f"{backup_name}-{now.strftime(NAME_TIMESTAMP_FORMAT)}"


def build_restore(
    *,
    backup_name: str,
    now: datetime,
    namespace: str = DEFAULT_NAMESPACE,
    labels: Mapping[str, str] | None = None,
    namespaces: Sequence[str] = (),
    namespace_mapping: Mapping[str, str] | None = None,
    selector: LabelSelector | None = None,
    restore_pvs: bool = False,
) -> Restore:
    return Restore(
        metadata=ObjectMeta(
            namespace=namespace,
            name=restore_name(backup_name, now),
            labels=_frozen_mapping(labels),
        ),
        spec=RestoreSpec(
            backup_name=backup_name,
            namespaces=tuple(namespaces),
            namespace_mapping=_frozen_mapping(namespace_mapping),
            label_selector=selector if selector is not None else LabelSelector(),
            restore_pvs=restore_pvs,
        ),
    )


__all__ = [
    "API_VERSION",
    "DEFAULT_NAMESPACE",
    "NAME_TIMESTAMP_FORMAT",
    "ObjectMeta",
    "Restore",
    "RestoreSpec",
    "RestoreStatus",
    "build_restore",
    "restore_name",
]
