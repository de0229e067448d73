"""The Replication API object: copies component versions into another repository."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from .common import ObjectKey, OCMConfiguration, Verification
from .meta import (
    GROUP_VERSION,
    Condition,
    ObjectMeta,
    format_duration,
    format_time,
    parse_duration,
    parse_time,
)

KIND_REPLICATION = "Replication"
DEFAULT_HISTORY_CAPACITY = 10


def _as_interval(value: timedelta | str) -> timedelta:
    return parse_duration(value) if isinstance(value, str) else value


def _check_kind(data: dict[str, Any], kind: str) -> None:
    found = data.get("kind")
    if found and found != kind:
        raise ValueError(f"expected kind {kind!r}, got {found!r}")
    api_version = data.get("apiVersion")
    if api_version and api_version != str(GROUP_VERSION):
        raise ValueError(f"unsupported apiVersion {api_version!r}")


@dataclass
class TransferStatus:
    """The outcome of one transfer run."""

    component: str
    version: str
    source_repository_spec: str
    target_repository_spec: str
    start_time: datetime
    end_time: datetime | None = None
    error: str = ""
    success: bool = False

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "component": self.component,
            "version": self.version,
            "sourceRepositorySpec": self.source_repository_spec,
            "targetRepositorySpec": self.target_repository_spec,
            "startTime": format_time(self.start_time),
        }
        if self.end_time is not None:
            out["endTime"] = format_time(self.end_time)
        if self.error:
            out["error"] = self.error
        out["success"] = self.success
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TransferStatus:
        start = data.get("startTime")
        if not start:
            raise ValueError("missing required field 'startTime'")
        end = data.get("endTime")
        return cls(
            component=data.get("component", ""),
            version=data.get("version", ""),
            source_repository_spec=data.get("sourceRepositorySpec", ""),
            target_repository_spec=data.get("targetRepositorySpec", ""),
            start_time=parse_time(start),
            end_time=parse_time(end) if end else None,
            error=data.get("error", ""),
            success=bool(data.get("success", False)),
        )


@dataclass
class ReplicationSpec:
    """Desired state of a Replication."""

    component_ref: ObjectKey
    target_repository_ref: ObjectKey
    interval: timedelta
    suspend: bool = False
    history_capacity: int = DEFAULT_HISTORY_CAPACITY
    verify: list[Verification] = field(default_factory=list)
    ocm_config: list[OCMConfiguration] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.interval = _as_interval(self.interval)
        if self.history_capacity < 0:
            raise ValueError("history capacity must not be negative")


@dataclass
class ReplicationStatus:
    """Observed state of a Replication."""

    history: list[TransferStatus] = field(default_factory=list)
    observed_generation: int = 0
    conditions: list[Condition] = field(default_factory=list)
    effective_ocm_config: list[OCMConfiguration] = field(default_factory=list)


@dataclass
class Replication:
    """Transfers the version a Component tracks into a target Repository."""

    metadata: ObjectMeta
    spec: ReplicationSpec
    status: ReplicationStatus = field(default_factory=ReplicationStatus)

    @property
    def conditions(self) -> list[Condition]:
        return self.status.conditions

    @conditions.setter
    def conditions(self, value: list[Condition]) -> None:
        self.status.conditions = list(value)

    @property
    def specified_ocm_config(self) -> list[OCMConfiguration]:
        return self.spec.ocm_config

    @property
    def effective_ocm_config(self) -> list[OCMConfiguration]:
        return self.status.effective_ocm_config

    @property
    def verifications(self) -> list[Verification]:
        return self.spec.verify

    def version_id(self) -> dict[str, str]:
        """Identify the replication by namespace and name."""
        return {
            f"{GROUP_VERSION.group}/replication": (
                f"{self.metadata.namespace}:{self.metadata.name}"
            )
        }

    def requeue_after(self) -> timedelta:
        """How long until the replication is reconciled again."""
        return self.spec.interval

    def add_history_record(self, record: TransferStatus) -> None:
        """Record a transfer run, folding repeats of the same failure into one entry."""
        capacity = self.spec.history_capacity
        if capacity == 0:
            return
        history = self.status.history
        if len(history) >= capacity:
            del history[0]
        if history:
            last = history[-1]
            if (
                not record.success
                and not last.success
                and last.error == record.error
                and last.component == record.component
                and last.version == record.version
                and last.target_repository_spec == record.target_repository_spec
            ):
                last.start_time = record.start_time
                last.end_time = record.end_time
                return
        history.append(record)

    def is_in_history(self, component: str, version: str, target_spec: str) -> bool:
        """Whether this version was already transferred to the target successfully."""
        return any(
            record.success
            and record.component == component
            and record.version == version
            and record.target_repository_spec == target_spec
            for record in self.status.history
        )

    def to_dict(self) -> dict[str, Any]:
        spec = self.spec
        spec_out: dict[str, Any] = {
            "componentRef": spec.component_ref.to_dict(),
            "targetRepositoryRef": spec.target_repository_ref.to_dict(),
            "interval": format_duration(spec.interval),
        }
        if spec.suspend:
            spec_out["suspend"] = True
        spec_out["historyLength"] = spec.history_capacity
        if spec.verify:
            spec_out["verify"] = [v.to_dict() for v in spec.verify]
        if spec.ocm_config:
            spec_out["ocmConfig"] = [c.to_dict() for c in spec.ocm_config]

        status = self.status
        status_out: dict[str, Any] = {}
        if status.history:
            status_out["history"] = [h.to_dict() for h in status.history]
        if status.observed_generation:
            status_out["observedGeneration"] = status.observed_generation
        if status.conditions:
            status_out["conditions"] = [c.to_dict() for c in status.conditions]
        if status.effective_ocm_config:
            status_out["effectiveOCMConfig"] = [c.to_dict() for c in status.effective_ocm_config]

        return {
            "apiVersion": str(GROUP_VERSION),
            "kind": KIND_REPLICATION,
            "metadata": self.metadata.to_dict(),
            "spec": spec_out,
            "status": status_out,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Replication:
        _check_kind(data, KIND_REPLICATION)
        spec = data.get("spec") or {}
        status = data.get("status") or {}
        capacity = spec.get("historyLength")
        return cls(
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=ReplicationSpec(
                component_ref=ObjectKey.from_dict(spec.get("componentRef")),
                target_repository_ref=ObjectKey.from_dict(spec.get("targetRepositoryRef")),
                interval=spec.get("interval") or timedelta(0),
                suspend=bool(spec.get("suspend", False)),
                history_capacity=(
                    DEFAULT_HISTORY_CAPACITY if capacity is None else int(capacity)
                ),
                verify=[Verification.from_dict(v) for v in spec.get("verify") or []],
                ocm_config=[OCMConfiguration.from_dict(c) for c in spec.get("ocmConfig") or []],
            ),
            status=ReplicationStatus(
                history=[TransferStatus.from_dict(h) for h in status.get("history") or []],
                observed_generation=int(status.get("observedGeneration", 0)),
                conditions=[Condition.from_dict(c) for c in status.get("conditions") or []],
                effective_ocm_config=[
                    OCMConfiguration.from_dict(c) for c in status.get("effectiveOCMConfig") or []
                ],
            ),
        )