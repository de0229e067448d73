"""The Component API object: an OCM component tracked by semver constraint."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Any

from .common import (
    ComponentInfo,
    OCMConfiguration,
    Verification,
    _as_interval,
    _ConfiguredObject,
    _ref_name,
    _spec_fields,
    _status_fields,
    _unwrap,
)
from .meta import GROUP_VERSION, Condition, ObjectMeta

KIND_COMPONENT = "Component"


class DowngradePolicy(str, Enum):
    """Whether a component may move to a lower version than the one applied."""

    ALLOW = "Allow"
    DENY = "Deny"
    ENFORCE = "Enforce"


@dataclass
class ComponentSpec:
    """Desired state of a Component."""

    repository_ref: str
    component: str
    semver: str
    interval: timedelta
    downgrade_policy: DowngradePolicy = DowngradePolicy.DENY
    semver_filter: str = ""
    verify: list[Verification] = field(default_factory=list)
    ocm_config: list[OCMConfiguration] = field(default_factory=list)
    suspend: bool = False

    def __post_init__(self) -> None:
        self.interval = _as_interval(self.interval)
        self.downgrade_policy = DowngradePolicy(self.downgrade_policy)


@dataclass
class ComponentStatus:
    """Observed state of a Component."""

    observed_generation: int = 0
    conditions: list[Condition] = field(default_factory=list)
    component: ComponentInfo = field(default_factory=ComponentInfo)
    effective_ocm_config: list[OCMConfiguration] = field(default_factory=list)


@dataclass
class Component(_ConfiguredObject):
    """A component whose latest matching version is fetched from a repository."""

    metadata: ObjectMeta
    spec: ComponentSpec
    status: ComponentStatus = field(default_factory=ComponentStatus)

    @property
    def verifications(self) -> list[Verification]:
        return self.spec.verify

    def version_id(self) -> dict[str, str]:
        """Identify the applied component version."""
        info = self.status.component
        return {f"{GROUP_VERSION.group}/component_version": f"{info.component}:{info.version}"}

    def requeue_after(self) -> timedelta:
        """How long until the repository is checked again for new versions."""
        return self.spec.interval

    def to_dict(self) -> dict[str, Any]:
        spec = self.spec
        spec_out: dict[str, Any] = {
            "repositoryRef": {"name": spec.repository_ref},
            "component": spec.component,
            "downgradePolicy": spec.downgrade_policy.value,
            "semver": spec.semver,
        }
        if spec.semver_filter:
            spec_out["semverFilter"] = spec.semver_filter
        if spec.verify:
            spec_out["verify"] = [v.to_dict() for v in spec.verify]
        return self._wire(KIND_COMPONENT, spec_out, {"component": self.status.component.to_dict()})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Component:
        metadata, spec, status = _unwrap(data, KIND_COMPONENT)
        return cls(
            metadata=metadata,
            spec=ComponentSpec(
                repository_ref=_ref_name(spec, "repositoryRef"),
                component=spec.get("component", ""),
                semver=spec.get("semver", ""),
                downgrade_policy=spec.get("downgradePolicy") or DowngradePolicy.DENY,
                semver_filter=spec.get("semverFilter", ""),
                verify=[Verification.from_dict(v) for v in spec.get("verify") or []],
                **_spec_fields(spec),
            ),
            status=ComponentStatus(
                component=ComponentInfo.from_dict(status.get("component")),
                **_status_fields(status),
            ),
        )