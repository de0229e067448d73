"""The Resource API object: one OCM resource of a component version."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Callable, TypeVar

from .common import (
    ComponentInfo,
    OCMConfiguration,
    ResourceID,
    ResourceInfo,
    SourceReference,
    _as_interval,
    _ConfiguredObject,
    _ref_name,
    _spec_fields,
    _status_fields,
    _unwrap,
)
from .meta import Condition, ObjectMeta

KIND_RESOURCE = "Resource"

_T = TypeVar("_T")

# Optional status parts: wire key, attribute name, type.
_OPTIONAL_STATUS = (
    ("reference", SourceReference),
    ("resource", ResourceInfo),
    ("component", ComponentInfo),
)


def _optional(parse: Callable[[dict[str, Any]], _T], value: dict[str, Any] | None) -> _T | None:
    return parse(value) if value is not None else None


@dataclass
class ResourceSpec:
    """Desired state of a Resource."""

    component_ref: str
    resource: ResourceID
    interval: timedelta
    ocm_config: list[OCMConfiguration] = field(default_factory=list)
    skip_verify: bool = False
    suspend: bool = False

    def __post_init__(self) -> None:
        self.interval = _as_interval(self.interval)


@dataclass
class ResourceStatus:
    """Observed state of a Resource."""

    observed_generation: int = 0
    conditions: list[Condition] = field(default_factory=list)
    reference: SourceReference | None = None
    resource: ResourceInfo | None = None
    component: ComponentInfo | None = None
    effective_ocm_config: list[OCMConfiguration] = field(default_factory=list)


@dataclass
class Resource(_ConfiguredObject):
    """An OCM resource fetched from the component a Component object tracks."""

    metadata: ObjectMeta
    spec: ResourceSpec
    status: ResourceStatus = field(default_factory=ResourceStatus)

    def version_id(self) -> dict[str, str]:
        """Identify the resource by namespace and name."""
        return self._namespaced_id("resource_version")

    def requeue_after(self) -> timedelta:
        """How long until the resource is checked again for updates."""
        return self.spec.interval

    def to_dict(self) -> dict[str, Any]:
        spec = self.spec
        spec_out: dict[str, Any] = {
            "componentRef": {"name": spec.component_ref},
            "resource": spec.resource.to_dict(),
        }
        if spec.skip_verify:
            spec_out["skipVerify"] = True
        status_out = {
            key: part.to_dict()
            for key, _ in _OPTIONAL_STATUS
            if (part := getattr(self.status, key)) is not None
        }
        return self._wire(KIND_RESOURCE, spec_out, status_out)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Resource:
        metadata, spec, status = _unwrap(data, KIND_RESOURCE)
        parts = {key: _optional(kind.from_dict, status.get(key)) for key, kind in _OPTIONAL_STATUS}
        return cls(
            metadata=metadata,
            spec=ResourceSpec(
                component_ref=_ref_name(spec, "componentRef"),
                resource=ResourceID.from_dict(spec.get("resource")),
                skip_verify=bool(spec.get("skipVerify", False)),
                **_spec_fields(spec),
            ),
            status=ResourceStatus(**parts, **_status_fields(status)),
        )