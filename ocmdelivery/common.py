"""Types, keys, finalizers and condition reasons shared by all API objects."""

from __future__ import annotations

import copy
from dataclasses import asdict, dataclass, field, fields
from datetime import timedelta
from enum import Enum
from typing import Any

from .meta import GROUP_VERSION, Condition, ObjectMeta, format_duration, parse_duration

# Secret or config map keys holding OCM configuration.
OCM_CREDENTIAL_CONFIG_KEY = ".ocmcredentialconfig"
OCM_CONFIG_KEY = ".ocmconfig"
OCM_LABEL_DOWNGRADABLE = "ocm.software/ocm-k8s-toolkit/downgradable"

LEVEL_DEBUG = 4

RESOURCE_FINALIZER = "finalizers.ocm.software/resource"
COMPONENT_FINALIZER = "finalizers.ocm.software/component"
REPOSITORY_FINALIZER = "finalizers.ocm.software/repository"

# Condition reasons.
CONFIGURE_CONTEXT_FAILED_REASON = "ConfigureContextFailed"
CHECK_VERSION_FAILED_REASON = "CheckVersionFailed"
RESOURCE_IS_NOT_AVAILABLE = "ResourceIsNotAvailable"
REPLICATION_FAILED_REASON = "ReplicationFailed"
GET_REPOSITORY_FAILED_REASON = "GetRepositoryFailed"
GET_COMPONENT_VERSION_FAILED_REASON = "GetComponentVersionFailed"
GET_OCM_RESOURCE_FAILED_REASON = "GetOCMResourceFailed"
MARSHAL_FAILED_REASON = "MarshalFailed"
APPLY_FAILED = "ApplyFailed"
GET_REFERENCE_FAILED_REASON = "GetReferenceFailed"
GET_RESOURCE_FAILED_REASON = "GetResourceFailed"
STATUS_SET_FAILED_REASON = "StatusSetFailed"
DELETION_FAILED_REASON = "DeletionFailed"
RESOURCE_NOT_SYNCED = "ResourceNotSynced"

_CORE_CONFIG_KINDS = frozenset({"Secret", "ConfigMap"})
_OCM_CONFIG_KINDS = frozenset({"Repository", "Component", "Resource", "Replication"})


def _compact(values: dict[str, Any]) -> dict[str, Any]:
    """Drop empty values, as the wire format omits them."""
    return {key: value for key, value in values.items() if value}


def _strings(data: dict[str, Any], *keys: str) -> dict[str, str]:
    return {key: data.get(key, "") for key in keys}


def _as_interval(value: timedelta | str) -> timedelta:
    return parse_duration(value) if isinstance(value, str) else value


def _ref_name(data: dict[str, Any], key: str) -> str:
    return (data.get(key) or {}).get("name", "")


def _unwrap(
    data: dict[str, Any], kind: str
) -> tuple[ObjectMeta, dict[str, Any], dict[str, Any]]:
    """Check the wire header and split an object into metadata, spec and status."""
    found = data.get("kind")
    if found and found != kind:
        raise ValueError(f"expected kind {kind!r}, got {found!r}")
    api_version = data.get("apiVersion")
    if api_version and api_version != str(GROUP_VERSION):
        raise ValueError(f"unsupported apiVersion {api_version!r}")
    return ObjectMeta.from_dict(data.get("metadata")), data.get("spec") or {}, data.get("status") or {}


def _configs(items: list[dict[str, Any]] | None) -> list[OCMConfiguration]:
    return [OCMConfiguration.from_dict(item) for item in items or []]


def _spec_fields(spec: dict[str, Any]) -> dict[str, Any]:
    """Read the interval, configuration and suspension common to every spec."""
    return {
        "interval": spec.get("interval") or timedelta(0),
        "ocm_config": _configs(spec.get("ocmConfig")),
        "suspend": bool(spec.get("suspend", False)),
    }


def _status_fields(status: dict[str, Any]) -> dict[str, Any]:
    """Read the generation, conditions and effective configuration of a status."""
    return {
        "observed_generation": int(status.get("observedGeneration", 0)),
        "conditions": [Condition.from_dict(c) for c in status.get("conditions") or []],
        "effective_ocm_config": _configs(status.get("effectiveOCMConfig")),
    }


class _ConfiguredObject:
    """Accessors and serialisation shared by API objects with conditions and configuration."""

    metadata: ObjectMeta
    spec: Any
    status: Any

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

    def _namespaced_id(self, suffix: str) -> dict[str, str]:
        return {f"{GROUP_VERSION.group}/{suffix}": f"{self.metadata.namespace}:{self.metadata.name}"}

    def _wire(self, kind: str, spec_out: dict[str, Any], status_out: dict[str, Any]) -> dict[str, Any]:
        spec, status = self.spec, self.status
        spec_common = _compact(
            {
                "ocmConfig": [c.to_dict() for c in spec.ocm_config],
                "suspend": spec.suspend,
            }
        )
        spec_common["interval"] = format_duration(spec.interval)
        status_common = _compact(
            {
                "observedGeneration": status.observed_generation,
                "conditions": [c.to_dict() for c in status.conditions],
                "effectiveOCMConfig": [c.to_dict() for c in status.effective_ocm_config],
            }
        )
        return {
            "apiVersion": str(GROUP_VERSION),
            "kind": kind,
            "metadata": self.metadata.to_dict(),
            "spec": {**spec_out, **spec_common},
            "status": {**status_common, **status_out},
        }


class ConfigurationPolicy(str, Enum):
    """Whether configuration is passed on to objects that reference its owner."""

    PROPAGATE = "Propagate"
    DO_NOT_PROPAGATE = "DoNotPropagate"


@dataclass
class OCMConfiguration:
    """A reference to a source of OCM configuration and its propagation policy."""

    kind: str
    name: str
    namespace: str = ""
    api_version: str = ""
    policy: ConfigurationPolicy = ConfigurationPolicy.PROPAGATE

    def __post_init__(self) -> None:
        self.policy = ConfigurationPolicy(self.policy)
        core = self.api_version in ("", "v1") and self.kind in _CORE_CONFIG_KINDS
        ocm = self.api_version == str(GROUP_VERSION) and self.kind in _OCM_CONFIG_KINDS
        if not (core or ocm):
            raise ValueError(
                'apiVersion must be one of "v1" with kind "Secret" or "ConfigMap" or '
                f'"{GROUP_VERSION}" with the kind of an OCM kubernetes object'
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            **_compact({"apiVersion": self.api_version, "namespace": self.namespace}),
            "kind": self.kind,
            "name": self.name,
            "policy": self.policy.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OCMConfiguration:
        return cls(
            **_strings(data, "kind", "name", "namespace"),
            api_version=data.get("apiVersion", ""),
            policy=data.get("policy") or ConfigurationPolicy.PROPAGATE,
        )


@dataclass
class ObjectKey:
    """A name with an optional namespace."""

    name: str = ""
    namespace: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _compact({"namespace": self.namespace, "name": self.name})

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ObjectKey:
        return cls(**_strings(data or {}, "name", "namespace"))


@dataclass
class Verification:
    """A signature name with the public key that verifies it, inline or in a secret."""

    signature: str = ""
    secret_ref: str = ""
    value: str = ""

    def to_dict(self) -> dict[str, Any]:
        out = _compact({"signature": self.signature, "value": self.value})
        out["secretRef"] = {"name": self.secret_ref} if self.secret_ref else {}
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Verification:
        return cls(**_strings(data, "signature", "value"), secret_ref=_ref_name(data, "secretRef"))


@dataclass
class ResourceReference:
    """A resource identity, reached through a path of component references."""

    resource: dict[str, str] = field(default_factory=dict)
    reference_path: list[dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"resource": dict(self.resource)}
        if self.reference_path:
            out["referencePath"] = [dict(identity) for identity in self.reference_path]
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ResourceReference:
        data = data or {}
        return cls(
            resource=dict(data.get("resource") or {}),
            reference_path=[dict(identity) for identity in data.get("referencePath") or []],
        )


@dataclass
class ResourceID:
    """Identifies the OCM resource to fetch."""

    by_reference: ResourceReference = field(default_factory=ResourceReference)

    def to_dict(self) -> dict[str, Any]:
        return {"byReference": self.by_reference.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ResourceID:
        return cls(by_reference=ResourceReference.from_dict((data or {}).get("byReference")))


@dataclass
class ComponentInfo:
    """A concrete component version and the repository it came from."""

    repository_spec: Any = None
    component: str = ""
    version: str = ""

    def to_dict(self) -> dict[str, Any]:
        out = _compact({"component": self.component, "version": self.version})
        if self.repository_spec is not None:
            out["repositorySpec"] = copy.deepcopy(self.repository_spec)
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ComponentInfo:
        data = data or {}
        return cls(
            repository_spec=copy.deepcopy(data.get("repositorySpec")),
            **_strings(data, "component", "version"),
        )


@dataclass
class ResourceInfo:
    """A concrete OCM resource: identity, access and digest."""

    name: str = ""
    type: str = ""
    version: str = ""
    extra_identity: dict[str, str] = field(default_factory=dict)
    access: Any = None
    digest: str = ""

    def to_dict(self) -> dict[str, Any]:
        out = _compact(
            {
                "name": self.name,
                "type": self.type,
                "version": self.version,
                "extraIdentity": dict(self.extra_identity),
                "digest": self.digest,
            }
        )
        out["access"] = copy.deepcopy(self.access)
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ResourceInfo:
        data = data or {}
        return cls(
            **_strings(data, "name", "type", "version", "digest"),
            extra_identity=dict(data.get("extraIdentity") or {}),
            access=copy.deepcopy(data.get("access")),
        )


@dataclass
class SourceReference:
    """Where a resource's content lives in an OCI registry."""

    registry: str = ""
    repository: str = ""
    reference: str = ""
    digest: str = ""
    tag: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> SourceReference:
        return cls(**_strings(data or {}, *(f.name for f in fields(cls))))