"""The Deployer API object: deploys the manifests carried by an OCM resource."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .common import ObjectKey, OCMConfiguration
from .meta import GROUP_VERSION, Condition, ObjectMeta

KIND_DEPLOYER = "Deployer"


def _check_kind(data: dict[str, Any], kind: str) -> None:
    found = data.get("kind")
    if found and found != kind:
        raise ValueError(f"expected kind {kind!r}, got {found!r}")
    api_version = data.get("apiVersion")
    if api_version and api_version != str(GROUP_VERSION):
        raise ValueError(f"unsupported apiVersion {api_version!r}")


@dataclass
class DeployedObjectReference:
    """An object that a Deployer has applied to the cluster."""

    api_version: str
    kind: str
    name: str
    namespace: str = ""
    uid: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "name": self.name,
        }
        if self.namespace:
            out["namespace"] = self.namespace
        if self.uid:
            out["uid"] = self.uid
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DeployedObjectReference:
        return cls(
            api_version=data.get("apiVersion", ""),
            kind=data.get("kind", ""),
            name=data.get("name", ""),
            namespace=data.get("namespace", ""),
            uid=data.get("uid", ""),
        )


@dataclass
class DeployerSpec:
    """Desired state of a Deployer."""

    resource_ref: ObjectKey = field(default_factory=ObjectKey)
    ocm_config: list[OCMConfiguration] = field(default_factory=list)
    suspend: bool = False


@dataclass
class DeployerStatus:
    """Observed state of a Deployer."""

    observed_generation: int = 0
    conditions: list[Condition] = field(default_factory=list)
    effective_ocm_config: list[OCMConfiguration] = field(default_factory=list)
    deployed: list[DeployedObjectReference] = field(default_factory=list)


@dataclass
class Deployer:
    """A cluster-scoped object that applies the content of a Resource."""

    metadata: ObjectMeta
    spec: DeployerSpec = field(default_factory=DeployerSpec)
    status: DeployerStatus = field(default_factory=DeployerStatus)

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

    def version_id(self) -> dict[str, str]:
        """Identify the deployer by namespace and name."""
        return {
            f"{GROUP_VERSION.group}/resource_version": (
                f"{self.metadata.namespace}:{self.metadata.name}"
            )
        }

    def to_dict(self) -> dict[str, Any]:
        spec = self.spec
        spec_out: dict[str, Any] = {"resourceRef": spec.resource_ref.to_dict()}
        if spec.ocm_config:
            spec_out["ocmConfig"] = [c.to_dict() for c in spec.ocm_config]
        if spec.suspend:
            spec_out["suspend"] = True

        status = self.status
        status_out: dict[str, Any] = {}
        if status.observed_generation:
            status_out["observedGeneration"] = status.observed_generation
        if status.conditions:
            status_out["conditions"] = [c.to_dict() for c in status.conditions]
        if status.effective_ocm_config:
            status_out["effectiveOCMConfig"] = [c.to_dict() for c in status.effective_ocm_config]
        if status.deployed:
            status_out["deployed"] = [d.to_dict() for d in status.deployed]

        return {
            "apiVersion": str(GROUP_VERSION),
            "kind": KIND_DEPLOYER,
            "metadata": self.metadata.to_dict(),
            "spec": spec_out,
            "status": status_out,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Deployer:
        _check_kind(data, KIND_DEPLOYER)
        spec = data.get("spec") or {}
        status = data.get("status") or {}
        return cls(
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=DeployerSpec(
                resource_ref=ObjectKey.from_dict(spec.get("resourceRef")),
                ocm_config=[OCMConfiguration.from_dict(c) for c in spec.get("ocmConfig") or []],
                suspend=bool(spec.get("suspend", False)),
            ),
            status=DeployerStatus(
                observed_generation=int(status.get("observedGeneration", 0)),
                conditions=[Condition.from_dict(c) for c in status.get("conditions") or []],
                effective_ocm_config=[
                    OCMConfiguration.from_dict(c) for c in status.get("effectiveOCMConfig") or []
                ],
                deployed=[DeployedObjectReference.from_dict(d) for d in status.get("deployed") or []],
            ),
        )