"""The Repository API object: an OCM repository holding component versions."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from .common import (
    OCMConfiguration,
    _as_interval,
    _ConfiguredObject,
    _spec_fields,
    _status_fields,
    _unwrap,
)
from .meta import Condition, ObjectMeta

KIND_REPOSITORY = "Repository"


@dataclass
class RepositorySpec:
    """Desired state of a Repository."""

    repository_spec: Any
    interval: timedelta
    ocm_config: list[OCMConfiguration] = field(default_factory=list)
    suspend: bool = False

    def __post_init__(self) -> None:
        self.interval = _as_interval(self.interval)


@dataclass
class RepositoryStatus:
    """Observed state of a Repository."""

    observed_generation: int = 0
    conditions: list[Condition] = field(default_factory=list)
    effective_ocm_config: list[OCMConfiguration] = field(default_factory=list)


@dataclass
class Repository(_ConfiguredObject):
    """An OCM repository specification that is validated periodically."""

    metadata: ObjectMeta
    spec: RepositorySpec
    status: RepositoryStatus = field(default_factory=RepositoryStatus)

    def version_id(self) -> dict[str, str]:
        """Identify the repository by namespace and name."""
        return self._namespaced_id("repository")

    def requeue_after(self) -> timedelta:
        """How long until the repository is validated again."""
        return self.spec.interval

    def to_dict(self) -> dict[str, Any]:
        spec_out = {"repositorySpec": copy.deepcopy(self.spec.repository_spec)}
        return self._wire(KIND_REPOSITORY, spec_out, {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Repository:
        metadata, spec, status = _unwrap(data, KIND_REPOSITORY)
        return cls(
            metadata=metadata,
            spec=RepositorySpec(
                repository_spec=copy.deepcopy(spec.get("repositorySpec")),
                **_spec_fields(spec),
            ),
            status=RepositoryStatus(**_status_fields(status)),
        )