"""API group identity, object metadata, status conditions and duration helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from .common import OCMConfiguration, Verification


@dataclass(frozen=True)
class GroupVersion:
    """An API group together with its version."""

    group: str
    version: str

    def __str__(self) -> str:
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"


GROUP_VERSION = GroupVersion(group="delivery.ocm.software", version="v1alpha1")


def format_time(value: datetime) -> str:
    """Render a timestamp as RFC 3339 in UTC with second precision."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_time(text: str) -> datetime:
    """Parse an RFC 3339 timestamp into an aware datetime."""
    normalized = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise ValueError(f"invalid timestamp: {text!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


def _require(data: dict[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing required field {key!r}") from None


@dataclass
class ObjectMeta:
    """Metadata shared by all stored objects."""

    name: str = ""
    namespace: str = ""
    uid: str = ""
    generation: int = 0
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    finalizers: list[str] = field(default_factory=list)
    deletion_timestamp: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.name:
            out["name"] = self.name
        if self.namespace:
            out["namespace"] = self.namespace
        if self.uid:
            out["uid"] = self.uid
        if self.generation:
            out["generation"] = self.generation
        if self.labels:
            out["labels"] = dict(self.labels)
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.finalizers:
            out["finalizers"] = list(self.finalizers)
        if self.deletion_timestamp is not None:
            out["deletionTimestamp"] = format_time(self.deletion_timestamp)
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ObjectMeta:
        data = data or {}
        deletion = data.get("deletionTimestamp")
        return cls(
            name=data.get("name", ""),
            namespace=data.get("namespace", ""),
            uid=data.get("uid", ""),
            generation=int(data.get("generation", 0)),
            labels=dict(data.get("labels") or {}),
            annotations=dict(data.get("annotations") or {}),
            finalizers=list(data.get("finalizers") or []),
            deletion_timestamp=parse_time(deletion) if deletion else None,
        )


@dataclass
class Condition:
    """One observed aspect of an object's state."""

    type: str
    status: str
    reason: str
    message: str = ""
    observed_generation: int = 0
    last_transition_time: datetime = field(default_factory=_now)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": self.type, "status": self.status}
        if self.observed_generation:
            out["observedGeneration"] = self.observed_generation
        out["lastTransitionTime"] = format_time(self.last_transition_time)
        out["reason"] = self.reason
        out["message"] = self.message
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Condition:
        transition = data.get("lastTransitionTime")
        return cls(
            type=_require(data, "type"),
            status=_require(data, "status"),
            reason=_require(data, "reason"),
            message=data.get("message", ""),
            observed_generation=int(data.get("observedGeneration", 0)),
            last_transition_time=parse_time(transition) if transition else _now(),
        )


@runtime_checkable
class ConfigRefProvider(Protocol):
    """An object that specifies and propagates OCM configuration."""

    metadata: ObjectMeta
    specified_ocm_config: Sequence[OCMConfiguration]
    effective_ocm_config: Sequence[OCMConfiguration]


@runtime_checkable
class VerificationProvider(Protocol):
    """An object that carries signature verification settings."""

    metadata: ObjectMeta
    verifications: Sequence[Verification]


_UNIT_NANOS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_DURATION_PART = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``1h30m`` or ``1.5s`` into a timedelta."""
    if not text:
        raise ValueError("invalid duration: empty string")
    body = text
    sign = 1
    if body[0] in "+-":
        sign = -1 if body[0] == "-" else 1
        body = body[1:]
    if body == "0":
        return timedelta(0)
    if not body:
        raise ValueError(f"invalid duration: {text!r}")
    total = Decimal(0)
    pos = 0
    while pos < len(body):
        match = _DURATION_PART.match(body, pos)
        if match is None:
            raise ValueError(f"invalid duration: {text!r}")
        try:
            total += Decimal(match.group(1)) * _UNIT_NANOS[match.group(2)]
        except InvalidOperation as exc:
            raise ValueError(f"invalid duration: {text!r}") from exc
        pos = match.end()
    micros = int(total) // 1000
    return timedelta(microseconds=sign * micros)


def _fraction(value: int, precision: int) -> str:
    whole, frac = divmod(value, 10**precision)
    text = str(whole)
    if frac:
        text += "." + str(frac).zfill(precision).rstrip("0")
    return text


def format_duration(value: timedelta) -> str:
    """Render a timedelta in the compact ``1h2m3.5s`` notation."""
    nanos = (value // timedelta(microseconds=1)) * 1000
    if nanos == 0:
        return "0s"
    prefix = "-" if nanos < 0 else ""
    nanos = abs(nanos)
    if nanos < 1_000_000_000:
        if nanos < 1_000:
            return f"{prefix}{nanos}ns"
        if nanos < 1_000_000:
            return f"{prefix}{_fraction(nanos, 3)}µs"
        return f"{prefix}{_fraction(nanos, 6)}ms"
    hours, rest = divmod(nanos, _UNIT_NANOS["h"])
    minutes, seconds = divmod(rest, _UNIT_NANOS["m"])
    tail = f"{_fraction(seconds, 9)}s"
    if hours:
        return f"{prefix}{hours}h{minutes}m{tail}"
    if minutes:
        return f"{prefix}{minutes}m{tail}"
    return prefix + tail