from datetime import timedelta

import pytest

from ocmdelivery.common import (
    ComponentInfo,
    OCMConfiguration,
    ResourceID,
    ResourceInfo,
    ResourceReference,
    SourceReference,
)
from ocmdelivery.meta import ConfigRefProvider, ObjectMeta
from ocmdelivery.resource import Resource, ResourceSpec, ResourceStatus


def _resource() -> Resource:
    return Resource(
        metadata=ObjectMeta(name="image", namespace="default"),
        spec=ResourceSpec(
            component_ref="podinfo",
            resource=ResourceID(by_reference=ResourceReference(resource={"name": "image"})),
            interval=timedelta(minutes=5),
            ocm_config=[OCMConfiguration(kind="ConfigMap", name="cfg")],
            skip_verify=True,
        ),
        status=ResourceStatus(
            observed_generation=2,
            reference=SourceReference(
                registry="ghcr.io", repository="stefanprodan/podinfo", tag="6.6.2"
            ),
            resource=ResourceInfo(
                name="image", type="ociImage", access={"type": "ociArtifact"}, digest="sha256:abc"
            ),
            component=ComponentInfo(component="ocm.software/podinfo", version="6.6.2"),
        ),
    )


def test_version_id():
    assert _resource().version_id() == {"delivery.ocm.software/resource_version": "default:image"}


def test_requeue_after():
    assert _resource().requeue_after() == timedelta(minutes=5)


def test_round_trip():
    resource = _resource()
    assert Resource.from_dict(resource.to_dict()) == resource


def test_empty_status_round_trip_keeps_optional_parts_absent():
    resource = _resource()
    resource.status = ResourceStatus()
    data = resource.to_dict()
    assert data["status"] == {}
    parsed = Resource.from_dict(data)
    assert parsed.status.reference is None
    assert parsed.status.resource is None
    assert parsed.status.component is None


def test_wire_fields():
    data = _resource().to_dict()
    assert data["kind"] == "Resource"
    assert data["spec"]["componentRef"] == {"name": "podinfo"}
    assert data["spec"]["skipVerify"] is True
    assert data["spec"]["resource"] == {"byReference": {"resource": {"name": "image"}}}


def test_wrong_kind_raises():
    data = _resource().to_dict()
    data["kind"] = "Component"
    with pytest.raises(ValueError):
        Resource.from_dict(data)


def test_invalid_interval_raises():
    with pytest.raises(ValueError):
        ResourceSpec(component_ref="c", resource=ResourceID(), interval="soon")


def test_config_provider_view():
    resource = _resource()
    assert isinstance(resource, ConfigRefProvider)
    assert resource.specified_ocm_config == [OCMConfiguration(kind="ConfigMap", name="cfg")]