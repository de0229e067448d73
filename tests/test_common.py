import pytest

from ocmdelivery.common import (
    ComponentInfo,
    ConfigurationPolicy,
    OCMConfiguration,
    ObjectKey,
    ResourceID,
    ResourceInfo,
    ResourceReference,
    SourceReference,
    Verification,
)


def test_ocm_configuration_defaults_to_propagate():
    config = OCMConfiguration(kind="Secret", name="creds")
    assert config.policy is ConfigurationPolicy.PROPAGATE
    assert config.to_dict()["policy"] == "Propagate"


@pytest.mark.parametrize(
    "api_version,kind",
    [
        ("", "Secret"),
        ("v1", "ConfigMap"),
        ("delivery.ocm.software/v1alpha1", "Repository"),
        ("delivery.ocm.software/v1alpha1", "Component"),
        ("delivery.ocm.software/v1alpha1", "Resource"),
        ("delivery.ocm.software/v1alpha1", "Replication"),
    ],
)
def test_ocm_configuration_accepts_allowed_kinds(api_version, kind):
    config = OCMConfiguration(kind=kind, name="x", api_version=api_version)
    assert OCMConfiguration.from_dict(config.to_dict()) == config


@pytest.mark.parametrize(
    "api_version,kind",
    [
        ("v1", "Repository"),
        ("delivery.ocm.software/v1alpha1", "Secret"),
        ("apps/v1", "Deployment"),
        ("", "Deployer"),
    ],
)
def test_ocm_configuration_rejects_other_kinds(api_version, kind):
    with pytest.raises(ValueError):
        OCMConfiguration(kind=kind, name="x", api_version=api_version)


def test_ocm_configuration_rejects_unknown_policy():
    with pytest.raises(ValueError):
        OCMConfiguration.from_dict({"kind": "Secret", "name": "x", "policy": "Sometimes"})


def test_ocm_configuration_policy_from_string():
    config = OCMConfiguration.from_dict(
        {"kind": "ConfigMap", "name": "cfg", "namespace": "ns", "policy": "DoNotPropagate"}
    )
    assert config.policy is ConfigurationPolicy.DO_NOT_PROPAGATE
    assert config.namespace == "ns"


def test_object_key_round_trip_and_omission():
    key = ObjectKey(name="repo")
    assert key.to_dict() == {"name": "repo"}
    full = ObjectKey(name="repo", namespace="ns")
    assert ObjectKey.from_dict(full.to_dict()) == full


def test_verification_round_trip():
    verification = Verification(signature="ocm.software", secret_ref="keys")
    assert Verification.from_dict(verification.to_dict()) == verification
    assert verification.to_dict()["secretRef"] == {"name": "keys"}


def test_verification_empty_secret_ref_is_empty_object():
    assert Verification(signature="sig", value="pem").to_dict()["secretRef"] == {}


def test_resource_id_round_trip():
    resource_id = ResourceID(
        by_reference=ResourceReference(
            resource={"name": "image"},
            reference_path=[{"name": "child"}],
        )
    )
    data = resource_id.to_dict()
    assert data["byReference"]["resource"] == {"name": "image"}
    assert ResourceID.from_dict(data) == resource_id


def test_resource_reference_omits_empty_path():
    assert "referencePath" not in ResourceReference(resource={"name": "a"}).to_dict()


def test_component_info_round_trip_copies_spec():
    spec = {"type": "OCIRegistry", "baseUrl": "ghcr.io"}
    info = ComponentInfo(repository_spec=spec, component="ocm.software/podinfo", version="6.6.2")
    data = info.to_dict()
    data["repositorySpec"]["baseUrl"] = "changed"
    assert info.repository_spec["baseUrl"] == "ghcr.io"
    assert ComponentInfo.from_dict(info.to_dict()) == info


def test_component_info_omits_missing_spec():
    assert "repositorySpec" not in ComponentInfo(component="c").to_dict()


def test_resource_info_round_trip():
    info = ResourceInfo(
        name="image",
        type="ociImage",
        version="1.0.0",
        extra_identity={"arch": "amd64"},
        access={"type": "ociArtifact", "imageReference": "example.com/img:1.0.0"},
        digest="sha256:abc",
    )
    assert ResourceInfo.from_dict(info.to_dict()) == info


def test_source_reference_always_has_all_keys():
    data = SourceReference(registry="example.com", repository="img").to_dict()
    assert set(data) == {"registry", "repository", "reference", "digest", "tag"}
    assert SourceReference.from_dict(data) == SourceReference(registry="example.com", repository="img")