import pytest

from ocmdelivery.common import ObjectKey, OCMConfiguration
from ocmdelivery.deployer import DeployedObjectReference, Deployer, DeployerSpec, DeployerStatus
from ocmdelivery.meta import ConfigRefProvider, ObjectMeta


def _deployer() -> Deployer:
    return Deployer(
        metadata=ObjectMeta(name="podinfo-deployer"),
        spec=DeployerSpec(
            resource_ref=ObjectKey(name="manifests", namespace="default"),
            ocm_config=[OCMConfiguration(kind="Secret", name="creds", namespace="default")],
        ),
        status=DeployerStatus(
            observed_generation=4,
            deployed=[
                DeployedObjectReference(
                    api_version="apps/v1", kind="Deployment", name="podinfo", namespace="default"
                ),
                DeployedObjectReference(api_version="v1", kind="Namespace", name="podinfo"),
            ],
        ),
    )


def test_version_id_for_cluster_scoped_object():
    assert _deployer().version_id() == {
        "delivery.ocm.software/resource_version": ":podinfo-deployer"
    }


def test_round_trip():
    deployer = _deployer()
    assert Deployer.from_dict(deployer.to_dict()) == deployer


def test_deployed_reference_omits_empty_namespace_and_uid():
    ref = DeployedObjectReference(api_version="v1", kind="Namespace", name="podinfo")
    assert ref.to_dict() == {"apiVersion": "v1", "kind": "Namespace", "name": "podinfo"}
    assert DeployedObjectReference.from_dict(ref.to_dict()) == ref


def test_wire_fields():
    data = _deployer().to_dict()
    assert data["kind"] == "Deployer"
    assert data["apiVersion"] == "delivery.ocm.software/v1alpha1"
    assert data["spec"]["resourceRef"] == {"namespace": "default", "name": "manifests"}
    assert len(data["status"]["deployed"]) == 2


def test_default_spec_round_trip():
    deployer = Deployer(metadata=ObjectMeta(name="d"))
    parsed = Deployer.from_dict(deployer.to_dict())
    assert parsed == deployer
    assert parsed.spec.resource_ref == ObjectKey()


def test_wrong_kind_raises():
    data = _deployer().to_dict()
    data["kind"] = "Replication"
    with pytest.raises(ValueError):
        Deployer.from_dict(data)


def test_config_provider_view():
    deployer = _deployer()
    assert isinstance(deployer, ConfigRefProvider)
    assert deployer.specified_ocm_config[0].name == "creds"
    assert deployer.effective_ocm_config == []