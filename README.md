# ocmdelivery

A Python data model for the `delivery.ocm.software/v1alpha1` API group. These
objects describe where OCM components live, which versions to fetch, which
resources to extract, how to deploy them, and how to replicate component
versions between repositories.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

### `ocmdelivery.meta`

- `GroupVersion` is an API group and its version. `str()` gives `group/version`. The constant `GROUP_VERSION` is `delivery.ocm.software/v1alpha1`.
- `ObjectMeta` holds the name, namespace, uid, generation, labels, annotations, finalizers and deletion timestamp.
- `Condition` holds the type, status, reason, message, observed generation and last transition time.
- `ConfigRefProvider` and `VerificationProvider` are runtime-checkable protocols. They cover objects that expose `specified_ocm_config` / `effective_ocm_config` or `verifications`.
- `parse_duration` and `format_duration` convert between interval strings such as `"1h30m"`, `"1.5s"` or `"250ms"` and `timedelta`.
- `parse_time` and `format_time` handle RFC 3339 timestamps in UTC.

### `ocmdelivery.common`

This module holds the shared building blocks:

- `ConfigurationPolicy`, which is `Propagate` or `DoNotPropagate`.
- `OCMConfiguration`. It raises `ValueError` unless it refers to one of these:
  - a `v1` `Secret` or `ConfigMap`;
  - a `delivery.ocm.software/v1alpha1` `Repository`, `Component`, `Resource` or `Replication`.
- `ObjectKey`, `Verification`, `ResourceReference`, `ResourceID`, `ComponentInfo`, `ResourceInfo` and `SourceReference`.

It also defines constants for finalizer names, configuration keys and condition reasons, for example:

- `COMPONENT_FINALIZER`
- `OCM_CONFIG_KEY`
- `DELETION_FAILED_REASON`

### `ocmdelivery.repository`

`Repository`, `RepositorySpec`, `RepositoryStatus`.

### `ocmdelivery.component`

`Component`, `ComponentSpec`, `ComponentStatus` and `DowngradePolicy` (`Allow`, `Deny`, `Enforce`; the default is `Deny`).

### `ocmdelivery.resource`

`Resource`, `ResourceSpec`, `ResourceStatus`.

### `ocmdelivery.deployer`

`Deployer`, `DeployerSpec`, `DeployerStatus`, `DeployedObjectReference`.

### `ocmdelivery.replication`

`Replication`, `ReplicationSpec`, `ReplicationStatus`, `TransferStatus`.

## Working with objects

Every object converts to and from the plain dictionaries of its manifest with `to_dict()` and `from_dict()`. You can read it from, or write it to, YAML or JSON with any serializer.

`from_dict()` raises `ValueError` when a manifest carries the wrong `kind` or `apiVersion`.

Each object has a `version_id()` method that returns its identifying label. Repository, Component, Resource and Replication objects also have `requeue_after()`, which returns their interval.

## Example

```python
from ocmdelivery.replication import Replication

replication = Replication.from_dict({
    "metadata": {"name": "mirror", "namespace": "default"},
    "spec": {
        "componentRef": {"name": "podinfo"},
        "targetRepositoryRef": {"name": "target"},
        "interval": "10m",
        "historyLength": 5,
    },
})

print(replication.version_id())
# {'delivery.ocm.software/replication': 'default:mirror'}
print(replication.requeue_after())
# 0:10:00
```

### Replication history

`Replication.add_history_record` keeps at most `historyLength` transfer runs. The default is 10, and a capacity of 0 keeps nothing.

When the same failure repeats, it is folded into the last record instead of adding a new one.

`Replication.is_in_history` tells whether a component version has already been transferred successfully to a given target.

## What this package does not do

This package only models the objects. It does not:

- talk to a cluster;
- look up repositories or component versions;
- verify signatures;
- transfer anything;
- reconcile objects;
- provide a command-line tool or a long-running service.