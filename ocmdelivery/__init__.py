"""Data model for the delivery.ocm.software/v1alpha1 API objects and their manifests."""

__version__ = "0.1.0"

__all__ = ["common", "component", "deployer", "meta", "replication", "repository", "resource"]