[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ocmdelivery"
version = "0.1.0"
description = "Data model for OCM delivery objects: repositories, components, resources, deployers and replications"
requires-python = ">=3.10"
dependencies = []
keywords = ["ocm", "component", "delivery", "kubernetes", "replication", "manifest"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Software Distribution",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ocmdelivery"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
