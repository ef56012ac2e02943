[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kindcluster"
version = "0.1.0"
description = "Kubeconfig handling, node naming, load balancer configuration and Docker helpers for local Kubernetes clusters"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = [
    "kubernetes",
    "kubeconfig",
    "docker",
    "cluster",
    "haproxy",
    "containers",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Clustering",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["kindcluster"]

[tool.hatch.build.targets.sdist]
include = [
    "kindcluster",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
