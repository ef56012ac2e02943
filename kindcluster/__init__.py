"""Building blocks for local Kubernetes clusters whose nodes are Docker containers."""

__version__ = "0.1.0"