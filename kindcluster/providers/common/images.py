"""Images that a cluster configuration needs."""

from __future__ import annotations

from typing import Any


def required_node_images(cfg: Any) -> set[str]:
    """Return the set of node images named by ``cfg.nodes``.

    The load balancer image is not included.
    """
    return {node.image for node in cfg.nodes}