"""Small helpers shared by the kubeconfig modules."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kindcluster.kubeconfig.types import Config


class KubeconfigError(Exception):
    """Raised when a kubeconfig cannot be read, checked, encoded or written."""


def kind_cluster_key(cluster_name: str) -> str:
    """Return the name used for a kind cluster's kubeconfig entries."""
    return "kind-" + cluster_name


def check_kubeadm_expectations(cfg: Config) -> None:
    """Ensure a kubeadm kubeconfig holds exactly one cluster, user and context."""
    for label, entries in (
        ("cluster", cfg.clusters),
        ("user", cfg.users),
        ("context", cfg.contexts),
    ):
        if len(entries) != 1:
            raise KubeconfigError(
                f"kubeadm KUBECONFIG should have one {label}, but read {len(entries)}"
            )