"""Reading kubeconfigs from kubeadm output and from disk."""

from __future__ import annotations

import os

import yaml

from kindcluster.kubeconfig.helpers import (
    KubeconfigError,
    check_kubeadm_expectations,
    kind_cluster_key,
)
from kindcluster.kubeconfig.types import Config


def _decode(raw: str) -> Config:
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise KubeconfigError(f"failed to decode KUBECONFIG: {exc}") from exc
    return Config.from_dict(data)


def kind_from_raw_kubeadm(raw_kubeadm_kubeconfig: str, cluster_name: str, server: str = "") -> Config:
    """Derive a kind kubeconfig from kubeadm's admin kubeconfig.

    Every named reference is renamed to the kind cluster key; the server is
    replaced when ``server`` is non-empty.
    """
    cfg = _decode(raw_kubeadm_kubeconfig)
    check_kubeadm_expectations(cfg)

    key = kind_cluster_key(cluster_name)
    cfg.clusters[0].name = key
    cfg.users[0].name = key
    cfg.contexts[0].name = key
    cfg.contexts[0].context.user = key
    cfg.contexts[0].context.cluster = key
    cfg.current_context = key

    if server:
        cfg.clusters[0].cluster.server = server
    return cfg


def read(config_path: str | os.PathLike[str]) -> Config:
    """Load the kubeconfig at ``config_path``; a missing file gives an empty Config."""
    try:
        with open(config_path, encoding="utf-8") as handle:
            raw = handle.read()
    except FileNotFoundError:
        return Config()
    return _decode(raw)