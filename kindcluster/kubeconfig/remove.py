"""Removing kind cluster entries from kubeconfig files."""

from __future__ import annotations

import contextlib
import os

from kindcluster.kubeconfig.helpers import KubeconfigError, kind_cluster_key
from kindcluster.kubeconfig.paths import paths
from kindcluster.kubeconfig.read import read
from kindcluster.kubeconfig.types import Config
from kindcluster.kubeconfig.write import lock_file, unlock_file, write


def remove(cfg: Config, kind_cluster_name: str) -> bool:
    """Drop the kind cluster's entries from ``cfg``; return whether anything changed."""
    key = kind_cluster_key(kind_cluster_name)

    clusters = [entry for entry in cfg.clusters if entry.name != key]
    users = [entry for entry in cfg.users if entry.name != key]
    contexts = [entry for entry in cfg.contexts if entry.name != key]
    mutated = (
        len(clusters) != len(cfg.clusters)
        or len(users) != len(cfg.users)
        or len(contexts) != len(cfg.contexts)
    )
    cfg.clusters, cfg.users, cfg.contexts = clusters, users, contexts

    if cfg.current_context == key:
        cfg.current_context = ""
        mutated = True

    return mutated


def _remove_from_file(kind_cluster_name: str, config_path: str) -> None:
    try:
        lock_file(config_path)
    except OSError as exc:
        raise KubeconfigError(f"failed to lock config file: {exc}") from exc
    try:
        try:
            existing = read(config_path)
        except (KubeconfigError, OSError) as exc:
            raise KubeconfigError(f"failed to read kubeconfig to remove KIND entry: {exc}") from exc
        if remove(existing, kind_cluster_name):
            write(existing, config_path)
    finally:
        with contextlib.suppress(OSError):
            unlock_file(config_path)


def remove_kind(kind_cluster_name: str, explicit_path: str = "") -> None:
    """Remove the kind cluster from every kubeconfig kubectl would consider."""
    for config_path in paths(explicit_path, lambda name: os.environ.get(name, "")):
        _remove_from_file(kind_cluster_name, config_path)