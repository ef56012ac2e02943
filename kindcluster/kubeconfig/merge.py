"""Merging a kind kubeconfig into an existing kubeconfig file."""

from __future__ import annotations

import contextlib
import os

from kindcluster.kubeconfig.helpers import KubeconfigError, check_kubeadm_expectations
from kindcluster.kubeconfig.paths import path_for_merge
from kindcluster.kubeconfig.read import read
from kindcluster.kubeconfig.types import Config
from kindcluster.kubeconfig.write import lock_file, unlock_file, write


def _upsert(entries: list, new_entry) -> None:
    replaced = False
    for index, entry in enumerate(entries):
        if entry.name == new_entry.name:
            entries[index] = new_entry
            replaced = True
    if not replaced:
        entries.append(new_entry)


def merge(existing: Config, kind: Config) -> None:
    """Merge the kind config into ``existing`` in place.

    Entries with the same name are replaced, others appended, and the current
    context is switched to the kind one.
    """
    check_kubeadm_expectations(kind)

    _upsert(existing.clusters, kind.clusters[0])
    _upsert(existing.users, kind.users[0])
    _upsert(existing.contexts, kind.contexts[0])

    existing.current_context = kind.current_context

    # some clients rely on apiVersion and kind being present
    if not existing.other_fields:
        existing.other_fields = kind.other_fields


def write_merged(kind_config: Config, explicit_config_path: str = "") -> None:
    """Merge ``kind_config`` into the kubeconfig kubectl would merge into and write it."""
    config_path = path_for_merge(explicit_config_path, lambda name: os.environ.get(name, ""))

    try:
        lock_file(config_path)
    except OSError as exc:
        raise KubeconfigError(f"failed to lock config file: {exc}") from exc
    try:
        try:
            existing = read(config_path)
        except (KubeconfigError, OSError) as exc:
            raise KubeconfigError(f"failed to get kubeconfig to merge: {exc}") from exc
        merge(existing, kind_config)
        write(existing, config_path)
    finally:
        with contextlib.suppress(OSError):
            unlock_file(config_path)