"""Collecting debug information from a node into files on the host."""

from __future__ import annotations

import os
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any, BinaryIO

_NODE_LOGS = (
    (("cat", "/kind/version"), "kubernetes-version.txt"),
    (("journalctl", "--no-pager"), "journal.log"),
    (("journalctl", "--no-pager", "-u", "kubelet.service"), "kubelet.log"),
    (("journalctl", "--no-pager", "-u", "containerd.service"), "containerd.log"),
    (("crictl", "images"), "images.log"),
)


def file_on_host(path: str | os.PathLike[str]) -> BinaryIO:
    """Create ``path`` for binary writing, making missing parent directories."""
    parent = os.path.dirname(os.fspath(path))
    if parent:
        os.makedirs(parent, exist_ok=True)
    return open(path, "wb")


def _run_all(tasks: list[Callable[[], None]]) -> None:
    """Run every task concurrently and raise once all have finished."""
    with ThreadPoolExecutor(max_workers=max(len(tasks), 1)) as pool:
        futures = [pool.submit(task) for task in tasks]
    errors = [exc for exc in (future.exception() for future in futures) if exc is not None]
    if len(errors) == 1:
        raise errors[0]
    if errors:
        raise RuntimeError("[" + ", ".join(str(exc) for exc in errors) + "]") from errors[0]


def collect_logs(node: Any, directory: str | os.PathLike[str]) -> None:
    """Write the node's version, journals and image list under ``directory``.

    ``node.command(name, *args)`` must return a command whose
    ``run(stdout=..., stderr=...)`` writes the output.  Every collection runs
    even when others fail; the failures are raised afterwards.
    """

    def to_file(argv: tuple[str, ...], filename: str) -> Callable[[], None]:
        def task() -> None:
            with file_on_host(os.path.join(directory, filename)) as handle:
                node.command(*argv).run(stdout=handle, stderr=handle)

        return task

    _run_all([to_file(argv, filename) for argv, filename in _NODE_LOGS])