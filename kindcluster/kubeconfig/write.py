"""Writing kubeconfigs to disk and the lock files that guard them."""

from __future__ import annotations

import contextlib
import os
from collections.abc import Iterator

from kindcluster.kubeconfig.encode import encode
from kindcluster.kubeconfig.helpers import KubeconfigError
from kindcluster.kubeconfig.types import Config

PathLike = str | os.PathLike[str]


def write(cfg: Config, config_path: PathLike) -> None:
    """Encode ``cfg`` to ``config_path``, creating parent directories as needed."""
    encoded = encode(cfg)
    directory = os.path.dirname(os.fspath(config_path))
    if directory and not os.path.exists(directory):
        try:
            os.makedirs(directory, mode=0o755, exist_ok=True)
        except OSError as exc:
            raise KubeconfigError(f"failed to create directory for KUBECONFIG: {exc}") from exc
    try:
        fd = os.open(config_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(encoded)
    except OSError as exc:
        raise KubeconfigError(f"failed to write KUBECONFIG: {exc}") from exc


def lock_name(filename: PathLike) -> str:
    """Return the lock file path that guards ``filename``."""
    return os.fspath(filename) + ".lock"


def lock_file(filename: PathLike) -> None:
    """Create the lock file for ``filename``; raises FileExistsError if already held."""
    directory = os.path.dirname(os.fspath(filename))
    if directory and not os.path.exists(directory):
        os.makedirs(directory, mode=0o755, exist_ok=True)
    fd = os.open(lock_name(filename), os.O_CREAT | os.O_EXCL, 0)
    os.close(fd)


def unlock_file(filename: PathLike) -> None:
    """Remove the lock file for ``filename``."""
    os.remove(lock_name(filename))


@contextlib.contextmanager
def locked(filename: PathLike) -> Iterator[None]:
    """Hold the lock for ``filename`` for the duration of the block."""
    lock_file(filename)
    try:
        yield
    finally:
        with contextlib.suppress(OSError):
            unlock_file(filename)