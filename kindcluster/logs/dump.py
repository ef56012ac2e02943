"""Copying directories out of nodes onto the host."""

from __future__ import annotations

import logging
import os
import posixpath
import shlex
import tarfile
import tempfile
from typing import Any, BinaryIO

logger = logging.getLogger(__name__)

# tar exits 1 when a file changed while being archived; only worse errors count
_TAR_SCRIPT = "tar --hard-dereference -C {} -chf - . || (r=$?; [ $r -eq 1 ] || exit $r)"

_CHUNK = 64 * 1024


def dump_dir(node: Any, node_dir: str, host_dir: str | os.PathLike[str]) -> None:
    """Copy ``node_dir`` on the node into ``host_dir`` on the host."""
    target = shlex.quote(posixpath.normpath(node_dir) + "/")
    cmd = node.command("sh", "-c", _TAR_SCRIPT.format(target))
    with tempfile.TemporaryFile() as buffer:
        cmd.run(stdout=buffer)
        buffer.seek(0)
        try:
            untar(buffer, host_dir)
        except (RuntimeError, OSError) as exc:
            raise RuntimeError(f'Untarring "{node_dir}": {exc}') from exc


class _CountingReader:
    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self.count = 0

    def read(self, size: int = -1) -> bytes:
        data = self._stream.read(size)
        self.count += len(data)
        return data


def _drain(stream: BinaryIO) -> None:
    while stream.read(_CHUNK):
        pass


def _extract(archive: tarfile.TarFile, member: tarfile.TarInfo, directory: str) -> None:
    path = os.path.normpath(os.path.join(directory, member.name.lstrip("/")))
    if member.isreg():
        fd = os.open(path, os.O_CREAT | os.O_RDWR, member.mode)
        written = 0
        with os.fdopen(fd, "wb") as out:
            source = archive.extractfile(member)
            try:
                while source is not None and (chunk := source.read(_CHUNK)):
                    out.write(chunk)
                    written += len(chunk)
            except (OSError, tarfile.TarError) as exc:
                raise RuntimeError(f"error writing to {path}: {exc}") from exc
        if written != member.size:
            raise RuntimeError(f"only wrote {written} bytes to {path}; expected {member.size}")
    elif member.isdir():
        if not os.path.exists(path):
            os.makedirs(path, mode=0o755, exist_ok=True)
    else:
        logger.warning(
            "tar file entry %s contained unsupported file type %s", member.name, member.type
        )


def untar(stream: BinaryIO, directory: str | os.PathLike[str]) -> None:
    """Unpack the tar archive read from ``stream`` into ``directory``.

    Only regular files and directories are written; other entries are
    skipped with a warning.  The stream is read to its end.
    """
    directory = os.fspath(directory)
    reader = _CountingReader(stream)
    try:
        archive = tarfile.open(fileobj=reader, mode="r|")
    except tarfile.ReadError as exc:
        if reader.count == 0:
            return
        raise RuntimeError(f"tar reading error: {exc}") from exc
    with archive:
        try:
            for member in archive:
                _extract(archive, member, directory)
        except tarfile.TarError as exc:
            raise RuntimeError(f"tar reading error: {exc}") from exc
    # trailing padding may remain; read it so the writer is not left waiting
    _drain(stream)