"""Facts about the docker host that shape how node containers are created."""

from __future__ import annotations

import csv
import io
import json
from dataclasses import dataclass

from kindcluster.providers.docker.node import CommandError, output, output_lines

_DEV_MAPPER_DRIVERS = frozenset({"btrfs", "zfs", "devicemapper"})
_DEV_MAPPER_BACKING = frozenset({"btrfs", "zfs", "xfs"})


@dataclass(frozen=True)
class HostInfo:
    """Capabilities of the docker host."""

    cgroup2: bool = False
    supports_memory_limit: bool = False
    supports_pids_limit: bool = False
    supports_cpu_shares: bool = False
    rootless: bool = False


def is_available() -> bool:
    """Return whether a docker client is installed."""
    try:
        lines = output_lines(["docker", "-v"])
    except (CommandError, OSError):
        return False
    return len(lines) == 1 and lines[0].startswith("Docker version")


def userns_remap() -> bool:
    """Return whether dockerd has user namespace remapping enabled."""
    try:
        lines = output_lines(["docker", "info", "--format", "'{{json .SecurityOptions}}'"])
    except (CommandError, OSError):
        return False
    return bool(lines) and "name=userns" in lines[0]


def mount_dev_mapper() -> bool:
    """Return whether /dev/mapper should be mounted into nodes.

    True for the btrfs, zfs and devicemapper storage drivers, or when the
    backing filesystem is btrfs, zfs or xfs.
    """
    try:
        lines = output_lines(["docker", "info", "-f", "{{.Driver}}"])
    except (CommandError, OSError):
        return False
    if len(lines) != 1:
        return False
    storage = lines[0].strip().lower()
    if storage in _DEV_MAPPER_DRIVERS:
        return True

    try:
        lines = output_lines(["docker", "info", "-f", "{{json .DriverStatus }}"])
    except (CommandError, OSError):
        return False
    if len(lines) != 1:
        return False
    try:
        status = json.loads(lines[0])
    except ValueError:
        return False
    if not isinstance(status, list) or not all(
        isinstance(item, list) and all(isinstance(part, str) for part in item) for item in status
    ):
        return False
    for item in status:
        if len(item) >= 2 and item[0] == "Backing Filesystem":
            storage = item[1].lower()
            break
    return storage in _DEV_MAPPER_BACKING


def parse_docker_info(raw: str | bytes) -> HostInfo:
    """Build a HostInfo from ``docker info --format '{{json .}}'`` output.

    Raises ValueError when the output cannot be decoded.
    """
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("docker info output is not a JSON object")

    # with no cgroup driver the limit flags mean nothing
    limits = data.get("CgroupDriver") != "none"

    rootless = False
    for option in data.get("SecurityOptions") or []:
        try:
            rows = list(csv.reader(io.StringIO(option)))
        except csv.Error as exc:
            raise ValueError(f"cannot parse security option {option!r}: {exc}") from exc
        if any(value == "name=rootless" for row in rows for value in row):
            rootless = True

    return HostInfo(
        cgroup2=data.get("CgroupVersion") == "2",
        supports_memory_limit=limits and bool(data.get("MemoryLimit")),
        supports_pids_limit=limits and bool(data.get("PidsLimit")),
        supports_cpu_shares=limits and bool(data.get("CPUShares")),
        rootless=rootless,
    )


def docker_info() -> HostInfo:
    """Query the docker host; raises RuntimeError when docker cannot be asked."""
    try:
        raw = output(["docker", "info", "--format", "{{json .}}"])
    except (CommandError, OSError) as exc:
        raise RuntimeError(f"failed to get docker info: {exc}") from exc
    return parse_docker_info(raw)


def mount_fuse() -> bool:
    """Return whether /dev/fuse should be passed to nodes (rootless docker)."""
    try:
        info = docker_info()
    except (RuntimeError, ValueError):
        return False
    return info.rootless