"""Management of the docker network that cluster nodes share."""

from __future__ import annotations

import hashlib
import ipaddress
import json
import re
import struct
from dataclasses import dataclass, field

from kindcluster.providers.docker.node import CommandError, output, output_lines, run

FIXED_NETWORK_NAME = "kind"
"""Default network; a user defined network gives nodes the embedded DNS."""

_MAX_ATTEMPTS = 5
_GO_REGEXP_META = set("\\.+*?()|[]{}^$")


@dataclass
class NetworkInspectEntry:
    """The parts of ``docker network inspect`` output used to order networks."""

    id: str
    containers: dict[str, dict[str, str]] = field(default_factory=dict)

    @classmethod
    def _parse(cls, data: dict) -> NetworkInspectEntry:
        return cls(id=data.get("Id") or "", containers=data.get("Containers") or {})


def _quote_meta(text: str) -> str:
    return "".join("\\" + char if char in _GO_REGEXP_META else char for char in text)


def _name_filter(name: str) -> str:
    return "--filter=name=^" + _quote_meta(name) + "$"


def ensure_network(name: str) -> None:
    """Make sure exactly one docker network called ``name`` exists.

    A new network gets an IPv6 ULA subnet derived from its name, probing
    other subnets on pool overlaps; hosts without IPv6 get an IPv4 network.
    """
    if remove_duplicate_networks(name):
        return

    mtu = get_default_network_mtu()
    try:
        _create_network_no_duplicates(name, generate_ula_subnet_from_name(name, 0), mtu)
        return
    except CommandError as exc:
        if is_ipv6_unavailable_error(exc):
            _create_network_no_duplicates(name, "", mtu)
            return
        if not is_pool_overlap_error(exc):
            raise
        # another process may have created the network meanwhile
        if check_if_network_exists(name):
            return

    for attempt in range(1, _MAX_ATTEMPTS):
        try:
            _create_network_no_duplicates(name, generate_ula_subnet_from_name(name, attempt), mtu)
            return
        except CommandError as exc:
            if not is_pool_overlap_error(exc):
                raise
            if check_if_network_exists(name):
                return
    raise RuntimeError("exhausted attempts trying to find a non-overlapping subnet")


def _create_network_no_duplicates(name: str, ipv6_subnet: str, mtu: int) -> None:
    try:
        create_network(name, ipv6_subnet, mtu)
    except CommandError as exc:
        if not is_network_already_exists_error(exc):
            raise
    remove_duplicate_networks(name)


def remove_duplicate_networks(name: str) -> bool:
    """Delete all but the preferred network called ``name``; return whether one exists."""
    networks = sorted_networks_with_name(name)
    if len(networks) > 1:
        try:
            delete_networks(*networks[1:])
        except CommandError as exc:
            if not is_only_error_no_such_network(exc):
                raise
    return bool(networks)


def create_network(name: str, ipv6_subnet: str = "", mtu: int = 0) -> None:
    """Create a bridge network, with IPv6 when a subnet is given."""
    argv = [
        "docker",
        "network",
        "create",
        "-d=bridge",
        "-o",
        "com.docker.network.bridge.enable_ip_masquerade=true",
    ]
    if mtu > 0:
        argv.extend(["-o", f"com.docker.network.driver.mtu={mtu}"])
    if ipv6_subnet:
        argv.extend(["--ipv6", "--subnet", ipv6_subnet])
    argv.append(name)
    run(argv)


def get_default_network_mtu() -> int:
    """Return the MTU of docker's default bridge network, or 0 if unknown."""
    argv = [
        "docker",
        "network",
        "inspect",
        "bridge",
        "-f",
        '{{ index .Options "com.docker.network.driver.mtu" }}',
    ]
    try:
        lines = output_lines(argv)
    except (CommandError, OSError):
        return 0
    if len(lines) != 1 or not re.fullmatch(r"[+-]?[0-9]+", lines[0]):
        return 0
    return int(lines[0])


def sorted_networks_with_name(name: str) -> list[str]:
    """Return the IDs of networks called ``name``, the preferred one first."""
    ids = networks_with_name(name)
    if len(ids) < 2:
        return ids
    networks = inspect_networks(ids)
    sort_network_inspect_entries(networks)
    return [network.id for network in networks]


def sort_network_inspect_entries(networks: list[NetworkInspectEntry]) -> None:
    """Sort in place: networks with more containers first, then by ID."""
    networks.sort(key=lambda network: (-len(network.containers), network.id))


def inspect_networks(network_ids: list[str]) -> list[NetworkInspectEntry]:
    """Inspect the given networks; ones that no longer exist are left out."""
    try:
        raw = output(["docker", "network", "inspect", *network_ids])
    except CommandError as exc:
        if not is_only_error_no_such_network(exc):
            raise
        raw = exc.stdout
    try:
        decoded = json.loads(raw)
    except ValueError as exc:
        raise RuntimeError(f"failed to decode networks list: {exc}") from exc
    return [NetworkInspectEntry._parse(item) for item in decoded or []]


def networks_with_name(name: str) -> list[str]:
    """Return the IDs of networks whose name is exactly ``name``."""
    raw = output(["docker", "network", "ls", _name_filter(name), "--format={{.ID}}"])
    cleaned = raw.decode("utf-8", errors="replace").removesuffix("\n")
    if not cleaned:
        return []
    return cleaned.split("\n")


def check_if_network_exists(name: str) -> bool:
    """Return whether a network called ``name`` exists."""
    raw = output(["docker", "network", "ls", _name_filter(name), "--format={{.Name}}"])
    return raw.decode("utf-8", errors="replace").startswith(name)


def delete_networks(*args: str) -> None:
    """Remove the given networks."""
    run(["docker", "network", "rm", *args])


def _error_output(err: BaseException) -> str | None:
    if not isinstance(err, CommandError):
        return None
    return err.output.decode("utf-8", errors="replace")


def is_ipv6_unavailable_error(err: BaseException) -> bool:
    """Return whether docker failed because IPv6 is unavailable on the host."""
    text = _error_output(err)
    return text is not None and text.startswith(
        "Error response from daemon: Cannot read IPv6 setup for bridge"
    )


def is_pool_overlap_error(err: BaseException) -> bool:
    """Return whether docker failed because the subnet overlaps another one."""
    text = _error_output(err)
    return text is not None and (
        text.startswith(
            "Error response from daemon: Pool overlaps with other one on this address space"
        )
        or "networks have overlapping" in text
    )


def is_network_already_exists_error(err: BaseException) -> bool:
    """Return whether docker failed because the network already exists."""
    text = _error_output(err)
    return (
        text is not None
        and text.startswith("Error response from daemon: network with name")
        and "already exists" in text
    )


def is_only_error_no_such_network(err: BaseException) -> bool:
    """Return whether the only errors docker reported were missing networks."""
    text = _error_output(err)
    if text is None:
        return False
    # an unterminated final line is not examined
    *complete_lines, _ = text.split("\n")
    for line in complete_lines:
        if line.startswith("Error: No such network:"):
            continue
        if line.startswith("Error: "):
            return False
    return True


def generate_ula_subnet_from_name(name: str, attempt: int = 0) -> str:
    """Derive an IPv6 /64 subnet in fc00::/8 from the network name and attempt."""
    digest = hashlib.sha1(name.encode("utf-8") + struct.pack("<i", attempt)).digest()
    address = bytes([0xFC, 0x00]) + digest[2:8] + bytes(8)
    return str(ipaddress.IPv6Network((int.from_bytes(address, "big"), 64)))