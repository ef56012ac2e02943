"""Proxy environment variables passed on to nodes."""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any

HTTP_PROXY = "HTTP_PROXY"
HTTPS_PROXY = "HTTPS_PROXY"
NO_PROXY = "NO_PROXY"


def _environ(name: str) -> str:
    return os.environ.get(name, "")


def get_proxy_envs(cfg: Any, get_env: Callable[[str], str] | None = None) -> dict[str, str]:
    """Return the proxy variables to set, in upper and lower case.

    ``cfg`` needs ``networking.service_subnet`` and ``networking.pod_subnet``.
    When any proxy is set, both subnets are appended to NO_PROXY.
    """
    lookup = get_env or _environ
    envs: dict[str, str] = {}
    for name in (HTTP_PROXY, HTTPS_PROXY, NO_PROXY):
        value = lookup(name) or lookup(name.lower())
        if value:
            envs[name] = value
            envs[name.lower()] = value

    if envs:
        networking = cfg.networking
        subnets = f"{networking.service_subnet},{networking.pod_subnet}"
        existing = envs.get(NO_PROXY, "")
        no_proxy = f"{existing},{subnets}" if existing else subnets
        envs[NO_PROXY] = no_proxy
        envs[NO_PROXY.lower()] = no_proxy
    return envs