"""Typed view of the parts of a KUBECONFIG that cluster tooling touches.

Fields that are not inspected are kept as plain data in ``other_fields`` so
that they can be written back unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from kindcluster.kubeconfig.helpers import KubeconfigError


def _mapping(value: Any, what: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise KubeconfigError(f"{what} must be a mapping, got {type(value).__name__}")
    return value


def _sequence(value: Any, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise KubeconfigError(f"{what} must be a list, got {type(value).__name__}")
    return value


def _string(value: Any, what: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise KubeconfigError(f"{what} must be a string, got {type(value).__name__}")
    return value


@dataclass
class Cluster:
    """How to reach a kubernetes cluster."""

    server: str = ""
    other_fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def _parse(cls, data: Any) -> Cluster:
        raw = dict(_mapping(data, "cluster"))
        server = _string(raw.pop("server", None), "cluster.server")
        return cls(server=server, other_fields=raw)

    def _dump(self) -> dict[str, Any]:
        out = dict(self.other_fields)
        if self.server:
            out["server"] = self.server
        return out


@dataclass
class NamedCluster:
    """A cluster entry under its nickname."""

    name: str = ""
    cluster: Cluster = field(default_factory=Cluster)

    @classmethod
    def _parse(cls, data: Any) -> NamedCluster:
        raw = _mapping(data, "clusters entry")
        return cls(
            name=_string(raw.get("name"), "clusters entry name"),
            cluster=Cluster._parse(raw.get("cluster")),
        )

    def _dump(self) -> dict[str, Any]:
        return {"name": self.name, "cluster": self.cluster._dump()}


@dataclass
class NamedUser:
    """A user entry under its nickname; the user data is kept untouched."""

    name: str = ""
    user: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def _parse(cls, data: Any) -> NamedUser:
        raw = _mapping(data, "users entry")
        return cls(
            name=_string(raw.get("name"), "users entry name"),
            user=dict(_mapping(raw.get("user"), "users entry user")),
        )

    def _dump(self) -> dict[str, Any]:
        return {"name": self.name, "user": dict(self.user)}


@dataclass
class Context:
    """References to a cluster and a user, plus any other context data."""

    cluster: str = ""
    user: str = ""
    other_fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def _parse(cls, data: Any) -> Context:
        raw = dict(_mapping(data, "context"))
        cluster = _string(raw.pop("cluster", None), "context.cluster")
        user = _string(raw.pop("user", None), "context.user")
        return cls(cluster=cluster, user=user, other_fields=raw)

    def _dump(self) -> dict[str, Any]:
        out = dict(self.other_fields)
        out["cluster"] = self.cluster
        out["user"] = self.user
        return out


@dataclass
class NamedContext:
    """A context entry under its nickname."""

    name: str = ""
    context: Context = field(default_factory=Context)

    @classmethod
    def _parse(cls, data: Any) -> NamedContext:
        raw = _mapping(data, "contexts entry")
        return cls(
            name=_string(raw.get("name"), "contexts entry name"),
            context=Context._parse(raw.get("context")),
        )

    def _dump(self) -> dict[str, Any]:
        return {"name": self.name, "context": self.context._dump()}


_KNOWN_KEYS = ("clusters", "users", "contexts", "current-context")


@dataclass
class Config:
    """A KUBECONFIG document."""

    clusters: list[NamedCluster] = field(default_factory=list)
    users: list[NamedUser] = field(default_factory=list)
    contexts: list[NamedContext] = field(default_factory=list)
    current_context: str = ""
    other_fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> Config:
        """Build a Config from decoded YAML data; ``None`` gives an empty one."""
        raw = _mapping(data, "kubeconfig")
        other = {key: value for key, value in raw.items() if key not in _KNOWN_KEYS}
        return cls(
            clusters=[NamedCluster._parse(item) for item in _sequence(raw.get("clusters"), "clusters")],
            users=[NamedUser._parse(item) for item in _sequence(raw.get("users"), "users")],
            contexts=[NamedContext._parse(item) for item in _sequence(raw.get("contexts"), "contexts")],
            current_context=_string(raw.get("current-context"), "current-context"),
            other_fields=other,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return plain data ready for YAML, leaving out empty fields."""
        out = dict(self.other_fields)
        if self.clusters:
            out["clusters"] = [entry._dump() for entry in self.clusters]
        if self.users:
            out["users"] = [entry._dump() for entry in self.users]
        if self.contexts:
            out["contexts"] = [entry._dump() for entry in self.contexts]
        if self.current_context:
            out["current-context"] = self.current_context
        return out