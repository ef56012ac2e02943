"""YAML encoding of kubeconfigs in the layout kubernetes tooling writes."""

from __future__ import annotations

import json
from typing import Any

import yaml

from kindcluster.kubeconfig.helpers import KubeconfigError
from kindcluster.kubeconfig.types import Config

_STR_TAG = "tag:yaml.org,2002:str"


class _Dumper(yaml.SafeDumper):
    """Dumper that double-quotes strings which would otherwise read back as non-strings."""


def _represent_str(dumper: _Dumper, value: str) -> yaml.ScalarNode:
    style = None
    if dumper.resolve(yaml.ScalarNode, value, (True, False)) != _STR_TAG:
        style = '"'
    return dumper.represent_scalar(_STR_TAG, value, style=style)


_Dumper.add_representer(str, _represent_str)


def _dump(data: Any) -> str:
    return yaml.dump(
        data,
        Dumper=_Dumper,
        default_flow_style=False,
        sort_keys=True,
        allow_unicode=True,
    )


def normalize_yaml(data: str) -> str:
    """Re-emit YAML in canonical form: JSON-compatible values, sorted keys.

    An empty mapping becomes the empty string.
    """
    try:
        loaded = yaml.safe_load(data)
        canonical = json.loads(json.dumps(loaded, default=str))
    except (yaml.YAMLError, ValueError) as exc:
        raise KubeconfigError(f"failed to normalize YAML: {exc}") from exc
    encoded = _dump(canonical)
    if encoded == "{}\n":
        return ""
    return encoded


def encode(cfg: Config) -> str:
    """Encode a Config to YAML text."""
    try:
        raw = yaml.safe_dump(cfg.to_dict(), default_flow_style=False, allow_unicode=True)
    except yaml.YAMLError as exc:
        raise KubeconfigError(f"failed to encode KUBECONFIG: {exc}") from exc
    try:
        return normalize_yaml(raw)
    except KubeconfigError as exc:
        raise KubeconfigError(f"failed to normalize KUBECONFIG encoding: {exc}") from exc