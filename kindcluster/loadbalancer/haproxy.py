"""Configuration for the external haproxy load balancer in front of control planes."""

from __future__ import annotations

from dataclasses import dataclass, field

IMAGE = "docker.io/kindest/haproxy:v20230606-42a2262b"
"""The load balancer image and tag."""

CONFIG_PATH = "/usr/local/etc/haproxy/haproxy.cfg"
"""Where the configuration file lives inside the image."""

_HEADER = """\
# generated by kind
global
  log /dev/log local0
  log /dev/log local1 notice
  daemon
  # limit memory usage to approximately 18 MB
  maxconn 100000

resolvers docker
  nameserver dns 127.0.0.11:53

defaults
  log global
  mode tcp
  option dontlognull
  # TODO: tune these
  timeout connect 5000
  timeout client 50000
  timeout server 50000
  # allow to boot despite dns don't resolve backends
  default-server init-addr none

frontend control-plane
"""

_BACKEND_HEADER = """\
  default_backend kube-apiservers

backend kube-apiservers
  option httpchk GET /healthz
  # TODO: we should be verifying (!)
  """


@dataclass
class ConfigData:
    """Values substituted into the load balancer configuration."""

    control_plane_port: int
    backend_servers: dict[str, str] = field(default_factory=dict)
    ipv6: bool = False


def render_config(data: ConfigData) -> str:
    """Render the haproxy configuration for ``data``.

    Backend servers are listed in order of their names.
    """
    port = data.control_plane_port
    parts = [_HEADER, f"  bind *:{port}\n"]
    parts.append(f"  bind :::{port};\n" if data.ipv6 else "  \n")
    parts.append(_BACKEND_HEADER)
    family = "ipv6" if data.ipv6 else "ipv4"
    parts.extend(
        f"\n  server {server} {address} check check-ssl verify none "
        f"resolvers docker resolve-prefer {family}"
        for server, address in sorted(data.backend_servers.items())
    )
    parts.append("\n")
    return "".join(parts)