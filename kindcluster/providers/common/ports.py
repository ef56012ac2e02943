"""Host port selection for published container ports."""

from __future__ import annotations

import socket
from collections.abc import Callable

APISERVER_INTERNAL_PORT = 6443
"""Port the control plane listens on inside the node network."""

Release = Callable[[], None]


def port_or_get_free_port(port: int, listen_addr: str) -> tuple[int, Release | None]:
    """Return ``port`` unchanged, or pick a free one when it is unset.

    ``-1`` means "let the backend choose" and gives 0; ``0`` picks a free port
    on ``listen_addr`` and also returns the function that releases it.
    """
    if port == -1:
        return 0, None
    if port == 0:
        return get_free_port(listen_addr)
    return port, None


def get_free_port(listen_addr: str) -> tuple[int, Release]:
    """Find a free TCP port on ``listen_addr``.

    The port stays held until the returned release function is called, so
    that repeated calls do not hand out the same port.  Raises OSError when
    the address cannot be listened on.
    """
    host = listen_addr or None
    infos = socket.getaddrinfo(host, 0, type=socket.SOCK_STREAM, flags=socket.AI_PASSIVE)
    last_error: OSError | None = None
    for family, sock_type, proto, _, address in infos:
        sock = socket.socket(family, sock_type, proto)
        try:
            sock.bind(address)
            sock.listen()
        except OSError as exc:
            sock.close()
            last_error = exc
            continue
        return sock.getsockname()[1], sock.close
    raise last_error or OSError(f"cannot listen on {listen_addr!r}")