"""Docker node containers and the helpers that run host commands."""

from __future__ import annotations

import io
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

CLUSTER_LABEL_KEY = "io.x-k8s.kind.cluster"
"""Label put on every node container naming its cluster."""

NODE_ROLE_LABEL_KEY = "io.x-k8s.kind.role"
"""Label put on every node container naming its role."""


class CommandError(Exception):
    """A command exited with a non-zero status.

    ``output`` holds everything the command printed, ``stdout`` only its
    standard output.
    """

    def __init__(
        self,
        argv: Sequence[str],
        returncode: int,
        output: bytes = b"",
        stdout: bytes = b"",
    ) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.output = output
        self.stdout = stdout
        command_line = " ".join(self.argv)
        super().__init__(f'command "{command_line}" failed with error: exit status {returncode}')


def _read_input(stdin: Any) -> bytes | None:
    if stdin is None:
        return None
    if isinstance(stdin, (bytes, bytearray)):
        return bytes(stdin)
    if isinstance(stdin, str):
        return stdin.encode("utf-8")
    data = stdin.read()
    return data.encode("utf-8") if isinstance(data, str) else bytes(data)


def _emit(stream: Any, data: bytes) -> None:
    if not data:
        return
    if isinstance(stream, io.TextIOBase):
        stream.write(data.decode("utf-8", errors="replace"))
    else:
        stream.write(data)


def run(
    argv: Sequence[str],
    *,
    stdin: Any = None,
    stdout: Any = None,
    stderr: Any = None,
    timeout: float | None = None,
) -> None:
    """Run ``argv``, copying its output to the given streams.

    ``stdin`` may be bytes, text or a readable stream.  When ``stdout`` and
    ``stderr`` are the same stream (or both unset) the two outputs are
    combined.  Raises CommandError on a non-zero exit.
    """
    data = _read_input(stdin)
    merged = stdout is stderr
    kwargs: dict[str, Any] = {
        "stdout": subprocess.PIPE,
        "stderr": subprocess.STDOUT if merged else subprocess.PIPE,
        "timeout": timeout,
    }
    if data is None:
        kwargs["stdin"] = subprocess.DEVNULL
    else:
        kwargs["input"] = data
    proc = subprocess.run(list(argv), **kwargs)
    out = proc.stdout or b""
    err = proc.stderr or b""
    if stdout is not None:
        _emit(stdout, out)
    if stderr is not None and not merged:
        _emit(stderr, err)
    if proc.returncode != 0:
        raise CommandError(argv, proc.returncode, output=out + err, stdout=out)


def output(argv: Sequence[str]) -> bytes:
    """Run ``argv`` and return its standard output; raises CommandError on failure."""
    proc = subprocess.run(
        list(argv),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )
    out = proc.stdout or b""
    if proc.returncode != 0:
        raise CommandError(argv, proc.returncode, output=out + (proc.stderr or b""), stdout=out)
    return out


def output_lines(argv: Sequence[str]) -> list[str]:
    """Run ``argv`` and return its standard output split into lines."""
    return output(argv).decode("utf-8", errors="replace").splitlines()


@dataclass
class NodeCommand:
    """A command to run inside a node container with ``docker exec``."""

    name_or_id: str
    command: str
    args: tuple[str, ...] = ()
    env: list[str] = field(default_factory=list)
    timeout: float | None = None

    def _argv(self, interactive: bool) -> list[str]:
        # privileged so that commands may remount and the like
        argv = ["docker", "exec", "--privileged"]
        if interactive:
            argv.append("-i")
        for entry in self.env:
            argv.extend(["-e", entry])
        argv.extend([self.name_or_id, self.command, *self.args])
        return argv

    def docker_args(self) -> list[str]:
        """Return the full docker command line for a run without input."""
        return self._argv(False)

    def run(self, *, stdin: Any = None, stdout: Any = None, stderr: Any = None) -> None:
        """Run the command in the node; input makes the exec interactive."""
        run(
            self._argv(stdin is not None),
            stdin=stdin,
            stdout=stdout,
            stderr=stderr,
            timeout=self.timeout,
        )


@dataclass(frozen=True)
class Node:
    """A node container, known by its name."""

    name: str

    def __str__(self) -> str:
        return self.name

    def role(self) -> str:
        """Return the role label of the node."""
        argv = [
            "docker",
            "inspect",
            "--format",
            f'{{{{ index .Config.Labels "{NODE_ROLE_LABEL_KEY}"}}}}',
            self.name,
        ]
        try:
            lines = output_lines(argv)
        except CommandError as exc:
            raise RuntimeError(f"failed to get role for node: {exc}") from exc
        if len(lines) != 1:
            raise RuntimeError(f"failed to get role for node: output lines {len(lines)} != 1")
        return lines[0]

    def ip(self) -> tuple[str, str]:
        """Return the node's IPv4 and IPv6 addresses."""
        argv = [
            "docker",
            "inspect",
            "-f",
            "{{range .NetworkSettings.Networks}}{{.IPAddress}},{{.GlobalIPv6Address}}{{end}}",
            self.name,
        ]
        try:
            lines = output_lines(argv)
        except CommandError as exc:
            raise RuntimeError(f"failed to get container details: {exc}") from exc
        if len(lines) != 1:
            raise RuntimeError(f"file should only be one line, got {len(lines)} lines")
        ips = lines[0].split(",")
        if len(ips) != 2:
            raise RuntimeError(f"container addresses should have 2 values, got {len(ips)} values")
        return ips[0], ips[1]

    def command(self, command: str, *args: str) -> NodeCommand:
        """Return a command that runs ``command`` with ``args`` inside the node."""
        return NodeCommand(name_or_id=self.name, command=command, args=tuple(args))

    def serial_logs(self, stream: Any) -> None:
        """Write the container's console output to ``stream``."""
        run(["docker", "logs", self.name], stdout=stream, stderr=stream)