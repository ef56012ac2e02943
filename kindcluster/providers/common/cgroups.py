"""Waiting for a node's entrypoint to reach a state where exec is safe."""

from __future__ import annotations

import functools
import re
import subprocess
import threading
from collections.abc import Sequence


@functools.cache
def node_reached_cgroups_ready_regexp() -> re.Pattern[str]:
    """Return the pattern of a log line showing the node's cgroups are ready.

    It matches the cgroup v1 notice of the node entrypoint or systemd reaching
    the multi-user target under cgroup v2.
    """
    return re.compile("Reached target .*Multi-User System.*|detected cgroup v1")


def wait_until_log_regexp_matches(
    argv: Sequence[str],
    pattern: str | re.Pattern[str],
    timeout: float | None = 30.0,
) -> None:
    """Run ``argv`` until a line of its output matches ``pattern``.

    The command is stopped once a line matches or ``timeout`` seconds pass.
    Raises RuntimeError when no line matched; if the command failed on its
    own the error says so.
    """
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    timed_out = threading.Event()

    with subprocess.Popen(
        list(argv),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        errors="replace",
    ) as proc:

        def expire() -> None:
            timed_out.set()
            proc.kill()

        timer = threading.Timer(timeout, expire) if timeout is not None else None
        if timer is not None:
            timer.daemon = True
            timer.start()
        try:
            assert proc.stdout is not None
            for line in proc.stdout:
                if regex.search(line.rstrip("\r\n")):
                    proc.kill()
                    return
            returncode = proc.wait()
        finally:
            if timer is not None:
                timer.cancel()

    if not timed_out.is_set() and returncode != 0:
        failure = subprocess.CalledProcessError(returncode, list(argv))
        raise RuntimeError(f"failed to read logs: {failure}") from failure
    raise RuntimeError(f'could not find a log line that matches "{regex.pattern}"')