"""Locating the kubeconfig files to read from and merge into.

The rules follow kubectl:

- an explicit path is used alone, with no merging;
- otherwise ``$KUBECONFIG`` is a list of paths, with empty and duplicate
  entries dropped;
- otherwise ``$HOME/.kube/config`` is used.
"""

from __future__ import annotations

import os
import posixpath
import stat
import sys
from collections.abc import Callable, Iterable

GetEnv = Callable[[str], str]

KUBECONFIG_ENV = "KUBECONFIG"

_WINDOWS_PLATFORMS = frozenset({"windows", "win32"})


def paths(explicit_path: str, get_env: GetEnv) -> list[str]:
    """Return the kubeconfig paths to consider, in order."""
    if explicit_path:
        return [explicit_path]

    env_value = get_env(KUBECONFIG_ENV)
    listed = discard_empty_and_duplicates(env_value.split(os.pathsep) if env_value else [])
    if listed:
        return listed

    return [posixpath.join(home_dir(sys.platform, get_env), ".kube", "config")]


def path_for_merge(explicit_path: str, get_env: GetEnv) -> str:
    """Return the file kubectl would merge into.

    With several candidates this is the first existing file, or the last
    candidate when none exists.
    """
    candidates = paths(explicit_path, get_env)
    if len(candidates) == 1:
        return candidates[0]
    return next((name for name in candidates if os.path.isfile(name)), candidates[-1])


def discard_empty_and_duplicates(paths: Iterable[str]) -> list[str]:
    """Return the non-empty paths in order, each only once."""
    return list(dict.fromkeys(p for p in paths if p))


def _is_writable_dir(path: str) -> bool:
    try:
        mode = os.stat(path).st_mode
    except OSError:
        return False
    return stat.S_ISDIR(mode) and bool(mode & stat.S_IWUSR)


def home_dir(platform: str, get_env: GetEnv) -> str:
    """Return the home directory for the current user.

    On Windows the first of %HOME%, %HOMEDRIVE%%HOMEPATH%, %USERPROFILE%
    holding a ``.kube/config`` file wins; failing that the first of %HOME%,
    %USERPROFILE%, %HOMEDRIVE%%HOMEPATH% that is a writable directory, then
    the first that exists, then the first that is set.  Elsewhere it is $HOME.
    """
    if platform not in _WINDOWS_PLATFORMS:
        return get_env("HOME")

    home = get_env("HOME")
    home_drive, home_path = get_env("HOMEDRIVE"), get_env("HOMEPATH")
    drive_path = home_drive + home_path if home_drive and home_path else ""
    user_profile = get_env("USERPROFILE")

    for candidate in (home, drive_path, user_profile):
        if candidate and os.path.exists(os.path.join(candidate, ".kube", "config")):
            return candidate

    first_set = ""
    first_existing = ""
    for candidate in (home, user_profile, drive_path):
        if not candidate:
            continue
        first_set = first_set or candidate
        if not os.path.exists(candidate):
            continue
        first_existing = first_existing or candidate
        if _is_writable_dir(candidate):
            return candidate

    return first_existing or first_set