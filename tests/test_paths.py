import os

from kindcluster.kubeconfig.paths import (
    discard_empty_and_duplicates,
    home_dir,
    path_for_merge,
    paths,
)


def _env(values):
    return lambda name: values.get(name, "")


DUPLICATED = os.pathsep.join(["/foo", "/bar", "", "/foo", "/bar"])


def test_paths_explicit():
    result = paths("foo", _env({"KUBECONFIG": DUPLICATED, "HOME": "/home"}))
    assert result == ["foo"]


def test_paths_kubeconfig_list():
    result = paths("", _env({"KUBECONFIG": DUPLICATED, "HOME": "/home"}))
    assert result == ["/foo", "/bar"]


def test_paths_home_kube_config():
    result = paths("", _env({"HOME": "/home"}))
    assert result == ["/home/.kube/config"]


def test_paths_nothing_set():
    assert paths("", _env({})) == [".kube/config"]


def test_discard_empty_and_duplicates():
    assert discard_empty_and_duplicates(["", "a", "b", "a", "", "c", "b"]) == ["a", "b", "c"]
    assert discard_empty_and_duplicates([]) == []


def test_path_for_merge_explicit():
    result = path_for_merge("foo", _env({"KUBECONFIG": DUPLICATED, "HOME": "/home"}))
    assert result == "foo"


def test_path_for_merge_first_existing(tmp_path):
    (tmp_path / "fake-home").mkdir()
    files = []
    for name in ("foo", "bar", "baz"):
        path = tmp_path / name
        path.touch()
        files.append(str(path))
    result = path_for_merge("", _env({"KUBECONFIG": os.pathsep.join(files)}))
    assert result == files[0]


def test_path_for_merge_skips_missing(tmp_path):
    existing = tmp_path / "present"
    existing.touch()
    value = os.pathsep.join([str(tmp_path / "missing"), str(existing)])
    assert path_for_merge("", _env({"KUBECONFIG": value})) == str(existing)


def test_path_for_merge_last_when_none_exist():
    value = os.pathsep.join(["/bogus/path", "/bogus/path/two"])
    assert path_for_merge("", _env({"KUBECONFIG": value})) == "/bogus/path/two"


def test_home_dir_windows_home_with_kube_config(tmp_path):
    fake_home = tmp_path / "fake-home"
    kube_config = fake_home / ".kube" / "config"
    kube_config.parent.mkdir(parents=True)
    kube_config.touch()
    result = home_dir(
        "windows",
        _env(
            {
                "HOME": str(fake_home),
                "HOMEDRIVE": "ZZ:",
                "HOMEPATH": "ZZ:\\Users\\fake-user-zzz",
            }
        ),
    )
    assert result == str(fake_home)


def test_home_dir_windows_home_without_kube_config(tmp_path):
    result = home_dir(
        "windows",
        _env({"HOME": str(tmp_path), "HOMEDRIVE": "", "HOMEPATH": "Users/fake-user-zzz"}),
    )
    assert result == str(tmp_path)


def test_home_dir_windows_none_exist():
    result = home_dir(
        "windows",
        _env({"HOME": "Z:/faaaaake", "HOMEDRIVE": "Z:/", "HOMEPATH": "Users/fake-user-zzz"}),
    )
    assert result == "Z:/faaaaake"


def test_home_dir_windows_no_path():
    assert home_dir("windows", _env({})) == ""


def test_home_dir_non_windows_uses_home():
    assert home_dir("linux", _env({"HOME": "/home/someone", "USERPROFILE": "/other"})) == "/home/someone"