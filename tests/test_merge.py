import pytest

from kindcluster.kubeconfig.helpers import KubeconfigError
from kindcluster.kubeconfig.merge import merge, write_merged
from kindcluster.kubeconfig.types import (
    Cluster,
    Config,
    Context,
    NamedCluster,
    NamedContext,
    NamedUser,
)
from kindcluster.kubeconfig.write import lock_name


def _simple(name, server=""):
    return Config(
        clusters=[NamedCluster(name=name, cluster=Cluster(server=server))],
        users=[NamedUser(name=name)],
        contexts=[NamedContext(name=name)],
    )


def _kind_config():
    return Config(
        clusters=[
            NamedCluster(
                name="kind-kind",
                cluster=Cluster(
                    server="https://127.0.0.1:6443",
                    other_fields={"certificate-authority-data": "definitelyacert"},
                ),
            )
        ],
        contexts=[NamedContext(name="kind-kind", context=Context(user="kind-kind", cluster="kind-kind"))],
        users=[
            NamedUser(
                name="kind-kind",
                user={"client-certificate-data": "seemslegit", "client-key-data": "yep"},
            )
        ],
        current_context="kind-kind",
        other_fields={"apiVersion": "v1", "kind": "Config", "preferences": {}},
    )


def test_merge_bad_kind_config():
    existing = Config()
    with pytest.raises(KubeconfigError):
        merge(existing, Config())
    assert existing == Config()


def test_merge_empty_existing():
    existing = Config()
    merge(existing, _simple("kind-kind"))
    assert existing == _simple("kind-kind")


def test_merge_replace_existing():
    existing = _simple("kind-kind", server="foo")
    merge(existing, _simple("kind-kind"))
    assert existing == _simple("kind-kind")


def test_merge_add_to_existing():
    existing = _simple("kops-blah", server="foo")
    merge(existing, _simple("kind-kind"))
    expected = Config(
        clusters=[
            NamedCluster(name="kops-blah", cluster=Cluster(server="foo")),
            NamedCluster(name="kind-kind"),
        ],
        users=[NamedUser(name="kops-blah"), NamedUser(name="kind-kind")],
        contexts=[NamedContext(name="kops-blah"), NamedContext(name="kind-kind")],
    )
    assert existing == expected


def test_merge_sets_current_context_and_other_fields():
    existing = _simple("kops-blah")
    existing.current_context = "kops-blah"
    merge(existing, _kind_config())
    assert existing.current_context == "kind-kind"
    assert existing.other_fields == {"apiVersion": "v1", "kind": "Config", "preferences": {}}


def test_merge_keeps_existing_other_fields():
    existing = _simple("kops-blah")
    existing.other_fields = {"apiVersion": "v2"}
    merge(existing, _kind_config())
    assert existing.other_fields == {"apiVersion": "v2"}


EXISTING_CONFIG = """clusters:
- cluster:
    certificate-authority-data: definitelyacert
    server: https://192.168.9.4:6443
  name: kind-foo
contexts:
- context:
    cluster: kind-foo
    user: kind-foo
  name: kind-foo
current-context: kind-foo
kind: Config
apiVersion: v1
preferences: {}
users:
- name: kind-foo
  user:
    client-certificate-data: seemslegit
    client-key-data: yep
"""

MERGED_EXPECTED = """apiVersion: v1
clusters:
- cluster:
    certificate-authority-data: definitelyacert
    server: https://192.168.9.4:6443
  name: kind-foo
- cluster:
    certificate-authority-data: definitelyacert
    server: https://127.0.0.1:6443
  name: kind-kind
contexts:
- context:
    cluster: kind-foo
    user: kind-foo
  name: kind-foo
- context:
    cluster: kind-kind
    user: kind-kind
  name: kind-kind
current-context: kind-kind
kind: Config
preferences: {}
users:
- name: kind-foo
  user:
    client-certificate-data: seemslegit
    client-key-data: yep
- name: kind-kind
  user:
    client-certificate-data: seemslegit
    client-key-data: yep
"""

NEW_FILE_EXPECTED = """apiVersion: v1
clusters:
- cluster:
    certificate-authority-data: definitelyacert
    server: https://127.0.0.1:6443
  name: kind-kind
contexts:
- context:
    cluster: kind-kind
    user: kind-kind
  name: kind-kind
current-context: kind-kind
kind: Config
preferences: {}
users:
- name: kind-kind
  user:
    client-certificate-data: seemslegit
    client-key-data: yep
"""


def test_write_merged_normal(tmp_path):
    path = tmp_path / "existing-kubeconfig"
    path.write_text(EXISTING_CONFIG)
    write_merged(_kind_config(), str(path))
    assert path.read_text() == MERGED_EXPECTED
    assert not (tmp_path / "existing-kubeconfig.lock").exists()


def test_write_merged_bogus_config(tmp_path):
    path = tmp_path / "bogus"
    with pytest.raises(KubeconfigError):
        write_merged(Config(), str(path))
    assert not path.exists()
    assert not (tmp_path / "bogus.lock").exists()


def test_write_merged_no_existing_file(tmp_path):
    path = tmp_path / "bogus" / "extra-bogus"
    write_merged(_kind_config(), str(path))
    assert path.read_text() == NEW_FILE_EXPECTED


def test_write_merged_lock_held(tmp_path):
    path = tmp_path / "config"
    with open(lock_name(str(path)), "w"):
        pass
    with pytest.raises(KubeconfigError, match="failed to lock config file"):
        write_merged(_kind_config(), str(path))
    assert not path.exists()