import pytest

from kindcluster.kubeconfig.helpers import KubeconfigError
from kindcluster.kubeconfig.read import kind_from_raw_kubeadm, read
from kindcluster.kubeconfig.types import (
    Cluster,
    Config,
    Context,
    NamedCluster,
    NamedContext,
    NamedUser,
)

RAW_CONFIG = """apiVersion: v1
clusters:
- cluster:
    certificate-authority-data: definitelyacert
    server: https://192.168.9.4:6443
  name: kind
contexts:
- context:
    cluster: kind
    user: kubernetes-admin
  name: kubernetes-admin@kind
current-context: kubernetes-admin@kind
kind: Config
preferences: {}
users:
- name: kubernetes-admin
  user:
    client-certificate-data: seemslegit
    client-key-data: yep
"""

SERVER = "https://127.0.0.1:6443"


def _expected(server):
    return Config(
        clusters=[
            NamedCluster(
                name="kind-kind",
                cluster=Cluster(
                    server=server,
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


def test_bad_config():
    with pytest.raises(KubeconfigError):
        kind_from_raw_kubeadm("\t", "kind", "")


def test_valid_config():
    assert kind_from_raw_kubeadm(RAW_CONFIG, "kind", SERVER) == _expected(SERVER)


def test_server_kept_when_unset():
    cfg = kind_from_raw_kubeadm(RAW_CONFIG, "kind", "")
    assert cfg == _expected("https://192.168.9.4:6443")


def test_empty_document_fails_expectations():
    with pytest.raises(KubeconfigError):
        kind_from_raw_kubeadm("", "kind", "")


def test_read_missing_file(tmp_path):
    assert read(tmp_path / "absent") == Config()


def test_read_existing_file(tmp_path):
    path = tmp_path / "config"
    path.write_text(RAW_CONFIG, encoding="utf-8")
    cfg = read(path)
    assert cfg.current_context == "kubernetes-admin@kind"
    assert [c.name for c in cfg.clusters] == ["kind"]
    assert cfg.users[0].user["client-key-data"] == "yep"


def test_read_invalid_file(tmp_path):
    path = tmp_path / "config"
    path.write_text("clusters: [unclosed\n", encoding="utf-8")
    with pytest.raises(KubeconfigError):
        read(path)