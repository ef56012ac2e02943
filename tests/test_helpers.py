import pytest

from kindcluster.kubeconfig.helpers import (
    KubeconfigError,
    check_kubeadm_expectations,
    kind_cluster_key,
)
from kindcluster.kubeconfig.types import Config, NamedCluster, NamedContext, NamedUser


def test_kind_cluster_key():
    assert kind_cluster_key("foobar") == "kind-foobar"


def _config(clusters, contexts, users):
    return Config(
        clusters=[NamedCluster() for _ in range(clusters)],
        contexts=[NamedContext() for _ in range(contexts)],
        users=[NamedUser() for _ in range(users)],
    )


@pytest.mark.parametrize(
    "counts",
    [
        (5, 5, 5),
        (1, 1, 2),
        (2, 1, 1),
        (1, 2, 1),
        (0, 0, 0),
    ],
    ids=["too many of all", "too many users", "too many clusters", "too many contexts", "none"],
)
def test_check_kubeadm_expectations_rejects(counts):
    with pytest.raises(KubeconfigError):
        check_kubeadm_expectations(_config(*counts))


def test_check_kubeadm_expectations_just_right():
    assert check_kubeadm_expectations(_config(1, 1, 1)) is None


def test_error_names_the_count():
    with pytest.raises(KubeconfigError, match="read 2"):
        check_kubeadm_expectations(_config(2, 1, 1))