from types import SimpleNamespace

import pytest

from kindcluster.providers.common.images import required_node_images


def _cluster(*images):
    return SimpleNamespace(nodes=[SimpleNamespace(image=image) for image in images])


@pytest.mark.parametrize(
    "images, expected",
    [
        (("node1", "node2"), {"node1", "node2"}),
        (("node1", "node1"), {"node1"}),
    ],
)
def test_required_node_images(images, expected):
    assert required_node_images(_cluster(*images)) == expected


def test_no_nodes_gives_empty_set():
    assert required_node_images(_cluster()) == set()