"""Making sure the node images a cluster needs are present locally."""

from __future__ import annotations

import logging
import time
from typing import Any

from kindcluster.providers.common.images import required_node_images
from kindcluster.providers.docker.node import CommandError, run

logger = logging.getLogger(__name__)

_DIGEST_MARKER = "@sha256:"
_DEFAULT_RETRIES = 4


def sanitize_image(image: str) -> tuple[str, str]:
    """Return a readable name for ``image`` and the name docker can pull.

    A digest suffix is left out of the readable name.
    """
    if _DIGEST_MARKER in image:
        return image.split(_DIGEST_MARKER)[0], image
    return image, image


def pull_if_not_present(image: str, retries: int = _DEFAULT_RETRIES) -> bool:
    """Pull ``image`` unless it is already present.

    Returns whether a pull was attempted; raises RuntimeError when pulling fails.
    """
    try:
        run(["docker", "inspect", "--type=image", image])
    except (CommandError, OSError):
        pass
    else:
        logger.debug("Image: %s present locally", image)
        return False
    pull(image, retries)
    return True


def pull(image: str, retries: int = _DEFAULT_RETRIES) -> None:
    """Pull ``image``, retrying up to ``retries`` times with growing pauses."""
    logger.debug("Pulling image: %s ...", image)
    try:
        run(["docker", "pull", image])
        return
    except (CommandError, OSError) as exc:
        last_error: BaseException = exc

    for attempt in range(1, retries + 1):
        time.sleep(attempt)
        logger.debug("Trying again to pull image: %r ... %s", image, last_error)
        try:
            run(["docker", "pull", image])
            return
        except (CommandError, OSError) as exc:
            last_error = exc

    raise RuntimeError(f'failed to pull image "{image}": {last_error}') from last_error


def ensure_node_images(cfg: Any) -> None:
    """Make sure every node image named by ``cfg.nodes`` is present, in name order."""
    for image in sorted(required_node_images(cfg)):
        friendly_name, pullable = sanitize_image(image)
        logger.info("Ensuring node image (%s) 🖼", friendly_name)
        try:
            pull_if_not_present(pullable, _DEFAULT_RETRIES)
        except RuntimeError:
            logger.error("Failed to ensure node image (%s)", friendly_name)
            raise