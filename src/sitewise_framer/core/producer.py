"""Frame producer: the dispatch surface for every response variant."""

import asyncio
import logging

from sitewise_framer.core.config import FramerConfig
from sitewise_framer.core.context import QueryContext
from sitewise_framer.core.errors import UnsupportedResponseError
from sitewise_framer.core.models import Frame
from sitewise_framer.core.ports import Framer, ResourceProvider

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = FramerConfig()


async def produce_frames(
    ctx: QueryContext,
    response: object,
    resources: ResourceProvider,
    config: FramerConfig | None = None,
) -> tuple[Frame, ...]:
    """Convert a SiteWise response into frames.

    Args:
        ctx: Caller's query context; cancelling it aborts metadata lookup.
        response: A response variant implementing the Framer port.
        resources: Provider resolving asset/property metadata.
        config: Production options. Defaults to FramerConfig().

    Returns:
        Tuple of frames. Single-property variants return exactly one frame.

    Raises:
        UnsupportedResponseError: If response is not a known variant.
        QueryCancelledError: If ctx is cancelled during metadata lookup.
        Exception: Whatever the resource provider raised, unchanged.
    """
    if not isinstance(response, Framer):
        raise UnsupportedResponseError(response)

    try:
        frames = await response.frames(ctx, resources, config or _DEFAULT_CONFIG)
    except Exception as exc:
        # Payload and metadata are not logged.
        logger.debug(
            "Frame production failed",
            extra={
                "response_type": type(response).__name__,
                "error_type": type(exc).__name__,
            },
        )
        raise

    logger.debug(
        "Produced frames",
        extra={"response_type": type(response).__name__, "frame_count": len(frames)},
    )
    return frames


def produce_frames_sync(
    response: object,
    resources: ResourceProvider,
    config: FramerConfig | None = None,
    timeout: float | None = None,
) -> tuple[Frame, ...]:
    """Run produce_frames on a new event loop.

    For callers without a running event loop (scripts, WSGI handlers).

    Args:
        response: A response variant implementing the Framer port.
        resources: Provider resolving asset/property metadata.
        config: Production options.
        timeout: Optional deadline in seconds for metadata lookup.
    """
    ctx = QueryContext(timeout=timeout)
    return asyncio.run(produce_frames(ctx, response, resources, config))
