"""BDD step definitions for frame production features."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime

import pytest
from pytest_bdd import given, parsers, then, when

from sitewise_framer.adapters.resources.in_memory import InMemoryResourceProvider
from sitewise_framer.core.context import QueryContext
from sitewise_framer.core.errors import MetadataResolutionError, QueryCancelledError
from sitewise_framer.core.models import (
    DoubleValue,
    Frame,
    PropertyMetadata,
    PropertyValue,
    Timestamp,
)
from sitewise_framer.core.ports import ResourceProvider
from sitewise_framer.core.producer import produce_frames
from sitewise_framer.core.responses import AssetPropertyValue
from tests.helpers import BlockingResourceProvider, FailingResourceProvider


@dataclass
class FramingScenarioContext:
    """Mutable state shared by the steps of one scenario."""

    metadata: PropertyMetadata | None = None
    resources: ResourceProvider | None = None
    response: AssetPropertyValue | None = None
    frames: tuple[Frame, ...] = field(default_factory=tuple)
    error: Exception | None = None


@pytest.fixture
def framing() -> FramingScenarioContext:
    """Fresh scenario context for each test."""
    return FramingScenarioContext()


def _produce(framing: FramingScenarioContext, ctx: QueryContext) -> None:
    try:
        framing.frames = asyncio.run(
            produce_frames(ctx, framing.response, framing.resources)
        )
    except Exception as exc:
        framing.error = exc


# === Given ===


@given(parsers.parse('metadata for asset "{asset}" and property "{prop}"'))
def given_metadata(framing: FramingScenarioContext, asset: str, prop: str) -> None:
    framing.metadata = PropertyMetadata(
        asset_id=f"id-{asset}",
        asset_name=asset,
        property_id=f"id-{prop}",
        property_name=prop,
    )
    framing.resources = InMemoryResourceProvider([framing.metadata])


@given(parsers.parse("a latest value of {value:g} at epoch second {seconds:d}"))
def given_double_value(
    framing: FramingScenarioContext, value: float, seconds: int
) -> None:
    framing.response = AssetPropertyValue(
        PropertyValue(value=DoubleValue(float(value)), timestamp=Timestamp(seconds))
    )


@given(
    parsers.parse(
        "a latest value with no populated variant at epoch second {seconds:d}"
    )
)
def given_missing_value(framing: FramingScenarioContext, seconds: int) -> None:
    framing.response = AssetPropertyValue(
        PropertyValue(value=None, timestamp=Timestamp(seconds))
    )


@given("a resolver that has not answered yet")
def given_blocking_resolver(framing: FramingScenarioContext) -> None:
    framing.resources = BlockingResourceProvider(framing.metadata)


@given(parsers.parse('a resolver that fails with "{message}"'))
def given_failing_resolver(framing: FramingScenarioContext, message: str) -> None:
    framing.resources = FailingResourceProvider(MetadataResolutionError(message))


# === When ===


@when("frames are produced")
def when_frames_produced(framing: FramingScenarioContext) -> None:
    _produce(framing, QueryContext())


@when("the context is cancelled while frames are produced")
def when_cancelled(framing: FramingScenarioContext) -> None:
    resources = framing.resources
    assert isinstance(resources, BlockingResourceProvider)

    async def run() -> tuple[Frame, ...]:
        ctx = QueryContext()
        call = asyncio.create_task(produce_frames(ctx, framing.response, resources))
        await resources.started.wait()
        ctx.cancel()
        return await call

    try:
        framing.frames = asyncio.run(run())
    except Exception as exc:
        framing.error = exc


# === Then ===


@then(parsers.parse('one frame named "{name}" is returned'))
def then_one_frame(framing: FramingScenarioContext, name: str) -> None:
    assert framing.error is None
    assert len(framing.frames) == 1
    assert framing.frames[0].name == name


@then(parsers.parse('the "{name}" field holds "{iso}"'))
def then_field_holds_time(
    framing: FramingScenarioContext, name: str, iso: str
) -> None:
    f = framing.frames[0].field_by_name(name)
    assert f is not None
    assert f.values == [datetime.fromisoformat(iso)]


@then(parsers.parse('the "{name}" field holds {value:g}'))
def then_field_holds_number(
    framing: FramingScenarioContext, name: str, value: float
) -> None:
    f = framing.frames[0].field_by_name(name)
    assert f is not None
    assert f.values == [value]


@then(parsers.parse('the "{name}" field holds a single null'))
def then_field_holds_null(framing: FramingScenarioContext, name: str) -> None:
    f = framing.frames[0].field_by_name(name)
    assert f is not None
    assert f.values == [None]


@then("no frames are returned")
def then_no_frames(framing: FramingScenarioContext) -> None:
    assert framing.frames == ()


@then("a cancellation error is raised")
def then_cancellation_error(framing: FramingScenarioContext) -> None:
    assert isinstance(framing.error, QueryCancelledError)


@then("the resolver error is raised unchanged")
def then_resolver_error(framing: FramingScenarioContext) -> None:
    resources = framing.resources
    assert isinstance(resources, FailingResourceProvider)
    assert framing.error is resources.error
