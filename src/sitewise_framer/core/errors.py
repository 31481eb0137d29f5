"""Exception hierarchy for frame production.

Fatal errors abort a producer call before any frame is returned. A missing
value variant is not an error: it becomes a null cell.
"""


class FramerError(Exception):
    """Base class for errors raised by sitewise_framer."""


class MetadataResolutionError(FramerError):
    """A resource provider could not find or fetch property metadata.

    Resource providers raise this for unknown assets/properties or transport
    failures. The producer propagates it, like any other resolver error,
    unchanged.
    """

    def __init__(
        self,
        message: str,
        asset_id: str | None = None,
        property_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.asset_id = asset_id
        self.property_id = property_id


class QueryCancelledError(FramerError):
    """The query context was cancelled or its deadline passed."""


class UnsupportedResponseError(FramerError, TypeError):
    """No framer knows how to convert the given response type."""

    def __init__(self, response: object) -> None:
        super().__init__(
            f"unsupported response type: {type(response).__name__}"
        )
        self.response_type = type(response)


class FieldTypeError(FramerError, TypeError):
    """A value does not match the type of the field it is stored in."""

    def __init__(self, field_name: str, field_type: object, value: object) -> None:
        kind = getattr(field_type, "name", field_type)
        super().__init__(
            f"field {field_name!r} of type {kind} cannot hold "
            f"{type(value).__name__} value"
        )
        self.field_name = field_name
        self.field_type = field_type
