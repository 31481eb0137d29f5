"""Column type inference for property values."""

from collections.abc import Iterable

from sitewise_framer.core.models import (
    BooleanValue,
    DoubleValue,
    FieldType,
    IntegerValue,
    PropertyDataType,
    PropertyMetadata,
    StringValue,
    Variant,
)

_DECLARED_FIELD_TYPES = {
    PropertyDataType.DOUBLE: FieldType.FLOAT64,
    PropertyDataType.INTEGER: FieldType.INT64,
    PropertyDataType.STRING: FieldType.STRING,
    PropertyDataType.BOOLEAN: FieldType.BOOL,
}


def field_type_for_variant(variant: Variant | None) -> FieldType | None:
    """Return the field type of a populated variant, or None if unset."""
    match variant:
        case DoubleValue():
            return FieldType.FLOAT64
        case IntegerValue():
            return FieldType.INT64
        case StringValue():
            return FieldType.STRING
        case BooleanValue():
            return FieldType.BOOL
        case None:
            return None


def field_type_for_property(
    metadata: PropertyMetadata | None,
    variants: Iterable[Variant | None] = (),
    fallback: FieldType = FieldType.STRING,
) -> FieldType:
    """Decide the value field type for a property.

    The declared data type wins when the resolver supplies one, since some
    responses omit the value kind. Otherwise the first populated variant
    decides. With neither, the null-safe fallback is returned.

    Args:
        metadata: Resolved property metadata, if any.
        variants: The variants that will fill the column, in order.
        fallback: Type used when nothing else is known.

    Returns:
        The field type for the value column.
    """
    if metadata is not None and metadata.data_type is not None:
        declared = _DECLARED_FIELD_TYPES.get(metadata.data_type)
        if declared is not None:
            return declared

    for variant in variants:
        field_type = field_type_for_variant(variant)
        if field_type is not None:
            return field_type

    return fallback
