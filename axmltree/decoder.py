from struct import pack, unpack
from typing import Union

from loguru import logger

from .color import unpack_argb4, unpack_argb8, unpack_rgb4, unpack_rgb8
from .complex_value import decode_complex
from .errors import FormatError
from .internal_types import (
    ANDROID_NAMESPACE,
    TYPE_ATTRIBUTE,
    TYPE_DIMENSION,
    TYPE_DYNAMIC_ATTRIBUTE,
    TYPE_DYNAMIC_REFERENCE,
    TYPE_FLOAT,
    TYPE_FRACTION,
    TYPE_INT_BOOLEAN,
    TYPE_INT_COLOR_ARGB4,
    TYPE_INT_COLOR_ARGB8,
    TYPE_INT_COLOR_RGB4,
    TYPE_INT_COLOR_RGB8,
    TYPE_INT_DEC,
    TYPE_INT_HEX,
    TYPE_NULL,
    TYPE_REFERENCE,
    TYPE_STRING,
    TYPE_TABLE,
)
from .model import (
    Attribute,
    BoolPayload,
    IdPayload,
    IntPayload,
    Payload,
    RawPayload,
    StringPayload,
)
from .public import ResourceNameResolver

INT_TYPES = (TYPE_REFERENCE, TYPE_INT_HEX, TYPE_INT_DEC)
REFERENCE_LIKE_TYPES = (TYPE_ATTRIBUTE, TYPE_DYNAMIC_REFERENCE, TYPE_DYNAMIC_ATTRIBUTE)

COLOR_UNPACKERS = {
    TYPE_INT_COLOR_ARGB8: unpack_argb8,
    TYPE_INT_COLOR_RGB8: unpack_rgb8,
    TYPE_INT_COLOR_ARGB4: unpack_argb4,
    TYPE_INT_COLOR_RGB4: unpack_rgb4,
}


def int_bits_to_float(data: int) -> float:
    """
    Reinterpret the 32 bit pattern as an IEEE-754 single
    """
    return unpack("<f", pack("<L", data & 0xFFFFFFFF))[0]


class AttributeValueDecoder:
    """
    Turns the raw attribute data delivered by the event reader into an
    [Attribute][axmltree.model.Attribute].

    Attributes without a name get one from the resource id, looked up
    through the resolver. Successful lookups are cached for the lifetime
    of the decoder, so a parser reusing its decoder only asks the
    resolver once per id.
    """

    def __init__(self, resolver: Union[ResourceNameResolver, None] = None) -> None:
        self.resolver = resolver
        self.id_to_name: dict[int, str] = {}

    def resolve_name(self, resource_id: Union[int, None]) -> Union[str, None]:
        """
        Look up the attribute name for a resource id, cache first.

        :returns: the name, or None if it can not be found
        """
        if resource_id is None:
            return None

        if resource_id in self.id_to_name:
            logger.debug(f"resolve_name: 0x{resource_id:08x}: FROM CACHE: {self.id_to_name[resource_id]}")
            return self.id_to_name[resource_id]

        if self.resolver is None:
            logger.debug(f"resolve_name: no resolver for 0x{resource_id:08x}")
            return None

        try:
            name = self.resolver.resolve(resource_id)
        except LookupError as e:
            logger.warning(
                "Resource name lookup for 0x{:08x} is not available: {}".format(resource_id, e)
            )
            return None

        if name:
            self.id_to_name[resource_id] = name
            logger.debug(f"resolve_name: 0x{resource_id:08x}: CACHED: {name}")
        return name or None

    def decode(
        self,
        name: Union[str, None],
        namespace: Union[str, None],
        resource_id: Union[int, None],
        type_: int,
        payload: Payload,
    ) -> Union[Attribute, None]:
        """
        Decode one attribute.

        :param name: attribute name from the stream, may be empty
        :param namespace: namespace URI from the stream, may be empty
        :param resource_id: resource id from the resource map, if any
        :param type_: the Res_value data type
        :param payload: the value as delivered by the reader
        :raises FormatError: if the payload does not fit the type
        :returns: the attribute, or None if it has to be dropped
        """
        if not name:
            name = self.resolve_name(resource_id)
            if name is None:
                logger.debug(
                    "Dropping attribute without name, resource id {}".format(
                        "0x{:08x}".format(resource_id) if resource_id is not None else None
                    )
                )
                return None
            namespace = ANDROID_NAMESPACE
        else:
            name = name.strip()

        if type_ == TYPE_NULL or type_ not in TYPE_TABLE:
            logger.warning(
                "Skipping attribute '{}' with unhandled value type 0x{:02x}".format(name, type_)
            )
            return None

        value = self.decode_value(type_, payload)
        logger.debug(f"decode: {name}: {TYPE_TABLE[type_]}: {value!r}")
        return Attribute(name, resource_id, type_, value, namespace or None, False)

    def decode_value(self, type_: int, payload: Payload):
        if type_ in INT_TYPES:
            if isinstance(payload, IntPayload):
                return payload.value
            if isinstance(payload, RawPayload):
                return payload.raw
            if isinstance(payload, IdPayload):
                return payload.ref

        elif type_ in REFERENCE_LIKE_TYPES:
            if isinstance(payload, IntPayload):
                return payload.value

        elif type_ == TYPE_STRING:
            if isinstance(payload, StringPayload):
                return payload.value
            if isinstance(payload, RawPayload):
                return payload.raw

        elif type_ == TYPE_INT_BOOLEAN:
            if isinstance(payload, BoolPayload):
                return payload.value
            if isinstance(payload, RawPayload):
                return payload.raw.lower() == "true"

        elif type_ == TYPE_FLOAT:
            if isinstance(payload, IntPayload):
                return int_bits_to_float(payload.value)

        elif type_ in (TYPE_DIMENSION, TYPE_FRACTION):
            if isinstance(payload, IntPayload):
                return decode_complex(payload.value, fraction=type_ == TYPE_FRACTION)

        elif type_ in COLOR_UNPACKERS:
            if isinstance(payload, IntPayload):
                return COLOR_UNPACKERS[type_](payload.value)

        raise FormatError(
            "Unsupported value representation {} for type {}".format(
                type(payload).__name__, TYPE_TABLE.get(type_, hex(type_))
            )
        )
