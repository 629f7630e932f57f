import pytest

from axmltree.color import ColorValue
from axmltree.complex_value import ComplexUnit
from axmltree.decoder import AttributeValueDecoder, int_bits_to_float
from axmltree.errors import FormatError
from axmltree.internal_types import (
    ANDROID_NAMESPACE,
    TYPE_ATTRIBUTE,
    TYPE_DIMENSION,
    TYPE_FLOAT,
    TYPE_FRACTION,
    TYPE_INT_BOOLEAN,
    TYPE_INT_COLOR_ARGB8,
    TYPE_INT_COLOR_RGB4,
    TYPE_INT_DEC,
    TYPE_INT_HEX,
    TYPE_NULL,
    TYPE_REFERENCE,
    TYPE_STRING,
)
from axmltree.model import BoolPayload, IdPayload, IntPayload, RawPayload, StringPayload

NS = "http://example.com/ns"


@pytest.fixture
def decoder():
    return AttributeValueDecoder()


def value_of(decoder, type_, payload):
    return decoder.decode("attr", None, None, type_, payload).value


class TestIntegerTypes:
    @pytest.mark.parametrize("type_", [TYPE_REFERENCE, TYPE_INT_HEX, TYPE_INT_DEC])
    def test_native_int(self, decoder, type_):
        assert value_of(decoder, type_, IntPayload(-5)) == -5

    def test_raw_form_gives_string(self, decoder):
        assert value_of(decoder, TYPE_REFERENCE, RawPayload("@string/app_name")) == "@string/app_name"

    def test_id_form_gives_int(self, decoder):
        assert value_of(decoder, TYPE_REFERENCE, IdPayload(0x7F010001)) == 0x7F010001

    def test_string_payload_is_rejected(self, decoder):
        with pytest.raises(FormatError, match="Unsupported value representation"):
            decoder.decode("attr", None, None, TYPE_INT_DEC, StringPayload("1"))

    def test_attribute_reference(self, decoder):
        assert value_of(decoder, TYPE_ATTRIBUTE, IntPayload(0x01010036)) == 0x01010036


class TestStringAndBoolean:
    def test_native_string(self, decoder):
        assert value_of(decoder, TYPE_STRING, StringPayload("hello")) == "hello"

    def test_raw_string(self, decoder):
        assert value_of(decoder, TYPE_STRING, RawPayload("hello")) == "hello"

    def test_native_bool(self, decoder):
        assert value_of(decoder, TYPE_INT_BOOLEAN, BoolPayload(True)) is True

    def test_raw_false(self, decoder):
        assert value_of(decoder, TYPE_INT_BOOLEAN, RawPayload("false")) is False

    def test_raw_true_ignores_case(self, decoder):
        assert value_of(decoder, TYPE_INT_BOOLEAN, RawPayload("TRUE")) is True

    def test_raw_true_with_whitespace_is_false(self, decoder):
        assert value_of(decoder, TYPE_INT_BOOLEAN, RawPayload(" true")) is False

    def test_int_for_boolean_is_rejected(self, decoder):
        with pytest.raises(FormatError):
            decoder.decode("attr", None, None, TYPE_INT_BOOLEAN, IntPayload(1))


class TestFloat:
    def test_one(self, decoder):
        assert value_of(decoder, TYPE_FLOAT, IntPayload(0x3F800000)) == 1.0

    def test_negative_bit_pattern(self):
        assert int_bits_to_float(0xBF800000 - (1 << 32)) == -1.0

    def test_raw_is_rejected(self, decoder):
        with pytest.raises(FormatError):
            decoder.decode("attr", None, None, TYPE_FLOAT, RawPayload("1.0"))


class TestComplexAndColor:
    def test_dimension(self, decoder):
        value = value_of(decoder, TYPE_DIMENSION, IntPayload(0x00001001))
        assert value.magnitude == 16.0
        assert value.unit is ComplexUnit.DIP

    def test_fraction(self, decoder):
        value = value_of(decoder, TYPE_FRACTION, IntPayload(0x40000031))
        assert value.magnitude == 0.5
        assert value.unit is ComplexUnit.FRACTION_PARENT

    def test_dimension_round_trip_failure(self, decoder):
        with pytest.raises(FormatError):
            decoder.decode("attr", None, None, TYPE_DIMENSION, IntPayload(0x000010C1))

    def test_argb8(self, decoder):
        value = value_of(decoder, TYPE_INT_COLOR_ARGB8, IntPayload(0xFF112233 - (1 << 32)))
        assert value == ColorValue(255, 17, 34, 51)

    def test_rgb4(self, decoder):
        assert value_of(decoder, TYPE_INT_COLOR_RGB4, IntPayload(0x0123)) == ColorValue(255, 0x10, 0x20, 0x20)

    def test_color_from_string_is_rejected(self, decoder):
        with pytest.raises(FormatError):
            decoder.decode("attr", None, None, TYPE_INT_COLOR_ARGB8, StringPayload("#fff"))


class TestAttributeFields:
    def test_fields(self, decoder):
        attribute = decoder.decode(" label ", NS, 0x01010001, TYPE_STRING, StringPayload("x"))
        assert attribute.name == "label"
        assert attribute.namespace == NS
        assert attribute.resource_id == 0x01010001
        assert attribute.type == TYPE_STRING
        assert attribute.from_default is False

    def test_empty_namespace_becomes_none(self, decoder):
        assert decoder.decode("a", "", None, TYPE_STRING, StringPayload("x")).namespace is None

    def test_null_type_is_skipped(self, decoder):
        assert decoder.decode("a", None, None, TYPE_NULL, IntPayload(0)) is None


class TestNameResolution:
    def test_unresolvable_name_is_skipped(self, counting_resolver):
        decoder = AttributeValueDecoder(counting_resolver())
        assert decoder.decode("", None, 0x01010003, TYPE_STRING, StringPayload("x")) is None

    def test_without_resolver_is_skipped(self):
        decoder = AttributeValueDecoder(None)
        assert decoder.decode(None, None, 0x01010003, TYPE_STRING, StringPayload("x")) is None

    def test_missing_resource_id_is_skipped(self, counting_resolver):
        resolver = counting_resolver({0x01010003: "name"})
        decoder = AttributeValueDecoder(resolver)
        assert decoder.decode("", None, None, TYPE_STRING, StringPayload("x")) is None
        assert resolver.calls == []

    def test_unavailable_registry_is_skipped(self, counting_resolver):
        decoder = AttributeValueDecoder(counting_resolver(error=LookupError("no registry")))
        assert decoder.decode("", None, 0x01010003, TYPE_STRING, StringPayload("x")) is None

    def test_resolved_name_gets_android_namespace(self, counting_resolver):
        decoder = AttributeValueDecoder(counting_resolver({0x01010003: "name"}))
        attribute = decoder.decode("", NS, 0x01010003, TYPE_STRING, StringPayload("x"))
        assert attribute.name == "name"
        assert attribute.namespace == ANDROID_NAMESPACE

    def test_second_lookup_hits_cache(self, counting_resolver):
        resolver = counting_resolver({0x01010003: "name"})
        decoder = AttributeValueDecoder(resolver)
        first = decoder.decode("", None, 0x01010003, TYPE_STRING, StringPayload("x"))
        second = decoder.decode("", None, 0x01010003, TYPE_STRING, StringPayload("y"))
        assert first.name == second.name == "name"
        assert second.namespace == ANDROID_NAMESPACE
        assert resolver.calls == [0x01010003]
        assert decoder.id_to_name == {0x01010003: "name"}

    def test_misses_are_not_cached(self, counting_resolver):
        resolver = counting_resolver()
        decoder = AttributeValueDecoder(resolver)
        decoder.decode("", None, 0x01010099, TYPE_STRING, StringPayload("x"))
        decoder.decode("", None, 0x01010099, TYPE_STRING, StringPayload("x"))
        assert len(resolver.calls) == 2
        assert decoder.id_to_name == {}

    def test_present_name_does_not_query(self, counting_resolver):
        resolver = counting_resolver({0x01010003: "name"})
        decoder = AttributeValueDecoder(resolver)
        decoder.decode("label", None, 0x01010003, TYPE_STRING, StringPayload("x"))
        assert resolver.calls == []
