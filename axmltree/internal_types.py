# Constants from frameworks/base/libs/androidfw/include/androidfw/ResourceTypes.h
# see http://aospxref.com/android-13.0.0_r3/xref/frameworks/base/libs/androidfw/include/androidfw/ResourceTypes.h

# Chunk types
RES_NULL_TYPE = 0x0000
RES_STRING_POOL_TYPE = 0x0001
RES_TABLE_TYPE = 0x0002
RES_XML_TYPE = 0x0003

RES_XML_FIRST_CHUNK_TYPE = 0x0100
RES_XML_START_NAMESPACE_TYPE = 0x0100
RES_XML_END_NAMESPACE_TYPE = 0x0101
RES_XML_START_ELEMENT_TYPE = 0x0102
RES_XML_END_ELEMENT_TYPE = 0x0103
RES_XML_CDATA_TYPE = 0x0104
RES_XML_LAST_CHUNK_TYPE = 0x017F

RES_XML_RESOURCE_MAP_TYPE = 0x0180

CHUNK_NAMES = {
    RES_NULL_TYPE: "RES_NULL_TYPE",
    RES_STRING_POOL_TYPE: "RES_STRING_POOL_TYPE",
    RES_TABLE_TYPE: "RES_TABLE_TYPE",
    RES_XML_TYPE: "RES_XML_TYPE",
    RES_XML_START_NAMESPACE_TYPE: "RES_XML_START_NAMESPACE_TYPE",
    RES_XML_END_NAMESPACE_TYPE: "RES_XML_END_NAMESPACE_TYPE",
    RES_XML_START_ELEMENT_TYPE: "RES_XML_START_ELEMENT_TYPE",
    RES_XML_END_ELEMENT_TYPE: "RES_XML_END_ELEMENT_TYPE",
    RES_XML_CDATA_TYPE: "RES_XML_CDATA_TYPE",
    RES_XML_LAST_CHUNK_TYPE: "RES_XML_LAST_CHUNK_TYPE",
    RES_XML_RESOURCE_MAP_TYPE: "RES_XML_RESOURCE_MAP_TYPE",
}

# Flags in the STRING Section
SORTED_FLAG = 1 << 0
UTF8_FLAG = 1 << 8

# Marks an absent string pool reference
NO_ENTRY = 0xFFFFFFFF

## type of data value
# Contains no data.
TYPE_NULL = 0x00
# The 'data' holds a ResTable_ref, a reference to another resource table entry.
TYPE_REFERENCE = 0x01
# The 'data' holds an attribute resource identifier.
TYPE_ATTRIBUTE = 0x02
# The 'data' holds an index into the containing resource table's
# global value string pool.
TYPE_STRING = 0x03
# The 'data' holds a single-precision floating point number.
TYPE_FLOAT = 0x04
# The 'data' holds a complex number encoding a dimension value, such as "100in".
TYPE_DIMENSION = 0x05
# The 'data' holds a complex number encoding a fraction of a container.
TYPE_FRACTION = 0x06
# The 'data' holds a dynamic ResTable_ref, which needs to be resolved
# before it can be used like a TYPE_REFERENCE.
TYPE_DYNAMIC_REFERENCE = 0x07
# The 'data' holds an attribute resource identifier, which needs to be
# resolved before it can be used like a TYPE_ATTRIBUTE.
TYPE_DYNAMIC_ATTRIBUTE = 0x08

# Beginning of integer flavors...
TYPE_FIRST_INT = 0x10
# The 'data' is a raw integer value of the form n..n.
TYPE_INT_DEC = 0x10
# The 'data' is a raw integer value of the form 0xn..n.
TYPE_INT_HEX = 0x11
# The 'data' is either 0 or 1, for input "false" or "true" respectively.
TYPE_INT_BOOLEAN = 0x12

# Beginning of color integer flavors...
TYPE_FIRST_COLOR_INT = 0x1C
# The 'data' is a raw integer value of the form #aarrggbb.
TYPE_INT_COLOR_ARGB8 = 0x1C
# The 'data' is a raw integer value of the form #rrggbb.
TYPE_INT_COLOR_RGB8 = 0x1D
# The 'data' is a raw integer value of the form #argb.
TYPE_INT_COLOR_ARGB4 = 0x1E
# The 'data' is a raw integer value of the form #rgb.
TYPE_INT_COLOR_RGB4 = 0x1F

# ...end of integer flavors.
TYPE_LAST_COLOR_INT = 0x1F
TYPE_LAST_INT = 0x1F

TYPE_TABLE = {
    TYPE_NULL: "null",
    TYPE_REFERENCE: "reference",
    TYPE_ATTRIBUTE: "attribute",
    TYPE_STRING: "string",
    TYPE_FLOAT: "float",
    TYPE_DIMENSION: "dimension",
    TYPE_FRACTION: "fraction",
    TYPE_DYNAMIC_REFERENCE: "dynamic_reference",
    TYPE_DYNAMIC_ATTRIBUTE: "dynamic_attribute",
    TYPE_INT_DEC: "int_dec",
    TYPE_INT_HEX: "int_hex",
    TYPE_INT_BOOLEAN: "int_boolean",
    TYPE_INT_COLOR_ARGB8: "int_color_argb8",
    TYPE_INT_COLOR_RGB8: "int_color_rgb8",
    TYPE_INT_COLOR_ARGB4: "int_color_argb4",
    TYPE_INT_COLOR_RGB4: "int_color_rgb4",
}

# for complex data values (TYPE_DIMENSION and TYPE_FRACTION)
# Where the unit type information is.  This gives us 16 possible
# types, as defined below.
COMPLEX_UNIT_SHIFT = 0
COMPLEX_UNIT_MASK = 0xF

# TYPE_DIMENSION units
COMPLEX_UNIT_PX = 0
COMPLEX_UNIT_DIP = 1
COMPLEX_UNIT_SP = 2
COMPLEX_UNIT_PT = 3
COMPLEX_UNIT_IN = 4
COMPLEX_UNIT_MM = 5

# TYPE_FRACTION units
COMPLEX_UNIT_FRACTION = 0
COMPLEX_UNIT_FRACTION_PARENT = 1

# Where the radix information is, telling where the decimal place
# appears in the mantissa.
COMPLEX_RADIX_SHIFT = 4
COMPLEX_RADIX_MASK = 0x3

# Where the actual value is.  This gives us 23 bits of
# precision.  The top bit is the sign.
COMPLEX_MANTISSA_SHIFT = 8
COMPLEX_MANTISSA_MASK = 0xFFFFFF

# Scale for each radix (23p0, 16p7, 8p15, 0p23), applied to the mantissa
# left in place at bits 8..31
RADIX_MULTS = [1.0 / (1 << 8), 1.0 / (1 << 15), 1.0 / (1 << 23), 1.0 / (1 << 31)]

# Namespace assigned to attributes whose name came from the framework registry
ANDROID_NAMESPACE = "http://schemas.android.com/apk/res/android"
