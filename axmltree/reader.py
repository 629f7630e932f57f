# Based on androguard's code https://androguard.readthedocs.io/en/latest/intro/axml.html

import io
from struct import error as StructError
from struct import unpack
from typing import BinaryIO, Union

from loguru import logger

from .errors import ResParserError
from .internal_types import (
    CHUNK_NAMES,
    NO_ENTRY,
    RES_STRING_POOL_TYPE,
    RES_XML_CDATA_TYPE,
    RES_XML_END_ELEMENT_TYPE,
    RES_XML_END_NAMESPACE_TYPE,
    RES_XML_FIRST_CHUNK_TYPE,
    RES_XML_LAST_CHUNK_TYPE,
    RES_XML_RESOURCE_MAP_TYPE,
    RES_XML_START_ELEMENT_TYPE,
    RES_XML_START_NAMESPACE_TYPE,
    RES_XML_TYPE,
    TYPE_INT_BOOLEAN,
    TYPE_INT_DEC,
    TYPE_INT_HEX,
    TYPE_REFERENCE,
    TYPE_STRING,
    UTF8_FLAG,
)
from .model import BoolPayload, IdPayload, IntPayload, Payload, RawPayload, StringPayload

# Position of the fields inside an attribute
ATTRIBUTE_IX_NAMESPACE_URI = 0
ATTRIBUTE_IX_NAME = 1
ATTRIBUTE_IX_VALUE_STRING = 2
ATTRIBUTE_IX_VALUE_TYPE = 3
ATTRIBUTE_IX_VALUE_DATA = 4
ATTRIBUTE_LENGTH = 5

# Types for which a kept raw value string replaces the typed data
RAW_VALUE_TYPES = (TYPE_REFERENCE, TYPE_INT_HEX, TYPE_INT_DEC, TYPE_INT_BOOLEAN)
ID_VALUE_TYPES = (TYPE_REFERENCE, TYPE_INT_HEX, TYPE_INT_DEC)


def _signed(value: int) -> int:
    return (0x7FFFFFFF & value) - 0x80000000 if value > 0x7FFFFFFF else value


class ARSCHeader:
    """
    A `ResChunk_header`: chunk type, header size and total chunk size.

    Garbage bytes in front of a chunk are skipped one at a time until a
    plausible header shows up. Whether the chunk fits into its parent is
    not checked.

    :raises ResParserError: if no valid header can be read, or the type
        differs from `expected_type`
    """

    SIZE = 2 + 2 + 4

    def __init__(
        self,
        buff: BinaryIO,
        expected_type: Union[int, None] = None
    ) -> None:
        nbytes = buff.getbuffer().nbytes
        while True:
            self.start = buff.tell()
            if nbytes < self.start + self.SIZE:
                raise ResParserError(
                    "No valid chunk header found before the end of the buffer! Offset={}".format(self.start)
                )
            self._type, self._header_size, self._size = unpack('<HHL', buff.read(self.SIZE))

            # Packers may write a zero sized END_NAMESPACE as the last chunk
            if self._size < self.SIZE and nbytes == self.start + self._header_size + 8:
                self._size = 24

            if self.start == 0 or (self.SIZE <= self._header_size <= self._size):
                break
            buff.seek(self.start + 1)
            logger.warning(f"Skipping dummy data between chunks at offset {self.start}")

        if expected_type and self._type != expected_type:
            raise ResParserError(
                "Header type is not equal the expected type: Got 0x{:04x}, wanted 0x{:04x}".format(
                    self._type, expected_type
                )
            )
        if not self.SIZE <= self._header_size <= self._size:
            raise ResParserError(
                "Invalid chunk sizes: header size {}, chunk size {}! Offset={}".format(
                    self._header_size, self._size, self.start
                )
            )

    def get_type(self) -> int:
        return self._type

    def get_header_size(self) -> int:
        """
        Size of the chunk header. The chunk's own data starts this many
        bytes after `start`.
        """
        return self._header_size

    def get_size(self) -> int:
        """
        Total size of this chunk, including any child chunks.
        """
        return self._size

    def get_end(self) -> int:
        return self.start + self._size

    def __repr__(self):
        return "<ARSCHeader idx='0x{:08x}' type='{}' header_size='{}' size='{}'>".format(
            self.start, self._type, self._header_size, self._size
        )


class StringBlock:
    """
    The string pool chunk (`ResStringPool_header`) of an AXML file.
    All names, namespaces and string values are indices into it.

    Styles are not needed for the tree and are skipped.
    """

    def __init__(self, buff: BinaryIO, header: ARSCHeader) -> None:
        self._cache = {}
        count, style_count, flags, strings_start, styles_start = unpack('<5I', buff.read(20))
        self.utf8 = (flags & UTF8_FLAG) != 0

        # Some packers declare a wrong count; the offset table is authoritative
        table_count = (strings_start - (style_count * 4 + 28)) // 4
        if table_count != count:
            logger.warning(f"String count {count} does not match offset table, using {table_count}")
            count = max(table_count, 0)

        self.offsets = list(unpack('<{}I'.format(count), buff.read(4 * count)))
        buff.read(4 * style_count)

        if styles_start != 0 and style_count != 0:
            size = styles_start - strings_start
        else:
            size = header.get_size() - strings_start
        self.data = buff.read(size)
        logger.debug(f"StringBlock: {count} strings, utf8={self.utf8}, {size} bytes")

    def __getitem__(self, idx: int) -> str:
        """
        :returns: the string at `idx`, empty if the index is out of range
        """
        if idx not in self._cache:
            if not 0 <= idx < len(self.offsets):
                return ""
            offset = self.offsets[idx]
            self._cache[idx] = self._utf8(offset) if self.utf8 else self._utf16(offset)
        return self._cache[idx]

    def _utf8(self, offset: int) -> str:
        # UTF-8 entries carry the UTF-16 length first, then the byte length
        str_len, skip = self._length(offset, 1)
        offset += skip
        byte_len, skip = self._length(offset, 1)
        offset += skip

        end = offset + byte_len
        if len(self.data) <= end:
            logger.warning(f"String at {offset} exceeds the string pool, using an empty string")
            return ""
        if self.data[end] != 0:
            logger.warning(f"UTF-8 string at {offset} is not null terminated")
            return ""
        return self._text(self.data[offset:end], 'utf-8', str_len)

    def _utf16(self, offset: int) -> str:
        str_len, skip = self._length(offset, 2)
        offset += skip

        end = offset + str_len * 2
        if len(self.data) < end:
            logger.warning(f"String at {offset} exceeds the string pool, using an empty string")
            return ""
        if self.data[end : end + 2] != b"\x00\x00":
            raise ResParserError("UTF-16 String is not null terminated! At offset={}".format(offset))
        return self._text(self.data[offset:end], 'utf-16-le', str_len)

    @staticmethod
    def _text(data: bytes, encoding: str, str_len: int) -> str:
        string = data.decode(encoding, 'replace')
        if len(string) != str_len:
            logger.warning(f"Decoded string length {len(string)} differs from declared {str_len}")
        return string

    def _length(self, offset: int, char_size: int) -> tuple[int, int]:
        """
        Read a string length, one or two units wide depending on the high bit
        of the first unit.

        :param char_size: 1 for UTF-8 pools, 2 for UTF-16 pools
        :raises ResParserError: if the length can not be read or is too large
        :returns: tuple of (length, bytes read)
        """
        fmt = '<2B' if char_size == 1 else '<2H'
        highbit = 0x80 << (8 * (char_size - 1))
        try:
            first, second = unpack(fmt, self.data[offset : offset + 2 * char_size])
        except StructError:
            raise ResParserError("String length can not be read! At offset={}".format(offset))

        if not first & highbit:
            return first, char_size
        length = ((first & ~highbit) << (8 * char_size)) | second
        if char_size == 1 and length > 0x7FFF:
            raise ResParserError("length of UTF-8 string is too large! At offset={}".format(offset))
        return length, 2 * char_size


class AXMLReader:
    """
    `AXMLReader` walks through all chunks in the AXML file and reports
    them to a visitor, in stream order:

    * `visitor.ns(prefix, uri, line)` for every namespace start
    * `visitor.child(ns, name)` for every element start, followed by
      `visitor.attr(ns, name, resource_id, type, payload)` per attribute
    * `visitor.text(line, value)` for character data
    * `visitor.end()` for every element end

    An AXML file is a file which contains multiple chunks of data, defined
    by the `ResChunk_header`.
    There is no real file magic but as the size of the first header is fixed
    and the `type` of the `ResChunk_header` is set to `RES_XML_TYPE`, a file
    will usually start with `0x03000800`.
    But there are several examples where the `type` is set to something
    else, probably in order to fool parsers.

    Structural problems raise [ResParserError][axmltree.errors.ResParserError],
    oddities which can be worked around are logged.

    See http://androidxref.com/9.0.0_r3/xref/frameworks/base/libs/androidfw/include/androidfw/ResourceTypes.h#563
    """

    def __init__(self, raw_buff: bytes) -> None:
        self.buff = io.BytesIO(raw_buff)
        size = len(raw_buff)
        if size < 8:
            raise ResParserError("Filesize is too small to be a valid AXML file! Filesize: {}".format(size))

        axml_header = ARSCHeader(self.buff)
        logger.debug("FIRST HEADER {}".format(axml_header))
        if axml_header.get_header_size() != 8:
            raise ResParserError(
                "This does not look like an AXML file. header size does not equal 8! header size = {}".format(
                    axml_header.get_header_size()
                )
            )

        self.filesize = axml_header.get_size()
        if self.filesize > size:
            raise ResParserError(
                "Declared filesize does not match real size: {} vs {}".format(self.filesize, size)
            )
        if self.filesize < size:
            # Parsing stops where the declared chunk ends
            logger.warning(f"Ignoring {size - self.filesize} bytes appended after the declared filesize")

        # Plenty of files have this set wrong
        if axml_header.get_type() != RES_XML_TYPE:
            logger.warning(f"AXML file has an unusual resource type: 0x{axml_header.get_type():04x}")

        # Now we parse the STRING POOL
        header = ARSCHeader(self.buff, expected_type=RES_STRING_POOL_TYPE)
        logger.debug("STRING_POOL {}".format(header))

        if header.get_header_size() != 0x1C:
            raise ResParserError(
                "This does not look like an AXML file. String chunk header size does not equal 28! header size = {}".format(
                    header.get_header_size()
                )
            )

        try:
            self.sb = StringBlock(self.buff, header)
        except StructError as e:
            raise ResParserError("String pool is truncated: {}".format(e))

        self.buff.seek(header.get_end())

        # Stores resource ID mappings, if any
        self.m_resourceIDs = []

        # Store a list of prefix/uri mappings encountered
        self.namespaces = []

    def accept(self, visitor) -> None:
        """
        Read all remaining chunks and report them to `visitor`

        :raises ResParserError: if a chunk is malformed
        """
        try:
            self._accept(visitor)
        except StructError as e:
            raise ResParserError(
                "Chunk is truncated at offset {}: {}".format(self.buff.tell(), e)
            )

    def _accept(self, visitor) -> None:
        # Stop at the declared filesize or at the end of the file
        while self.buff.tell() < self.filesize:
            h = ARSCHeader(self.buff)
            logger.debug(
                "NEXT HEADER {} {}".format(h, CHUNK_NAMES.get(h.get_type(), "UNKNOWN"))
            )

            # Special chunk: Resource Map. This chunk might be contained inside
            # the file, after the string pool.
            if h.get_type() == RES_XML_RESOURCE_MAP_TYPE:
                # Check size: < 8 bytes mean that the chunk is not complete
                # Should be aligned to 4 bytes.
                if h.get_size() < 8 or (h.get_size() % 4) != 0:
                    raise ResParserError(
                        "Invalid chunk size in chunk XML_RESOURCE_MAP"
                    )

                self.buff.seek(h.start + h.get_header_size())
                for _ in range((h.get_size() - h.get_header_size()) // 4):
                    self.m_resourceIDs.append(
                        unpack('<L', self.buff.read(4))[0]
                    )
                logger.debug(f"AXML contains a RESOURCE MAP of {len(self.m_resourceIDs)} ids")
                self.buff.seek(h.get_end())
                continue

            # unknown chunk types might cause problems, but we can skip them!
            if (
                h.get_type() < RES_XML_FIRST_CHUNK_TYPE
                or h.get_type() > RES_XML_LAST_CHUNK_TYPE
            ):
                logger.error(
                    "Not a XML resource chunk type: 0x{:04x}. Skipping {} bytes".format(
                        h.get_type(), h.get_size()
                    )
                )
                self.buff.seek(h.get_end())
                continue

            # Check that we read a correct header
            if h.get_header_size() != 0x10:
                logger.error(
                    "XML Resource Type Chunk header size does not match 16! "
                    "At chunk type 0x{:04x}, declared header size=0x{:04x}, chunk size=0x{:04x}".format(
                        h.get_type(), h.get_header_size(), h.get_size()
                    )
                )
                self.buff.seek(h.get_end())
                continue

            # Line Number of the source file, only used as meta information
            line_number, comment_index = unpack('<LL', self.buff.read(8))

            if h.get_type() == RES_XML_START_NAMESPACE_TYPE:
                prefix, uri = unpack('<LL', self.buff.read(8))
                s_prefix = self.sb[prefix]
                s_uri = self.sb[uri]
                if s_uri == '':
                    logger.error(
                        "Namespace prefix '{}' resolves to empty URI. "
                        "This might be a packer.".format(s_prefix)
                    )
                if (prefix, uri) in self.namespaces:
                    logger.debug(
                        "Namespace mapping ({}, {}) already seen! "
                        "This is usually not a problem but could indicate packers or broken AXML compilers.".format(
                            prefix, uri
                        )
                    )
                self.namespaces.append((prefix, uri))
                visitor.ns(s_prefix, s_uri, line_number)

            elif h.get_type() == RES_XML_END_NAMESPACE_TYPE:
                prefix, uri = unpack('<LL', self.buff.read(8))
                if (prefix, uri) in self.namespaces:
                    self.namespaces.remove((prefix, uri))
                else:
                    logger.warning(
                        "Reached a NAMESPACE_END without having the namespace stored before? "
                        "Prefix ID: {}, URI ID: {}".format(prefix, uri)
                    )

            elif h.get_type() == RES_XML_START_ELEMENT_TYPE:
                self._read_element(h, visitor)

            elif h.get_type() == RES_XML_END_ELEMENT_TYPE:
                visitor.end()

            elif h.get_type() == RES_XML_CDATA_TYPE:
                # ResStringPool_ref data, followed by a typed value which is
                # usually set to UNDEFINED and ignored here
                (data_index,) = unpack('<L', self.buff.read(4))
                visitor.text(line_number, self.sb[data_index])

            else:
                logger.warning(
                    "Unknown XML Chunk: 0x{:04x}, skipping {} bytes.".format(
                        h.get_type(), h.get_size()
                    )
                )

            self.buff.seek(h.get_end())

        if self.namespaces:
            logger.warning(
                "Not all namespace mappings were closed! Malformed AXML?"
            )

    def _read_element(self, h: ARSCHeader, visitor) -> None:
        # The TAG consists of some fields:
        # * namespace_uri
        # * name
        # * attribute_start, attribute_size
        # * attribute_count (id_index in the high half)
        # * class_attribute
        # After that, there is the list of attributes, 20 bytes each
        namespace_uri, name = unpack('<LL', self.buff.read(8))
        at_start, at_size = unpack('<HH', self.buff.read(4))
        attribute_count, class_attribute = unpack('<LL', self.buff.read(8))

        id_attribute = (attribute_count >> 16) - 1
        attribute_count = attribute_count & 0xFFFF
        if at_size < ATTRIBUTE_LENGTH * 4:
            raise ResParserError(
                "Attribute size {} is smaller than {}! Offset={}".format(
                    at_size, ATTRIBUTE_LENGTH * 4, h.start
                )
            )

        visitor.child(
            self.sb[namespace_uri] if namespace_uri != NO_ENTRY else None,
            self.sb[name] if name != NO_ENTRY else None,
        )

        self.buff.seek(h.start + h.get_header_size() + at_start)
        for i in range(attribute_count):
            attribute = unpack('<5L', self.buff.read(ATTRIBUTE_LENGTH * 4))
            if at_size != ATTRIBUTE_LENGTH * 4:
                self.buff.read(at_size - ATTRIBUTE_LENGTH * 4)

            name_index = attribute[ATTRIBUTE_IX_NAME]
            ns_index = attribute[ATTRIBUTE_IX_NAMESPACE_URI]
            value_type = attribute[ATTRIBUTE_IX_VALUE_TYPE] >> 24
            resource_id = None
            if name_index < len(self.m_resourceIDs):
                resource_id = self.m_resourceIDs[name_index]

            visitor.attr(
                self.sb[ns_index] if ns_index != NO_ENTRY else None,
                self.sb[name_index],
                resource_id,
                value_type,
                self._payload(
                    value_type,
                    attribute[ATTRIBUTE_IX_VALUE_STRING],
                    attribute[ATTRIBUTE_IX_VALUE_DATA],
                    i == id_attribute,
                ),
            )

    def _payload(self, value_type: int, raw_index: int, data: int, is_id: bool) -> Payload:
        """
        Wrap the attribute value the way the decoder expects it
        """
        if value_type == TYPE_STRING:
            return StringPayload(self.sb[raw_index if raw_index != NO_ENTRY else data])
        if raw_index != NO_ENTRY and value_type in RAW_VALUE_TYPES:
            return RawPayload(self.sb[raw_index])
        if value_type == TYPE_INT_BOOLEAN:
            return BoolPayload(data != 0)
        if is_id and value_type in ID_VALUE_TYPES:
            return IdPayload(_signed(data))
        return IntPayload(_signed(data))
