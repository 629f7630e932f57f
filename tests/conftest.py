"""
Shared fixtures: a small writer for binary XML documents and a resolver
test double.
"""

from struct import pack

import pytest

from axmltree.internal_types import (
    NO_ENTRY,
    RES_STRING_POOL_TYPE,
    RES_XML_CDATA_TYPE,
    RES_XML_END_ELEMENT_TYPE,
    RES_XML_END_NAMESPACE_TYPE,
    RES_XML_RESOURCE_MAP_TYPE,
    RES_XML_START_ELEMENT_TYPE,
    RES_XML_START_NAMESPACE_TYPE,
    RES_XML_TYPE,
    TYPE_STRING,
    UTF8_FLAG,
)


class AXMLWriter:
    """
    Builds AXML bytes chunk by chunk.

    Strings are added to the pool as they are used. Attribute names which
    need a resource id are reserved up front, as the resource map is
    indexed by string pool position; refer to them by their index.
    """

    def __init__(self, resource_names=(), utf8=False):
        self.utf8 = utf8
        self.strings = [name for name, _ in resource_names]
        self.resource_ids = [rid for _, rid in resource_names]
        self._index = {}
        self.chunks = []

    def string(self, value):
        if value is None:
            return NO_ENTRY
        if isinstance(value, int):
            return value
        if value not in self._index:
            self._index[value] = len(self.strings)
            self.strings.append(value)
        return self._index[value]

    def _node(self, chunk_type, line, body):
        header = pack("<HHL", chunk_type, 0x10, 16 + len(body))
        self.chunks.append(header + pack("<LL", line, NO_ENTRY) + body)
        return self

    def start_namespace(self, prefix, uri, line=1):
        return self._node(
            RES_XML_START_NAMESPACE_TYPE, line, pack("<LL", self.string(prefix), self.string(uri))
        )

    def end_namespace(self, prefix, uri, line=1):
        return self._node(
            RES_XML_END_NAMESPACE_TYPE, line, pack("<LL", self.string(prefix), self.string(uri))
        )

    def start_element(self, name, attributes=(), ns=None, line=1, id_index=0):
        """
        :param attributes: tuples of (ns, name, type, data) or (ns, name, type, data, raw);
            for TYPE_STRING the data may be the string itself
        :param id_index: 1-based position of the id attribute, 0 for none
        """
        encoded = b""
        for attribute in attributes:
            a_ns, a_name, a_type, data = attribute[:4]
            raw = attribute[4] if len(attribute) > 4 else None
            raw_index = self.string(raw) if raw is not None else NO_ENTRY
            if a_type == TYPE_STRING and isinstance(data, str):
                data = self.string(data)
                raw_index = data
            encoded += pack(
                "<5L",
                self.string(a_ns),
                self.string(a_name),
                raw_index,
                8 | (a_type << 24),
                data & 0xFFFFFFFF,
            )
        body = pack(
            "<LLHHHHL",
            self.string(ns),
            self.string(name),
            0x14,
            0x14,
            len(attributes),
            id_index,
            0,
        )
        return self._node(RES_XML_START_ELEMENT_TYPE, line, body + encoded)

    def end_element(self, name, ns=None, line=1):
        return self._node(
            RES_XML_END_ELEMENT_TYPE, line, pack("<LL", self.string(ns), self.string(name))
        )

    def text(self, value, line=1):
        return self._node(
            RES_XML_CDATA_TYPE, line, pack("<L", self.string(value)) + pack("<HBBL", 8, 0, 0, 0)
        )

    def raw_chunk(self, data):
        self.chunks.append(data)
        return self

    def _string_pool(self):
        offsets = b""
        data = b""
        for value in self.strings:
            offsets += pack("<I", len(data))
            if self.utf8:
                encoded = value.encode("utf-8")
                data += pack("<BB", len(value), len(encoded)) + encoded + b"\x00"
            else:
                data += pack("<H", len(value)) + value.encode("utf-16-le") + b"\x00\x00"
        while len(data) % 4:
            data += b"\x00"
        strings_offset = 28 + len(offsets)
        header = pack("<HHL", RES_STRING_POOL_TYPE, 0x1C, strings_offset + len(data))
        flags = UTF8_FLAG if self.utf8 else 0
        return header + pack("<5I", len(self.strings), 0, flags, strings_offset, 0) + offsets + data

    def _resource_map(self):
        if not self.resource_ids:
            return b""
        header = pack("<HHL", RES_XML_RESOURCE_MAP_TYPE, 8, 8 + 4 * len(self.resource_ids))
        return header + b"".join(pack("<L", rid) for rid in self.resource_ids)

    def build(self):
        body = self._string_pool() + self._resource_map() + b"".join(self.chunks)
        return pack("<HHL", RES_XML_TYPE, 8, 8 + len(body)) + body


class CountingResolver:
    """Resolver test double which records every query"""

    def __init__(self, names=None, error=None):
        self.names = names or {}
        self.error = error
        self.calls = []

    def resolve(self, resource_id):
        self.calls.append(resource_id)
        if self.error is not None:
            raise self.error
        return self.names.get(resource_id)


@pytest.fixture
def axml_writer():
    return AXMLWriter


@pytest.fixture
def counting_resolver():
    return CountingResolver
