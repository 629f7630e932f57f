import binascii
import re
from typing import Union

from loguru import logger
from lxml import etree

from .internal_types import (
    TYPE_ATTRIBUTE,
    TYPE_DYNAMIC_ATTRIBUTE,
    TYPE_DYNAMIC_REFERENCE,
    TYPE_FLOAT,
    TYPE_INT_HEX,
    TYPE_REFERENCE,
)
from .model import Attribute, Document, Node


def format_value(attribute: Attribute) -> str:
    """
    Format a decoded attribute value the way aapt prints it.

    :param attribute: the attribute
    :returns: the formatted string
    """
    # Function to prepend android prefix for attributes/references from the
    # android library
    fmt_package = lambda x: "android:" if (x & 0xFFFFFFFF) >> 24 == 1 else ""

    value = attribute.value
    _type = attribute.type

    if isinstance(value, bool):
        return "true" if value else "false"

    if isinstance(value, str):
        return value

    if isinstance(value, float) or _type == TYPE_FLOAT:
        return "%f" % value

    if isinstance(value, int):
        data = value & 0xFFFFFFFF
        if _type in (TYPE_ATTRIBUTE, TYPE_DYNAMIC_ATTRIBUTE):
            return "?{}{:08X}".format(fmt_package(data), data)
        if _type in (TYPE_REFERENCE, TYPE_DYNAMIC_REFERENCE):
            return "@{}{:08X}".format(fmt_package(data), data)
        if _type == TYPE_INT_HEX:
            return "0x%08X" % data
        return "%d" % value

    # ComplexValue and ColorValue know their own notation
    return str(value)


class AXMLPrinter:
    """
    Converter for a decoded [Document][axmltree.model.Document] into a lxml
    ElementTree, which can easily be converted into XML.

    A Reference Implementation can be found at http://androidxref.com/9.0.0_r3/xref/frameworks/base/tools/aapt/XMLNode.cpp
    """

    __charrange = None
    __replacement = None

    def __init__(self, document: Document) -> None:
        self.document = document
        self.packerwarning = False
        self.nsmap = self._build_nsmap()
        self.root = None
        if document.root is not None:
            self.root = self._build(document.root, None)

    def _build_nsmap(self) -> dict[str, str]:
        """
        There are several problems with the namespace list:

        1) a URI can be mapped by many prefixes, so it is to decide which one to take
        2) a prefix might map to an empty string (some packers)
        3) uri+prefix mappings might be included several times
        4) prefix might be empty
        """
        nsmap = dict()
        for namespace in self.document.namespaces:
            # Solve 2) & 4) by not including
            if namespace.uri != "" and namespace.prefix != "":
                # solve 1) and 3) by using the last one in the list
                nsmap[namespace.prefix] = namespace.uri.strip()
        return nsmap

    def _build(self, node: Node, parent: Union[etree._Element, None]) -> etree._Element:
        uri, name = self._fix_name(self._print_namespace(node.namespace), node.name or "")
        tag = "{}{}".format(uri, name)
        logger.debug(f"START_TAG: {tag}")

        if parent is None:
            elem = etree.Element(tag, nsmap=self.nsmap)
        else:
            elem = etree.SubElement(parent, tag)

        for attribute in node.attributes:
            uri, name = self._fix_name(
                self._print_namespace(attribute.namespace), attribute.name
            )
            value = self._fix_value(format_value(attribute))
            key = "{}{}".format(uri, name)
            if key in elem.attrib:
                logger.warning(
                    "Duplicate attribute '{}'! Will overwrite!".format(key)
                )
            elem.set(key, value)

        if node.text is not None:
            elem.text = self._fix_value(node.text)

        for child in node.children:
            self._build(child, elem)
        return elem

    def get_buff(self) -> bytes:
        """
        Returns the raw XML file without prettification applied.

        :returns: bytes, encoded as UTF-8
        """
        return self.get_xml(pretty=False)

    def get_xml(self, pretty: bool = True) -> bytes:
        """
        Get the XML as an UTF-8 string

        :returns: bytes encoded as UTF-8
        """
        if self.root is None:
            return b""
        return etree.tostring(self.root, encoding="utf-8", pretty_print=pretty)

    def get_xml_obj(self) -> Union[etree._Element, None]:
        """
        Get the XML as an ElementTree object

        :returns: `lxml.etree.Element` object
        """
        return self.root

    def is_packed(self) -> bool:
        """
        Returns True if names or values had to be repaired while printing,
        which usually means the file went through a packer.
        """
        return self.packerwarning

    def _fix_name(self, prefix: str, name: str) -> tuple[str, str]:
        """
        Apply some fixes to element named and attribute names.
        Try to get conform to:
        > Like element names, attribute names are case-sensitive and must start with a letter or underscore.
        > The rest of the name can contain letters, digits, hyphens, underscores, and periods.

        In some cases, the namespace prefix is inside the name and not in the prefix field.
        Then, the tag name will usually look like 'android:foobar'.
        If and only if the namespace prefix is inside the namespace mapping and the actual prefix field is empty,
        we will strip the prefix from the name and return the fixed prefix URI instead.
        Otherwise all unwanted characters are replaced by underscores.

        :param prefix: The existing prefix uri, already in `{uri}` notation
        :param name: Name of the attribute or tag
        :return: a fixed version of prefix and name
        """
        if not name:
            logger.warning("Empty name, using '_' instead")
            self.packerwarning = True
            return prefix, "_"
        if not name[0].isalpha() and name[0] != "_":
            logger.warning(
                "Invalid start for name '{}'. "
                "XML name must start with a letter.".format(name)
            )
            self.packerwarning = True
            name = "_{}".format(name)
        if ":" in name and prefix == '':
            self.packerwarning = True
            embedded_prefix, new_name = name.split(":", 1)
            if embedded_prefix in self.nsmap:
                logger.info(
                    "Prefix '{}' is in namespace mapping, assume that it is a prefix.".format(
                        embedded_prefix
                    )
                )
                prefix = self._print_namespace(self.nsmap[embedded_prefix])
                name = new_name
            else:
                logger.warning(
                    "Confused: name contains a unknown namespace prefix: '{}'. "
                    "This is either a broken AXML file or some attempt to break stuff.".format(
                        name
                    )
                )
        if not re.match(r"^[a-zA-Z0-9._-]*$", name):
            logger.warning(
                "Name '{}' contains invalid characters!".format(name)
            )
            self.packerwarning = True
            name = re.sub(r"[^a-zA-Z0-9._-]", "_", name)

        return prefix, name

    def _fix_value(self, value: str) -> str:
        """
        Return a cleaned version of a value
        according to the specification:
        > Char	   ::=   	#x9 | #xA | #xD | [#x20-#xD7FF] | [#xE000-#xFFFD] | [#x10000-#x10FFFF]

        See <https://www.w3.org/TR/xml/#charsets>

        :param value: a value to clean
        :return: the cleaned value
        """
        if not self.__charrange or not self.__replacement:
            self.__charrange = re.compile(
                '^[\u0020-\uD7FF\u0009\u000A\u000D\uE000-\uFFFD\U00010000-\U0010FFFF]*$'
            )
            self.__replacement = re.compile(
                '[^\u0020-\uD7FF\u0009\u000A\u000D\uE000-\uFFFD\U00010000-\U0010FFFF]'
            )

        # Reading string until \x00. This is the same as aapt does.
        if "\x00" in value:
            self.packerwarning = True
            logger.warning(
                "Null byte found in attribute value at position {}: "
                "Value(hex): '{}'".format(
                    value.find("\x00"), binascii.hexlify(value.encode("utf-8"))
                )
            )
            value = value[: value.find("\x00")]

        if not self.__charrange.match(value):
            logger.warning(
                "Invalid character in value found. Replacing with '_'."
            )
            self.packerwarning = True
            value = self.__replacement.sub('_', value)
        return value

    @staticmethod
    def _print_namespace(uri: Union[str, None]) -> str:
        if uri:
            return "{{{}}}".format(uri)
        return ""
