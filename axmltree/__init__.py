"""
Decoder for Android binary XML (AXML) into a tree of nodes with typed attributes.
"""

from .color import ColorValue
from .complex_value import ComplexUnit, ComplexValue, decode_complex, encode_complex
from .errors import FormatError, NullContextError, ResParserError
from .model import Attribute, Document, Namespace, Node
from .parser import AXMLTreeParser, parse
from .printer import AXMLPrinter
from .public import FrameworkAttributeResolver, ResourceNameResolver

__version__ = "0.1.0"

__all__ = [
    "AXMLPrinter",
    "AXMLTreeParser",
    "Attribute",
    "ColorValue",
    "ComplexUnit",
    "ComplexValue",
    "Document",
    "FormatError",
    "FrameworkAttributeResolver",
    "Namespace",
    "Node",
    "NullContextError",
    "ResParserError",
    "ResourceNameResolver",
    "decode_complex",
    "encode_complex",
    "parse",
]
