from typing import Callable, Union

from loguru import logger

from .builder import NodeTreeBuilder
from .config import ParserConfig, load_config
from .decoder import AttributeValueDecoder
from .model import Document
from .public import FrameworkAttributeResolver, ResourceNameResolver
from .reader import AXMLReader


def default_resolver(config: ParserConfig) -> ResourceNameResolver:
    """
    Framework attribute resolver backed by the configured `public.xml`,
    or by the built-in table if none is configured.
    """
    if config.public_xml is not None:
        logger.info(f"Loading framework attributes from {config.public_xml}")
        return FrameworkAttributeResolver.from_public_xml(config.public_xml)
    return FrameworkAttributeResolver()


class AXMLTreeParser:
    """
    Parses binary XML buffers into [Document][axmltree.model.Document] trees.

    The resource id to name cache lives in the parser's decoder and is
    shared by all `parse` calls on the same instance. A parser must not be
    used from several threads at once.
    """

    def __init__(
        self,
        resolver: Union[ResourceNameResolver, None] = None,
        config: Union[ParserConfig, None] = None,
        reader_factory: Callable[[bytes], AXMLReader] = AXMLReader,
    ) -> None:
        """
        :param resolver: name lookup for attributes without a name, defaults to the framework attributes
        :param config: parser settings, defaults to `load_config()`
        :param reader_factory: creates the event reader for a buffer
        """
        self.config = config if config is not None else load_config()
        if resolver is None:
            resolver = default_resolver(self.config)
        self.decoder = AttributeValueDecoder(resolver)
        self.reader_factory = reader_factory

    def parse(self, buffer: bytes) -> Document:
        """
        Decode one binary XML document

        :param buffer: the complete file content
        :raises ResParserError: if the chunk structure is malformed
        :raises FormatError: if an attribute value can not be decoded
        :raises NullContextError: if the event stream is not properly nested
        :returns: the document
        """
        logger.debug(f"parse: {len(buffer)} bytes")
        builder = NodeTreeBuilder(self.decoder)
        self.reader_factory(buffer).accept(builder)
        if builder.document.root is None:
            logger.warning("Document has no root element")
        return builder.document


def parse(buffer: bytes, resolver: Union[ResourceNameResolver, None] = None) -> Document:
    """
    Shortcut for a one-off `AXMLTreeParser(resolver).parse(buffer)`
    """
    return AXMLTreeParser(resolver).parse(buffer)
