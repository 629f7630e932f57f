from typing import Union

from loguru import logger

from .decoder import AttributeValueDecoder
from .errors import FormatError, NullContextError
from .model import Document, Namespace, Node, Payload


class NodeTreeBuilder:
    """
    Receives the parse events of one document and assembles the
    [Document][axmltree.model.Document].

    The reader calls `ns`, `child`, `attr`, `text` and `end` in stream
    order. Open elements are kept on a stack; the element on top of the
    stack receives attributes and text.
    """

    def __init__(self, decoder: AttributeValueDecoder) -> None:
        self.decoder = decoder
        self.document = Document()
        self._stack: list[Node] = []

    @property
    def current(self) -> Union[Node, None]:
        if not self._stack:
            return None
        return self._stack[-1]

    def _require_current(self, event: str) -> Node:
        if not self._stack:
            raise NullContextError("{} event without an open element".format(event))
        return self._stack[-1]

    def ns(self, prefix: str, uri: str, line: int) -> None:
        logger.debug(f"ns: {prefix} -> {uri} (line={line})")
        self.document.add_namespace(Namespace(prefix, uri, line))

    def child(self, ns: Union[str, None], name: Union[str, None]) -> Node:
        """
        Open a new element below the current one

        :returns: the new node, which is now the current context
        """
        parent = self.current
        node = Node(
            name.strip() if name is not None else None,
            ns.strip() if ns is not None else None,
            parent,
        )
        if parent is not None:
            parent.add_child(node)
        if node.name is not None:
            self.document.add_pointer(node.name, node)
        self._stack.append(node)
        logger.debug(f"child: {node.path}")
        return node

    def attr(
        self,
        ns: Union[str, None],
        name: Union[str, None],
        resource_id: Union[int, None],
        type_: int,
        payload: Payload,
    ) -> None:
        node = self._require_current("Attribute")
        try:
            attribute = self.decoder.decode(name, ns, resource_id, type_, payload)
        except FormatError as e:
            e.location = node.path
            logger.error(str(e))
            raise
        if attribute is not None:
            node.add_attribute(attribute)

    def text(self, line: int, value: str) -> None:
        node = self._require_current("Text")
        logger.debug(f"text for {node.path} (line={line})")
        node.text = value

    def end(self) -> None:
        node = self._require_current("End")
        self._stack.pop()
        if not self._stack:
            logger.debug(f"end: root is {node.name}")
            self.document.root = node
