"""
In-memory representation of a decoded binary XML document.

Attribute payloads arrive from the event reader as one of the small
payload classes below, so the value decoder can tell a native value
from a wrapped raw string or a wrapped id without guessing.
"""

from dataclasses import dataclass, field
from typing import Any, Iterator, Union


@dataclass(frozen=True)
class IntPayload:
    """Native signed 32 bit value"""
    value: int


@dataclass(frozen=True)
class StringPayload:
    """Native string value"""
    value: str


@dataclass(frozen=True)
class BoolPayload:
    """Native boolean value"""
    value: bool


@dataclass(frozen=True)
class RawPayload:
    """The raw value string kept by the compiler next to the typed data"""
    raw: str


@dataclass(frozen=True)
class IdPayload:
    """Value of the element's id attribute"""
    ref: int


Payload = Union[IntPayload, StringPayload, BoolPayload, RawPayload, IdPayload]


@dataclass(frozen=True)
class Namespace:
    prefix: str
    uri: str
    line: int


@dataclass
class Attribute:
    name: str
    resource_id: Union[int, None]
    type: int
    value: Any
    namespace: Union[str, None] = None
    from_default: bool = False


class Node:
    """
    An element of the document.

    The parent is fixed when the node is created; children are owned by
    their parent through `children`.
    """

    def __init__(
        self,
        name: Union[str, None],
        namespace: Union[str, None],
        parent: Union["Node", None] = None,
    ) -> None:
        self.name = name
        self.namespace = namespace
        self._parent = parent
        self.children: list[Node] = []
        self.attributes: list[Attribute] = []
        self.text: Union[str, None] = None

    @property
    def parent(self) -> Union["Node", None]:
        return self._parent

    @property
    def path(self) -> str:
        """
        Slash separated tag names from the outermost element down to this node
        """
        names = []
        node = self
        while node is not None:
            names.append(node.name or "?")
            node = node.parent
        return "/".join(reversed(names))

    def add_child(self, child: "Node") -> "Node":
        self.children.append(child)
        return child

    def add_attribute(self, attribute: Attribute) -> None:
        self.attributes.append(attribute)

    def get_attribute(self, name: str) -> Union[Attribute, None]:
        """
        Return the first attribute with the given name, or None
        """
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None

    def has_attribute(self, name: str) -> bool:
        return self.get_attribute(name) is not None

    def get_children_with_tag(self, tag: str) -> list["Node"]:
        return [child for child in self.children if child.name == tag]

    def iter(self) -> Iterator["Node"]:
        """Traverse depth-first, yielding self then children."""
        yield self
        for child in self.children:
            yield from child.iter()

    def __repr__(self):
        return "<Node name='{}' #attributes={} #children={}>".format(
            self.name, len(self.attributes), len(self.children)
        )


@dataclass
class Document:
    root: Union[Node, None] = None
    namespaces: list[Namespace] = field(default_factory=list)
    _pointers: dict[str, Node] = field(default_factory=dict, repr=False)

    def add_namespace(self, namespace: Namespace) -> None:
        self.namespaces.append(namespace)

    def add_pointer(self, name: str, node: Node) -> None:
        self._pointers[name] = node

    def find_node(self, tag: str) -> Union[Node, None]:
        """
        Quick lookup of a node by tag name.

        Only the most recently started node of each name is indexed; use
        `root.iter()` to visit every node with that name.
        """
        return self._pointers.get(tag)
