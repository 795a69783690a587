"""
Item Type Contract

Every item type model implements the same two capabilities:

- parse_xml(element): classmethod building a model from an element
- write_xml(node_name): return a new element named node_name

Models are looked up by their type tag in a closed registry; there is no
shared base class. write_xml() raises ThingSerializationError when mandatory
data is missing, so no partial document is ever produced.
"""

from typing import Callable, Dict, Protocol, Type, TypeVar, runtime_checkable
from xml.etree import ElementTree

from ..exceptions import ArgumentError, ThingSerializationError
from ..utils import element_to_string

T = TypeVar("T")


@runtime_checkable
class ItemXml(Protocol):
    """The XML read/write capability of an item type model."""

    item_type: str

    @classmethod
    def parse_xml(cls, element: ElementTree.Element): ...

    def write_xml(self, node_name: str) -> ElementTree.Element: ...


ITEM_TYPES: Dict[str, Type] = {}


def register(item_type: str) -> Callable[[Type[T]], Type[T]]:
    """Class decorator adding a model to the registry under item_type."""
    def decorator(cls: Type[T]) -> Type[T]:
        if item_type in ITEM_TYPES:
            raise ValueError(f"Item type {item_type!r} is already registered")
        cls.item_type = item_type
        ITEM_TYPES[item_type] = cls
        return cls
    return decorator


def check_node_name(node_name: str) -> None:
    """
    Raises:
        ArgumentError: If node_name is empty
    """
    if not node_name or not node_name.strip():
        raise ArgumentError("node_name must not be empty")


def parse_item(item_type: str, source):
    """
    Parse an element (or serialized element) as the given item type.

    Raises:
        ArgumentError: If the item type is unknown or the XML is malformed
    """
    cls = ITEM_TYPES.get(item_type)
    if cls is None:
        raise ArgumentError(f"Unknown item type: {item_type!r}")
    if isinstance(source, str):
        try:
            source = ElementTree.fromstring(source)
        except ElementTree.ParseError as e:
            raise ArgumentError(f"{item_type} is not well-formed XML: {e}")
    return cls.parse_xml(source)


def write_item(item, node_name: str) -> str:
    """
    Serialize an item to a string rooted at node_name.

    Raises:
        ArgumentError: If item does not implement the item type contract
        ThingSerializationError: If the item is missing mandatory data
    """
    if not isinstance(item, ItemXml):
        raise ArgumentError(f"{type(item).__name__} is not an item type")
    return element_to_string(item.write_xml(node_name))


def require_text(element: ElementTree.Element, path: str) -> str:
    """
    Text of a mandatory child element.

    Raises:
        ArgumentError: If the child is absent or empty
    """
    child = element.find(path)
    if child is None or not child.text:
        raise ArgumentError(f"<{element.tag}> has no <{path}> value")
    return child.text


def parse_int(element: ElementTree.Element, path: str, required: bool = False):
    """Integer value of a child element, None when absent and optional."""
    child = element.find(path)
    if child is None or not (child.text or "").strip():
        if required:
            raise ArgumentError(f"<{element.tag}> has no <{path}> value")
        return None
    try:
        return int(child.text.strip())
    except ValueError:
        raise ArgumentError(f"<{element.tag}>/<{path}> is not an integer: {child.text!r}")


def missing(item_name: str, field: str) -> ThingSerializationError:
    return ThingSerializationError(
        f"{item_name} cannot be written: {field} is not set",
        details={"item_type": item_name, "field": field},
    )
