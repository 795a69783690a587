"""
Group membership: a named group and the person's identifier in it,
for example an employer and an employee number.
"""

from typing import Optional
from xml.etree import ElementTree

from ..exceptions import ArgumentError
from ..utils import sub_element_text
from .base import check_node_name, missing, register, require_text
from .codable_value import CodableValue


@register("group-membership")
class GroupMembership:
    """
    Membership of a person in a group.

    Attributes:
        name: The group; its text must not be empty
        value: The membership identifier; must not be empty or whitespace
    """

    def __init__(self, name: Optional[CodableValue] = None, value: Optional[str] = None):
        self._name = None
        self._value = None
        if name is not None:
            self.name = name
        if value is not None:
            self.value = value

    @property
    def name(self) -> Optional[CodableValue]:
        return self._name

    @name.setter
    def name(self, value: CodableValue):
        if value is None:
            raise ArgumentError("GroupMembership.name is mandatory")
        if not value.text:
            raise ArgumentError("GroupMembership.name must have text")
        self._name = value

    @property
    def value(self) -> Optional[str]:
        return self._value

    @value.setter
    def value(self, value: str):
        if value is None:
            raise ArgumentError("GroupMembership.value is mandatory")
        if not value.strip():
            raise ArgumentError("GroupMembership.value must not be empty")
        self._value = value

    @classmethod
    def parse_xml(cls, element: ElementTree.Element) -> 'GroupMembership':
        name_element = element.find("name")
        if name_element is None:
            raise ArgumentError(f"<{element.tag}> has no <name>")
        return cls(CodableValue.parse_xml(name_element), require_text(element, "value"))

    def write_xml(self, node_name: str) -> ElementTree.Element:
        check_node_name(node_name)
        if self._name is None:
            raise missing("GroupMembership", "name")
        if not self._value:
            raise missing("GroupMembership", "value")

        element = ElementTree.Element(node_name)
        element.append(self._name.write_xml("name"))
        sub_element_text(element, "value", self._value)
        return element

    def __eq__(self, other):
        if not isinstance(other, GroupMembership):
            return NotImplemented
        return self._name == other._name and self._value == other._value

    __hash__ = None

    def __str__(self) -> str:
        return f"{self._name} = {self._value}"
