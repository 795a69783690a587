"""
Coded values: a display text plus codes from standard vocabularies.
"""

from typing import Iterable, List, Optional
from xml.etree import ElementTree

from ..exceptions import ArgumentError
from ..utils import child_text, sub_element_text
from .base import check_node_name, missing, register, require_text


def _require_text_value(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ArgumentError(f"{field} must not be empty")
    return value


@register("coded-value")
class CodedValue:
    """
    One code from a vocabulary.

    Attributes:
        value: The code
        family: Vocabulary family (e.g. "wc")
        vocabulary_type: Vocabulary name
        version: Vocabulary version
    """

    def __init__(
        self,
        value: Optional[str] = None,
        vocabulary_type: Optional[str] = None,
        family: Optional[str] = None,
        version: Optional[str] = None,
    ):
        self._value = None
        self._vocabulary_type = None
        if value is not None:
            self.value = value
        if vocabulary_type is not None:
            self.vocabulary_type = vocabulary_type
        self.family = family
        self.version = version

    @property
    def value(self) -> Optional[str]:
        return self._value

    @value.setter
    def value(self, value: str):
        self._value = _require_text_value(value, "CodedValue.value")

    @property
    def vocabulary_type(self) -> Optional[str]:
        return self._vocabulary_type

    @vocabulary_type.setter
    def vocabulary_type(self, value: str):
        self._vocabulary_type = _require_text_value(value, "CodedValue.vocabulary_type")

    @classmethod
    def parse_xml(cls, element: ElementTree.Element) -> 'CodedValue':
        return cls(
            value=require_text(element, "value"),
            vocabulary_type=require_text(element, "type"),
            family=child_text(element, "family"),
            version=child_text(element, "version"),
        )

    def write_xml(self, node_name: str) -> ElementTree.Element:
        check_node_name(node_name)
        if self._value is None:
            raise missing("CodedValue", "value")
        if self._vocabulary_type is None:
            raise missing("CodedValue", "vocabulary_type")

        element = ElementTree.Element(node_name)
        sub_element_text(element, "value", self._value)
        if self.family:
            sub_element_text(element, "family", self.family)
        sub_element_text(element, "type", self._vocabulary_type)
        if self.version:
            sub_element_text(element, "version", self.version)
        return element

    def _key(self):
        return (self._value, self.family, self._vocabulary_type, self.version)

    def __eq__(self, other):
        if not isinstance(other, CodedValue):
            return NotImplemented
        return self._key() == other._key()

    __hash__ = None

    def __repr__(self) -> str:
        return f"CodedValue(value={self._value!r}, vocabulary_type={self._vocabulary_type!r})"


@register("codable-value")
class CodableValue:
    """
    A display text with zero or more codes.

    Attributes:
        text: Text shown to the user; mandatory
        codes: Codes that represent the text
    """

    def __init__(self, text: Optional[str] = None, codes: Iterable[CodedValue] = ()):
        self._text = None
        if text is not None:
            self.text = text
        self.codes: List[CodedValue] = list(codes)

    @property
    def text(self) -> Optional[str]:
        return self._text

    @text.setter
    def text(self, value: str):
        self._text = _require_text_value(value, "CodableValue.text")

    @classmethod
    def parse_xml(cls, element: ElementTree.Element) -> 'CodableValue':
        return cls(
            text=require_text(element, "text"),
            codes=[CodedValue.parse_xml(c) for c in element.findall("code")],
        )

    def write_xml(self, node_name: str) -> ElementTree.Element:
        check_node_name(node_name)
        if self._text is None:
            raise missing("CodableValue", "text")

        element = ElementTree.Element(node_name)
        sub_element_text(element, "text", self._text)
        for code in self.codes:
            element.append(code.write_xml("code"))
        return element

    def __eq__(self, other):
        if not isinstance(other, CodableValue):
            return NotImplemented
        return self._text == other._text and self.codes == other.codes

    __hash__ = None

    def __str__(self) -> str:
        return self._text or ""

    def __repr__(self) -> str:
        return f"CodableValue(text={self._text!r}, codes={self.codes!r})"
