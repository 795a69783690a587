"""
Vocabulary Client

Wraps GetVocabulary and SearchVocabulary.
"""

from typing import List, Optional
from xml.etree import ElementTree

from ..exceptions import ArgumentError, ResponseFormatError
from ..models import Vocabulary, VocabularyItem, VocabularyKey
from ..utils import sub_element_text
from .base import BaseClient, to_fragment

MAX_SEARCH_RESULTS = 500


def _key_element(key: VocabularyKey) -> ElementTree.Element:
    element = ElementTree.Element("vocabulary-key")
    sub_element_text(element, "name", key.name)
    if key.family:
        sub_element_text(element, "family", key.family)
    if key.version:
        sub_element_text(element, "version", key.version)
    return element


class VocabularyClient(BaseClient):
    """Access to the platform's coded vocabularies."""

    async def get_vocabulary_keys(self) -> List[VocabularyKey]:
        """List every vocabulary the platform offers."""
        response = await self._execute("GetVocabulary", 2)
        return [
            VocabularyKey.from_xml(k)
            for k in self._info(response).findall("vocabulary-key-info/vocabulary-key")
        ]

    async def get_vocabulary(self, key: VocabularyKey) -> Vocabulary:
        """
        Get one vocabulary with all its items.

        Raises:
            ArgumentError: If the key has no name
            ResponseFormatError: If the vocabulary is not returned
        """
        if not key.name:
            raise ArgumentError("Vocabulary key must have a name")

        parameters = ElementTree.Element("vocabulary-parameters")
        parameters.append(_key_element(key))
        sub_element_text(parameters, "fixed-culture", "false")

        response = await self._execute("GetVocabulary", 2, to_fragment(parameters))
        element = self._info(response).find("vocabulary")
        if element is None:
            raise ResponseFormatError(f"Vocabulary {key.name} was not returned")
        return Vocabulary.from_xml(element)

    async def search_vocabulary(
        self,
        search_value: str,
        key: Optional[VocabularyKey] = None,
        max_results: int = 25,
    ) -> List[VocabularyItem]:
        """
        Search vocabulary items whose display text contains a value.

        Args:
            search_value: Text to look for
            key: Restrict the search to one vocabulary
            max_results: Upper bound on returned items (1..500)

        Raises:
            ArgumentError: If search_value is empty or max_results is out of range
        """
        if not search_value or not search_value.strip():
            raise ArgumentError("search_value must not be empty")
        if not 1 <= max_results <= MAX_SEARCH_RESULTS:
            raise ArgumentError(f"max_results must be between 1 and {MAX_SEARCH_RESULTS}")

        elements = []
        if key is not None:
            elements.append(_key_element(key))
        parameters = ElementTree.Element("text-search-parameters")
        search_string = sub_element_text(parameters, "search-string", search_value)
        search_string.set("search-mode", "Contains")
        sub_element_text(parameters, "max-results", max_results)
        elements.append(parameters)

        response = await self._execute("SearchVocabulary", 1, to_fragment(*elements))
        return [
            VocabularyItem.from_xml(i)
            for i in self._info(response).findall("code-set-result/code-item")
        ]
