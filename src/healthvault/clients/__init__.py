"""
Sub-Client Package

Each sub-client turns domain operations into method calls sent through
HealthVaultConnection.execute() and parses the typed results.
"""

from .action_plan import ActionPlanClient
from .base import BaseClient, RecordClient
from .person import PersonClient
from .platform import PlatformClient
from .thing import ThingClient, thing_from_item
from .vocabulary import VocabularyClient

__all__ = [
    "ActionPlanClient",
    "BaseClient",
    "RecordClient",
    "PersonClient",
    "PlatformClient",
    "ThingClient",
    "thing_from_item",
    "VocabularyClient",
]
