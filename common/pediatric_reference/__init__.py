"""Pediatric reference module: dosing, emergency protocols, and textbook search."""

from .content import ContentRanker
from .dosage import DosageResolver, RuleSelection
from .errors import (
    DrugNotFound,
    InvalidRequest,
    NoMatchingRule,
    NotFound,
    PediatricReferenceError,
)
from .models import (
    AgeGroup,
    Citation,
    ContentMetadata,
    DosageResult,
    DosageRule,
    Drug,
    EmergencyProtocol,
    ProtocolMedication,
    ProtocolSeverity,
    ReferenceContent,
)
from .protocols import ProtocolResolver
from .store import InMemoryKnowledgeStore, KnowledgeStore, SQLiteKnowledgeStore

__all__ = [
    "AgeGroup",
    "Citation",
    "ContentMetadata",
    "ContentRanker",
    "DosageResolver",
    "DosageResult",
    "DosageRule",
    "Drug",
    "DrugNotFound",
    "EmergencyProtocol",
    "InMemoryKnowledgeStore",
    "InvalidRequest",
    "KnowledgeStore",
    "NoMatchingRule",
    "NotFound",
    "PediatricReferenceError",
    "ProtocolMedication",
    "ProtocolResolver",
    "ProtocolSeverity",
    "ReferenceContent",
    "RuleSelection",
    "SQLiteKnowledgeStore",
]
