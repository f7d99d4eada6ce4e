"""Shared fixtures for pediatric reference tests."""

import sys
from pathlib import Path

import pytest

# Add project root to path for common module imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from common.pediatric_reference import (
    DosageRule,
    Drug,
    EmergencyProtocol,
    InMemoryKnowledgeStore,
    ReferenceContent,
    SQLiteKnowledgeStore,
)


def create_test_drug(name: str = "Acetaminophen", **overrides) -> Drug:
    """Create a test drug with no warnings attached."""
    fields = {
        "name": name,
        "category": "analgesic",
        "weight_based_dosing": True,
    }
    fields.update(overrides)
    return Drug(**fields)


def create_test_rule(drug_name: str = "Acetaminophen", **overrides) -> DosageRule:
    """Create an unbounded 15 mg/kg PO rule."""
    fields = {
        "drug_name": drug_name,
        "indication": "fever",
        "dose_per_kg": 15,
        "dose_unit": "mg",
        "frequency": "Q6H",
        "route": "PO",
    }
    fields.update(overrides)
    return DosageRule(**fields)


def create_test_protocol(
    protocol_name: str,
    condition: str = "Status epilepticus",
    age_group: str | None = None,
    severity: str | None = None,
) -> EmergencyProtocol:
    """Create a minimal emergency protocol."""
    return EmergencyProtocol(
        condition=condition,
        protocol_name=protocol_name,
        age_group=age_group,
        severity=severity,
        steps=["Assess airway"],
    )


def create_test_content(content: str, chapter: str = "Chapter 1", section: str = "Overview",
                        page_number: int | None = None) -> ReferenceContent:
    """Create a reference passage."""
    return ReferenceContent(
        chapter=chapter,
        section=section,
        content=content,
        page_number=page_number,
    )


@pytest.fixture
def memory_store():
    """Empty in-memory knowledge store."""
    return InMemoryKnowledgeStore()


@pytest.fixture
def sqlite_store(tmp_path):
    """Empty SQLite knowledge store in a temp directory."""
    return SQLiteKnowledgeStore(db_path=str(tmp_path / "reference.db"))


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    """Each backend in turn, so resolver tests cover both."""
    if request.param == "memory":
        return InMemoryKnowledgeStore()
    return SQLiteKnowledgeStore(db_path=str(tmp_path / "reference.db"))
