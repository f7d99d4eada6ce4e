"""Data models for the pediatric reference knowledge base."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import json


class AgeGroup(str, Enum):
    """Pediatric age band used to scope emergency protocols."""
    NEONATE = "neonate"
    INFANT = "infant"
    CHILD = "child"
    ADOLESCENT = "adolescent"

    @classmethod
    def from_age_months(cls, age_months: int) -> "AgeGroup":
        """Derive the age group from age in months.

        <1 neonate, 1-11 infant, 12-143 child, >=144 adolescent.
        """
        if age_months < 1:
            return cls.NEONATE
        if age_months < 12:
            return cls.INFANT
        if age_months < 144:  # 12 years
            return cls.CHILD
        return cls.ADOLESCENT


class ProtocolSeverity(str, Enum):
    """Clinical urgency of an emergency protocol."""
    CRITICAL = "critical"
    SEVERE = "severe"
    MODERATE = "moderate"
    MILD = "mild"

    @classmethod
    def rank(cls, severity: "ProtocolSeverity | str | None") -> int:
        """Sort rank for a severity (1 = most urgent, unset sorts last)."""
        ranks = {
            cls.CRITICAL: 1,
            cls.SEVERE: 2,
            cls.MODERATE: 3,
            cls.MILD: 4,
        }
        if severity is None:
            return 5
        try:
            return ranks[cls(severity)]
        except ValueError:
            return 5


def _load_json(val, default):
    if val is None or val == "":
        return default
    if isinstance(val, (list, dict)):
        return val
    return json.loads(val)


@dataclass
class Drug:
    """Pediatric drug catalog entry."""
    name: str
    category: str
    generic_name: str | None = None
    age_restrictions: str | None = None
    contraindications: str | None = None
    weight_based_dosing: bool = False
    side_effects: str | None = None
    dosage_forms: list[str] = field(default_factory=list)

    @classmethod
    def from_row(cls, row) -> "Drug":
        """Create from database row."""
        return cls(
            name=row["name"],
            category=row["category"],
            generic_name=row["generic_name"],
            age_restrictions=row["age_restrictions"],
            contraindications=row["contraindications"],
            weight_based_dosing=bool(row["weight_based_dosing"]),
            side_effects=row["side_effects"],
            dosage_forms=_load_json(row["dosage_forms"], []),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "generic_name": self.generic_name,
            "category": self.category,
            "age_restrictions": self.age_restrictions,
            "contraindications": self.contraindications,
            "weight_based_dosing": self.weight_based_dosing,
            "side_effects": self.side_effects,
            "dosage_forms": list(self.dosage_forms),
        }


@dataclass
class DosageRule:
    """Weight-based dosing rule for one drug over an age/weight range.

    A bound left as None is open on that side.
    """
    drug_name: str
    dose_unit: str          # mg, mcg, units
    frequency: str          # BID, TID, Q8H
    route: str              # PO, IV, IM, IN
    indication: str | None = None
    dose_per_kg: float | None = None
    min_age_months: int | None = None
    max_age_months: int | None = None
    min_weight_kg: float | None = None
    max_weight_kg: float | None = None
    max_single_dose: float | None = None
    max_daily_dose: float | None = None
    special_instructions: str | None = None
    id: str | None = None

    @property
    def age_span(self) -> float:
        """Width of the age range in months (inf when open-ended)."""
        if self.min_age_months is None or self.max_age_months is None:
            return float("inf")
        return self.max_age_months - self.min_age_months

    @property
    def weight_span(self) -> float:
        """Width of the weight range in kg (inf when open-ended)."""
        if self.min_weight_kg is None or self.max_weight_kg is None:
            return float("inf")
        return self.max_weight_kg - self.min_weight_kg

    @classmethod
    def from_row(cls, row) -> "DosageRule":
        """Create from database row."""
        return cls(
            id=row["id"],
            drug_name=row["drug_name"],
            indication=row["indication"],
            min_age_months=row["min_age_months"],
            max_age_months=row["max_age_months"],
            min_weight_kg=row["min_weight_kg"],
            max_weight_kg=row["max_weight_kg"],
            dose_per_kg=row["dose_per_kg"],
            dose_unit=row["dose_unit"],
            frequency=row["frequency"],
            route=row["route"],
            max_single_dose=row["max_single_dose"],
            max_daily_dose=row["max_daily_dose"],
            special_instructions=row["special_instructions"],
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "drug_name": self.drug_name,
            "indication": self.indication,
            "min_age_months": self.min_age_months,
            "max_age_months": self.max_age_months,
            "min_weight_kg": self.min_weight_kg,
            "max_weight_kg": self.max_weight_kg,
            "dose_per_kg": self.dose_per_kg,
            "dose_unit": self.dose_unit,
            "frequency": self.frequency,
            "route": self.route,
            "max_single_dose": self.max_single_dose,
            "max_daily_dose": self.max_daily_dose,
            "special_instructions": self.special_instructions,
        }


@dataclass
class ProtocolMedication:
    """A medication and its dose within an emergency protocol."""
    name: str
    dose: str

    def to_dict(self) -> dict:
        return {"name": self.name, "dose": self.dose}


@dataclass
class EmergencyProtocol:
    """Emergency management protocol for a condition."""
    condition: str
    protocol_name: str
    steps: list[str]
    age_group: AgeGroup | None = None       # None applies to all ages
    severity: ProtocolSeverity | None = None
    medications: list[ProtocolMedication] = field(default_factory=list)
    equipment: list[str] = field(default_factory=list)
    contraindications: str | None = None
    references: list[str] = field(default_factory=list)
    id: str | None = None

    def __post_init__(self):
        if self.age_group is not None and not isinstance(self.age_group, AgeGroup):
            self.age_group = AgeGroup(self.age_group)
        if self.severity is not None and not isinstance(self.severity, ProtocolSeverity):
            self.severity = ProtocolSeverity(self.severity)
        self.medications = [
            med if isinstance(med, ProtocolMedication) else ProtocolMedication(**med)
            for med in self.medications
        ]

    @property
    def severity_rank(self) -> int:
        return ProtocolSeverity.rank(self.severity)

    @classmethod
    def from_row(cls, row) -> "EmergencyProtocol":
        """Create from database row."""
        return cls(
            id=row["id"],
            condition=row["condition"],
            protocol_name=row["protocol_name"],
            age_group=row["age_group"] or None,
            severity=row["severity"] or None,
            steps=_load_json(row["steps"], []),
            medications=_load_json(row["medications"], []),
            equipment=_load_json(row["equipment"], []),
            contraindications=row["contraindications"],
            references=_load_json(row["nelson_references"], []),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "condition": self.condition,
            "protocol_name": self.protocol_name,
            "age_group": self.age_group.value if self.age_group else None,
            "severity": self.severity.value if self.severity else None,
            "steps": list(self.steps),
            "medications": [m.to_dict() for m in self.medications],
            "equipment": list(self.equipment),
            "contraindications": self.contraindications,
            "references": list(self.references),
        }


@dataclass
class ContentMetadata:
    """Structured metadata attached to a textbook passage."""
    topic: str | None = None
    age_group: str | None = None
    medical_specialty: str | None = None
    keywords: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict | None) -> "ContentMetadata | None":
        if not data:
            return None
        return cls(
            topic=data.get("topic"),
            age_group=data.get("age_group"),
            medical_specialty=data.get("medical_specialty"),
            keywords=list(data.get("keywords") or []),
        )

    def to_dict(self) -> dict:
        return {
            "topic": self.topic,
            "age_group": self.age_group,
            "medical_specialty": self.medical_specialty,
            "keywords": list(self.keywords),
        }


@dataclass
class Citation:
    """A supporting passage reference for display alongside an answer."""
    source: str
    chapter: str
    section: str
    content_snippet: str
    relevance_score: float
    page: int | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "source": self.source,
            "chapter": self.chapter,
            "section": self.section,
            "page": self.page,
            "content_snippet": self.content_snippet,
            "relevance_score": self.relevance_score,
        }


@dataclass
class ReferenceContent:
    """A passage of pediatric reference text."""
    chapter: str
    section: str
    content: str
    page_number: int | None = None
    metadata: ContentMetadata | None = None
    id: str | None = None

    def __post_init__(self):
        if isinstance(self.metadata, dict):
            self.metadata = ContentMetadata.from_dict(self.metadata)

    def excerpt(self, max_chars: int = 200) -> str:
        """Return a short excerpt cut on a word boundary."""
        text = " ".join(self.content.split())
        if len(text) <= max_chars:
            return text

        cut = text[:max_chars]
        last_space = cut.rfind(" ")
        if last_space > 0:
            cut = cut[:last_space]
        return cut.rstrip(" ,;:.") + "..."

    def to_citation(
        self,
        relevance_score: float,
        source: str = "Nelson Textbook of Pediatrics",
        max_chars: int = 200,
    ) -> Citation:
        """Build a citation record pointing back at this passage."""
        return Citation(
            source=source,
            chapter=self.chapter,
            section=self.section,
            page=self.page_number,
            content_snippet=self.excerpt(max_chars),
            relevance_score=relevance_score,
        )

    @classmethod
    def from_row(cls, row) -> "ReferenceContent":
        """Create from database row."""
        return cls(
            id=row["id"],
            chapter=row["chapter"],
            section=row["section"],
            page_number=row["page_number"],
            content=row["content"],
            metadata=ContentMetadata.from_dict(_load_json(row["metadata"], None)),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "chapter": self.chapter,
            "section": self.section,
            "page_number": self.page_number,
            "content": self.content,
            "metadata": self.metadata.to_dict() if self.metadata else None,
        }


@dataclass
class DosageResult:
    """Computed dose recommendation for one patient."""
    drug_name: str
    recommended_dose: str
    frequency: str
    route: str
    warnings: list[str]
    citations: list[str]
    dose_per_kg: str | None = None
    max_dose: str | None = None
    max_daily_dose: str | None = None
    indication: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "drug_name": self.drug_name,
            "recommended_dose": self.recommended_dose,
            "dose_per_kg": self.dose_per_kg,
            "frequency": self.frequency,
            "route": self.route,
            "warnings": list(self.warnings),
            "max_dose": self.max_dose,
            "max_daily_dose": self.max_daily_dose,
            "indication": self.indication,
            "citations": list(self.citations),
        }
