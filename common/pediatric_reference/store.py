"""Knowledge store backends for pediatric reference data.

Resolvers only call the read methods (``get_drug``, ``find_*``). The
``add_*`` methods exist for seeding and tests.
"""

import copy
import json
import logging
import os
import sqlite3
import uuid
from pathlib import Path

from .config import config
from .filters import AllOf, Equals, Filter, register_sql_functions
from .models import (
    DosageRule,
    Drug,
    EmergencyProtocol,
    ReferenceContent,
)

logger = logging.getLogger(__name__)


def _generate_id(prefix: str) -> str:
    """Generate a unique record ID."""
    return f"{prefix}-{uuid.uuid4().hex[:8].upper()}"


class KnowledgeStore:
    """Read interface shared by all knowledge store backends.

    Every ``find_*`` method returns matches in insertion order.
    """

    def get_drug(self, name: str) -> Drug | None:
        """Look up a drug by exact name."""
        raise NotImplementedError

    def find_dosage_rules(
        self, drug_name: str, criteria: Filter | None = None
    ) -> list[DosageRule]:
        """Return the drug's dosage rules that satisfy criteria."""
        raise NotImplementedError

    def find_protocols(self, criteria: Filter | None = None) -> list[EmergencyProtocol]:
        """Return emergency protocols that satisfy criteria."""
        raise NotImplementedError

    def find_content(
        self, criteria: Filter | None = None, limit: int | None = None
    ) -> list[ReferenceContent]:
        """Return reference passages that satisfy criteria, capped at limit."""
        raise NotImplementedError

    def load(
        self,
        drugs: list[Drug] = (),
        dosage_rules: list[DosageRule] = (),
        protocols: list[EmergencyProtocol] = (),
        content: list[ReferenceContent] = (),
    ) -> None:
        """Bulk-load records in order."""
        for drug in drugs:
            self.add_drug(drug)
        for rule in dosage_rules:
            self.add_dosage_rule(rule)
        for protocol in protocols:
            self.add_protocol(protocol)
        for passage in content:
            self.add_content(passage)

        logger.info(
            f"Loaded {len(drugs)} drugs, {len(dosage_rules)} dosage rules, "
            f"{len(protocols)} protocols, {len(content)} passages"
        )

    def add_drug(self, drug: Drug) -> Drug:
        raise NotImplementedError

    def add_dosage_rule(self, rule: DosageRule) -> DosageRule:
        raise NotImplementedError

    def add_protocol(self, protocol: EmergencyProtocol) -> EmergencyProtocol:
        raise NotImplementedError

    def add_content(self, passage: ReferenceContent) -> ReferenceContent:
        raise NotImplementedError


class InMemoryKnowledgeStore(KnowledgeStore):
    """List-backed store for tests and demos.

    Records are copied on the way in and out, so callers cannot change
    stored data through an object they hold.
    """

    def __init__(self):
        self._drugs: dict[str, Drug] = {}
        self._rules: list[DosageRule] = []
        self._protocols: list[EmergencyProtocol] = []
        self._content: list[ReferenceContent] = []

    # --- Loading ---

    def add_drug(self, drug: Drug) -> Drug:
        if drug.name in self._drugs:
            raise ValueError(f"Drug already exists: {drug.name}")
        self._drugs[drug.name] = copy.deepcopy(drug)
        return drug

    def add_dosage_rule(self, rule: DosageRule) -> DosageRule:
        if rule.drug_name not in self._drugs:
            raise ValueError(f"Unknown drug for dosage rule: {rule.drug_name}")
        if rule.id is None:
            rule.id = _generate_id("DR")
        self._rules.append(copy.deepcopy(rule))
        return rule

    def add_protocol(self, protocol: EmergencyProtocol) -> EmergencyProtocol:
        if protocol.id is None:
            protocol.id = _generate_id("EP")
        self._protocols.append(copy.deepcopy(protocol))
        return protocol

    def add_content(self, passage: ReferenceContent) -> ReferenceContent:
        if passage.id is None:
            passage.id = _generate_id("RC")
        self._content.append(copy.deepcopy(passage))
        return passage

    # --- Queries ---

    def get_drug(self, name: str) -> Drug | None:
        return copy.deepcopy(self._drugs.get(name))

    def find_dosage_rules(
        self, drug_name: str, criteria: Filter | None = None
    ) -> list[DosageRule]:
        criteria = AllOf(Equals("drug_name", drug_name), criteria or AllOf())
        return [copy.deepcopy(rule) for rule in self._rules if criteria.matches(rule)]

    def find_protocols(self, criteria: Filter | None = None) -> list[EmergencyProtocol]:
        criteria = criteria or AllOf()
        return [copy.deepcopy(p) for p in self._protocols if criteria.matches(p)]

    def find_content(
        self, criteria: Filter | None = None, limit: int | None = None
    ) -> list[ReferenceContent]:
        criteria = criteria or AllOf()
        matches = [c for c in self._content if criteria.matches(c)]
        if limit is not None:
            matches = matches[:limit]
        return [copy.deepcopy(c) for c in matches]


class SQLiteKnowledgeStore(KnowledgeStore):
    """SQLite-backed store for the pediatric reference knowledge base."""

    def __init__(self, db_path: str | None = None):
        """Initialize knowledge store.

        Args:
            db_path: Path to SQLite database. Defaults to config.DB_PATH
        """
        self.db_path = os.path.expanduser(db_path or config.DB_PATH)

        # Ensure directory exists
        db_dir = os.path.dirname(self.db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        self._init_db()

    def _init_db(self) -> None:
        """Initialize database schema."""
        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path) as f:
            schema = f.read()

        with self._connect() as conn:
            conn.executescript(schema)

    def _connect(self) -> sqlite3.Connection:
        """Get database connection with row factory."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        register_sql_functions(conn)
        return conn

    def _select(self, table: str, criteria: Filter | None, limit: int | None = None):
        clause, params = (criteria or AllOf()).to_sql()
        query = f"SELECT * FROM {table} WHERE {clause} ORDER BY rowid"
        if limit is not None:
            query += " LIMIT ?"
            params = params + [limit]

        logger.debug(f"{query} {params}")
        with self._connect() as conn:
            return conn.execute(query, params).fetchall()

    # --- Loading ---

    def add_drug(self, drug: Drug) -> Drug:
        if self.get_drug(drug.name) is not None:
            raise ValueError(f"Drug already exists: {drug.name}")

        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO drugs (
                    name, generic_name, category, age_restrictions,
                    contraindications, weight_based_dosing, side_effects, dosage_forms
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    drug.name,
                    drug.generic_name,
                    drug.category,
                    drug.age_restrictions,
                    drug.contraindications,
                    1 if drug.weight_based_dosing else 0,
                    drug.side_effects,
                    json.dumps(drug.dosage_forms),
                ),
            )
        return drug

    def add_dosage_rule(self, rule: DosageRule) -> DosageRule:
        if self.get_drug(rule.drug_name) is None:
            raise ValueError(f"Unknown drug for dosage rule: {rule.drug_name}")
        if rule.id is None:
            rule.id = _generate_id("DR")

        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO dosage_rules (
                    id, drug_name, indication,
                    min_age_months, max_age_months, min_weight_kg, max_weight_kg,
                    dose_per_kg, dose_unit, frequency, route,
                    max_single_dose, max_daily_dose, special_instructions
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    rule.id,
                    rule.drug_name,
                    rule.indication,
                    rule.min_age_months,
                    rule.max_age_months,
                    rule.min_weight_kg,
                    rule.max_weight_kg,
                    rule.dose_per_kg,
                    rule.dose_unit,
                    rule.frequency,
                    rule.route,
                    rule.max_single_dose,
                    rule.max_daily_dose,
                    rule.special_instructions,
                ),
            )
        return rule

    def add_protocol(self, protocol: EmergencyProtocol) -> EmergencyProtocol:
        if protocol.id is None:
            protocol.id = _generate_id("EP")

        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO emergency_protocols (
                    id, condition, protocol_name, age_group, severity,
                    steps, medications, equipment, contraindications, nelson_references
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    protocol.id,
                    protocol.condition,
                    protocol.protocol_name,
                    protocol.age_group.value if protocol.age_group else None,
                    protocol.severity.value if protocol.severity else None,
                    json.dumps(protocol.steps),
                    json.dumps([m.to_dict() for m in protocol.medications]),
                    json.dumps(protocol.equipment),
                    protocol.contraindications,
                    json.dumps(protocol.references),
                ),
            )
        return protocol

    def add_content(self, passage: ReferenceContent) -> ReferenceContent:
        if passage.id is None:
            passage.id = _generate_id("RC")

        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO reference_content (
                    id, chapter, section, page_number, content, metadata
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    passage.id,
                    passage.chapter,
                    passage.section,
                    passage.page_number,
                    passage.content,
                    json.dumps(passage.metadata.to_dict()) if passage.metadata else None,
                ),
            )
        return passage

    # --- Queries ---

    def get_drug(self, name: str) -> Drug | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM drugs WHERE name = ?", (name,)
            ).fetchone()

        if not row:
            return None

        return Drug.from_row(row)

    def find_dosage_rules(
        self, drug_name: str, criteria: Filter | None = None
    ) -> list[DosageRule]:
        criteria = AllOf(Equals("drug_name", drug_name), criteria or AllOf())
        rows = self._select("dosage_rules", criteria)
        return [DosageRule.from_row(row) for row in rows]

    def find_protocols(self, criteria: Filter | None = None) -> list[EmergencyProtocol]:
        rows = self._select("emergency_protocols", criteria)
        return [EmergencyProtocol.from_row(row) for row in rows]

    def find_content(
        self, criteria: Filter | None = None, limit: int | None = None
    ) -> list[ReferenceContent]:
        rows = self._select("reference_content", criteria, limit)
        return [ReferenceContent.from_row(row) for row in rows]
