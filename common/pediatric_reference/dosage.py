"""Pediatric dose calculation from weight-based dosage rules.

Resolution:
1. Exact drug name lookup (DrugNotFound if absent)
2. Rules whose age and weight ranges cover the patient, optionally
   narrowed to one indication (NoMatchingRule if none)
3. One rule chosen by the selection policy
4. dose = dose_per_kg x weight, with warnings in a fixed order:
   age restrictions, contraindications, max single dose, special instructions
"""

import logging
import math
from enum import Enum
from numbers import Integral, Real

from .config import config
from .errors import DrugNotFound, InvalidRequest, NoMatchingRule
from .filters import Equals, Filter, WithinRange
from .models import DosageResult, DosageRule, Drug
from .store import KnowledgeStore

logger = logging.getLogger(__name__)


class RuleSelection(str, Enum):
    """How to choose between several rules that all cover the patient."""
    FIRST_MATCH = "first_match"          # store order
    NARROWEST_RANGE = "narrowest_range"  # tightest age span, then weight span


def format_quantity(value: float) -> str:
    """Render a stored quantity without a trailing .0 (500 -> "500", 0.15 -> "0.15")."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def rule_criteria(
    patient_age_months: int,
    patient_weight_kg: float,
    indication: str | None = None,
) -> Filter:
    """Build the store filter for rules covering a patient."""
    criteria = WithinRange("min_age_months", "max_age_months", patient_age_months) & WithinRange(
        "min_weight_kg", "max_weight_kg", patient_weight_kg
    )
    if indication:
        criteria = criteria & Equals("indication", indication)
    return criteria


class DosageResolver:
    """Resolves a drug and patient profile to a dose recommendation."""

    def __init__(
        self,
        store: KnowledgeStore,
        selection: RuleSelection | str | None = None,
    ):
        """Initialize dosage resolver.

        Args:
            store: Knowledge store to read drugs and rules from
            selection: Rule selection policy. Defaults to config.DOSAGE_RULE_SELECTION
        """
        self.store = store
        self.selection = RuleSelection(selection or config.DOSAGE_RULE_SELECTION)

    def resolve(
        self,
        drug_name: str,
        patient_weight_kg: float,
        patient_age_months: int,
        indication: str | None = None,
    ) -> DosageResult:
        """Calculate a dose for one patient.

        Args:
            drug_name: Exact catalog name of the drug
            patient_weight_kg: Patient weight, must be positive
            patient_age_months: Patient age in whole months, non-negative
            indication: Optional indication the rule must match exactly

        Returns:
            DosageResult

        Raises:
            InvalidRequest: Inputs out of range
            DrugNotFound: No catalog entry for drug_name
            NoMatchingRule: No rule covers the patient
        """
        self._validate(drug_name, patient_weight_kg, patient_age_months)

        drug = self.store.get_drug(drug_name)
        if drug is None:
            logger.warning(f"Dosage lookup failed: drug not found: {drug_name}")
            raise DrugNotFound(drug_name)

        rules = self.store.find_dosage_rules(
            drug.name,
            rule_criteria(patient_age_months, patient_weight_kg, indication),
        )
        if not rules:
            error = NoMatchingRule(
                drug.name, patient_age_months, patient_weight_kg, indication
            )
            logger.warning(f"Dosage lookup failed: {error}")
            raise error

        rule = self.select_rule(rules)
        if len(rules) > 1:
            logger.debug(
                f"{len(rules)} rules cover patient for {drug.name}; "
                f"selected {rule.id} ({self.selection.value})"
            )

        return self._build_result(drug, rule, patient_weight_kg)

    def select_rule(self, rules: list[DosageRule]) -> DosageRule:
        """Pick one rule from a non-empty list of covering rules."""
        if self.selection == RuleSelection.NARROWEST_RANGE:
            # min() keeps the earliest rule among equal spans
            return min(rules, key=lambda r: (r.age_span, r.weight_span))
        return rules[0]

    def _validate(self, drug_name, patient_weight_kg, patient_age_months) -> None:
        if not isinstance(drug_name, str) or not drug_name.strip():
            raise InvalidRequest(f"drug_name must be a non-empty string, got {drug_name!r}")
        if (
            isinstance(patient_weight_kg, bool)
            or not isinstance(patient_weight_kg, Real)
            or not math.isfinite(patient_weight_kg)
            or patient_weight_kg <= 0
        ):
            raise InvalidRequest(
                f"patient_weight_kg must be a positive number, got {patient_weight_kg!r}"
            )
        if (
            isinstance(patient_age_months, bool)
            or not isinstance(patient_age_months, Integral)
            or patient_age_months < 0
        ):
            raise InvalidRequest(
                f"patient_age_months must be a non-negative integer, got {patient_age_months!r}"
            )

    def _build_result(
        self, drug: Drug, rule: DosageRule, patient_weight_kg: float
    ) -> DosageResult:
        dose_per_kg = rule.dose_per_kg or 0
        calculated_dose = dose_per_kg * patient_weight_kg
        unit = rule.dose_unit

        warnings: list[str] = []

        if drug.age_restrictions:
            warnings.append(f"Age restrictions: {drug.age_restrictions}")

        if drug.contraindications:
            warnings.append(f"Contraindications: {drug.contraindications}")

        if rule.max_single_dose is not None and calculated_dose > rule.max_single_dose:
            warnings.append(
                f"Calculated dose ({calculated_dose:.2f} {unit}) exceeds maximum "
                f"single dose ({format_quantity(rule.max_single_dose)} {unit})"
            )

        if rule.special_instructions:
            warnings.append(f"Special instructions: {rule.special_instructions}")

        return DosageResult(
            drug_name=drug.name,
            recommended_dose=f"{calculated_dose:.2f} {unit}",
            dose_per_kg=(
                f"{format_quantity(rule.dose_per_kg)} {unit}/kg"
                if rule.dose_per_kg is not None
                else None
            ),
            frequency=rule.frequency,
            route=rule.route,
            warnings=warnings,
            max_dose=(
                f"{format_quantity(rule.max_single_dose)} {unit}"
                if rule.max_single_dose is not None
                else None
            ),
            max_daily_dose=(
                f"{format_quantity(rule.max_daily_dose)} {unit}"
                if rule.max_daily_dose is not None
                else None
            ),
            indication=rule.indication,
            citations=list(config.DOSING_CITATIONS),
        )
