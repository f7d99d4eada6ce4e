"""Tests for weight-based dose resolution."""

import pytest

from common.pediatric_reference import (
    DosageResolver,
    DrugNotFound,
    InvalidRequest,
    NoMatchingRule,
    RuleSelection,
)

from conftest import create_test_drug, create_test_rule


def test_dose_within_bounds(store):
    """Dose is dose_per_kg x weight with two decimals and the rule's unit."""
    store.add_drug(create_test_drug())
    store.add_dosage_rule(create_test_rule(
        min_age_months=3, max_age_months=144, min_weight_kg=5, max_weight_kg=40,
    ))

    result = DosageResolver(store).resolve("Acetaminophen", 12.5, 24)

    assert result.drug_name == "Acetaminophen"
    assert result.recommended_dose == "187.50 mg"
    assert result.dose_per_kg == "15 mg/kg"
    assert result.frequency == "Q6H"
    assert result.route == "PO"
    assert result.indication == "fever"
    assert result.warnings == []
    assert result.max_dose is None
    assert result.citations == [
        "Nelson Textbook of Pediatrics - Pediatric Drug Dosing Guidelines"
    ]


@pytest.mark.parametrize("age_months,weight_kg", [(0, 0.5), (300, 120.0), (18, 11.0)])
def test_unbounded_rule_matches_any_patient(store, age_months, weight_kg):
    """A rule with no bounds covers every age and weight."""
    store.add_drug(create_test_drug())
    store.add_dosage_rule(create_test_rule())

    result = DosageResolver(store).resolve("Acetaminophen", weight_kg, age_months)

    assert result.recommended_dose == f"{15 * weight_kg:.2f} mg"


def test_single_open_bound(store):
    """Only the set side of a half-open range constrains the patient."""
    store.add_drug(create_test_drug())
    store.add_dosage_rule(create_test_rule(min_age_months=6, max_weight_kg=20))
    resolver = DosageResolver(store)

    assert resolver.resolve("Acetaminophen", 20, 400).recommended_dose == "300.00 mg"

    with pytest.raises(NoMatchingRule):
        resolver.resolve("Acetaminophen", 10, 5)

    with pytest.raises(NoMatchingRule):
        resolver.resolve("Acetaminophen", 20.5, 24)


def test_range_bounds_are_inclusive(store):
    store.add_drug(create_test_drug())
    store.add_dosage_rule(create_test_rule(
        min_age_months=12, max_age_months=24, min_weight_kg=10, max_weight_kg=15,
    ))
    resolver = DosageResolver(store)

    assert resolver.resolve("Acetaminophen", 10, 12).recommended_dose == "150.00 mg"
    assert resolver.resolve("Acetaminophen", 15, 24).recommended_dose == "225.00 mg"

    with pytest.raises(NoMatchingRule):
        resolver.resolve("Acetaminophen", 15, 25)


def test_max_single_dose_warning(store):
    store.add_drug(create_test_drug())
    store.add_dosage_rule(create_test_rule(max_single_dose=500))

    result = DosageResolver(store).resolve("Acetaminophen", 40, 120)

    assert result.recommended_dose == "600.00 mg"
    assert result.max_dose == "500 mg"
    assert result.warnings == [
        "Calculated dose (600.00 mg) exceeds maximum single dose (500 mg)"
    ]


@pytest.mark.parametrize("weight_kg", [10, 20])
def test_no_max_warning_at_or_below_max(store, weight_kg):
    store.add_drug(create_test_drug())
    store.add_dosage_rule(create_test_rule(max_single_dose=300))

    result = DosageResolver(store).resolve("Acetaminophen", weight_kg, 60)

    assert not any("exceeds maximum single dose" in w for w in result.warnings)


def test_warning_order(store):
    """Age restrictions, contraindications, max dose, special instructions."""
    store.add_drug(create_test_drug(
        "Ibuprofen",
        age_restrictions="Not recommended under 6 months of age",
        contraindications="Renal impairment",
    ))
    store.add_dosage_rule(create_test_rule(
        "Ibuprofen",
        dose_per_kg=10,
        max_single_dose=400,
        special_instructions="Give with food",
    ))

    result = DosageResolver(store).resolve("Ibuprofen", 50, 150)

    assert result.warnings == [
        "Age restrictions: Not recommended under 6 months of age",
        "Contraindications: Renal impairment",
        "Calculated dose (500.00 mg) exceeds maximum single dose (400 mg)",
        "Special instructions: Give with food",
    ]


def test_unknown_drug(store):
    store.add_drug(create_test_drug())
    store.add_dosage_rule(create_test_rule())

    with pytest.raises(DrugNotFound) as exc_info:
        DosageResolver(store).resolve("Unobtainium", 10, 24)

    assert str(exc_info.value) == "Drug not found: Unobtainium"


def test_drug_lookup_is_exact(store):
    store.add_drug(create_test_drug())
    store.add_dosage_rule(create_test_rule())

    with pytest.raises(DrugNotFound):
        DosageResolver(store).resolve("acetaminophen", 10, 24)


def test_known_drug_without_covering_rule(store):
    store.add_drug(create_test_drug())
    store.add_dosage_rule(create_test_rule(min_age_months=12, max_age_months=24))

    with pytest.raises(NoMatchingRule) as exc_info:
        DosageResolver(store).resolve("Acetaminophen", 8, 6)

    assert exc_info.value.drug_name == "Acetaminophen"
    assert "patient age 6 months and weight 8 kg" in str(exc_info.value)


def test_indication_filter(store):
    store.add_drug(create_test_drug())
    store.add_dosage_rule(create_test_rule(indication="fever", dose_per_kg=15))
    store.add_dosage_rule(create_test_rule(indication="pain", dose_per_kg=10))
    resolver = DosageResolver(store)

    assert resolver.resolve("Acetaminophen", 10, 24, indication="pain").dose_per_kg == "10 mg/kg"
    assert resolver.resolve("Acetaminophen", 10, 24).dose_per_kg == "15 mg/kg"

    with pytest.raises(NoMatchingRule):
        resolver.resolve("Acetaminophen", 10, 24, indication="Pain")


def test_first_match_wins_by_default(store):
    store.add_drug(create_test_drug())
    store.add_dosage_rule(create_test_rule(dose_per_kg=12))
    store.add_dosage_rule(create_test_rule(
        dose_per_kg=15, min_age_months=12, max_age_months=36,
    ))

    result = DosageResolver(store, selection=RuleSelection.FIRST_MATCH).resolve(
        "Acetaminophen", 10, 24
    )

    assert result.dose_per_kg == "12 mg/kg"


def test_narrowest_range_selection(store):
    store.add_drug(create_test_drug())
    store.add_dosage_rule(create_test_rule(dose_per_kg=12))
    store.add_dosage_rule(create_test_rule(
        dose_per_kg=15, min_age_months=0, max_age_months=60,
    ))
    store.add_dosage_rule(create_test_rule(
        dose_per_kg=18, min_age_months=12, max_age_months=36,
    ))

    result = DosageResolver(store, selection="narrowest_range").resolve(
        "Acetaminophen", 10, 24
    )

    assert result.dose_per_kg == "18 mg/kg"


def test_narrowest_range_ties_keep_store_order(store):
    store.add_drug(create_test_drug())
    store.add_dosage_rule(create_test_rule(dose_per_kg=12, min_age_months=0, max_age_months=24))
    store.add_dosage_rule(create_test_rule(dose_per_kg=15, min_age_months=12, max_age_months=36))

    result = DosageResolver(store, selection="narrowest_range").resolve(
        "Acetaminophen", 10, 18
    )

    assert result.dose_per_kg == "12 mg/kg"


def test_missing_dose_per_kg(store):
    store.add_drug(create_test_drug())
    store.add_dosage_rule(create_test_rule(dose_per_kg=None))

    result = DosageResolver(store).resolve("Acetaminophen", 10, 24)

    assert result.recommended_dose == "0.00 mg"
    assert result.dose_per_kg is None


def test_fractional_quantities(store):
    store.add_drug(create_test_drug("Epinephrine", category="sympathomimetic"))
    store.add_dosage_rule(create_test_rule(
        "Epinephrine",
        indication="anaphylaxis",
        dose_per_kg=0.01,
        route="IM",
        max_single_dose=0.5,
        max_daily_dose=1.5,
    ))

    result = DosageResolver(store).resolve("Epinephrine", 20, 72)

    assert result.recommended_dose == "0.20 mg"
    assert result.dose_per_kg == "0.01 mg/kg"
    assert result.max_dose == "0.5 mg"
    assert result.max_daily_dose == "1.5 mg"


@pytest.mark.parametrize("weight_kg,age_months", [
    (0, 24),
    (-5, 24),
    (None, 24),
    (10, -1),
    (10, 1.5),
    (10, None),
    (float("nan"), 24),
    (float("inf"), 24),
    (float("-inf"), 24),
])
def test_invalid_patient_parameters(memory_store, weight_kg, age_months):
    memory_store.add_drug(create_test_drug())

    with pytest.raises(InvalidRequest):
        DosageResolver(memory_store).resolve("Acetaminophen", weight_kg, age_months)


def test_blank_drug_name(memory_store):
    with pytest.raises(InvalidRequest):
        DosageResolver(memory_store).resolve("  ", 10, 24)


@pytest.mark.parametrize("drug_name", [None, 42, ["Acetaminophen"]])
def test_non_string_drug_name(memory_store, drug_name):
    memory_store.add_drug(create_test_drug())

    with pytest.raises(InvalidRequest):
        DosageResolver(memory_store).resolve(drug_name, 10, 24)


def test_repeated_calls_are_identical(store):
    store.add_drug(create_test_drug(contraindications="Hepatic impairment"))
    store.add_dosage_rule(create_test_rule(max_single_dose=100))
    resolver = DosageResolver(store)

    first = resolver.resolve("Acetaminophen", 10, 24)
    second = resolver.resolve("Acetaminophen", 10, 24)

    assert first == second
    assert first.to_dict() == second.to_dict()
