"""Built-in sample knowledge base for demos and local development.

Doses here are illustrative and must not be used for patient care.
"""

from dataclasses import replace

from .models import (
    ContentMetadata,
    DosageRule,
    Drug,
    EmergencyProtocol,
    ProtocolMedication,
    ReferenceContent,
)
from .store import KnowledgeStore


SAMPLE_DRUGS = [
    Drug(
        name="Acetaminophen",
        generic_name="paracetamol",
        category="analgesic",
        contraindications="Hepatic impairment",
        weight_based_dosing=True,
        side_effects="Hepatotoxicity in overdose",
        dosage_forms=["oral suspension", "tablet", "suppository", "IV solution"],
    ),
    Drug(
        name="Ibuprofen",
        category="NSAID",
        age_restrictions="Not recommended under 6 months of age",
        contraindications="Renal impairment, active GI bleeding, dehydration",
        weight_based_dosing=True,
        side_effects="GI upset, renal injury",
        dosage_forms=["oral suspension", "chewable tablet", "tablet"],
    ),
    Drug(
        name="Amoxicillin",
        category="antibiotic",
        contraindications="Penicillin allergy",
        weight_based_dosing=True,
        side_effects="Rash, diarrhea",
        dosage_forms=["oral suspension", "capsule"],
    ),
    Drug(
        name="Epinephrine",
        generic_name="adrenaline",
        category="sympathomimetic",
        weight_based_dosing=True,
        dosage_forms=["auto-injector", "IV solution"],
    ),
]

SAMPLE_DOSAGE_RULES = [
    DosageRule(
        drug_name="Acetaminophen",
        indication="fever",
        min_age_months=3,
        max_age_months=None,
        min_weight_kg=None,
        max_weight_kg=None,
        dose_per_kg=15,
        dose_unit="mg",
        frequency="Q4-6H",
        route="PO",
        max_single_dose=1000,
        max_daily_dose=4000,
        special_instructions="Do not exceed 5 doses in 24 hours",
    ),
    DosageRule(
        drug_name="Ibuprofen",
        indication="fever",
        min_age_months=6,
        max_age_months=None,
        dose_per_kg=10,
        dose_unit="mg",
        frequency="Q6-8H",
        route="PO",
        max_single_dose=400,
        max_daily_dose=1200,
        special_instructions="Give with food",
    ),
    DosageRule(
        drug_name="Amoxicillin",
        indication="acute otitis media",
        min_age_months=3,
        max_age_months=None,
        min_weight_kg=None,
        max_weight_kg=40,
        dose_per_kg=45,
        dose_unit="mg",
        frequency="BID",
        route="PO",
        max_single_dose=2000,
        max_daily_dose=4000,
    ),
    DosageRule(
        drug_name="Epinephrine",
        indication="anaphylaxis",
        min_age_months=None,
        max_age_months=None,
        dose_per_kg=0.01,
        dose_unit="mg",
        frequency="Q5-15MIN PRN",
        route="IM",
        max_single_dose=0.5,
        special_instructions="Use 1 mg/mL concentration, anterolateral thigh",
    ),
]

SAMPLE_PROTOCOLS = [
    EmergencyProtocol(
        condition="Anaphylaxis",
        protocol_name="Anaphylaxis Initial Management",
        severity="critical",
        steps=[
            "Assess airway, breathing, circulation",
            "Give IM epinephrine 0.01 mg/kg",
            "Place patient supine with legs elevated",
            "Give high-flow oxygen",
            "Establish IV access and give fluid bolus if hypotensive",
        ],
        medications=[
            ProtocolMedication(name="Epinephrine", dose="0.01 mg/kg IM, max 0.5 mg"),
            ProtocolMedication(name="Normal saline", dose="20 mL/kg IV bolus"),
        ],
        equipment=["Bag-valve mask", "Oxygen", "IV cannula"],
        references=["Nelson Textbook of Pediatrics, Chapter 190: Anaphylaxis"],
    ),
    EmergencyProtocol(
        condition="Status epilepticus",
        protocol_name="Neonatal Seizure Management",
        age_group="neonate",
        severity="critical",
        steps=[
            "Secure airway and check glucose",
            "Give phenobarbital loading dose",
            "Evaluate for sepsis and electrolyte abnormality",
        ],
        medications=[ProtocolMedication(name="Phenobarbital", dose="20 mg/kg IV")],
        equipment=["Glucometer", "IV cannula"],
        references=["Nelson Textbook of Pediatrics, Chapter 633: Neonatal Seizures"],
    ),
    EmergencyProtocol(
        condition="Status epilepticus",
        protocol_name="Pediatric Status Epilepticus",
        age_group="child",
        severity="critical",
        steps=[
            "Stabilize airway, breathing, circulation",
            "Give benzodiazepine at 5 minutes of seizure activity",
            "Repeat benzodiazepine once if seizure persists",
            "Load second-line antiseizure medication",
        ],
        medications=[
            ProtocolMedication(name="Lorazepam", dose="0.1 mg/kg IV, max 4 mg"),
            ProtocolMedication(name="Levetiracetam", dose="60 mg/kg IV, max 4500 mg"),
        ],
        equipment=["Suction", "Oxygen", "IV cannula"],
        contraindications="Avoid phenytoin for toxin-induced seizures",
        references=["Nelson Textbook of Pediatrics, Chapter 611: Seizures in Childhood"],
    ),
    EmergencyProtocol(
        condition="Febrile seizure",
        protocol_name="Simple Febrile Seizure Evaluation",
        age_group="infant",
        severity="moderate",
        steps=[
            "Protect airway during seizure",
            "Identify source of fever",
            "Reassure and educate caregivers",
        ],
        references=["Nelson Textbook of Pediatrics, Chapter 611.1: Febrile Seizures"],
    ),
    EmergencyProtocol(
        condition="Dehydration",
        protocol_name="Oral Rehydration Therapy",
        severity="mild",
        steps=[
            "Estimate degree of dehydration",
            "Give oral rehydration solution 50-100 mL/kg over 4 hours",
            "Reassess hydration status",
        ],
        references=["Nelson Textbook of Pediatrics, Chapter 70: Dehydration"],
    ),
]

SAMPLE_CONTENT = [
    ReferenceContent(
        chapter="Chapter 190: Anaphylaxis",
        section="Treatment",
        page_number=1287,
        content=(
            "Epinephrine is the first-line treatment of anaphylaxis. Intramuscular "
            "epinephrine should be given promptly into the anterolateral thigh. Delayed "
            "epinephrine administration is associated with fatal anaphylaxis."
        ),
        metadata=ContentMetadata(
            topic="anaphylaxis",
            medical_specialty="allergy",
            keywords=["epinephrine", "anaphylaxis", "allergic reaction"],
        ),
    ),
    ReferenceContent(
        chapter="Chapter 611: Seizures in Childhood",
        section="Febrile Seizures",
        page_number=3086,
        content=(
            "Febrile seizures occur in children between 6 and 60 months of age with a "
            "temperature of 38 C or higher. Simple febrile seizures are generalized and "
            "last less than 15 minutes."
        ),
        metadata=ContentMetadata(
            topic="febrile seizures",
            age_group="child",
            medical_specialty="neurology",
            keywords=["fever", "seizure"],
        ),
    ),
    ReferenceContent(
        chapter="Chapter 70: Dehydration",
        section="Oral Rehydration",
        page_number=412,
        content=(
            "Oral rehydration therapy is the preferred treatment for mild to moderate "
            "dehydration. Ondansetron may reduce vomiting and improve tolerance of oral "
            "rehydration."
        ),
        metadata=ContentMetadata(topic="dehydration", medical_specialty="general pediatrics"),
    ),
    ReferenceContent(
        chapter="Chapter 55: Fever",
        section="Antipyretics",
        page_number=298,
        content=(
            "Acetaminophen and ibuprofen are effective antipyretics. Treatment of fever "
            "is aimed at comfort; antipyretics do not prevent febrile seizures."
        ),
    ),
]


def load_sample_data(store: KnowledgeStore) -> None:
    """Load the sample knowledge base into a store."""
    store.load(
        drugs=[replace(d) for d in SAMPLE_DRUGS],
        dosage_rules=[replace(r) for r in SAMPLE_DOSAGE_RULES],
        protocols=[replace(p) for p in SAMPLE_PROTOCOLS],
        content=[replace(c) for c in SAMPLE_CONTENT],
    )
