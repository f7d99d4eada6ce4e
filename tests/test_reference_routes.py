"""Tests for the pediatric reference API blueprint."""

import pytest

from common.pediatric_reference import InMemoryKnowledgeStore
from common.pediatric_reference.sample_data import load_sample_data
from dashboard.app import create_app


@pytest.fixture
def client(tmp_path):
    app = create_app({
        "TESTING": True,
        "PEDS_REFERENCE_DB_PATH": str(tmp_path / "reference.db"),
        "DOSAGE_RULE_SELECTION": "first_match",
    })
    store = InMemoryKnowledgeStore()
    load_sample_data(store)
    app.knowledge_store = store
    return app.test_client()


def test_health(client):
    response = client.get("/api/reference/health")

    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True
    assert body["data"]["status"] == "ok"


def test_calculate_dosage(client):
    response = client.post("/api/reference/dosage", json={
        "drug_name": "Amoxicillin",
        "patient_weight_kg": 15,
        "patient_age_months": 36,
        "indication": "acute otitis media",
    })

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["recommended_dose"] == "675.00 mg"
    assert data["dose_per_kg"] == "45 mg/kg"
    assert data["frequency"] == "BID"
    assert data["warnings"] == ["Contraindications: Penicillin allergy"]


def test_calculate_dosage_unknown_drug(client):
    response = client.post("/api/reference/dosage", json={
        "drug_name": "Unobtainium",
        "patient_weight_kg": 15,
        "patient_age_months": 36,
    })

    assert response.status_code == 404
    body = response.get_json()
    assert body["success"] is False
    assert body["error_type"] == "DrugNotFound"
    assert body["error"] == "Drug not found: Unobtainium"


def test_calculate_dosage_no_rule(client):
    response = client.post("/api/reference/dosage", json={
        "drug_name": "Ibuprofen",
        "patient_weight_kg": 6,
        "patient_age_months": 4,
    })

    assert response.status_code == 404
    assert response.get_json()["error_type"] == "NoMatchingRule"


@pytest.mark.parametrize("payload", [
    {"drug_name": "Ibuprofen", "patient_weight_kg": 0, "patient_age_months": 24},
    {"drug_name": "Ibuprofen", "patient_weight_kg": "heavy", "patient_age_months": 24},
    {"drug_name": "Ibuprofen", "patient_weight_kg": 12},
    {"patient_weight_kg": 12, "patient_age_months": 24},
    {"drug_name": 42, "patient_weight_kg": 12, "patient_age_months": 24},
    [1, 2],
    "Ibuprofen",
])
def test_calculate_dosage_invalid(client, payload):
    response = client.post("/api/reference/dosage", json=payload)

    assert response.status_code == 400
    assert response.get_json()["error_type"] == "InvalidRequest"


@pytest.mark.parametrize("weight", ["NaN", "Infinity", "1e400"])
def test_calculate_dosage_rejects_non_finite_weight(client, weight):
    body = f'{{"drug_name": "Ibuprofen", "patient_weight_kg": {weight}, "patient_age_months": 24}}'
    response = client.post(
        "/api/reference/dosage", data=body, content_type="application/json"
    )

    assert response.status_code == 400
    assert response.get_json()["error_type"] == "InvalidRequest"


def test_emergency_protocols(client):
    response = client.get(
        "/api/reference/protocols",
        query_string={"condition": "status epilepticus", "patient_age_months": 48,
                      "patient_weight_kg": 16},
    )

    assert response.status_code == 200
    names = [p["protocol_name"] for p in response.get_json()["data"]]
    assert names == ["Pediatric Status Epilepticus"]


def test_emergency_protocols_none_on_file(client):
    response = client.get("/api/reference/protocols", query_string={"condition": "frostbite"})

    assert response.status_code == 200
    assert response.get_json()["data"] == []


def test_emergency_protocols_bad_age(client):
    response = client.get(
        "/api/reference/protocols",
        query_string={"condition": "anaphylaxis", "patient_age_months": "two"},
    )

    assert response.status_code == 400


def test_search_content(client):
    response = client.get(
        "/api/reference/content/search",
        query_string={"query": "epinephrine anaphylaxis", "limit": 2},
    )

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert len(data) == 1
    assert data[0]["chapter"] == "Chapter 190: Anaphylaxis"
    assert data[0]["metadata"]["keywords"] == ["epinephrine", "anaphylaxis", "allergic reaction"]


def test_search_content_requires_query(client):
    response = client.get("/api/reference/content/search")

    assert response.status_code == 400


def test_content_citations(client):
    response = client.get(
        "/api/reference/content/citations",
        query_string={"query": "febrile seizures", "limit": 3},
    )

    assert response.status_code == 200
    citations = response.get_json()["data"]
    assert citations[0]["section"] == "Febrile Seizures"
    assert citations[0]["page"] == 3086
    assert citations[0]["relevance_score"] == 1.0
    assert citations[0]["source"] == "Nelson Textbook of Pediatrics"
