"""Pediatric reference API routes.

JSON endpoints for dose calculation, emergency protocol lookup, and
textbook passage search.
"""

import logging
from datetime import datetime

from flask import Blueprint, current_app, request

from common.pediatric_reference import (
    ContentRanker,
    DosageResolver,
    InvalidRequest,
    NotFound,
    ProtocolResolver,
    SQLiteKnowledgeStore,
)
from dashboard.utils.api_response import api_success, api_error

logger = logging.getLogger(__name__)

pediatric_reference_bp = Blueprint(
    "pediatric_reference", __name__, url_prefix="/api/reference"
)


def _get_knowledge_store():
    """Get the knowledge store, initializing if needed."""
    if not hasattr(current_app, "knowledge_store"):
        current_app.knowledge_store = SQLiteKnowledgeStore(
            db_path=current_app.config.get("PEDS_REFERENCE_DB_PATH")
        )
    return current_app.knowledge_store


def _parse_int(value, name):
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidRequest(f"{name} must be an integer, got {value!r}")


def _parse_float(value, name):
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidRequest(f"{name} must be a number, got {value!r}")


@pediatric_reference_bp.route("/health")
def health():
    """Service health check."""
    return api_success(data={
        "status": "ok",
        "timestamp": datetime.now().isoformat(),
        "service": "Pediatric Reference API",
    })


@pediatric_reference_bp.route("/dosage", methods=["POST"])
def calculate_dosage():
    """Calculate a weight-based dose for a patient."""
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}

    try:
        if not isinstance(payload, dict):
            raise InvalidRequest("Request body must be a JSON object")

        weight = payload.get("patient_weight_kg")
        age = payload.get("patient_age_months")
        if isinstance(weight, str):
            weight = _parse_float(weight, "patient_weight_kg")
        if isinstance(age, str):
            age = _parse_int(age, "patient_age_months")

        resolver = DosageResolver(
            _get_knowledge_store(),
            selection=current_app.config.get("DOSAGE_RULE_SELECTION"),
        )
        result = resolver.resolve(
            drug_name=payload.get("drug_name", ""),
            patient_weight_kg=weight,
            patient_age_months=age,
            indication=payload.get("indication") or None,
        )
        return api_success(data=result.to_dict())
    except InvalidRequest as e:
        return api_error(e, 400)
    except NotFound as e:
        return api_error(e, 404)


@pediatric_reference_bp.route("/protocols")
def emergency_protocols():
    """List emergency protocols for a condition, most urgent first.

    patient_weight_kg is accepted for client compatibility and not used.
    """
    try:
        age = _parse_int(request.args.get("patient_age_months"), "patient_age_months")
        _parse_float(request.args.get("patient_weight_kg"), "patient_weight_kg")

        resolver = ProtocolResolver(_get_knowledge_store())
        protocols = resolver.resolve(
            condition=request.args.get("condition", ""),
            patient_age_months=age,
        )
        return api_success(data=[p.to_dict() for p in protocols])
    except InvalidRequest as e:
        return api_error(e, 400)


@pediatric_reference_bp.route("/content/search")
def search_content():
    """Search reference passages by relevance."""
    try:
        limit = _parse_int(request.args.get("limit"), "limit")
        ranker = ContentRanker(_get_knowledge_store())
        passages = ranker.rank(request.args.get("query", ""), limit=limit)
        return api_success(data=[p.to_dict() for p in passages])
    except InvalidRequest as e:
        return api_error(e, 400)


@pediatric_reference_bp.route("/content/citations")
def content_citations():
    """Citation records for the passages most relevant to a query."""
    try:
        limit = _parse_int(request.args.get("limit"), "limit")
        ranker = ContentRanker(_get_knowledge_store())
        citations = ranker.cite(request.args.get("query", ""), limit=limit)
        return api_success(data=[c.to_dict() for c in citations])
    except InvalidRequest as e:
        return api_error(e, 400)
