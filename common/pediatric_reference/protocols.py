"""Emergency protocol lookup by condition and patient age."""

import logging
from numbers import Integral

from .errors import InvalidRequest
from .filters import ContainsText, EqualsOrNull, Filter
from .models import AgeGroup, EmergencyProtocol
from .store import KnowledgeStore

logger = logging.getLogger(__name__)


def protocol_sort_key(protocol: EmergencyProtocol) -> tuple[int, str]:
    """Most urgent first, then protocol name."""
    return (protocol.severity_rank, protocol.protocol_name)


class ProtocolResolver:
    """Finds emergency protocols for a condition, ordered by urgency."""

    def __init__(self, store: KnowledgeStore):
        self.store = store

    def resolve(
        self, condition: str, patient_age_months: int | None = None
    ) -> list[EmergencyProtocol]:
        """Return protocols whose condition contains the search text.

        With an age, protocols are narrowed to the patient's age group plus
        protocols that apply to all ages. If that narrowing leaves nothing,
        the condition-only matches are returned instead.

        Args:
            condition: Case-insensitive substring of the protocol condition
            patient_age_months: Optional patient age in whole months

        Returns:
            Protocols sorted by severity rank then name (empty if none match)
        """
        if patient_age_months is not None and (
            isinstance(patient_age_months, bool)
            or not isinstance(patient_age_months, Integral)
            or patient_age_months < 0
        ):
            raise InvalidRequest(
                f"patient_age_months must be a non-negative integer, got {patient_age_months!r}"
            )

        condition_filter: Filter = ContainsText("condition", condition)
        criteria = condition_filter

        if patient_age_months is not None:
            age_group = AgeGroup.from_age_months(patient_age_months)
            criteria = condition_filter & EqualsOrNull("age_group", age_group)

        results = self.store.find_protocols(criteria)

        if not results and patient_age_months is not None:
            # Condition-only fallback
            results = self.store.find_protocols(condition_filter)
            if results:
                logger.debug(
                    f"No '{condition}' protocols for age {patient_age_months} months; "
                    f"falling back to {len(results)} condition-only matches"
                )

        return sorted(results, key=protocol_sort_key)
