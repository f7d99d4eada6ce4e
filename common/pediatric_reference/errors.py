"""Exceptions raised by the pediatric reference resolvers."""


class PediatricReferenceError(Exception):
    """Base class for pediatric reference errors."""


class InvalidRequest(PediatricReferenceError, ValueError):
    """Request parameters are out of range or malformed."""


class NotFound(PediatricReferenceError):
    """The knowledge base has no entry that answers the request.

    These reflect gaps in reference data, not transient faults, so callers
    should surface them as-is rather than retry.
    """


class DrugNotFound(NotFound):
    """No catalog entry exists for the requested drug name."""

    def __init__(self, drug_name: str):
        self.drug_name = drug_name
        super().__init__(f"Drug not found: {drug_name}")


class NoMatchingRule(NotFound):
    """The drug exists but no dosage rule covers the patient."""

    def __init__(
        self,
        drug_name: str,
        patient_age_months: int,
        patient_weight_kg: float,
        indication: str | None = None,
    ):
        self.drug_name = drug_name
        self.patient_age_months = patient_age_months
        self.patient_weight_kg = patient_weight_kg
        self.indication = indication

        message = (
            f"No dosage rules found for {drug_name} for patient age "
            f"{patient_age_months} months and weight {patient_weight_kg} kg"
        )
        if indication:
            message += f" (indication: {indication})"
        super().__init__(message)
