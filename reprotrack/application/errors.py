from __future__ import annotations

from typing import Any, Mapping


class AppError(Exception):
    code = "app_error"
    status_code = 400

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class PermissionDenied(AppError):
    code = "forbidden"
    status_code = 403


class NotFound(AppError):
    code = "not_found"
    status_code = 404


class ValidationError(AppError):
    code = "validation_error"
    status_code = 422


class ConflictError(AppError):
    code = "conflict"
    status_code = 409


class InfrastructureError(AppError):
    code = "infrastructure_error"
    status_code = 500


class FieldError:
    """Mixin for errors tied to a single plan or animal field."""

    def __init__(self, message: str, *, field: str | None = None, **extra: Any) -> None:
        details: dict[str, Any] = {}
        if field is not None:
            details["field"] = field
        details.update({k: v for k, v in extra.items() if v is not None})
        super().__init__(message, details=details or None)  # type: ignore[call-arg]
        self.field = field


# Reproduction engine taxonomy


class UnknownSpecies(FieldError, ValidationError):
    code = "unknown_species"


class InvalidDate(FieldError, ValidationError):
    code = "invalid_date"


class PlanAlreadyCommitted(FieldError, ConflictError):
    code = "plan_already_committed"


class MissingParty(FieldError, ValidationError):
    code = "missing_party"


class AnchorModeNotSupported(FieldError, ValidationError):
    code = "anchor_mode_not_supported"


class ConfirmationMethodRequired(FieldError, ValidationError):
    code = "confirmation_method_required"


class PlanNotCommitted(FieldError, ConflictError):
    code = "plan_not_committed"


class UpgradeNotSupported(FieldError, ValidationError):
    code = "upgrade_not_supported"


class OvulationBeforeCycleStart(FieldError, ValidationError):
    code = "invalid_ovulation_date"


class ImmutableField(FieldError, ConflictError):
    code = "immutable_field"


class DownstreamDependency(FieldError, ConflictError):
    code = "downstream_dependency"


class PlanCanceled(FieldError, ConflictError):
    code = "plan_canceled"


class GestationRangeViolation(FieldError, ValidationError):
    code = "gestation_range_violation"


class InvalidStatusTransition(FieldError, ConflictError):
    code = "invalid_status_transition"


class DateSequenceViolation(FieldError, ValidationError):
    code = "date_sequence_violation"
