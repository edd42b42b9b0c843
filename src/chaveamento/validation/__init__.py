from chaveamento.validation.schedule_validator import (
    CriterionResult,
    CriterionStatus,
    ScheduleValidator,
    ValidationReport,
    ViolationType,
)

__all__ = [
    "CriterionResult",
    "CriterionStatus",
    "ScheduleValidator",
    "ValidationReport",
    "ViolationType",
]
