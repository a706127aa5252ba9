from core.validation.checks import (
    calculate_age,
    is_valid_coordinate,
    is_valid_date,
    is_valid_email,
    is_valid_url,
    is_valid_uuid,
)
from core.validation.strategies import (
    USER_REQUIRED_FIELDS,
    AgeConsistencyValidationStrategy,
    CompositeValidationStrategy,
    FieldFormatStrategy,
    ResponseStructureValidationStrategy,
    UserStructureValidationStrategy,
    ValidationContext,
    ValidationStrategyFactory,
)

__all__ = [
    "USER_REQUIRED_FIELDS",
    "AgeConsistencyValidationStrategy",
    "CompositeValidationStrategy",
    "FieldFormatStrategy",
    "ResponseStructureValidationStrategy",
    "UserStructureValidationStrategy",
    "ValidationContext",
    "ValidationStrategyFactory",
    "calculate_age",
    "is_valid_coordinate",
    "is_valid_date",
    "is_valid_email",
    "is_valid_url",
    "is_valid_uuid",
]
