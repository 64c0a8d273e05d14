"""
Validation Utilities
Checks for the ids and names users pass as command arguments
"""

import re
from typing import Any, Optional, Union

# Discord snowflake ID pattern: 17-20 digits
SNOWFLAKE_REGEX = re.compile(r"^[0-9]{17,20}$")

ZERO_WIDTH_REGEX = re.compile(r"[\u200B-\u200D\uFEFF]")
CONTROL_REGEX = re.compile(r"[\x00-\x1F\x7F-\x9F]")

# Discord caps role and channel names at 100 characters
MAX_NAME_LENGTH = 100


class ValidationResult:
    """Outcome of a check; falsy when the input was rejected."""

    def __init__(
        self,
        valid: bool,
        error: Optional[str] = None,
        sanitized: Optional[str] = None,
        value: Optional[Any] = None,
    ):
        self.valid = valid
        self.error = error
        self.sanitized = sanitized
        self.value = value

    def __bool__(self) -> bool:
        return self.valid

    def __repr__(self) -> str:
        if self.valid:
            return f"<ValidationResult ok {self.sanitized!r}>"
        return f"<ValidationResult error {self.error!r}>"


class ValidationUtils:
    """Validators for command arguments."""

    @staticmethod
    def is_valid_snowflake(id_value: Union[str, int]) -> bool:
        """Check if value looks like a Discord snowflake ID."""
        # bool is an int subclass
        if isinstance(id_value, bool) or not isinstance(id_value, (str, int)):
            return False
        return SNOWFLAKE_REGEX.match(str(id_value)) is not None

    @staticmethod
    def validate_snowflake(value: Optional[Union[str, int]], label: str = "ID") -> ValidationResult:
        """
        Validate an ID argument.

        Args:
            value: Raw argument
            label: What the ID refers to, used in the error text

        Returns:
            ValidationResult whose sanitized field is the ID string and
            whose value field is the ID as an int
        """
        if not value:
            return ValidationResult(valid=False, error=f"{label} is required")

        sanitized = ValidationUtils.sanitize_input(str(value))
        if not ValidationUtils.is_valid_snowflake(sanitized):
            return ValidationResult(valid=False, error=f"Invalid {label.lower()} format")

        return ValidationResult(valid=True, sanitized=sanitized, value=int(sanitized))

    @staticmethod
    def validate_user_id(user_id: Optional[Union[str, int]]) -> ValidationResult:
        return ValidationUtils.validate_snowflake(user_id, "User ID")

    @staticmethod
    def validate_message_id(message_id: Optional[Union[str, int]]) -> ValidationResult:
        return ValidationUtils.validate_snowflake(message_id, "Message ID")

    @staticmethod
    def validate_name(name: Optional[str], label: str = "Name") -> ValidationResult:
        """
        Validate a role, channel or category name argument.

        A leading ``#`` (as typed for channels) is dropped.

        Returns:
            ValidationResult with the cleaned name in sanitized
        """
        sanitized = ValidationUtils.sanitize_input(name or "").lstrip("#").strip()

        if not sanitized:
            return ValidationResult(valid=False, error=f"{label} is required")

        if len(sanitized) > MAX_NAME_LENGTH:
            return ValidationResult(
                valid=False,
                error=f"{label} is too long (max {MAX_NAME_LENGTH} characters)",
            )

        return ValidationResult(valid=True, sanitized=sanitized)

    @staticmethod
    def sanitize_input(input_value: str) -> str:
        """Trim input and strip zero-width and control characters."""
        if not isinstance(input_value, str):
            return ""

        sanitized = ZERO_WIDTH_REGEX.sub("", input_value.strip())
        return CONTROL_REGEX.sub("", sanitized)
