class DomainError(Exception):
    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(DomainError):
    def __init__(self, field: str, message: str, details: dict | None = None):
        code = f"VAL_{field.upper()}_001"
        msg = f"Validation failed for {field}: {message}"
        super().__init__(code, msg, details or {"field": field})


class InvalidProfileError(ValidationError):
    def __init__(self, field: str, message: str, details: dict | None = None):
        super().__init__(field, message, {"field": field, **(details or {})})
        self.code = "VAL_PROFILE_001"


class BusinessRuleError(DomainError):
    def __init__(self, message: str, code: str = "BR_001", details: dict | None = None):
        super().__init__(code, message, details)


class InsufficientCatalogCoverageError(BusinessRuleError):
    def __init__(self, day_label: str, slot_index: int, muscle_group: str, role: str):
        message = (
            f"No catalog exercise fits day '{day_label}' slot {slot_index} "
            f"({role}, {muscle_group}) under the active restrictions"
        )
        super().__init__(
            message,
            code="BR_CATALOG_COVERAGE",
            details={
                "day": day_label,
                "slot": slot_index,
                "muscle_group": muscle_group,
                "role": role,
            },
        )


class ConfigurationDefect(RuntimeError):
    """A rule table or generator invariant is broken. Not a user error."""
