"""Error types for the pre-onboarding flow."""


class ConsentRequiredError(ValueError):
    """Raised when health data (injuries) is submitted before consent was given."""


class PreviewNotFoundError(LookupError):
    """Raised when a user has no generated plan preview yet."""
