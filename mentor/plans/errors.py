"""Error types for plan services.

Business logic errors raised by the service layer; routers translate them
into HTTP responses.
"""


class NoCurrentPlanError(LookupError):
    """Raised when a user has no current training or nutrition version to patch."""


class PlanVersionConflictError(RuntimeError):
    """Raised when concurrent writers keep taking the next plan version number."""
