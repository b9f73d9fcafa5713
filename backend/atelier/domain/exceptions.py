"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class DuplicateEntityError(Exception):
    """Raised when attempting to create a duplicate entity."""

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} with {field}='{value}' already exists")


class UnauthorizedActionError(Exception):
    """Raised when an actor lacks the role or ownership for an action."""

    def __init__(self, action: str, reason: str):
        self.action = action
        self.reason = reason
        super().__init__(f"Not allowed to '{action}': {reason}")


class InvalidCredentialsError(UnauthorizedActionError):
    """Raised when a login attempt does not match any account."""

    def __init__(self, reason: str = "invalid email, password or role"):
        super().__init__("login", reason)


class WorkflowValidationError(Exception):
    """Raised for malformed input (blank fields, negative amounts, bad ranges)."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class InvalidTransitionError(WorkflowValidationError):
    """Raised when a project is not in a state that allows the action."""

    def __init__(self, action: str, current: str, reason: str | None = None):
        msg = f"Cannot '{action}' while project status is '{current}'"
        if reason:
            msg += f" ({reason})"
        self.action = action
        self.current_status = current
        self.reason = reason
        super().__init__("status", msg)


class ExternalServiceError(Exception):
    """Raised when a collaborator (spreadsheet sync, webhook) fails.

    Callers treat these as best-effort side channels and never let them
    fail the primary workflow operation.
    """

    def __init__(self, service: str, message: str, status_code: int | None = None):
        self.service = service
        self.status_code = status_code
        self.message = message
        prefix = f"[{service}]" if status_code is None else f"[{service}] {status_code}"
        super().__init__(f"{prefix}: {message}")
