"""Error types raised by the Pennywise services."""


class PennywiseError(Exception):
    """Base class for all application errors."""


class ValidationError(PennywiseError, ValueError):
    """Input is missing or malformed. Nothing was persisted."""


class NotFound(PennywiseError):
    """A referenced record does not exist.

    Attributes:
        entity: Entity name, e.g. "Category" or "Goal".
        entity_id: The ID that was looked up.
    """

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with ID {entity_id} not found")


class StorageError(PennywiseError):
    """The database failed mid unit of work. The unit of work was rolled back."""


class InvariantViolation(PennywiseError):
    """A goal's running total diverged from its contributions.

    This indicates a bug, not a recoverable condition.
    """

    def __init__(self, message: str, goal_id=None):
        self.goal_id = goal_id
        super().__init__(message)
