"""Library exceptions for the entityhydrator package."""


class HydrationError(Exception):
    """Base exception for entityhydrator library."""

    pass


class InvalidRelationPathError(HydrationError):
    """
    Raised when a relation path cannot be resolved against an entity type.

    This is a configuration error: it is raised synchronously while the
    request is being planned, before any data-access call is made, and is
    never retried.

    Attributes:
        path: The full relation path as requested
        segment: The segment that could not be resolved
        entity_type: Name of the type the segment was resolved against
            (None when the path is malformed independent of any type)
    """

    def __init__(self, path: str, segment: str, entity_type: str | None = None) -> None:
        self.path = path
        self.segment = segment
        self.entity_type = entity_type
        if entity_type is None:
            message = f"Invalid relation path '{path}': empty segment"
        else:
            message = (
                f"Invalid relation path '{path}': "
                f"'{segment}' is not a relation of {entity_type}"
            )
        super().__init__(message)


class EntityNotFoundError(HydrationError):
    """
    Raised when the root entity no longer exists in the data-access layer.

    The entity instance passed to the hydrator is left unmodified.

    Attributes:
        entity_type: Name of the entity type
        entity_id: Primary key of the missing entity
    """

    def __init__(self, entity_type: str, entity_id: int | str | None) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} not found: {entity_id}")


class UnexpectedEntityError(HydrationError):
    """Raised when the data-access layer returns an entity of the wrong type."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected loader to return {expected}, got {actual}")


class UnsavedEntityError(HydrationError):
    """Raised when relations must be fetched for an entity without a primary key."""

    def __init__(self, entity_type: str) -> None:
        self.entity_type = entity_type
        super().__init__(
            f"Cannot fetch relations for {entity_type} without a primary key. "
            "Persist the entity before hydrating it."
        )
