"""Exceptions for loading persisted map documents."""


class DecodeError(Exception):
    """Raised when a persisted document cannot be turned into a ShapeSet.

    This error is raised when:
    - The payload is not valid JSON
    - The top-level type is not "FeatureCollection"
    - A feature has an unknown type or a missing required property
    - A feature's geometry does not match its type
    - A polygon feature has a degenerate ring
    """

    def __init__(self, message: str, *, feature_index: int | None = None) -> None:
        """Initialize decode error with optional feature context.

        Args:
            message: Human-readable error description.
            feature_index: Position of the offending feature, if any.
        """
        self.message = message
        self.feature_index = feature_index
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.feature_index is not None:
            return f"{self.message} (feature={self.feature_index})"
        return self.message
