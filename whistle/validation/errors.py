"""
Configuration errors for form rules.

Invalid submitted data is never raised; it is reported as validation
messages. These exceptions signal a broken rule or form definition.
"""

from typing import Optional


class ConfigurationError(ValueError):
    """A rule string or form specification cannot be used."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        token: Optional[str] = None,
        source: Optional[str] = None,
    ) -> None:
        self.field = field
        self.token = token
        self.source = source
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        if self.source:
            return f"{self.source}: {message}"
        return message
