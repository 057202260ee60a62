"""
Base Validator Module

Abstract base class and common validation utilities.

ENTERPRISE PATTERN: Template Method Pattern
--------------------------------------------
The BaseValidator provides reusable parameter checks while subclasses
compose them into the validation sequence for one request type. Every
helper raises the exception class it is given so each failure keeps its
own response body.
"""

from abc import ABC, abstractmethod
from urllib.parse import urlsplit

from src.core.exceptions import ValidationError
from src.core.logging.logger import get_logger

logger = get_logger(__name__)

# Hierarchical schemes that are meaningless without a host
HOST_REQUIRED_SCHEMES = frozenset({"http", "https", "ws", "wss", "ftp"})


class BaseValidator(ABC):
    """
    Abstract base validator with common validation utilities.

    DESIGN PATTERN: Template Method
    --------------------------------
    Provides reusable validation methods that all validators can use:
    - Presence checks
    - Absolute URI checks
    - Bounded integer parsing

    Subclasses implement ``validate`` for their domain.
    """

    def validate_present(
        self, values: dict[str, str | None], fields: tuple[str, ...], error: type[ValidationError]
    ) -> None:
        """
        Validate every named field is present and non-empty.

        Raises:
            error: On the first missing field
        """
        for field in fields:
            if not values.get(field):
                raise error(f"{field} is required", field=field)

    def validate_absolute_url(self, value: str, field_name: str, error: type[ValidationError]) -> None:
        """
        Validate ``value`` parses as an absolute URI.

        Any scheme is accepted (``data:``, ``mailto:``, ...). Schemes listed in
        HOST_REQUIRED_SCHEMES must also carry a network location, so
        ``https://`` alone is rejected.

        Raises:
            error: If the value is relative, schemeless or unparseable
        """
        try:
            parts = urlsplit(value)
            # Accessing port validates its range and raises ValueError
            parts.port
        except ValueError as e:
            raise error(f"{field_name} is not a valid URI: {e}", field=field_name) from e

        if not parts.scheme:
            raise error(f"{field_name} must be an absolute URI", field=field_name)
        if parts.scheme.lower() in HOST_REQUIRED_SCHEMES and not parts.hostname:
            raise error(f"{field_name} must include a host", field=field_name)

    def parse_int_in_range(
        self,
        value: str,
        field_name: str,
        min_value: int,
        max_value: int,
        error: type[ValidationError],
    ) -> int:
        """
        Parse a base-10 integer and check it lies in ``[min_value, max_value]``.

        Only ASCII digits are accepted: no sign, whitespace, underscores or
        trailing garbage.

        Raises:
            error: If the value is not an integer or is out of bounds
        """
        if not value.isascii() or not value.isdigit():
            raise error(f"{field_name} is not an integer", field=field_name)

        number = int(value)
        if number < min_value or number > max_value:
            raise error(
                f"{field_name} out of range ({min_value}-{max_value})",
                field=field_name,
            )
        return number

    @abstractmethod
    def validate(self, **kwargs):
        """
        Validate input data.

        ABSTRACT METHOD: Subclasses must implement
        """
        pass
