"""Root of the whatschanging exception hierarchy.

Every error raised by the package carries a stable ``error_code`` (used by the
CLI for exit codes and by the report formatters) and a ``context`` dict with
the values that caused it. ``str(error)`` renders as ``[CODE] message``.
"""

from typing import Any


class WhatschangingException(Exception):
    """An error with a machine-readable code.

    Attributes:
        message: Text shown to the user, without the code prefix
        error_code: Upper-case identifier such as ``DIMENSION_MISMATCH``
        context: Values behind the error, for logs and reports
    """

    def __init__(
        self, message: str, error_code: str | None = None, context: dict[str, Any] | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message
