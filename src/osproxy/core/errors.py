"""Typed proxy configuration errors with user-facing messages."""

from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, message: str, user_message: str | None = None) -> None:
        super().__init__(message)
        self.user_message = user_message or message


class ValidationError(AppError):
    pass


class DeviceResolutionError(AppError):
    pass


class ParseError(AppError):
    pass


class UnsupportedPlatformError(AppError):
    pass


class CommandError(AppError):
    """A platform command finished without usable output."""

    exit_code: int = 0


class ExternalCommandError(CommandError):
    def __init__(self, exit_code: int, detail: str = "") -> None:
        self.exit_code = int(exit_code)
        self.detail = detail
        super().__init__(f"Exit code {self.exit_code}.")


class EmptyOutputError(CommandError):
    def __init__(self) -> None:
        super().__init__("No output to parse.")


class ProxyOperationError(AppError):
    """A controller operation failed because of a platform command."""

    def __init__(self, operation: str, reason: CommandError) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"Unable to {operation} proxy configuration. {reason}")

    @property
    def exit_code(self) -> int:
        return self.reason.exit_code
