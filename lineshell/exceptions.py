#!/usr/bin/env python3
"""
lineshell Exception Hierarchy
Every error the engine raises or reports derives from LineShellException
"""


class LineShellException(Exception):
    """Base exception for all lineshell errors"""
    def __init__(self, message, code=None, details=None):
        self.message = message
        self.code = code or "UNKNOWN_ERROR"
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self):
        """Convert exception to dict for logging/output"""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class ConfigurationError(LineShellException):
    """Raised when configuration is invalid or missing"""
    def __init__(self, message, config_key=None):
        details = {"config_key": config_key} if config_key else {}
        super().__init__(message, "CONFIG_ERROR", details)


class RegistrationError(LineShellException):
    """Raised when a command cannot be registered"""
    def __init__(self, message, name=None):
        details = {"name": name} if name is not None else {}
        super().__init__(message, "REGISTRATION_ERROR", details)


class DuplicateCommand(RegistrationError):
    """Raised when a command name is registered twice"""
    def __init__(self, name):
        super().__init__(f"Command '{name}' is already registered", name)
        self.code = "DUPLICATE_COMMAND"
        self.name = name


class UnknownCommand(LineShellException):
    """Raised when no command matches and no default handler is set"""
    def __init__(self, name):
        self.name = name
        super().__init__(f"Unknown command {name}", "UNKNOWN_COMMAND", {"name": name})


class ArgumentCountError(LineShellException):
    """Raised when a command receives the wrong number of arguments"""
    def __init__(self, name, arity, actual):
        self.name = name
        self.arity = arity
        self.expected = arity.count
        self.actual = actual
        details = {
            "name": name,
            "expected": arity.describe(),
            "actual": actual,
        }
        super().__init__(
            f"{name} expects {arity.describe()} argument(s), got {actual}",
            "ARGUMENT_COUNT",
            details,
        )


class TokenizationError(LineShellException):
    """Raised when an input line cannot be split into tokens"""
    def __init__(self, message, line=None):
        details = {"line": line} if line is not None else {}
        super().__init__(message, "TOKENIZATION_ERROR", details)


class HandlerError(LineShellException):
    """
    Raised by command handlers.

    A fatal handler error is reported like any other and then halts the
    run loop; a non-fatal one lets the loop carry on.
    """
    def __init__(self, message, fatal=False, command=None):
        self.fatal = fatal
        self.command = command
        details = {"fatal": fatal}
        if command:
            details["command"] = command
        super().__init__(message, "HANDLER_ERROR", details)


class InvalidHistory(HandlerError):
    """Raised when a history entry cannot be replayed"""
    def __init__(self, index, reason=None):
        self.index = index
        message = reason or f"Invalid history entry {index}"
        super().__init__(message, command="history")
        self.code = "INVALID_HISTORY"
        self.details["index"] = index


class ShellIOError(LineShellException):
    """Raised when the underlying input or output stream fails"""
    def __init__(self, message, operation=None):
        details = {"operation": operation} if operation else {}
        super().__init__(message, "IO_ERROR", details)
