"""
Error types for the Security Console
Core operations raise these; consoles print them
"""


class ConsoleError(Exception):
    code = "CONSOLE_ERROR"
    message = "Console error"

    def __init__(self, message=None, *, code=None):
        if message is not None:
            self.message = message
        if code is not None:
            self.code = code

        super().__init__(self.message)


class ValidationError(ConsoleError):
    code = "VALIDATION_ERROR"
    message = "Validation error"


class NotFoundError(ConsoleError):
    code = "NOT_FOUND"
    message = "Resource not found"


class AlreadyAuthorizedError(ConsoleError):
    code = "ALREADY_AUTHORIZED"
    message = "Event has already been authorized"


class PermissionDenied(ConsoleError):
    code = "PERMISSION_DENIED"
    message = "Insufficient permissions"


class ConfigurationError(ConsoleError):
    code = "CONFIGURATION_ERROR"
    message = "Invalid configuration"
