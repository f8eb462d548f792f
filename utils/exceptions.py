"""Custom exception classes"""


class KioskError(Exception):
    """Base exception for the kiosk system"""
    pass


class ConfigurationError(KioskError):
    """Configuration or data file error"""
    pass


class IllegalTransitionError(KioskError):
    """Operation invoked from a phase that does not permit it"""

    def __init__(self, operation: str, phase: str):
        super().__init__(f"'{operation}' is not allowed while {phase}")
        self.operation = operation
        self.phase = phase


class CaptureError(KioskError):
    """Code capture error"""
    pass


class DeviceUnavailableError(CaptureError):
    """Camera or decode capability missing or denied"""
    pass


class EmptyCodeError(CaptureError):
    """Terminator received with an empty code"""
    pass


class UnknownIdentityError(KioskError):
    """Operator directory has no identity for the code"""

    def __init__(self, code: str):
        super().__init__(f"Unknown operator code: {code}")
        self.code = code
