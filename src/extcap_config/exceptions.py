# Custom exceptions

"""
Custom exceptions for extcap configuration fields.
"""

class ExtcapConfigError(Exception):
    """Base exception for all configuration-field errors."""
    pass

class FieldDefinitionError(ExtcapConfigError, ValueError):
    """Raised when a configuration field is constructed with invalid arguments."""
    pass

class CaptureConfigurationError(ExtcapConfigError, ValueError):
    """Raised when the capture command line does not satisfy the registered fields."""
    pass

class MissingFieldFlagError(CaptureConfigurationError):
    """Raised when the flag of a required field is absent."""
    pass

class MissingFieldValueError(CaptureConfigurationError):
    """Raised when a field flag is the last argument and has no value."""
    pass

class InvalidOptionValueError(CaptureConfigurationError):
    """Raised when a multi-option value matches none of the field's options."""
    pass
