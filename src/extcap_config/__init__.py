"""
Extcap configuration fields and their command line codec.
"""

from .fields import CMD_NAMESPACE, ConfigField, ConfigOption, FieldType, MULTI_OPTION_TYPES
from .multi_options import MultiOptionsField
from .field_spec import FieldSpec
from .exceptions import (
    ExtcapConfigError,
    FieldDefinitionError,
    CaptureConfigurationError,
    MissingFieldFlagError,
    MissingFieldValueError,
    InvalidOptionValueError,
)

__all__ = [
    'CMD_NAMESPACE',
    'ConfigField',
    'ConfigOption',
    'FieldType',
    'MULTI_OPTION_TYPES',
    'MultiOptionsField',
    'FieldSpec',
    'ExtcapConfigError',
    'FieldDefinitionError',
    'CaptureConfigurationError',
    'MissingFieldFlagError',
    'MissingFieldValueError',
    'InvalidOptionValueError',
]
