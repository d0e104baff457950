"""
Configuration fields exposed to the capture host.

Each field is shown in the host's interface options dialog and travels
back to the plugin as a generated command line flag. The flag is derived
from the display name and the field id, which the owning interface
assigns in registration order.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .exceptions import FieldDefinitionError

CMD_NAMESPACE = "extcapnet"


class FieldType(str, Enum):
    """Extcap argument types, spelled the way the host expects them."""
    INTEGER = "integer"
    UNSIGNED = "unsigned"
    LONG = "long"            # may include scientific / special notation
    FLOAT = "float"
    BOOLEAN = "boolean"      # checkbox
    STRING = "string"        # textbox
    PASSWORD = "password"    # textbox with masked text
    SELECTOR = "selector"    # selector table, all values as strings
    RADIO = "radio"          # group of radio buttons, all values as strings
    MULTICHECK = "multicheck"
    FILESELECT = "fileselect"
    TIMESTAMP = "timestamp"  # calendar

    @classmethod
    def coerce(cls, value: Union["FieldType", str]) -> "FieldType":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                pass
        raise FieldDefinitionError(f"Undefined field type: {value!r}")


MULTI_OPTION_TYPES = frozenset({FieldType.SELECTOR, FieldType.RADIO, FieldType.MULTICHECK})


def letters_only(text: str) -> str:
    return "".join(ch for ch in text if ch.isalpha())


@dataclass(frozen=True)
class ConfigOption:
    """An option of a selector, radio or multicheck field."""
    display_name: str
    value: str


class ConfigField:
    """
    A configuration field for an extcap interface.

    Fields hash by identity: two fields with the same display name are
    still two distinct keys of a capture configuration.
    """

    def __init__(self, display_name: str, field_type: Union[FieldType, str], required: bool = True):
        """
        Args:
            display_name: Name shown in the host's GUI
            field_type: One of FieldType (or its lowercase spelling)
            required: Whether the field must be set to start a capture

        Raises:
            TypeError: If display_name is None
            FieldDefinitionError: If field_type is not a defined FieldType
        """
        if display_name is None:
            raise TypeError("display_name must not be None")
        self.field_type = FieldType.coerce(field_type)
        self.display_name = display_name
        self.required = bool(required)

    def derive_cmd_flag(self, field_id: int) -> str:
        """Command line flag (without the leading dashes) representing this field."""
        # The host needs lowercase flags without spaces or punctuation
        sanitized = letters_only(self.display_name.lower())
        return f"{CMD_NAMESPACE}_{field_id}_{sanitized}"

    def format_self(self, field_id: int) -> str:
        """The field's ``arg`` line for the --extcap-config response."""
        return (f"arg {{number={field_id}}}"
                f"{{call=--{self.derive_cmd_flag(field_id)}}}"
                f"{{display={self.display_name}}}"
                f"{{type={self.field_type.value}}}"
                f"{{required={self.required}}}")

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}({self.display_name!r}, "
                f"{self.field_type.value!r}, required={self.required})")
