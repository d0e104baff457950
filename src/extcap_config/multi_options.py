"""Configuration fields with a fixed set of options to choose from."""
from __future__ import annotations

from typing import Dict, Iterable, List, Union

from .exceptions import FieldDefinitionError
from .fields import CMD_NAMESPACE, MULTI_OPTION_TYPES, ConfigField, ConfigOption, FieldType, letters_only

_TOKEN_LETTERS = 5


class MultiOptionsField(ConfigField):
    """
    A selector, radio or multicheck field.

    Every option gets its own id in registration order. The id is part of
    the command line token the host sends back for the chosen option.
    """

    def __init__(self,
                 display_name: str,
                 field_type: Union[FieldType, str],
                 options: Iterable[ConfigOption],
                 required: bool = True):
        super().__init__(display_name, field_type, required)
        if options is None:
            raise TypeError("options must not be None")
        if self.field_type not in MULTI_OPTION_TYPES:
            allowed = ", ".join(sorted(t.value for t in MULTI_OPTION_TYPES))
            raise FieldDefinitionError(
                f"Only types allowed for {self.__class__.__name__} are {allowed}. "
                f"Received: {self.field_type.value}"
            )
        # Equal options collapse onto one entry, keeping the first position and the last id
        self._option_ids: Dict[ConfigOption, int] = {}
        for option_id, option in enumerate(options):
            self._option_ids[option] = option_id

    @property
    def options(self) -> List[ConfigOption]:
        return list(self._option_ids)

    def get_options_cmd_values(self, field_id: int) -> Dict[ConfigOption, str]:
        """Map every option to the token that selects it on the command line."""
        output: Dict[ConfigOption, str] = {}
        for option, option_id in self._option_ids.items():
            sanitized = letters_only(option.display_name.strip())[:_TOKEN_LETTERS]
            output[option] = f"{CMD_NAMESPACE}_{field_id}_{option_id}_{sanitized}"
        return output

    def resolve_cmd_value(self, field_id: int, token: str) -> ConfigOption:
        """
        Reverse lookup of a command line token.

        Raises:
            KeyError: If no option produces ``token``
        """
        for option, cmd_value in self.get_options_cmd_values(field_id).items():
            if cmd_value == token:
                return option
        raise KeyError(token)

    def format_self(self, field_id: int) -> str:
        """The ``arg`` line followed by one ``value`` line per option."""
        lines = [super().format_self(field_id)]
        # "value" here is the whole option line, not only the token it carries
        for option, cmd_value in self.get_options_cmd_values(field_id).items():
            lines.append(f"value {{arg={field_id}}}{{value={cmd_value}}}"
                         f"{{display={option.display_name.strip()}}}{{enabled=true}}")
        return "\n".join(lines)
