"""
Standard capture interface with configuration fields and extra link layers.
"""
from __future__ import annotations

import logging
from typing import BinaryIO, Callable, Dict, List, Optional, Tuple, Union

from extcap_config import (
    ConfigField,
    FieldSpec,
    InvalidOptionValueError,
    MissingFieldFlagError,
    MissingFieldValueError,
    MultiOptionsField,
)
from models import LinkLayerType
from publish import PcapngPublisher
from .base import CaptureInterface
from .producer import PacketsProducer

logger = logging.getLogger(__name__)

FieldSource = Union[ConfigField, FieldSpec, Callable[[], ConfigField]]


class BasicCaptureInterface(CaptureInterface):
    """
    Capture interface backed by a PCAPNG publisher.

    Fields are numbered in registration order starting at 0. The number is
    part of every derived flag, so registering fields in another order
    changes the command line the host sends back.
    """

    def __init__(self, display_name: str, producer: PacketsProducer, default_link_layer: LinkLayerType):
        super().__init__(display_name, producer, default_link_layer)
        self._field_specs: Dict[int, FieldSpec] = {}
        self._next_field_id = 0
        self._additional_link_layers: List[LinkLayerType] = []
        self._custom_dlt: Optional[Tuple[str, str, str]] = None

    def add_config_field(self, field: FieldSource) -> int:
        """
        Register a configuration field.

        Args:
            field: A ConfigField, a FieldSpec, or a zero-argument factory
                   building the field the first time it is needed

        Returns:
            The id assigned to the field
        """
        if isinstance(field, ConfigField):
            spec = FieldSpec.of(field)
        elif isinstance(field, FieldSpec):
            spec = field
        else:
            spec = FieldSpec(field)
        field_id = self._next_field_id
        self._field_specs[field_id] = spec
        self._next_field_id += 1
        return field_id

    def get_field(self, field_id: int) -> ConfigField:
        return self._field_specs[field_id].field

    @property
    def fields(self) -> List[Tuple[int, ConfigField]]:
        """(id, field) pairs in registration order. Materializes deferred fields."""
        return [(field_id, spec.field) for field_id, spec in self._field_specs.items()]

    def get_config_query_response(self, args: List[str]) -> str:
        return "\n".join(field.format_self(field_id) for field_id, field in self.fields)

    def add_link_layer(self, link_layer: LinkLayerType) -> None:
        """
        Allow the producer to send packets of another link layer.
        Packets may only use the default link layer or one added here.
        """
        self._additional_link_layers.append(LinkLayerType(link_layer))

    @property
    def additional_link_layers(self) -> List[LinkLayerType]:
        return list(self._additional_link_layers)

    def set_custom_dlt_info(self, number: str, name: str, display_name: str) -> None:
        """
        Override the --extcap-dlts response.
        ``display_name`` is what the host shows as the link-layer header.
        """
        self._custom_dlt = (str(number), name, display_name)

    def get_dlts_query_response(self, args: List[str]) -> str:
        if self._custom_dlt is None:
            return super().get_dlts_query_response(args)
        number, name, display_name = self._custom_dlt
        return f"dlt {{number={number}}}{{name={name}}}{{display={display_name}}}"

    def get_packets_publisher(self, stream: BinaryIO) -> PcapngPublisher:
        return PcapngPublisher(stream, self.default_link_layer, self._additional_link_layers)

    def get_capture_configuration(self, args: List[str]) -> Dict[ConfigField, str]:
        """
        Parse the values of all registered fields out of ``args``.

        Optional fields whose flag is absent are left out of the result.

        Raises:
            MissingFieldFlagError: A required field's flag is absent
            MissingFieldValueError: A flag is the last argument
            InvalidOptionValueError: A multi-option value matches no option
        """
        if args is None:
            raise TypeError("args must not be None")

        configuration: Dict[ConfigField, str] = {}
        for field_id, field in self.fields:
            flag = "--" + field.derive_cmd_flag(field_id)
            if flag not in args:
                if not field.required:
                    continue
                raise MissingFieldFlagError(
                    f'Missing command line flag {flag} for config field "{field.display_name}"')

            index = args.index(flag)
            if index == len(args) - 1:
                raise MissingFieldValueError(
                    f'Missing value for command line flag {flag} for config field "{field.display_name}"')
            value = args[index + 1]

            if isinstance(field, MultiOptionsField):
                try:
                    option = field.resolve_cmd_value(field_id, value)
                except KeyError:
                    raise InvalidOptionValueError(f"Invalid value for flag '{flag}' : '{value}'") from None
                configuration[field] = option.value
            else:
                configuration[field] = value

        logger.debug("Parsed %d configuration value(s) for %s", len(configuration), self.identifier)
        return configuration
