"""Configuration management for the address book utility."""

from dataclasses import dataclass, field
from typing import List, Optional

from .logger import FORMATTERS, LogLevel
from .model import Operation


@dataclass
class ConversionConfig:
    """XML <-> JSON mapping conventions."""
    attribute_prefix: str = "@"   # "@id" for attribute id
    text_key: str = "#text"       # text next to attributes or children
    coerce_values: bool = True    # "42" -> 42, "true" -> true


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: LogLevel = LogLevel.WARN
    format: str = "json"
    destination: str = "stderr"


@dataclass
class SerializerConfig:
    """Output serialization configuration."""
    indent: int = 4
    xml_declaration: bool = True
    ensure_ascii: bool = False


@dataclass
class Config:
    """Main configuration for one invocation."""

    # Input/Output
    input_source: Optional[str] = None
    output_path: Optional[str] = None
    operation: Optional[Operation] = None

    # Network input
    network_timeout: float = 30.0

    conversion: ConversionConfig = field(default_factory=ConversionConfig)
    serializer: SerializerConfig = field(default_factory=SerializerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> List[str]:
        """Validate configuration and return any usage errors."""
        errors = []

        if not self.input_source:
            errors.append("An --input path or URL is required")

        if self.operation is None:
            errors.append("An --operation is required")
        elif self.operation.is_conversion and not self.output_path:
            errors.append(f"Operation {self.operation.value} requires --output")

        if self.network_timeout <= 0:
            errors.append("Network timeout must be a positive number of seconds")

        if self.serializer.indent < 0:
            errors.append("Indent must not be negative")

        if not self.conversion.attribute_prefix:
            errors.append("Attribute prefix must not be empty")

        if self.logging.format not in FORMATTERS:
            errors.append(f"Log format must be one of {', '.join(FORMATTERS)}")

        return errors

    @classmethod
    def from_cli_args(cls, **kwargs) -> "Config":
        """Create config from CLI arguments."""
        config = cls()

        field_map = {
            "input": "input_source",
            "output": "output_path",
            "timeout": "network_timeout",
        }
        for key, value in kwargs.items():
            attr = field_map.get(key, key)
            if hasattr(config, attr) and value is not None:
                setattr(config, attr, value)

        if kwargs.get("operation") is not None:
            config.operation = Operation(kwargs["operation"])

        if kwargs.get("log_level") is not None:
            config.logging.level = LogLevel(kwargs["log_level"])

        if kwargs.get("log_format") is not None:
            config.logging.format = kwargs["log_format"]

        return config
