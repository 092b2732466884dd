"""Address book utility: XML <-> JSON conversion and XSD validation."""

__version__ = "1.0.0"

from .converter import Converter, to_json, to_xml
from .config import Config
from .validator import default_schema, load_schema, validate

__all__ = ["Converter", "Config", "to_json", "to_xml", "default_schema", "load_schema", "validate"]
