"""Validation of address book XML against the bundled XSD."""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Union

import xmlschema

from .exceptions import SchemaLoadError, ValidationError
from .logger import LogLevel, create_logger
from .xmltree import local_name, parse_element


SCHEMA_FILENAME = "address_book_schema.xsd"


def bundled_schema_path() -> Path:
    """Location of the XSD shipped with the package."""
    return Path(__file__).parent / "schemas" / SCHEMA_FILENAME


@dataclass(frozen=True)
class AddressBookSchema:
    """Compiled schema handle, loaded once and shared read-only."""
    schema: xmlschema.XMLSchema
    source: str

    @property
    def root_elements(self) -> List[str]:
        """Names of the elements allowed as document root."""
        return list(self.schema.elements)


def load_schema(path: Optional[Union[str, Path]] = None) -> AddressBookSchema:
    """Compile an XSD file, the bundled address book schema by default."""
    xsd_path = Path(path) if path is not None else bundled_schema_path()
    if not xsd_path.is_file():
        raise SchemaLoadError(f"Schema file does not exist: {xsd_path}")

    try:
        compiled = xmlschema.XMLSchema(str(xsd_path))
    except (xmlschema.XMLSchemaException, SyntaxError, OSError) as e:
        raise SchemaLoadError(f"Cannot load schema {xsd_path}: {e}") from e

    return AddressBookSchema(schema=compiled, source=str(xsd_path))


@lru_cache(maxsize=None)
def default_schema() -> AddressBookSchema:
    """The bundled schema, compiled on first use."""
    return load_schema()


def validate(xml_text: str, schema: AddressBookSchema, log_level: LogLevel = LogLevel.WARN,
             log_format: str = "json") -> None:
    """Check an XML document against the schema.

    Raises ValidationError describing the first violation found. Malformed
    or empty input raises MalformedInputError / EmptyInputError instead.
    """
    logger = create_logger(level=log_level, component="validator", fmt=log_format)
    root = parse_element(xml_text)

    if root.tag not in schema.schema.elements:
        expected = ", ".join(schema.root_elements)
        raise ValidationError(
            f"Expected root element '{expected}', found '{local_name(root.tag)}'",
            path="/",
            element=local_name(root.tag),
        )

    error = next(schema.schema.iter_errors(root), None)
    if error is not None:
        element = local_name(error.elem.tag) if error.elem is not None else None
        logger.info("XML failed validation", reason=error.reason, path=error.path, schema=schema.source)
        raise ValidationError(error.reason or error.message, path=error.path, element=element)

    logger.info("XML is valid", rootElement=root.tag, schema=schema.source)
