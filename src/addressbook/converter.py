"""Bidirectional conversion between address book XML and JSON documents.

Mapping conventions (applied the same way in both directions):

- attributes become ``"@name"`` keys holding strings
- text of an element without attributes or children becomes a bare value,
  otherwise it is stored under ``"#text"``
- repeated sibling elements become an array under their tag name, a single
  occurrence stays a bare value
- the root element name is the single top-level key of the JSON document

A single child and a one-element list are indistinguishable once converted
to JSON, so only documents produced by this convention round-trip exactly.
"""

import json
import re
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Set, Tuple
from xml.parsers.expat import ExpatError

import xmltodict

from .config import ConversionConfig, SerializerConfig
from .exceptions import AmbiguousRootError, EmptyInputError, MalformedInputError, UsageError
from .logger import LogLevel, create_logger
from .model import AddressInput, InputType, JsonValue, Operation
from .xmltree import KNOWN_PREFIXES, PREFIX_NAMESPACES


_XML_NAME = re.compile(r"^[^\W\d][\w.\-]*$")
_INTEGER = re.compile(r"^-?(0|[1-9][0-9]*)$")
_DECIMAL = re.compile(r"^-?(0|[1-9][0-9]*)\.[0-9]+$")

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'


class _LocalNames(dict):
    """Namespace map that reduces every namespace it does not know to nothing."""

    def __missing__(self, key):
        return ""


@dataclass
class ConversionResult:
    """Result of converting one input document."""
    output: str
    source_type: InputType
    target_type: InputType
    processing_time: float
    identity: bool = False


def parse_json(json_text: str) -> JsonValue:
    """Parse JSON text, keeping key order."""
    if json_text is None or not json_text.strip():
        raise EmptyInputError("JSON input is empty")
    try:
        return json.loads(json_text)
    except json.JSONDecodeError as e:
        raise MalformedInputError(f"Input is not valid JSON: {e}") from e


class Converter:
    """Converts address book documents between XML and JSON."""

    def __init__(self, conversion: Optional[ConversionConfig] = None,
                 serializer: Optional[SerializerConfig] = None,
                 log_level: LogLevel = LogLevel.WARN, log_format: str = "json"):
        self.conversion = conversion or ConversionConfig()
        self.serializer = serializer or SerializerConfig()
        self.logger = create_logger(level=log_level, component="converter", fmt=log_format)

    # XML -> JSON

    def to_json(self, xml_text: str) -> JsonValue:
        """Convert XML text into a JSON value keyed by the root element name."""
        if xml_text is None or not xml_text.strip():
            raise EmptyInputError("XML input is empty")
        try:
            document = xmltodict.parse(
                xml_text,
                process_namespaces=True,
                namespaces=_LocalNames(KNOWN_PREFIXES),
                attr_prefix=self.conversion.attribute_prefix,
                cdata_key=self.conversion.text_key,
                postprocessor=self._postprocess,
                dict_constructor=dict,
            )
        except ExpatError as e:
            raise MalformedInputError(f"Input is not well-formed XML: {e}") from e
        except ValueError as e:
            # raised for DTD entity declarations, which are never expanded
            raise MalformedInputError(f"Input is not well-formed XML: {e}") from e

        self.logger.debug("Parsed XML document", rootElement=next(iter(document)))
        return document

    def _postprocess(self, path, key: str, value: Any) -> Optional[Tuple[str, Any]]:
        """Map one parsed attribute, text or element value to its JSON form."""
        prefix = self.conversion.attribute_prefix
        if key == prefix + "xmlns":
            return None
        if key.startswith(prefix):
            return key, value
        if value is None:
            return key, ""
        if isinstance(value, str):
            return key, self._coerce(value)
        return key, value

    def _coerce(self, text: str) -> JsonValue:
        """Turn literal text into a boolean or number when that is lossless."""
        if not self.conversion.coerce_values:
            return text
        if text == "true":
            return True
        if text == "false":
            return False
        if _INTEGER.match(text):
            number = int(text)
            if str(number) == text:
                return number
        elif _DECIMAL.match(text):
            number = float(text)
            if repr(number) == text:
                return number
        return text

    # JSON -> XML

    def to_xml(self, value: JsonValue) -> str:
        """Convert a single-rooted JSON value into XML text."""
        if not isinstance(value, dict):
            raise AmbiguousRootError(
                f"Expected a JSON object with one root key, got {type(value).__name__}"
            )
        if len(value) != 1:
            keys = ", ".join(value) or "none"
            raise AmbiguousRootError(
                f"Expected exactly one top-level key to use as the root element, "
                f"found {len(value)} ({keys})"
            )

        (name, body), = value.items()
        if isinstance(body, list):
            raise AmbiguousRootError(
                f"Root key '{name}' holds an array; an XML document has exactly one root element"
            )

        prefixes: Set[str] = set()
        root = self.prepare(name, body, prefixes)
        declarations = {
            f"{self.conversion.attribute_prefix}xmlns:{prefix}": PREFIX_NAMESPACES[prefix]
            for prefix in sorted(prefixes) if prefix != "xml"
        }
        if declarations:
            root = {**declarations, **(root or {})}

        indent = self.serializer.indent
        body_text = xmltodict.unparse(
            {name: root},
            full_document=self.serializer.xml_declaration,
            pretty=bool(indent),
            indent=" " * indent,
            attr_prefix=self.conversion.attribute_prefix,
            cdata_key=self.conversion.text_key,
            short_empty_elements=True,
        )
        return body_text + "\n"

    def prepare(self, name: str, value: JsonValue, prefixes: Set[str]) -> Optional[Dict[str, Any]]:
        """Check one JSON value and normalise it for serialization as element ``name``.

        Scalars become strings in their JSON spelling, ``null`` becomes an
        empty element. Namespace prefixes used by attributes are added to
        ``prefixes`` so the root can declare them.
        """
        self._check_name(name)

        if isinstance(value, list):
            raise MalformedInputError(f"Nested arrays under '{name}' cannot be represented in XML")

        if not isinstance(value, dict):
            text = self._scalar_text(name, value)
            return None if text is None else {self.conversion.text_key: text}

        prefix = self.conversion.attribute_prefix
        result: Dict[str, Any] = {}
        for key, item in value.items():
            if key == self.conversion.text_key:
                text = self._scalar_text(key, item)
                if text is not None:
                    result[key] = text
            elif key.startswith(prefix):
                attribute = key[len(prefix):]
                self._check_name(attribute, attribute=True)
                namespace, sep, _ = attribute.partition(":")
                if sep:
                    prefixes.add(namespace)
                result[key] = self._scalar_text(key, item) or ""
            elif isinstance(item, list):
                self.logger.mapping_decision(
                    "array to repeated siblings",
                    xml_construct=f"<{name}>/<{key}>",
                    json_output=f"array[{len(item)}]",
                )
                result[key] = [self.prepare(key, entry, prefixes) for entry in item]
            else:
                result[key] = self.prepare(key, item, prefixes)

        return result

    @staticmethod
    def _scalar_text(key: str, value: JsonValue) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return json.dumps(value)
        if isinstance(value, str):
            return value
        raise MalformedInputError(f"Value of '{key}' must be a string, number, boolean or null")

    @staticmethod
    def _check_name(name: str, attribute: bool = False) -> None:
        prefix, sep, rest = name.partition(":")
        if attribute and sep and prefix in PREFIX_NAMESPACES:
            name = rest
        if not _XML_NAME.match(name):
            kind = "attribute" if attribute else "element"
            raise MalformedInputError(f"'{name}' is not a valid XML {kind} name")

    # Serialization

    def render_json(self, value: JsonValue) -> str:
        """Serialize a JSON value with stable indentation."""
        indent = self.serializer.indent or None
        return json.dumps(value, indent=indent, ensure_ascii=self.serializer.ensure_ascii) + "\n"

    # Text to text

    def xml_to_json_text(self, xml_text: str) -> str:
        """Convert XML text to indented JSON text."""
        return self.render_json(self.to_json(xml_text))

    def json_text_to_xml(self, json_text: str) -> str:
        """Convert JSON text to XML text."""
        return self.to_xml(parse_json(json_text))

    def convert(self, address_input: AddressInput, operation: Operation) -> ConversionResult:
        """Convert an input document to the format the operation asks for."""
        start_time = time.time()

        target = operation.target_type
        if target is None:
            raise UsageError(f"Operation {operation.value} is not a conversion")

        source = address_input.input_type
        if not address_input.content.strip():
            raise EmptyInputError(f"{source.name} input is empty")

        if source is target:
            self.logger.info("Input already in target format", inputType=source.value)
            return ConversionResult(
                output=address_input.content,
                source_type=source,
                target_type=target,
                processing_time=time.time() - start_time,
                identity=True,
            )

        handlers: Dict[Tuple[InputType, InputType], Callable[[str], str]] = {
            (InputType.XML, InputType.JSON): self.xml_to_json_text,
            (InputType.JSON, InputType.XML): self.json_text_to_xml,
        }
        output = handlers[(source, target)](address_input.content)

        processing_time = time.time() - start_time
        self.logger.performance_metric("conversion", processing_time, unit="s",
                                       sourceType=source.value, targetType=target.value)
        return ConversionResult(
            output=output,
            source_type=source,
            target_type=target,
            processing_time=processing_time,
        )


def to_json(xml_text: str) -> JsonValue:
    """Convert XML text to a JSON value using the default conventions."""
    return Converter().to_json(xml_text)


def to_xml(value: JsonValue) -> str:
    """Convert a JSON value to XML text using the default conventions."""
    return Converter().to_xml(value)
