"""Document model shared by the converter and the validator."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union


JsonValue = Union[Dict[str, "JsonValue"], List["JsonValue"], str, int, float, bool, None]


class InputType(str, Enum):
    """Format of an input document, decided once at ingestion."""
    JSON = "json"
    XML = "xml"


class Operation(str, Enum):
    """Operations the utility can perform."""
    CONVERT_TO_JSON = "convert-to-json"
    CONVERT_TO_XML = "convert-to-xml"
    VALIDATE_XML = "validate-xml"

    @property
    def target_type(self) -> Optional[InputType]:
        """Format produced by a conversion, None for validation."""
        if self is Operation.CONVERT_TO_JSON:
            return InputType.JSON
        if self is Operation.CONVERT_TO_XML:
            return InputType.XML
        return None

    @property
    def is_conversion(self) -> bool:
        """Whether the operation writes an output document."""
        return self.target_type is not None


@dataclass
class ElementNode:
    """XML element with ordered attributes, children and optional text."""
    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["ElementNode"] = field(default_factory=list)
    text: Optional[str] = None

    def add_child(self, child: "ElementNode") -> None:
        """Append a child element."""
        self.children.append(child)

    def __str__(self) -> str:
        return f"<{self.name}> ({len(self.attributes)} attrs, {len(self.children)} children)"


@dataclass(frozen=True)
class AddressInput:
    """Input document as read from a path or URL."""
    input_type: InputType
    content: str
    source: str = ""
