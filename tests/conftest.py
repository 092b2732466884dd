"""Pytest configuration and fixtures for address book tests."""

import json
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from addressbook.config import Config
from addressbook.converter import Converter
from addressbook.logger import LogLevel
from addressbook.validator import AddressBookSchema, default_schema


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_path:
        yield Path(temp_path)


@pytest.fixture
def address_book_xml() -> str:
    """Schema-conformant address book with two contacts."""
    return '''<?xml version="1.0" encoding="UTF-8"?>
<addressBook version="1.0">
    <owner>Jane Doe</owner>
    <contact id="c1" favorite="true">
        <firstName>Ada</firstName>
        <lastName>Lovelace</lastName>
        <email type="work">ada@example.com</email>
        <email>ada.home@example.com</email>
        <phone type="mobile">+44 20 7946 0000</phone>
        <address type="home">
            <street>12 St James's Square</street>
            <city>London</city>
            <postalCode>SW1Y 4JH</postalCode>
            <country>UK</country>
        </address>
        <birthday>1815-12-10</birthday>
    </contact>
    <contact id="c2">
        <firstName>Alan</firstName>
        <lastName>Turing</lastName>
        <phone type="work">555-0100</phone>
        <address>
            <street>Bletchley Park</street>
            <city>Milton Keynes</city>
            <postalCode>02134</postalCode>
        </address>
        <notes/>
    </contact>
</addressBook>
'''


@pytest.fixture
def address_book_json() -> dict:
    """JSON form of address_book_xml."""
    return {
        "addressBook": {
            "@version": "1.0",
            "owner": "Jane Doe",
            "contact": [
                {
                    "@id": "c1",
                    "@favorite": "true",
                    "firstName": "Ada",
                    "lastName": "Lovelace",
                    "email": [
                        {"@type": "work", "#text": "ada@example.com"},
                        "ada.home@example.com",
                    ],
                    "phone": {"@type": "mobile", "#text": "+44 20 7946 0000"},
                    "address": {
                        "@type": "home",
                        "street": "12 St James's Square",
                        "city": "London",
                        "postalCode": "SW1Y 4JH",
                        "country": "UK",
                    },
                    "birthday": "1815-12-10",
                },
                {
                    "@id": "c2",
                    "firstName": "Alan",
                    "lastName": "Turing",
                    "phone": {"@type": "work", "#text": "555-0100"},
                    "address": {
                        "street": "Bletchley Park",
                        "city": "Milton Keynes",
                        "postalCode": "02134",
                    },
                    "notes": "",
                },
            ],
        }
    }


@pytest.fixture
def address_book_xml_file(temp_dir: Path, address_book_xml: str) -> Path:
    """Write the sample address book to an .xml file."""
    xml_file = temp_dir / "book.xml"
    xml_file.write_text(address_book_xml, encoding="utf-8")
    return xml_file


@pytest.fixture
def address_book_json_file(temp_dir: Path, address_book_json: dict) -> Path:
    """Write the sample address book to a .json file."""
    json_file = temp_dir / "book.json"
    json_file.write_text(json.dumps(address_book_json, indent=4), encoding="utf-8")
    return json_file


@pytest.fixture
def converter() -> Converter:
    """Converter with default conventions."""
    return Converter(log_level=LogLevel.ERROR)


@pytest.fixture
def schema() -> AddressBookSchema:
    """The bundled address book schema."""
    return default_schema()


@pytest.fixture
def default_config(temp_dir: Path) -> Config:
    """Default configuration for testing."""
    config = Config(output_path=str(temp_dir / "out.json"))
    config.logging.level = LogLevel.ERROR  # Suppress logs in tests
    return config
