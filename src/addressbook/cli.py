"""Command-line interface for the address book utility."""

import sys

import click

from . import __version__
from .config import Config
from .converter import Converter
from .exceptions import AddressBookError, UnsupportedMimeTypeError, UsageError
from .logger import FORMATTERS, LogLevel, create_logger
from .model import InputType, Operation
from .sources import ensure_writable, read_input, write_output
from .validator import default_schema, validate


@click.command()
@click.version_option(__version__)
@click.option(
    "--input", "-i",
    required=True,
    help="Location of input. It can be a local file OR a URL."
)
@click.option(
    "--output", "-o",
    help="Output filename (required for conversions)"
)
@click.option(
    "--operation",
    required=True,
    type=click.Choice([op.value for op in Operation]),
    help="Operation to perform"
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=30.0,
    show_default=True,
    help="Network timeout in seconds for URL input"
)
@click.option(
    "--log-level",
    type=click.Choice([level.value for level in LogLevel], case_sensitive=False),
    default=LogLevel.WARN.value,
    help="Logging level"
)
@click.option(
    "--log-format",
    type=click.Choice(list(FORMATTERS)),
    default="json",
    show_default=True,
    help="Log line format"
)
def main(input: str, output: str, operation: str, timeout: float, log_level: str, log_format: str) -> None:
    """Perform operations on an address book XML or JSON file/URL.

    \b
    Operations:
        convert-to-json  takes XML as input and emits JSON
        convert-to-xml   takes JSON as input and emits XML
        validate-xml     validates XML input against the address book schema

    Examples:

    \b
        address-book-utility --input book.xml --output book.json --operation convert-to-json
        address-book-utility --input https://example.com/book.xml --operation validate-xml
    """
    config = Config.from_cli_args(
        input=input,
        output=output,
        operation=operation,
        timeout=timeout,
        log_level=log_level.lower(),
        log_format=log_format,
    )

    logger = create_logger(
        level=config.logging.level,
        component="cli",
        destination=config.logging.destination,
        fmt=config.logging.format,
    )

    try:
        run(config)
    except AddressBookError as e:
        logger.error("Operation failed", error=str(e), errorCode=type(e).__name__)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)
    except Exception as e:
        logger.error("Unexpected error", error=str(e), type=type(e).__name__)
        click.echo(f"Unexpected error: {e}", err=True)
        if config.logging.level == LogLevel.DEBUG:
            import traceback
            traceback.print_exc()
        sys.exit(1)


def run(config: Config) -> None:
    """Carry out one invocation described by the configuration."""
    logger = create_logger(level=config.logging.level, component="cli",
                           destination=config.logging.destination, fmt=config.logging.format)

    errors = config.validate()
    if errors:
        raise UsageError("; ".join(errors))

    operation = config.operation
    logger.info("Starting", operation=operation.value, source=config.input_source)

    if operation.is_conversion:
        # Fail on an unusable destination before reading or converting anything
        ensure_writable(config.output_path)
    elif config.output_path:
        logger.warn("--output is ignored for validation", output=config.output_path)

    address_input = read_input(config.input_source, timeout=config.network_timeout,
                               log_level=config.logging.level, log_format=config.logging.format)

    if operation is Operation.VALIDATE_XML:
        if address_input.input_type is not InputType.XML:
            raise UnsupportedMimeTypeError(
                address_input.input_type.value, address_input.source, expected="xml for validate-xml"
            )
        validate(address_input.content, default_schema(), log_level=config.logging.level,
                 log_format=config.logging.format)
        click.echo("XML is valid!")
        return

    converter = Converter(
        conversion=config.conversion,
        serializer=config.serializer,
        log_level=config.logging.level,
        log_format=config.logging.format,
    )
    result = converter.convert(address_input, operation)
    destination = write_output(config.output_path, result.output)

    logger.info(
        "Conversion completed successfully",
        destination=str(destination),
        identity=result.identity,
        processingTime=result.processing_time,
    )
    click.echo(f"Wrote {result.target_type.name} output to {destination}")


if __name__ == "__main__":
    main()
