"""Command-line entry point: one mail in, one JSON document out."""

import logging
import sys

import click
from click import argument, echo, option
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from .config import DATE_FORMATS, ConfigError, load_config
from .document import mail_to_document, to_json
from .parsing import MessageParseError


def err(*args, **kwargs):
    """Print to stderr."""
    print(*args, file=sys.stderr, **kwargs)


def setup_logging(debug: bool = False) -> None:
    """Send mail2es log records to stderr through rich."""
    logger = logging.getLogger("mail2es")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    logger.addHandler(RichHandler(console=Console(stderr=True), show_time=False, show_path=False))
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@option('-c', '--config', 'config_path', type=click.Path(dir_okay=False), help="YAML config file (default: $MAIL2ES_CONFIG or ~/.config/mail2es/config.yaml)")
@option('-C', '--compact', is_flag=True, help="Print JSON on a single line")
@option('-d', '--debug', is_flag=True, help="Enable verbose mode: trace each part on stderr")
@option('-D', '--date-format', type=click.Choice(DATE_FORMATS), help="Emit date as epoch seconds or as the Date header text")
@argument('file', default="-", type=click.Path(dir_okay=False, allow_dash=True))
def main(
    config_path: str | None,
    compact: bool,
    debug: bool,
    date_format: str | None,
    file: str,
):
    """Produce JSON for Elasticsearch from the mail in FILE, or standard input, to standard output.

    \b
    With no FILE, or when FILE is -, read standard input.

    \b
    Examples:
      mail2es message.eml              # Pretty JSON on stdout
      mail2es -d - < message.eml       # Trace parts on stderr
      mail2es -C -D string message.eml # One line, Date header as text
    """
    load_dotenv()

    try:
        config = load_config(config_path)
    except ConfigError as e:
        err(f"Error: {e}")
        sys.exit(1)

    if date_format:
        config.date_format = date_format
    if compact:
        config.pretty = False
    if debug:
        config.verbose = True
    setup_logging(config.verbose)

    try:
        with click.open_file(file, "rb") as f:
            raw = f.read()
    except OSError as e:
        err(f"Cannot open mail: {file}: {e.strerror or e}")
        sys.exit(1)

    try:
        document = mail_to_document(raw, config, trace=err)
    except MessageParseError as e:
        err(f"Cannot parse mail: {file}: {e}")
        sys.exit(1)

    if config.verbose:
        err("--")
    echo(to_json(document, pretty=config.pretty))
