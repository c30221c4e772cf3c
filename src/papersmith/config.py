"""
CLI configuration and environment settings
"""

import argparse
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from . import __version__
from .errors import ConfigError
from .llm_client import DEFAULT_BASE_URL, TRANSPORTS

GLOB_PATTERN_ENV = "PAPERSMITH_GLOB_PATTERN"
API_KEY_ENV = "OPENAI_API_KEY"
BASE_URL_ENV = "OPENAI_BASE_URL"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_N_PAGES = 3


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {number}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser"""
    parser = argparse.ArgumentParser(
        prog="papersmith",
        description="Classify and rename PDFs using a vision-language model",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Environment:
  {API_KEY_ENV}           API key for the model endpoint (required)
  {BASE_URL_ENV}          Endpoint base URL (default: {DEFAULT_BASE_URL})
  {GLOB_PATTERN_ENV}  Glob pattern used when --glob-pattern is blank
""",
    )

    parser.add_argument(
        "-g",
        "--glob-pattern",
        default="",
        help=f"Glob pattern of PDFs to process (default: ${GLOB_PATTERN_ENV})",
    )

    parser.add_argument(
        "-m",
        "--model",
        default=DEFAULT_MODEL,
        help=f"Model identifier (default: {DEFAULT_MODEL})",
    )

    parser.add_argument(
        "-n",
        "--n-pages",
        type=positive_int,
        default=DEFAULT_N_PAGES,
        help=f"Pages to render in image mode (default: {DEFAULT_N_PAGES})",
    )

    parser.add_argument(
        "-d",
        "--dry-run",
        action="store_true",
        help="Report the renames without touching any file",
    )

    parser.add_argument(
        "-t",
        "--transport",
        choices=sorted(TRANSPORTS),
        default="image",
        help="image: stitched pages over chat completions; "
        "pdf: raw PDF over the responses API (default: image)",
    )

    parser.add_argument(
        "--filename-hint",
        action="store_true",
        help="Include the current filename in the prompt as a hint",
    )

    parser.add_argument(
        "--base-url",
        default=None,
        help=f"Endpoint base URL (default: ${BASE_URL_ENV} or {DEFAULT_BASE_URL})",
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = create_parser()
    return parser.parse_args(argv)


def resolve_glob_pattern(cli_value: str, environ: Mapping[str, str]) -> str:
    """Command-line pattern first, environment variable as fallback"""
    if cli_value:
        return cli_value

    env_value = environ.get(GLOB_PATTERN_ENV)
    if env_value is None:
        raise ConfigError(
            f"--glob-pattern was blank and {GLOB_PATTERN_ENV} is not set"
        )
    if not env_value.strip():
        raise ConfigError(
            f"--glob-pattern was blank and {GLOB_PATTERN_ENV} is also blank"
        )
    return env_value


def load_api_key(environ: Mapping[str, str]) -> str:
    api_key = environ.get(API_KEY_ENV, "").strip()
    if not api_key:
        raise ConfigError(f"{API_KEY_ENV} is not set. Add it to .env or the environment.")
    return api_key


def resolve_base_url(cli_value: Optional[str], environ: Mapping[str, str]) -> str:
    return cli_value or environ.get(BASE_URL_ENV) or DEFAULT_BASE_URL


@dataclass(frozen=True)
class Settings:
    """Run-wide configuration, resolved once at startup"""

    glob_pattern: str
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    n_pages: int = DEFAULT_N_PAGES
    dry_run: bool = False
    transport: str = "image"
    filename_hint: bool = False
    verbose: bool = False

    @classmethod
    def from_args(
        cls, args: argparse.Namespace, environ: Optional[Mapping[str, str]] = None
    ) -> "Settings":
        environ = os.environ if environ is None else environ
        return cls(
            glob_pattern=resolve_glob_pattern(args.glob_pattern, environ),
            api_key=load_api_key(environ),
            base_url=resolve_base_url(args.base_url, environ),
            model=args.model,
            n_pages=args.n_pages,
            dry_run=args.dry_run,
            transport=args.transport,
            filename_hint=args.filename_hint,
            verbose=args.verbose,
        )
