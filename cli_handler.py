"""Command-line argument parsing and validation."""

from __future__ import annotations

import argparse
import logging
import math
from pathlib import Path
from typing import List, Optional

from config import DEFAULT_MEASUREMENT_SCALE, DEFAULT_RENDER_SCALE, DEFAULT_SEARCH_PHRASE, LocatorConfig

logger = logging.getLogger(__name__)


class CLIHandler:
    """Handle command-line argument parsing and validation."""

    @staticmethod
    def positive_float(value: str) -> float:
        """
        Parse a strictly positive, finite float argument.

        Raises:
            argparse.ArgumentTypeError: If value is not a positive number
        """
        try:
            number = float(value)
        except ValueError as e:
            raise argparse.ArgumentTypeError(f"Not a number: {value}") from e

        if not math.isfinite(number) or number <= 0:
            raise argparse.ArgumentTypeError(f"Must be a positive number: {value}")
        return number

    @staticmethod
    def build_parser() -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            description="Locate a phrase in a PDF and compute highlight rectangles for a rendered view",
            formatter_class=argparse.RawDescriptionHelpFormatter
        )

        parser.add_argument(
            'pdf_path',
            type=str,
            help='Path to input PDF file'
        )

        parser.add_argument(
            '--phrase',
            type=str,
            default=DEFAULT_SEARCH_PHRASE,
            help=f'Phrase to locate (exact, case-sensitive). Default: "{DEFAULT_SEARCH_PHRASE}"'
        )

        parser.add_argument(
            '--render-scale',
            type=CLIHandler.positive_float,
            default=DEFAULT_RENDER_SCALE,
            metavar='SCALE',
            help=f'Scale at which pages are displayed (default: {DEFAULT_RENDER_SCALE})'
        )

        parser.add_argument(
            '--measurement-scale',
            type=CLIHandler.positive_float,
            default=DEFAULT_MEASUREMENT_SCALE,
            metavar='SCALE',
            help='Scale at which fragment widths were measured '
                 f'(default: {DEFAULT_MEASUREMENT_SCALE})'
        )

        parser.add_argument(
            '--save-json',
            type=str,
            nargs='?',
            const='',
            default=None,
            metavar='FILENAME',
            help='Save highlight data to JSON file. '
                 'If flag is provided without filename, uses default: {pdfname}_highlights.json. '
                 'If filename is provided, uses that name.'
        )

        parser.add_argument(
            '--no-annotate',
            action='store_true',
            help='Do not write a {pdfname}_highlighted.pdf copy with highlight annotations'
        )

        parser.add_argument(
            '--encryption-password',
            type=str,
            default=None,
            metavar='PASSWORD',
            help='Password for encrypted PDF. If provided, PDF will be decrypted using this password.'
        )

        parser.add_argument(
            '--log-level',
            type=str,
            default='INFO',
            choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
            help='Set logging level (default: INFO)'
        )

        return parser

    @staticmethod
    def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
        """
        Parse command-line arguments.

        Args:
            argv: Argument list; defaults to sys.argv[1:]

        Returns:
            Parsed arguments namespace
        """
        return CLIHandler.build_parser().parse_args(argv)

    @staticmethod
    def validate_arguments(args: argparse.Namespace) -> bool:
        """
        Validate parsed arguments.

        Args:
            args: Parsed arguments namespace

        Returns:
            True if arguments are valid

        Raises:
            ValueError: If arguments are invalid
        """
        pdf_path = Path(args.pdf_path)
        if not pdf_path.exists():
            raise ValueError(f"PDF file not found: {pdf_path}")

        if not pdf_path.is_file():
            raise ValueError(f"Path is not a file: {pdf_path}")

        if pdf_path.suffix.lower() != '.pdf':
            raise ValueError(f"File is not a PDF: {pdf_path}")

        if not args.phrase.strip():
            raise ValueError("--phrase cannot be empty")

        return True

    @staticmethod
    def build_config(args: argparse.Namespace) -> LocatorConfig:
        """Build the locator configuration from parsed arguments."""
        return LocatorConfig(
            phrase=args.phrase,
            render_scale=args.render_scale,
            measurement_scale=args.measurement_scale
        )
