"""Main entry point for the phrase highlighter application."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

from cli_handler import CLIHandler
from exceptions import PDFDecryptionError, PhraseLocatorException
from highlight_state import HighlightPhase, HighlightStateMachine
from json_exporter import JSONExporter
from page_scanner import PageScanner
from pdf_annotator import HighlightAnnotator
from pdf_reader import PDFTextSource
from scroll_target import resolve_scroll_target

logger = logging.getLogger(__name__)


async def run(args) -> HighlightStateMachine:
    """
    Locate the phrase in the PDF and write the requested outputs.

    Args:
        args: Validated command-line arguments

    Returns:
        Highlight state after the search
    """
    config = CLIHandler.build_config(args)
    pdf_path = Path(args.pdf_path)
    state = HighlightStateMachine()

    source = PDFTextSource(pdf_path)
    source.validate_path()
    source.open_pdf()

    try:
        try:
            source.decrypt_pdf(password=args.encryption_password)
        except PDFDecryptionError:
            if not args.encryption_password:
                logger.error("Please provide --encryption-password if PDF is encrypted")
            raise

        state.set_document(source.document_id)
        scanner = PageScanner(source, config)
        phase = await state.locate(scanner)

        if phase is HighlightPhase.POPULATED:
            target = resolve_scroll_target(state.highlights)
            pages = ', '.join(str(h.page_number) for h in state.highlights)
            logger.info(f"Phrase found on page(s): {pages}")
            if target is not None:
                center_x, center_y = target.center
                logger.info(
                    f"Scroll to page {target.page_number}, "
                    f"centre ({center_x:.1f}, {center_y:.1f}) px"
                )

            if not args.no_annotate:
                annotator = HighlightAnnotator(source.pdf_document, pdf_path, config.render_scale)
                annotator.draw_highlights(state.highlights)
                annotator.save_pdf()  # Saves as new file with _highlighted suffix
        else:
            logger.warning(
                f"Phrase not found: {config.phrase!r}. Matching is exact and "
                f"case-sensitive; check the page manually if the text was extracted differently."
            )

        if args.save_json is not None:
            json_exporter = JSONExporter(pdf_path)
            pdf_metadata = source.get_pdf_metadata()
            # Empty string means the flag was given without a filename
            output_filename = None if args.save_json == '' else args.save_json
            output_path = json_exporter.export(
                state,
                config,
                output_filename=output_filename,
                total_pages=pdf_metadata['total_pages']
            )
            logger.info(f"JSON exported to: {output_path}")

    finally:
        # Ensure PDF is always closed, even if errors occur
        source.close()

    return state


def main():
    """Main entry point for the phrase highlighter."""
    try:
        args = CLIHandler.parse_arguments()

        # Configure logging with user's preferred level
        logging.basicConfig(
            level=getattr(logging, args.log_level),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        CLIHandler.validate_arguments(args)
        logger.info(f"Processing PDF: {args.pdf_path}")

        asyncio.run(run(args))

        logger.info("Phrase location completed successfully")

    except PhraseLocatorException as e:
        logger.error(f"Phrase Locator Error: {e}")
        sys.exit(1)
    except ValueError as e:
        logger.error(f"Validation Error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Process interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
