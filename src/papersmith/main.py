"""
Main entry point and orchestration
"""

import os
import sys
from typing import Optional, Sequence

from dotenv import load_dotenv

from .config import Settings, parse_args
from .errors import FatalError
from .file_collector import FileCollector
from .llm_client import create_client
from .logger import Logger
from .pdf_utils import ImageStitchRenderer, PdfBytesRenderer
from .prompts import PromptBuilder, PromptTemplate
from .renamer import PDFRenamer

EXIT_OK = 0
EXIT_DOCUMENT_ERRORS = 1
EXIT_FATAL = 2


def create_renderer(settings: Settings):
    if settings.transport == "pdf":
        return PdfBytesRenderer()
    return ImageStitchRenderer(n_pages=settings.n_pages)


def create_renamer(settings: Settings, logger: Logger) -> PDFRenamer:
    """Wire the pipeline for the configured transport"""
    client = create_client(settings.transport, settings.api_key, settings.base_url)
    template = PromptTemplate.default(filename_hint=settings.filename_hint)
    return PDFRenamer(
        renderer=create_renderer(settings),
        prompt_builder=PromptBuilder(template, settings.model),
        client=client,
        dry_run=settings.dry_run,
        logger=logger,
    )


def run(settings: Settings, logger: Logger) -> int:
    collector = FileCollector(logger)
    paths = collector.collect_files(settings.glob_pattern)
    candidates = collector.select_candidates(paths)

    renamer = create_renamer(settings, logger)
    renamer.stats.skipped = len(paths) - len(candidates)
    logger.debug(f"Using model {settings.model} over {settings.transport} transport")
    try:
        renamer.batch_process(candidates)
    finally:
        renamer.close()

    return EXIT_OK if renamer.stats.failed == 0 else EXIT_DOCUMENT_ERRORS


def main(argv: Optional[Sequence[str]] = None):
    """Main entry point"""
    load_dotenv()
    args = parse_args(argv)
    logger = Logger(args.verbose)

    try:
        settings = Settings.from_args(args, os.environ)
        exit_code = run(settings, logger)
    except FatalError as e:
        logger.error(str(e))
        sys.exit(EXIT_FATAL)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
