"""
Core PDF renaming logic
"""

import os
from pathlib import Path
from typing import List, Optional

from .errors import DocumentError, JsonDecodeError, JsonRepairError, RenameError
from .llm_client import IntelligenceClient
from .logger import Logger
from .models import CandidateFile, DocumentIntelligence, ProcessResult
from .prompts import PromptBuilder
from .response_parser import ResponseParser
from .stats import ProcessingStats


class PDFRenamer:
    """Run the render, request, parse, rename pipeline over candidate files"""

    def __init__(
        self,
        renderer,
        prompt_builder: PromptBuilder,
        client: IntelligenceClient,
        response_parser: Optional[ResponseParser] = None,
        dry_run: bool = False,
        logger: Optional[Logger] = None,
    ):
        self.renderer = renderer
        self.prompt_builder = prompt_builder
        self.client = client
        self.response_parser = response_parser or ResponseParser()
        self.dry_run = dry_run
        self.logger = logger or Logger()
        self.stats = ProcessingStats()

    def get_document_intelligence(self, candidate: CandidateFile) -> DocumentIntelligence:
        rendered = self.renderer.render(candidate.path)
        self.logger.debug(f"Rendered {candidate.name} ({len(rendered.data)} bytes, {rendered.kind})")

        request = self.prompt_builder.build(candidate, rendered)
        answer = self.client.send(request)
        self.logger.debug(f"Model answer for {candidate.name}: {answer!r}")

        return self.response_parser.parse(answer)

    def process_pdf(self, candidate: CandidateFile) -> ProcessResult:
        """Process a single PDF; document errors are reported, not raised"""
        self.logger.info(f"Processing {candidate.name}")
        try:
            intelligence = self.get_document_intelligence(candidate)
            return self._apply_filename(candidate, intelligence)
        except DocumentError as e:
            self._report_failure(candidate, e)
            return ProcessResult(candidate.path, "failed", error=str(e))

    def _report_failure(self, candidate: CandidateFile, error: DocumentError):
        self.logger.error(f"{candidate.path}: {type(error).__name__}: {error}")
        if isinstance(error, JsonDecodeError):
            self.logger.debug(f"Repaired JSON for {candidate.name}: {error.repaired_text!r}")
        elif isinstance(error, JsonRepairError):
            self.logger.debug(f"Raw answer for {candidate.name}: {error.original_text!r}")

    def _apply_filename(
        self, candidate: CandidateFile, intelligence: DocumentIntelligence
    ) -> ProcessResult:
        name_part = (intelligence.filename or "").strip()
        if not name_part:
            self.logger.info(
                f"LLM did not suggest a filename for {candidate.name}. Skipping rename."
            )
            return ProcessResult(candidate.path, "no_action")

        if os.sep in name_part or (os.altsep and os.altsep in name_part):
            raise RenameError(f"Suggested filename {name_part!r} contains a path separator")
        if "\x00" in name_part:
            raise RenameError(f"Suggested filename {name_part!r} contains a NUL byte")

        new_name = f"{name_part}.pdf"
        new_path = candidate.path.with_name(new_name)

        if new_path == candidate.path:
            self.logger.info(f"⊘ {candidate.name}: Already has same name, skipping")
            return ProcessResult(candidate.path, "no_action", new_name=new_name)

        if self.dry_run:
            self.logger.info(f"Not renaming {candidate.name} to {new_name} (dry-run)")
            return ProcessResult(candidate.path, "dry_run", new_name=new_name)

        return self._rename_file(candidate, new_path)

    def _rename_file(self, candidate: CandidateFile, new_path: Path) -> ProcessResult:
        try:
            if new_path.exists():
                raise RenameError(
                    f"Cannot rename {candidate.name}: {new_path.name} already exists"
                )
            candidate.path.rename(new_path)
        except (OSError, ValueError) as e:
            raise RenameError(f"Cannot rename {candidate.name} to {new_path.name}: {e}") from e

        self.logger.info(f"✓ Renamed {candidate.name} to {new_path.name}")
        return ProcessResult(candidate.path, "renamed", new_name=new_path.name)

    def batch_process(self, candidates: List[CandidateFile]) -> dict:
        """Process candidates one at a time, in order"""
        results = {"renamed": [], "no_action": [], "failed": []}
        total = len(candidates)

        if total == 0:
            self.logger.warning("No PDF files to process")
            return results

        self.logger.info(f"Found {total} file(s) to process")
        self.logger.info(f"Mode: {'DRY RUN' if self.dry_run else 'RENAME'}")

        for i, candidate in enumerate(candidates, 1):
            self.logger.info(f"[{i}/{total}] {candidate.path}")
            result = self.process_pdf(candidate)
            self.stats.record(result.status)

            if result.status in ("renamed", "dry_run"):
                results["renamed"].append(
                    {
                        "original": candidate.name,
                        "new": result.new_name,
                        "dry_run": result.status == "dry_run",
                    }
                )
            elif result.status == "no_action":
                results["no_action"].append({"file": candidate.name})
            else:
                results["failed"].append({"file": str(candidate.path), "error": result.error})

        print("\n" + "=" * 70)
        print(str(self.stats))

        if results["failed"]:
            print("Failed files:")
            for item in results["failed"]:
                print(f"  - {item['file']}: {item['error']}")

        return results

    def close(self):
        self.client.close()
