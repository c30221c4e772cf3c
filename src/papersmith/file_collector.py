"""
File collection and candidate selection
"""

import glob
import os
import re
from pathlib import Path
from typing import Iterable, List, Optional

from .errors import EnumerationError
from .logger import Logger
from .models import CandidateFile

# Files renamed by a previous run start with an 8-digit date stamp
PROCESSED_NAME_PATTERN = re.compile(r"[0-9]{8}.*\.pdf")


def has_unclosed_bracket(pattern: str) -> bool:
    """True when a `[` character class in a glob pattern is never closed"""
    i = pattern.find("[")
    while i != -1:
        j = i + 1
        if pattern[j : j + 1] == "!":
            j += 1
        # A `]` right after the opening bracket is a literal member
        if pattern[j : j + 1] == "]":
            j += 1
        close = pattern.find("]", j)
        if close == -1:
            return True
        i = pattern.find("[", close + 1)
    return False


def is_already_processed(name: str) -> bool:
    """True when a base name already follows the YYYYMMDD-...pdf convention"""
    return PROCESSED_NAME_PATTERN.fullmatch(name) is not None


class FileCollector:
    """Expand the glob pattern and pick the files worth sending to the model"""

    def __init__(self, logger: Optional[Logger] = None):
        self.logger = logger or Logger()

    def collect_files(self, pattern: str) -> List[Path]:
        """Expand a shell-style glob into regular files, sorted by path"""
        if "\x00" in pattern:
            raise EnumerationError(f"Invalid glob pattern {pattern!r}: embedded NUL byte")
        if has_unclosed_bracket(pattern):
            raise EnumerationError(f"Invalid glob pattern {pattern!r}: unclosed '['")
        try:
            matches = sorted(glob.glob(pattern, recursive=True))
        except OSError as e:
            raise EnumerationError(f"Cannot expand glob pattern {pattern!r}: {e}") from e

        files = []
        for match in matches:
            path = Path(match)
            if not path.is_file():
                self.logger.debug(f"Ignoring {match}: not a regular file")
                continue
            if not os.access(path, os.R_OK):
                raise EnumerationError(f"Cannot read {match}")
            files.append(path)
        return files

    def select_candidates(self, paths: Iterable[Path]) -> List[CandidateFile]:
        """Drop already processed files; input order is kept as-is"""
        candidates = []
        for path in paths:
            path = Path(path)
            if is_already_processed(path.name):
                self.logger.debug(f"Skipping {path.name}")
                continue
            candidates.append(CandidateFile(path))
        return candidates
