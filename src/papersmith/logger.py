"""
Console logger for papersmith

Every pipeline stage reports through one Logger built in main(), so per-file
progress, rename reports and failures share a single timestamped stream.
"""

import sys
from datetime import datetime


class Logger:
    """Timestamped console output for a rename run.

    DEBUG lines (skipped names, rendered sizes, raw model answers) are only
    printed with --verbose. `stream` defaults to stdout at call time so tests
    capturing stdout see the output.
    """

    def __init__(self, verbose: bool = False, stream=None):
        self.verbose = verbose
        self.stream = stream

    def log(self, message: str, level: str = "INFO"):
        if level == "DEBUG" and not self.verbose:
            return
        timestamp = datetime.now().strftime("%H:%M:%S")
        print(
            f"[{timestamp}] {level}: {message}",
            file=self.stream or sys.stdout,
            flush=True,
        )

    def debug(self, message: str):
        self.log(message, "DEBUG")

    def info(self, message: str):
        self.log(message, "INFO")

    def warning(self, message: str):
        self.log(message, "WARNING")

    def error(self, message: str):
        """Per-file failures and fatal configuration errors"""
        self.log(message, "ERROR")
