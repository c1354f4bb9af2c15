"""
Progress reporting utilities for ghsync.

Status lines and the progress bar go to stderr so stdout stays clean
for the structured summary. Worker threads report through the same
reporter, so writes are serialized.
"""

import os
import shutil
import sys
import threading
import time
from enum import Enum
from typing import Optional


class LogLevel(Enum):
    """Log levels for progress messages."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    SUCCESS = 4


class ProgressReporter:
    """Handles progress reporting to stderr while keeping stdout clean for data."""

    def __init__(self, enabled: Optional[bool] = None, use_unicode: Optional[bool] = None,
                 use_colors: Optional[bool] = None, stream=None):
        """
        Initialize progress reporter.

        Args:
            enabled: Explicitly enable/disable progress. None = auto-detect
            use_unicode: Use Unicode characters for marks and progress bars
            use_colors: Use ANSI colors in output
            stream: Output stream (defaults to sys.stderr at write time)
        """
        self._stream = stream
        out = self.stream

        if enabled is None:
            self.enabled = out.isatty()
        else:
            self.enabled = enabled

        if use_unicode is None:
            encoding = getattr(out, 'encoding', None) or ''
            self.use_unicode = encoding.lower() in ['utf-8', 'utf8']
        else:
            self.use_unicode = use_unicode

        if use_colors is None:
            self.use_colors = out.isatty() and os.environ.get('NO_COLOR') is None
        else:
            self.use_colors = use_colors

        self._lock = threading.Lock()

        self.colors = {
            'reset': '\033[0m',
            'bold': '\033[1m',
            'dim': '\033[2m',
            'red': '\033[31m',
            'green': '\033[32m',
            'yellow': '\033[33m',
            'blue': '\033[34m',
            'cyan': '\033[36m',
        }

        if self.use_unicode:
            self.marks = {'success': '✓', 'error': '✗', 'warning': '⚠'}
            self.bar_chars = {'filled': '█', 'empty': '░', 'start': '│', 'end': '│'}
        else:
            self.marks = {'success': '+', 'error': 'x', 'warning': '!'}
            self.bar_chars = {'filled': '#', 'empty': '-', 'start': '[', 'end': ']'}

    @property
    def stream(self):
        return self._stream if self._stream is not None else sys.stderr

    def colorize(self, text: str, color: str) -> str:
        """Add color to text if colors are enabled."""
        if self.use_colors and color in self.colors:
            return f"{self.colors[color]}{text}{self.colors['reset']}"
        return text

    def _write(self, text: str, end: str = "\n") -> None:
        with self._lock:
            print(text, end=end, file=self.stream, flush=True)

    def __call__(self, message: str, force: bool = False, level: LogLevel = LogLevel.INFO,
                 color: Optional[str] = None):
        """
        Output progress message to stderr if enabled.

        Args:
            message: Progress message to display
            force: Force output even if disabled
            level: Log level for the message
            color: Explicit color overriding the level's color
        """
        if not (force or self.enabled):
            return

        if level == LogLevel.ERROR:
            message = self.colorize(f"{self.marks['error']} {message}", color or 'red')
        elif level == LogLevel.WARNING:
            message = self.colorize(f"{self.marks['warning']} {message}", color or 'yellow')
        elif level == LogLevel.SUCCESS:
            message = self.colorize(f"{self.marks['success']} {message}", color or 'green')
        elif level == LogLevel.DEBUG:
            message = self.colorize(f"  {message}", color or 'dim')
        elif color:
            message = self.colorize(message, color)

        self._write(message)

    def error(self, message: str):
        """Always output errors to stderr."""
        self._write(self.colorize(f"ERROR: {message}", 'red'))

    def warning(self, message: str):
        """Output warnings to stderr if enabled."""
        if self.enabled:
            self._write(self.colorize(f"WARNING: {message}", 'yellow'))

    def failure(self, message: str):
        """Per-item failure line; shown even when progress is disabled."""
        self(message, force=True, level=LogLevel.ERROR)

    def progress_bar(self, total: int, description: str = "") -> 'ProgressBar':
        """
        Create a progress bar.

        Args:
            total: Total number of items
            description: Optional description

        Returns:
            ProgressBar instance
        """
        return ProgressBar(self, total, description)


# Global progress reporter instance
_progress = None


def get_progress(enabled: Optional[bool] = None) -> ProgressReporter:
    """
    Get the global progress reporter.

    Args:
        enabled: Override auto-detection of progress display

    Returns:
        ProgressReporter instance
    """
    global _progress
    if _progress is None or enabled is not None:
        _progress = ProgressReporter(enabled)
    return _progress


# Environment variable override
if os.environ.get('GHSYNC_PROGRESS') == '0':
    _progress = ProgressReporter(enabled=False)
elif os.environ.get('GHSYNC_PROGRESS') == '1':
    _progress = ProgressReporter(enabled=True)


class ProgressBar:
    """Progress bar for tracking dispatch over the discovered repositories."""

    def __init__(self, reporter: ProgressReporter, total: int, description: str = ""):
        self.reporter = reporter
        self.total = total
        self.description = description
        self.current = 0
        self.start_time = time.time()
        self.last_update: float = 0.0
        self._last_decile = -1

    def set(self, value: int, item: str = ""):
        """Set progress to specific value."""
        self.current = value
        self._render(item)

    def _render(self, item: str = ""):
        """Render the progress bar."""
        if not self.reporter.enabled:
            return

        # Rate limit updates
        current_time = time.time()
        if current_time - self.last_update < 0.1 and self.current < self.total:
            return
        self.last_update = current_time

        total = self.total or 1
        percent = min(100, int(100 * self.current / total))
        filled = min(40, int(40 * self.current / total))

        bar = self.reporter.bar_chars['start']
        bar += self.reporter.bar_chars['filled'] * filled
        bar += self.reporter.bar_chars['empty'] * (40 - filled)
        bar += self.reporter.bar_chars['end']

        msg = f"{self.description} {bar} {percent:3d}% ({self.current}/{self.total})"
        if item:
            msg += f" {item}"

        stream = self.reporter.stream
        if stream.isatty():
            terminal_width = shutil.get_terminal_size().columns
            self.reporter._write(f"\r{msg[:terminal_width]:<{terminal_width}}", end="")
        elif percent // 10 != self._last_decile or self.current == self.total:
            # Non-TTY: one line per 10% step
            self._last_decile = percent // 10
            self.reporter(f"{self.description}: {percent}% ({self.current}/{self.total})")

    def close(self):
        """Finish the progress bar."""
        if self.reporter.enabled and self.reporter.stream.isatty():
            self.reporter._write("")
