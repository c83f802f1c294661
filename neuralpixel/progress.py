"""Following the generator's console output to report progress and load errors."""

from __future__ import annotations

import enum
import re

DECODING_LABEL = "Decoding latent(s)..."
LOAD_ERROR_TITLE = "Error loading file"
MAX_TRACKED_STEPS = 61

_BATCH_PATTERN = re.compile(r"\s*([+-]?\d+)(?:/\s*([+-]?\d+))?")
_STEP_PATTERN = re.compile(r"\s*([+-]?\d+)/\s*([+-]?\d+)")
_LOAD_ERROR_PATTERN = re.compile(
    r"\[ERROR\]\s*stable-diffusion\.cpp:\s*[+-]?\d+\s*-\s*init\s*model\s*loader"
    r"\s*from\s*file\s*failed:\s*'([^']{1,255})"
)


class NewlineMode(enum.Enum):
    """Character that ends a line in the generator's standard output."""

    LF = "\n"
    CR = "\r"


class ProgressTracker:
    """Turns standard output lines of a generation run into button labels.

    While an image is being sampled the generator redraws its progress bar
    with carriage returns, so ``newline`` tells the reader which character
    currently separates lines.
    """

    def __init__(self) -> None:
        self.image = 1
        self.total = 1
        self.newline = NewlineMode.LF
        self.label: str | None = None

    def _show(self, label: str) -> str:
        self.label = label
        return label

    def feed_stdout(self, line: str) -> str | None:
        """Process one output line; return the new label when it changes."""
        if "sampling completed" in line and self.image == self.total:
            return self._show(DECODING_LABEL)

        if "generating image:" in line:
            rest = line[line.rindex(":") + 1 :]
            if not rest.strip():
                self.newline = NewlineMode.CR
                return None
            match = _BATCH_PATTERN.match(rest)
            if match:
                self.image = int(match.group(1))
                if match.group(2) is not None:
                    self.total = int(match.group(2))
                self.newline = NewlineMode.CR
            return None

        _, pipe, rest = line.rpartition("|")
        if not pipe:
            return None
        match = _STEP_PATTERN.match(rest)
        if not match:
            return None
        step, steps = int(match.group(1)), int(match.group(2))
        if steps <= 0 or steps >= MAX_TRACKED_STEPS:
            return None
        percent = int(step / steps * 100 + 0.5)
        if step == steps - 1:
            self.newline = NewlineMode.LF
        return self._show(f"Sampling... {percent}% {self.image}/{self.total}")


def parse_load_error(line: str) -> str | None:
    """Message for a model file the generator failed to load, or None."""
    match = _LOAD_ERROR_PATTERN.match(line)
    if match is None:
        return None
    return f"Error loading: {match.group(1)}"