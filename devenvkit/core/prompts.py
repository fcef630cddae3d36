"""
Interactive prompts.

The setup is often started as ``curl ... | sh``-style one-liners, so standard
input may be a pipe. TerminalPrompt therefore reads answers from the
controlling terminal (/dev/tty) rather than stdin. ScriptedPrompt replays
canned answers and lets the pipeline run without a terminal.
"""

import logging
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List, Optional

from rich.console import Console
from rich.markup import escape

from devenvkit.core.exceptions import PromptError

logger = logging.getLogger(__name__)

TTY_PATH = Path("/dev/tty")

YES_ANSWERS = ("y", "yes")


class PromptProvider(ABC):
    """Source of answers to interactive questions."""

    @abstractmethod
    def ask(self, message: str) -> str:
        """Ask a free-text question and return the stripped answer."""
        pass

    def confirm(self, message: str) -> bool:
        """Ask a y/n question. Only 'y' or 'yes' (any case) count as yes."""
        return self.ask(f"{message} (y/n):").lower() in YES_ANSWERS


class TerminalPrompt(PromptProvider):
    """Read answers from the controlling terminal."""

    def __init__(self, console: Optional[Console] = None, tty_path: Path = TTY_PATH):
        self.console = console or Console(highlight=False)
        self.tty_path = tty_path

    def ask(self, message: str) -> str:
        prompt = f"{escape(message)} "
        try:
            with open(self.tty_path, "r") as tty:
                answer = self.console.input(prompt, stream=tty)
        except OSError:
            if not sys.stdin.isatty():
                raise PromptError(
                    f"Cannot ask '{message}': no terminal available. "
                    "Run the setup from an interactive shell."
                )
            logger.debug(f"{self.tty_path} unavailable, reading from stdin")
            answer = self.console.input(prompt)
        return answer.strip()


class ScriptedPrompt(PromptProvider):
    """Replay a fixed list of answers in order."""

    def __init__(self, answers: Iterable[str]):
        self.answers: List[str] = list(answers)
        self.asked: List[str] = []

    def ask(self, message: str) -> str:
        self.asked.append(message)
        if not self.answers:
            raise PromptError(f"No scripted answer left for: {message}")
        answer = self.answers.pop(0)
        logger.debug(f"Scripted answer for '{message}': {answer!r}")
        return answer.strip()
