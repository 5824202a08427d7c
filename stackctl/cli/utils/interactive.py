"""Interactive utilities for CLI commands"""

from typing import Iterable, List, Optional

from rich.console import Console
from rich.prompt import Confirm


class ConsoleConfirmation:
    """Asks yes/no questions on the terminal

    Anything other than an explicit yes, including end of input, is a no.
    """

    def __init__(self, console: Console = None):
        self.console = console or Console()

    def ask(self, prompt: str) -> bool:
        try:
            return Confirm.ask(f"[cyan]{prompt}[/cyan]", default=False, console=self.console)
        except EOFError:
            self.console.print()
            return False


class ScriptedConfirmation:
    """Answers prompts from a fixed list, for non-interactive runs

    Once the answers run out every further prompt is declined.
    """

    def __init__(self, answers: Optional[Iterable[bool]] = None):
        self._answers = list(answers or [])
        self.prompts: List[str] = []

    def ask(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        if not self._answers:
            return False
        return bool(self._answers.pop(0))
