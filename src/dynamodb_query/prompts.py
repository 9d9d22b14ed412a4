"""Interactive prompts for DynamoDB Query Tool."""

import sys
from typing import Optional, Sequence


class Prompter:
    """Line-oriented prompts on top of ``input()``.

    Menus and hints go to ``stream`` (stderr by default) so stdout only ever
    carries query results.
    """

    def __init__(self, input_func=None, stream=None):
        self.input_func = input_func if input_func is not None else input
        self.stream = stream if stream is not None else sys.stderr

    def _write(self, message):
        print(message, file=self.stream)

    def _ask(self, message):
        return self.input_func(f"{message}: ")

    def text(self, message: str) -> str:
        """Ask for a free-form value, returned exactly as typed"""
        return self._ask(message)

    def select(self, message: str, choices: Sequence[str], default: Optional[str] = None) -> str:
        """Ask the operator to pick one entry, by number or by exact text."""
        if not choices:
            raise ValueError(f"No choices available for: {message}")

        self._write(f"{message}:")
        for position, choice in enumerate(choices, start=1):
            marker = " (default)" if choice == default else ""
            self._write(f"  {position}) {choice}{marker}")

        while True:
            answer = self._ask("Choice").strip()
            if not answer and default is not None:
                return default
            if answer.isdigit() and 1 <= int(answer) <= len(choices):
                return choices[int(answer) - 1]
            if answer in choices:
                return answer
            self._write(f"Please enter a number between 1 and {len(choices)}.")

    def confirm(self, message: str, default: bool = True) -> bool:
        """Ask a yes/no question"""
        hint = "Y/n" if default else "y/N"
        while True:
            answer = self._ask(f"{message} [{hint}]").strip().lower()
            if not answer:
                return default
            if answer in ["yes", "y"]:
                return True
            elif answer in ["no", "n"]:
                return False
            else:
                self._write("Please answer 'yes' or 'no'.")
