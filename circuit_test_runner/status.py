"""Human-facing status lines for a test run.

Every test gets exactly one line: ``[pkg] Testing name... ok`` or
``[pkg] Testing name... failed``. The line prefix is written and flushed before
the test runs, so a hanging test is visibly attributed.
"""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Literal

from rich.console import Console
from rich.text import Text

type ColorChoice = Literal["always", "auto", "never"]


def make_console(color: ColorChoice = "always") -> Console:
    """Build the stderr console used for status lines.

    ``always`` keeps colors when stderr is piped, as in CI logs.
    """
    match color:
        case "always":
            return Console(stderr=True, force_terminal=True)
        case "never":
            return Console(stderr=True, no_color=True)
    return Console(stderr=True)


@dataclass(kw_only=True)
class StatusSink:
    """Writes per-test status lines to a console."""

    console: Console = field(default_factory=make_console)
    _line_open: bool = field(default=False, init=False)

    def running(self, package_name: str, count: int) -> None:
        plural = "" if count == 1 else "s"
        self._print(Text(f"[{package_name}] Running {count} test function{plural}"))

    @contextmanager
    def test_line(self, package_name: str, test_name: str) -> Iterator[None]:
        """Open the status line for one test and close it on every exit path."""
        self.console.print(
            Text(f"[{package_name}] Testing {test_name}... "),
            end="",
            soft_wrap=True,
        )
        self.console.file.flush()
        self._line_open = True
        try:
            yield
        finally:
            if self._line_open:
                self._print(Text(""))

    def ok(self) -> None:
        self._print(Text("ok", style="green"))

    def failed(self, reason: str | None = None) -> None:
        """Terminate the current line with a red failure marker."""
        self._print(Text("failed", style="red"))
        if reason:
            self._print(Text(f"  {reason}"))

    def output(self, lines: Sequence[str]) -> None:
        """Show print output captured while compiling a test."""
        for line in lines:
            self._print(Text(f"  {line}"))

    def circuit(self, test_name: str, circuit: object) -> None:
        self._print(Text(f"Optimized circuit for '{test_name}':\n{circuit}"))

    def all_passed(self, package_name: str) -> None:
        self._print(
            Text.assemble(f"[{package_name}] ", ("All tests passed", "green"))
        )

    def _print(self, text: Text) -> None:
        # Lines are never wrapped at the console width.
        self.console.print(text, highlight=False, soft_wrap=True)
        self._line_open = False
