"""Interactive session with a remote NUnit runner.

A session walks through a fixed exchange:
- SELECTING: which tests to run (typed list, failed.txt, or none)
- EXCLUDING: which tests to skip (typed list, passed.txt, or none)
- STREAMING: progress lines are echoed and recorded until "Run finished"
- FINISHED: the result XML is stored and rendered to HTML

Premature end of stream moves the session to FAILED; nothing is retried.
"""

import logging
import sys
import webbrowser
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, TextIO

from .connection import LineConnection
from .errors import InputNotFound, RunnerError
from .protocol import LineKind, parse_line, parse_payload
from .renderer import ReportRenderer

logger = logging.getLogger(__name__)

FAILED_FILE = "failed.txt"
PASSED_FILE = "passed.txt"
RESULT_XML = "TestResult.xml"
RESULT_HTML = "TestResult.html"
RESULT_ENCODING = "utf-16"

PROGRESS_CHARS = {
    LineKind.PASSED: ".",
    LineKind.FAILED: "X",
    LineKind.SKIPPED: ">",
}


class SessionState(Enum):
    SELECTING = "selecting"
    EXCLUDING = "excluding"
    STREAMING = "streaming"
    FINISHED = "finished"
    FAILED = "failed"


class Selection(Enum):
    """Operator's answer to a run/exclude question."""
    YES = "y"
    FILE = "f"
    NO = "n"

    @classmethod
    def from_answer(cls, answer: str) -> "Selection":
        if answer.startswith("y"):
            return cls.YES
        if answer.startswith("f"):
            return cls.FILE
        return cls.NO


class Console:
    """Operator console: prompts on one stream, echoes progress on another."""

    def __init__(self, input_func: Callable[[str], str] = input, out: Optional[TextIO] = None):
        self._input = input_func
        self._out = out

    @property
    def out(self) -> TextIO:
        return self._out or sys.stdout

    def ask(self, prompt: str) -> str:
        return self._input(prompt)

    def write(self, text: str) -> None:
        self.out.write(text)
        self.out.flush()

    def writeline(self, text: str = "") -> None:
        self.write(text + "\n")


@dataclass
class SessionResult:
    """Outcome of a completed session."""
    state: SessionState
    passed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    finished_line: str = ""
    xml_path: Optional[Path] = None
    html_path: Optional[Path] = None


class RunnerSession:
    """Drives one exchange with the remote runner over an open connection."""

    def __init__(self, connection: LineConnection, console: Console, output_dir: Path,
                 open_report: bool = True, opener: Callable[[str], object] = webbrowser.open):
        self.connection = connection
        self.console = console
        self.output_dir = Path(output_dir)
        self.open_report = open_report
        self.opener = opener
        self.state = SessionState.SELECTING
        self.append_passed = False

    @property
    def failed_path(self) -> Path:
        return self.output_dir / FAILED_FILE

    @property
    def passed_path(self) -> Path:
        return self.output_dir / PASSED_FILE

    def run(self) -> SessionResult:
        try:
            self.state = SessionState.SELECTING
            self._select("Specify tests to run? [y]/[n]/[f]",
                         "Enter tests to run, comma separated with full name in a single line:",
                         self.failed_path)

            self.state = SessionState.EXCLUDING
            self._select("Specify tests to exclude? [y]/[n]/[f]",
                         "Enter tests to exclude, comma separated with full name in a single line:",
                         self.passed_path)

            self.state = SessionState.STREAMING
            result = self._stream()

            xml = parse_payload(self.connection.read_line()).value
            result.xml_path = self._write_xml(xml)
            result.html_path = self._write_html(result.xml_path)
        except RunnerError:
            self.state = SessionState.FAILED
            raise

        self.state = result.state = SessionState.FINISHED
        if self.open_report:
            self.opener(result.html_path.resolve().as_uri())
        return result

    def _select(self, question: str, list_prompt: str, source: Path) -> Selection:
        answer = self.console.ask(question + "\n")
        selection = Selection.from_answer(answer)

        if selection == Selection.YES:
            self.connection.send_line(answer)
            self.connection.send_line(self.console.ask(list_prompt + "\n"))
        elif selection == Selection.FILE:
            if not source.is_file():
                raise InputNotFound(f"{source} does not exist", metadata={"path": str(source)})
            self.connection.send_line("y")
            self.connection.send_line(source.read_text(encoding="utf-8").rstrip("\r\n"))
            self.append_passed = True
        else:
            self.connection.send_line(answer)

        logger.debug(f"{question.split('?')[0]}: {selection.name}")
        return selection

    def _stream(self) -> SessionResult:
        result = SessionResult(state=SessionState.STREAMING)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.console.writeline("Running tests...")

        passed_mode = "a" if self.append_passed else "w"
        with open(self.failed_path, "w", encoding="utf-8") as failed_file, \
                open(self.passed_path, passed_mode, encoding="utf-8") as passed_file:
            sinks = {
                LineKind.PASSED: (passed_file, result.passed),
                LineKind.FAILED: (failed_file, result.failed),
                LineKind.SKIPPED: (None, result.skipped),
            }
            while True:
                line = parse_line(self.connection.read_line())
                if line.kind == LineKind.RUN_FINISHED:
                    result.finished_line = line.text
                    break
                if not line.is_progress:
                    logger.debug(f"Ignoring line: {line.text}")
                    continue

                self.console.write(PROGRESS_CHARS[line.kind])
                sink, names = sinks[line.kind]
                names.append(line.value)
                if sink is not None:
                    sink.write(line.value + ",")
                    sink.flush()

        self.console.writeline()
        self.console.writeline(result.finished_line)
        logger.info(f"Run finished: {len(result.passed)} passed, {len(result.failed)} failed, "
                    f"{len(result.skipped)} skipped")
        return result

    def _write_xml(self, xml: str) -> Path:
        path = self.output_dir / RESULT_XML
        path.write_text(xml, encoding=RESULT_ENCODING, newline="")
        logger.info(f"Wrote {path}")
        return path

    def _write_html(self, xml_path: Path) -> Path:
        path = self.output_dir / RESULT_HTML
        html = ReportRenderer().render(xml_path)
        if path.exists():
            path.unlink()
        path.write_text(html, encoding="utf-8")
        logger.info(f"Wrote {path}")
        return path
