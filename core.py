#!/usr/bin/env python3
"""
Core operations shared by the report and run commands.
Contains the file handling around the renderer and the interactive session front end.
"""

import logging
import webbrowser
from pathlib import Path
from typing import Callable, Optional, Sequence

from nunit_runner.config import get_open_report, get_output_dir, get_read_timeout, get_runner_port
from nunit_runner.connection import LineConnection
from nunit_runner.errors import UsageError
from nunit_runner.renderer import ReportRenderer
from nunit_runner.session import Console, RunnerSession

logger = logging.getLogger(__name__)

USAGE = "Usage: report [input-path] [output-path]"

# Switches for displaying the basic help
HELP_PARAMETERS = ("?", "/?", "help")


def resolve_report_paths(args: Sequence[str]) -> tuple[Path, Path]:
    """Work out input and output paths from the report command's arguments.

    One argument writes next to the input with a .html extension, two give
    the output explicitly. Anything else, or a help switch, is a UsageError.
    """
    if len(args) == 1 and args[0] not in HELP_PARAMETERS:
        input_path = Path(args[0])
        return input_path, input_path.with_suffix(".html")
    if len(args) == 2:
        return Path(args[0]), Path(args[1])
    raise UsageError(USAGE)


def check_input_and_output(input_path: Path, output_path: Path) -> bool:
    """Input file should exist; an existing output file is removed and its folder created."""
    if not input_path.is_file():
        print("File does not exist")
        return False

    if output_path.exists():
        output_path.unlink()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    return True


def convert_report(input_path: Path, output_path: Optional[Path] = None,
                   escape_all: bool = False) -> Optional[Path]:
    """
    Render an NUnit XML file to HTML.

    Args:
        input_path: NUnit result document
        output_path: Where to write the page (defaults to input with .html)
        escape_all: Escape every interpolated value, not only failure details

    Returns:
        The written path, or None if the input does not exist.
        MalformedInput from the renderer is not caught.
    """
    input_path = Path(input_path)
    output_path = Path(output_path) if output_path else input_path.with_suffix(".html")

    if not check_input_and_output(input_path, output_path):
        return None

    html = ReportRenderer(escape_all=escape_all).render(input_path)
    output_path.write_text(html, encoding="utf-8")
    logger.info(f"Wrote {output_path}")
    return output_path


def run_interactive(console: Optional[Console] = None,
                    opener: Callable[[str], object] = webbrowser.open,
                    wait_for_ack: bool = True) -> int:
    """
    Run one interactive session against a remote runner.

    Every error ends up here: it is printed, and the operator has to
    acknowledge it before the process exits.

    Returns:
        0 when the report was produced, 1 otherwise.
    """
    console = console or Console()
    try:
        host = console.ask("IP Address: ").strip()
        with LineConnection(host, get_runner_port(), get_read_timeout()) as connection:
            console.writeline("Connected")
            session = RunnerSession(connection, console, get_output_dir(),
                                    open_report=get_open_report(), opener=opener)
            result = session.run()
        logger.info(f"Report written to {result.html_path}")
        return 0
    except Exception as e:
        console.writeline(f"Error: {e}")
        logger.debug("Session failed", exc_info=True)
        if wait_for_ack:
            try:
                console.ask("Press Enter to exit...")
            except EOFError:
                pass
        return 1
