"""HTML report rendering for NUnit results."""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Union
from urllib.parse import quote_plus

from jinja2 import DictLoader, Environment, StrictUndefined

from .models import Fixture, ResultKind, TestRun
from .nunit_parser import NUnitParser
from .templates import INLINE_STYLES, PAGE_TITLE, SCRIPTS, STYLESHEETS, TEMPLATES

logger = logging.getLogger(__name__)

# Characters allowed in a generated html id
ID_UNSAFE = re.compile(r'[^a-zA-Z0-9 -]')

PANEL_CLASSES = {
    ResultKind.PASSED: "panel-success",
    ResultKind.IGNORED: "panel-warning",
    ResultKind.FAILED: "panel-danger",
    ResultKind.ERROR: "panel-danger",
}


def panel_class(kind: ResultKind, skipped_as_warning: bool = False) -> str:
    """Bootstrap panel class for a result; case dialogs also colour skipped tests."""
    if skipped_as_warning and kind == ResultKind.SKIPPED:
        return "panel-warning"
    return PANEL_CLASSES.get(kind, "panel-default")


def anchor_id(name: str, index: int) -> str:
    """Unique id for a fixture's dialog: url-encoded name, unsafe characters dropped, plus its index."""
    return f"modal-{ID_UNSAFE.sub('', quote_plus(name, safe='!*()'))}-{index}"


@dataclass(frozen=True)
class FixtureView:
    fixture: Fixture
    anchor_id: str


class ReportRenderer:
    """Renders a TestRun into a standalone HTML page."""

    def __init__(self, escape_all: bool = False):
        self.escape_all = escape_all
        self._env = Environment(
            loader=DictLoader(TEMPLATES),
            autoescape=escape_all,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.globals["panel_class"] = panel_class

    def render_run(self, run: TestRun) -> str:
        fixtures = [FixtureView(fixture, anchor_id(fixture.name, index))
                    for index, fixture in enumerate(run.fixtures)]
        template = self._env.get_template("page.html")
        return template.render(
            title=PAGE_TITLE,
            stylesheets=STYLESHEETS,
            scripts=SCRIPTS,
            styles=INLINE_STYLES,
            run=run,
            fixtures=fixtures,
        )

    def render(self, xml_path: Union[str, Path]) -> str:
        run = NUnitParser().parse_file(xml_path)
        logger.info(f"Rendering {run.name}: {run.total} tests in {len(run.fixtures)} fixtures")
        return self.render_run(run)


def render(xml_path: Union[str, Path], escape_all: bool = False) -> str:
    """Parse an NUnit result file and return the HTML report."""
    return ReportRenderer(escape_all=escape_all).render(xml_path)
