"""Parser for NUnit 3 test-result XML documents."""

import codecs
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional, Union

from .errors import InputNotFound, MalformedInput
from .models import Case, Fixture, TestRun

logger = logging.getLogger(__name__)

FIXTURE_TYPE = "TestFixture"
SUMMARY_COUNTERS = ('total', 'passed', 'failed', 'inconclusive', 'skipped')


def decode_document(data: bytes) -> str:
    """Decode raw XML bytes, honouring a UTF-16 or UTF-8 byte-order mark."""
    if data.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return data.decode('utf-16')
    if data.startswith(codecs.BOM_UTF8):
        return data.decode('utf-8-sig')
    return data.decode('utf-8')


class NUnitParser:
    """Builds a TestRun from an NUnit result document."""

    def parse_file(self, path: Union[str, Path]) -> TestRun:
        path = Path(path)
        if not path.is_file():
            raise InputNotFound(f"File does not exist: {path}")
        try:
            text = decode_document(path.read_bytes())
        except UnicodeDecodeError as e:
            raise MalformedInput(f"Cannot decode {path}: {e}", metadata={"path": str(path)}) from e
        return self.parse_string(text, source=str(path))

    def parse_string(self, text: str, source: str = "<string>") -> TestRun:
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise MalformedInput(f"Invalid XML in {source}: {e}", metadata={"path": source}) from e

        counters = {key: self._optional_int(root, key) for key in SUMMARY_COUNTERS}
        fixtures = tuple(
            self._parse_fixture(element)
            for element in root.iter('test-suite')
            if element.get('type') == FIXTURE_TYPE
        )
        logger.debug(f"Parsed {len(fixtures)} fixtures from {source}")
        return TestRun(name=self._required(root, 'name'), fixtures=fixtures, **counters)

    def _parse_fixture(self, element: ET.Element) -> Fixture:
        name = self._required(element, 'name')
        fullname = self._required(element, 'fullname')

        return Fixture(
            name=name,
            namespace=self._strip_name(fullname, name),
            result=self._result(element),
            duration=self._duration(element),
            reason=self._reason(element),
            passed=self._required_int(element, 'passed'),
            failed=self._required_int(element, 'failed'),
            skipped=self._required_int(element, 'skipped'),
            cases=tuple(self._parse_case(case) for case in element.iter('test-case')),
        )

    def _parse_case(self, element: ET.Element) -> Case:
        message = stack_trace = None
        failures = element.findall('failure')
        # Detail is only shown for a single failure element
        if len(failures) == 1:
            message = failures[0].findtext('message', default='')
            stack_trace = failures[0].findtext('stack-trace')

        return Case(
            name=self._required(element, 'name'),
            result=self._result(element),
            duration=self._duration(element),
            message=message,
            stack_trace=stack_trace,
            has_failure=len(failures) == 1,
        )

    @staticmethod
    def _strip_name(fullname: str, name: str) -> str:
        """Namespace of a fixture: its fullname without the trailing '.name'."""
        suffix = f".{name}"
        if fullname.endswith(suffix):
            return fullname[:-len(suffix)]
        if fullname == name:
            return ""
        return fullname

    def _result(self, element: ET.Element) -> str:
        result = self._required(element, 'result')
        label = element.get('label')
        if result.lower() == 'failed' and label:
            return label
        return result

    @staticmethod
    def _reason(element: ET.Element) -> str:
        prop = element.find('properties/property')
        if prop is None:
            return ""
        return prop.get('value', '')

    def _duration(self, element: ET.Element) -> float:
        value = self._required(element, 'duration')
        try:
            return float(value)
        except ValueError:
            raise MalformedInput(f"<{element.tag}> has non-numeric duration {value!r}")

    @staticmethod
    def _required(element: ET.Element, attribute: str) -> str:
        value = element.get(attribute)
        if value is None:
            raise MalformedInput(f"<{element.tag}> is missing required attribute '{attribute}'",
                                 metadata={"element": element.tag, "attribute": attribute})
        return value

    def _required_int(self, element: ET.Element, attribute: str) -> int:
        return self._to_int(element, attribute, self._required(element, attribute))

    def _optional_int(self, element: ET.Element, attribute: str) -> int:
        value: Optional[str] = element.get(attribute)
        if not value:
            return 0
        return self._to_int(element, attribute, value)

    @staticmethod
    def _to_int(element: ET.Element, attribute: str, value: str) -> int:
        try:
            return int(value)
        except ValueError:
            raise MalformedInput(f"<{element.tag}> attribute '{attribute}' is not an integer: {value!r}",
                                 metadata={"element": element.tag, "attribute": attribute})


def parse_file(path: Union[str, Path]) -> TestRun:
    return NUnitParser().parse_file(path)
