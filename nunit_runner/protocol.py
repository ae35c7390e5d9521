"""Line protocol spoken with the remote NUnit runner.

Every frame is a single newline-terminated line. After the selection and
exclusion exchange the runner streams progress lines, a ``Run finished``
line, and finally the whole result XML on one line with each CRLF replaced
by ``**RETURN**``.
"""

from dataclasses import dataclass
from enum import Enum

RUNNER_PORT = 4711
RETURN_TOKEN = "**RETURN**"
CRLF = "\r\n"

PASSED_PREFIX = "Passed "
FAILED_PREFIX = "Failed "
SKIPPED_PREFIX = "Skipped "
FINISHED_PREFIX = "Run finished"


class LineKind(Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    RUN_FINISHED = "run_finished"
    RESULT_PAYLOAD = "result_payload"
    OTHER = "other"


@dataclass(frozen=True)
class ProtocolLine:
    """A line received from the runner, tagged with its kind.

    ``value`` is the test name for progress lines, the decoded XML for the
    result payload and the raw text otherwise.
    """
    kind: LineKind
    text: str
    value: str

    @property
    def is_progress(self) -> bool:
        return self.kind in (LineKind.PASSED, LineKind.FAILED, LineKind.SKIPPED)


_PROGRESS_PREFIXES = (
    (PASSED_PREFIX, LineKind.PASSED),
    (FAILED_PREFIX, LineKind.FAILED),
    (SKIPPED_PREFIX, LineKind.SKIPPED),
)


def parse_line(line: str) -> ProtocolLine:
    """Tag a streamed line by its prefix."""
    for prefix, kind in _PROGRESS_PREFIXES:
        if line.startswith(prefix):
            return ProtocolLine(kind, line, line[len(prefix):])
    if line.startswith(FINISHED_PREFIX):
        return ProtocolLine(LineKind.RUN_FINISHED, line, line)
    return ProtocolLine(LineKind.OTHER, line, line)


def parse_payload(line: str) -> ProtocolLine:
    """Tag the line following ``Run finished``, which always carries the result XML."""
    return ProtocolLine(LineKind.RESULT_PAYLOAD, line, decode_payload(line))


def encode_payload(xml: str) -> str:
    return xml.replace(CRLF, RETURN_TOKEN)


def decode_payload(line: str) -> str:
    return line.replace(RETURN_TOKEN, CRLF)
