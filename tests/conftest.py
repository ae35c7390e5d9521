import socket
import sys
import threading
from pathlib import Path

import pytest

# Ensure repository root is on sys.path so cli/core and the package import cleanly.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from nunit_runner.session import Console  # noqa: E402


SAMPLE_XML = """\
<?xml version="1.0" encoding="utf-8"?>
<test-run id="2" name="Calculator.Tests.dll" fullname="C:/build/Calculator.Tests.dll" testcasecount="4" result="Failed" total="4" passed="2" failed="1" inconclusive="0" skipped="1" duration="0.512">
  <test-suite type="Assembly" name="Calculator.Tests.dll" fullname="C:/build/Calculator.Tests.dll" result="Failed" total="4" passed="2" failed="1" skipped="1" duration="0.5">
    <test-suite type="TestSuite" name="Calculator" fullname="Calculator" result="Failed" total="4" passed="2" failed="1" skipped="1" duration="0.5">
      <test-suite type="TestFixture" name="AdditionTests" fullname="Calculator.Tests.AdditionTests" result="Failed" total="3" passed="2" failed="1" skipped="0" duration="0.25">
        <test-case name="AddsTwoNumbers" fullname="Calculator.Tests.AdditionTests.AddsTwoNumbers" result="Passed" duration="0.01" />
        <test-suite type="ParameterizedMethod" name="AddsDecimals" fullname="Calculator.Tests.AdditionTests.AddsDecimals" result="Failed" total="2" passed="1" failed="1" skipped="0" duration="0.02">
          <test-case name="Calculator.Tests.AdditionTests.AddsDecimals(1.5,2.5)" fullname="Calculator.Tests.AdditionTests.AddsDecimals(1.5,2.5)" result="Passed" duration="0.005" />
          <test-case name="Calculator.Tests.AdditionTests.AddsDecimals(0.1,0.2)" fullname="Calculator.Tests.AdditionTests.AddsDecimals(0.1,0.2)" result="Failed" label="Error" duration="0.015">
            <failure>
              <message><![CDATA[Expected <0.3> but was <script>alert(1)</script>]]></message>
              <stack-trace><![CDATA[at Calculator.Tests.AdditionTests.AddsDecimals() in AdditionTests.cs:line 42]]></stack-trace>
            </failure>
          </test-case>
        </test-suite>
      </test-suite>
      <test-suite type="TestFixture" name="DivisionTests" fullname="Calculator.Tests.DivisionTests" result="Skipped" label="Ignored" total="1" passed="0" failed="0" skipped="1" duration="0.001">
        <properties>
          <property name="_SKIPREASON" value="Not implemented yet" />
        </properties>
        <test-case name="DividesByZero" fullname="Calculator.Tests.DivisionTests.DividesByZero" result="Skipped" label="Ignored" duration="0" />
      </test-suite>
    </test-suite>
  </test-suite>
</test-run>
"""


@pytest.fixture
def write_xml(tmp_path: Path):
    """Write an NUnit document to a file and return its path."""
    def _write(content: str = SAMPLE_XML, name: str = "TestResult.xml", encoding: str = "utf-8") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding=encoding)
        return path
    return _write


@pytest.fixture
def runner_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated working directory and runner configuration for session tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("NUNIT_RUNNER_CONFIG", raising=False)
    monkeypatch.delenv("RUNNER_PORT", raising=False)
    monkeypatch.setenv("RUNNER_OUTPUT_DIR", str(tmp_path))
    monkeypatch.setenv("RUNNER_OPEN_REPORT", "false")
    monkeypatch.setenv("RUNNER_READ_TIMEOUT", "5")
    return tmp_path


class ScriptedConsole(Console):
    """Console that answers prompts from a list and records everything shown."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.prompts: list[str] = []
        self.output: list[str] = []
        super().__init__(input_func=self._answer)

    def _answer(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)

    def write(self, text: str) -> None:
        self.output.append(text)

    @property
    def text(self) -> str:
        return "".join(self.output)


@pytest.fixture
def scripted_console():
    return ScriptedConsole


class FakeRunner:
    """Single-connection TCP peer that plays back a scripted runner stream.

    It waits for ``expected_requests`` lines from the client, then sends
    ``responses`` one line each and closes the connection.
    """

    def __init__(self, responses, expected_requests: int = 2):
        self.responses = list(responses)
        self.expected_requests = expected_requests
        self.received: list[str] = []
        self._server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._server.bind(("127.0.0.1", 0))
        self._server.listen(1)
        self._server.settimeout(5.0)
        self.port = self._server.getsockname()[1]
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def _serve(self) -> None:
        try:
            conn, _ = self._server.accept()
        except OSError:
            return
        with conn:
            conn.settimeout(5.0)
            reader = conn.makefile("rb")
            try:
                while len(self.received) < self.expected_requests:
                    raw = reader.readline()
                    if not raw:
                        return
                    self.received.append(raw.decode("utf-8").rstrip("\r\n"))
                for line in self.responses:
                    conn.sendall((line + "\n").encode("utf-8"))
            except OSError:
                return
            finally:
                reader.close()

    def start(self) -> "FakeRunner":
        self._thread.start()
        return self

    def stop(self) -> None:
        self._thread.join(timeout=5.0)
        self._server.close()


@pytest.fixture
def fake_runner(monkeypatch: pytest.MonkeyPatch):
    """Start a FakeRunner and point RUNNER_PORT at it."""
    runners = []

    def _start(responses, expected_requests: int = 2) -> FakeRunner:
        runner = FakeRunner(responses, expected_requests).start()
        runners.append(runner)
        monkeypatch.setenv("RUNNER_PORT", str(runner.port))
        return runner

    yield _start
    for runner in runners:
        runner.stop()
