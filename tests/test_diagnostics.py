import json
from pathlib import Path

import pytest

from cmakelink.diagnostics import DiagnosticSink, translate_outcome
from cmakelink.errors import StreamUnavailableWarning, ToolDiagnosticError, ToolSpawnError
from cmakelink.models import ProcessOutcome, Span

SPAN = Span(source="setup.py", line=12, column=5)


def _outcome(**kwargs: object) -> ProcessOutcome:
    fields: dict[str, object] = {"step": "configure", "command": ("cmake", "/src"), "returncode": 0}
    fields.update(kwargs)
    return ProcessOutcome(**fields)  # type: ignore[arg-type]


def test_silent_tool_produces_no_diagnostics() -> None:
    sink = DiagnosticSink()

    translate_outcome(_outcome(), span=SPAN, sink=sink)

    assert sink.records == []


def test_spawn_failure_is_fatal_with_os_error_text() -> None:
    sink = DiagnosticSink()

    with pytest.raises(ToolSpawnError) as excinfo:
        translate_outcome(
            _outcome(failed_to_spawn=True, stderr_text="[Errno 2] No such file", returncode=None),
            span=SPAN,
            sink=sink,
        )

    assert excinfo.value.message == "[Errno 2] No such file"
    assert excinfo.value.context["step"] == "configure"


def test_stderr_output_is_fatal_verbatim() -> None:
    with pytest.raises(ToolDiagnosticError) as excinfo:
        translate_outcome(
            _outcome(stderr_text="CMake Error at CMakeLists.txt:3\n"),
            span=SPAN,
            sink=DiagnosticSink(),
        )

    assert excinfo.value.message == "CMake Error at CMakeLists.txt:3\n"
    assert excinfo.value.code == "E_TOOL_DIAGNOSTIC"


def test_stderr_policy_ignores_exit_status() -> None:
    sink = DiagnosticSink()

    translate_outcome(_outcome(returncode=2), span=SPAN, sink=sink)

    assert not sink.has_errors


def test_unavailable_stream_is_a_warning() -> None:
    sink = DiagnosticSink()

    with pytest.warns(StreamUnavailableWarning):
        translate_outcome(_outcome(stream_available=False), span=SPAN, sink=sink)

    assert [d.message for d in sink.warnings] == ["could not open stderr pipe to cmake"]
    assert sink.warnings[0].span == SPAN
    assert not sink.has_errors


def test_exit_status_policy_fails_on_nonzero_status() -> None:
    with pytest.raises(ToolDiagnosticError) as excinfo:
        translate_outcome(
            _outcome(returncode=2),
            span=SPAN,
            sink=DiagnosticSink(),
            policy="exit-status",
        )

    assert excinfo.value.message == "`cmake` exited with status 2"
    assert excinfo.value.context["returncode"] == "2"


def test_exit_status_policy_demotes_stderr_to_warning() -> None:
    sink = DiagnosticSink()

    translate_outcome(
        _outcome(stderr_text="CMake Deprecation Warning\n"),
        span=SPAN,
        sink=sink,
        policy="exit-status",
    )

    assert not sink.has_errors
    assert [d.message for d in sink.warnings] == ["CMake Deprecation Warning\n"]


def test_exit_status_policy_prefers_stderr_as_error_body() -> None:
    with pytest.raises(ToolDiagnosticError) as excinfo:
        translate_outcome(
            _outcome(returncode=1, stderr_text="make: *** No rule to make target 'z'.\n"),
            span=SPAN,
            sink=DiagnosticSink(),
            policy="exit-status",
        )

    assert excinfo.value.message == "make: *** No rule to make target 'z'.\n"


def test_sink_writes_json_lines(tmp_path: Path) -> None:
    sink = DiagnosticSink()
    sink.warning(SPAN, "careful")
    sink.error(SPAN, "broken")

    path = sink.to_json_lines(tmp_path / "logs" / "diagnostics.jsonl")
    lines = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]

    assert lines == [
        {"message": "careful", "severity": "warning", "span": "setup.py:12:5"},
        {"message": "broken", "severity": "error", "span": "setup.py:12:5"},
    ]
    assert [d.render() for d in sink.errors] == ["setup.py:12:5: error: broken"]
