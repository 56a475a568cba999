from pathlib import Path

import pytest

from cmakelink.errors import (
    CmakeLinkError,
    ConfigError,
    ErrorCode,
    MalformedDirectiveError,
    ToolDiagnosticError,
    ToolSpawnError,
    WorkspaceError,
)
from cmakelink.linkage import EMPTY_LINKAGE, emit_linkage
from cmakelink.models import BuildDirective, BuildWorkspace, LinkageDescriptor, ProcessOutcome, Span


def test_error_codes_are_stable_and_machine_readable() -> None:
    errors = [
        MalformedDirectiveError("too many arguments"),
        WorkspaceError("permission denied"),
        ToolSpawnError("no such file"),
        ToolDiagnosticError("CMake Error"),
        ConfigError("bad policy"),
    ]
    assert [error.code for error in errors] == [
        ErrorCode.MALFORMED_DIRECTIVE.value,
        ErrorCode.WORKSPACE.value,
        ErrorCode.TOOL_SPAWN.value,
        ErrorCode.TOOL_DIAGNOSTIC.value,
        ErrorCode.CONFIG.value,
    ]
    assert all(isinstance(error, CmakeLinkError) for error in errors)


def test_error_message_stays_bare_while_str_adds_hint_and_context() -> None:
    error = ToolSpawnError(
        "[Errno 2] No such file or directory: 'cmake'",
        hint="Install CMake.",
        context={"step": "configure", "command": ""},
    )

    assert error.message == "[Errno 2] No such file or directory: 'cmake'"
    assert str(error) == (
        "[Errno 2] No such file or directory: 'cmake'\n"
        "Hint: Install CMake.\n"
        "  step: configure"
    )
    assert error.to_dict() == {
        "code": "E_TOOL_SPAWN",
        "message": "[Errno 2] No such file or directory: 'cmake'",
        "context": {"step": "configure", "command": ""},
        "hint": "Install CMake.",
    }


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("setup.py:12:5", Span("setup.py", 12, 5)),
        ("setup.py:12", Span("setup.py", 12, 1)),
        ("setup.py", Span("setup.py", 1, 1)),
        ("C:/src/setup.py:4:2", Span("C:/src/setup.py", 4, 2)),
        ("<directive>", Span()),
    ],
)
def test_span_parse(text: str, expected: Span) -> None:
    assert Span.parse(text) == expected


def test_emitter_links_named_library_from_output_dir() -> None:
    workspace = BuildWorkspace(build_dir=Path("/src/cmake-build"), output_dir=Path("/cache/myext"))

    linkage = emit_linkage(BuildDirective(source_path=Path("/src"), library_name="z"), workspace)

    assert linkage == LinkageDescriptor(search_path=Path("/cache/myext"), library_name="z")
    assert not linkage.is_empty
    assert linkage.link_args() == ("-L/cache/myext", "-lz")
    assert linkage.extension_kwargs() == {"library_dirs": ["/cache/myext"], "libraries": ["z"]}
    assert linkage.to_dict() == {
        "search_path": "/cache/myext",
        "library_name": "z",
        "link_args": ["-L/cache/myext", "-lz"],
    }


def test_emitter_without_library_is_a_no_op() -> None:
    workspace = BuildWorkspace(build_dir=Path("/src/cmake-build"), output_dir=Path("/cache/myext"))

    linkage = emit_linkage(BuildDirective(source_path=Path("/src")), workspace)

    assert linkage is EMPTY_LINKAGE
    assert linkage.to_dict() == {"search_path": None, "library_name": None, "link_args": []}


def test_outcome_tool_is_first_command_word() -> None:
    assert ProcessOutcome(step="build", command=("make", "z")).tool == "make"
    assert ProcessOutcome(step="build", command=()).tool == ""
