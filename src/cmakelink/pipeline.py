"""Directive-to-linkage pipeline.

``DirectiveProcessor.process`` runs one directive end to end::

    parse -> resolve workspace -> configure -> build -> emit linkage

Stages raise typed errors; the processor reports the first one as a single
error diagnostic and returns ``None``. Evaluation is synchronous and there
is no locking around the shared output directory.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from cmakelink.config import ProcessorConfig
from cmakelink.diagnostics import DiagnosticSink, translate_outcome
from cmakelink.directive import Token, parse_arguments
from cmakelink.errors import CmakeLinkError
from cmakelink.invoker import ExternalBuildInvoker
from cmakelink.linkage import emit_linkage
from cmakelink.models import LinkageDescriptor, Span
from cmakelink.observability import StructuredLogger
from cmakelink.workspace import WorkspaceResolver


@dataclass(slots=True)
class DirectiveProcessor:
    config: ProcessorConfig
    logger: StructuredLogger = field(default_factory=StructuredLogger)
    resolver: WorkspaceResolver = field(init=False)
    invoker: ExternalBuildInvoker = field(init=False)

    def __post_init__(self) -> None:
        self.resolver = WorkspaceResolver(self.config)
        self.invoker = ExternalBuildInvoker(self.config)

    def process(
        self,
        arguments: str | Iterable[Token],
        *,
        unit: str,
        span: Span,
        sink: DiagnosticSink,
    ) -> LinkageDescriptor | None:
        try:
            return self._run(arguments, unit=unit, span=span, sink=sink)
        except CmakeLinkError as exc:
            self.logger.log_failure(exc, unit=unit)
            sink.error(span, exc.message)
            return None

    def _run(
        self,
        arguments: str | Iterable[Token],
        *,
        unit: str,
        span: Span,
        sink: DiagnosticSink,
    ) -> LinkageDescriptor:
        directive = self.resolver.absolute_source(parse_arguments(arguments))
        self.logger.log(
            operation="parse",
            unit=unit,
            message="directive parsed",
            extra={
                "source_path": str(directive.source_path),
                "library_name": directive.library_name,
            },
        )

        workspace = self.resolver.resolve(directive, unit=unit)
        self.logger.log(
            operation="workspace",
            unit=unit,
            message="workspace ready",
            extra={
                "build_dir": str(workspace.build_dir),
                "output_dir": str(workspace.output_dir),
            },
        )

        configured = self.invoker.configure(directive, workspace)
        self.logger.log_outcome(configured, unit=unit)
        translate_outcome(configured, span=span, sink=sink, policy=self.config.success_policy)

        built = self.invoker.build(directive, workspace)
        self.logger.log_outcome(built, unit=unit)
        translate_outcome(built, span=span, sink=sink, policy=self.config.success_policy)

        linkage = emit_linkage(directive, workspace)
        self.logger.log(
            operation="emit",
            unit=unit,
            message="no library to link" if linkage.is_empty else "linkage emitted",
            extra=linkage.to_dict(),
        )
        return linkage
