"""Linkage descriptor emission."""

from __future__ import annotations

from cmakelink.models import BuildDirective, BuildWorkspace, LinkageDescriptor

EMPTY_LINKAGE = LinkageDescriptor()


def emit_linkage(directive: BuildDirective, workspace: BuildWorkspace) -> LinkageDescriptor:
    """Link against the built library from the output directory, or nothing at all."""
    if directive.library_name is None:
        return EMPTY_LINKAGE
    return LinkageDescriptor(
        search_path=workspace.output_dir,
        library_name=directive.library_name,
    )
