"""Namespace access audit use-case."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console

from nsreg.application.access_audit_service import (
    build_access_frame,
    summarize_access,
    write_access_report,
)
from nsreg.application.access_partitioner import AccessPartitioner
from nsreg.application.ports import GrantStore
from nsreg.application.run_writer import (
    RunResult,
    build_summary_lines,
    create_run,
    finalize_run,
    list_output_files,
)
from nsreg.application.stdout_renderer import render_dataframe
from nsreg.domain.errors import ForbiddenError
from nsreg.domain.models import UserContext


def execute_access_audit(
    caller: UserContext,
    users: Sequence[UserContext],
    *,
    partitioner: AccessPartitioner,
    grants: GrantStore,
    reports_root: str | None = None,
    console: Console | None = None,
) -> RunResult | None:
    """Audit authorized/unauthorized namespaces for each user.

    Prints a rich preview when ``reports_root`` is None, otherwise writes a
    CSV run with summary and manifest.
    """
    if not caller.is_admin:
        raise ForbiddenError(f"user {caller.user_id} is not an administrator")

    frame = build_access_frame(partitioner, grants, users)
    counts = summarize_access(frame, (u.user_id for u in users))

    if reports_root is None:
        console = console or Console()
        render_dataframe(console, counts, title="Namespace Access Summary")
        render_dataframe(console, frame, title="Namespace Access")
        return None

    ctx = create_run(
        "namespace-access-audit",
        inputs={"users": ",".join(str(u.user_id) for u in users)},
        reports_root=reports_root,
    )
    out_file = write_access_report(frame, str(ctx.output_dir))
    findings = [f"CSV generated: `{out_file.name}`."]
    findings.extend(
        f"user {row.user_id}: {row.authorized} authorized, "
        f"{row.unauthorized} unauthorized"
        for row in counts.itertuples(index=False)
    )
    summary = build_summary_lines(
        "Namespace Access Audit",
        inputs=ctx.inputs,
        findings=findings,
        output_files=list_output_files(ctx.output_dir),
    )
    return finalize_run(ctx, status="success", summary_lines=summary)


__all__ = ["execute_access_audit"]
