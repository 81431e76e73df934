"""CLI entrypoint for the namespace registry."""

from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as package_version
from pathlib import Path

import typer
from rich.console import Console

from nsreg.application import execute_access_audit
from nsreg.application.bootstrap import RegistryServices, build_services
from nsreg.application.stdout_renderer import render_namespaces, render_page
from nsreg.config import RegistryConfig, load_config
from nsreg.domain.errors import ForbiddenError, NamespaceRegistryError
from nsreg.domain.models import UserContext
from nsreg.logging_config import configure_logging

app = typer.Typer(
    name="nsreg",
    help="Kubernetes namespace registry",
    no_args_is_help=True,
    add_completion=False,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()

_EXIT_CODES: dict[str, int] = {
    "invalid_argument": 1,
    "not_found": 3,
    "conflict": 4,
    "forbidden": 5,
    "in_use": 6,
    "external_create_failure": 7,
}


@dataclass
class CliState:
    """Caller identity and lazily built services for one invocation."""

    caller: UserContext
    config: RegistryConfig
    _services: RegistryServices | None = None

    @property
    def services(self) -> RegistryServices:
        if self._services is None:
            self._services = build_services(self.config)
        return self._services


def _resolve_version() -> str:
    """Return installed package version or local fallback."""
    try:
        return package_version("nsreg")
    except PackageNotFoundError:
        return "0.1.0"


@app.callback()
def callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
    ),
    user_id: int = typer.Option(
        0,
        "--user-id",
        envvar="NSREG_USER_ID",
        help="Identity of the calling user.",
    ),
    user_name: str = typer.Option(
        "",
        "--user-name",
        envvar="NSREG_USER_NAME",
        help="Display name of the calling user.",
    ),
    admin: bool = typer.Option(
        False,
        "--admin",
        envvar="NSREG_ADMIN",
        help="Act with the administrator role.",
    ),
    env_file: Path = typer.Option(
        Path(".env"),
        "--env-file",
        help="Optional .env file with NSREG_* settings.",
    ),
) -> None:
    """Handle global CLI options."""
    if version:
        console.print(f"nsreg {_resolve_version()}")
        raise typer.Exit(code=0)
    try:
        config = load_config(env_file)
        configure_logging(config.log_level)
    except ValueError as exc:
        _handle_error(exc)
    ctx.obj = CliState(
        caller=UserContext(user_id=user_id, user_name=user_name, is_admin=admin),
        config=config,
    )
    if ctx.invoked_subcommand is None:
        raise typer.Exit(code=0)


def _handle_error(exc: Exception) -> None:
    """Convert domain exceptions to CLI exit codes."""
    if isinstance(exc, NamespaceRegistryError):
        console.print(f"[red]ERROR ({exc.kind}):[/red] {exc}")
        raise typer.Exit(code=_EXIT_CODES.get(exc.kind, 2)) from exc
    if isinstance(exc, ValueError):
        console.print(f"[red]ERROR:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    if isinstance(exc, RuntimeError):
        console.print(f"[red]ERROR:[/red] {exc}")
        raise typer.Exit(code=2) from exc
    raise exc


def _parse_user_ids(raw: str) -> list[int]:
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError as exc:
        raise ValueError(f"user ids must be comma-separated integers: {raw!r}") from exc


@app.command("list")
def list_command(
    ctx: typer.Context,
    search: str | None = typer.Option(
        None, "--search", "-s", help="Case-insensitive namespace name filter."
    ),
    page_no: int = typer.Option(1, "--page-no", help="1-based page number."),
    page_size: int = typer.Option(10, "--page-size", help="Namespaces per page."),
) -> None:
    """List namespaces visible to the caller, newest first."""
    state: CliState = ctx.obj
    try:
        page = state.services.partitioner.paged_list(
            state.caller, search, page_no, page_size
        )
        render_page(console, page)
    except (ValueError, RuntimeError) as exc:
        _handle_error(exc)


@app.command("create")
def create_command(
    ctx: typer.Context,
    namespace: str = typer.Argument(..., help="Kubernetes namespace name."),
    cluster_code: int = typer.Option(
        ..., "--cluster-code", "-c", help="Code of the target cluster."
    ),
) -> None:
    """Create namespace on the cluster if absent, then register it."""
    state: CliState = ctx.obj
    try:
        registered = state.services.registry.create_or_register(
            state.caller, namespace, cluster_code
        )
        console.print(
            f"[green]Registered:[/green] {registered.name} "
            f"on cluster {registered.cluster_code} (id {registered.id})"
        )
    except (ValueError, RuntimeError) as exc:
        _handle_error(exc)


@app.command("verify")
def verify_command(
    ctx: typer.Context,
    namespace: str = typer.Argument(..., help="Kubernetes namespace name."),
    cluster_code: int = typer.Option(
        ..., "--cluster-code", "-c", help="Code of the target cluster."
    ),
) -> None:
    """Check that namespace is not yet registered on the cluster."""
    state: CliState = ctx.obj
    try:
        unique = state.services.registry.verify_unique(namespace, cluster_code)
    except (ValueError, RuntimeError) as exc:
        _handle_error(exc)
        return
    if not unique:
        console.print(
            f"[yellow]Taken:[/yellow] {namespace} is registered on cluster {cluster_code}"
        )
        raise typer.Exit(code=_EXIT_CODES["conflict"])
    console.print(f"[green]Available:[/green] {namespace} on cluster {cluster_code}")


@app.command("delete")
def delete_command(
    ctx: typer.Context,
    namespace_id: int = typer.Argument(..., help="Registered namespace id."),
) -> None:
    """De-register namespace; the cluster object is kept."""
    state: CliState = ctx.obj
    try:
        removed = state.services.registry.delete_by_id(state.caller, namespace_id)
        console.print(
            f"[green]Deleted:[/green] {removed.name} on cluster {removed.cluster_code}"
        )
    except (ValueError, RuntimeError) as exc:
        _handle_error(exc)


def _target_user(for_user: int, for_admin: bool) -> UserContext:
    return UserContext(user_id=for_user, is_admin=for_admin)


@app.command("authorized")
def authorized_command(
    ctx: typer.Context,
    for_user: int = typer.Option(..., "--for-user", "-u", help="Audited user id."),
    for_admin: bool = typer.Option(
        False, "--for-admin", help="Audited user holds the administrator role."
    ),
) -> None:
    """List namespaces the user is authorized for (admin only)."""
    state: CliState = ctx.obj
    try:
        namespaces = state.services.partitioner.authorized_for(
            state.caller, _target_user(for_user, for_admin)
        )
        render_namespaces(console, namespaces, title=f"Authorized for user {for_user}")
    except (ValueError, RuntimeError) as exc:
        _handle_error(exc)


@app.command("unauthorized")
def unauthorized_command(
    ctx: typer.Context,
    for_user: int = typer.Option(..., "--for-user", "-u", help="Audited user id."),
    for_admin: bool = typer.Option(
        False, "--for-admin", help="Audited user holds the administrator role."
    ),
) -> None:
    """List namespaces not granted to the user (admin only)."""
    state: CliState = ctx.obj
    try:
        namespaces = state.services.partitioner.unauthorized_for(
            state.caller, _target_user(for_user, for_admin)
        )
        render_namespaces(
            console, namespaces, title=f"Unauthorized for user {for_user}"
        )
    except (ValueError, RuntimeError) as exc:
        _handle_error(exc)


@app.command("available")
def available_command(ctx: typer.Context) -> None:
    """List namespaces the caller may submit work to."""
    state: CliState = ctx.obj
    try:
        namespaces = state.services.partitioner.available_for(state.caller)
        render_namespaces(console, namespaces, title="Available namespaces")
    except (ValueError, RuntimeError) as exc:
        _handle_error(exc)


@app.command("grant")
def grant_command(
    ctx: typer.Context,
    namespace_id: int = typer.Argument(..., help="Registered namespace id."),
    for_user: int = typer.Option(..., "--for-user", "-u", help="Grantee user id."),
) -> None:
    """Grant a user access to a namespace (admin only)."""
    state: CliState = ctx.obj
    try:
        if not state.caller.is_admin:
            raise ForbiddenError(f"user {state.caller.user_id} is not an administrator")
        added = state.services.grants.grant(for_user, namespace_id)
        status = "Granted" if added else "Already granted"
        console.print(f"[green]{status}:[/green] namespace {namespace_id} to user {for_user}")
    except (ValueError, RuntimeError) as exc:
        _handle_error(exc)


@app.command("revoke")
def revoke_command(
    ctx: typer.Context,
    namespace_id: int = typer.Argument(..., help="Registered namespace id."),
    for_user: int = typer.Option(..., "--for-user", "-u", help="Grantee user id."),
) -> None:
    """Revoke a user's grant on a namespace (admin only)."""
    state: CliState = ctx.obj
    try:
        if not state.caller.is_admin:
            raise ForbiddenError(f"user {state.caller.user_id} is not an administrator")
        removed = state.services.grants.revoke(for_user, namespace_id)
        status = "Revoked" if removed else "No grant"
        console.print(
            f"[green]{status}:[/green] namespace {namespace_id} for user {for_user}"
        )
    except (ValueError, RuntimeError) as exc:
        _handle_error(exc)


@app.command("access-audit")
def access_audit_command(
    ctx: typer.Context,
    users: str = typer.Option(
        ..., "--users", help="Comma-separated user ids to audit."
    ),
    admins: str = typer.Option(
        "", "--admins", help="Comma-separated user ids holding the administrator role."
    ),
    report: str | None = typer.Option(
        None,
        "--report",
        "-r",
        help=(
            "Persist report files under this directory. "
            "If omitted, prints stdout preview only."
        ),
    ),
) -> None:
    """Audit authorized/unauthorized namespaces per user (admin only).

    Prints rich preview by default; use `--report/-r` to persist artifacts.
    """
    state: CliState = ctx.obj
    try:
        admin_ids = set(_parse_user_ids(admins))
        targets = [
            UserContext(user_id=uid, is_admin=uid in admin_ids)
            for uid in _parse_user_ids(users)
        ]
        run = execute_access_audit(
            state.caller,
            targets,
            partitioner=state.services.partitioner,
            grants=state.services.grants,
            reports_root=report,
            console=console,
        )
        if run is not None:
            console.print(f"[green]Run:[/green] {run.output_dir}")
            console.print(f"[green]Manifest:[/green] {run.manifest_path}")
    except (ValueError, RuntimeError) as exc:
        _handle_error(exc)


def main() -> None:
    """Project entrypoint for `nsreg` script."""
    app()


if __name__ == "__main__":
    main()
