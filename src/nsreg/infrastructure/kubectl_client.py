"""Shared kubectl execution helpers."""

import json
import shlex
import subprocess
from pathlib import Path
from typing import Any, cast


class KubectlError(RuntimeError):
    """Raised when kubectl command execution fails."""


class KubectlNotFoundError(KubectlError):
    """Raised when kubectl reports the requested object does not exist."""


class KubectlAlreadyExistsError(KubectlError):
    """Raised when kubectl refuses to create an object that already exists."""


_SERVER_NOT_FOUND = "Error from server (NotFound)"
_SERVER_ALREADY_EXISTS = "Error from server (AlreadyExists)"


def _error_for_stderr(stderr: str) -> KubectlError:
    # Client-side config errors also say "not found"; only API answers count.
    if _SERVER_NOT_FOUND in stderr:
        return KubectlNotFoundError(f"kubectl command failed: {stderr}")
    if _SERVER_ALREADY_EXISTS in stderr:
        return KubectlAlreadyExistsError(f"kubectl command failed: {stderr}")
    return KubectlError(f"kubectl command failed: {stderr}")


def _run_kubectl(
    command: str,
    *,
    append_json_output: bool,
    context: str | None,
    kubeconfig: Path | None,
    timeout: float | None,
) -> subprocess.CompletedProcess[str]:
    args = ["kubectl"]
    if kubeconfig is not None:
        args.extend(["--kubeconfig", str(kubeconfig)])
    if context:
        args.extend(["--context", context])
    args.extend(shlex.split(command))
    if append_json_output:
        args.extend(["-o", "json"])
    try:
        return subprocess.run(
            args,
            capture_output=True,
            text=True,
            check=True,
            timeout=timeout,
        )
    except subprocess.CalledProcessError as exc:
        stderr = exc.stderr.strip() if exc.stderr else str(exc)
        raise _error_for_stderr(stderr) from exc
    except subprocess.TimeoutExpired as exc:
        raise KubectlError(f"kubectl timed out after {timeout}s: {command}") from exc
    except FileNotFoundError as exc:
        raise KubectlError("kubectl executable not found on PATH") from exc


def kubectl_json(
    command: str,
    *,
    append_json_output: bool = True,
    context: str | None = None,
    kubeconfig: Path | None = None,
    timeout: float | None = None,
) -> dict[str, Any]:
    """Execute kubectl command and parse JSON output."""
    result = _run_kubectl(
        command,
        append_json_output=append_json_output,
        context=context,
        kubeconfig=kubeconfig,
        timeout=timeout,
    )
    try:
        return cast(dict[str, Any], json.loads(result.stdout) if result.stdout else {})
    except json.JSONDecodeError as exc:
        raise KubectlError(f"kubectl returned invalid JSON: {exc}") from exc


def kubectl_text(
    command: str,
    *,
    context: str | None = None,
    kubeconfig: Path | None = None,
    timeout: float | None = None,
) -> str:
    """Execute kubectl command and return text output."""
    result = _run_kubectl(
        command,
        append_json_output=False,
        context=context,
        kubeconfig=kubeconfig,
        timeout=timeout,
    )
    return result.stdout
