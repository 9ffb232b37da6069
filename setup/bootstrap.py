"""
Azure demo state bootstrap.

The stack declares the storage account that should hold its own state, so the
first deployment cannot use that storage as its backend. Bootstrapping runs in
two phases:

  1. deploy with a local file backend, creating the storage account/container
  2. export the local state, point Pulumi.yaml at the blob backend, import the
     state there and confirm the plan is a no-op

Either phase can be re-run on its own with --phase.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import Callable, Mapping, Optional

import yaml
from rich.console import Console
from rich.panel import Panel
from rich.status import Status

from pulumi_azure_demo.backend import StateBackend
from pulumi_azure_demo.credentials import (
    MissingCredentialsError,
    require_azure_credentials,
    service_principal_environment,
)

BLUE = "#0078D4"

LOCAL_STATE_DIR = ".pulumi-bootstrap"

console = Console()

CommandRunner = Callable[[list[str], Mapping[str, str], str], subprocess.CompletedProcess]


class BootstrapError(Exception):
    step: str
    stderr: str

    def __init__(self, step: str, stderr: str):
        self.step = step
        self.stderr = stderr

    def __str__(self):
        return f"BootstrapError: {self.step} failed: {self.stderr}"


def _run_command(
    args: list[str], env: Mapping[str, str], cwd: str
) -> subprocess.CompletedProcess:
    return subprocess.run(
        args,
        cwd=cwd,
        env=dict(env),
        capture_output=True,
        text=True,
    )


class Bootstrapper:
    """Two-phase bootstrap of the blob state backend."""

    def __init__(
        self,
        project_dir: str,
        stack: str = "dev",
        runner: Optional[CommandRunner] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.project_dir = Path(project_dir).resolve()
        self.stack = stack
        self._runner = runner or _run_command
        self._environ = dict(os.environ if environ is None else environ)
        self._access_key: Optional[str] = None

    @property
    def local_state_dir(self) -> Path:
        return self.project_dir / LOCAL_STATE_DIR

    @property
    def local_backend_url(self) -> str:
        return f"file://{self.local_state_dir}"

    @property
    def export_file(self) -> Path:
        return self.local_state_dir / f"{self.stack}.export.json"

    def _local_env(self) -> dict[str, str]:
        return {**self._environ, "PULUMI_BACKEND_URL": self.local_backend_url}

    def _remote_env(self, backend: StateBackend) -> dict[str, str]:
        return {
            **self._environ,
            **service_principal_environment(self._environ),
            **backend.environment(self._access_key),
        }

    def _pulumi(self, step: str, args: list[str], env: Mapping[str, str]) -> str:
        cmd = ["pulumi", *args, "--stack", self.stack, "--cwd", str(self.project_dir)]
        with Status(f"  [dim]{step}...[/]", console=console, spinner="dots"):
            result = self._runner(cmd, env, str(self.project_dir))
        if result.returncode != 0:
            console.print(f"  [red]✗[/] {step}")
            raise BootstrapError(step, (result.stderr or "").strip())
        console.print(f"  [green]✓[/] {step}")
        return result.stdout or ""

    def read_backend(self, env: Optional[Mapping[str, str]] = None) -> StateBackend:
        """Build the backend target from the stack outputs."""
        stdout = self._pulumi(
            "Reading stack outputs",
            ["stack", "output", "--json", "--show-secrets"],
            env or self._local_env(),
        )
        try:
            outputs = json.loads(stdout)
            backend = StateBackend(
                resource_group_name=outputs["resource_group_name"],
                storage_account_name=outputs["storage_account_name"],
                container_name=outputs["container_name"],
                key=outputs["state_key"],
            )
            self._access_key = outputs.get("storage_account_key")
            return backend
        except (ValueError, KeyError) as e:
            raise BootstrapError("Reading stack outputs", f"unexpected outputs: {e}")

    def phase_one(self) -> StateBackend:
        """Deploy against a local file backend so the state storage exists."""
        console.print()
        console.print(f"  [{BLUE}]Phase 1/2[/] · Create state storage")
        console.print(f"  [dim]Local backend:[/] {self.local_backend_url}")
        console.print()

        self.local_state_dir.mkdir(parents=True, exist_ok=True)
        env = self._local_env()

        self._pulumi("Selecting local stack", ["stack", "select", "--create"], env)
        self._pulumi("Deploying stack", ["up", "--yes", "--skip-preview"], env)
        return self.read_backend(env)

    def phase_two(self, backend: Optional[StateBackend] = None) -> StateBackend:
        """Move local state into the blob backend and verify a no-op plan."""
        local_env = self._local_env()
        if backend is None:
            backend = self.read_backend(local_env)

        console.print()
        console.print(f"  [{BLUE}]Phase 2/2[/] · Migrate state")
        console.print(f"  [dim]Remote backend:[/] {backend.url}")
        console.print()

        self._pulumi(
            "Exporting local state",
            ["stack", "export", "--file", str(self.export_file)],
            local_env,
        )

        self.write_project_backend(backend)
        console.print("  [green]✓[/] Updated Pulumi.yaml backend")

        remote_env = self._remote_env(backend)
        self._pulumi("Selecting remote stack", ["stack", "select", "--create"], remote_env)
        self._pulumi(
            "Importing state",
            ["stack", "import", "--file", str(self.export_file)],
            remote_env,
        )
        self._pulumi(
            "Verifying no-op plan",
            ["preview", "--expect-no-changes"],
            remote_env,
        )
        return backend

    def write_project_backend(self, backend: StateBackend) -> None:
        project_file = self.project_dir / "Pulumi.yaml"
        with open(project_file) as f:
            project = yaml.safe_load(f) or {}

        project["backend"] = backend.project_backend()

        with open(project_file, "w") as f:
            yaml.safe_dump(project, f, default_flow_style=False, sort_keys=False)

    def run(self, phase: str = "all") -> StateBackend:
        if phase == "1":
            return self.phase_one()
        if phase == "2":
            return self.phase_two()
        return self.phase_two(self.phase_one())


def _print_header():
    console.print()
    console.print(
        Panel.fit(
            f"[bold {BLUE}]Azure Demo State Bootstrap[/]",
            border_style=BLUE,
            padding=(0, 2),
        )
    )
    console.print()


def run_bootstrap(
    project_dir: str = "demo-project", stack: str = "dev", phase: str = "all"
) -> bool:
    """Run the bootstrap; returns False on the first failing step."""
    _print_header()

    try:
        status = require_azure_credentials()
    except MissingCredentialsError as e:
        console.print(f"  [red]✗[/] {e}")
        console.print("  [dim]Set the service principal variables before bootstrapping.[/]")
        return False

    console.print("  [green]✓[/] Azure credentials present")
    if not status.has_pulumi_token:
        console.print("  [dim]PULUMI_ACCESS_TOKEN not set; using DIY backends only[/]")

    try:
        backend = Bootstrapper(project_dir, stack=stack).run(phase)
    except BootstrapError as e:
        console.print()
        console.print(f"  [red]✗[/] {e.step} failed")
        if e.stderr:
            console.print(f"  [dim]{e.stderr}[/]")
        return False

    console.print()
    console.print(
        Panel.fit(
            f"[green]State backend ready[/]\n[dim]{backend.url}[/]",
            border_style="green",
            padding=(0, 2),
        )
    )
    return True


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Azure Demo State Bootstrap")
    parser.add_argument(
        "--project-dir", default="demo-project", help="Directory holding Pulumi.yaml"
    )
    parser.add_argument("--stack", default="dev", help="Stack to bootstrap")
    parser.add_argument(
        "--phase",
        choices=["1", "2", "all"],
        default="all",
        help="Run only phase 1 (local deploy), phase 2 (migrate), or both",
    )
    args = parser.parse_args()

    success = run_bootstrap(args.project_dir, args.stack, args.phase)
    sys.exit(0 if success else 1)
