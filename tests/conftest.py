"""Shared fixtures for installer tests."""

import io
import sys
from pathlib import Path

import pytest
from rich.console import Console

from analytics_installer.config import InstallerSettings


FAKE_COMPOSE = '''
import os
import sys
from pathlib import Path

SERVICES = ["analytics-service", "qdrant", "northwind-db", "analytics-ui"]

action = sys.argv[1]
Path(action + ".ran").write_text(" ".join(sys.argv[1:]))
exit_code = int(os.environ.get("FAKE_COMPOSE_%s_EXIT" % action.upper(), "0"))

if action == "build":
    for service in SERVICES:
        print("#1 [%s] building image" % service, flush=True)
    if exit_code:
        print("ERROR: target analytics-service: failed to solve", file=sys.stderr, flush=True)
elif action == "up":
    for service in SERVICES:
        for state in ("Creating", "Created", "Starting", "Started"):
            sys.stderr.write(" Container %s  %s\\n" % (service, state))
            sys.stderr.flush()

sys.exit(exit_code)
'''


@pytest.fixture
def project_root(tmp_path) -> Path:
    """An empty project root."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def fake_compose_settings(project_root, tmp_path) -> InstallerSettings:
    """Settings whose compose command is a Python script standing in for docker compose."""
    script = tmp_path / "fake_compose.py"
    script.write_text(FAKE_COMPOSE)
    return InstallerSettings(
        project_root=project_root,
        compose_command=[sys.executable, str(script)],
    )


@pytest.fixture
def quiet_console() -> Console:
    """A console that renders into memory."""
    return Console(file=io.StringIO(), force_terminal=False, width=100)
