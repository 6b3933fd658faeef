"""Nox configuration."""

from __future__ import annotations

import sys

import nox

nox.options.default_venv_backend = "uv|virtualenv"

package = "jsonpath_stream"
python_versions = ["3.10", "3.11", "3.12", "3.13"]
main_python = python_versions[-1]
locations = "jsonpath_stream", "tests", "noxfile.py"
nox.options.sessions = [
    f"mypy-{main_python}",
    f"tests-{main_python}",
]


@nox.session(python=[python_versions[0], main_python])
def mypy(session: nox.Session) -> None:
    """Check types with mypy."""
    args = session.posargs or [package]
    session.install(".[typing]")
    session.run("mypy", *args)
    if not session.posargs:
        session.run("mypy", f"--python-executable={sys.executable}", "noxfile.py")


@nox.session(python=python_versions, tags=["test"])
def tests(session: nox.Session) -> None:
    """Execute pytest tests."""
    session.install(".[test]")
    session.run("pytest", "--durations=10", *session.posargs)

