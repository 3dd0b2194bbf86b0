"""
Nox sessions for vecpack.

Sessions:
  - lint     : ruff + black + mypy over the package
  - unit     : unit tests (tests/unit)
  - property : hypothesis property tests (tests/property)

Pass extra args to pytest like:
  nox -s unit -- -k "varint" -vv
"""

from __future__ import annotations

import nox

nox.options.reuse_venv = True
nox.options.stop_on_first_error = False

TEST_PYTHONS = ["3.11", "3.12", "3.13"]


@nox.session(name="lint", python="3.11")
def lint(session: nox.Session) -> None:
    """Static analysis: ruff, black (check), mypy."""
    session.install("-e", ".[dev]")
    session.run("ruff", "check", "vecpack", "tests")
    session.run("black", "--check", "vecpack", "tests")
    session.run("mypy", "--pretty", "--show-error-codes", "--ignore-missing-imports", "vecpack")


@nox.session(name="unit", python=TEST_PYTHONS)
def unit(session: nox.Session) -> None:
    """Fast unit tests."""
    session.install("-e", ".[test]")
    session.run("pytest", "-q", "tests/unit", *session.posargs)


@nox.session(name="property", python=TEST_PYTHONS)
def property_tests(session: nox.Session) -> None:
    """Hypothesis property tests."""
    session.install("-e", ".[test]")
    session.run("pytest", "-q", "-m", "property", "tests/property", *session.posargs)
