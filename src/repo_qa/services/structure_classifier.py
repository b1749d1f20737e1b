"""Structure classification: tag repository root entries by fixed keywords."""

from __future__ import annotations

from typing import Iterable

from repo_qa.domain.entities import EntryKind, RootEntry, StructureSummary

TEST_DIRS: frozenset[str] = frozenset({"test", "tests", "__tests__", "spec"})

DOCS_DIRS: frozenset[str] = frozenset({"doc", "docs", "documentation"})

CI_DIRS: frozenset[str] = frozenset({".github", ".gitlab", "ci", ".circleci"})

CONFIG_SUFFIXES: tuple[str, ...] = (".json", ".yml", ".yaml", ".config.js")

CONFIG_NAMES: frozenset[str] = frozenset({".env.example"})

PACKAGE_MANAGERS: dict[str, str] = {
    "package.json": "npm",
    "yarn.lock": "yarn",
    "pnpm-lock.yaml": "pnpm",
    "Gemfile": "bundler",
    "requirements.txt": "pip",
    "Pipfile": "pip",
    "go.mod": "go",
}


def is_config_file(name: str) -> bool:
    return name.endswith(CONFIG_SUFFIXES) or name in CONFIG_NAMES


def classify_structure(entries: Iterable[RootEntry]) -> StructureSummary:
    """Classify root entries into a :class:`StructureSummary`.

    Directory names are compared lower-cased and exactly, never as
    substrings.  ``config_files`` and ``package_managers`` keep encounter
    order and may contain duplicates.
    """
    root_files: list[str] = []
    config_files: list[str] = []
    package_managers: list[str] = []
    has_tests = has_docs = has_ci = False

    for entry in entries:
        if entry.kind is EntryKind.FILE:
            root_files.append(entry.name)
            if is_config_file(entry.name):
                config_files.append(entry.name)
            manager = PACKAGE_MANAGERS.get(entry.name)
            if manager:
                package_managers.append(manager)
        elif entry.kind is EntryKind.DIR:
            lower = entry.name.lower()
            if lower in TEST_DIRS:
                has_tests = True
            elif lower in DOCS_DIRS:
                has_docs = True
            elif lower in CI_DIRS:
                has_ci = True

    return StructureSummary(
        root_files=root_files,
        has_tests=has_tests,
        has_docs=has_docs,
        has_ci=has_ci,
        config_files=config_files,
        package_managers=package_managers,
    )
