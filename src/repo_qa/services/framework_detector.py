"""Framework detection from structure tags and the GitHub language breakdown."""

from __future__ import annotations

from typing import Mapping

from repo_qa.domain.entities import FrameworkMap, StructureSummary

# Checked in order; only the first present config file is recorded.
JS_CONFIG_FRAMEWORKS: tuple[tuple[str, str], ...] = (
    ("next.config.js", "Next.js"),
    ("nuxt.config.js", "Nuxt.js"),
    ("angular.json", "Angular"),
    ("remix.config.js", "Remix"),
)

JS_PACKAGE_MANAGERS: frozenset[str] = frozenset({"npm", "yarn", "pnpm"})

PYTHON_ENTRY_FRAMEWORKS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("manage.py",), "Django"),
    (("app.py", "wsgi.py"), "Flask"),
    (("fastapi.py",), "FastAPI"),
)


def _first_match(present: list[str], candidates: tuple[tuple[str, str], ...]) -> str | None:
    for filename, framework in candidates:
        if filename in present:
            return framework
    return None


def detect_frameworks(
    structure: StructureSummary, languages: Mapping[str, int]
) -> FrameworkMap:
    """Map structure tags plus languages onto the fixed framework vocabulary.

    Always returns every bucket; buckets with no match stay empty.
    """
    frameworks = FrameworkMap()

    if languages.get("JavaScript") or languages.get("TypeScript"):
        framework = _first_match(structure.config_files, JS_CONFIG_FRAMEWORKS)
        if framework:
            frameworks.javascript.append(framework)
        if JS_PACKAGE_MANAGERS.intersection(structure.package_managers):
            frameworks.javascript.append("Node.js")

    if languages.get("Python"):
        for filenames, framework in PYTHON_ENTRY_FRAMEWORKS:
            if any(name in structure.root_files for name in filenames):
                frameworks.python.append(framework)
                break

    return frameworks
