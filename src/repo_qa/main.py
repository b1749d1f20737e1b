from __future__ import annotations

from repo_qa.interface.cli import app


def main() -> None:
    """Run the ``repo-qa`` command-line interface."""
    app()


if __name__ == "__main__":
    main()
