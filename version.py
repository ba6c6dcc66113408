"""
Application version: installed package metadata, else the [project] table of
the pyproject.toml next to this file.
"""
import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION = "repair-planner"
FALLBACK_VERSION = "0.1.0"


def get_app_version(pyproject: Path = Path(__file__).parent / "pyproject.toml") -> str:
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        pass

    try:
        with open(pyproject, "rb") as f:
            project = tomllib.load(f).get("project", {})
    except (OSError, tomllib.TOMLDecodeError):
        return FALLBACK_VERSION
    return project.get("version", FALLBACK_VERSION)


__version__ = get_app_version()
