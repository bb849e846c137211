"""Fabulator settings.

Settings are read from ``FABULATOR_`` prefixed environment variables and from the
``.FABulous/.env`` file of a FABulous project directory.
"""

import codecs
from pathlib import Path
from typing import Annotated

from loguru import logger
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class FabulatorSettings(BaseSettings):
    """Fabulator settings.

    Attributes
    ----------
    proj_dir : Path
        FABulous project directory used to discover the geometry file.
    geometry_file_names : list[str]
        Candidate geometry file names, tried in order inside every search directory.
    geometry_search_dirs : list[str]
        Directories relative to ``proj_dir`` searched for a geometry file.
        The empty string stands for ``proj_dir`` itself.
    encoding : str
        Text encoding of every parsed input file.
    """

    model_config = SettingsConfigDict(env_prefix="FABULATOR_", case_sensitive=False, extra="allow")

    proj_dir: Path = Path.cwd()
    geometry_file_names: Annotated[list[str], NoDecode] = ["geometry.csv", "eFPGA_geometry.csv"]
    geometry_search_dirs: Annotated[list[str], NoDecode] = ["", "demo", "demo/Fabric", "Fabric"]
    encoding: str = "utf-8"

    @field_validator("proj_dir", mode="after")
    @classmethod
    def is_dir(cls, value: Path) -> Path:
        """Check if the project directory exists."""
        if not value.is_dir():
            raise ValueError(f"{value} is not a valid directory")
        return value

    @field_validator("geometry_file_names", "geometry_search_dirs", mode="before")
    @classmethod
    def split_list(cls, value: str | list[str]) -> list[str]:
        """Accept a comma separated string in place of a list."""
        if isinstance(value, str):
            return [i.strip() for i in value.split(",")]
        return value

    @field_validator("encoding", mode="after")
    @classmethod
    def validate_encoding(cls, value: str) -> str:
        """Reject encodings unknown to the codec registry."""
        try:
            codecs.lookup(value)
        except LookupError:
            raise ValueError(f"Unknown encoding: {value}") from None
        return value


# Module-level singleton pattern for settings management
_context_instance: FabulatorSettings | None = None


def init_context(
    project_dir: Path | None = None,
    project_dot_env: Path | None = None,
) -> FabulatorSettings:
    """Initialize the global fabulator context with settings.

    Subsequent calls will override the existing context.

    Args:
        project_dir: FABulous project directory. Its ``.FABulous/.env`` file is read
            when present.
        project_dot_env: Additional ``.env`` file, read last (highest priority).

    Returns:
        The initialized FabulatorSettings instance
    """
    global _context_instance
    env_files: list[Path] = []

    if project_dir is not None and (project_dir / ".FABulous" / ".env").exists():
        env_files.append(project_dir / ".FABulous" / ".env")

    if project_dot_env is not None:
        if project_dot_env.exists():
            env_files.append(project_dot_env)
        else:
            logger.warning(f"Project .env file not found: {project_dot_env} this is ignored")

    if project_dir is not None:
        _context_instance = FabulatorSettings(_env_file=tuple(env_files), proj_dir=project_dir)
    else:
        _context_instance = FabulatorSettings(_env_file=tuple(env_files))

    logger.debug("Fabulator context initialized")
    return _context_instance


def get_context() -> FabulatorSettings:
    """Get the global fabulator context.

    Returns:
        The current FabulatorSettings instance

    Raises:
        RuntimeError: If context has not been initialized with init_context()
    """
    if _context_instance is None:
        raise RuntimeError("Fabulator context not initialized. Call init_context() first.")

    return _context_instance


def is_context_initialized() -> bool:
    """Whether init_context() has been called since the last reset."""
    return _context_instance is not None


def reset_context() -> None:
    """Reset the global context (primarily for testing)."""
    global _context_instance
    _context_instance = None
    logger.debug("Fabulator context reset")


__all__ = ["FabulatorSettings", "get_context", "init_context", "is_context_initialized", "reset_context"]
