"""Credential resolution from inline values, files and environment variables."""
import logging
import os
import re
from pathlib import Path
from typing import Callable, Optional

from franzpy.exceptions import (
    CredentialFileNotFoundError,
    CredentialResolutionError,
    EnvVarNotSetError,
)

logger = logging.getLogger(__name__)


class CredentialResolver:
    """Resolves secret material from its declared source.

    Secrets may be given inline (optionally referencing environment
    variables with ``${VAR_NAME}``) or as a path to a file holding the
    value. Resolved values are never logged.
    """

    ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

    def __init__(
        self,
        home_dir: Optional[str] = None,
        env_provider: Optional[Callable[[str], Optional[str]]] = None
    ):
        """Initialize CredentialResolver.

        Args:
            home_dir: Directory substituted for a leading ``~``; defaults to
                the current user's home directory
            env_provider: Lookup used for ``${VAR}`` references; defaults to
                ``os.environ.get``
        """
        self.home_dir = home_dir if home_dir is not None else str(Path.home())
        self.env_provider = env_provider or os.environ.get

    def resolve(self, value: Optional[str]) -> Optional[str]:
        """Return ``value`` unchanged."""
        return value

    def resolve_file(self, path: Optional[str]) -> Optional[str]:
        """Read a credential from a file.

        Args:
            path: Path to the file, ``~/`` is expanded

        Returns:
            File content with surrounding whitespace stripped, or None if
            ``path`` is None

        Raises:
            CredentialFileNotFoundError: If the file does not exist
            CredentialResolutionError: If the file cannot be read
        """
        if path is None:
            return None

        file_path = Path(self.expand_path(path))
        if not file_path.exists():
            raise CredentialFileNotFoundError(path)

        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise CredentialResolutionError(
                f"Failed to read credential file: {path} - {e}",
                original_error=e
            )
        logger.debug("Read credential from file", extra={"credential_file": path})
        return content.strip()

    def resolve_env_var(self, value: Optional[str]) -> Optional[str]:
        """Substitute ``${VAR_NAME}`` references with environment values.

        Raises:
            EnvVarNotSetError: If a referenced variable is not set
        """
        if value is None:
            return None

        def _substitute(match: re.Match) -> str:
            var_name = match.group(1)
            env_value = self.env_provider(var_name)
            if env_value is None:
                raise EnvVarNotSetError(var_name)
            return env_value

        return self.ENV_VAR_PATTERN.sub(_substitute, value)

    def resolve_password(self, inline: Optional[str], password_file: Optional[str]) -> Optional[str]:
        """Resolve a password; an inline value takes precedence over a file."""
        if inline is not None:
            return self.resolve_env_var(inline)
        if password_file is not None:
            return self.resolve_file(password_file)
        return None

    def expand_path(self, path: Optional[str]) -> Optional[str]:
        """Expand a leading ``~/`` to the home directory."""
        if path is None:
            return None
        if path.startswith("~/"):
            return self.home_dir + path[1:]
        return path
