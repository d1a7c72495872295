"""Custom exceptions for franzpy.

Every error raised while loading the configuration document, resolving a
context or building connection properties derives from
:class:`FranzPyException`. The CLI maps each kind to a single-line message
and a non-zero exit code.
"""

import logging
from typing import Optional

from pydantic import ValidationError


EXIT_VALIDATION = 2
EXIT_LOAD = 3
EXIT_CREDENTIALS = 4
EXIT_KAFKA = 5


class FranzPyException(Exception):
    """Base exception for all franzpy errors.

    Provides common functionality for error reporting and logging.
    """

    exit_code = 1

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        suggestions: Optional[list[str]] = None,
        original_error: Optional[Exception] = None
    ):
        """Initialize franzpy exception.

        Args:
            message: Main error message
            details: Additional technical details
            suggestions: List of suggested solutions
            original_error: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.details = details
        self.suggestions = suggestions or []
        self.original_error = original_error

        self._log_error()

    def _log_error(self) -> None:
        """Log the error at debug level; the CLI prints the user-facing line."""
        logger = logging.getLogger(self.__class__.__module__)
        logger.debug(f"{self.__class__.__name__}: {self.message}")
        if self.details:
            logger.debug(f"Details: {self.details}")
        if self.original_error:
            logger.debug(f"Original error: {self.original_error}")

    def get_user_message(self) -> str:
        """Get user-friendly error message with suggestions."""
        msg = self.message
        if self.suggestions:
            msg += "\n\nSuggestions:"
            for i, suggestion in enumerate(self.suggestions, 1):
                msg += f"\n  {i}. {suggestion}"
        return msg


# Configuration document

class ConfigLoadError(FranzPyException):
    """Raised when the stored configuration document cannot be parsed."""

    exit_code = EXIT_LOAD

    def __init__(
        self,
        config_path: str,
        reason: str,
        details: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(
            message=f"Failed to load config {config_path}: {reason}",
            details=details,
            suggestions=[
                f"Check the YAML syntax of {config_path}",
                "Run 'franzpy config view' after fixing the file to confirm it loads",
            ],
            original_error=original_error
        )
        self.config_path = config_path


class ConfigValidationError(FranzPyException):
    """Raised when a reference does not resolve or a field combination is invalid."""

    exit_code = EXIT_VALIDATION


class NoCurrentContextError(ConfigValidationError):
    """Raised when no context name is given and no current context is set."""

    def __init__(self):
        super().__init__(
            message="No current context set. Use 'franzpy config use-context <name>' to set one.",
            suggestions=[
                "List available contexts with 'franzpy config get-contexts'",
                "Pass --context <name> to select a context for a single command",
            ]
        )


class ContextNotFoundError(ConfigValidationError):
    """Raised when a context name is not present in the document."""

    def __init__(self, context_name: str):
        super().__init__(
            message=(
                f"Context '{context_name}' not found. "
                "Use 'franzpy config get-contexts' to list available contexts."
            ),
            suggestions=[f"Create it with 'franzpy config set-context {context_name} --cluster <cluster>'"]
        )
        self.context_name = context_name


class ClusterNotFoundError(ConfigValidationError):
    """Raised when a context references a cluster that does not exist."""

    def __init__(self, cluster_name: str, context_name: str):
        super().__init__(
            message=(
                f"Cluster '{cluster_name}' not found for context '{context_name}'. "
                f"Use 'franzpy config set-cluster {cluster_name} -b <bootstrap-servers>' to create it."
            )
        )
        self.cluster_name = cluster_name
        self.context_name = context_name


class AuthConfigNotFoundError(ConfigValidationError):
    """Raised when a context references an auth config that does not exist."""

    def __init__(self, auth_name: str, context_name: str):
        super().__init__(
            message=(
                f"Auth config '{auth_name}' not found for context '{context_name}'. "
                f"Use 'franzpy config set-credentials {auth_name}' to create it."
            )
        )
        self.auth_name = auth_name
        self.context_name = context_name


# Credentials

class CredentialResolutionError(FranzPyException):
    """Raised when secret material cannot be resolved from its declared source."""

    exit_code = EXIT_CREDENTIALS


class CredentialFileNotFoundError(CredentialResolutionError):
    """Raised when a credential file does not exist."""

    def __init__(self, path: str):
        super().__init__(
            message=f"Credential file not found: {path} (check the path in the auth config)",
            suggestions=[f"Verify the file exists at: {path}"]
        )
        self.path = path


class EnvVarNotSetError(CredentialResolutionError):
    """Raised when a ${VAR} reference names an unset environment variable."""

    def __init__(self, var_name: str):
        super().__init__(
            message=f"Environment variable '{var_name}' is not set; export {var_name}=... before running the command",
            suggestions=[f"Export it before running the command: export {var_name}=..."]
        )
        self.var_name = var_name


# Kafka resources

class TopicNotFoundError(FranzPyException):
    """Raised when a topic does not exist on the cluster."""

    exit_code = EXIT_KAFKA

    def __init__(self, topic_name: str):
        super().__init__(
            message=f"Topic '{topic_name}' not found.",
            suggestions=["List topics with 'franzpy topics list'"]
        )
        self.topic_name = topic_name


class GroupNotFoundError(FranzPyException):
    """Raised when a consumer group does not exist on the cluster."""

    exit_code = EXIT_KAFKA

    def __init__(self, group_id: str):
        super().__init__(
            message=f"Consumer group '{group_id}' not found.",
            suggestions=["List consumer groups with 'franzpy groups list --show-empty'"]
        )
        self.group_id = group_id


def summarize_validation_error(error: ValidationError) -> str:
    """Summarize a pydantic ValidationError as one ``location: message`` line."""
    problems = error.errors()
    if not problems:
        return str(error).splitlines()[0]
    first = problems[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    summary = f"{location}: {first['msg']}" if location else first["msg"]
    if len(problems) > 1:
        summary += f" (and {len(problems) - 1} more)"
    return summary
