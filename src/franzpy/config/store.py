"""Persistence of the configuration document.

The document is reloaded from disk for every operation. Nothing is cached
between calls, so edits made by another process (or by hand) are always
observed. There is no locking: concurrent writers race and the last write
wins.
"""
import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, Optional, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from franzpy.config.models import AuthConfigEntry, ClusterEntry, ConfigDocument, ContextEntry
from franzpy.config.settings import default_config_path
from franzpy.exceptions import ConfigLoadError, ContextNotFoundError, summarize_validation_error

logger = logging.getLogger(__name__)

_Entry = TypeVar("_Entry", bound=BaseModel)


def _yaml_location(error: yaml.YAMLError) -> str:
    """Position and problem of a YAML error, as a suffix for "invalid YAML"."""
    mark = getattr(error, "problem_mark", None)
    if mark is None:
        return ""
    problem = getattr(error, "problem", None)
    location = f" at line {mark.line + 1}, column {mark.column + 1}"
    return f"{location}: {problem}" if problem else location


def _upsert(entries: list[_Entry], entry: _Entry) -> None:
    """Replace the entry with the same name in place, or append it."""
    for index, existing in enumerate(entries):
        if existing.name == entry.name:
            entries[index] = entry
            return
    entries.append(entry)


def _remove(entries: list[_Entry], name: str) -> bool:
    """Remove entries named ``name``; return whether anything was removed."""
    remaining = [e for e in entries if e.name != name]
    if len(remaining) == len(entries):
        return False
    entries[:] = remaining
    return True


class ContextStore:
    """Loads, queries and mutates the configuration document."""

    def __init__(self, config_path: Optional[Path | str] = None):
        """Initialize ContextStore.

        Args:
            config_path: Location of the YAML document; defaults to
                ``~/.franz/config``
        """
        self.config_path = Path(config_path) if config_path is not None else default_config_path()

    def load_document(self) -> ConfigDocument:
        """Load the document, or an empty one if the file does not exist.

        Raises:
            ConfigLoadError: If the file exists but is not a valid document
        """
        if not self.config_path.exists():
            logger.debug(f"No config at {self.config_path}, using empty document")
            return ConfigDocument()

        try:
            with open(self.config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigLoadError(
                str(self.config_path), f"invalid YAML{_yaml_location(e)}", details=str(e), original_error=e
            )
        except OSError as e:
            raise ConfigLoadError(str(self.config_path), str(e), original_error=e)

        if data is None:
            return ConfigDocument()
        if not isinstance(data, dict):
            raise ConfigLoadError(str(self.config_path), "top level must be a mapping")

        try:
            return ConfigDocument.model_validate(data)
        except ValidationError as e:
            raise ConfigLoadError(
                str(self.config_path), summarize_validation_error(e), details=str(e), original_error=e
            )

    def save_document(self, document: ConfigDocument) -> None:
        """Write the document atomically (temp file, then rename)."""
        directory = self.config_path.parent
        directory.mkdir(parents=True, exist_ok=True)

        content = yaml.safe_dump(document.to_yaml_dict(), sort_keys=False, default_flow_style=False)

        fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=f".{self.config_path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self.config_path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug(f"Saved config to {self.config_path}")

    def _mutate(self, change: Callable[[ConfigDocument], bool]) -> bool:
        """Load, apply ``change`` and save if it reported a modification."""
        document = self.load_document()
        changed = change(document)
        if changed:
            self.save_document(document)
        return changed

    # Read-only projections

    def get_current_context_name(self) -> Optional[str]:
        return self.load_document().current_context

    def get_context(self, name: str) -> Optional[ContextEntry]:
        return self.load_document().find_context(name)

    def get_cluster(self, name: str) -> Optional[ClusterEntry]:
        return self.load_document().find_cluster(name)

    def get_auth_config(self, name: str) -> Optional[AuthConfigEntry]:
        return self.load_document().find_auth_config(name)

    def list_contexts(self) -> list[ContextEntry]:
        return self.load_document().contexts

    def list_clusters(self) -> list[ClusterEntry]:
        return self.load_document().clusters

    def list_auth_configs(self) -> list[AuthConfigEntry]:
        return self.load_document().auth_configs

    # Mutations

    def set_current_context(self, name: str) -> None:
        """Point ``current-context`` at an existing context.

        Raises:
            ContextNotFoundError: If no context is named ``name``
        """
        def change(document: ConfigDocument) -> bool:
            if document.find_context(name) is None:
                raise ContextNotFoundError(name)
            document.current_context = name
            return True

        self._mutate(change)

    def set_context(self, entry: ContextEntry) -> None:
        self._mutate(lambda document: _upsert(document.contexts, entry) or True)

    def set_cluster(self, entry: ClusterEntry) -> None:
        self._mutate(lambda document: _upsert(document.clusters, entry) or True)

    def set_auth_config(self, entry: AuthConfigEntry) -> None:
        self._mutate(lambda document: _upsert(document.auth_configs, entry) or True)

    def delete_context(self, name: str) -> bool:
        """Delete a context, clearing ``current-context`` if it pointed there."""
        def change(document: ConfigDocument) -> bool:
            if not _remove(document.contexts, name):
                return False
            if document.current_context == name:
                document.current_context = None
            return True

        return self._mutate(change)

    def delete_cluster(self, name: str) -> bool:
        """Delete a cluster. Contexts referencing it are left untouched."""
        return self._mutate(lambda document: _remove(document.clusters, name))

    def delete_auth_config(self, name: str) -> bool:
        """Delete an auth config. Contexts referencing it are left untouched."""
        return self._mutate(lambda document: _remove(document.auth_configs, name))
