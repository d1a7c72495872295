"""Resolve a context into ready-to-use connection properties."""
from typing import Optional

from franzpy.config.credentials import CredentialResolver
from franzpy.config.properties import ConnectionProfileBuilder
from franzpy.config.resolver import ContextResolver
from franzpy.config.store import ContextStore


def resolve_connection_properties(
    context_name: Optional[str] = None,
    store: Optional[ContextStore] = None,
    credential_resolver: Optional[CredentialResolver] = None
) -> dict[str, str]:
    """Resolve ``context_name`` (or the current context) into connection properties.

    Args:
        context_name: Context to use; the current context when None
        store: Document store; defaults to ``~/.franz/config``
        credential_resolver: Resolver for secrets referenced by the auth config

    Returns:
        Kafka client properties for the context

    Raises:
        ConfigLoadError: If the document cannot be parsed
        ConfigValidationError: If a reference or field combination is invalid
        CredentialResolutionError: If a secret cannot be resolved
    """
    profile = ContextResolver(store or ContextStore()).resolve(context_name)
    return ConnectionProfileBuilder(credential_resolver).build(profile)
