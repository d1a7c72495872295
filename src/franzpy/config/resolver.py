"""Resolution of a context name into a flattened connection profile."""
import logging
from dataclasses import dataclass, field
from typing import Optional

from franzpy.config.models import ConfigDocument, SaslConfig, SecurityProtocol, SslConfig
from franzpy.config.store import ContextStore
from franzpy.exceptions import (
    AuthConfigNotFoundError,
    ClusterNotFoundError,
    ContextNotFoundError,
    NoCurrentContextError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedConnectionProfile:
    """Everything needed to connect to a cluster, computed per invocation."""
    context_name: str
    bootstrap_servers: str
    security_protocol: SecurityProtocol = SecurityProtocol.PLAINTEXT
    sasl: Optional[SaslConfig] = None
    ssl: Optional[SslConfig] = None
    extra_properties: dict[str, str] = field(default_factory=dict)


def resolve_document(document: ConfigDocument, context_name: Optional[str] = None) -> ResolvedConnectionProfile:
    """Flatten a context of ``document`` into a connection profile.

    Args:
        document: Loaded configuration document
        context_name: Context to resolve; the current context when None

    Returns:
        ResolvedConnectionProfile for the context

    Raises:
        NoCurrentContextError: If no name is given and no current context is set
        ContextNotFoundError: If the context does not exist
        ClusterNotFoundError: If the referenced cluster does not exist
        AuthConfigNotFoundError: If the referenced auth config does not exist
    """
    effective_name = context_name if context_name is not None else document.current_context
    if effective_name is None:
        raise NoCurrentContextError()

    context = document.find_context(effective_name)
    if context is None:
        raise ContextNotFoundError(effective_name)

    cluster = document.find_cluster(context.cluster)
    if cluster is None:
        raise ClusterNotFoundError(context.cluster, effective_name)

    if context.auth is None:
        logger.debug(f"Context '{effective_name}' has no auth config, using PLAINTEXT")
        return ResolvedConnectionProfile(
            context_name=effective_name,
            bootstrap_servers=cluster.bootstrap_servers,
        )

    auth = document.find_auth_config(context.auth)
    if auth is None:
        raise AuthConfigNotFoundError(context.auth, effective_name)

    logger.debug(
        f"Resolved context '{effective_name}'",
        extra={"cluster": cluster.name, "auth": auth.name, "security_protocol": auth.security_protocol.value}
    )
    return ResolvedConnectionProfile(
        context_name=effective_name,
        bootstrap_servers=cluster.bootstrap_servers,
        security_protocol=auth.security_protocol,
        sasl=auth.sasl,
        ssl=auth.ssl,
        extra_properties=dict(auth.kafka_properties),
    )


class ContextResolver:
    """Resolves contexts against a freshly loaded document."""

    def __init__(self, store: ContextStore):
        self.store = store

    def resolve(self, context_name: Optional[str] = None) -> ResolvedConnectionProfile:
        """Load the document and resolve ``context_name`` (or the current context)."""
        return resolve_document(self.store.load_document(), context_name)
