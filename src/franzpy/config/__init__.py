"""Context configuration: document model, persistence and resolution."""
from franzpy.config.credentials import CredentialResolver
from franzpy.config.models import (
    AuthConfigEntry,
    ClusterEntry,
    ConfigDocument,
    ContextEntry,
    KeystoreSsl,
    PemSsl,
    SaslConfig,
    SaslMechanism,
    SecurityProtocol,
    SslConfig,
)
from franzpy.config.properties import ConnectionProfileBuilder
from franzpy.config.resolver import ContextResolver, ResolvedConnectionProfile, resolve_document
from franzpy.config.settings import Settings
from franzpy.config.store import ContextStore

__all__ = [
    "AuthConfigEntry",
    "ClusterEntry",
    "ConfigDocument",
    "ConnectionProfileBuilder",
    "ContextEntry",
    "ContextResolver",
    "ContextStore",
    "CredentialResolver",
    "KeystoreSsl",
    "PemSsl",
    "ResolvedConnectionProfile",
    "SaslConfig",
    "SaslMechanism",
    "SecurityProtocol",
    "Settings",
    "SslConfig",
    "resolve_document",
]
