# franzpy - kubeconfig-style administration CLI for Kafka
from franzpy.config import ConnectionProfileBuilder, ContextResolver, ContextStore, CredentialResolver
from franzpy.connection import resolve_connection_properties

__version__ = "0.1.0"

__all__ = [
    "ConnectionProfileBuilder",
    "ContextResolver",
    "ContextStore",
    "CredentialResolver",
    "resolve_connection_properties",
]
