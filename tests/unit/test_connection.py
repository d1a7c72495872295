"""Tests for resolving a context into connection properties."""
import pytest

from franzpy.config.models import (
    AuthConfigEntry,
    ClusterEntry,
    ContextEntry,
    SaslConfig,
    SaslMechanism,
    SecurityProtocol,
)
from franzpy.connection import resolve_connection_properties
from franzpy.exceptions import ClusterNotFoundError, NoCurrentContextError


class TestResolveConnectionProperties:

    def test_local_plaintext(self, store, credential_resolver):
        store.set_cluster(ClusterEntry(name="local", bootstrap_servers="localhost:9092"))
        store.set_context(ContextEntry(name="local", cluster="local"))

        props = resolve_connection_properties("local", store, credential_resolver)

        assert props["bootstrap.servers"] == "localhost:9092"
        assert props["security.protocol"] == "PLAINTEXT"
        assert "sasl.mechanism" not in props

    def test_current_context_with_env_password(self, store, credential_resolver, env):
        env["KAFKA_PASSWORD"] = "from-env"
        store.set_cluster(ClusterEntry(name="c", bootstrap_servers="c:9093"))
        store.set_auth_config(AuthConfigEntry(
            name="sasl",
            security_protocol=SecurityProtocol.SASL_SSL,
            sasl=SaslConfig(mechanism=SaslMechanism.SCRAM_SHA_256, username="u", password="${KAFKA_PASSWORD}"),
            kafka_properties={"request.timeout.ms": "111"},
        ))
        store.set_context(ContextEntry(name="dev", cluster="c", auth="sasl"))
        store.set_current_context("dev")

        props = resolve_connection_properties(store=store, credential_resolver=credential_resolver)

        assert props["sasl.mechanism"] == "SCRAM-SHA-256"
        assert 'password="from-env"' in props["sasl.jaas.config"]
        assert props["request.timeout.ms"] == "111"

    def test_empty_document(self, store, credential_resolver):
        with pytest.raises(NoCurrentContextError):
            resolve_connection_properties(store=store, credential_resolver=credential_resolver)

    def test_dangling_cluster(self, store, credential_resolver):
        store.set_context(ContextEntry(name="dev", cluster="missing"))

        with pytest.raises(ClusterNotFoundError):
            resolve_connection_properties("dev", store, credential_resolver)
