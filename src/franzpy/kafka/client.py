"""Kafka AdminClient construction from connection properties."""
import logging
import re
from typing import Any, Dict, Optional

from confluent_kafka.admin import AdminClient

from franzpy.config.properties import DEFAULT_API_TIMEOUT_MS, PEM_STORE_TYPE
from franzpy.exceptions import ConfigValidationError

logger = logging.getLogger(__name__)

# Kafka client name -> librdkafka name
RENAMED_KEYS = {
    "request.timeout.ms": "socket.timeout.ms",
    "ssl.truststore.certificates": "ssl.ca.pem",
    "ssl.keystore.certificate.chain": "ssl.certificate.pem",
    "ssl.keystore.key": "ssl.key.pem",
}

# Consumed by the translation itself
CONSUMED_KEYS = {
    "default.api.timeout.ms",
    "sasl.jaas.config",
    "ssl.truststore.location",
    "ssl.truststore.password",
    "ssl.truststore.type",
    "ssl.keystore.type",
}

JAAS_OPTION_PATTERN = re.compile(r'(\w+)="((?:[^"\\]|\\.)*)"')


def parse_jaas_options(jaas_config: str) -> Dict[str, str]:
    """Extract the quoted ``key="value"`` options of a JAAS login module line."""
    return {
        key: re.sub(r"\\(.)", r"\1", value)
        for key, value in JAAS_OPTION_PATTERN.findall(jaas_config)
    }


def _translate_jaas(mechanism: str, jaas_config: str) -> Dict[str, str]:
    options = parse_jaas_options(jaas_config)
    config: Dict[str, str] = {}

    if mechanism in ("PLAIN", "SCRAM-SHA-256", "SCRAM-SHA-512"):
        if "username" in options:
            config["sasl.username"] = options["username"]
        if "password" in options:
            config["sasl.password"] = options["password"]
    elif mechanism == "GSSAPI":
        if "keyTab" in options:
            config["sasl.kerberos.keytab"] = options["keyTab"]
        if "principal" in options:
            config["sasl.kerberos.principal"] = options["principal"]
    elif mechanism == "OAUTHBEARER":
        config["sasl.oauthbearer.method"] = "oidc"
        if "clientId" in options:
            config["sasl.oauthbearer.client.id"] = options["clientId"]
        if "clientSecret" in options:
            config["sasl.oauthbearer.client.secret"] = options["clientSecret"]
        if "scope" in options:
            config["sasl.oauthbearer.scope"] = options["scope"]
    return config


def _translate_stores(properties: Dict[str, str]) -> Dict[str, str]:
    config: Dict[str, str] = {}

    truststore = properties.get("ssl.truststore.location")
    if truststore is not None:
        truststore_type = properties.get("ssl.truststore.type", "JKS").upper()
        if truststore_type != PEM_STORE_TYPE:
            raise ConfigValidationError(
                f"Truststore type {truststore_type} is not supported by the Kafka client; "
                "use a PEM CA file instead",
                suggestions=[
                    "Convert the truststore to PEM and pass it with --cafile",
                    "Or set --truststore-type PEM if the file is already PEM encoded",
                ]
            )
        config["ssl.ca.location"] = truststore

    keystore = properties.get("ssl.keystore.location")
    if keystore is not None and properties.get("ssl.keystore.type", "JKS").upper() == "JKS":
        raise ConfigValidationError(
            "JKS keystores are not supported by the Kafka client; use PKCS12 or PEM files",
            suggestions=[
                "Convert the keystore with keytool -importkeystore -deststoretype PKCS12",
                "Or pass the client certificate and key with --clientfile/--clientkeyfile",
            ]
        )
    return config


def to_confluent_config(properties: Dict[str, str]) -> Dict[str, Any]:
    """Translate Kafka client properties into a librdkafka configuration.

    Args:
        properties: Output of ConnectionProfileBuilder.build

    Returns:
        Configuration dictionary for confluent_kafka clients

    Raises:
        ConfigValidationError: If the properties use a JKS store, which
            librdkafka cannot read
    """
    config: Dict[str, Any] = {}

    for key, value in properties.items():
        if key in CONSUMED_KEYS:
            continue
        if key in RENAMED_KEYS:
            config[RENAMED_KEYS[key]] = value
        else:
            # Shared names (bootstrap.servers, sasl.mechanism...) and user kafka-properties
            config[key] = value

    config.update(_translate_stores(properties))

    jaas_config = properties.get("sasl.jaas.config")
    if jaas_config:
        mechanism = properties.get("sasl.mechanism", "GSSAPI")
        config.update(_translate_jaas(mechanism, jaas_config))

    return config


def operation_timeout(properties: Dict[str, str]) -> float:
    """Admin operation timeout in seconds, from ``default.api.timeout.ms``."""
    raw = properties.get("default.api.timeout.ms", str(DEFAULT_API_TIMEOUT_MS))
    try:
        return int(raw) / 1000.0
    except ValueError:
        raise ConfigValidationError(f"default.api.timeout.ms must be an integer, got '{raw}'")


class KafkaSession:
    """Caller-owned AdminClient for the lifetime of one command.

    Use as a context manager::

        with KafkaSession(properties) as session:
            TopicManager(session.admin_client, session.timeout).list_topics()
    """

    def __init__(self, properties: Dict[str, str]):
        self.properties = properties
        self.timeout = operation_timeout(properties)
        self._admin_client: Optional[AdminClient] = None

    def open(self) -> "KafkaSession":
        if self._admin_client is None:
            config = to_confluent_config(self.properties)
            logger.info(f"Connecting to {config.get('bootstrap.servers')}")
            self._admin_client = AdminClient(config)
        return self

    @property
    def admin_client(self) -> AdminClient:
        if self._admin_client is None:
            raise RuntimeError("KafkaSession is not open")
        return self._admin_client

    def close(self) -> None:
        # AdminClient has no explicit close; dropping the reference releases it.
        self._admin_client = None

    def __enter__(self) -> "KafkaSession":
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
