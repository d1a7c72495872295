"""Configuration document models.

The document is stored as YAML with dashed keys (``bootstrap-servers``,
``auth-configs``...). Models accept both the dashed alias and the Python
field name, and are always written back by alias.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from franzpy.exceptions import ConfigValidationError

API_VERSION = "v1"
DEFAULT_STORE_TYPE = "JKS"


class SecurityProtocol(str, Enum):
    """Kafka security protocols."""
    PLAINTEXT = "PLAINTEXT"
    SSL = "SSL"
    SASL_PLAINTEXT = "SASL_PLAINTEXT"
    SASL_SSL = "SASL_SSL"


class SaslMechanism(str, Enum):
    """SASL authentication mechanisms.

    Values are the names Kafka expects in ``sasl.mechanism``. The member
    names (``SCRAM_SHA_256``) are accepted on load as well.
    """
    PLAIN = "PLAIN"
    SCRAM_SHA_256 = "SCRAM-SHA-256"
    SCRAM_SHA_512 = "SCRAM-SHA-512"
    GSSAPI = "GSSAPI"
    OAUTHBEARER = "OAUTHBEARER"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            normalized = value.strip().upper().replace("_", "-")
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class _DocumentModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)


class ContextEntry(_DocumentModel):
    """A named context referencing a cluster and an optional auth config."""

    name: str
    cluster: str
    auth: Optional[str] = None


class ClusterEntry(_DocumentModel):
    """Kafka cluster connection information."""

    name: str
    bootstrap_servers: str = Field(alias="bootstrap-servers")


class SaslConfig(_DocumentModel):
    """SASL options for all supported mechanisms.

    Only the fields relevant to ``mechanism`` are used when building
    connection properties.
    """

    mechanism: SaslMechanism

    # PLAIN, SCRAM
    username: Optional[str] = None
    password: Optional[str] = None
    password_file: Optional[str] = Field(default=None, alias="password-file")

    # GSSAPI
    principal: Optional[str] = None
    keytab: Optional[str] = None
    krb5_conf: Optional[str] = Field(default=None, alias="krb5-conf")

    # OAUTHBEARER
    token_endpoint: Optional[str] = Field(default=None, alias="token-endpoint")
    client_id: Optional[str] = Field(default=None, alias="client-id")
    client_secret: Optional[str] = Field(default=None, alias="client-secret")
    scope: Optional[str] = None

    @field_validator("mechanism", mode="before")
    @classmethod
    def normalize_mechanism(cls, v):
        """Accept SCRAM_SHA_256 and lower-case spellings."""
        if isinstance(v, str):
            return SaslMechanism(v)
        return v


@dataclass(frozen=True)
class KeystoreSsl:
    """SSL material supplied as truststore/keystore files."""
    truststore_location: Optional[str] = None
    truststore_password: Optional[str] = None
    truststore_type: str = DEFAULT_STORE_TYPE
    keystore_location: Optional[str] = None
    keystore_password: Optional[str] = None
    keystore_type: str = DEFAULT_STORE_TYPE
    key_password: Optional[str] = None


@dataclass(frozen=True)
class PemSsl:
    """SSL material supplied as PEM files.

    ``client_file`` and ``client_key_file`` are either both set (mTLS) or
    both ``None``.
    """
    ca_file: Optional[str] = None
    client_file: Optional[str] = None
    client_key_file: Optional[str] = None

    @property
    def mutual_tls(self) -> bool:
        return self.client_file is not None


class SslConfig(_DocumentModel):
    """SSL/TLS options as stored in the document.

    The stored block mixes two mutually exclusive modes; use
    :meth:`resolve_mode` to obtain the validated :class:`KeystoreSsl` or
    :class:`PemSsl` variant.
    """

    truststore_location: Optional[str] = Field(default=None, alias="truststore-location")
    truststore_password: Optional[str] = Field(default=None, alias="truststore-password")
    truststore_type: Optional[str] = Field(default=None, alias="truststore-type")
    keystore_location: Optional[str] = Field(default=None, alias="keystore-location")
    keystore_password: Optional[str] = Field(default=None, alias="keystore-password")
    keystore_type: Optional[str] = Field(default=None, alias="keystore-type")
    key_password: Optional[str] = Field(default=None, alias="key-password")

    ca_file: Optional[str] = Field(default=None, alias="cafile")
    client_file: Optional[str] = Field(default=None, alias="clientfile")
    client_key_file: Optional[str] = Field(default=None, alias="clientkeyfile")

    def _store_fields(self) -> list[Optional[str]]:
        # Store types default to JKS and do not select a mode on their own.
        return [
            self.truststore_location,
            self.truststore_password,
            self.keystore_location,
            self.keystore_password,
            self.key_password,
        ]

    def _pem_fields(self) -> list[Optional[str]]:
        return [self.ca_file, self.client_file, self.client_key_file]

    @property
    def is_pem(self) -> bool:
        return any(value is not None for value in self._pem_fields())

    def resolve_mode(self) -> KeystoreSsl | PemSsl:
        """Validate the mode rules and return the matching variant.

        Raises:
            ConfigValidationError: If PEM and keystore fields are mixed, or
                only one of clientfile/clientkeyfile is set
        """
        if not self.is_pem:
            return KeystoreSsl(
                truststore_location=self.truststore_location,
                truststore_password=self.truststore_password,
                truststore_type=self.truststore_type or DEFAULT_STORE_TYPE,
                keystore_location=self.keystore_location,
                keystore_password=self.keystore_password,
                keystore_type=self.keystore_type or DEFAULT_STORE_TYPE,
                key_password=self.key_password,
            )

        if any(value is not None for value in self._store_fields()):
            raise ConfigValidationError(
                "PEM fields cannot be combined with truststore/keystore fields",
                suggestions=[
                    "Use either cafile/clientfile/clientkeyfile or the truststore/keystore options, not both"
                ]
            )
        if (self.client_file is None) != (self.client_key_file is None):
            raise ConfigValidationError(
                "both clientfile and clientkeyfile must be set for mTLS",
                suggestions=["Pass --clientfile and --clientkeyfile together, or neither"]
            )
        return PemSsl(
            ca_file=self.ca_file,
            client_file=self.client_file,
            client_key_file=self.client_key_file,
        )


class AuthConfigEntry(_DocumentModel):
    """Authentication configuration for connecting to Kafka."""

    name: str
    security_protocol: SecurityProtocol = Field(alias="security-protocol")
    sasl: Optional[SaslConfig] = None
    ssl: Optional[SslConfig] = None
    # Merged last-wins into the final connection properties.
    kafka_properties: dict[str, str] = Field(default_factory=dict, alias="kafka-properties")

    @field_validator("kafka_properties", mode="before")
    @classmethod
    def stringify_properties(cls, v):
        """Accept YAML booleans as Kafka's ``true``/``false``; reject empty values."""
        if not isinstance(v, dict):
            return v
        properties = {}
        for key, value in v.items():
            if value is None:
                raise ValueError(f"kafka-properties value for '{key}' must not be empty")
            if isinstance(value, bool):
                value = "true" if value else "false"
            properties[key] = value
        return properties


class ConfigDocument(_DocumentModel):
    """Root configuration document."""

    api_version: str = Field(default=API_VERSION, alias="apiVersion")
    current_context: Optional[str] = Field(default=None, alias="current-context")
    contexts: list[ContextEntry] = Field(default_factory=list)
    clusters: list[ClusterEntry] = Field(default_factory=list)
    auth_configs: list[AuthConfigEntry] = Field(default_factory=list, alias="auth-configs")

    def find_context(self, name: str) -> Optional[ContextEntry]:
        return next((c for c in self.contexts if c.name == name), None)

    def find_cluster(self, name: str) -> Optional[ClusterEntry]:
        return next((c for c in self.clusters if c.name == name), None)

    def find_auth_config(self, name: str) -> Optional[AuthConfigEntry]:
        return next((a for a in self.auth_configs if a.name == name), None)

    def to_yaml_dict(self) -> dict:
        """Dump in the on-disk shape (dashed keys, unset fields omitted)."""
        dumped = self.model_dump(by_alias=True, exclude_none=True, mode="json")
        for auth in dumped.get("auth-configs", []):
            if not auth.get("kafka-properties"):
                auth.pop("kafka-properties", None)
        # current-context stays visible (as null) when unset
        return {
            "apiVersion": self.api_version,
            "current-context": self.current_context,
            "contexts": dumped["contexts"],
            "clusters": dumped["clusters"],
            "auth-configs": dumped["auth-configs"],
        }
