"""Builds Kafka client properties from a resolved connection profile.

Property names follow the Kafka client configuration
(``security.protocol``, ``sasl.jaas.config``, ``ssl.truststore.location``...).
:func:`franzpy.kafka.client.to_confluent_config` translates the result for
librdkafka.
"""
import logging
from typing import Optional

from franzpy.config.credentials import CredentialResolver
from franzpy.config.models import KeystoreSsl, PemSsl, SaslConfig, SaslMechanism, SslConfig
from franzpy.config.resolver import ResolvedConnectionProfile
from franzpy.exceptions import ConfigValidationError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_MS = 10000
DEFAULT_API_TIMEOUT_MS = 30000
KERBEROS_SERVICE_NAME = "kafka"
PEM_STORE_TYPE = "PEM"

PLAIN_LOGIN_MODULE = "org.apache.kafka.common.security.plain.PlainLoginModule"
SCRAM_LOGIN_MODULE = "org.apache.kafka.common.security.scram.ScramLoginModule"
KRB5_LOGIN_MODULE = "com.sun.security.auth.module.Krb5LoginModule"
OAUTHBEARER_LOGIN_MODULE = "org.apache.kafka.common.security.oauthbearer.OAuthBearerLoginModule"


def jaas_quote(value: Optional[str]) -> str:
    """Quote a JAAS option value, escaping backslashes and double quotes."""
    text = "" if value is None else value
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


class ConnectionProfileBuilder:
    """Turns a :class:`ResolvedConnectionProfile` into connection properties.

    Steps run in a fixed order (SSL, then SASL, then ``kafka-properties``)
    so that user-supplied properties always win. Any validation or
    credential failure aborts the build.
    """

    def __init__(self, credential_resolver: Optional[CredentialResolver] = None):
        self.credentials = credential_resolver or CredentialResolver()

    def build(self, profile: ResolvedConnectionProfile) -> dict[str, str]:
        """Build the property set for ``profile``.

        Raises:
            ConfigValidationError: If SSL or SASL settings are invalid
            CredentialResolutionError: If a secret cannot be resolved
        """
        props: dict[str, str] = {
            "bootstrap.servers": profile.bootstrap_servers,
            "security.protocol": profile.security_protocol.value,
            "request.timeout.ms": str(REQUEST_TIMEOUT_MS),
            "default.api.timeout.ms": str(DEFAULT_API_TIMEOUT_MS),
        }

        if profile.ssl is not None:
            self._configure_ssl(props, profile.ssl)

        if profile.sasl is not None:
            self._configure_sasl(props, profile.sasl)

        for key, value in profile.extra_properties.items():
            if key in props:
                logger.debug(f"kafka-properties overrides '{key}'")
            props[key] = self.credentials.resolve_env_var(value)

        logger.debug(
            f"Built connection properties for context '{profile.context_name}'",
            extra={"property_keys": sorted(props)}
        )
        return props

    # SSL

    def _configure_ssl(self, props: dict[str, str], ssl: SslConfig) -> None:
        mode = ssl.resolve_mode()
        if isinstance(mode, PemSsl):
            self._configure_pem(props, mode)
        else:
            self._configure_keystore(props, mode)

    def _configure_pem(self, props: dict[str, str], pem: PemSsl) -> None:
        if pem.ca_file is not None:
            props["ssl.truststore.certificates"] = self.credentials.resolve_file(pem.ca_file)
            props["ssl.truststore.type"] = PEM_STORE_TYPE

        if pem.mutual_tls:
            props["ssl.keystore.certificate.chain"] = self.credentials.resolve_file(pem.client_file)
            props["ssl.keystore.key"] = self.credentials.resolve_file(pem.client_key_file)
            props["ssl.keystore.type"] = PEM_STORE_TYPE

    def _configure_keystore(self, props: dict[str, str], stores: KeystoreSsl) -> None:
        if stores.truststore_location is not None:
            props["ssl.truststore.location"] = self.credentials.expand_path(stores.truststore_location)
        if stores.truststore_password is not None:
            props["ssl.truststore.password"] = self.credentials.resolve_env_var(stores.truststore_password)
        props["ssl.truststore.type"] = stores.truststore_type

        # mTLS (client certificate)
        if stores.keystore_location is not None:
            props["ssl.keystore.location"] = self.credentials.expand_path(stores.keystore_location)
        if stores.keystore_password is not None:
            props["ssl.keystore.password"] = self.credentials.resolve_env_var(stores.keystore_password)
        props["ssl.keystore.type"] = stores.keystore_type
        if stores.key_password is not None:
            props["ssl.key.password"] = self.credentials.resolve_env_var(stores.key_password)

    # SASL

    def _configure_sasl(self, props: dict[str, str], sasl: SaslConfig) -> None:
        props["sasl.mechanism"] = sasl.mechanism.value

        match sasl.mechanism:
            case SaslMechanism.PLAIN:
                props["sasl.jaas.config"] = self._password_jaas(PLAIN_LOGIN_MODULE, sasl)
            case SaslMechanism.SCRAM_SHA_256 | SaslMechanism.SCRAM_SHA_512:
                props["sasl.jaas.config"] = self._password_jaas(SCRAM_LOGIN_MODULE, sasl)
            case SaslMechanism.GSSAPI:
                props["sasl.jaas.config"] = self._gssapi_jaas(sasl)
                props["sasl.kerberos.service.name"] = KERBEROS_SERVICE_NAME
            case SaslMechanism.OAUTHBEARER:
                props["sasl.jaas.config"] = self._oauthbearer_jaas(sasl)
                if sasl.token_endpoint is not None:
                    props["sasl.oauthbearer.token.endpoint.url"] = sasl.token_endpoint
            case _:
                raise ConfigValidationError(f"Unsupported SASL mechanism: {sasl.mechanism}")

    def _password_jaas(self, login_module: str, sasl: SaslConfig) -> str:
        password = self.credentials.resolve_password(sasl.password, sasl.password_file)
        if password is None:
            raise ConfigValidationError(
                f"password required for SASL/{sasl.mechanism.value}",
                suggestions=["Set --password (may reference ${ENV_VAR}) or --password-file"]
            )
        return (
            f"{login_module} required "
            f"username={jaas_quote(sasl.username)} password={jaas_quote(password)};"
        )

    def _gssapi_jaas(self, sasl: SaslConfig) -> str:
        keytab = self.credentials.expand_path(sasl.keytab)
        if keytab is None:
            raise ConfigValidationError(
                "keytab required for GSSAPI/Kerberos authentication",
                suggestions=["Set --keytab to the path of the Kerberos keytab"]
            )
        return (
            f"{KRB5_LOGIN_MODULE} required useKeyTab=true storeKey=true "
            f"keyTab={jaas_quote(keytab)} principal={jaas_quote(sasl.principal)};"
        )

    def _oauthbearer_jaas(self, sasl: SaslConfig) -> str:
        options = []
        if sasl.client_id is not None:
            options.append(f"clientId={jaas_quote(sasl.client_id)}")
        if sasl.client_secret is not None:
            options.append(f"clientSecret={jaas_quote(self.credentials.resolve_env_var(sasl.client_secret))}")
        if sasl.scope is not None:
            options.append(f"scope={jaas_quote(sasl.scope)}")
        return " ".join([f"{OAUTHBEARER_LOGIN_MODULE} required", *options]) + ";"
