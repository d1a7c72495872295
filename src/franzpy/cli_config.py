"""CLI commands for managing contexts, clusters and credentials."""
import click
import yaml

from franzpy.cli_common import get_store, handle_errors
from franzpy.config.models import (
    AuthConfigEntry,
    ClusterEntry,
    ContextEntry,
    SaslConfig,
    SaslMechanism,
    SecurityProtocol,
    SslConfig,
)

REDACTED = "***"
SECRET_KEYS = {"password", "client-secret", "truststore-password", "keystore-password", "key-password"}
SECRET_PROPERTY_MARKERS = ("password", "secret", "jaas")


def redact_document(data: dict) -> dict:
    """Replace secret values in a dumped document with ``***``."""
    for auth in data.get("auth-configs", []):
        for section in ("sasl", "ssl"):
            block = auth.get(section) or {}
            for key in SECRET_KEYS & block.keys():
                block[key] = REDACTED
        properties = auth.get("kafka-properties") or {}
        for key in properties:
            if any(marker in key.lower() for marker in SECRET_PROPERTY_MARKERS):
                properties[key] = REDACTED
    return data


def parse_properties(values: tuple[str, ...]) -> dict[str, str]:
    """Parse repeated ``KEY=VALUE`` options."""
    properties = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got '{item}'", param_hint="--kafka-property")
        properties[key.strip()] = value
    return properties


@click.group()
def config():
    """Manage franzpy configuration (contexts, clusters, credentials).

    \b
    Examples:
      franzpy config set-cluster local -b localhost:9092
      franzpy config set-credentials local --security-protocol PLAINTEXT
      franzpy config set-context local --cluster local --auth local
      franzpy config use-context local
      franzpy config view
    """
    pass


@config.command('get-contexts')
@click.pass_context
@handle_errors
def get_contexts(ctx):
    """List all configured contexts."""
    document = get_store(ctx).load_document()

    if not document.contexts:
        click.echo("No contexts configured.")
        click.echo("Use 'franzpy config set-context <name> --cluster <cluster>' to create one.")
        return

    click.echo(f"{'CURRENT':<9} {'NAME':<20} {'CLUSTER':<20} AUTH")
    for entry in document.contexts:
        current = "*" if entry.name == document.current_context else ""
        click.echo(f"{current:<9} {entry.name:<20} {entry.cluster:<20} {entry.auth or '-'}")


@config.command('use-context')
@click.argument('name')
@click.pass_context
@handle_errors
def use_context(ctx, name):
    """Set the current context."""
    get_store(ctx).set_current_context(name)
    click.echo(f"Switched to context \"{name}\".")


@config.command('current-context')
@click.pass_context
@handle_errors
def current_context(ctx):
    """Display the current context."""
    name = get_store(ctx).get_current_context_name()
    if name is None:
        click.echo("No current context set.")
        click.echo("Use 'franzpy config use-context <name>' to set one.")
    else:
        click.echo(name)


@config.command('set-context')
@click.argument('name')
@click.option('--cluster', '-c', required=True, help='Cluster name to reference')
@click.option('--auth', '-a', help='Auth config name to reference')
@click.pass_context
@handle_errors
def set_context(ctx, name, cluster, auth):
    """Create or update a context (ties a name to a cluster and optional auth config)."""
    get_store(ctx).set_context(ContextEntry(name=name, cluster=cluster, auth=auth))
    click.echo(f"Context \"{name}\" configured.")


@config.command('set-cluster')
@click.argument('name')
@click.option('--bootstrap-servers', '-b', required=True,
              help='Kafka bootstrap servers (e.g., localhost:9092)')
@click.pass_context
@handle_errors
def set_cluster(ctx, name, bootstrap_servers):
    """Create or update a cluster."""
    get_store(ctx).set_cluster(ClusterEntry(name=name, bootstrap_servers=bootstrap_servers))
    click.echo(f"Cluster \"{name}\" configured with bootstrap servers: {bootstrap_servers}")


@config.command('set-credentials')
@click.argument('name')
@click.option('--security-protocol', '-p', default=SecurityProtocol.PLAINTEXT.value,
              type=click.Choice([p.value for p in SecurityProtocol]), show_default=True,
              help='Security protocol')
@click.option('--sasl-mechanism', type=click.Choice([m.value for m in SaslMechanism]),
              help='SASL mechanism')
@click.option('--username', '-u', help='SASL username')
@click.option('--password', help='SASL password (may reference ${ENV_VAR})')
@click.option('--password-file', help='Path to a file holding the SASL password')
@click.option('--principal', help='Kerberos principal')
@click.option('--keytab', help='Path to Kerberos keytab')
@click.option('--krb5-conf', help='Path to krb5.conf')
@click.option('--token-endpoint', help='OAuth token endpoint URL')
@click.option('--client-id', help='OAuth client ID')
@click.option('--client-secret', help='OAuth client secret (may reference ${ENV_VAR})')
@click.option('--scope', help='OAuth scope')
@click.option('--truststore-location', help='Path to truststore')
@click.option('--truststore-password', help='Truststore password')
@click.option('--truststore-type', help='Truststore type [default: JKS]')
@click.option('--keystore-location', help='Path to keystore (for mTLS)')
@click.option('--keystore-password', help='Keystore password')
@click.option('--keystore-type', help='Keystore type [default: JKS]')
@click.option('--key-password', help='Key password')
@click.option('--cafile', help='Path to PEM CA certificate')
@click.option('--clientfile', help='Path to PEM client certificate (mTLS)')
@click.option('--clientkeyfile', help='Path to PEM client key (mTLS)')
@click.option('--kafka-property', 'kafka_properties', multiple=True, metavar='KEY=VALUE',
              help='Extra Kafka client property, applied last (repeatable)')
@click.pass_context
@handle_errors
def set_credentials(ctx, name, security_protocol, sasl_mechanism, username, password,
                    password_file, principal, keytab, krb5_conf, token_endpoint, client_id,
                    client_secret, scope, truststore_location, truststore_password,
                    truststore_type, keystore_location, keystore_password, keystore_type,
                    key_password, cafile, clientfile, clientkeyfile, kafka_properties):
    """Create or update authentication credentials.

    \b
    For SASL, set --sasl-mechanism and the matching fields.
    For SSL/mTLS, use either truststore/keystore options or PEM files
    (--cafile, --clientfile, --clientkeyfile), not both.

    \b
    Examples:
      franzpy config set-credentials local --security-protocol PLAINTEXT
      franzpy config set-credentials prod --security-protocol SASL_SSL \\
          --sasl-mechanism SCRAM-SHA-512 --username alice --password-file ./pw.txt
    """
    sasl = None
    if sasl_mechanism is not None:
        sasl = SaslConfig(
            mechanism=SaslMechanism(sasl_mechanism),
            username=username,
            password=password,
            password_file=password_file,
            principal=principal,
            keytab=keytab,
            krb5_conf=krb5_conf,
            token_endpoint=token_endpoint,
            client_id=client_id,
            client_secret=client_secret,
            scope=scope,
        )

    ssl_options = dict(
        truststore_location=truststore_location,
        truststore_password=truststore_password,
        truststore_type=truststore_type,
        keystore_location=keystore_location,
        keystore_password=keystore_password,
        keystore_type=keystore_type,
        key_password=key_password,
        ca_file=cafile,
        client_file=clientfile,
        client_key_file=clientkeyfile,
    )
    ssl = None
    if any(value is not None for value in ssl_options.values()):
        ssl = SslConfig(**ssl_options)
        # Reject contradictory SSL settings before they are persisted
        ssl.resolve_mode()

    entry = AuthConfigEntry(
        name=name,
        security_protocol=SecurityProtocol(security_protocol),
        sasl=sasl,
        ssl=ssl,
        kafka_properties=parse_properties(kafka_properties),
    )
    get_store(ctx).set_auth_config(entry)
    click.echo(f"Auth config \"{name}\" configured with security protocol: {security_protocol}")


def _delete(ctx, kind: str, name: str, deleted: bool) -> None:
    if deleted:
        click.echo(f"{kind} \"{name}\" deleted.")
    else:
        click.echo(f"{kind} \"{name}\" not found.", err=True)
        ctx.exit(1)


@config.command('delete-context')
@click.argument('name')
@click.pass_context
@handle_errors
def delete_context(ctx, name):
    """Delete a context (clears the current context if it was selected)."""
    _delete(ctx, "Context", name, get_store(ctx).delete_context(name))


@config.command('delete-cluster')
@click.argument('name')
@click.pass_context
@handle_errors
def delete_cluster(ctx, name):
    """Delete a cluster. Contexts that reference it are kept."""
    _delete(ctx, "Cluster", name, get_store(ctx).delete_cluster(name))


@config.command('delete-credentials')
@click.argument('name')
@click.pass_context
@handle_errors
def delete_credentials(ctx, name):
    """Delete an auth config. Contexts that reference it are kept."""
    _delete(ctx, "Auth config", name, get_store(ctx).delete_auth_config(name))


@config.command('view')
@click.pass_context
@handle_errors
def view(ctx):
    """Display the configuration (secrets are redacted)."""
    document = get_store(ctx).load_document()
    data = redact_document(document.to_yaml_dict())
    click.echo(yaml.safe_dump(data, sort_keys=False, default_flow_style=False).rstrip())
