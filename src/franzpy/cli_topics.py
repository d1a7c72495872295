"""CLI commands for Kafka topics and cluster information."""
import click

from franzpy.cli_common import handle_errors, open_session
from franzpy.kafka.admin import ClusterInspector, TopicManager


@click.group()
def topics():
    """Manage Kafka topics in the selected context.

    \b
    Examples:
      franzpy topics list --pattern orders
      franzpy --context prod topics describe payments
      franzpy topics create payments --partitions 6 --replication-factor 3
    """
    pass


@topics.command('list')
@click.option('--internal', is_flag=True, help='Include internal topics (__consumer_offsets, ...)')
@click.option('--pattern', '-p', metavar='TEXT', help='Only topics whose name contains TEXT (case-insensitive)')
@click.pass_context
@handle_errors
def list_topics(ctx, internal, pattern):
    """List topics."""
    with open_session(ctx) as session:
        names = TopicManager(session.admin_client, session.timeout).list_topics(
            include_internal=internal, pattern=pattern
        )

    if not names:
        click.echo("No topics found.")
        return
    for name in names:
        click.echo(name)


@topics.command('describe')
@click.argument('name')
@click.pass_context
@handle_errors
def describe_topic(ctx, name):
    """Show partitions, leaders and replicas of a topic."""
    with open_session(ctx) as session:
        info = TopicManager(session.admin_client, session.timeout).describe_topic(name)

    click.echo(f"Name:               {info.name}")
    click.echo(f"Partitions:         {len(info.partitions)}")
    click.echo(f"Replication factor: {info.replication_factor}")
    click.echo(f"Internal:           {'yes' if info.internal else 'no'}")
    click.echo()
    click.echo(f"{'PARTITION':<10} {'LEADER':<7} {'REPLICAS':<16} ISR")
    for p in info.partitions:
        replicas = ",".join(str(r) for r in p.replicas)
        isr = ",".join(str(r) for r in p.isr)
        marker = "  (under-replicated)" if p.under_replicated else ""
        click.echo(f"{p.partition:<10} {p.leader:<7} {replicas:<16} {isr}{marker}")


@topics.command('create')
@click.argument('name')
@click.option('--partitions', type=click.IntRange(min=1), default=1, show_default=True,
              help='Number of partitions')
@click.option('--replication-factor', type=click.IntRange(min=1), default=1, show_default=True,
              help='Replication factor')
@click.option('--config', 'topic_config', multiple=True, metavar='KEY=VALUE',
              help='Topic configuration entry (repeatable)')
@click.pass_context
@handle_errors
def create_topic(ctx, name, partitions, replication_factor, topic_config):
    """Create a topic."""
    settings = {}
    for item in topic_config:
        key, sep, value = item.partition("=")
        if not sep:
            raise click.BadParameter(f"expected KEY=VALUE, got '{item}'", param_hint="--config")
        settings[key] = value

    with open_session(ctx) as session:
        TopicManager(session.admin_client, session.timeout).create_topic(
            name,
            num_partitions=partitions,
            replication_factor=replication_factor,
            config=settings
        )
    click.echo(f"Topic \"{name}\" created.")


@topics.command('delete')
@click.argument('name')
@click.option('--force', is_flag=True, help='Skip the confirmation prompt')
@click.pass_context
@handle_errors
def delete_topic(ctx, name, force):
    """Delete a topic."""
    if not force:
        click.confirm(f"Delete topic '{name}'?", abort=True)

    with open_session(ctx) as session:
        TopicManager(session.admin_client, session.timeout).delete_topic(name)
    click.echo(f"Topic \"{name}\" deleted.")


@click.group()
def cluster():
    """Inspect the cluster of the selected context."""
    pass


@cluster.command('describe')
@click.pass_context
@handle_errors
def describe_cluster(ctx):
    """Show cluster id, controller and size."""
    with open_session(ctx) as session:
        info = ClusterInspector(session.admin_client, session.timeout).describe()

    click.echo(f"Cluster ID: {info.cluster_id or '-'}")
    click.echo(f"Controller: {info.controller_id}")
    click.echo(f"Brokers:    {info.broker_count}")
    click.echo(f"Topics:     {info.topic_count}")


@cluster.command('brokers')
@click.pass_context
@handle_errors
def list_brokers(ctx):
    """List brokers."""
    with open_session(ctx) as session:
        brokers = ClusterInspector(session.admin_client, session.timeout).list_brokers()

    click.echo(f"{'ID':<6} {'HOST':<30} {'PORT':<6} CONTROLLER")
    for broker in brokers:
        click.echo(f"{broker.broker_id:<6} {broker.host:<30} {broker.port:<6} {'yes' if broker.controller else ''}")
