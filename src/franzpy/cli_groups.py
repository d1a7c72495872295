"""CLI commands for Kafka consumer groups."""
import click

from franzpy.cli_common import handle_errors, open_session
from franzpy.kafka.groups import GroupManager


def format_assignment(by_topic):
    return ", ".join(
        f"{topic}[{','.join(str(p) for p in partitions)}]" for topic, partitions in by_topic.items()
    )


@click.group()
def groups():
    """Manage consumer groups in the selected context.

    \b
    Examples:
      franzpy groups list --show-empty
      franzpy groups describe payments-service --members
      franzpy groups delete old-batch-job
    """
    pass


@groups.command('list')
@click.option('--pattern', '-p', metavar='TEXT', help='Only groups whose id contains TEXT (case-insensitive)')
@click.option('--show-empty', '-e', is_flag=True, help='Include groups without active members')
@click.pass_context
@handle_errors
def list_groups(ctx, pattern, show_empty):
    """List consumer groups."""
    with open_session(ctx) as session:
        found = GroupManager(session.admin_client, session.timeout).list_groups(
            include_empty=show_empty, pattern=pattern
        )

    if not found:
        click.echo("No consumer groups found.")
        return
    click.echo(f"{'GROUP':<40} {'STATE':<24} MEMBERS")
    for group in found:
        click.echo(f"{group.group_id:<40} {group.state:<24} {len(group.members)}")


@groups.command('describe')
@click.argument('name')
@click.option('--members', '-m', 'show_members', is_flag=True, help='Show members and their assignments')
@click.pass_context
@handle_errors
def describe_group(ctx, name, show_members):
    """Show state, coordinator and assignments of a consumer group."""
    with open_session(ctx) as session:
        group = GroupManager(session.admin_client, session.timeout).describe_group(name)

    click.echo(f"Group:       {group.group_id}")
    click.echo(f"State:       {group.state}")
    click.echo(f"Assignor:    {group.partition_assignor or '-'}")
    click.echo(f"Coordinator: {group.coordinator or '-'}")
    click.echo(f"Members:     {len(group.members)}")

    topic_partitions = group.topic_partitions()
    if topic_partitions:
        click.echo()
        click.echo("Assigned topics:")
        for topic, count in topic_partitions.items():
            click.echo(f"  {topic} ({count} partitions)")

    if show_members and group.members:
        click.echo()
        click.echo("Member details:")
        for member in group.members:
            click.echo(f"  {member.member_id} (client-id: {member.client_id}, host: {member.host})")
            assigned = format_assignment(member.assignment_by_topic())
            click.echo(f"    Assigned: {assigned or '-'}")


@groups.command('delete')
@click.argument('name')
@click.option('--force', is_flag=True, help='Skip the confirmation prompt')
@click.pass_context
@handle_errors
def delete_group(ctx, name, force):
    """Delete a consumer group that has no active members."""
    if not force:
        click.confirm(f"Delete consumer group '{name}'?", abort=True)

    with open_session(ctx) as session:
        GroupManager(session.admin_client, session.timeout).delete_group(name)
    click.echo(f"Consumer group \"{name}\" deleted.")
