"""CLI commands for Kafka ACLs."""
import click

from franzpy.cli_common import handle_errors, open_session
from franzpy.kafka.acls import OPERATIONS, PATTERN_TYPES, PERMISSIONS, RESOURCE_TYPES, AclManager


def validate_principal(ctx, param, value):
    if value is not None and ":" not in value:
        raise click.BadParameter(f"expected TYPE:NAME such as User:alice, got '{value}'")
    return value


principal_option = click.option('--principal', '-p', callback=validate_principal, metavar='TYPE:NAME',
                                help='Principal, e.g. User:alice')
resource_type_option = click.option('--resource-type', '-r',
                                    type=click.Choice(list(RESOURCE_TYPES), case_sensitive=False),
                                    help='Resource type')
resource_name_option = click.option('--resource-name', '-n', metavar='NAME', help='Resource name')
operation_option = click.option('--operation', '-o', type=click.Choice(list(OPERATIONS), case_sensitive=False),
                                help='Operation')


def echo_acls(entries):
    click.echo(f"{'PRINCIPAL':<24} {'RESOURCE TYPE':<17} {'RESOURCE NAME':<24} "
               f"{'PATTERN':<9} {'OPERATION':<10} PERMISSION")
    for acl in entries:
        click.echo(f"{acl.principal:<24} {acl.resource_type:<17} {acl.resource_name:<24} "
                   f"{acl.pattern_type:<9} {acl.operation:<10} {acl.permission}")


@click.group()
def acls():
    """Manage ACLs in the selected context.

    \b
    Examples:
      franzpy acls list --principal User:alice
      franzpy acls create -p User:alice -r topic -n orders -o write
      franzpy acls delete -p User:alice -n orders --force
    """
    pass


@acls.command('list')
@principal_option
@resource_type_option
@resource_name_option
@operation_option
@click.pass_context
@handle_errors
def list_acls(ctx, principal, resource_type, resource_name, operation):
    """List ACLs, optionally filtered."""
    with open_session(ctx) as session:
        entries = AclManager(session.admin_client, session.timeout).list_acls(
            principal=principal,
            resource_type=resource_type,
            resource_name=resource_name,
            operation=operation
        )

    if not entries:
        click.echo("No ACLs found.")
        return
    echo_acls(entries)


@acls.command('create')
@click.option('--principal', '-p', required=True, callback=validate_principal, metavar='TYPE:NAME',
              help='Principal, e.g. User:alice')
@click.option('--resource-type', '-r', type=click.Choice(list(RESOURCE_TYPES), case_sensitive=False),
              default='topic', show_default=True, help='Resource type')
@click.option('--resource-name', '-n', required=True, metavar='NAME',
              help='Resource name (* for all, kafka-cluster for the cluster)')
@click.option('--operation', '-o', type=click.Choice(list(OPERATIONS), case_sensitive=False),
              default='read', show_default=True, help='Operation')
@click.option('--permission', type=click.Choice(list(PERMISSIONS), case_sensitive=False),
              default='allow', show_default=True, help='Permission')
@click.option('--pattern-type', type=click.Choice(list(PATTERN_TYPES), case_sensitive=False),
              default='literal', show_default=True, help='How the resource name is matched')
@click.pass_context
@handle_errors
def create_acl(ctx, principal, resource_type, resource_name, operation, permission, pattern_type):
    """Create an ACL."""
    with open_session(ctx) as session:
        entry = AclManager(session.admin_client, session.timeout).create_acl(
            principal,
            resource_type,
            resource_name,
            operation=operation,
            permission=permission,
            pattern_type=pattern_type
        )
    click.echo(f"ACL created: {entry.permission} {entry.principal} {entry.operation} "
               f"on {entry.resource_type} '{entry.resource_name}' ({entry.pattern_type}).")


@acls.command('delete')
@principal_option
@resource_type_option
@resource_name_option
@operation_option
@click.option('--force', '-f', is_flag=True, help='Skip the confirmation prompt')
@click.pass_context
@handle_errors
def delete_acls(ctx, principal, resource_type, resource_name, operation, force):
    """Delete the ACLs matching every given filter."""
    if not any((principal, resource_type, resource_name, operation)):
        raise click.UsageError(
            "give at least one of --principal, --resource-type, --resource-name or --operation"
        )

    with open_session(ctx) as session:
        manager = AclManager(session.admin_client, session.timeout)
        filters = dict(principal=principal, resource_type=resource_type,
                       resource_name=resource_name, operation=operation)
        if not force:
            matching = manager.list_acls(**filters)
            if not matching:
                click.echo("No matching ACLs found.")
                return
            echo_acls(matching)
            click.confirm(f"Delete {len(matching)} ACL(s)?", abort=True)
        deleted = manager.delete_acls(**filters)
    click.echo(f"Deleted {len(deleted)} ACL(s).")
