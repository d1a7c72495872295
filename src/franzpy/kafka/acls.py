"""ACL operations over a Kafka AdminClient."""
import logging
from dataclasses import dataclass
from typing import List

from confluent_kafka.admin import (
    AclBinding,
    AclBindingFilter,
    AclOperation,
    AclPermissionType,
    AdminClient,
    ResourcePatternType,
    ResourceType,
)

logger = logging.getLogger(__name__)

# Kafka's "cluster" resource is ResourceType.BROKER in librdkafka
RESOURCE_TYPES = {
    "topic": ResourceType.TOPIC,
    "group": ResourceType.GROUP,
    "cluster": ResourceType.BROKER,
    "transactional-id": ResourceType.TRANSACTIONAL_ID,
}

OPERATIONS = {
    "read": AclOperation.READ,
    "write": AclOperation.WRITE,
    "create": AclOperation.CREATE,
    "delete": AclOperation.DELETE,
    "alter": AclOperation.ALTER,
    "describe": AclOperation.DESCRIBE,
    "all": AclOperation.ALL,
}

PERMISSIONS = {
    "allow": AclPermissionType.ALLOW,
    "deny": AclPermissionType.DENY,
}

PATTERN_TYPES = {
    "literal": ResourcePatternType.LITERAL,
    "prefixed": ResourcePatternType.PREFIXED,
}

ANY_HOST = "*"


def _lookup(table: dict, value: str, kind: str):
    try:
        return table[value.lower()]
    except KeyError:
        raise ValueError(f"Unknown {kind} '{value}', expected one of: {', '.join(table)}") from None


@dataclass
class AclEntry:
    """An ACL binding in display form."""
    principal: str
    resource_type: str
    resource_name: str
    pattern_type: str
    operation: str
    permission: str
    host: str = ANY_HOST

    @classmethod
    def from_binding(cls, binding: AclBinding) -> "AclEntry":
        resource_type = "CLUSTER" if binding.restype == ResourceType.BROKER else binding.restype.name
        return cls(
            principal=binding.principal,
            resource_type=resource_type,
            resource_name=binding.name,
            pattern_type=binding.resource_pattern_type.name,
            operation=binding.operation.name,
            permission=binding.permission_type.name,
            host=binding.host,
        )


class AclManager:
    """Lists, creates and deletes ACLs.

    Resource types, operations, permissions and pattern types are given by
    their lower-case names (``topic``, ``read``, ``allow``, ``literal``);
    see the module-level tables.
    """

    def __init__(self, admin_client: AdminClient, timeout: float = 30.0):
        self.admin_client = admin_client
        self.timeout = timeout

    def _filter(
        self,
        principal: str | None,
        resource_type: str | None,
        resource_name: str | None,
        operation: str | None
    ) -> AclBindingFilter:
        return AclBindingFilter(
            _lookup(RESOURCE_TYPES, resource_type, "resource type") if resource_type else ResourceType.ANY,
            resource_name,
            ResourcePatternType.ANY,
            principal,
            None,
            _lookup(OPERATIONS, operation, "operation") if operation else AclOperation.ANY,
            AclPermissionType.ANY,
        )

    def list_acls(
        self,
        principal: str | None = None,
        resource_type: str | None = None,
        resource_name: str | None = None,
        operation: str | None = None
    ) -> List[AclEntry]:
        """List ACLs matching every given filter.

        Raises:
            KafkaException: If the cluster cannot describe ACLs
                (for example when no authorizer is configured)
        """
        binding_filter = self._filter(principal, resource_type, resource_name, operation)
        future = self.admin_client.describe_acls(binding_filter, request_timeout=self.timeout)
        return [AclEntry.from_binding(binding) for binding in future.result(timeout=self.timeout)]

    def create_acl(
        self,
        principal: str,
        resource_type: str,
        resource_name: str,
        operation: str = "read",
        permission: str = "allow",
        pattern_type: str = "literal"
    ) -> AclEntry:
        """Create one ACL for ``principal`` from any host.

        Raises:
            ValueError: If a type, operation or permission name is unknown
            KafkaException: If creation fails
        """
        binding = AclBinding(
            _lookup(RESOURCE_TYPES, resource_type, "resource type"),
            resource_name,
            _lookup(PATTERN_TYPES, pattern_type, "pattern type"),
            principal,
            ANY_HOST,
            _lookup(OPERATIONS, operation, "operation"),
            _lookup(PERMISSIONS, permission, "permission"),
        )
        futures = self.admin_client.create_acls([binding], request_timeout=self.timeout)
        for future in futures.values():
            future.result(timeout=self.timeout)
        logger.info(f"ACL created for {principal} on {resource_type} '{resource_name}'")
        return AclEntry.from_binding(binding)

    def delete_acls(
        self,
        principal: str | None = None,
        resource_type: str | None = None,
        resource_name: str | None = None,
        operation: str | None = None
    ) -> List[AclEntry]:
        """Delete ACLs matching every given filter and return the deleted ones.

        Raises:
            KafkaException: If deletion fails
        """
        binding_filter = self._filter(principal, resource_type, resource_name, operation)
        futures = self.admin_client.delete_acls([binding_filter], request_timeout=self.timeout)
        deleted = []
        for future in futures.values():
            deleted.extend(AclEntry.from_binding(binding) for binding in future.result(timeout=self.timeout))
        logger.info(f"Deleted {len(deleted)} ACL(s)")
        return deleted
