"""Tests for ACL admin operations."""
import pytest
from unittest.mock import Mock
from confluent_kafka import KafkaException
from confluent_kafka.admin import (
    AclBinding,
    AclOperation,
    AclPermissionType,
    AdminClient,
    ResourcePatternType,
    ResourceType,
)
from confluent_kafka.error import KafkaError

from franzpy.kafka.acls import AclEntry, AclManager


def binding(principal="User:alice", restype=ResourceType.TOPIC, name="orders",
            pattern=ResourcePatternType.LITERAL, operation=AclOperation.READ,
            permission=AclPermissionType.ALLOW):
    return AclBinding(restype, name, pattern, principal, "*", operation, permission)


def resolved(value):
    future = Mock()
    future.result.return_value = value
    return future


@pytest.fixture
def admin_client_mock():
    """Create a mock AdminClient."""
    return Mock(spec=AdminClient)


@pytest.fixture
def acl_manager(admin_client_mock):
    return AclManager(admin_client_mock, timeout=5.0)


class TestListAcls:

    def test_unfiltered_list_matches_anything(self, acl_manager, admin_client_mock):
        admin_client_mock.describe_acls.return_value = resolved([binding()])

        entries = acl_manager.list_acls()

        assert entries == [AclEntry("User:alice", "TOPIC", "orders", "LITERAL", "READ", "ALLOW")]
        binding_filter = admin_client_mock.describe_acls.call_args[0][0]
        assert binding_filter.restype == ResourceType.ANY
        assert binding_filter.name is None
        assert binding_filter.resource_pattern_type == ResourcePatternType.ANY
        assert binding_filter.principal is None
        assert binding_filter.operation == AclOperation.ANY
        assert binding_filter.permission_type == AclPermissionType.ANY
        assert admin_client_mock.describe_acls.call_args[1] == {"request_timeout": 5.0}

    def test_filters_are_passed_through(self, acl_manager, admin_client_mock):
        admin_client_mock.describe_acls.return_value = resolved([])

        acl_manager.list_acls(principal="User:bob", resource_type="Group", resource_name="g1", operation="read")

        binding_filter = admin_client_mock.describe_acls.call_args[0][0]
        assert binding_filter.principal == "User:bob"
        assert binding_filter.restype == ResourceType.GROUP
        assert binding_filter.name == "g1"
        assert binding_filter.operation == AclOperation.READ

    def test_cluster_resource_maps_to_broker(self, acl_manager, admin_client_mock):
        admin_client_mock.describe_acls.return_value = resolved([
            binding(restype=ResourceType.BROKER, name="kafka-cluster", operation=AclOperation.ALL)
        ])

        entries = acl_manager.list_acls(resource_type="cluster")

        assert admin_client_mock.describe_acls.call_args[0][0].restype == ResourceType.BROKER
        assert entries[0].resource_type == "CLUSTER"
        assert entries[0].operation == "ALL"

    def test_security_disabled(self, acl_manager, admin_client_mock):
        future = Mock()
        future.result.side_effect = KafkaException(KafkaError(KafkaError.SECURITY_DISABLED))
        admin_client_mock.describe_acls.return_value = future

        with pytest.raises(KafkaException):
            acl_manager.list_acls()

    def test_unknown_resource_type(self, acl_manager):
        with pytest.raises(ValueError, match="resource type"):
            acl_manager.list_acls(resource_type="queue")


class TestCreateAcl:

    def test_create(self, acl_manager, admin_client_mock):
        future = resolved(None)
        admin_client_mock.create_acls.return_value = {Mock(): future}

        entry = acl_manager.create_acl(
            "User:alice", "transactional-id", "tx-", operation="write",
            permission="deny", pattern_type="prefixed"
        )

        created = admin_client_mock.create_acls.call_args[0][0]
        assert created == [binding(
            restype=ResourceType.TRANSACTIONAL_ID, name="tx-", pattern=ResourcePatternType.PREFIXED,
            operation=AclOperation.WRITE, permission=AclPermissionType.DENY,
        )]
        future.result.assert_called_once_with(timeout=5.0)
        assert entry.resource_type == "TRANSACTIONAL_ID"
        assert entry.permission == "DENY"
        assert entry.host == "*"

    def test_defaults_are_literal_read_allow(self, acl_manager, admin_client_mock):
        admin_client_mock.create_acls.return_value = {Mock(): resolved(None)}

        acl_manager.create_acl("User:alice", "topic", "orders")

        assert admin_client_mock.create_acls.call_args[0][0] == [binding()]

    def test_create_failure(self, acl_manager, admin_client_mock):
        future = Mock()
        future.result.side_effect = KafkaException(KafkaError(KafkaError.CLUSTER_AUTHORIZATION_FAILED))
        admin_client_mock.create_acls.return_value = {Mock(): future}

        with pytest.raises(KafkaException):
            acl_manager.create_acl("User:alice", "topic", "orders")


class TestDeleteAcls:

    def test_returns_deleted_bindings(self, acl_manager, admin_client_mock):
        admin_client_mock.delete_acls.return_value = {Mock(): resolved([
            binding(operation=AclOperation.READ),
            binding(operation=AclOperation.WRITE),
        ])}

        deleted = acl_manager.delete_acls(principal="User:alice", resource_name="orders")

        assert [e.operation for e in deleted] == ["READ", "WRITE"]
        filters = admin_client_mock.delete_acls.call_args[0][0]
        assert len(filters) == 1
        assert filters[0].principal == "User:alice"
        assert filters[0].name == "orders"
        assert filters[0].restype == ResourceType.ANY

    def test_nothing_matched(self, acl_manager, admin_client_mock):
        admin_client_mock.delete_acls.return_value = {Mock(): resolved([])}

        assert acl_manager.delete_acls(operation="alter") == []
