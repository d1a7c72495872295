"""Tests for consumer group admin operations."""
import pytest
from unittest.mock import Mock
from confluent_kafka import ConsumerGroupState, KafkaException, TopicPartition
from confluent_kafka.admin import AdminClient
from confluent_kafka.error import KafkaError

from franzpy.exceptions import GroupNotFoundError
from franzpy.kafka.groups import ConsumerGroupInfo, GroupManager, GroupMemberInfo, state_name


def listing_mock(group_id, state=ConsumerGroupState.STABLE):
    listing = Mock()
    listing.group_id = group_id
    listing.state = state
    return listing


def member_mock(member_id, client_id, partitions=()):
    member = Mock()
    member.member_id = member_id
    member.client_id = client_id
    member.host = "/10.0.0.1"
    member.assignment.topic_partitions = [TopicPartition(t, p) for t, p in partitions]
    return member


def description_mock(group_id, state=ConsumerGroupState.STABLE, members=()):
    description = Mock()
    description.group_id = group_id
    description.state = state
    description.members = list(members)
    description.partition_assignor = "range"
    description.coordinator.id = 1
    description.coordinator.host = "broker1"
    description.coordinator.port = 9092
    return description


def resolved(value):
    future = Mock()
    future.result.return_value = value
    return future


def failed(code):
    future = Mock()
    future.result.side_effect = KafkaException(KafkaError(code))
    return future


@pytest.fixture
def admin_client_mock():
    """Create a mock AdminClient."""
    return Mock(spec=AdminClient)


@pytest.fixture
def group_manager(admin_client_mock):
    return GroupManager(admin_client_mock, timeout=5.0)


class TestListGroups:

    @pytest.fixture(autouse=True)
    def groups(self, admin_client_mock):
        result = Mock()
        result.valid = [
            listing_mock("payments"),
            listing_mock("Analytics-Batch", ConsumerGroupState.EMPTY),
            listing_mock("analytics-stream"),
        ]
        admin_client_mock.list_consumer_groups.return_value = resolved(result)
        admin_client_mock.describe_consumer_groups.side_effect = lambda ids, request_timeout: {
            "payments": resolved(description_mock("payments", members=[member_mock("m1", "app")])),
            "Analytics-Batch": resolved(description_mock("Analytics-Batch", ConsumerGroupState.EMPTY)),
            "analytics-stream": resolved(description_mock("analytics-stream", members=[member_mock("m2", "a")])),
        }

    def test_empty_groups_hidden_by_default(self, group_manager, admin_client_mock):
        groups = group_manager.list_groups()

        assert [g.group_id for g in groups] == ["analytics-stream", "payments"]
        admin_client_mock.list_consumer_groups.assert_called_once_with(request_timeout=5.0)

    def test_include_empty(self, group_manager):
        groups = group_manager.list_groups(include_empty=True)

        assert [g.group_id for g in groups] == ["Analytics-Batch", "analytics-stream", "payments"]
        assert groups[0].state == "EMPTY"

    def test_pattern_is_case_insensitive(self, group_manager, admin_client_mock):
        groups = group_manager.list_groups(include_empty=True, pattern="ANALYTICS")

        assert [g.group_id for g in groups] == ["Analytics-Batch", "analytics-stream"]
        admin_client_mock.describe_consumer_groups.assert_called_once_with(
            ["Analytics-Batch", "analytics-stream"], request_timeout=5.0
        )

    def test_no_match_skips_describe(self, group_manager, admin_client_mock):
        assert group_manager.list_groups(pattern="nothing") == []
        admin_client_mock.describe_consumer_groups.assert_not_called()

    def test_group_vanishing_between_calls_is_skipped(self, group_manager, admin_client_mock):
        admin_client_mock.describe_consumer_groups.side_effect = lambda ids, request_timeout: {
            "payments": failed(KafkaError.GROUP_ID_NOT_FOUND),
            "Analytics-Batch": resolved(description_mock("Analytics-Batch", ConsumerGroupState.EMPTY)),
            "analytics-stream": resolved(description_mock("analytics-stream")),
        }

        assert [g.group_id for g in group_manager.list_groups()] == ["analytics-stream"]

    def test_listing_error_propagates(self, group_manager, admin_client_mock):
        admin_client_mock.list_consumer_groups.return_value = failed(KafkaError._TRANSPORT)

        with pytest.raises(KafkaException):
            group_manager.list_groups()


class TestDescribeGroup:

    def test_describe(self, group_manager, admin_client_mock):
        description = description_mock("payments", members=[
            member_mock("m1", "app-1", [("orders", 1), ("orders", 0), ("events", 2)]),
            member_mock("m2", "app-2", [("orders", 2)]),
        ])
        admin_client_mock.describe_consumer_groups.return_value = {"payments": resolved(description)}

        group = group_manager.describe_group("payments")

        admin_client_mock.describe_consumer_groups.assert_called_once_with(["payments"], request_timeout=5.0)
        assert group.state == "STABLE"
        assert group.partition_assignor == "range"
        assert group.coordinator == "broker1:9092 (id: 1)"
        assert group.topic_partitions() == {"events": 1, "orders": 3}
        assert group.members[0].assignment_by_topic() == {"orders": [0, 1], "events": [2]}

    def test_unknown_group_reported_dead(self, group_manager, admin_client_mock):
        admin_client_mock.describe_consumer_groups.return_value = {
            "ghost": resolved(description_mock("ghost", ConsumerGroupState.DEAD))
        }

        with pytest.raises(GroupNotFoundError) as exc_info:
            group_manager.describe_group("ghost")
        assert "ghost" in str(exc_info.value)

    def test_unknown_group_error(self, group_manager, admin_client_mock):
        admin_client_mock.describe_consumer_groups.return_value = {
            "ghost": failed(KafkaError.GROUP_ID_NOT_FOUND)
        }

        with pytest.raises(GroupNotFoundError):
            group_manager.describe_group("ghost")

    def test_other_error_propagates(self, group_manager, admin_client_mock):
        admin_client_mock.describe_consumer_groups.return_value = {
            "secret": failed(KafkaError.GROUP_AUTHORIZATION_FAILED)
        }

        with pytest.raises(KafkaException):
            group_manager.describe_group("secret")


class TestDeleteGroup:

    def test_delete(self, group_manager, admin_client_mock):
        admin_client_mock.delete_consumer_groups.return_value = {"old": resolved(None)}

        group_manager.delete_group("old")

        admin_client_mock.delete_consumer_groups.assert_called_once_with(["old"], request_timeout=5.0)

    def test_delete_unknown_group(self, group_manager, admin_client_mock):
        admin_client_mock.delete_consumer_groups.return_value = {"ghost": failed(KafkaError.GROUP_ID_NOT_FOUND)}

        with pytest.raises(GroupNotFoundError):
            group_manager.delete_group("ghost")

    def test_delete_non_empty_group(self, group_manager, admin_client_mock):
        admin_client_mock.delete_consumer_groups.return_value = {"busy": failed(KafkaError.NON_EMPTY_GROUP)}

        with pytest.raises(KafkaException):
            group_manager.delete_group("busy")


class TestGroupInfo:

    def test_state_name(self):
        assert state_name(ConsumerGroupState.PREPARING_REBALANCING) == "PREPARING_REBALANCING"
        assert state_name("Stable") == "STABLE"

    def test_empty(self):
        assert ConsumerGroupInfo(group_id="g", state="EMPTY").empty
        assert not ConsumerGroupInfo(group_id="g", state="STABLE").empty

    def test_member_without_assignment(self):
        member = GroupMemberInfo(member_id="m", client_id="c", host="h")
        assert member.assignment_by_topic() == {}
