"""Consumer group operations over a Kafka AdminClient."""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from confluent_kafka import KafkaException
from confluent_kafka.admin import AdminClient
from confluent_kafka.error import KafkaError

from franzpy.exceptions import GroupNotFoundError
from franzpy.kafka.admin import matches_pattern

logger = logging.getLogger(__name__)


def state_name(state) -> str:
    """Upper-case name of a ConsumerGroupState (or anything printable)."""
    return getattr(state, "name", str(state)).upper()


def _is_group_not_found(error: KafkaException) -> bool:
    kafka_error = error.args[0] if error.args else None
    return isinstance(kafka_error, KafkaError) and kafka_error.code() == KafkaError.GROUP_ID_NOT_FOUND


@dataclass
class GroupMemberInfo:
    """One member of a consumer group and its partition assignment."""
    member_id: str
    client_id: str
    host: str
    assignments: List[Tuple[str, int]] = field(default_factory=list)

    def assignment_by_topic(self) -> Dict[str, List[int]]:
        by_topic: Dict[str, List[int]] = {}
        for topic, partition in self.assignments:
            by_topic.setdefault(topic, []).append(partition)
        return {topic: sorted(partitions) for topic, partitions in by_topic.items()}


@dataclass
class ConsumerGroupInfo:
    """Consumer group summary or description."""
    group_id: str
    state: str
    members: List[GroupMemberInfo] = field(default_factory=list)
    partition_assignor: str = ""
    coordinator: str = ""

    @property
    def empty(self) -> bool:
        return self.state == "EMPTY"

    def topic_partitions(self) -> Dict[str, int]:
        """Number of assigned partitions per topic, over all members."""
        counts: Dict[str, int] = {}
        for member in self.members:
            for topic, _ in member.assignments:
                counts[topic] = counts.get(topic, 0) + 1
        return dict(sorted(counts.items()))


class GroupManager:
    """Lists, describes and deletes consumer groups."""

    def __init__(self, admin_client: AdminClient, timeout: float = 30.0):
        """Initialize GroupManager.

        Args:
            admin_client: Open AdminClient owned by the caller
            timeout: Timeout in seconds for each admin request
        """
        self.admin_client = admin_client
        self.timeout = timeout

    def list_groups(self, include_empty: bool = False, pattern: str | None = None) -> List[ConsumerGroupInfo]:
        """List consumer groups, sorted by group id.

        Args:
            include_empty: Keep groups without active members
            pattern: Keep only group ids containing this text, ignoring case

        Raises:
            KafkaException: If the groups cannot be listed or described
        """
        future = self.admin_client.list_consumer_groups(request_timeout=self.timeout)
        listings = future.result(timeout=self.timeout).valid
        group_ids = sorted(
            listing.group_id for listing in listings if matches_pattern(listing.group_id, pattern)
        )
        if not group_ids:
            return []

        futures = self.admin_client.describe_consumer_groups(group_ids, request_timeout=self.timeout)
        groups = []
        for group_id in group_ids:
            try:
                description = futures[group_id].result(timeout=self.timeout)
            except KafkaException as e:
                if _is_group_not_found(e):
                    logger.debug(f"Group '{group_id}' disappeared while listing")
                    continue
                raise
            group = self._to_info(description)
            if include_empty or not group.empty:
                groups.append(group)
        return groups

    def describe_group(self, group_id: str) -> ConsumerGroupInfo:
        """Describe a consumer group with its members.

        Raises:
            GroupNotFoundError: If the group does not exist
            KafkaException: If the description fails
        """
        futures = self.admin_client.describe_consumer_groups([group_id], request_timeout=self.timeout)
        try:
            description = futures[group_id].result(timeout=self.timeout)
        except KafkaException as e:
            if _is_group_not_found(e):
                raise GroupNotFoundError(group_id)
            raise
        # Brokers report unknown group ids as DEAD rather than failing
        if state_name(description.state) == "DEAD":
            raise GroupNotFoundError(group_id)
        return self._to_info(description)

    def delete_group(self, group_id: str) -> None:
        """Delete a consumer group without active members.

        Raises:
            GroupNotFoundError: If the group does not exist
            KafkaException: If the group is not empty or deletion fails
        """
        futures = self.admin_client.delete_consumer_groups([group_id], request_timeout=self.timeout)
        try:
            futures[group_id].result(timeout=self.timeout)
            logger.info(f"Consumer group '{group_id}' deleted successfully")
        except KafkaException as e:
            if _is_group_not_found(e):
                raise GroupNotFoundError(group_id)
            logger.error(f"Failed to delete consumer group '{group_id}': {e}")
            raise

    @staticmethod
    def _to_info(description) -> ConsumerGroupInfo:
        members = [
            GroupMemberInfo(
                member_id=member.member_id,
                client_id=member.client_id,
                host=member.host,
                assignments=[
                    (tp.topic, tp.partition)
                    for tp in (member.assignment.topic_partitions if member.assignment else [])
                ],
            )
            for member in description.members
        ]
        coordinator = description.coordinator
        return ConsumerGroupInfo(
            group_id=description.group_id,
            state=state_name(description.state),
            members=members,
            partition_assignor=description.partition_assignor or "",
            coordinator=(
                f"{coordinator.host}:{coordinator.port} (id: {coordinator.id})"
                if coordinator is not None and coordinator.host else ""
            ),
        )
