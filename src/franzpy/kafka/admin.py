"""Topic and cluster operations over a Kafka AdminClient."""
import logging
from dataclasses import dataclass, field
from typing import Dict, List

from confluent_kafka import KafkaException
from confluent_kafka.admin import AdminClient, NewTopic
from confluent_kafka.error import KafkaError

from franzpy.exceptions import TopicNotFoundError

logger = logging.getLogger(__name__)


def is_internal_topic(name: str) -> bool:
    """Whether ``name`` is a broker-internal topic such as __consumer_offsets."""
    return name.startswith("__")


def matches_pattern(name: str, pattern: str | None) -> bool:
    """Case-insensitive substring match; no pattern matches everything."""
    return pattern is None or pattern.lower() in name.lower()


@dataclass
class PartitionInfo:
    """Placement of one topic partition."""
    partition: int
    leader: int
    replicas: List[int]
    isr: List[int]

    @property
    def under_replicated(self) -> bool:
        return len(self.isr) < len(self.replicas)


@dataclass
class TopicInfo:
    """Topic metadata."""
    name: str
    partitions: List[PartitionInfo] = field(default_factory=list)

    @property
    def replication_factor(self) -> int:
        return len(self.partitions[0].replicas) if self.partitions else 0

    @property
    def internal(self) -> bool:
        return is_internal_topic(self.name)


@dataclass
class BrokerInfo:
    """A broker as advertised in cluster metadata."""
    broker_id: int
    host: str
    port: int
    controller: bool = False


@dataclass
class ClusterInfo:
    """Cluster summary."""
    cluster_id: str | None
    controller_id: int
    broker_count: int
    topic_count: int


class TopicManager:
    """Manages Kafka topic operations."""

    def __init__(self, admin_client: AdminClient, timeout: float = 30.0):
        """Initialize TopicManager.

        Args:
            admin_client: Open AdminClient owned by the caller
            timeout: Timeout in seconds for each admin request
        """
        self.admin_client = admin_client
        self.timeout = timeout

    def _metadata(self, topic: str | None = None):
        try:
            return self.admin_client.list_topics(topic=topic, timeout=self.timeout)
        except KafkaException:
            raise
        except Exception as e:
            logger.error(f"Error fetching metadata: {e}")
            raise KafkaException(e)

    def list_topics(self, include_internal: bool = False, pattern: str | None = None) -> List[str]:
        """List topic names, sorted.

        Args:
            include_internal: Keep topics whose names start with "__"
            pattern: Keep only names containing this text, ignoring case

        Raises:
            KafkaException: If unable to list topics
        """
        metadata = self._metadata()
        names = sorted(metadata.topics.keys())
        if not include_internal:
            names = [name for name in names if not is_internal_topic(name)]
        return [name for name in names if matches_pattern(name, pattern)]

    def describe_topic(self, topic_name: str) -> TopicInfo:
        """Describe the partitions of a topic.

        Raises:
            TopicNotFoundError: If the topic does not exist
            KafkaException: If unable to fetch metadata
        """
        metadata = self._metadata(topic=topic_name)
        topic = metadata.topics.get(topic_name)
        if topic is None or (
            topic.error is not None and topic.error.code() == KafkaError.UNKNOWN_TOPIC_OR_PART
        ):
            raise TopicNotFoundError(topic_name)
        if topic.error is not None:
            raise KafkaException(topic.error)

        partitions = [
            PartitionInfo(
                partition=p.id,
                leader=p.leader,
                replicas=list(p.replicas),
                isr=list(p.isrs),
            )
            for p in sorted(topic.partitions.values(), key=lambda p: p.id)
        ]
        return TopicInfo(name=topic_name, partitions=partitions)

    def create_topic(
        self,
        topic_name: str,
        num_partitions: int = 1,
        replication_factor: int = 1,
        config: Dict[str, str] | None = None
    ) -> None:
        """Create a new topic.

        Raises:
            KafkaException: If topic creation fails
        """
        new_topic = NewTopic(
            topic_name,
            num_partitions=num_partitions,
            replication_factor=replication_factor,
            config=config or {}
        )

        futures = self.admin_client.create_topics([new_topic], request_timeout=self.timeout)
        try:
            futures[topic_name].result(timeout=self.timeout)
            logger.info(f"Topic '{topic_name}' created successfully")
        except KafkaException as e:
            logger.error(f"Failed to create topic '{topic_name}': {e}")
            raise

    def delete_topic(self, topic_name: str) -> None:
        """Delete a topic.

        Raises:
            TopicNotFoundError: If the topic does not exist
            KafkaException: If topic deletion fails
        """
        futures = self.admin_client.delete_topics([topic_name], request_timeout=self.timeout)
        try:
            futures[topic_name].result(timeout=self.timeout)
            logger.info(f"Topic '{topic_name}' deleted successfully")
        except KafkaException as e:
            error = e.args[0] if e.args else None
            if isinstance(error, KafkaError) and error.code() == KafkaError.UNKNOWN_TOPIC_OR_PART:
                raise TopicNotFoundError(topic_name)
            logger.error(f"Failed to delete topic '{topic_name}': {e}")
            raise


class ClusterInspector:
    """Read-only cluster and broker information."""

    def __init__(self, admin_client: AdminClient, timeout: float = 30.0):
        self.admin_client = admin_client
        self.timeout = timeout

    def _metadata(self):
        try:
            return self.admin_client.list_topics(timeout=self.timeout)
        except KafkaException:
            raise
        except Exception as e:
            logger.error(f"Error fetching cluster metadata: {e}")
            raise KafkaException(e)

    def describe(self) -> ClusterInfo:
        metadata = self._metadata()
        return ClusterInfo(
            cluster_id=metadata.cluster_id,
            controller_id=metadata.controller_id,
            broker_count=len(metadata.brokers),
            topic_count=len(metadata.topics),
        )

    def list_brokers(self) -> List[BrokerInfo]:
        metadata = self._metadata()
        return [
            BrokerInfo(
                broker_id=broker.id,
                host=broker.host,
                port=broker.port,
                controller=broker.id == metadata.controller_id,
            )
            for broker in sorted(metadata.brokers.values(), key=lambda b: b.id)
        ]
