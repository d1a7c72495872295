"""Kafka client adapters."""
from franzpy.kafka.acls import AclManager
from franzpy.kafka.admin import ClusterInspector, TopicManager
from franzpy.kafka.client import KafkaSession, to_confluent_config
from franzpy.kafka.groups import GroupManager

__all__ = [
    "AclManager",
    "ClusterInspector",
    "GroupManager",
    "KafkaSession",
    "TopicManager",
    "to_confluent_config",
]
