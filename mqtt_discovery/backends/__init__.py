"""
Broker connections used by discovery sessions.
"""

from .base import BrokerConnection, ConnectionRef, MessageSubscriber
from .mqtt import MQTTConnection

__all__ = [
    "BrokerConnection",
    "ConnectionRef",
    "MessageSubscriber",
    "MQTTConnection",
]
