"""
Home Assistant MQTT discovery topic identifiers.

Discovery topics have the shape:

    <base_topic>/<component>/[<node_id>/]<object_id>/config

The optional node id lets a single device announce several objects under
one node. A "+" in any position is an MQTT single-level wildcard and is
used when subscribing to every component of a device.
"""

import re
from dataclasses import dataclass
from typing import Optional

CONFIG_SUFFIX = "config"
WILDCARD = "+"

_INVALID_ID_CHARS = re.compile(r"[^A-Za-z0-9_-]")


class InvalidTopicError(ValueError):
    """Raised when a topic is not a Home Assistant discovery topic."""


@dataclass(frozen=True)
class HaID:
    """Structured identifier of a Home Assistant discovery topic."""

    base_topic: str = "homeassistant"
    component: str = WILDCARD
    node_id: str = ""
    object_id: str = WILDCARD

    @classmethod
    def from_topic(cls, topic: str) -> "HaID":
        """
        Parse a full discovery topic.

        Raises:
            InvalidTopicError: if the topic has the wrong number of levels,
                does not end in the config suffix, or has empty levels.
        """
        parts = topic.split("/")
        if len(parts) < 4 or len(parts) > 5:
            raise InvalidTopicError(f"Not a discovery topic (wrong length): {topic}")
        if parts[-1] != CONFIG_SUFFIX:
            raise InvalidTopicError(f"Not a discovery topic ('{CONFIG_SUFFIX}' missing): {topic}")
        if any(not p for p in parts):
            raise InvalidTopicError(f"Not a discovery topic (empty level): {topic}")

        if len(parts) == 5:
            return cls(
                base_topic=parts[0],
                component=parts[1],
                node_id=parts[2],
                object_id=parts[3],
            )
        return cls(base_topic=parts[0], component=parts[1], object_id=parts[2])

    @classmethod
    def for_discovery(
        cls,
        base_topic: str,
        object_id: str = WILDCARD,
        node_id: str = "",
    ) -> "HaID":
        """Identifier matching every component kind of one object (or all, with '+')."""
        return cls(
            base_topic=base_topic,
            component=WILDCARD,
            node_id=node_id,
            object_id=object_id,
        )

    @property
    def thing_id(self) -> str:
        return self.object_id

    @property
    def is_wildcard(self) -> bool:
        return WILDCARD in (self.component, self.node_id, self.object_id)

    def get_topic(self, suffix: str) -> str:
        """Render the full topic ending in the given suffix."""
        return f"{self.base_topic}/{self.to_short_topic()}/{suffix}"

    def to_short_topic(self) -> str:
        """Topic without base topic and suffix: component/[node_id/]object_id."""
        if self.node_id:
            return f"{self.component}/{self.node_id}/{self.object_id}"
        return f"{self.component}/{self.object_id}"

    def group_id(self, unique_id: Optional[str] = None) -> str:
        """
        Channel group identifier for a component announced on this topic.

        Prefers the configuration's unique_id. Falls back to a combination
        of node id, object id and component kind.
        """
        if unique_id:
            raw = unique_id
        elif self.node_id:
            raw = f"{self.node_id}_{self.object_id}_{self.component}"
        else:
            raw = f"{self.object_id}_{self.component}"
        return _INVALID_ID_CHARS.sub("_", raw)

    def __str__(self) -> str:
        return self.to_short_topic()
