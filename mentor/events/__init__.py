"""Domain events published after plan changes."""

from mentor.events.publish import DomainEvent, DomainEventType, publish

__all__ = ["DomainEvent", "DomainEventType", "publish"]
