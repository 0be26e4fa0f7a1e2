from __future__ import annotations

from typing import Dict

from app.types import MessagingAdapter
from app.adapters.slack import SlackClient


class AdapterRegistry:
    """Registry for messaging adapters by name.

    Routers look adapters up by provider name so an alternative Slack client
    (e.g. a sandbox workspace) can be plugged in without changing them.
    """

    _registry: Dict[str, type[MessagingAdapter]] = {
        "slack": SlackClient,
    }

    @classmethod
    def get(cls, name: str) -> MessagingAdapter:
        provider_cls = cls._registry.get(name)
        if provider_cls is None:
            raise KeyError(f"Unknown messaging adapter: {name}")
        return provider_cls()

    @classmethod
    def register(cls, name: str, adapter_cls: type[MessagingAdapter]) -> None:
        cls._registry[name] = adapter_cls

    @classmethod
    def unregister(cls, name: str) -> None:
        cls._registry.pop(name, None)
