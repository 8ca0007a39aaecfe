"""Hook system core module.

Hooks let applications react to document writes without subclassing a model.

Example usage:
    from kvgraph.core.hooks import HookRegistry, HookDecorator

    registry = HookRegistry()
    hook = HookDecorator(registry)

    @hook.on_document_after_save("users")
    async def audit(event, data, context):
        await audit_log.write(context.document_id)

    users = User(store, hook_registry=registry)
"""

from kvgraph.core.hooks.hook_decorator import HookDecorator
from kvgraph.core.hooks.hook_events import (
    HookEvent,
    get_all_events,
    is_after_event,
    is_before_event,
)
from kvgraph.core.hooks.hook_registry import HookRegistry, RegisteredHook

__all__ = [
    "HookRegistry",
    "RegisteredHook",
    "HookDecorator",
    "HookEvent",
    "get_all_events",
    "is_before_event",
    "is_after_event",
]
