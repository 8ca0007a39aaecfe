"""Hook decorator API for user-friendly hook registration.

Enables the `@hook.on_document_before_create("users")` syntax on top of a
HookRegistry.
"""

from typing import Any, Callable, Optional, TypeVar

from kvgraph.core.hooks.hook_events import HookEvent
from kvgraph.core.hooks.hook_registry import HookRegistry

F = TypeVar("F", bound=Callable[..., Any])


class HookDecorator:
    """Provides decorator syntax for hook registration.

    Example:
        hook = HookDecorator(registry)

        @hook.on_document_after_save("users")
        async def notify_on_signup(event, data, context):
            await send_welcome(data["email"])
    """

    def __init__(self, registry: HookRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> HookRegistry:
        """Get the underlying hook registry."""
        return self._registry

    def on_document_before_create(
        self,
        collection: Optional[str] = None,
        priority: int = 0,
        stop_on_error: bool = False,
    ) -> Callable[[F], F]:
        """Register a hook for before document creation.

        Called after validation, before the write batch. Can modify data or abort.

        Example:
            @hook.on_document_before_create("posts")
            async def stamp(event, data, context):
                data["status"] = "draft"
                return data
        """
        return self._create_decorator(
            HookEvent.ON_DOCUMENT_BEFORE_CREATE, collection, priority, stop_on_error
        )

    def on_document_before_update(
        self,
        collection: Optional[str] = None,
        priority: int = 0,
        stop_on_error: bool = False,
    ) -> Callable[[F], F]:
        """Register a hook for before an existing document is saved."""
        return self._create_decorator(
            HookEvent.ON_DOCUMENT_BEFORE_UPDATE, collection, priority, stop_on_error
        )

    def on_document_after_save(
        self,
        collection: Optional[str] = None,
        priority: int = 0,
        stop_on_error: bool = False,
    ) -> Callable[[F], F]:
        """Register a hook for after a create or update batch succeeded."""
        return self._create_decorator(
            HookEvent.ON_DOCUMENT_AFTER_SAVE, collection, priority, stop_on_error
        )

    def on_document_before_delete(
        self,
        collection: Optional[str] = None,
        priority: int = 0,
        stop_on_error: bool = False,
    ) -> Callable[[F], F]:
        """Register a hook for before document deletion. Can abort."""
        return self._create_decorator(
            HookEvent.ON_DOCUMENT_BEFORE_DELETE, collection, priority, stop_on_error
        )

    def on_document_after_delete(
        self,
        collection: Optional[str] = None,
        priority: int = 0,
        stop_on_error: bool = False,
    ) -> Callable[[F], F]:
        """Register a hook for after document deletion."""
        return self._create_decorator(
            HookEvent.ON_DOCUMENT_AFTER_DELETE, collection, priority, stop_on_error
        )

    def _create_decorator(
        self,
        event: str,
        collection: Optional[str],
        priority: int,
        stop_on_error: bool,
    ) -> Callable[[F], F]:
        def decorator(func: F) -> F:
            filters = {}
            if collection:
                filters["collection"] = collection

            self._registry.register(
                event=event,
                callback=func,
                filters=filters,
                priority=priority,
                stop_on_error=stop_on_error,
            )
            return func

        return decorator
