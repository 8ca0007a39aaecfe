"""Hook registry - Central hook registration and execution engine.

The HookRegistry provides:
- Registration of hooks with filters and priority
- Execution of hooks in priority order
- Tag-based filtering for collection-specific hooks
- Error handling and logging
"""

import inspect
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from kvgraph.core.logging import get_logger
from kvgraph.domain.entities.hook_context import (
    AbortHookException,
    HookContext,
    HookResult,
)

logger = get_logger(__name__)


@dataclass
class RegisteredHook:
    """Internal representation of a registered hook.

    Attributes:
        id: Unique identifier for this hook registration.
        event: The event this hook is registered for.
        callback: The function to call, sync or async.
        filters: Tag-based filters (e.g., {"collection": "users"}).
        priority: Execution priority (higher = earlier).
        stop_on_error: Whether errors should abort the chain.
        registration_order: Order in which this hook was registered.
    """

    id: str
    event: str
    callback: Callable
    filters: dict[str, Any] = field(default_factory=dict)
    priority: int = 0
    stop_on_error: bool = False
    registration_order: int = 0


class HookRegistry:
    """Central hook registration and execution engine.

    Example:
        registry = HookRegistry()

        hook_id = registry.register(
            event="on_document_after_save",
            callback=my_handler,
            filters={"collection": "users"},
            priority=10,
        )

        result = await registry.trigger(
            event="on_document_after_save",
            data={"email": "a@b.co"},
            context=hook_context,
            filters={"collection": "users"},
        )

        registry.unregister(hook_id)
    """

    def __init__(self) -> None:
        self._hooks: dict[str, list[RegisteredHook]] = {}
        self._registration_counter: int = 0
        self._hook_map: dict[str, RegisteredHook] = {}

    def register(
        self,
        event: str,
        callback: Callable,
        filters: Optional[dict[str, Any]] = None,
        priority: int = 0,
        stop_on_error: bool = False,
    ) -> str:
        """Register a hook for an event.

        Args:
            event: Hook event name (e.g., "on_document_before_create").
            callback: Function accepting (event, data, context). Before-hooks
                      may return a modified document.
            filters: Optional tag-based filters. Hook only fires if
                     all filter conditions match (e.g., {"collection": "users"}).
            priority: Execution priority. Higher priority hooks run first.
            stop_on_error: If True, errors in this hook abort the chain.

        Returns:
            Unique hook_id string for later removal.
        """
        hook_id = f"hook_{uuid.uuid4().hex[:12]}"

        # FIFO ordering within the same priority
        self._registration_counter += 1

        hook = RegisteredHook(
            id=hook_id,
            event=event,
            callback=callback,
            filters=filters or {},
            priority=priority,
            stop_on_error=stop_on_error,
            registration_order=self._registration_counter,
        )

        self._hooks.setdefault(event, []).append(hook)
        self._hook_map[hook_id] = hook

        logger.debug(
            "Hook registered",
            hook_id=hook_id,
            hook_event=event,
            priority=priority,
            filters=filters,
        )

        return hook_id

    def unregister(self, hook_id: str) -> bool:
        """Remove a registered hook.

        Returns:
            True if hook was removed, False if not found.
        """
        hook = self._hook_map.pop(hook_id, None)
        if not hook:
            logger.warning("Hook not found for unregister", hook_id=hook_id)
            return False

        remaining = [h for h in self._hooks.get(hook.event, []) if h.id != hook_id]
        if remaining:
            self._hooks[hook.event] = remaining
        else:
            self._hooks.pop(hook.event, None)

        logger.debug("Hook unregistered", hook_id=hook_id, hook_event=hook.event)
        return True

    async def trigger(
        self,
        event: str,
        data: Optional[dict[str, Any]] = None,
        context: Optional[HookContext] = None,
        filters: Optional[dict[str, Any]] = None,
    ) -> HookResult:
        """Execute all registered hooks for an event.

        Hooks are executed in priority order (higher priority first).
        Hooks with the same priority execute in registration order (FIFO).

        Args:
            event: Hook event name.
            data: Data to pass to hooks. For before_* events, this can
                  be modified by hooks and the modified data is returned.
            context: HookContext describing the document being processed.
            filters: Trigger-time filters. Only hooks matching these
                     filters will be executed.

        Returns:
            HookResult with success status, any errors, and final data.
        """
        result = HookResult(success=True, data=data)

        matching_hooks = self._filter_hooks(self._hooks.get(event, []), filters)
        if not matching_hooks:
            return result

        sorted_hooks = sorted(
            matching_hooks,
            key=lambda h: (-h.priority, h.registration_order),
        )

        logger.debug(
            "Triggering hooks",
            hook_event=event,
            hook_count=len(sorted_hooks),
            filters=filters,
        )

        current_data = data
        for hook in sorted_hooks:
            try:
                hook_result = await self._execute_hook(hook, event, current_data, context)

                if hook_result is not None and isinstance(hook_result, dict):
                    current_data = hook_result
                    result.data = current_data

            except AbortHookException as e:
                logger.info(
                    "Hook aborted operation",
                    hook_id=hook.id,
                    hook_event=event,
                    message=e.message,
                )
                result.success = False
                result.aborted = True
                result.abort_message = e.message
                return result

            except Exception as e:
                logger.error(
                    "Hook execution failed",
                    hook_id=hook.id,
                    hook_event=event,
                    error=str(e),
                    stop_on_error=hook.stop_on_error,
                )
                result.errors.append(f"Hook {hook.id} failed: {e}")

                if hook.stop_on_error:
                    result.success = False
                    return result

        return result

    async def _execute_hook(
        self,
        hook: RegisteredHook,
        event: str,
        data: Optional[dict[str, Any]],
        context: Optional[HookContext],
    ) -> Any:
        """Execute a single hook callback, awaiting it when it is a coroutine."""
        outcome = hook.callback(event, data, context)
        if inspect.isawaitable(outcome):
            return await outcome
        return outcome

    def _filter_hooks(
        self,
        hooks: list[RegisteredHook],
        filters: Optional[dict[str, Any]],
    ) -> list[RegisteredHook]:
        """Filter hooks based on trigger filters.

        A hook matches if it has no filters, or if every one of its filter
        keys is present in the trigger filters with an equal value.
        """
        if not filters:
            return list(hooks)

        return [
            hook
            for hook in hooks
            if all(filters.get(key) == value for key, value in hook.filters.items())
        ]

    def get_hooks_for_event(self, event: str) -> list[RegisteredHook]:
        """Get all hooks registered for an event."""
        return self._hooks.get(event, []).copy()

    def get_hook_by_id(self, hook_id: str) -> Optional[RegisteredHook]:
        """Get a hook by its ID."""
        return self._hook_map.get(hook_id)

    def clear(self) -> int:
        """Remove all registered hooks.

        Returns:
            Number of hooks removed.
        """
        count = len(self._hook_map)
        self._hooks.clear()
        self._hook_map.clear()
        logger.debug("Hooks cleared", count=count)
        return count
