"""Hook event definitions.

Document events follow a consistent naming pattern:
- before_* events can modify data or abort the operation
- after_* events are called after the write batch succeeded
"""


class HookEvent:
    """Hook event names fired by the model layer."""

    ON_DOCUMENT_BEFORE_CREATE = "on_document_before_create"
    ON_DOCUMENT_BEFORE_UPDATE = "on_document_before_update"
    ON_DOCUMENT_AFTER_SAVE = "on_document_after_save"
    ON_DOCUMENT_BEFORE_DELETE = "on_document_before_delete"
    ON_DOCUMENT_AFTER_DELETE = "on_document_after_delete"


def get_all_events() -> list[str]:
    """Get all available hook event names."""
    return [
        value
        for name, value in vars(HookEvent).items()
        if not name.startswith("_") and isinstance(value, str)
    ]


def is_before_event(event: str) -> bool:
    """Check if an event is a 'before' event (can modify data/abort)."""
    return "before" in event.lower()


def is_after_event(event: str) -> bool:
    """Check if an event is an 'after' event."""
    return "after" in event.lower()
