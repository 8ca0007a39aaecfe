"""Hook context and exceptions for the hook system.

Contains the core data structures used by the hook system:
- HookContext: Context passed to all hook callbacks
- AbortHookException: Raised by before-hooks to cancel operations
- HookResult: Result of a hook trigger operation
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Optional


class AbortHookException(Exception):
    """Raised by before-hooks to cancel an operation.

    Example:
        @hook.on_document_before_create("orders")
        async def validate_order(event, data, context):
            if data.get("total", 0) < 0:
                raise AbortHookException("Order total cannot be negative")
            return data
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


@dataclass
class HookContext:
    """Context passed to all hook callbacks.

    Attributes:
        collection: Collection of the document being processed.
        model_name: Name of the model exposed to the query layer.
        document_id: Id of the document, None before it is assigned on create.
        request_id: Correlation ID for logging and tracing.
    """

    collection: str
    model_name: str
    document_id: Optional[str] = None
    request_id: str = ""

    def __post_init__(self) -> None:
        if not self.request_id:
            self.request_id = f"hk_{uuid.uuid4().hex[:12]}"


@dataclass
class HookResult:
    """Result of a hook trigger operation.

    Attributes:
        success: Whether all hooks executed successfully.
        aborted: Whether the operation was aborted by a hook.
        abort_message: Message from AbortHookException if aborted.
        errors: List of error messages from hooks that failed.
        data: Modified data from the hook chain.
    """

    success: bool = True
    aborted: bool = False
    abort_message: Optional[str] = None
    errors: list[str] = field(default_factory=list)
    data: Optional[dict[str, Any]] = None
