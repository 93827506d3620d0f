"""
Request context management using contextvars for automatic propagation.

The context is set once per request (onboarding run or webhook change) and is
picked up by every ContextLogger call made while handling that request.
"""

from contextvars import ContextVar

# WhatsApp Business Account being onboarded or addressed by a webhook
_waba_context: ContextVar[str | None] = ContextVar("waba_id", default=None)
# Phone number id or end-user (sender / recipient) for webhook events
_user_context: ContextVar[str | None] = ContextVar("user_id", default=None)


def set_request_context(
    waba_id: str | None = None,
    user_id: str | None = None,
) -> None:
    """
    Set the request context for the current async context.

    Args:
        waba_id: WhatsApp Business Account identifier
        user_id: Phone number id or WhatsApp user id
    """
    if waba_id is not None:
        _waba_context.set(waba_id)
    if user_id is not None:
        _user_context.set(user_id)


def get_current_waba_context() -> str | None:
    """Get the current WABA id from context variables."""
    return _waba_context.get()


def get_current_user_context() -> str | None:
    """Get the current user id from context variables."""
    return _user_context.get()


def clear_request_context() -> None:
    """
    Clear the request context.

    Context is isolated per task already; this is mostly useful in tests.
    """
    _waba_context.set(None)
    _user_context.set(None)


def get_context_info() -> dict[str, str | None]:
    """Get current context information for debugging."""
    return {
        "waba_id": get_current_waba_context(),
        "user_id": get_current_user_context(),
    }
