"""
Crew/customer/admin messaging.

Messages are addressed by recipient type and id; a recipient also receives
messages sent to its type without an id.
"""
from ..const import DEFAULT_MESSAGE_LIMIT
from ..models import MessageDraft, RealtimeMessage
from ..requests import RealtimeTransport
from .common import call_api
from .result import ApiResult


async def send_message(transport: RealtimeTransport, draft: MessageDraft) -> ApiResult[int]:
    """Send a message; data is the new message_id."""
    return await call_api(
        transport,
        "POST",
        "messages/send",
        "Failed to send message",
        lambda body: body.get("message_id"),
        payload=draft.to_payload(),
        payload_key="message_id",
    )


async def get_messages(
    transport: RealtimeTransport,
    recipient_type: str,
    recipient_id: int,
    limit: int = DEFAULT_MESSAGE_LIMIT,
) -> ApiResult[list[RealtimeMessage]]:
    """Recent messages for one recipient, newest first."""
    return await call_api(
        transport,
        "GET",
        f"messages/{recipient_type}/{recipient_id}",
        "Failed to get messages",
        lambda body: [RealtimeMessage.model_validate(row) for row in body.get("messages", [])],
        params={"limit": limit},
        payload_key="messages",
    )
