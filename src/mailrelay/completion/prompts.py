"""
Prompt templates for email generation.
"""

from mailrelay.completion.models import ChatMessage, ChatRequest, MessageRole

EMAIL_INSTRUCTION_TEMPLATE = "Write a professional email with this context: {prompt}"


def build_email_prompt(prompt: str) -> str:
    """Interpolate the caller's free-text context into the instruction."""
    return EMAIL_INSTRUCTION_TEMPLATE.format(prompt=prompt)


def build_email_request(
    prompt: str,
    model: str | None = None,
    correlation_id: str | None = None,
) -> ChatRequest:
    """Build the single user-message chat request for an email draft.

    Args:
        prompt: Free-text context supplied by the caller.
        model: Optional model override; the provider default is used otherwise.
        correlation_id: Request correlation ID; a fresh one is generated if omitted.

    Returns:
        ChatRequest with exactly one ``user`` message.
    """
    request = ChatRequest(
        messages=[ChatMessage(role=MessageRole.USER, content=build_email_prompt(prompt))],
        model=model,
    )
    if correlation_id:
        request.correlation_id = correlation_id
    return request
