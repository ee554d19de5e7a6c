"""
Brand chat: answers team questions in the brand's own voice.

The prompt combines the context summary, up to five numbered references
from the vector store and reply guidelines. Chat never raises to the
route: any DeepSeek failure (including a missing API key) produces an
echo-style fallback reply with fallback=True.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Sequence

from lumora.brandbrain.retrieval import BrandVectorMatch
from lumora.integrations.deepseek import DeepSeekClient, DeepSeekError, get_default_client

logger = logging.getLogger(__name__)

MAX_REFERENCES = 5
MAX_SNIPPET_CHARS = 240

SYSTEM_PROMPT_TEMPLATE = (
    "You are {brand_name}'s internal operating brain. Respond like the founder "
    "chatting with their team, never with customers. Sound natural, candid, and "
    'human. Use first-person plural ("we") with a confident but conversational '
    "tone. Offer clear takeaways, but avoid rigid templates or section headers. "
    "Keep replies under 220 words and cite references with [number] only when "
    "you quote them directly."
)

REPLY_GUIDELINES = """Guidelines:
- Start with a quick acknowledgement in plain language (e.g., "Hey, got it" or similar).
- Share insights or decisions in one to two short paragraphs.
- If actions are needed, list up to two short bullets prefixed with "•".
- Skip headers like SNAPSHOT/NEXT MOVES; just talk like a person."""


@dataclass
class ChatMessage:
    role: Literal["user", "assistant"]
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class ChatReply:
    response: str
    fallback: bool
    error: str | None = None


def _snippet(content: str) -> str:
    if len(content) > MAX_SNIPPET_CHARS:
        return content[: MAX_SNIPPET_CHARS - 3] + "…"
    return content


def build_reference_block(insights: Sequence[BrandVectorMatch]) -> str:
    lines = []
    for index, item in enumerate(list(insights)[:MAX_REFERENCES], start=1):
        label = f" {item.label}" if item.label else ""
        lines.append(f"[{index}] ({item.type}{label}) {_snippet(item.content)}")
    if not lines:
        return ""
    return (
        "REFERENCE LIBRARY (cite with [number] when referencing specific lines):\n"
        + "\n".join(lines)
        + "\n"
    )


def build_chat_messages(
    brand_name: str,
    context_summary: str,
    history: Sequence[ChatMessage],
    prompt: str,
    vector_insights: Sequence[BrandVectorMatch] = (),
) -> list[dict[str, str]]:
    user_prompt = (
        f"TEAM CONTEXT (confidential):\n{context_summary}\n\n"
        f"{build_reference_block(vector_insights)}{REPLY_GUIDELINES}\n\n"
        f"REQUEST FROM TEAM:\n{prompt}"
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT_TEMPLATE.format(brand_name=brand_name)},
        *(message.to_dict() for message in history),
        {"role": "user", "content": user_prompt},
    ]


def fallback_reply(brand_name: str, prompt: str, context_summary: str) -> str:
    return f"({brand_name}) {prompt}\n\nContext used:\n{context_summary}"


def generate_brand_chat_response(
    brand_name: str,
    context_summary: str,
    history: Sequence[ChatMessage],
    prompt: str,
    vector_insights: Sequence[BrandVectorMatch] = (),
    client: DeepSeekClient | None = None,
) -> ChatReply:
    """
    Generate a brand-voiced reply.

    Returns:
        ChatReply - fallback=True with error set when DeepSeek is unavailable
    """
    client = client or get_default_client()
    messages = build_chat_messages(
        brand_name, context_summary, history, prompt, vector_insights
    )

    try:
        text = client.chat(messages, flow="brand_chat", temperature=0.7, max_tokens=1200)
    except DeepSeekError as exc:
        logger.warning("Brand chat falling back code=%s: %s", exc.code, exc.message)
        return ChatReply(
            response=fallback_reply(brand_name, prompt, context_summary),
            fallback=True,
            error=exc.message,
        )

    return ChatReply(response=text, fallback=False)
