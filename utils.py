"""
Utility functions for the routine assistant: input validation and the
transcript rendering contract (user text escaped, assistant text stripped of
markdown then escaped).
"""
import html
import json
import re
from typing import Any, List, Tuple

from config import config
from models import ChatMessage, MessageRole, Suggestion

SUSPICIOUS_PATTERNS = [
    r'<script.*?>.*?</script>',
    r'javascript:',
    r'data:text/html',
    r'vbscript:',
    r'onload\s*=',
    r'onerror\s*=',
]


def validate_input(text: str, max_length: int = None) -> Tuple[bool, str]:
    """Validate user input; returns (ok, cleaned text or reason)"""
    limit = max_length or config.MAX_INPUT_LENGTH
    if not text or not text.strip():
        return False, "Empty input"

    if len(text) > limit:
        return False, f"Message exceeds {limit} character limit"

    for pattern in SUSPICIOUS_PATTERNS:
        if re.search(pattern, text, re.IGNORECASE | re.DOTALL):
            return False, "Invalid input detected"

    return True, text.strip()


def escape_html(unsafe: Any) -> str:
    if unsafe is None:
        return ""
    return html.escape(str(unsafe), quote=True).replace("&#x27;", "&#039;")


def clean_markdown(content: Any) -> str:
    """Drop headings, bullet/number markers and emphasis asterisks."""
    if not isinstance(content, str):
        try:
            content = json.dumps(content, indent=2)
        except (TypeError, ValueError):
            content = str(content)
    content = re.sub(r"^#+\s*", "", content, flags=re.MULTILINE)
    content = re.sub(r"^\s*[*\-]\s*", "", content, flags=re.MULTILINE)
    content = re.sub(r"^\s*\d+\.\s*", "", content, flags=re.MULTILINE)
    content = re.sub(r"\*(.*?)\*", r"\1", content)
    return content.replace("*", "")


def render_assistant_html(content: Any) -> str:
    escaped = escape_html(clean_markdown(content))
    with_breaks = re.sub(r"\r\n|\r|\n", "<br>", escaped)
    return f'<div class="ai-response">{with_breaks}</div>'


def render_user_html(content: str) -> str:
    return f'<div class="user-message">{escape_html(content)}</div>'


def render_transcript_html(messages: List[ChatMessage]) -> str:
    parts = []
    for msg in messages:
        if msg.role == MessageRole.ASSISTANT:
            parts.append(render_assistant_html(msg.content))
        elif msg.role == MessageRole.USER:
            parts.append(render_user_html(msg.content))
    return "".join(parts)


def render_suggestions_html(suggestions: List[Suggestion]) -> str:
    if not suggestions:
        return ""
    items = "".join(
        f"<li><strong>{escape_html(s.product.name)}</strong> ({escape_html(s.product.brand)}) "
        f"&mdash; {escape_html(s.product.description)}</li>"
        for s in suggestions
    )
    return f'<div class="ai-suggestions"><h4>Recommended products for missing steps</h4><ul>{items}</ul></div>'
