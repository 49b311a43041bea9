"""
Shaping of ticket conversation HTML.

Messages come from mail clients as full HTML documents. Before they are
returned to the UI the documents are unwrapped, links are made safe to open
in a new tab and user replies are split from the text they quote.
"""

import re
from collections.abc import Mapping
from html import escape
from typing import Any
from urllib.parse import unquote

from enque_desk.models.schemas.conversation import ConversationMessage, MessageSender

ORIGINAL_SENDER_RE = re.compile(r"<original-sender>(.*?)\|(.*?)</original-sender>")
ORIGINAL_SENDER_TAG_RE = re.compile(r"<original-sender>.*?</original-sender>")
ANCHOR_RE = re.compile(r"<a\s+([^>]*?)href\s*=\s*[\"']([^\"']+)[\"']([^>]*?)>", re.IGNORECASE)
STYLE_ATTR_RE = re.compile(r"style\s*=\s*[\"']([^\"']*?)[\"']", re.IGNORECASE)
TAG_RE = re.compile(r"<[^>]*>")
URL_PARAM_RE = re.compile(r"url=([^&]+)")

_CLEANUP_STEPS: list[tuple[re.Pattern[str], str, int]] = [
    (re.compile(r"<meta[^>]*>", re.IGNORECASE), "", 0),
    (re.compile(r"^\s*<html[^>]*>", re.IGNORECASE), "", 0),
    (re.compile(r"</html>\s*$", re.IGNORECASE), "", 0),
    (re.compile(r"^\s*<head[^>]*>[\s\S]*?</head>", re.IGNORECASE), "", 0),
    (re.compile(r"^\s*<body[^>]*>", re.IGNORECASE), "", 0),
    (re.compile(r"</body>\s*$", re.IGNORECASE), "", 0),
    (re.compile(r"<p[^>]*>\s*</p>", re.IGNORECASE), "<p><br></p>", 0),
    (
        re.compile(
            r"(<p\s+style=[\"']margin:\s*0\s*!important[\"']>[\s\S]*?)(<br\s*/?>)(\s*</p>)",
            re.IGNORECASE,
        ),
        r"\1</p>\2",
        0,
    ),
    (re.compile(r"^\s*(?:<br\s*/?>\s*)+", re.IGNORECASE), "", 1),
    (re.compile(r"(?:<br\s*/?>\s*)+$", re.IGNORECASE), "", 1),
]

# (pattern, kind); "hr" matches near the top and "from" matches with little text before them are ignored.
QUOTE_MARKERS: list[tuple[re.Pattern[str], str | None]] = [
    (re.compile(r"<p[^>]*><strong>From:</strong>", re.IGNORECASE), "from"),
    (re.compile(r"<div[^>]*>From:\s+[^<]+@[^>]+>", re.IGNORECASE), "from"),
    (re.compile(r"^From:\s+[^<]+@[^>]+>", re.MULTILINE), "from"),
    (re.compile(r"<[^>]*>\s*<b>From:</b>", re.IGNORECASE), "from"),
    (re.compile(r"Sent from my \w+", re.IGNORECASE), None),
    (re.compile(r"<div id=\"appendonsend\"></div>", re.IGNORECASE), None),
    (re.compile(r"<div[^>]*class=\"gmail_quote", re.IGNORECASE), None),
    (re.compile(r"<blockquote[^>]*class=\"gmail_quote", re.IGNORECASE), None),
    (re.compile(r"<blockquote[^>]*type=\"cite\"", re.IGNORECASE), None),
    (re.compile(r"<div[^>]*class=\"gmail_attr\"", re.IGNORECASE), None),
    (
        re.compile(r"<hr\s*style=[\"'][^\"']*border-top:\s*1px\s*solid\s*[^;]+;[\"']", re.IGNORECASE),
        "hr",
    ),
    (re.compile(r"---------- Forwarded message ---------", re.IGNORECASE), None),
    (re.compile(r"Begin forwarded message:", re.IGNORECASE), None),
    (
        re.compile(
            r"<div[^>]*style=[\"'][^\"']*border:none;\s*border-top:solid\s+#E1E1E1",
            re.IGNORECASE,
        ),
        None,
    ),
    (
        re.compile(
            r"^On\s+\w{3},\s+\w{3,9}\s+\d{1,2},\s+\d{4}\s+at\s+\d{1,2}:\d{2}\s*(AM|PM|am|pm)?\s+.+@[^>]+>\s+wrote:",
            re.MULTILINE,
        ),
        None,
    ),
]

MIN_TEXT_BEFORE_FROM = 30
MIN_HR_OFFSET = 50
MIN_QUOTED_TEXT = 20


def strip_tags(html: str) -> str:
    return TAG_RE.sub("", html)


def extract_original_sender(html: str) -> tuple[str, str] | None:
    match = ORIGINAL_SENDER_RE.search(html or "")
    if match is None:
        return None
    name, email = match.group(1).strip(), match.group(2).strip()
    if not name or not email:
        return None
    return name, email


def unwrap_url(url: str) -> str:
    """Decode a link target and unwrap Outlook safelinks and click-tracking redirects."""
    processed = url
    if "%" in processed:
        processed = unquote(processed)

    if "safelinks.protection.outlook.com" in processed:
        match = URL_PARAM_RE.search(processed)
        if match:
            processed = unquote(match.group(1))

    if "streaklinks.com" in processed or "gourl.es" in processed:
        params = URL_PARAM_RE.findall(processed)
        if params:
            processed = unquote(params[-1])

    return processed.replace("&amp;", "&")


def _rewrite_anchor(match: re.Match[str]) -> str:
    attributes = match.group(1) + match.group(3)
    url = unwrap_url(match.group(2))

    has_target = re.search(r"target\s*=", attributes, re.IGNORECASE) is not None
    target = "" if has_target else ' target="_blank" rel="noopener noreferrer"'

    def _restyle(style_match: re.Match[str]) -> str:
        style = re.sub(r"text-decoration\s*:\s*none\s*;?\s*", "", style_match.group(1), flags=re.IGNORECASE)
        style = style.strip()
        if style and not style.endswith(";"):
            style += ";"
        return f'style="{style}" class="message-link"'

    if STYLE_ATTR_RE.search(attributes):
        attributes = STYLE_ATTR_RE.sub(_restyle, attributes)
    else:
        attributes += ' class="message-link"'

    attributes = " ".join(attributes.split())
    prefix = f"<a {attributes} " if attributes else "<a "
    return f'{prefix}href="{escape(url, quote=True)}"{target}>'


def rewrite_links(html: str) -> str:
    return ANCHOR_RE.sub(_rewrite_anchor, html)


def clean_message_html(html: str | None) -> str:
    content = html or ""
    if "<original-sender>" in content:
        content = ORIGINAL_SENDER_TAG_RE.sub("", content)
    for pattern, replacement, count in _CLEANUP_STEPS:
        content = pattern.sub(replacement, content, count=count)
    content = rewrite_links(content)
    return content.strip()


def find_quote_start(html: str) -> int:
    """Return the offset where quoted history starts in a reply, or -1."""
    earliest = -1
    for pattern, kind in QUOTE_MARKERS:
        match = pattern.search(html)
        if match is None:
            continue
        index = match.start()
        if kind == "hr" and index < MIN_HR_OFFSET:
            continue
        if kind == "from" and len(strip_tags(html[:index]).strip()) < MIN_TEXT_BEFORE_FROM:
            continue
        if earliest == -1 or index < earliest:
            earliest = index
    return earliest


def split_reply(html: str) -> tuple[str, str | None]:
    """Split a user reply into its new text and the quoted history, when there is enough of it."""
    quote_start = find_quote_start(html)
    if quote_start == -1:
        return html, None
    quoted = html[quote_start:]
    if len(strip_tags(quoted).strip()) <= MIN_QUOTED_TEXT:
        return html, None
    return html[:quote_start], quoted


def resolve_sender(raw: Mapping[str, Any], is_initial: bool) -> MessageSender:
    sender = raw.get("sender") or {}
    original = extract_original_sender(raw.get("content") or "")
    if original is not None:
        name, email = original
        return MessageSender(
            name=name,
            email=email,
            type="user",
            is_user_reply=True,
            avatar_url=sender.get("avatar_url"),
        )

    is_agent = sender.get("type") == "agent"
    return MessageSender(
        name=sender.get("name") or ("Agent" if is_agent else "User"),
        email=sender.get("email") or "unknown",
        type="agent" if is_agent else "user",
        is_user_reply=not is_agent and not is_initial,
        avatar_url=sender.get("avatar_url"),
    )


def build_message(raw: Mapping[str, Any], is_initial: bool = False) -> ConversationMessage:
    sender = resolve_sender(raw, is_initial)
    body = clean_message_html(raw.get("content"))

    reply, quoted = body, None
    if sender.is_user_reply and body:
        reply, quoted = split_reply(body)

    return ConversationMessage(
        id=str(raw.get("id", "")),
        created_at=raw.get("created_at"),
        is_private=bool(raw.get("is_private", False)),
        attachments=list(raw.get("attachments") or []),
        sender=sender,
        content=body,
        reply_part=reply,
        quoted_part=quoted,
    )


def build_conversation(
    payload: Mapping[str, Any] | list[Mapping[str, Any]] | None,
) -> list[ConversationMessage]:
    """Process the ``contents`` of a ticket HTML payload; the first message is the initial one.

    Older API versions return the message list itself instead of an object.
    """
    if isinstance(payload, list):
        contents = payload
    else:
        contents = (payload or {}).get("contents") or []
    return [build_message(raw, is_initial=index == 0) for index, raw in enumerate(contents)]
