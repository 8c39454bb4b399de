"""Text wire format of the API key handshake.

Probe (posted by the bot)::

    tipup-api-key                 static sentinel
    tipup-api-key:<subject-id>    sentinel carrying the owner's user id

Reply (posted by the Tipup bot)::

    tipup-api-key:<payload>

When the Tipup bot echoes the probe subject, ``<payload>`` starts with
``<subject-id>:``. The whole reply text is the credential handed back to the
caller.

The remote side has no slot for a version marker, so ``PROTOCOL_VERSION`` only
identifies this codec revision.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

PROTOCOL_VERSION = 1

TAG_NAMESPACE = "tipup"
API_KEY_PURPOSE = "api-key"
SUBJECT_SEPARATOR = ":"


@dataclass(frozen=True)
class CorrelationTag:
    """``<namespace>-<purpose>[:<subject-id>]`` marker embedded in a probe."""

    namespace: str
    purpose: str
    subject_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.namespace or "-" in self.namespace:
            raise ValueError(f"Invalid tag namespace: {self.namespace!r}")
        if not self.purpose or SUBJECT_SEPARATOR in self.purpose:
            raise ValueError(f"Invalid tag purpose: {self.purpose!r}")
        if self.subject_id is not None and (
            not self.subject_id or SUBJECT_SEPARATOR in self.subject_id
        ):
            raise ValueError(f"Invalid tag subject: {self.subject_id!r}")

    @property
    def sentinel(self) -> str:
        return f"{self.namespace}-{self.purpose}"

    @property
    def reply_prefix(self) -> str:
        return f"{self.sentinel}{SUBJECT_SEPARATOR}"

    def encode(self) -> str:
        if self.subject_id is None:
            return self.sentinel
        return f"{self.reply_prefix}{self.subject_id}"

    @classmethod
    def decode(cls, content: str) -> "CorrelationTag":
        """Parse probe text back into a tag.

        Raises:
            ValueError: If ``content`` is not a well-formed tag.
        """
        sentinel, sep, subject = content.strip().partition(SUBJECT_SEPARATOR)
        namespace, dash, purpose = sentinel.partition("-")
        if not dash:
            raise ValueError(f"Not a correlation tag: {content!r}")
        return cls(
            namespace=namespace,
            purpose=purpose,
            subject_id=subject if sep else None,
        )


def api_key_tag(subject_id: Optional[str] = None) -> CorrelationTag:
    return CorrelationTag(TAG_NAMESPACE, API_KEY_PURPOSE, subject_id)


def encode_probe(tag: CorrelationTag) -> str:
    return tag.encode()


def reply_echoes_subject(content: str, tag: CorrelationTag) -> bool:
    """True when the reply payload starts with the probe's subject id."""
    if tag.subject_id is None or not content.startswith(tag.reply_prefix):
        return False
    payload = content[len(tag.reply_prefix) :]
    echoed, sep, _ = payload.partition(SUBJECT_SEPARATOR)
    return bool(sep) and echoed == tag.subject_id


def is_reply(content: str, tag: CorrelationTag, *, require_echo: bool = False) -> bool:
    """Decide whether ``content`` is the Tipup bot's answer to ``tag``.

    A static-sentinel probe has no subject to echo, so ``require_echo`` only
    narrows matching for tags that carry one.
    """
    if not content.startswith(tag.reply_prefix):
        return False
    if require_echo and tag.subject_id is not None:
        return reply_echoes_subject(content, tag)
    return True


def decode_reply(content: str, tag: CorrelationTag) -> str:
    """Extract the credential from a matching reply.

    Raises:
        ValueError: If ``content`` does not carry the reply prefix.
    """
    if not content.startswith(tag.reply_prefix):
        raise ValueError("Reply does not carry the API key prefix")
    return content
