"""Message fingerprints for recognizing the same message across folders.

UIDs are only stable within one folder, so a copied message is recognized
in the target by its Message-ID, or, lacking one, by a composite of sender,
timestamp and subject. The composite is weaker but verification only has to
rule out absence, not prove uniqueness.
"""

from datetime import datetime, timezone

from icloud_mail_mcp.email.models import MessageMeta
from icloud_mail_mcp.safemove.models import Fingerprint


def _normalize_message_id(message_id: str | None) -> str | None:
    if not message_id:
        return None
    normalized = message_id.strip().strip("<>").strip()
    return normalized or None


def _normalize_date(date: datetime | None) -> str | None:
    if date is None:
        return None
    if date.tzinfo is not None:
        date = date.astimezone(timezone.utc)
    return date.strftime("%Y-%m-%dT%H:%M:%SZ")


def fingerprint(meta: MessageMeta) -> Fingerprint:
    """Derive a fingerprint from envelope metadata. Pure and deterministic."""
    return Fingerprint(
        uid=meta.uid,
        message_id=_normalize_message_id(meta.message_id),
        sender=meta.sender.strip().lower(),
        date=_normalize_date(meta.date),
        subject=" ".join(meta.subject.split()),
    )


def identity_key(fp: Fingerprint) -> str:
    """Comparison key: Message-ID when present, else sender|date|subject."""
    if fp.message_id:
        return f"id:{fp.message_id}"
    return f"composite:{fp.sender}|{fp.date or ''}|{fp.subject}"
