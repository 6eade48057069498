"""Pre-launch waitlist signups."""

import logging
import threading
from dataclasses import asdict, dataclass

from app.storage import RecordStore, open_store
from app.util import normalize_email, utc_now_iso, waitlist_entry_id

logger = logging.getLogger("novi.waitlist")


@dataclass
class WaitlistEntry:
    id: str
    email: str
    joined_at: str
    email_sent: bool = False
    name: str | None = None
    ip_address: str | None = None

    @classmethod
    def from_record(cls, record: dict) -> "WaitlistEntry":
        return cls(
            id=record["id"],
            email=record["email"],
            joined_at=record.get("joined_at") or record.get("joinedAt", ""),
            email_sent=_email_sent(record),
            name=record.get("name"),
            ip_address=record.get("ip_address") or record.get("ipAddress"),
        )


def _email_sent(record: dict) -> bool:
    if "email_sent" in record:
        return bool(record["email_sent"])
    return bool(record.get("emailSent"))


class Waitlist:
    def __init__(self, store: RecordStore) -> None:
        self._store = store
        self._lock = threading.Lock()

    def find(self, email: str) -> WaitlistEntry | None:
        wanted = normalize_email(email)
        for record in self._store.list_all():
            if normalize_email(record.get("email", "")) == wanted:
                return WaitlistEntry.from_record(record)
        return None

    def add(self, email: str, name: str | None = None, ip_address: str | None = None) -> tuple[WaitlistEntry, bool]:
        """Add *email* once; a repeat signup returns the existing entry and False."""
        with self._lock:
            existing = self.find(email)
            if existing:
                return existing, False
            entry = WaitlistEntry(
                id=waitlist_entry_id(),
                email=normalize_email(email),
                joined_at=utc_now_iso(),
                name=name,
                ip_address=ip_address,
            )
            self._store.upsert(asdict(entry))
        logger.info("Added to waitlist: %s (ID: %s)", entry.email, entry.id)
        return entry, True

    def mark_email_sent(self, email: str, sent: bool = True) -> bool:
        with self._lock:
            entry = self.find(email)
            if entry is None:
                logger.error("Waitlist entry not found for %s", email)
                return False
            entry.email_sent = sent
            self._store.update(entry.id, {"email_sent": sent})
        return True

    def stats(self) -> dict[str, int]:
        entries = self._store.list_all()
        sent = sum(1 for e in entries if _email_sent(e))
        return {"total": len(entries), "emailsSent": sent, "emailsPending": len(entries) - sent}


_waitlist: Waitlist | None = None


def get_waitlist() -> Waitlist:
    global _waitlist
    if _waitlist is None:
        _waitlist = Waitlist(open_store("waitlist"))
    return _waitlist
