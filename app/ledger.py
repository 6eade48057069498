"""Account ledger: identity, profile fields and credit balance."""

import logging
import threading
import uuid
from dataclasses import asdict, dataclass

from app.config import settings
from app.errors import AccountNotFoundError, InsufficientCreditsError
from app.storage import RecordStore, open_store
from app.util import normalize_email, utc_now_iso

logger = logging.getLogger("novi.ledger")

INITIAL_CREDITS = 5000


@dataclass
class Account:
    id: str
    email: str
    credits: int
    created_at: str
    last_login: str

    @classmethod
    def from_record(cls, record: dict) -> "Account":
        return cls(
            id=record["id"],
            email=record["email"],
            credits=int(record.get("credits", 0)),
            created_at=record.get("created_at") or record.get("createdAt", ""),
            last_login=record.get("last_login") or record.get("lastLogin", ""),
        )

    def to_public(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "credits": self.credits,
            "createdAt": self.created_at,
            "lastLogin": self.last_login,
        }


class Ledger:
    """Balance mutations are read-modify-write under one lock.

    Reads at settlement time always go back to the store, never to a copy
    taken before an upstream call.
    """

    def __init__(self, store: RecordStore, initial_credits: int | None = None) -> None:
        self._store = store
        self._initial_credits = initial_credits
        self._lock = threading.Lock()

    @property
    def initial_credits(self) -> int:
        if self._initial_credits is not None:
            return self._initial_credits
        return settings.get_int("INITIAL_CREDITS", INITIAL_CREDITS)

    def get(self, account_id: str) -> Account | None:
        record = self._store.get(account_id)
        return Account.from_record(record) if record else None

    def require(self, account_id: str) -> Account:
        account = self.get(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    def find_by_email(self, email: str) -> Account | None:
        wanted = normalize_email(email)
        for record in self._store.list_all():
            if normalize_email(record.get("email", "")) == wanted:
                return Account.from_record(record)
        return None

    def list_accounts(self) -> list[Account]:
        return [Account.from_record(r) for r in self._store.list_all()]

    def register(self, email: str) -> tuple[Account, bool]:
        """Return the account for *email*, creating it on first sight.

        A repeat call only refreshes ``last_login``.  The boolean is True when
        the account was created.
        """
        with self._lock:
            now = utc_now_iso()
            existing = self.find_by_email(email)
            if existing:
                existing.last_login = now
                self._store.update(existing.id, {"last_login": now})
                return existing, False

            account = Account(
                id=str(uuid.uuid4()),
                email=normalize_email(email),
                credits=self.initial_credits,
                created_at=now,
                last_login=now,
            )
            self._store.upsert(asdict(account))
            logger.info("Created account %s with %d credits", account.id, account.credits)
            return account, True

    def debit(self, account_id: str, amount: int) -> Account:
        """Subtract *amount*; refuses instead of going below zero."""
        with self._lock:
            account = self.require(account_id)
            if account.credits < amount:
                raise InsufficientCreditsError(required=amount, available=account.credits)
            account.credits -= amount
            self._store.update(account.id, {"credits": account.credits})
            return account

    def adjust(self, account_id: str, amount: int) -> Account:
        """Add (or subtract) credits, flooring the balance at zero."""
        with self._lock:
            account = self.require(account_id)
            account.credits = max(0, account.credits + amount)
            self._store.update(account.id, {"credits": account.credits})
            return account


_ledger: Ledger | None = None


def get_ledger() -> Ledger:
    """Process-wide ledger, built from config on first use."""
    global _ledger
    if _ledger is None:
        _ledger = Ledger(open_store("users"))
    return _ledger
