"""Credit pricing and enforcement for generation requests."""

import logging
import math

from app.config import settings
from app.errors import ConfigurationError, InsufficientCreditsError
from app.ledger import Ledger

logger = logging.getLogger("novi.credits")

# --- Pricing tables ---

CREDIT_COSTS: dict[str, int] = {
    "Text Generation": 10,
    "Image Creation": 50,
    "Video Creation": 50,
    "Voice Synthesis": 50,
}

DEFAULT_CREDIT_COST = 50

# Rough characters-per-token ratio used for the upstream cost estimate
CHARS_PER_TOKEN = 4


def credit_costs() -> dict[str, int]:
    """The per-category price table, from config when set."""
    costs = settings.get_json("CREDIT_COSTS")
    if costs is None:
        return CREDIT_COSTS
    if not isinstance(costs, dict):
        raise ConfigurationError("Setting CREDIT_COSTS must be a JSON object of category to credits")
    return costs


def price_of(category: str) -> int:
    """Credit price for one generation in *category*; falls back to the default."""
    costs = credit_costs()
    default = settings.get_int("DEFAULT_CREDIT_COST", DEFAULT_CREDIT_COST)
    return int(costs.get(category, default))


def estimate_cost(prompt: str, price_per_unit: float) -> float:
    estimated_tokens = math.ceil(len(prompt) / CHARS_PER_TOKEN)
    return estimated_tokens * price_per_unit


class CreditPolicy:
    """Checks before the upstream call, debits after it succeeds.

    Two concurrent requests from one account may both pass ``authorize``
    before either settles; ``settle`` then refuses whichever one would take
    the balance below zero.
    """

    def __init__(self, ledger: Ledger) -> None:
        self.ledger = ledger

    def authorize(self, account_id: str, category: str) -> int:
        cost = price_of(category)
        account = self.ledger.require(account_id)
        if account.credits < cost:
            raise InsufficientCreditsError(required=cost, available=account.credits)
        return cost

    def settle(self, account_id: str, cost: int) -> int:
        account = self.ledger.debit(account_id, cost)
        logger.info("Debited %d credits from %s, balance %d", cost, account_id, account.credits)
        return account.credits
