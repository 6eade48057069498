"""Unit tests for app.credits module."""

from unittest.mock import patch

import pytest

from app.config import settings
from app.credits import CREDIT_COSTS, CreditPolicy, estimate_cost, price_of
from app.errors import AccountNotFoundError, ConfigurationError, InsufficientCreditsError
from app.ledger import Ledger
from app.storage import MemoryStore


@pytest.fixture
def policy():
    return CreditPolicy(Ledger(MemoryStore(), initial_credits=5000))


# --- Pricing ---

class TestPriceOf:
    @pytest.mark.parametrize("category, credits", list(CREDIT_COSTS.items()))
    def test_table(self, category, credits):
        assert price_of(category) == credits

    def test_text_is_cheapest(self):
        assert price_of("Text Generation") == 10

    def test_unknown_category_uses_default(self):
        assert price_of("Music") == 50

    def test_overrides_from_settings(self):
        settings.CREDIT_COSTS = {"Text Generation": 3}
        settings.DEFAULT_CREDIT_COST = 7
        assert price_of("Text Generation") == 3
        assert price_of("Image Creation") == 7

    def test_malformed_env_is_configuration_error(self):
        with patch.dict("os.environ", {"CREDIT_COSTS": "{\"Text Generation\": 3"}):
            with pytest.raises(ConfigurationError, match="not valid JSON"):
                price_of("Text Generation")

    def test_non_object_is_configuration_error(self):
        settings.CREDIT_COSTS = [1, 2]
        with pytest.raises(ConfigurationError, match="JSON object"):
            price_of("Text Generation")


class TestEstimateCost:
    def test_rounds_tokens_up(self):
        assert estimate_cost("abcde", 0.5) == 1.0

    def test_empty_prompt(self):
        assert estimate_cost("", 0.5) == 0

    def test_monotonic_in_length(self):
        costs = [estimate_cost("x" * n, 0.0001) for n in range(0, 40)]
        assert costs == sorted(costs)


# --- CreditPolicy ---

class TestCreditPolicy:
    def test_authorize_returns_price(self, policy):
        account, _ = policy.ledger.register("a@example.com")
        assert policy.authorize(account.id, "Image Creation") == 50

    def test_authorize_does_not_debit(self, policy):
        account, _ = policy.ledger.register("a@example.com")
        policy.authorize(account.id, "Video Creation")
        assert policy.ledger.get(account.id).credits == 5000

    def test_authorize_exact_balance(self, policy):
        account, _ = policy.ledger.register("a@example.com")
        policy.ledger.adjust(account.id, -4990)
        assert policy.authorize(account.id, "Text Generation") == 10

    def test_authorize_insufficient(self, policy):
        account, _ = policy.ledger.register("a@example.com")
        policy.ledger.adjust(account.id, -4995)
        with pytest.raises(InsufficientCreditsError) as exc_info:
            policy.authorize(account.id, "Image Creation")
        assert exc_info.value.required == 50
        assert exc_info.value.available == 5
        assert exc_info.value.message == "Insufficient credits. Required: 50, Available: 5"

    def test_authorize_unknown_account(self, policy):
        with pytest.raises(AccountNotFoundError):
            policy.authorize("missing", "Text Generation")

    def test_settle_debits(self, policy):
        account, _ = policy.ledger.register("a@example.com")
        assert policy.settle(account.id, 10) == 4990
        assert policy.ledger.get(account.id).credits == 4990

    def test_settle_never_goes_negative(self, policy):
        account, _ = policy.ledger.register("a@example.com")
        cost = policy.authorize(account.id, "Text Generation")
        policy.ledger.adjust(account.id, -4995)
        with pytest.raises(InsufficientCreditsError):
            policy.settle(account.id, cost)
        assert policy.ledger.get(account.id).credits == 5
