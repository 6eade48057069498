"""Core handler functions, free of FastAPI types. Used by the REST routes.

``handle_generate`` is the metered pipeline: resolve the model, check the
balance, run the generation, then debit.  Nothing is debited unless the
generation succeeded.
"""

import logging
from typing import Any

from app import catalog, gateway, mailer
from app.credits import CreditPolicy, price_of
from app.errors import GatewayError, NotFoundError, PersistenceError, UpstreamError, ValidationError
from app.ledger import Account, Ledger
from app.schemas import GenerateResponse, ModelSummary, ToolCategory
from app.session import SessionTokens
from app.util import is_valid_email
from app.waitlist import Waitlist

logger = logging.getLogger("novi.handlers")


def _model_summaries(category: str) -> list[ModelSummary]:
    credits = price_of(category)
    return [
        ModelSummary(
            name=m.name,
            logo=m.logo,
            pros=list(m.pros),
            cons=list(m.cons),
            credits=credits,
            price_per_token=m.price_per_unit,
            price=f"${m.price_per_unit:.4f}",
            description=m.description,
        )
        for m in catalog.list_models(category)
    ]


async def handle_tools() -> dict:
    tools = [
        ToolCategory(category=category, models=_model_summaries(category)).model_dump(by_alias=True)
        for category in catalog.list_categories()
    ]
    return {"success": True, "data": tools}


async def handle_tools_category(category: str) -> dict:
    models = _model_summaries(category)
    if not models:
        raise NotFoundError(f'Category "{category}" not found')
    return {
        "success": True,
        "data": ToolCategory(category=category, models=models).model_dump(by_alias=True),
    }


def _validated_email(email: Any) -> str:
    if not isinstance(email, str) or not email.strip():
        raise ValidationError("Email is required")
    if not is_valid_email(email):
        raise ValidationError("Invalid email format")
    return email.strip()


async def handle_login(email: Any, ledger: Ledger, tokens: SessionTokens) -> dict:
    """Register and login are the same idempotent upsert."""
    account, _ = ledger.register(_validated_email(email))
    token = tokens.issue(account.id, account.email)
    user = account.to_public()
    user.pop("lastLogin")
    return {"success": True, "data": {"user": user, "token": token}}


async def handle_profile(account: Account, ledger: Ledger) -> dict:
    # the dependency resolved the account; re-read for the current balance
    current = ledger.require(account.id)
    return {"success": True, "data": {"user": current.to_public()}}


async def handle_logout(account: Account) -> dict:
    logger.info("Logout acknowledged for %s", account.id)
    return {"success": True, "message": "Logged out successfully"}


def _current_balance(ledger: Ledger, account_id: str) -> int | None:
    try:
        account = ledger.get(account_id)
    except PersistenceError:
        return None
    return account.credits if account else None


async def handle_generate(
    account: Account,
    category: str,
    model: str,
    prompt: str,
    additional_params: dict[str, Any] | None,
    ledger: Ledger,
) -> dict:
    if not category or not model or not prompt or not prompt.strip():
        raise ValidationError("Missing required fields: category, model, and prompt are required")

    descriptor = catalog.resolve(category, model)

    policy = CreditPolicy(ledger)
    credit_cost = policy.authorize(account.id, category)

    result = await gateway.generate(descriptor, prompt, additional_params or {})
    if not result.success:
        raise UpstreamError(result.error or "Generation failed", kind=result.error_kind or "generic")

    warning = None
    try:
        remaining = policy.settle(account.id, credit_cost)
        credits_used = credit_cost
    except GatewayError as exc:
        # the upstream work is done and paid for; return it and flag the anomaly
        logger.warning(
            "Settlement of %d credits for %s failed after request %s: %s",
            credit_cost, account.id, result.request_id, exc,
        )
        credits_used = 0
        remaining = _current_balance(ledger, account.id)
        warning = f"Generation succeeded but credits could not be deducted: {exc.message}"

    response = GenerateResponse(
        data=result.data,
        cost=result.cost,
        request_id=result.request_id,
        model=descriptor.name,
        category=descriptor.category,
        credits_used=credits_used,
        remaining_credits=remaining,
        warning=warning,
    ).model_dump(by_alias=True)
    if warning is None:
        response.pop("warning")
    return response


async def handle_waitlist_join(email: Any, name: str | None, ip_address: str | None, waitlist: Waitlist) -> dict:
    entry, is_new = waitlist.add(_validated_email(email), name=name, ip_address=ip_address)
    if not is_new:
        return {"success": True, "message": "Email already on waitlist", "isNew": False, "emailSent": entry.email_sent}

    email_sent = await mailer.send_waitlist_confirmation(entry.email, entry.name)
    if email_sent:
        waitlist.mark_email_sent(entry.email)
    return {"success": True, "message": "Successfully added to waitlist", "isNew": True, "emailSent": email_sent}


async def handle_waitlist_stats(waitlist: Waitlist) -> dict:
    return {"success": True, "data": waitlist.stats()}
