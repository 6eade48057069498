from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError as PydanticValidationError

from app.errors import ValidationError
from app.handlers import (
    handle_generate,
    handle_login,
    handle_logout,
    handle_profile,
    handle_tools,
    handle_tools_category,
    handle_waitlist_join,
    handle_waitlist_stats,
)
from app.ledger import Account, Ledger, get_ledger
from app.schemas import EmailRequest, GenerateRequest, WaitlistRequest
from app.session import SessionTokens, current_account, get_tokens
from app.waitlist import Waitlist, get_waitlist

router = APIRouter(prefix="/api")


@router.get("/tools")
async def get_tools() -> dict:
    return await handle_tools()


@router.get("/tools/{category}")
async def get_tools_for_category(category: str) -> dict:
    return await handle_tools_category(category)


@router.post("/generate")
async def generate(
    request: Request,
    account: Account = Depends(current_account),
    ledger: Ledger = Depends(get_ledger),
) -> dict:
    # body is read after the token dependency, so auth failures never depend on it
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Request body must be valid JSON")
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        payload = GenerateRequest.model_validate(body)
    except PydanticValidationError:
        raise ValidationError("Invalid request body: category, model and prompt must be strings")
    return await handle_generate(
        account=account,
        category=payload.category,
        model=payload.model,
        prompt=payload.prompt,
        additional_params=payload.additional_params,
        ledger=ledger,
    )


@router.post("/auth/register")
async def register(
    payload: EmailRequest,
    ledger: Ledger = Depends(get_ledger),
    tokens: SessionTokens = Depends(get_tokens),
) -> dict:
    return await handle_login(payload.email, ledger, tokens)


@router.post("/auth/login")
async def login(
    payload: EmailRequest,
    ledger: Ledger = Depends(get_ledger),
    tokens: SessionTokens = Depends(get_tokens),
) -> dict:
    return await handle_login(payload.email, ledger, tokens)


@router.get("/auth/me")
async def me(account: Account = Depends(current_account), ledger: Ledger = Depends(get_ledger)) -> dict:
    return await handle_profile(account, ledger)


@router.get("/user/profile")
async def profile(account: Account = Depends(current_account), ledger: Ledger = Depends(get_ledger)) -> dict:
    return await handle_profile(account, ledger)


@router.post("/auth/logout")
async def logout(account: Account = Depends(current_account)) -> dict:
    return await handle_logout(account)


@router.post("/waitlist")
async def join_waitlist(
    payload: WaitlistRequest,
    request: Request,
    waitlist: Waitlist = Depends(get_waitlist),
) -> dict:
    ip_address = request.client.host if request.client else None
    return await handle_waitlist_join(payload.email, payload.name, ip_address, waitlist)


@router.get("/waitlist/stats")
async def waitlist_stats(waitlist: Waitlist = Depends(get_waitlist)) -> dict:
    return await handle_waitlist_stats(waitlist)
