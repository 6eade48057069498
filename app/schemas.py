from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class GenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    category: str = ""
    model: str = ""
    prompt: str = ""
    additional_params: dict[str, Any] | None = Field(default=None, alias="additionalParams")


class EmailRequest(BaseModel):
    email: str = ""


class WaitlistRequest(BaseModel):
    email: str = ""
    name: str | None = None


class GenerateResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, protected_namespaces=())

    success: bool = True
    data: Any = None
    cost: float
    request_id: str | None = None
    model: str
    category: str
    credits_used: int
    remaining_credits: int | None = None
    warning: str | None = None


class ModelSummary(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    logo: str
    pros: list[str]
    cons: list[str]
    credits: int
    price_per_token: float
    price: str
    description: str


class ToolCategory(BaseModel):
    category: str
    models: list[ModelSummary]
