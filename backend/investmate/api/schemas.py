"""Pydantic schemas for API request/response."""

from pydantic import BaseModel, ConfigDict, Field

from investmate.services.derivation import FieldId


class HoldingCreateRequest(BaseModel):
    symbol: str = Field(min_length=1, max_length=20)
    name: str | None = None
    average_price: float = Field(gt=0)
    quantity: float = Field(gt=0)


class HoldingUpdateRequest(BaseModel):
    name: str | None = None
    average_price: float | None = Field(default=None, gt=0)
    quantity: float | None = Field(default=None, gt=0)


class HoldingResponse(BaseModel):
    symbol: str
    name: str | None = None
    average_price: float
    quantity: float
    total_price: float
    created_at: str
    updated_at: str


class ProfitRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    average_price: float
    quantity: float
    current_price: float


class ProfitResponse(BaseModel):
    amount: float
    percentage: float
    amount_text: str
    percentage_text: str


class SessionCreateRequest(BaseModel):
    symbol: str | None = None
    read_only: bool = False


class FieldChangeRequest(BaseModel):
    field_id: FieldId
    raw_text: str = ""


class FieldUpdateResponse(BaseModel):
    field_id: FieldId
    display_text: str


class SessionResponse(BaseModel):
    session_id: str
    symbol: str | None = None
    read_only: bool
    state: str
    fields: dict[str, str]


class FieldChangeResponse(BaseModel):
    session_id: str
    state: str
    updates: list[FieldUpdateResponse]
    fields: dict[str, str]


class AdditionalPurchaseRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    current_average: float
    current_quantity: float
    purchase_price: float
    purchase_quantity: float


class AdditionalPurchaseResponse(BaseModel):
    average_price: float
    quantity: float
    total_price: float
    average_change: float
    average_change_pct: float
    display: dict[str, str]
