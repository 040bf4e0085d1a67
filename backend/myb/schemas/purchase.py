from pydantic import BaseModel, ConfigDict, Field


class PurchaseCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user_id: str = Field(..., min_length=1)
    book_id: str = Field(..., min_length=1)
    amount: float = Field(0.0, ge=0)
    payment_method: str = "credit_card"
