from pydantic import BaseModel, ConfigDict, Field


class PaymentStatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    account_type: str = Field(alias="accountType")


class ClientSecretResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    client_secret: str = Field(alias="clientSecret")


class CreditCardResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    has_credit_card: bool = Field(alias="hasCreditCard")
