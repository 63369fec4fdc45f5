"""Plan schemas."""

from pydantic import BaseModel, ConfigDict


class Plan(BaseModel):
    """Plan reference data."""

    model_config = ConfigDict(from_attributes=True)

    code: str
    name: str
    hours_monthly: int
