from pydantic import BaseModel, Field, model_validator


class ParameterPoint(BaseModel):
    """Single generation parameter pair (one grid point)."""
    temperature: float = Field(ge=0, le=2)
    top_p: float = Field(ge=0, le=1)

    class Config:
        frozen = True


class GenerateRequest(BaseModel):
    """Request body: a prompt plus the parameter ranges to sweep."""
    prompt: str = Field(min_length=1, max_length=2000)
    temperature_min: float = Field(alias="temperatureMin", ge=0, le=2)
    temperature_max: float = Field(alias="temperatureMax", ge=0, le=2)
    top_p_min: float = Field(alias="topPMin", ge=0, le=1)
    top_p_max: float = Field(alias="topPMax", ge=0, le=1)
    variations: int = Field(ge=1, le=10)

    class Config:
        populate_by_name = True

    @model_validator(mode="after")
    def _check_ranges(self):
        if self.temperature_min > self.temperature_max:
            raise ValueError("Temperature min cannot be greater than max")
        if self.top_p_min > self.top_p_max:
            raise ValueError("Top P min cannot be greater than max")
        return self
