import math

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr, field_validator

from isucondition.models.enums import ConditionLevel


class ConditionIn(BaseModel):
    is_sitting: StrictBool
    condition: StrictStr
    message: StrictStr
    timestamp: StrictInt | StrictFloat

    @field_validator("timestamp")
    @classmethod
    def truncate_timestamp(cls, value: int | float) -> int:
        # any JSON number is accepted; fractions of a second are dropped
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError("timestamp must be finite")
        return int(value)


class ConditionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    jia_isu_uuid: str
    isu_name: str
    timestamp: int
    is_sitting: bool
    condition: str
    condition_level: ConditionLevel
    message: str


class TrendConditionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    isu_id: int
    timestamp: int


class TrendOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    character: str
    info: list[TrendConditionOut] = Field(default_factory=list)
    warning: list[TrendConditionOut] = Field(default_factory=list)
    critical: list[TrendConditionOut] = Field(default_factory=list)
