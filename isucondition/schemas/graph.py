from pydantic import BaseModel, ConfigDict


class ConditionsPercentageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sitting: int
    is_broken: int
    is_dirty: int
    is_overweight: int


class GraphDataPointOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    score: int
    percentage: ConditionsPercentageOut


class GraphOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    start_at: int
    end_at: int
    data: GraphDataPointOut | None = None
    condition_timestamps: list[int]
