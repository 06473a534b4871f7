from pydantic import BaseModel, ConfigDict, model_serializer

from isucondition.schemas.condition import ConditionOut


class IsuOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    jia_isu_uuid: str
    name: str
    character: str | None = None


class IsuListItem(IsuOut):
    latest_isu_condition: ConditionOut | None = None

    @model_serializer(mode="wrap")
    def omit_missing_condition(self, handler):
        data = handler(self)
        if self.latest_isu_condition is None:
            data.pop("latest_isu_condition", None)
        return data
