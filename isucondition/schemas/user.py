from pydantic import BaseModel, ConfigDict, field_validator


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    jia_user_id: str


class InitializeRequest(BaseModel):
    jia_service_url: str

    @field_validator("jia_service_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("jia_service_url must not be empty")
        return v.strip()


class InitializeResponse(BaseModel):
    language: str = "python"
