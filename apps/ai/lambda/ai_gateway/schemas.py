"""Pydantic schemas for the AI gateway."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .constants import ApiStyle, MessageRole, Provider


class ChatMessage(BaseModel):
    role: MessageRole
    content: str


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    provider: Provider
    credential: str = Field(
        min_length=1,
        repr=False,
        validation_alias=AliasChoices("credential", "apiKey"),
    )
    model: str = Field(min_length=1)
    messages: list[ChatMessage] = Field(min_length=1)


class Usage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt_tokens: int | None = Field(default=None, alias="promptTokens")
    completion_tokens: int | None = Field(default=None, alias="completionTokens")
    total_tokens: int | None = Field(default=None, alias="totalTokens")


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str = Field(min_length=1)
    provider: Provider
    model: str
    usage: Usage | None = None

    def to_body(self) -> dict:
        """Serialize for the HTTP body, omitting usage when the vendor reported none."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ProviderMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Provider
    name: str
    default_model: str = Field(alias="defaultModel")
    api_style: ApiStyle = Field(alias="apiStyle")
