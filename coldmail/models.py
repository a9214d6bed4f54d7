from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

CtaType = Literal["direct", "soft"]


class CamelModel(BaseModel):
    # The browser form speaks camelCase; accept snake_case too.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ProspectInfo(CamelModel):
    name: str | None = None
    company: str | None = None
    role: str | None = None


class ProductInfo(CamelModel):
    description: str | None = None
    pain_point: str | None = None
    solution: str | None = None


class Strategy(CamelModel):
    cta_type: CtaType = "direct"


class GenerateEmailRequest(CamelModel):
    prospect: ProspectInfo | None = None
    product: ProductInfo | None = None
    strategy: Strategy = Field(default_factory=Strategy)
    # Prior improvement notes; when present only variant 2 is rewritten.
    improvements: str | None = None
    variant1: str | None = None
    # Deprecated: prompt assembled by the client.
    prompt: str | None = None

    @property
    def is_regeneration(self) -> bool:
        return bool(self.improvements and self.improvements.strip())

    @property
    def is_legacy_prompt(self) -> bool:
        return self.prospect is None and self.product is None and self.prompt is not None


class EmailDraftSet(CamelModel):
    improvements: str | None = None
    variant1: str
    variant2: str


class AnalyzeEmailRequest(CamelModel):
    email_content: str | None = None


class EmailMetrics(CamelModel):
    readability: int = 0
    personalization_score: int = 0
    value_proposition_clarity: int = 0
    cta_effectiveness: int = 0
    estimated_response_rate: float = 0.0
    key_strengths: list[str] = Field(default_factory=list)
    improvement_suggestions: list[str] = Field(default_factory=list)


class AnalyzeEmailResponse(CamelModel):
    metrics: EmailMetrics


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    environment: str
