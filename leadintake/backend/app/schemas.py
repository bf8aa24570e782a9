from pydantic import BaseModel
from datetime import datetime
from typing import Any, Literal

RunStatusLiteral = Literal["pending", "completed", "failed", "error"]


class WebhookAck(BaseModel):
    received: bool = True


class ExtractionRunOut(BaseModel):
    run_id: str
    campaign_id: str
    actor_key: str
    status: RunStatusLiteral

    started_at: datetime
    finished_at: datetime | None = None

    results: dict[str, Any] | None = None
    error_message: str | None = None


class SourceMappingOut(BaseModel):
    fragment: str
    source_type: str
    source: str
