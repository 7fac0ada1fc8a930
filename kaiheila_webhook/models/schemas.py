from typing import Any

from pydantic import BaseModel


class ChallengeResponse(BaseModel):
    challenge: Any = None


class HealthResponse(BaseModel):
    status: str
    service: str
    source_type: str
    encrypted: bool
    verify_token: bool
    webhook_path: str
    tracked_sequence_numbers: int
