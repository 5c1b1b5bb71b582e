from pydantic import BaseModel, Field


class InviteToStageIn(BaseModel):
    identity: str = Field(min_length=1, description="Participant to invite on stage")


class RemoveFromStageIn(BaseModel):
    identity: str | None = Field(
        default=None, description="Participant to remove; defaults to the caller"
    )
