import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict
from pydantic import Field as PydanticField


class Entity(BaseModel):
    """Base entity for rows owned by the hosted backend.

    Identifiers and timestamps are assigned by the backend; the defaults only
    apply to rows created locally (the in-memory backend and tests).
    """

    model_config = ConfigDict(extra="ignore")

    id: str = PydanticField(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique identifier for the entity",
    )

    created_at: datetime = PydanticField(default_factory=lambda: datetime.now(UTC))
