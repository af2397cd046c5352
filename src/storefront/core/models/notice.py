"""Notification shown to the user after an action."""

from typing import Literal

from pydantic import BaseModel, Field


class Notice(BaseModel):
    level: Literal["success", "error"]
    message: str = Field(description="Text shown to the user")

    @classmethod
    def success(cls, message: str) -> "Notice":
        return cls(level="success", message=message)

    @classmethod
    def error(cls, message: str) -> "Notice":
        return cls(level="error", message=message)
