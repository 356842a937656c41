"""Transient, dismissable user notices (toasts)."""

from typing import Optional

from pydantic import BaseModel


class Notice(BaseModel):
    title: str
    description: Optional[str] = None
    variant: str = "default"  # default | destructive

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"

    @classmethod
    def success(cls, description: str) -> "Notice":
        return cls(title="Success", description=description)

    @classmethod
    def error(cls, description: str, title: str = "Error") -> "Notice":
        return cls(title=title, description=description, variant="destructive")
