"""Schemas for the PIN access gate."""

from __future__ import annotations

from pydantic import BaseModel, Field


class PinRequest(BaseModel):
    pin: str = Field(min_length=1, max_length=16)


class PinChangeRequest(BaseModel):
    current_pin: str = Field(min_length=1, max_length=16)
    new_pin: str = Field(min_length=1, max_length=16)
