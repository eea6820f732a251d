"""Authenticated caller identity, passed explicitly into every core operation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Principal:
    user_id: str
    username: str
