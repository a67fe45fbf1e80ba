from typing import Literal

from pydantic import BaseModel


class ChatTurn(BaseModel):
    role: Literal["user", "model"]
    text: str


class ChatRequest(BaseModel):
    message: str | None = None
    history: list[ChatTurn] = []


class ChatReply(BaseModel):
    reply: str
