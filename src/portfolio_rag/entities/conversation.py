from enum import StrEnum

from pydantic import BaseModel


class MessageRole(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class Message(BaseModel):
    role: MessageRole
    content: str

    def to_openai(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}
