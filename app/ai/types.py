from dataclasses import dataclass
from typing import Literal, Protocol, Sequence


Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


class TextGenerator(Protocol):
    @property
    def model(self) -> str: ...

    async def generate(self, messages: Sequence[ChatMessage]) -> str: ...
