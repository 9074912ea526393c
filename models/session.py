from dataclasses import dataclass

from config import MESSAGE_PAGE_SIZE, LOAD_MORE_INCREMENT


@dataclass(frozen=True)
class Session:
    """The user logged in for the lifetime of the authenticated menu."""

    login: str


@dataclass
class ChatState:
    chat_id: int
    limit: int = MESSAGE_PAGE_SIZE
    loaded_more: bool = False

    def load_more(self) -> int:
        """Show LOAD_MORE_INCREMENT more messages on the next render."""
        self.limit += LOAD_MORE_INCREMENT
        self.loaded_more = True
        return self.limit
