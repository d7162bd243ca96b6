# services/feedback.py
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class FeedbackMessage:
    level: str  # 'success' | 'error'
    text: str


@dataclass
class Feedback:
    """
    User-facing messages produced while serving one workspace.
    Each operation adds at most one message.
    """
    messages: List[FeedbackMessage] = field(default_factory=list)

    def success(self, text: str) -> None:
        self.messages.append(FeedbackMessage("success", text))

    def error(self, text: str) -> None:
        self.messages.append(FeedbackMessage("error", text))

    @property
    def errors(self) -> List[str]:
        return [m.text for m in self.messages if m.level == "error"]

    @property
    def last_error(self) -> Optional[str]:
        errors = self.errors
        return errors[-1] if errors else None

    def clear(self) -> None:
        self.messages.clear()
