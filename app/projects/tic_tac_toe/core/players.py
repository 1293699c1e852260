from dataclasses import dataclass

from app.projects.tic_tac_toe.core.board import Mark
from app.projects.tic_tac_toe.core.constants import MAX_NAME_LENGTH


@dataclass
class Player:
    """A named player with a fixed mark and a win count kept across rounds."""

    name: str
    mark: Mark
    score: int = 0

    def record_win(self):
        self.score += 1

    def rename(self, name: str):
        """Change the display name. The mark is unaffected."""
        if not isinstance(name, str):
            raise ValueError("Name is required")
        cleaned = name.strip()
        if not cleaned:
            raise ValueError("Name is required")
        if len(cleaned) > MAX_NAME_LENGTH:
            raise ValueError(f"Name must be {MAX_NAME_LENGTH} characters or less")
        self.name = cleaned

    def to_dict(self) -> dict:
        return {"name": self.name, "mark": self.mark.value, "score": self.score}
