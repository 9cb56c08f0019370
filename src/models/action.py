"""Action log recording each step of an agentic chunking run."""

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Action:
    message: str
    data: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"message": self.message, **self.data}


class ActionLog:
    """Append-only, ordered trail of chunker decisions.

    Purely observational: nothing in chunk formation reads it back.
    """

    def __init__(self):
        self._actions: list[Action] = []

    def log(self, message: str, **data) -> Action:
        action = Action(message=message, data=data)
        self._actions.append(action)
        logger.debug("%s %s", message, data or "")
        return action

    def to_list(self) -> list[dict]:
        return [action.to_dict() for action in self._actions]

    def __iter__(self):
        return iter(self._actions)

    def __len__(self) -> int:
        return len(self._actions)
