from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from app.domain.exceptions import NotFoundError, ValidationError
from infrastructure.database.repositories.habits import HabitRepository
from infrastructure.database.repositories.users import UserRepository

logger = logging.getLogger(__name__)


@dataclass
class HabitService:
    """CRUD over habits; a habit may belong to a user or be shared."""

    repository: HabitRepository
    user_repo: UserRepository

    def list_habits(self, user_id: Optional[int] = None) -> List[Dict[str, Any]]:
        return self.repository.list_habits(user_id)

    def get_habit(self, habit_id: int) -> Dict[str, Any]:
        habit = self.repository.get_habit(habit_id)
        if habit is None:
            raise NotFoundError(f"Habit {habit_id} not found")
        return habit

    def create_habit(self, *, name: str, description: str, user_id: Optional[int] = None) -> Dict[str, Any]:
        self._check_owner(user_id)
        habit_id = self.repository.create_habit(name=name, description=description, user_id=user_id)
        return self.get_habit(habit_id)

    def update_habit(self, habit_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        self.get_habit(habit_id)
        changes = {k: v for k, v in fields.items() if v is not None}
        if "user_id" in changes:
            self._check_owner(changes["user_id"])
        self.repository.update_habit(habit_id, changes)
        return self.get_habit(habit_id)

    def delete_habit(self, habit_id: int) -> Dict[str, Any]:
        habit = self.get_habit(habit_id)
        self.repository.delete_habit(habit_id)
        logger.info("Habit %s deleted", habit_id)
        return habit

    def _check_owner(self, user_id: Optional[int]) -> None:
        if user_id is not None and self.user_repo.get_user(user_id) is None:
            raise ValidationError.for_field("user_id", f"User {user_id} does not exist")
