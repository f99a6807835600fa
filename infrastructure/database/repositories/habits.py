from __future__ import annotations

from typing import Any, Dict, List, Optional

from infrastructure.database.ops.habits import HabitOperations


class HabitRepository:
    """Facade over habit persistence."""

    def __init__(self, backend: HabitOperations) -> None:
        self._backend = backend

    def create_habit(self, *, name: str, description: str, user_id: Optional[int] = None) -> int:
        return self._backend.insert_habit(name=name, description=description, user_id=user_id)

    def get_habit(self, habit_id: int) -> Optional[Dict[str, Any]]:
        return self._backend.get_habit(habit_id)

    def list_habits(self, user_id: Optional[int] = None) -> List[Dict[str, Any]]:
        return self._backend.get_habits(user_id)

    def update_habit(self, habit_id: int, fields: Dict[str, Any]) -> bool:
        return self._backend.update_habit_fields(habit_id, fields)

    def delete_habit(self, habit_id: int) -> bool:
        return self._backend.delete_habit(habit_id)
