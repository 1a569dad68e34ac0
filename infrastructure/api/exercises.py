"""
Exercises resource client.

Part of HQ-14: Exercise library client
"""

from typing import List, Optional

from domain.models.exercise import (
    Exercise,
    ExerciseCreate,
    ExerciseFilters,
    ExerciseUpdate,
)
from infrastructure.api.client import ApiClient, normalize_list


class ExercisesClient:
    """Typed calls against /exercises."""

    def __init__(self, api: ApiClient):
        self._api = api

    async def list_exercises(
        self, filters: Optional[ExerciseFilters] = None
    ) -> List[Exercise]:
        params = (filters or ExerciseFilters()).to_params()
        data = await self._api.get("/exercises", params=params)
        return [Exercise.model_validate(item) for item in normalize_list(data)]

    async def get_exercise(self, exercise_id: str) -> Exercise:
        return Exercise.model_validate(await self._api.get(f"/exercises/{exercise_id}"))

    async def create_exercise(self, data: ExerciseCreate) -> Exercise:
        body = data.model_dump(mode="json", exclude_none=True)
        return Exercise.model_validate(await self._api.post("/exercises", body))

    async def update_exercise(self, exercise_id: str, data: ExerciseUpdate) -> Exercise:
        body = data.model_dump(mode="json", exclude_none=True)
        return Exercise.model_validate(
            await self._api.put(f"/exercises/{exercise_id}", body)
        )

    async def delete_exercise(self, exercise_id: str) -> None:
        await self._api.delete(f"/exercises/{exercise_id}")
