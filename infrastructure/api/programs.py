"""
Programs resource client.

Part of HQ-21: Program editor client models

CRUD for programs and for the sessions nested under them.
"""

from typing import List, Optional

from domain.models.program import (
    Program,
    ProgramClone,
    ProgramCreate,
    ProgramFilters,
    ProgramListItem,
    ProgramSession,
    ProgramStats,
    ProgramUpdate,
    SessionCreate,
    SessionUpdate,
)
from infrastructure.api.client import ApiClient, normalize_list


class ProgramsClient:
    """Typed calls against /programs and /programs/{id}/sessions."""

    def __init__(self, api: ApiClient):
        self._api = api

    async def list_programs(
        self, filters: Optional[ProgramFilters] = None
    ) -> List[ProgramListItem]:
        params = (filters or ProgramFilters()).to_params()
        data = await self._api.get("/programs", params=params)
        return [ProgramListItem.model_validate(item) for item in normalize_list(data)]

    async def get_program(self, program_id: str) -> Program:
        data = await self._api.get(f"/programs/{program_id}")
        return Program.model_validate(data)

    async def create_program(self, data: ProgramCreate) -> Program:
        body = data.model_dump(mode="json", exclude_none=True)
        return Program.model_validate(await self._api.post("/programs", body))

    async def update_program(self, program_id: str, data: ProgramUpdate) -> Program:
        body = data.model_dump(mode="json", exclude_none=True)
        return Program.model_validate(
            await self._api.put(f"/programs/{program_id}", body)
        )

    async def delete_program(self, program_id: str) -> None:
        await self._api.delete(f"/programs/{program_id}")

    async def clone_program(
        self, template_id: str, data: Optional[ProgramClone] = None
    ) -> Program:
        body = data.model_dump(exclude_none=True) if data else None
        return Program.model_validate(
            await self._api.post(f"/programs/{template_id}/clone", body)
        )

    async def get_program_stats(self, program_id: str) -> ProgramStats:
        data = await self._api.get(f"/programs/{program_id}/stats")
        return ProgramStats.model_validate(data)

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    async def create_session(
        self, program_id: str, data: SessionCreate
    ) -> ProgramSession:
        result = await self._api.post(
            f"/programs/{program_id}/sessions", data.to_payload()
        )
        return ProgramSession.model_validate(result)

    async def update_session(
        self, program_id: str, session_id: str, data: SessionUpdate
    ) -> ProgramSession:
        result = await self._api.put(
            f"/programs/{program_id}/sessions/{session_id}", data.to_payload()
        )
        return ProgramSession.model_validate(result)

    async def delete_session(self, program_id: str, session_id: str) -> None:
        await self._api.delete(f"/programs/{program_id}/sessions/{session_id}")
