from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, StrictStr

from ....config import get_settings
from ....orchestration.graph import Orchestrator
from ....orchestration.providers import get_generator
from ....policies.verdict import ItemType, ModerationItem

router = APIRouter(prefix="/moderate", tags=["moderation"])


class ModerateRequest(BaseModel):
    type: ItemType
    text: StrictStr  # empty string is valid input


def get_orchestrator() -> Orchestrator:
    settings = get_settings()
    return Orchestrator(get_generator(settings), max_item_chars=settings.MAX_ITEM_CHARS)


@router.post("")
def moderate(req: ModerateRequest, orchestrator: Orchestrator = Depends(get_orchestrator)):
    """
    Classify one item as allow / soft_block / block.

    Success returns the Verdict itself; failures return a structured error
    payload with the status code of the failure kind.
    """
    item = ModerationItem(type=req.type, text=req.text)
    result = orchestrator.run(item)
    return JSONResponse(status_code=result.status_code, content=result.payload())
