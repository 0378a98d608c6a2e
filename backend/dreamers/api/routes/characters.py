from typing import List
from fastapi import APIRouter

from dreamers import schemas
from dreamers.characters import list_characters

router = APIRouter(prefix="/characters", tags=["characters"])


@router.get("", response_model=List[schemas.Character])
def get_characters():
    return [schemas.Character.model_validate(c) for c in list_characters()]
