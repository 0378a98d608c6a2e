from typing import List, Optional
from pydantic import BaseModel, Field


class PreviousChoice(BaseModel):
    choice: Optional[int] = None
    character: Optional[str] = None
    # Choice text, when the client kept it; makes the history readable to the model
    text: Optional[str] = None


class GenerateStoryRequest(BaseModel):
    # Optional here so a missing character answers 400 {"error": ...}
    character: Optional[str] = None
    page_number: Optional[int] = Field(default=None, alias="pageNumber")
    previous_choices: List[PreviousChoice] = Field(default_factory=list, alias="previousChoices")
    previous_story: Optional[str] = Field(default=None, alias="previousStory")
    session_id: Optional[str] = Field(default=None, alias="sessionId")

    class Config:
        populate_by_name = True


class GenerateStoryResponse(BaseModel):
    story_text: str = Field(alias="storyText")
    choices: List[str] = Field(default_factory=list)
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    previous_playthroughs: int = Field(default=0, alias="previousPlaythroughs")

    class Config:
        populate_by_name = True


class SaveChoiceRequest(BaseModel):
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    page_number: Optional[int] = Field(default=None, alias="pageNumber")
    choice_index: Optional[int] = Field(default=None, alias="choiceIndex")

    class Config:
        populate_by_name = True


class SaveChoiceResponse(BaseModel):
    success: bool = True


class StoredPage(BaseModel):
    story_id: int = Field(alias="storyId")
    page_number: int = Field(alias="pageNumber")
    story_text: str = Field(alias="storyText")
    choices: List[str] = Field(default_factory=list)
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    choice_made: Optional[int] = Field(default=None, alias="choiceMade")

    class Config:
        populate_by_name = True
