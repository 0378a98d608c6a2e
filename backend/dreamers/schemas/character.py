from pydantic import BaseModel


class Character(BaseModel):
    id: str
    name: str
    description: str
    unlocked: bool = True

    class Config:
        from_attributes = True
