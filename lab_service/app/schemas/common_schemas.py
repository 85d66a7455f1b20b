from pydantic import BaseModel


class ChecklistItem(BaseModel):
    text: str
    completed: bool = False

    model_config = {"from_attributes": True}
