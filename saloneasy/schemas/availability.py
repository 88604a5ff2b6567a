from pydantic import BaseModel
from typing import List

class AvailableSlotsEnvelope(BaseModel):
    success: bool = True
    data: List[str]
