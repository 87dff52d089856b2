from pydantic import BaseModel

class ResetRequest(BaseModel):
    password: str = ""
