# sentimentbr/api/schemas/common.py
from typing import Any, List, Optional

from pydantic import BaseModel


class Msg(BaseModel):
    message: str
    error: Optional[str] = None
    errors: Optional[List[Any]] = None


class Health(BaseModel):
    status: str = "ok"
