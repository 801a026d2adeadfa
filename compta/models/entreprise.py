from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, Field
from .common import gen_id

class Entreprise(BaseModel):
    id: str = Field(default_factory=gen_id)
    nom: str
    siret: Optional[str] = None  # 14 chiffres, espaces tolérés
