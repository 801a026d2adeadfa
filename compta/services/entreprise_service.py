from __future__ import annotations
from typing import List, Optional
import os

from pydantic import ValidationError

from compta.models.entreprise import Entreprise
from compta.services.errors import EntrepriseIntrouvableError
from compta.services.settings import ENTREPRISES_JSON
from compta.storage.repo import JsonRepository


class EntrepriseService:
    def __init__(self, path: os.PathLike | str = ENTREPRISES_JSON):
        self.repo = JsonRepository(path, entity_name="entreprise", key="id")

    def list_entreprises(self) -> List[Entreprise]:
        out: List[Entreprise] = []
        for d in self.repo.list_all():
            try:
                out.append(Entreprise(**d))
            except ValidationError:
                continue
        return out

    def add_entreprise(self, e: Entreprise) -> Entreprise:
        self.repo.add(e)
        return e

    def update_entreprise(self, e: Entreprise) -> Entreprise:
        self.repo.update(e)
        return e

    def get(self, entreprise_id: str) -> Entreprise:
        d = self.repo.get_by_id(entreprise_id)
        if d is None:
            raise EntrepriseIntrouvableError(f"Entreprise non trouvée : {entreprise_id}")
        return Entreprise(**d)
