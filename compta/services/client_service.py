from __future__ import annotations
from typing import List, Optional
import logging
import os

from pydantic import ValidationError

from compta.models.client import Client
from compta.services.settings import CLIENTS_JSON
from compta.storage.repo import JsonRepository

log = logging.getLogger(__name__)


class ClientService:
    def __init__(self, path: os.PathLike | str = CLIENTS_JSON):
        self.repo = JsonRepository(path, entity_name="client", key="id")

    def list_clients(self, entreprise_id: Optional[str] = None) -> List[Client]:
        out: List[Client] = []
        for d in self.repo.list_all():
            try:
                c = Client(**d)
            except ValidationError as e:
                log.warning("Client invalide ignoré (%s) : %s", d.get("id"), e)
                continue
            if entreprise_id is None or c.entreprise_id == entreprise_id:
                out.append(c)
        return out

    def add_client(self, client: Client) -> Client:
        self.repo.add(client)
        return client

    def update_client(self, client: Client) -> Client:
        self.repo.update(client)
        return client

    def delete_client(self, client_id: str) -> bool:
        return self.repo.delete(client_id)

    def get_by_id(self, client_id: str) -> Optional[Client]:
        d = self.repo.get_by_id(client_id)
        if d is None:
            return None
        try:
            return Client(**d)
        except ValidationError:
            return None
