from __future__ import annotations
import logging
import os
from datetime import date, datetime
from typing import List, Optional

from pydantic import ValidationError

from compta.models.common import as_date, naive_utc
from compta.models.document import ClientRef, Document, Payment, TYPES_COMPTABLES
from compta.services.client_service import ClientService
from compta.services.errors import DocumentStoreError
from compta.services.periods import check_periode
from compta.services.settings import DOCUMENTS_JSON, Settings
from compta.storage.repo import JsonRepository

log = logging.getLogger(__name__)


class DocumentService:
    """Factures, avoirs et devis, avec leurs paiements."""

    def __init__(
        self,
        path: os.PathLike | str = DOCUMENTS_JSON,
        *,
        clients: Optional[ClientService] = None,
        settings: Optional[Settings] = None,
    ):
        self.repo = JsonRepository(path, entity_name="document", key="id")
        self.clients = clients or ClientService()
        self.settings = settings or Settings()

    # ----------- lecture -----------
    def _parse(self, d: dict) -> Optional[Document]:
        try:
            return Document(**d)
        except ValidationError as e:
            log.warning("Document invalide ignoré (%s) : %s", d.get("numero") or d.get("id"), e)
            return None

    def list_documents(self) -> List[Document]:
        return [doc for doc in map(self._parse, self.repo.list_all()) if doc is not None]

    def get_by_id(self, document_id: str) -> Optional[Document]:
        d = self.repo.get_by_id(document_id)
        return self._parse(d) if d is not None else None

    def fetch_documents(
        self,
        entreprise_id: str,
        date_debut: date | datetime,
        date_fin: date | datetime,
    ) -> List[Document]:
        """
        Factures et avoirs non brouillons émis entre date_debut et date_fin
        (bornes incluses, au jour près), triés par date d'émission croissante.
        Les paiements restent dans l'ordre d'enregistrement.
        """
        debut, fin = as_date(date_debut), as_date(date_fin)
        check_periode(debut, fin)

        out: List[Document] = []
        for d in self.repo.list_all():
            if d.get("entreprise_id") not in (None, entreprise_id):
                continue
            try:
                doc = Document(**d)
            except ValidationError as e:
                # un document illisible rendrait le FEC incomplet
                raise DocumentStoreError(
                    f"Document invalide dans le stockage ({d.get('numero') or d.get('id')}) : {e}"
                ) from e
            if doc.entreprise_id != entreprise_id:
                continue
            if doc.type not in TYPES_COMPTABLES or doc.statut == "BROUILLON":
                continue
            if debut <= as_date(doc.date_emission) <= fin:
                out.append(doc)
        # tri stable : l'ordre du stockage départage les documents du même jour
        out.sort(key=lambda d: (as_date(d.date_emission), naive_utc(d.date_emission)))
        return out

    # ----------- écriture -----------
    def add_document(self, doc: Document) -> Document:
        if not doc.numero:
            doc.numero = self.settings.next_numero(doc.type)
        c = self.clients.get_by_id(doc.client.id)
        if c is not None:
            doc.client = ClientRef(id=c.id, nom=c.nom)
        if doc.lignes:
            doc.recompute_totals()
        self.repo.add(doc)
        return doc

    def update_document(self, doc: Document) -> Document:
        doc.touch()
        self.repo.update(doc)
        return doc

    def add_payment(self, document_id: str, payment: Payment) -> Document:
        doc = self.get_by_id(document_id)
        if doc is None:
            raise ValueError(f"document with id={document_id} not found")
        if doc.type == "DEVIS":
            raise ValueError("un devis ne peut pas recevoir de paiement")
        doc.paiements.append(payment)
        return self.update_document(doc)
