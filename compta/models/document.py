from __future__ import annotations
from pydantic import BaseModel, Field, field_validator
from typing import List, Literal, Optional
from datetime import datetime
from decimal import Decimal
from .common import gen_id, to_money, TimeStamped

DocumentType = Literal["DEVIS", "FACTURE", "AVOIR"]
DocumentStatus = Literal["BROUILLON", "ENVOYE", "ACCEPTE", "REFUSE", "PAYE", "ANNULE"]
PaymentMethod = Literal["ESPECES", "CHEQUE", "CARTE", "VIREMENT", "PRELEVEMENT"]

# types qui produisent des écritures comptables
TYPES_COMPTABLES = ("FACTURE", "AVOIR")

class ClientRef(BaseModel):
    """Snapshot du client au moment de l'émission."""
    id: str
    nom: str

    @property
    def compte_auxiliaire(self) -> str:
        # code auxiliaire FEC : "C" + 6 premiers caractères de l'id
        return f"C{self.id[:6]}"

class DocumentLine(BaseModel):
    designation: str
    quantite: Decimal = Decimal("1")
    prix_unitaire_ht: Decimal = Decimal("0.00")
    taux_tva: Decimal = Decimal("20.0")
    total_ht: Decimal = Decimal("0.00")
    total_tva: Decimal = Decimal("0.00")
    total_ttc: Decimal = Decimal("0.00")

    def compute(self) -> "DocumentLine":
        self.total_ht = to_money(self.quantite * self.prix_unitaire_ht)
        self.total_tva = to_money(self.total_ht * self.taux_tva / Decimal("100"))
        self.total_ttc = self.total_ht + self.total_tva
        return self

class Payment(BaseModel):
    id: str = Field(default_factory=gen_id)
    montant: Decimal
    moyen_paiement: PaymentMethod = "VIREMENT"
    date_paiement: datetime = Field(default_factory=datetime.utcnow)
    reference: Optional[str] = None

    @field_validator("montant")
    @classmethod
    def _montant_positif(cls, v: Decimal) -> Decimal:
        v = to_money(v)
        if v <= 0:
            raise ValueError("le montant d'un paiement doit être positif")
        return v

class Document(TimeStamped):
    id: str = Field(default_factory=gen_id)
    numero: Optional[str] = None
    type: DocumentType = "FACTURE"
    statut: DocumentStatus = "BROUILLON"

    entreprise_id: str
    client: ClientRef

    date_emission: datetime = Field(default_factory=datetime.utcnow)
    date_echeance: Optional[datetime] = None

    lignes: List[DocumentLine] = Field(default_factory=list)
    paiements: List[Payment] = Field(default_factory=list)

    # totaux figés à l'émission ; total_ttc = total_ht + total_tva attendu, non vérifié
    total_ht: Decimal = Decimal("0.00")
    total_tva: Decimal = Decimal("0.00")
    total_ttc: Decimal = Decimal("0.00")

    @field_validator("total_ht", "total_tva", "total_ttc")
    @classmethod
    def _au_centime(cls, v: Decimal) -> Decimal:
        return to_money(v)

    @property
    def is_avoir(self) -> bool:
        return self.type == "AVOIR"

    def is_comptable(self) -> bool:
        return self.type in TYPES_COMPTABLES and self.statut != "BROUILLON"

    def recompute_totals(self) -> None:
        self.total_ht = to_money(sum((ln.total_ht for ln in self.lignes), Decimal("0")))
        self.total_tva = to_money(sum((ln.total_tva for ln in self.lignes), Decimal("0")))
        self.total_ttc = self.total_ht + self.total_tva
