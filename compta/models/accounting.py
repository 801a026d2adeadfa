from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field

class Compte(BaseModel):
    model_config = ConfigDict(frozen=True)

    numero: str
    libelle: str

class Journal(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    libelle: str

class FECLine(BaseModel):
    """
    Une ligne d'écriture au format FEC (art. A47 A-1 du LPF).
    Les champs portent les noms réglementaires ; montants et dates sont déjà
    formatés (Debit/Credit vides si non applicables).
    """
    JournalCode: str
    JournalLib: str
    EcritureNum: str
    EcritureDate: str
    CompteNum: str
    CompteLib: str
    CompAuxNum: str = ""
    CompAuxLib: str = ""
    PieceRef: str
    PieceDate: str
    EcritureLib: str
    Debit: str = ""
    Credit: str = ""
    EcritureLet: str = ""    # lettrage : non géré
    DateLet: str = ""
    ValidDate: str
    Montantdevise: str = ""  # multi-devise : non géré
    Idevise: str = ""

class ValidationResult(BaseModel):
    valid: bool
    errors: list[str]

class PeriodeStats(BaseModel):
    debut: str  # dd/mm/yyyy
    fin: str

class DocumentsStats(BaseModel):
    factures: int = 0
    avoirs: int = 0
    total: int = 0

class MontantsStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ventes_ht: str = Field("0.00", alias="ventesHT")
    tva: str = "0.00"
    ventes_ttc: str = Field("0.00", alias="ventesTTC")

class FECStats(BaseModel):
    periode: PeriodeStats
    documents: DocumentsStats
    paiements: int = 0
    ecritures: int = 0  # estimation : documents * 3 + paiements * 2
    montants: MontantsStats
