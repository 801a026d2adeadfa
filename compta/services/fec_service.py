"""
Service de génération du Fichier des Écritures Comptables (FEC),
conforme à l'article A47 A-1 du Livre des procédures fiscales.

Chaîne : documents de la période -> écritures en partie double -> texte FEC
-> contrôle -> fichier {SIRET}FEC{AAAAMMJJ}.txt
"""
from __future__ import annotations
import logging
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, Sequence

from compta.models.accounting import (
    Compte, DocumentsStats, FECLine, FECStats, Journal, MontantsStats, PeriodeStats,
    ValidationResult,
)
from compta.models.document import Document, Payment
from compta.services.entreprise_service import EntrepriseService
from compta.services.errors import FECInvalideError, SiretManquantError
from compta.services.fec_format import format_date, format_montant, generate_file_name, render_fec
from compta.services.fec_validator import validate_fec
from compta.services.periods import check_periode
from compta.services.plan_comptable import compte, journal
from compta.services.settings import EXPORTS_DIR, Settings

log = logging.getLogger(__name__)


class DocumentSource(Protocol):
    def fetch_documents(
        self, entreprise_id: str, date_debut: date | datetime, date_fin: date | datetime
    ) -> List[Document]: ...


# ---------- Génération des écritures ----------

def _ligne(
    jnl: Journal,
    ecriture_num: str,
    ecriture_date: str,
    cpt: Compte,
    piece_ref: str,
    libelle: str,
    *,
    debit: Decimal | None = None,
    credit: Decimal | None = None,
    aux_num: str = "",
    aux_lib: str = "",
) -> FECLine:
    return FECLine(
        JournalCode=jnl.code,
        JournalLib=jnl.libelle,
        EcritureNum=ecriture_num,
        EcritureDate=ecriture_date,
        CompteNum=cpt.numero,
        CompteLib=cpt.libelle,
        CompAuxNum=aux_num,
        CompAuxLib=aux_lib,
        PieceRef=piece_ref,
        PieceDate=ecriture_date,
        EcritureLib=libelle,
        Debit=format_montant(debit) if debit is not None else "",
        Credit=format_montant(credit) if credit is not None else "",
        ValidDate=ecriture_date,
    )


def _sens(montant: Decimal, au_debit: bool) -> dict:
    return {"debit": montant} if au_debit else {"credit": montant}


def ecritures_document(doc: Document) -> List[FECLine]:
    """Écriture de vente (client / produit / TVA) puis une écriture par paiement."""
    is_avoir = doc.is_avoir
    jnl = journal("VENTE")
    numero = doc.numero or ""
    ecriture_num = f"{jnl.code}{numero}"
    ecriture_date = format_date(doc.date_emission)
    aux_num = doc.client.compte_auxiliaire
    aux_lib = doc.client.nom
    libelle = f"{doc.type} {numero} - {doc.client.nom}"

    lines: List[FECLine] = [
        # client : débit pour une facture, crédit pour un avoir ; toujours émise
        _ligne(jnl, ecriture_num, ecriture_date, compte("CLIENT"), numero, libelle,
               aux_num=aux_num, aux_lib=aux_lib, **_sens(doc.total_ttc, not is_avoir)),
        # produit HT : pas de distinction marchandises / prestations
        _ligne(jnl, ecriture_num, ecriture_date,
               compte("AVOIR_CLIENT" if is_avoir else "VENTE_PRESTATIONS"), numero, libelle,
               **_sens(doc.total_ht, is_avoir)),
    ]
    if doc.total_tva > 0:
        lines.append(_ligne(jnl, ecriture_num, ecriture_date, compte("TVA_COLLECTEE"), numero,
                            f"TVA {doc.type} {numero}", **_sens(doc.total_tva, is_avoir)))

    for p in doc.paiements:
        lines.extend(ecritures_paiement(doc, p))
    return lines


def ecritures_paiement(doc: Document, p: Payment) -> List[FECLine]:
    especes = p.moyen_paiement == "ESPECES"
    jnl = journal("CAISSE" if especes else "BANQUE")
    cpt = compte("CAISSE" if especes else "BANQUE")
    numero = doc.numero or ""
    # suffixe d'id : une écriture distincte par paiement
    ecriture_num = f"{jnl.code}{numero}-{p.id[:4]}"
    ecriture_date = format_date(p.date_paiement)
    libelle = f"Paiement {numero} - {p.moyen_paiement}"
    return [
        _ligne(jnl, ecriture_num, ecriture_date, cpt, numero, libelle, debit=p.montant),
        _ligne(jnl, ecriture_num, ecriture_date, compte("CLIENT"), numero, libelle,
               credit=p.montant, aux_num=doc.client.compte_auxiliaire, aux_lib=doc.client.nom),
    ]


def build_ecritures(documents: Iterable[Document]) -> List[FECLine]:
    """
    Lignes FEC de la période, dans l'ordre des documents reçus.
    Les devis et brouillons sont ignorés ; les totaux sont repris tels quels.
    """
    lines: List[FECLine] = []
    for doc in documents:
        if not doc.is_comptable():
            continue
        lines.extend(ecritures_document(doc))
    return lines


# ---------- Statistiques ----------

def compute_stats(documents: Sequence[Document], date_debut: date | datetime, date_fin: date | datetime) -> FECStats:
    factures = [d for d in documents if d.type == "FACTURE"]
    avoirs = [d for d in documents if d.type == "AVOIR"]
    nb_paiements = sum(len(d.paiements) for d in documents)
    ventes_ht = sum((d.total_ht for d in factures), Decimal("0"))
    tva = sum((d.total_tva for d in factures), Decimal("0"))

    return FECStats(
        periode=PeriodeStats(debut=date_debut.strftime("%d/%m/%Y"), fin=date_fin.strftime("%d/%m/%Y")),
        documents=DocumentsStats(factures=len(factures), avoirs=len(avoirs), total=len(documents)),
        paiements=nb_paiements,
        # estimation haute : 3 lignes par document même sans TVA
        ecritures=len(documents) * 3 + nb_paiements * 2,
        montants=MontantsStats(
            ventes_ht=f"{ventes_ht:.2f}",
            tva=f"{tva:.2f}",
            ventes_ttc=f"{ventes_ht + tva:.2f}",
        ),
    )


# ---------- Service ----------

class FECService:
    def __init__(
        self,
        documents: DocumentSource,
        *,
        entreprises: Optional[EntrepriseService] = None,
        settings: Optional[Settings] = None,
        exports_dir: Path | str | None = None,
    ):
        self.documents = documents
        self._entreprises = entreprises
        self.settings = settings or Settings()
        self.exports_dir = Path(exports_dir) if exports_dir else EXPORTS_DIR / "fec"

    @property
    def entreprises(self) -> EntrepriseService:
        # chargé à la demande : seul l'export a besoin du SIRET
        if self._entreprises is None:
            self._entreprises = EntrepriseService()
        return self._entreprises

    validate_fec = staticmethod(validate_fec)
    generate_file_name = staticmethod(generate_file_name)

    def _fetch(self, entreprise_id: str, date_debut, date_fin) -> List[Document]:
        check_periode(date_debut, date_fin)
        return [d for d in self.documents.fetch_documents(entreprise_id, date_debut, date_fin) if d.is_comptable()]

    def generate_lines(self, entreprise_id: str, date_debut: date | datetime, date_fin: date | datetime) -> List[FECLine]:
        return build_ecritures(self._fetch(entreprise_id, date_debut, date_fin))

    def generate_fec(self, entreprise_id: str, date_debut: date | datetime, date_fin: date | datetime) -> str:
        lines = self.generate_lines(entreprise_id, date_debut, date_fin)
        log.debug("FEC %s du %s au %s : %d lignes", entreprise_id, date_debut, date_fin, len(lines))
        return render_fec(lines)

    def get_fec_stats(self, entreprise_id: str, date_debut: date | datetime, date_fin: date | datetime) -> FECStats:
        return compute_stats(self._fetch(entreprise_id, date_debut, date_fin), date_debut, date_fin)

    def export_fec(
        self,
        entreprise_id: str,
        date_debut: date | datetime,
        date_fin: date | datetime,
        out_dir: Optional[str] = None,
    ) -> Path:
        """
        Génère, contrôle et écrit le FEC de l'entreprise.
        Un fichier qui ne passe pas le contrôle n'est jamais écrit.
        """
        entreprise = self.entreprises.get(entreprise_id)
        if not entreprise.siret or not entreprise.siret.strip():
            raise SiretManquantError("Le SIRET de l'entreprise doit être renseigné pour générer le FEC")

        content = self.generate_fec(entreprise_id, date_debut, date_fin)
        result: ValidationResult = validate_fec(content)
        if not result.valid:
            log.warning("[FEC_VALIDATION_ERROR] %s : %s", entreprise_id, result.errors)
            raise FECInvalideError(result.errors)

        exports_dir = Path(out_dir) if out_dir else self.exports_dir
        exports_dir.mkdir(parents=True, exist_ok=True)
        out_path = exports_dir / generate_file_name(entreprise.siret, date_fin)
        out_path.write_text(content, encoding=self.settings.fec_encoding())
        log.info("FEC exporté : %s", out_path)
        return out_path
