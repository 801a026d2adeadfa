"""Sérialisation au format FEC : dates, montants, lignes et nom de fichier."""
from __future__ import annotations
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Iterable, Union

from compta.models.accounting import FECLine
from compta.models.common import to_money

FEC_COLUMNS = (
    "JournalCode",
    "JournalLib",
    "EcritureNum",
    "EcritureDate",
    "CompteNum",
    "CompteLib",
    "CompAuxNum",
    "CompAuxLib",
    "PieceRef",
    "PieceDate",
    "EcritureLib",
    "Debit",
    "Credit",
    "EcritureLet",
    "DateLet",
    "ValidDate",
    "Montantdevise",
    "Idevise",
)
SEPARATOR = "|"

Montant = Union[Decimal, int, float, str]


def format_date(d: date | datetime) -> str:
    """AAAAMMJJ, sans séparateur."""
    return d.strftime("%Y%m%d")


def format_montant(montant: Montant) -> str:
    """
    Montant FEC : 2 décimales, virgule comme séparateur.
    Un montant nul donne une chaîne vide (champ "non applicable"),
    jamais "0,00".
    """
    d = to_money(montant)
    if d == 0:
        return ""
    return f"{d:.2f}".replace(".", ",")


def parse_montant(field: str) -> Decimal:
    field = field.strip()
    if not field:
        return Decimal("0")
    d = Decimal(field.replace(",", "."))
    if not d.is_finite():
        raise InvalidOperation(f"montant non fini : {field}")
    return d


def format_row(line: FECLine) -> str:
    return SEPARATOR.join(getattr(line, col) for col in FEC_COLUMNS)


def render_fec(lines: Iterable[FECLine]) -> str:
    header = SEPARATOR.join(FEC_COLUMNS)
    return "\n".join([header, *(format_row(ln) for ln in lines)])


def generate_file_name(siret: str, date_fin: date | datetime) -> str:
    """Nomenclature légale : {SIREN/SIRET}FEC{AAAAMMJJ de clôture}.txt"""
    siret_clean = re.sub(r"\s", "", siret)
    return f"{siret_clean}FEC{format_date(date_fin)}.txt"
