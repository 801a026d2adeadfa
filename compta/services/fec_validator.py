"""
Contrôle d'un fichier FEC déjà produit (par ce module ou un autre logiciel).

Toutes les anomalies sont accumulées ; seul un fichier de moins de deux lignes
interrompt le contrôle. Aucune exception n'est levée pour un contenu texte.
"""
from __future__ import annotations
import re
from decimal import Decimal, InvalidOperation
from typing import List

from compta.models.accounting import ValidationResult
from compta.services.fec_format import FEC_COLUMNS, SEPARATOR, parse_montant

DATE_RE = re.compile(r"^\d{8}$")
# contrôles de structure limités aux premières lignes de données (lignes 2 à 10)
SAMPLE_END = 10
TOLERANCE = Decimal("0.01")
# au-delà, le cumul pourrait dépasser le contexte décimal
MAX_CHIFFRES = 18

IDX_DATE = FEC_COLUMNS.index("EcritureDate")
IDX_DEBIT = FEC_COLUMNS.index("Debit")
IDX_CREDIT = FEC_COLUMNS.index("Credit")


def _split_lines(fec_content: str) -> List[str]:
    if fec_content.endswith("\n"):
        fec_content = fec_content[:-1]
    return [ln.rstrip("\r") for ln in fec_content.split("\n")]


def _montant(fields: List[str], idx: int, lineno: int, errors: List[str]) -> Decimal:
    if len(fields) <= idx:
        return Decimal("0")
    try:
        montant = parse_montant(fields[idx])
    except InvalidOperation:
        errors.append(f"Ligne {lineno} : montant invalide ({fields[idx]})")
        return Decimal("0")
    if montant.adjusted() >= MAX_CHIFFRES:
        errors.append(f"Ligne {lineno} : montant hors limites ({fields[idx]})")
        return Decimal("0")
    return montant


def validate_fec(fec_content: str) -> ValidationResult:
    errors: List[str] = []
    lines = _split_lines(fec_content)
    expected = len(FEC_COLUMNS)

    if len(lines) < 2:
        errors.append("Le fichier FEC doit contenir au moins une ligne de données")
        return ValidationResult(valid=False, errors=errors)

    header = lines[0].split(SEPARATOR)
    if len(header) != expected:
        errors.append(f"En-tête invalide : {len(header)} colonnes au lieu de {expected}")

    for i in range(1, min(len(lines), SAMPLE_END)):
        fields = lines[i].split(SEPARATOR)
        if len(fields) != expected:
            errors.append(f"Ligne {i + 1} : {len(fields)} colonnes au lieu de {expected}")
        if len(fields) > IDX_DATE and not DATE_RE.match(fields[IDX_DATE]):
            errors.append(f"Ligne {i + 1} : Date d'écriture invalide ({fields[IDX_DATE]})")

    total_debit = Decimal("0")
    total_credit = Decimal("0")
    for i in range(1, len(lines)):
        fields = lines[i].split(SEPARATOR)
        total_debit += _montant(fields, IDX_DEBIT, i + 1, errors)
        total_credit += _montant(fields, IDX_CREDIT, i + 1, errors)

    diff = abs(total_debit - total_credit)
    if diff > TOLERANCE:
        errors.append(
            f"Balance non équilibrée : Débit={total_debit:.2f}, Crédit={total_credit:.2f}, Diff={diff:.2f}"
        )

    return ValidationResult(valid=not errors, errors=errors)
