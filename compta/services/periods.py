from __future__ import annotations
from datetime import date, datetime
from typing import Optional, Tuple

from dateutil.relativedelta import relativedelta

from compta.models.common import as_date
from compta.services.errors import PeriodeInvalideError

PRESETS = ("current-year", "last-year", "last-3-months", "last-6-months", "last-12-months")


def parse_periode(date_debut: Optional[str], date_fin: Optional[str]) -> Tuple[date, date]:
    """Lit une période "AAAA-MM-JJ" / "AAAA-MM-JJ" et contrôle son sens."""
    if not date_debut or not date_fin:
        raise PeriodeInvalideError(
            "Les paramètres dateDebut et dateFin sont requis (format: YYYY-MM-DD)"
        )
    try:
        debut = datetime.strptime(date_debut.strip(), "%Y-%m-%d").date()
        fin = datetime.strptime(date_fin.strip(), "%Y-%m-%d").date()
    except ValueError as e:
        raise PeriodeInvalideError("Format de date invalide (attendu: YYYY-MM-DD)") from e
    check_periode(debut, fin)
    return debut, fin


def check_periode(debut: date | datetime, fin: date | datetime) -> None:
    if as_date(debut) > as_date(fin):
        raise PeriodeInvalideError("La date de début doit être antérieure à la date de fin")


def periode_predefinie(preset: str, today: Optional[date] = None) -> Tuple[date, date]:
    today = today or date.today()
    if preset == "current-year":
        return date(today.year, 1, 1), today
    if preset == "last-year":
        return date(today.year - 1, 1, 1), date(today.year - 1, 12, 31)
    months = {"last-3-months": 3, "last-6-months": 6, "last-12-months": 12}.get(preset)
    if months is None:
        raise PeriodeInvalideError(f"Période prédéfinie inconnue : {preset} (attendu : {', '.join(PRESETS)})")
    return today - relativedelta(months=months), today
