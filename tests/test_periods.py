import re
from datetime import date

import pytest

from compta.services.errors import PeriodeInvalideError
from compta.services.periods import parse_periode, periode_predefinie


def test_parse_periode():
    assert parse_periode("2024-01-01", "2024-12-31") == (date(2024, 1, 1), date(2024, 12, 31))


@pytest.mark.parametrize("debut, fin, message", [
    (None, "2024-12-31", "Les paramètres dateDebut et dateFin sont requis (format: YYYY-MM-DD)"),
    ("2024-01-01", "", "Les paramètres dateDebut et dateFin sont requis (format: YYYY-MM-DD)"),
    ("01/01/2024", "2024-12-31", "Format de date invalide (attendu: YYYY-MM-DD)"),
    ("2024-12-31", "2024-01-01", "La date de début doit être antérieure à la date de fin"),
])
def test_parse_periode_errors(debut, fin, message):
    with pytest.raises(PeriodeInvalideError, match=re.escape(message)):
        parse_periode(debut, fin)


def test_presets():
    today = date(2024, 5, 31)
    assert periode_predefinie("current-year", today) == (date(2024, 1, 1), today)
    assert periode_predefinie("last-year", today) == (date(2023, 1, 1), date(2023, 12, 31))
    assert periode_predefinie("last-3-months", today) == (date(2024, 2, 29), today)
    assert periode_predefinie("last-12-months", today) == (date(2023, 5, 31), today)
    with pytest.raises(PeriodeInvalideError):
        periode_predefinie("yesterday", today)
