from __future__ import annotations
from typing import List


class ComptaError(Exception):
    """Erreur de base du module comptable."""


class PeriodeInvalideError(ComptaError, ValueError):
    pass


class DocumentStoreError(ComptaError, RuntimeError):
    """Le stockage des documents est illisible ou inaccessible."""


class EntrepriseIntrouvableError(ComptaError, LookupError):
    pass


class SiretManquantError(ComptaError, ValueError):
    pass


class FECInvalideError(ComptaError):
    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Le fichier FEC généré contient des erreurs : " + " ; ".join(self.errors))
