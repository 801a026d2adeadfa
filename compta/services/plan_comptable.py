"""
Plan comptable et journaux utilisés par l'export FEC.

Tables figées : ajouter un compte ou un journal ici ne demande aucune
modification du générateur d'écritures.
"""
from __future__ import annotations
from types import MappingProxyType
from typing import Mapping

from compta.models.accounting import Compte, Journal

COMPTES: Mapping[str, Compte] = MappingProxyType({
    "CLIENT": Compte(numero="411000", libelle="Clients"),
    "VENTE_PRESTATIONS": Compte(numero="706000", libelle="Ventes de prestations"),
    "VENTE_MARCHANDISES": Compte(numero="707000", libelle="Ventes de marchandises"),
    "TVA_COLLECTEE": Compte(numero="445710", libelle="TVA collectée"),
    "BANQUE": Compte(numero="512000", libelle="Banque"),
    "CAISSE": Compte(numero="531000", libelle="Caisse"),
    "AVOIR_CLIENT": Compte(numero="709000", libelle="Avoirs sur ventes"),
})

JOURNAUX: Mapping[str, Journal] = MappingProxyType({
    "VENTE": Journal(code="VE", libelle="Journal des ventes"),
    "BANQUE": Journal(code="BQ", libelle="Journal de banque"),
    "CAISSE": Journal(code="CA", libelle="Journal de caisse"),
    "OD": Journal(code="OD", libelle="Opérations diverses"),
})


def compte(key: str) -> Compte:
    return COMPTES[key]


def journal(key: str) -> Journal:
    return JOURNAUX[key]
