from datetime import datetime
from decimal import Decimal

import pytest

from compta.models.client import Client
from compta.models.document import ClientRef, Document, Payment
from compta.models.entreprise import Entreprise
from compta.services.client_service import ClientService
from compta.services.document_service import DocumentService
from compta.services.entreprise_service import EntrepriseService
from compta.services.settings import Settings

ENTREPRISE_ID = "ent-1"
CLIENT = ClientRef(id="abcdef123456", nom="Dupont SARL")


def make_doc(numero="F001", type="FACTURE", ht="100.00", tva="20.00", ttc=None,
             emission=datetime(2024, 3, 15), statut="ENVOYE", paiements=(), **kw):
    ttc = ttc if ttc is not None else Decimal(ht) + Decimal(tva)
    return Document(
        numero=numero, type=type, statut=statut,
        entreprise_id=kw.pop("entreprise_id", ENTREPRISE_ID),
        client=kw.pop("client", CLIENT),
        date_emission=emission,
        total_ht=Decimal(ht), total_tva=Decimal(tva), total_ttc=Decimal(ttc),
        paiements=list(paiements), **kw,
    )


def make_payment(montant="120.00", moyen="VIREMENT", when=datetime(2024, 3, 20), id="9f3a77aa-0000"):
    return Payment(id=id, montant=Decimal(montant), moyen_paiement=moyen, date_paiement=when)


class StaticSource:
    """Source de documents en mémoire."""

    def __init__(self, documents):
        self.docs = list(documents)
        self.calls = []

    def fetch_documents(self, entreprise_id, date_debut, date_fin):
        self.calls.append((entreprise_id, date_debut, date_fin))
        return [d for d in self.docs if d.entreprise_id == entreprise_id]


@pytest.fixture
def settings(tmp_path):
    return Settings(tmp_path / "settings.json")


@pytest.fixture
def clients(tmp_path):
    svc = ClientService(tmp_path / "clients.json")
    svc.add_client(Client(id=CLIENT.id, nom=CLIENT.nom, entreprise_id=ENTREPRISE_ID))
    return svc


@pytest.fixture
def documents(tmp_path, clients, settings):
    return DocumentService(tmp_path / "documents.json", clients=clients, settings=settings)


@pytest.fixture
def entreprises(tmp_path):
    svc = EntrepriseService(tmp_path / "entreprises.json")
    svc.add_entreprise(Entreprise(id=ENTREPRISE_ID, nom="Ma Société", siret="123 456 789 00012"))
    return svc
