"""Tests du stockage des documents et de la sélection par période."""
import json
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from compta.models.document import ClientRef, Document, DocumentLine, Payment
from compta.services.document_service import DocumentService
from compta.services.errors import DocumentStoreError, PeriodeInvalideError

from conftest import CLIENT, ENTREPRISE_ID, make_doc, make_payment


def test_add_document_numbers_and_totals(documents):
    doc = Document(
        type="FACTURE", statut="ENVOYE", entreprise_id=ENTREPRISE_ID,
        client=ClientRef(id=CLIENT.id, nom="ancien nom"),
        lignes=[
            DocumentLine(designation="Prestation", quantite=Decimal("2"), prix_unitaire_ht=Decimal("50")).compute(),
            DocumentLine(designation="Forfait", prix_unitaire_ht=Decimal("10"), taux_tva=Decimal("0")).compute(),
        ],
    )
    documents.add_document(doc)
    avoir = documents.add_document(make_doc(numero=None, type="AVOIR"))

    stored = documents.get_by_id(doc.id)
    assert stored.numero == "F-0001"
    assert avoir.numero == "A-0001"
    assert stored.client.nom == "Dupont SARL"
    assert (stored.total_ht, stored.total_tva, stored.total_ttc) == (
        Decimal("110.00"), Decimal("20.00"), Decimal("130.00"))


def test_amounts_are_stored_as_strings(documents):
    documents.add_document(make_doc())
    raw = json.loads(documents.repo.filepath.read_text(encoding="utf-8"))
    assert raw[0]["total_ttc"] == "120.00"


def test_fetch_filters_and_sorts(documents):
    documents.add_document(make_doc(numero="F003", emission=datetime(2024, 6, 1)))
    documents.add_document(make_doc(numero="F001", emission=datetime(2024, 1, 1, 0, 0)))
    documents.add_document(make_doc(numero="A001", type="AVOIR", emission=datetime(2024, 3, 1)))
    documents.add_document(make_doc(numero="F002", emission=datetime(2024, 6, 30, 18, 45)))
    documents.add_document(make_doc(numero="D001", type="DEVIS"))
    documents.add_document(make_doc(numero="F004", statut="BROUILLON"))
    documents.add_document(make_doc(numero="X001", entreprise_id="autre"))
    documents.add_document(make_doc(numero="F000", emission=datetime(2023, 12, 31, 23, 0)))
    documents.add_document(make_doc(numero="F005", emission=datetime(2024, 7, 1)))

    got = documents.fetch_documents(ENTREPRISE_ID, date(2024, 1, 1), date(2024, 6, 30))
    assert [d.numero for d in got] == ["F001", "A001", "F003", "F002"]


def test_fetch_empty_entity(documents):
    assert documents.fetch_documents("inconnue", date(2024, 1, 1), date(2024, 12, 31)) == []


def test_fetch_reversed_period(documents):
    with pytest.raises(PeriodeInvalideError):
        documents.fetch_documents(ENTREPRISE_ID, date(2024, 12, 31), date(2024, 1, 1))


def test_add_payment_keeps_order(documents):
    doc = documents.add_document(make_doc())
    documents.add_payment(doc.id, make_payment("20.00", id="p1"))
    documents.add_payment(doc.id, make_payment("100.00", "ESPECES", id="p2"))
    stored = documents.get_by_id(doc.id)
    assert [p.id for p in stored.paiements] == ["p1", "p2"]
    assert stored.paiements[1].montant == Decimal("100.00")


def test_quote_cannot_receive_payment(documents):
    devis = documents.add_document(make_doc(numero="D001", type="DEVIS"))
    with pytest.raises(ValueError):
        documents.add_payment(devis.id, make_payment())


def test_payment_amount_must_be_positive():
    with pytest.raises(ValueError):
        Payment(montant=Decimal("0"))


def test_invalid_records_are_skipped(documents):
    documents.add_document(make_doc())
    raw = json.loads(documents.repo.filepath.read_text(encoding="utf-8"))
    raw.append({"id": "broken", "type": "FACTURE"})
    documents.repo.filepath.write_text(json.dumps(raw), encoding="utf-8")
    assert [d.numero for d in documents.list_documents()] == ["F001"]


def test_corrupt_store_raises(tmp_path, clients, settings):
    path = tmp_path / "documents.json"
    path.write_text("{not json", encoding="utf-8")
    svc = DocumentService(path, clients=clients, settings=settings)
    with pytest.raises(DocumentStoreError):
        svc.fetch_documents(ENTREPRISE_ID, date(2024, 1, 1), date(2024, 12, 31))
    assert (tmp_path / "documents.corrupt.json").exists()


def _corrupt_payment(documents, numero):
    raw = json.loads(documents.repo.filepath.read_text(encoding="utf-8"))
    for d in raw:
        if d["numero"] == numero:
            d["paiements"][0]["montant"] = "0.00"
    documents.repo.filepath.write_text(json.dumps(raw), encoding="utf-8")


def test_fetch_raises_on_invalid_record(documents):
    documents.add_document(make_doc(numero="F001"))
    documents.add_document(make_doc(numero="F002", paiements=[make_payment()]))
    _corrupt_payment(documents, "F002")

    with pytest.raises(DocumentStoreError, match="F002"):
        documents.fetch_documents(ENTREPRISE_ID, date(2024, 1, 1), date(2024, 12, 31))
    # la liste reste tolérante
    assert [d.numero for d in documents.list_documents()] == ["F001"]


def test_fetch_ignores_invalid_record_of_other_entity(documents):
    documents.add_document(make_doc(numero="F001"))
    documents.add_document(make_doc(numero="X001", entreprise_id="autre", paiements=[make_payment()]))
    _corrupt_payment(documents, "X001")
    got = documents.fetch_documents(ENTREPRISE_ID, date(2024, 1, 1), date(2024, 12, 31))
    assert [d.numero for d in got] == ["F001"]


def test_fetch_sorts_naive_and_aware_dates(documents):
    documents.add_document(make_doc(numero="F002", emission=datetime(2024, 3, 2, tzinfo=timezone.utc)))
    documents.add_document(make_doc(numero="F001", emission=datetime(2024, 3, 1)))
    documents.add_document(make_doc(numero="F003", emission=datetime(2024, 3, 2, 8, 0)))
    got = documents.fetch_documents(ENTREPRISE_ID, date(2024, 1, 1), date(2024, 12, 31))
    assert [d.numero for d in got] == ["F001", "F002", "F003"]
