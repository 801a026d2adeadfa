from __future__ import annotations
import os
import json
import logging
from pathlib import Path
from typing import Any, Dict

log = logging.getLogger(__name__)

# --- Chemins de base ---
ROOT_DIR = Path(__file__).resolve().parents[2]
DATA_DIR = Path(os.environ.get("COMPTA_DATA_DIR") or ROOT_DIR / "data")
EXPORTS_DIR = Path(os.environ.get("COMPTA_EXPORTS_DIR") or ROOT_DIR / "exports")

SETTINGS_JSON = DATA_DIR / "settings.json"
CLIENTS_JSON = DATA_DIR / "clients.json"
ENTREPRISES_JSON = DATA_DIR / "entreprises.json"
DOCUMENTS_JSON = DATA_DIR / "documents.json"

DEFAULT_FEC_ENCODING = "utf-8"
DEFAULT_PREFIXES = {"FACTURE": "F-", "AVOIR": "A-", "DEVIS": "D-"}


def load_json(path: os.PathLike | str):
    p = Path(path)
    if not p.exists():
        return None
    try:
        return json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        log.warning("Lecture de %s impossible (%s), valeurs par défaut utilisées", p, e)
        return None


def dump_json(path: os.PathLike | str, data) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")


class Settings:
    """Accès à data/settings.json (numérotation, options d'export FEC)."""

    def __init__(self, path: os.PathLike | str = SETTINGS_JSON):
        self.path = Path(path)

    def load(self) -> Dict[str, Any]:
        s = load_json(self.path)
        return s if isinstance(s, dict) else {}

    def fec_encoding(self) -> str:
        fec = self.load().get("fec")
        if isinstance(fec, dict) and fec.get("encoding"):
            return str(fec["encoding"])
        return DEFAULT_FEC_ENCODING

    def next_numero(self, doc_type: str) -> str:
        s = self.load()
        numbering = s.get("numbering", {}) if isinstance(s.get("numbering"), dict) else {}
        prefix = numbering.get(f"{doc_type.lower()}_prefix", DEFAULT_PREFIXES.get(doc_type, "X-"))
        seq_key = f"{doc_type.lower()}_seq"
        seq = int(numbering.get(seq_key, 1))
        numbering[seq_key] = seq + 1
        s["numbering"] = numbering
        dump_json(self.path, s)
        return f"{prefix}{seq:04d}"
