from __future__ import annotations

import glob
import json
import logging
import shutil
import threading
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel

from compta.services.errors import DocumentStoreError

log = logging.getLogger(__name__)


def _json_default(o: Any) -> Any:
    if isinstance(o, (date, datetime)):
        return o.isoformat()
    if isinstance(o, Decimal):
        # jamais de float pour les montants
        return str(o)
    raise TypeError(f"Object of type {o.__class__.__name__} is not JSON serializable")


class JsonRepository:
    """
    Stockage JSON d'une liste d'enregistrements, clé primaire configurable.
    - Un fichier illisible lève DocumentStoreError (copie .corrupt.json conservée)
    - Rotation de backups à chaque écriture effective
    """

    def __init__(
        self,
        filepath: Union[str, Path],
        entity_name: str = "entity",
        key: str = "id",
        *,
        backup_enabled: bool = True,
        backup_keep: int = 5,
    ) -> None:
        self.filepath = Path(filepath)
        self.entity_name = entity_name
        self.key = key
        self._lock = threading.Lock()
        self.backup_enabled = backup_enabled
        self.backup_keep = max(0, int(backup_keep))

        try:
            self.filepath.parent.mkdir(parents=True, exist_ok=True)
            if not self.filepath.exists():
                self._write_raw([])
        except OSError as e:
            raise DocumentStoreError(f"Stockage {self.entity_name} inaccessible : {self.filepath} ({e})") from e

    # ---------------- I/O bas niveau ---------------- #

    def _read_raw(self) -> List[Dict[str, Any]]:
        try:
            with self.filepath.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return []
        except json.JSONDecodeError as e:
            backup = self.filepath.with_suffix(".corrupt.json")
            try:
                shutil.copy2(self.filepath, backup)
            except OSError:
                log.warning("Copie de sauvegarde impossible : %s", backup)
            raise DocumentStoreError(f"Fichier {self.entity_name} corrompu : {self.filepath} ({e})") from e
        except OSError as e:
            raise DocumentStoreError(f"Lecture impossible : {self.filepath} ({e})") from e
        if not isinstance(data, list):
            raise DocumentStoreError(f"Format inattendu dans {self.filepath} (liste attendue)")
        return data

    def _rotate_backups(self) -> None:
        if not self.backup_enabled or self.backup_keep <= 0:
            return
        pattern = str(self.filepath.with_suffix(".*.bak.json"))
        files = sorted(glob.glob(pattern))
        for old in files[: max(0, len(files) - self.backup_keep)]:
            Path(old).unlink(missing_ok=True)

    def _write_raw(self, data: Iterable[Mapping[str, Any]]) -> None:
        with self._lock:
            new_dump = json.dumps(list(data), ensure_ascii=False, indent=2, default=_json_default)

            if self.filepath.exists():
                if self.filepath.read_text(encoding="utf-8") == new_dump:
                    return
                if self.backup_enabled:
                    ts = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
                    shutil.copy2(self.filepath, self.filepath.with_suffix(f".{ts}.bak.json"))
                    self._rotate_backups()

            tmp = self.filepath.with_suffix(".tmp")
            tmp.write_text(new_dump, encoding="utf-8")
            tmp.replace(self.filepath)

    @staticmethod
    def _to_dict(item: Union[BaseModel, Mapping[str, Any]]) -> Dict[str, Any]:
        if isinstance(item, BaseModel):
            return item.model_dump(mode="json")
        return dict(item)

    # ---------------- CRUD ---------------- #

    def list_all(self) -> List[Dict[str, Any]]:
        return self._read_raw()

    def get_by_id(self, obj_id: Any) -> Optional[Dict[str, Any]]:
        for it in self._read_raw():
            if str(it.get(self.key)) == str(obj_id):
                return it
        return None

    def add(self, item: Union[BaseModel, Mapping[str, Any]]) -> Dict[str, Any]:
        record = self._to_dict(item)
        k = self.key
        if not record.get(k):
            raise ValueError(f"Cannot add {self.entity_name} without '{k}'")
        data = self._read_raw()
        if any(str(d.get(k)) == str(record[k]) for d in data):
            raise ValueError(f"{self.entity_name} with {k}={record[k]} already exists")
        data.append(record)
        self._write_raw(data)
        return record

    def update(self, item: Union[BaseModel, Mapping[str, Any]]) -> Dict[str, Any]:
        record = self._to_dict(item)
        k = self.key
        obj_id = record.get(k)
        if not obj_id:
            raise ValueError(f"Cannot update {self.entity_name} without '{k}'")
        data = self._read_raw()
        for idx, existing in enumerate(data):
            if str(existing.get(k)) == str(obj_id):
                data[idx] = record
                self._write_raw(data)
                return record
        raise ValueError(f"{self.entity_name} with {k}={obj_id} not found")

    def delete(self, obj_id: Any) -> bool:
        data = self._read_raw()
        new_data = [d for d in data if str(d.get(self.key)) != str(obj_id)]
        changed = len(new_data) != len(data)
        if changed:
            self._write_raw(new_data)
        return changed

    def find(self, predicate: Callable[[Dict[str, Any]], bool]) -> List[Dict[str, Any]]:
        return [r for r in self._read_raw() if predicate(r)]
