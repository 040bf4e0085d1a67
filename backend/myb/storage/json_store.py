import json
import logging
import os
import tempfile
from myb.storage.base import Record, RecordStore, check_collection

logger = logging.getLogger(__name__)


class JsonFileStore(RecordStore):
    def __init__(self, data_dir: str) -> None:
        self.data_dir = data_dir

    def path_for(self, collection: str) -> str:
        return os.path.join(self.data_dir, f"{check_collection(collection)}.json")

    def load(self, collection: str) -> list[Record]:
        path = self.path_for(collection)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            self._create_empty(path)
            return []
        except (OSError, ValueError):
            logger.warning("Unreadable collection treated as empty", extra={"path": path})
            return []
        if not isinstance(data, list):
            logger.warning("Collection document is not a list; treated as empty", extra={"path": path})
            return []
        return [row for row in data if isinstance(row, dict)]

    def _create_empty(self, path: str) -> None:
        # exclusive create: never clobbers a document a concurrent save just wrote
        os.makedirs(self.data_dir, exist_ok=True)
        try:
            with open(path, "x", encoding="utf-8") as f:
                f.write("[]")
        except FileExistsError:
            pass

    def save(self, collection: str, records: list[Record]) -> None:
        path = self.path_for(collection)
        os.makedirs(self.data_dir, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.data_dir, prefix=f".{collection}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
