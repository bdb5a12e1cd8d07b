# washlab/database/database.py
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, List, Optional, Union
from ..config import Config
from ..errors import PersistenceError

ORDERS_KEY = "washlab_orders"
CUSTOMERS_KEY = "washlab_customers"
TRANSACTIONS_KEY = "washlab_transactions"
ATTENDANCE_KEY = "washlab_attendance"
VOUCHERS_KEY = "washlab_vouchers"


class Database:
    """Local key-value storage: one JSON array document per key"""

    def __init__(self, data_dir: Optional[Union[str, Path]] = None):
        self.data_dir = Path(data_dir) if data_dir else Config.DATA_DIR
        self.logger = logging.getLogger(__name__)

    def connect(self):
        """Make sure the data directory exists"""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            self.logger.info(f"Storage ready at {self.data_dir}")
        except OSError as e:
            self.logger.error(f"Could not prepare storage at {self.data_dir}: {e}")
            raise

    def close(self):
        """Nothing is held open between writes"""
        self.logger.info("Storage closed")

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def read(self, key: str) -> List[Any]:
        """Read the array stored under key; unreadable data reads as empty"""
        path = self._path(key)
        if not path.exists():
            return []
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.error(f"Stored data under '{key}' is unreadable, starting empty: {e}")
            return []

        if not isinstance(data, list):
            self.logger.error(f"Stored data under '{key}' is not a list, starting empty")
            return []
        return data

    def write(self, key: str, records: List[Any]):
        """Replace the array stored under key"""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.data_dir, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(records, f, ensure_ascii=False)
                os.replace(tmp_path, self._path(key))
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except (OSError, TypeError, ValueError) as e:
            self.logger.error(f"Could not write '{key}': {e}")
            raise PersistenceError(key, e) from e

    def append(self, key: str, record: Any):
        """Append one record to the array stored under key"""
        records = self.read(key)
        records.append(record)
        self.write(key, records)
