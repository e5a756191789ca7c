import csv
import io
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from zee_ordering.config import Settings, settings as default_settings
from zee_ordering.repositories.product_repo import ProductRepository
from zee_ordering.utils.logger import get_logger
from zee_ordering.utils.numbers import parse_int, parse_price

log = get_logger("import")

REQUIRED_COLUMNS = {"sku": "skucode", "name": "remark"}

# product field -> (normalized source header, coercion)
OPTIONAL_COLUMNS: Dict[str, Tuple[str, Callable]] = {
    "brand": ("brandname", str),
    "price": ("mrp", parse_price),
    "category": ("category", str),
    "stock": ("stockqty", parse_int),
    "min_qty": ("minqty", parse_int),
    "image_url": ("imagepath", str),
    "code": ("code", str),
    "item_name": ("itemname", str),
    "supplier_name": ("suppname", str),
}

MISSING_COLUMNS_MESSAGE = (
    "Sheet must have header columns at least: SKUCode, Remark. Optional: BrandName, "
    "MRP, Category, StockQty, ImagePath, Code, ItemName, SuppName, MinQty."
)

_NON_ALNUM = re.compile(r"[^a-z0-9]")


class ImportServiceException(Exception):
    pass


@dataclass
class ImportResult:
    imported: int = 0
    skipped: int = 0


def normalize_header(value) -> str:
    """'SKU Code' -> 'skucode', 'Brand-Name' -> 'brandname'."""
    return _NON_ALNUM.sub("", str(value if value is not None else "").strip().lower())


def decode_upload(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        # latin-1 maps every byte
        return data.decode("latin-1")


def parse_csv(text: str) -> List[List[str]]:
    """Split CSV text into rows, dropping empty lines; comma-only rows are kept."""
    reader = csv.reader(io.StringIO(text))
    return [row for row in reader if row and (len(row) > 1 or row[0].strip())]


class ColumnMap:
    """Header positions for one import, resolved once from the header row."""

    def __init__(self, header: Sequence[str]):
        normalized = [normalize_header(h) for h in header]
        self.index = {}
        for pos, name in enumerate(normalized):
            # first occurrence wins
            self.index.setdefault(name, pos)
        self.missing = [src for src in REQUIRED_COLUMNS.values() if src not in self.index]

    def cell(self, row: Sequence[str], source: str) -> str:
        pos = self.index.get(source)
        if pos is None or pos >= len(row):
            return ""
        value = row[pos]
        return "" if value is None else str(value).strip()

    def map_row(self, row: Sequence[str]) -> Optional[Tuple[str, Dict]]:
        """
        Return ``(sku, fields)`` or None when sku or name is blank.
        Blank or unparsable optional cells are left out of ``fields``.
        """
        sku = self.cell(row, REQUIRED_COLUMNS["sku"])
        name = self.cell(row, REQUIRED_COLUMNS["name"])
        if not sku or not name:
            return None
        fields = {"name": name}
        for field, (source, coerce) in OPTIONAL_COLUMNS.items():
            if source not in self.index:
                continue
            raw = self.cell(row, source)
            if not raw:
                continue
            value = coerce(raw)
            if value is None:
                continue
            fields[field] = value
        return sku, fields


class ImportService:
    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or default_settings
        self.repo = ProductRepository(db)

    @property
    def batch_size(self) -> int:
        return max(1, self.settings.IMPORT_BATCH_SIZE)

    def import_csv(self, data: bytes) -> ImportResult:
        rows = parse_csv(decode_upload(data))
        if len(rows) < 2:
            raise ImportServiceException("Empty CSV")
        columns = ColumnMap(rows[0])
        if columns.missing:
            raise ImportServiceException("CSV must have 'SKUCode' and 'Remark' columns.")
        return self._import(columns, rows[1:], source="csv")

    def import_sheet_values(self, values: List[List[str]]) -> ImportResult:
        if len(values) < 2:
            return ImportResult()
        columns = ColumnMap(values[0])
        if columns.missing:
            raise ImportServiceException(MISSING_COLUMNS_MESSAGE)
        return self._import(columns, values[1:], source="sheets")

    def _import(self, columns: ColumnMap, rows: List[List[str]], source: str) -> ImportResult:
        result = ImportResult()
        records = []
        for row in rows:
            mapped = columns.map_row(row)
            if mapped is None:
                result.skipped += 1
                continue
            records.append(mapped)

        # a chunk commits or rolls back as a unit; earlier chunks stay committed
        if self.db.in_transaction():
            self.db.commit()
        for start in range(0, len(records), self.batch_size):
            chunk = records[start:start + self.batch_size]
            with self.db.begin():
                result.imported += self.repo.upsert_many(chunk)
            log.debug("%s import: committed rows %d-%d", source, start + 1, start + len(chunk))

        log.info(
            "%s import finished: imported=%d skipped=%d", source, result.imported, result.skipped
        )
        return result
