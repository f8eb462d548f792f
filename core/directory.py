"""Operator directory and work order catalog"""

import csv
import logging
from typing import Dict, Iterable, Optional, Protocol, Tuple

from core.models import Operator, WorkOrder
from utils.exceptions import ConfigurationError, EmptyCodeError, UnknownIdentityError

logger = logging.getLogger(__name__)


class OperatorDirectory(Protocol):
    def lookup(self, code: str) -> Optional[Operator]:
        """Return the operator for a raw code, or None when not found."""


def resolve_operator(directory: OperatorDirectory, code: str) -> Operator:
    """Look up a code, raising for empty codes and directory misses."""
    cleaned = (code or "").strip()
    if not cleaned:
        raise EmptyCodeError("Empty operator code")
    operator = directory.lookup(cleaned)
    if operator is None:
        raise UnknownIdentityError(cleaned)
    return operator


class DemoOperatorDirectory:
    """Stand-in directory: known cards map to named operators, any other code
    gets a synthesized identity."""

    KNOWN_OPERATORS: Dict[str, Operator] = {
        '000000001': Operator('op-1', 'Ahmet'),
        'ahmet': Operator('op-1', 'Ahmet'),
        '000000002': Operator('op-2', 'Lider'),
        'lider': Operator('op-2', 'Lider'),
    }

    def lookup(self, code: str) -> Optional[Operator]:
        cleaned = code.strip()
        if not cleaned:
            return None
        known = self.KNOWN_OPERATORS.get(cleaned) or self.KNOWN_OPERATORS.get(cleaned.lower())
        if known:
            return known
        return Operator('op-x', f"Operatör ({cleaned})")


class WorkOrderCatalog:
    """Read-only, ordered list of selectable work orders"""

    def __init__(self, work_orders: Iterable[WorkOrder]):
        self._work_orders: Tuple[WorkOrder, ...] = tuple(work_orders)

    def work_orders(self) -> Tuple[WorkOrder, ...]:
        return self._work_orders

    def find(self, work_order_id: str) -> Optional[WorkOrder]:
        for order in self._work_orders:
            if order.id == work_order_id:
                return order
        return None

    def __len__(self) -> int:
        return len(self._work_orders)


DEMO_WORK_ORDERS: Tuple[WorkOrder, ...] = (
    WorkOrder('1', 'WO-1001', 'LACOSTE POLO', 'Dikiş', 'Lacivert', 'M', 45),
    WorkOrder('2', 'WO-1002', 'LACOSTE TSHIRT', 'Overlok', 'Beyaz', 'L', 60),
    WorkOrder('3', 'WO-1003', 'LACOSTE SWEAT', 'Reçme', 'Siyah', 'S', 35),
)

CSV_COLUMNS = ('id', 'wo', 'model', 'operation', 'color', 'size', 'target_pph')
CSV_ENCODINGS = ('utf-8-sig', 'cp1254', 'utf-8')


def demo_catalog() -> WorkOrderCatalog:
    return WorkOrderCatalog(DEMO_WORK_ORDERS)


def load_catalog_from_csv(path: str) -> WorkOrderCatalog:
    """Load work orders from a CSV file with the columns in CSV_COLUMNS."""
    for encoding in CSV_ENCODINGS:
        try:
            with open(path, 'r', encoding=encoding, newline='') as file:
                rows = list(csv.DictReader(file))
            break
        except UnicodeDecodeError:
            continue
        except OSError as e:
            raise ConfigurationError(f"Work order file cannot be read: {path} ({e})") from e
    else:
        raise ConfigurationError(f"Unknown encoding of work order file: {path}")

    work_orders = []
    for line_no, row in enumerate(rows, start=2):
        missing = [column for column in CSV_COLUMNS if not (row.get(column) or "").strip()]
        if missing:
            raise ConfigurationError(f"{path}:{line_no}: missing {', '.join(missing)}")
        try:
            work_orders.append(WorkOrder(
                id=row['id'].strip(),
                wo=row['wo'].strip(),
                model=row['model'].strip(),
                operation=row['operation'].strip(),
                color=row['color'].strip(),
                size=row['size'].strip(),
                target_pph=float(row['target_pph']),
            ))
        except ValueError as e:
            raise ConfigurationError(f"{path}:{line_no}: {e}") from e

    logger.info("Loaded %d work orders from %s", len(work_orders), path)
    return WorkOrderCatalog(work_orders)
