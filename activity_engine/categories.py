"""Operation-type classification and activity presets.

The device fleet reports free-text operation codes. They are mapped onto
the fixed :class:`~activity_engine.schema.Category` set by an ordered table:
exact match first, then the first entry (in declaration order) whose key
appears inside the normalized code. New codes are added as table data via
:meth:`CategoryTable.extended` or :meth:`CategoryTable.from_json`.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from activity_engine.errors import UnknownPresetError
from activity_engine.schema import Category

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[-\s]")

DEFAULT_CATEGORY_ENTRIES: tuple[tuple[str, Category], ...] = (
    # Picking
    ("PICKING_FINISHED", Category.PICKING),
    ("PICKING_STARTED", Category.PICKING),
    ("PICKING_LINE", Category.PICKING),
    ("PICKING_PARTIAL", Category.PICKING),
    ("PICKING_CANCELLED", Category.PICKING),
    ("ORDER_CLOSED", Category.PICKING),
    ("ORDER_LINE", Category.PICKING),
    ("CLOSE_ORDER", Category.PICKING),
    ("FINISH_PICKING", Category.PICKING),
    # Coil moves
    ("MOVE_BOBINA", Category.MOVE_BOBINA),
    ("MOVIMIENTO_BOBINA", Category.MOVE_BOBINA),
    ("MOV_BOBINA", Category.MOVE_BOBINA),
    # Lot moves
    ("MOVE_LOTE", Category.MOVE_LOTE),
    ("MOVIMIENTO_LOTE", Category.MOVE_LOTE),
    ("MOV_LOTE", Category.MOVE_LOTE),
    ("MOVE_STOCK", Category.MOVE_LOTE),
    # Inventory
    ("INVENTORY_START", Category.INVENTORY),
    ("INVENTORY_LINE", Category.INVENTORY),
    ("INVENTORY_CLOSE", Category.INVENTORY),
    ("INVENTORY_FINISHED", Category.INVENTORY),
    ("INVENTARIO", Category.INVENTORY),
    ("INV_LINE", Category.INVENTORY),
    # Goods entry
    ("ENTRY_GOODS", Category.ENTRY),
    ("ENTRY_LINE", Category.ENTRY),
    ("ENTRY_FINISHED", Category.ENTRY),
    ("ENTRADA", Category.ENTRY),
    ("GOODS_RECEIPT", Category.ENTRY),
    # Waste
    ("MERMA_REGISTER", Category.WASTE),
    ("MERMA_LINE", Category.WASTE),
    ("MERMA", Category.WASTE),
    ("WASTE", Category.WASTE),
    # Tare
    ("TARA_REGISTER", Category.TARE),
    ("TARA_LINE", Category.TARE),
    ("TARA", Category.TARE),
    ("TARE", Category.TARE),
    # Printing
    ("PRINT_LABEL", Category.PRINT),
    ("PRINT_DOCUMENT", Category.PRINT),
    ("IMPRIMIR", Category.PRINT),
    ("PRINT", Category.PRINT),
    # Device setup
    ("CONFIG", Category.CONFIG),
    ("CONFIGURACION", Category.CONFIG),
    ("SETUP", Category.CONFIG),
    # Session
    ("LOGIN", Category.AUTH),
    ("LOGON", Category.AUTH),
    ("LOGOUT", Category.AUTH),
    ("LOGOFF", Category.AUTH),
    ("SCAN", Category.AUTH),
)


def normalize_code(operation_type: Optional[str]) -> str:
    """Upper-case a raw code and turn hyphens/whitespace into underscores."""

    if not operation_type:
        return ""
    return _SEPARATORS.sub("_", str(operation_type).upper())


@dataclass(frozen=True)
class CategoryTable:
    """Ordered ``(code, category)`` pairs; order decides substring ties."""

    entries: tuple[tuple[str, Category], ...]

    def classify(self, operation_type: Optional[str]) -> Category:
        code = normalize_code(operation_type)
        if not code:
            return Category.OTHER

        for key, category in self.entries:
            if key == code:
                return category

        # A prefix is also a substring, so one containment test covers both.
        for key, category in self.entries:
            if key in code:
                return category
        return Category.OTHER

    def extended(self, entries: Iterable[tuple[str, Category | str]]) -> "CategoryTable":
        """Return a table with ``entries`` appended after the current ones."""

        extra = tuple((normalize_code(key), Category(category)) for key, category in entries)
        return CategoryTable(self.entries + extra)

    @classmethod
    def from_json(cls, file_path: str, base: Optional["CategoryTable"] = None) -> "CategoryTable":
        """Extend ``base`` (the default table) with codes from a JSON file.

        The file holds either an object ``{"CODE": "CATEGORY"}`` or a list of
        ``["CODE", "CATEGORY"]`` pairs; list order is kept as written.
        """

        with open(file_path, encoding="utf-8") as handle:
            payload = json.load(handle)

        if isinstance(payload, dict):
            pairs = list(payload.items())
        elif isinstance(payload, list):
            pairs = [tuple(item) for item in payload]
        else:
            raise ValueError("Category map must be an object or a list of pairs")

        table = (base or DEFAULT_CATEGORY_TABLE).extended(pairs)
        logger.info("Loaded %d extra operation codes from %s", len(pairs), file_path)
        return table


DEFAULT_CATEGORY_TABLE = CategoryTable(DEFAULT_CATEGORY_ENTRIES)


def classify_category(operation_type: Optional[str], table: CategoryTable = DEFAULT_CATEGORY_TABLE) -> Category:
    """Map a raw operation type onto its canonical category."""

    return table.classify(operation_type)


def load_category_table(settings) -> CategoryTable:
    """Default table, extended from ``settings.category_map_path`` when set."""

    if settings.category_map_path:
        return CategoryTable.from_json(settings.category_map_path)
    return DEFAULT_CATEGORY_TABLE


@dataclass(frozen=True)
class ActivityPreset:
    id: str
    label: str
    description: str
    categories: tuple[Category, ...]


ACTIVITY_PRESETS: tuple[ActivityPreset, ...] = (
    ActivityPreset(
        id="solo_picking",
        label="Solo Picking",
        description="Only picking counts as operational activity",
        categories=(Category.PICKING,),
    ),
    ActivityPreset(
        id="operativa",
        label="Operativa completa",
        description="Picking, moves, inventory, goods entry, waste and tare",
        categories=(
            Category.PICKING,
            Category.MOVE_BOBINA,
            Category.MOVE_LOTE,
            Category.INVENTORY,
            Category.ENTRY,
            Category.WASTE,
            Category.TARE,
        ),
    ),
    ActivityPreset(
        id="todo",
        label="Todas las operaciones",
        description="Any device operation, including print, config and login",
        categories=tuple(c for c in Category if c is not Category.OTHER),
    ),
)


def resolve_preset(preset_id: str, presets: Iterable[ActivityPreset] = ACTIVITY_PRESETS) -> tuple[Category, ...]:
    """Return the categories of ``preset_id``."""

    for preset in presets:
        if preset.id == preset_id:
            return preset.categories
    raise UnknownPresetError(preset_id)
