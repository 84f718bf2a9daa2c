import json

import pytest

from activity_engine.categories import (
    ACTIVITY_PRESETS,
    DEFAULT_CATEGORY_TABLE,
    CategoryTable,
    classify_category,
    resolve_preset,
)
from activity_engine.errors import UnknownPresetError
from activity_engine.schema import Category


def test_exact_matches():
    assert classify_category("PICKING_FINISHED") == Category.PICKING
    assert classify_category("MOVE_STOCK") == Category.MOVE_LOTE
    assert classify_category("GOODS_RECEIPT") == Category.ENTRY
    assert classify_category("LOGOFF") == Category.AUTH


def test_empty_and_unknown_default_to_other():
    assert classify_category("") == Category.OTHER
    assert classify_category(None) == Category.OTHER
    assert classify_category("UNKNOWN_XYZ") == Category.OTHER


def test_case_and_separators_are_normalized():
    assert classify_category("picking-finished") == Category.PICKING
    assert classify_category("Inventory Line") == Category.INVENTORY


def test_prefix_and_substring_matches():
    assert classify_category("PICKING_FINISHED_V2") == Category.PICKING
    assert classify_category("APP_MERMA_REGISTER") == Category.WASTE
    assert classify_category("MOVE_STOCK_TRANSFER") == Category.MOVE_LOTE


def test_table_order_breaks_ties():
    first = CategoryTable((("AB", Category.PRINT), ("B", Category.CONFIG)))
    second = CategoryTable((("B", Category.CONFIG), ("AB", Category.PRINT)))
    assert first.classify("XB_AB") == Category.PRINT
    assert second.classify("XB_AB") == Category.CONFIG


def test_extended_table_keeps_default_untouched():
    table = DEFAULT_CATEGORY_TABLE.extended([("recepcion-camion", "ENTRY")])
    assert table.classify("RECEPCION_CAMION") == Category.ENTRY
    assert classify_category("RECEPCION_CAMION") == Category.OTHER


def test_table_from_json(tmp_path):
    path = tmp_path / "codes.json"
    path.write_text(json.dumps({"ETIQUETA": "PRINT"}), encoding="utf-8")
    table = CategoryTable.from_json(str(path))
    assert table.classify("ETIQUETA_CAJA") == Category.PRINT
    assert table.classify("PICKING_LINE") == Category.PICKING


def test_table_from_json_rejects_unknown_category(tmp_path):
    path = tmp_path / "codes.json"
    path.write_text(json.dumps([["ETIQUETA", "LABELS"]]), encoding="utf-8")
    with pytest.raises(ValueError):
        CategoryTable.from_json(str(path))


def test_presets():
    assert resolve_preset("solo_picking") == (Category.PICKING,)
    assert len(resolve_preset("operativa")) == 7
    assert Category.OTHER not in resolve_preset("todo")
    assert {p.id for p in ACTIVITY_PRESETS} == {"solo_picking", "operativa", "todo"}


def test_unknown_preset():
    with pytest.raises(UnknownPresetError):
        resolve_preset("night_owls")
