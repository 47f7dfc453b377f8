import json, pytest
from jsonstat_table.tool.core.errors import LabelLookupError, ReaderError
from jsonstat_table.tool.core.formatter import CellFormatter
from jsonstat_table.tool.core.reader import JsonStatReader


def test_lookups(make_dataset):
    r = JsonStatReader(make_dataset([1, 2, 3], label="Cube"))
    assert r.dimension_sizes() == (1, 2, 3)
    assert r.dimension_sizes(True) == (2, 3)
    assert r.dimension_id(2) == "d2"
    assert r.dimension_label("d1") == "Dim 1"
    assert r.category_id("d2", 1) == "c1"
    assert r.category_label("d2", "c1") == "D2 C1"
    assert r.value_count() == 6
    assert r.values() == list(range(6))
    assert r.document_label() == "Cube"


def test_missing_labels_fall_back(make_dataset):
    data = make_dataset([2], dim_labels=False)
    del data["dimension"]["d0"]["category"]["label"]
    r = JsonStatReader(data)
    assert r.dimension_label("d0") == ""
    assert r.category_label("d0", "c1") == "c1"
    assert r.document_label() is None


def test_index_as_object_and_single_category_without_index():
    data = {
        "version": "2.0", "class": "dataset",
        "id": ["year", "area"], "size": [3, 1],
        "dimension": {
            "year": {"label": "Year", "category": {"index": {"2020": 2, "2018": 0, "2019": 1}}},
            "area": {"label": "Area", "category": {"label": {"CH": "Switzerland"}}},
        },
        "value": [1, 2, 3],
    }
    r = JsonStatReader(data)
    assert [r.category_id("year", i) for i in range(3)] == ["2018", "2019", "2020"]
    assert r.category_id("area", 0) == "CH"
    assert r.category_label("area", "CH") == "Switzerland"


def test_sparse_values_and_status(make_dataset):
    data = make_dataset([2, 2], values={"0": 10, "3": 13})
    data["status"] = {"1": ".."}
    r = JsonStatReader(data)
    assert r.values() == [10, None, None, 13]
    assert r.status(1) == ".."
    assert r.status(2) is None


def test_version_one_layout():
    data = {
        "dataset": {
            "label": "Old",
            "dimension": {
                "id": ["a"], "size": [2],
                "a": {"label": "A", "category": {"index": ["x", "y"]}},
            },
            "value": [1, 2],
        }
    }
    r = JsonStatReader(data)
    assert r.dimension_sizes() == (2,)
    assert r.document_label() == "Old"


@pytest.mark.parametrize("mutate", [
    lambda d: d.pop("dimension"),
    lambda d: d.pop("value"),
    lambda d: d.update(size=[2]),
    lambda d: d["dimension"].pop("d1"),
    lambda d: d.update(value={"9": 1}),
    lambda d: d.update(value=5),
])
def test_malformed_documents(make_dataset, mutate):
    data = make_dataset([2, 2])
    mutate(data)
    with pytest.raises(ReaderError):
        JsonStatReader(data)


def test_unknown_lookups_raise(make_dataset):
    r = JsonStatReader(make_dataset([2, 2]))
    with pytest.raises(LabelLookupError):
        r.dimension_id(2)
    with pytest.raises(LabelLookupError):
        r.dimension_label("nope")
    with pytest.raises(LabelLookupError):
        r.category_id("d0", 2)
    with pytest.raises(LabelLookupError):
        r.category_label("d0", "c9")


def test_from_file_handles_bom(tmp_path, make_dataset):
    p = tmp_path / "cube.json"
    p.write_text(json.dumps(make_dataset([2, 2])), encoding="utf-8-sig")
    assert JsonStatReader.from_file(p).value_count() == 4
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(ReaderError):
        JsonStatReader.from_file(bad)
    with pytest.raises(ReaderError):
        JsonStatReader.from_string("[")


def test_formatter_decimals_from_unit():
    data = {
        "version": "2.0", "class": "dataset",
        "id": ["metric", "year"], "size": [2, 2],
        "dimension": {
            "metric": {"label": "Metric", "category": {
                "index": ["pop", "share"],
                "unit": {"pop": {"decimals": 0}, "share": {"decimals": 2}},
            }},
            "year": {"label": "Year", "category": {"index": ["2020", "2021"]}},
        },
        "value": [1000, 1001.4, 0.5, None],
        "status": {"3": "..."},
    }
    r = JsonStatReader(data)
    f = CellFormatter(r)
    assert f.format(0, 1000) == "1000"
    assert f.format(1, 1001.4) == "1001"
    assert f.format(2, 0.5) == "0.50"
    assert f.format(3, None) == "..."
    assert f.number_format(2) == "0.00"
    assert f.number_format(0) == "0"


def test_formatter_without_units(make_dataset):
    f = CellFormatter(JsonStatReader(make_dataset([2])))
    assert f.format(0, 1.25) == "1.25"
    assert f.format(1, None) == ""
    assert f.format(1, "text") == "text"
    assert f.number_format(0) is None
