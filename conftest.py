import pytest


def build_dataset(sizes, label=None, values=None, dim_labels=True):
    ids = [f"d{i}" for i in range(len(sizes))]
    dimension = {}
    for i, (dim_id, size) in enumerate(zip(ids, sizes)):
        cats = [f"c{k}" for k in range(size)]
        category = {"index": cats, "label": {c: f"D{i} C{k}" for k, c in enumerate(cats)}}
        dimension[dim_id] = {"category": category}
        if dim_labels:
            dimension[dim_id]["label"] = f"Dim {i}"
    total = 1
    for s in sizes:
        total *= s
    data = {
        "version": "2.0",
        "class": "dataset",
        "id": ids,
        "size": list(sizes),
        "dimension": dimension,
        "value": list(range(total)) if values is None else values,
    }
    if label is not None:
        data["label"] = label
    return data


@pytest.fixture
def make_dataset():
    return build_dataset
