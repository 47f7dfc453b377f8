import random, pytest
from dataclasses import FrozenInstanceError
from jsonstat_table.tool.core.dimension_index import (
    TableConfig, auto_split_point, build_plan, count_header_rows,
    effective_shape, split_dimensions)
from jsonstat_table.tool.core.errors import ConfigError


@pytest.mark.parametrize("seed", [0, 1])
def test_split_reconstructs_effective_shape(seed):
    rng = random.Random(seed)
    for _ in range(200):
        shape = [rng.randint(1, 4) for _ in range(rng.randint(1, 6))]
        exclude = rng.random() < 0.5
        eff = effective_shape(shape, exclude)
        for r in range(len(eff) + 1):
            split = split_dimensions(shape, r, exclude)
            assert split.row_dims + split.col_dims == eff
            assert split.num_one_dim == len(shape) - len(eff)
            plan = build_plan(shape, TableConfig(split_point=r, exclude_one_dim=exclude))
            assert plan.num_value_cols * (plan.total_values // plan.num_value_cols) == plan.total_values
            assert plan.num_body_rows == (plan.total_values // plan.num_value_cols)


def test_scenario_a():
    plan = build_plan([2, 3], TableConfig(split_point=1))
    assert plan.row_dims == (2,)
    assert plan.col_dims == (3,)
    assert plan.num_label_cols == 1
    assert plan.num_value_cols == 3
    assert plan.num_header_rows == 2
    assert plan.total_values == 6


def test_scenario_b_excludes_leading_one_dim():
    plan = build_plan([1, 2, 3], TableConfig(exclude_one_dim=True))
    assert plan.shape == (2, 3)
    assert plan.full_shape == (1, 2, 3)
    assert plan.row_dims == (2,)
    assert plan.col_dims == (3,)
    assert plan.num_one_dim == 1
    assert plan.num_header_rows == 2
    assert plan.total_values == 6


def test_exclude_only_leading_run():
    assert effective_shape([1, 1, 3, 1, 2], True) == (3, 1, 2)
    assert effective_shape([2, 1, 3], True) == (2, 1, 3)
    assert effective_shape([1, 1], True) == ()
    assert effective_shape([1, 2], False) == (1, 2)


@pytest.mark.parametrize("shape,expected", [
    ([], 0), ([5], 1), ([2, 3], 1), ([2, 3, 4], 1), ([2, 3, 4, 5], 2), ([1, 2, 3, 4, 5, 6], 4),
])
def test_auto_split_point(shape, expected):
    assert auto_split_point(shape) == expected


def test_all_one_dims_excluded_gives_single_cell():
    plan = build_plan([1, 1], TableConfig(exclude_one_dim=True))
    assert plan.row_dims == () and plan.col_dims == ()
    assert plan.num_label_cols == 0
    assert plan.num_value_cols == 1
    assert plan.num_header_rows == 1
    assert plan.total_values == 1


@pytest.mark.parametrize("n_cols,no_label,expected", [
    (0, False, 1), (0, True, 1), (1, False, 2), (1, True, 1), (3, False, 6), (3, True, 5),
])
def test_count_header_rows(n_cols, no_label, expected):
    assert count_header_rows([2] * n_cols, no_label) == expected


@pytest.mark.parametrize("split_point", [-1, 3])
def test_split_point_out_of_range(split_point):
    with pytest.raises(ConfigError):
        split_dimensions([2, 3], split_point)


def test_split_point_checked_against_effective_shape():
    split_dimensions([1, 2, 3], 3)
    with pytest.raises(ConfigError):
        split_dimensions([1, 2, 3], 3, exclude_one_dim=True)


@pytest.mark.parametrize("shape", [[], [2, 0], [3, -1], [2, "x"], [True, 2]])
def test_malformed_shape(shape):
    with pytest.raises(ConfigError):
        build_plan(shape)


def test_plan_is_immutable_and_recomputation_is_idempotent():
    a = build_plan([2, 3, 4], TableConfig(split_point=2))
    b = build_plan([2, 3, 4], TableConfig(split_point=1))
    c = build_plan([2, 3, 4], TableConfig(split_point=2))
    assert a == c
    assert a != b
    with pytest.raises(FrozenInstanceError):
        a.split_point = 0
