import random, pytest
from jsonstat_table.tool.core import strides as st
from jsonstat_table.tool.core.strides import SpanFactor


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_span_factor_total_is_size_times_sub(seed):
    rng = random.Random(seed)
    for _ in range(200):
        dims = [rng.randint(1, 5) for _ in range(rng.randint(1, 5))]
        for i in range(len(dims)):
            f = st.span_factor(dims, i)
            assert f.total == dims[i] * f.sub
            assert f.total == st.product(dims[i:])
        assert st.span_factor(dims, len(dims) - 1).sub == 1


def test_span_factor_values():
    assert st.span_factor([2, 2, 2], 0) == SpanFactor(8, 4)
    assert st.span_factor([2, 2], 0) == SpanFactor(4, 2)
    assert st.span_factor([3, 4, 5], 1) == SpanFactor(20, 5)


@pytest.mark.parametrize("i", [-1, 3])
def test_span_factor_out_of_range(i):
    with pytest.raises(IndexError):
        st.span_factor([2, 3, 4], i)


def test_product_of_empty_is_one():
    assert st.product([]) == 1
    assert st.product([3, 4]) == 12


def test_group_boundaries_two_by_two():
    f = st.span_factor([2, 2], 0)   # (4, 2)
    firsts = [r for r in range(8) if st.is_group_first(r, f)]
    lasts = [r for r in range(8) if st.is_group_last(r, f)]
    assert firsts == [0, 4]
    assert lasts == [2, 6]
    assert [st.category_index(r, f) for r in range(4)] == [0, 0, 1, 1]
    assert [st.starts_span(r, f) for r in range(4)] == [True, False, True, False]


def test_category_index_cycles_with_total():
    f = st.span_factor([3, 2], 0)   # (6, 2)
    assert [st.category_index(i, f) for i in range(12)] == [0, 0, 1, 1, 2, 2] * 2


def test_unravel_row_major():
    shape = [2, 3, 4]
    assert st.unravel(0, shape) == (0, 0, 0)
    assert st.unravel(5, shape) == (0, 1, 1)
    assert st.unravel(23, shape) == (1, 2, 3)
    for offset in range(24):
        i, j, k = st.unravel(offset, shape)
        assert i * 12 + j * 4 + k == offset
    assert st.unravel(0, []) == ()
