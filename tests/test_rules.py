# tests/test_rules.py
import pytest

from gridsolver.csp.rules import (
    BlockRule,
    ColumnRule,
    DiagonalRule,
    GroupRule,
    PredicateRule,
    RowRule,
    all_distinct,
    block_size_for,
    build_rules,
    default_rules,
)


@pytest.mark.parametrize(
    "values, expected",
    [
        ((), True),
        ((3,), True),
        ((0, 1, 2, 3), True),
        ((0, 1, 0), False),
        ((2, 2), False),
    ],
)
def test_all_distinct(values, expected):
    assert all_distinct(values) is expected


@pytest.mark.parametrize("rule", [RowRule(4), ColumnRule(4), BlockRule(4, 2)])
def test_builtin_rules_validate_pairwise_distinct(rule):
    assert rule.is_valid([0, 1, 2, 3])
    assert rule.is_valid([3, 1])
    assert not rule.is_valid([0, 1, 1, 3])
    assert rule.is_partial_valid([2, 0])
    assert not rule.is_partial_valid([2, 2])


def test_row_and_column_scope_exclude_self_by_default():
    assert RowRule(4).scope((1, 2)) == [(1, 0), (1, 1), (1, 3)]
    assert ColumnRule(4).scope((1, 2)) == [(0, 2), (2, 2), (3, 2)]
    assert RowRule(4).scope((1, 2), include_self=True) == [(1, 0), (1, 1), (1, 2), (1, 3)]


def test_block_scope():
    group = BlockRule(9, 3).group_of((4, 5))
    assert group == [(i, j) for i in range(3, 6) for j in range(3, 6)]
    assert len(BlockRule(9, 3).scope((4, 5))) == 8


def test_block_is_clipped_at_board_edge():
    assert BlockRule(5, 2).group_of((4, 4)) == [(4, 4)]
    assert BlockRule(5, 2).scope((4, 4)) == []


def test_rectangular_block():
    rule = BlockRule(6, 2, 3)
    assert rule.group_of((3, 4)) == [(2, 3), (2, 4), (2, 5), (3, 3), (3, 4), (3, 5)]


def test_diagonal_rules():
    assert DiagonalRule(4).group_of((1, 2)) == []
    assert DiagonalRule(4).group_of((2, 2)) == [(0, 0), (1, 1), (2, 2), (3, 3)]
    anti = DiagonalRule(4, anti=True)
    assert anti.group_of((1, 2)) == [(0, 3), (1, 2), (2, 1), (3, 0)]
    assert anti.group_of((1, 1)) == []


def test_group_rule_only_touches_its_cells():
    cage = GroupRule([(0, 0), (0, 1), (1, 0)], name="cage")
    assert cage.scope((0, 1)) == [(0, 0), (1, 0)]
    assert cage.scope((2, 2)) == []
    assert not cage.is_valid([1, 1, 0])


def test_predicate_rule_uses_custom_predicate():
    pair_sum = PredicateRule([(0, 0), (0, 1)], predicate=lambda vs: sum(vs) == 3)
    assert pair_sum.is_valid([1, 2])
    assert not pair_sum.is_valid([0, 2])
    # without a partial predicate nothing can be pruned early
    assert pair_sum.is_partial_valid([9])


def test_block_size_for():
    assert block_size_for(4) == 2
    assert block_size_for(9) == 3
    assert block_size_for(6) == 3


def test_build_rules_by_name():
    rules = build_rules(["row", "block", "anti_diagonal"], 9, 9)
    assert [r.name for r in rules] == ["row", "block", "anti_diagonal"]
    assert rules[1].block_height == 3
    assert [r.name for r in default_rules(4, 4)] == ["row", "column", "block"]


def test_build_rules_rejects_unknown_name():
    with pytest.raises(ValueError):
        build_rules(["row", "knight"], 9, 9)
