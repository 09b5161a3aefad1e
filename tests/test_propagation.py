# tests/test_propagation.py
import pytest

from gridsolver.csp import propagation
from gridsolver.csp.brute_force import compute_exact_domains
from gridsolver.csp.domains import domain_size, domain_values
from gridsolver.csp.propagation import (
    find_collapsed_violation,
    propagate_once,
    propagate_to_fixpoint,
)
from gridsolver.csp.rules import ColumnRule, PredicateRule, RowRule, default_rules
from gridsolver.csp.session import SolverSession
from gridsolver.csp.support import has_support, supported_values, update_cell
from gridsolver.csp.workers import WorkerPool
from gridsolver.errors import Contradiction
from gridsolver.grid.board import Board
from gridsolver.grid.parser import extract_givens, parse_puzzle_string


def latin_session(size, givens=(), max_workers=1):
    rules = [RowRule(size), ColumnRule(size)]
    return SolverSession(size, size, rules=rules, givens=givens, max_workers=max_workers)


def assert_collapse_invariant(board):
    for pos in board.positions():
        cell = board.cell(pos)
        if cell.collapsed:
            assert domain_values(cell.states) == (cell.value,)
        else:
            assert domain_size(cell.states) >= 2


def test_has_support_needs_a_valid_completion():
    rule = RowRule(3)
    assert has_support(rule, 2, [(0,), (0, 1), (0, 1, 2)], 2)
    assert not has_support(rule, 0, [(0,), (1, 2), (0, 1, 2)], 2)
    # both neighbours are forced to the same value: nothing can validate
    assert not has_support(rule, 2, [(1,), (1,), (0, 1, 2)], 2)


def test_has_support_places_value_at_its_group_index():
    ascending = PredicateRule([(0, 0), (0, 1)], predicate=lambda vs: vs[0] < vs[1])
    assert has_support(ascending, 0, [(0, 1), (0, 1)], 0)
    assert not has_support(ascending, 1, [(0, 1), (0, 1)], 0)
    assert has_support(ascending, 1, [(0, 1), (0, 1)], 1)
    assert not has_support(ascending, 0, [(0, 1), (0, 1)], 1)


def test_supported_values_and_update_cell():
    board = Board(3, 3)
    rules = [RowRule(3), ColumnRule(3)]
    board.collapse((0, 0), 0)
    board.collapse((1, 1), 1)
    assert domain_values(supported_values(board, (0, 1), rules)) == (2,)
    assert update_cell(board, (0, 1), rules)
    assert board.is_collapsed((0, 1))
    assert board.cell((0, 1)).value == 2
    # collapsed cells are left alone
    assert not update_cell(board, (0, 1), rules)


def test_sweep_visits_open_cells_in_row_major_order(monkeypatch):
    board = Board(3, 3)
    board.collapse((0, 1), 0)
    board.collapse((2, 0), 1)
    visited = []
    real_update = propagation.update_cell

    def recording_update(b, pos, rules, pool=None):
        visited.append(pos)
        return real_update(b, pos, rules, pool)

    monkeypatch.setattr(propagation, "update_cell", recording_update)
    propagate_once(board, [RowRule(3), ColumnRule(3)])
    assert visited == [(0, 0), (0, 2), (1, 0), (1, 1), (1, 2), (2, 1), (2, 2)]


def test_later_cells_see_narrowing_from_the_same_sweep():
    session = latin_session(2, givens=[((0, 0), 0)])
    # (0,1) and (1,0) collapse first, then (1,1) sees them within the same pass
    assert session.propagate_once()
    assert session.is_solved()
    assert session.sweeps == 1


def test_propagation_is_monotone():
    session = latin_session(4, givens=[((0, 0), 0), ((1, 1), 1)])
    while True:
        before = session.board.masks()
        changed = session.propagate_once()
        after = session.board.masks()
        for pos, mask in after.items():
            assert mask & ~before[pos] == 0
        if not changed:
            break


def test_fixpoint_is_idempotent():
    session = latin_session(4, givens=[((0, 0), 0), ((1, 1), 1)])
    session.propagate_to_fixpoint()
    snapshot = session.board.masks()
    assert session.propagate_once() is False
    assert session.propagate_once() is False
    assert session.board.masks() == snapshot


def test_propagate_to_fixpoint_honours_sweep_cap():
    board = Board(4, 4)
    board.collapse((0, 0), 0)
    board.collapse((1, 1), 1)
    sweeps, converged = propagate_to_fixpoint(board, [RowRule(4), ColumnRule(4)], max_sweeps=1)
    assert sweeps == 1
    assert not converged


def test_scenario_a_domains_agree_with_brute_force():
    givens = [((0, 0), 0), ((1, 1), 1)]
    session = latin_session(4, givens=givens)
    session.propagate_to_fixpoint()
    assert_collapse_invariant(session.board)

    fresh = latin_session(4, givens=givens)
    exact = compute_exact_domains(fresh.board, fresh.rules)
    for pos, mask in session.board.masks().items():
        assert exact[pos] != 0
        # anything pruned by propagation never appears in a valid Latin square
        assert exact[pos] & ~mask == 0


def test_pruning_is_sound_on_small_board():
    givens = [((0, 0), 0), ((1, 1), 0)]
    session = latin_session(3, givens=givens)
    session.propagate_to_fixpoint()
    exact = compute_exact_domains(latin_session(3, givens=givens).board, session.rules)
    assert exact == session.board.masks()
    assert session.board.cell((2, 2)).value == 0
    assert session.domain_of((0, 1)) == {1, 2}


def test_scenario_b_classic_puzzle_is_solved(classic_puzzle):
    text, solution = classic_puzzle
    grid = parse_puzzle_string(text, 9)
    with SolverSession(9, 9, rules=default_rules(9, 9), givens=extract_givens(grid)) as session:
        session.propagate_to_fixpoint()
        assert session.is_solved()
        assert_collapse_invariant(session.board)
        got = [[session.board.cell((r, c)).value + 1 for c in range(9)] for r in range(9)]
    assert got == solution


def test_scenario_c_row_conflict_raises_contradiction():
    session = latin_session(4, givens=[((0, 0), 0), ((0, 1), 0)])
    with pytest.raises(Contradiction) as exc:
        session.propagate_once()
    assert exc.value.position == (0, 2)
    assert session.is_contradiction()
    assert session.state == "contradiction"
    assert session.board.cell((0, 2)).states == 0


def test_parallel_pool_gives_same_domains_as_serial():
    givens = [((0, 0), 0), ((1, 1), 1)]
    serial = latin_session(4, givens=givens)
    serial.propagate_to_fixpoint()
    with latin_session(4, givens=givens, max_workers=4) as parallel:
        parallel.propagate_to_fixpoint()
        assert parallel.board.masks() == serial.board.masks()


def test_update_cell_with_explicit_pool():
    board = Board(2, 2)
    board.collapse((0, 0), 1)
    with WorkerPool(2) as pool:
        assert update_cell(board, (0, 1), [RowRule(2)], pool)
    assert board.cell((0, 1)).value == 0


def strictly_increasing(values):
    return all(a < b for a, b in zip(values, values[1:]))


def test_order_sensitive_custom_rule_agrees_with_brute_force():
    ascending = PredicateRule([(0, 0), (0, 1)], predicate=strictly_increasing)
    session = SolverSession(2, 2, rules=[ascending])
    session.propagate_to_fixpoint()
    assert session.state == "stalled"
    assert session.domain_of((0, 0)) == {0}
    assert session.domain_of((0, 1)) == {1}

    exact = compute_exact_domains(Board(2, 2), [ascending])
    assert exact == session.board.masks()


def test_partial_predicate_sees_group_order():
    run = PredicateRule(
        [(0, 0), (0, 1), (0, 2)],
        predicate=strictly_increasing,
        partial_predicate=strictly_increasing,
    )
    session = SolverSession(3, 3, rules=[run])
    session.propagate_to_fixpoint()
    assert [session.board.cell((0, c)).value for c in range(3)] == [0, 1, 2]
    assert session.domain_of((1, 1)) == {0, 1, 2}

    exact = compute_exact_domains(Board(3, 3), [run])
    assert exact == session.board.masks()


def test_find_collapsed_violation():
    rules = [RowRule(2), ColumnRule(2)]
    board = Board(2, 2)
    board.collapse((0, 0), 0)
    board.collapse((0, 1), 1)
    assert find_collapsed_violation(board, rules) is None
    board.collapse((1, 0), 1)
    board.collapse((1, 1), 1)
    # column 1 holds 1 twice; (0, 1) is its first cell in row-major order
    assert find_collapsed_violation(board, rules) == (0, 1)


def test_rules_that_skip_a_cell_are_not_evaluated_there():
    only_corner = PredicateRule([(0, 0)], predicate=lambda vs: vs[0] == 1)
    board = Board(2, 2)
    for pos in board.positions():
        board.collapse(pos, 1)
    assert find_collapsed_violation(board, [only_corner]) is None


def test_sweep_reports_clash_between_given_cells():
    board = Board(2, 2)
    for pos in board.positions():
        board.collapse(pos, 0)
    with pytest.raises(Contradiction) as exc:
        propagate_once(board, [RowRule(2), ColumnRule(2)])
    assert exc.value.position == (0, 0)
    assert board.is_contradiction()


def test_support_reads_the_board_snapshot(monkeypatch):
    board = Board(2, 2)
    board.collapse((0, 0), 1)
    calls = []
    real_snapshot = Board.choices_snapshot

    def counting_snapshot(self):
        calls.append(1)
        return real_snapshot(self)

    monkeypatch.setattr(Board, "choices_snapshot", counting_snapshot)
    assert domain_values(supported_values(board, (0, 1), [RowRule(2)])) == (0,)
    assert len(calls) == 1
