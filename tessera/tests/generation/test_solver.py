"""Tests for the WFC solver step."""

import random

import pytest

from tessera.core import Category, Position
from tessera.generation.wfc import (
    ContradictionPolicy,
    SolverState,
    WFCSolver,
    create_grid,
)


FULL = {Category.SAND, Category.WATER, Category.GRASS}


class FirstChoice:
    """Random source that always takes the first candidate and records calls."""

    def __init__(self):
        self.calls: list[list] = []

    def choice(self, seq):
        self.calls.append(list(seq))
        return seq[0]


class PreferChoice(FirstChoice):
    """Takes `preferred` when offered, otherwise the first candidate."""

    def __init__(self, preferred: Category):
        super().__init__()
        self.preferred = preferred

    def choice(self, seq):
        self.calls.append(list(seq))
        return self.preferred if self.preferred in seq else seq[0]


def run_to_quiescence(solver: WFCSolver, limit: int = 10_000) -> list[SolverState]:
    """Step until COMPLETE or STUCK, returning every state seen."""
    states = []
    for _ in range(limit):
        state = solver.step()
        states.append(state)
        if state in (SolverState.COMPLETE, SolverState.STUCK):
            return states
    raise AssertionError("solver did not settle")


class TestTermination:
    """A grid of W x H cells resolves in exactly W x H steps."""

    @pytest.mark.parametrize("width,height", [(1, 1), (1, 5), (4, 1), (3, 3), (8, 6)])
    @pytest.mark.parametrize("seed", [0, 1, 99])
    def test_exactly_width_times_height_steps(self, rules, width, height, seed):
        grid = create_grid(width, height)
        solver = WFCSolver(grid, rules, rng=random.Random(seed))

        states = run_to_quiescence(solver)

        assert states[:-1] == [SolverState.RUNNING] * (width * height)
        assert states[-1] == SolverState.COMPLETE
        assert solver.step_count == width * height
        assert grid.is_complete()

    def test_step_after_completion_is_noop(self, rules, rng):
        grid = create_grid(2, 2)
        solver = WFCSolver(grid, rules, rng=rng)
        solver.solve()
        before = grid.snapshot()

        assert solver.step() == SolverState.COMPLETE
        assert solver.step() == SolverState.COMPLETE
        assert grid.snapshot() == before
        assert solver.step_count == 4
        assert solver.last_collapsed is None

    def test_solve_returns_true(self, rules, rng):
        grid = create_grid(5, 5)
        assert WFCSolver(grid, rules, rng=rng).solve() is True

    @pytest.mark.slow
    def test_default_size_grid_completes(self, rules, rng):
        grid = create_grid(32, 32)
        solver = WFCSolver(grid, rules, rng=rng)
        assert solver.solve()
        assert solver.step_count == 32 * 32


class TestStepProperties:
    """Per-step invariants checked over whole runs."""

    @pytest.mark.parametrize("seed", [3, 17, 2024])
    def test_invariants_hold_for_every_step(self, rules, seed):
        grid = create_grid(6, 5)
        solver = WFCSolver(grid, rules, rng=random.Random(seed))

        while True:
            before = {s.position: s for s in grid.snapshot()}
            state = solver.step()
            if state == SolverState.COMPLETE:
                break
            after = {s.position: s for s in grid.snapshot()}

            collapsed = solver.last_collapsed
            neighbor_positions = set(collapsed.neighbors().values())

            newly_resolved = [
                pos for pos in after if after[pos].resolved and not before[pos].resolved
            ]
            # Single collapse per step
            assert newly_resolved == [collapsed]

            for pos, old in before.items():
                new = after[pos]

                # Monotonic resolution
                if old.resolved:
                    assert new == old
                    continue

                # Neighbour-only propagation
                if pos != collapsed and pos not in neighbor_positions:
                    assert new == old
                    continue

                # Domain non-growth except the reset rule
                if pos != collapsed:
                    if pos in solver.last_reset:
                        assert new.domain == frozenset(FULL)
                    else:
                        assert new.domain <= old.domain

    def test_collapse_value_comes_from_domain(self, rules, rng):
        grid = create_grid(3, 3)
        grid.get_cell(1, 1).domain = {Category.WATER, Category.SAND}
        solver = WFCSolver(grid, rules, rng=rng)

        solver.step()

        assert solver.last_collapsed == Position(1, 1)
        assert grid.get_cell(1, 1).category in {Category.WATER, Category.SAND}


class TestSelection:
    """Minimum-entropy selection with positional tie-break."""

    def test_lowest_entropy_cell_selected(self, rules, rng):
        grid = create_grid(3, 3)
        grid.get_cell(2, 2).domain = {Category.SAND, Category.GRASS}
        solver = WFCSolver(grid, rules, rng=rng)

        solver.step()

        assert solver.last_collapsed == Position(2, 2)

    def test_ties_go_to_first_cell_in_row_major_order(self, rules):
        grid = create_grid(2, 2)
        solver = WFCSolver(grid, rules, rng=FirstChoice())

        solver.step()
        assert solver.last_collapsed == Position(0, 0)
        assert grid.get_cell(0, 0).category == Category.SAND

        # Sand leaves neighbours untouched, so every cell still ties
        solver.step()
        assert solver.last_collapsed == Position(1, 0)

    def test_empty_domain_cells_never_selected(self, rules, rng):
        grid = create_grid(2, 1)
        grid.get_cell(0, 0).domain = set()
        solver = WFCSolver(grid, rules, rng=rng)

        solver.step()

        assert solver.last_collapsed == Position(1, 0)
        assert not grid.get_cell(0, 0).resolved

    def test_propagation_narrowed_cell_is_not_resolved(self, rules):
        """A domain of one from propagation still needs its own collapse."""
        grid = create_grid(2, 1)
        grid.get_cell(0, 0).domain = {Category.WATER, Category.GRASS}
        grid.get_cell(1, 0).domain = {Category.WATER}
        solver = WFCSolver(grid, rules, rng=FirstChoice())

        solver.step()

        assert solver.last_collapsed == Position(1, 0)
        left = grid.get_cell(0, 0)
        assert left.domain == {Category.WATER}
        assert not left.resolved
        assert left.snapshot().category is None

    def test_preferred_choice_used_when_valid(self, rules):
        grid = create_grid(2, 1)
        grid.get_cell(1, 0).domain = {Category.WATER, Category.GRASS}
        solver = WFCSolver(grid, rules, rng=PreferChoice(Category.GRASS))

        solver.step()

        assert grid.get_cell(1, 0).category == Category.GRASS
        assert grid.get_cell(0, 0).domain == {Category.SAND, Category.GRASS}


class TestConstraintFilteredChoice:
    """The neighbour filter on collapse candidates."""

    def test_candidates_filtered_by_resolved_neighbor(self, rules):
        grid = create_grid(2, 1)
        grid.get_cell(0, 0).collapse_to(Category.WATER)
        source = FirstChoice()
        solver = WFCSolver(grid, rules, rng=source)

        solver.step()

        # Grass cannot sit next to water; the rest are offered in registry order
        assert source.calls == [[Category.SAND, Category.WATER]]

    def test_unconstrained_cell_offers_whole_domain(self, rules):
        grid = create_grid(1, 1)
        source = FirstChoice()
        WFCSolver(grid, rules, rng=source).step()
        assert source.calls == [[Category.SAND, Category.WATER, Category.GRASS]]

    def test_fallback_when_no_candidate_is_valid(self, rules):
        """Middle of a 1x3 column forced incompatible with both neighbours."""
        grid = create_grid(1, 3)
        grid.get_cell(0, 0).collapse_to(Category.GRASS)
        grid.get_cell(0, 2).collapse_to(Category.GRASS)
        grid.get_cell(0, 1).domain = {Category.WATER}
        source = FirstChoice()
        solver = WFCSolver(grid, rules, rng=source)

        state = solver.step()

        middle = grid.get_cell(0, 1)
        assert state == SolverState.RUNNING
        assert middle.resolved
        assert middle.category == Category.WATER
        assert source.calls == [[Category.WATER]]
        assert len(grid.violations(rules)) == 2

    def test_fallback_draws_from_whole_pre_filter_domain(self, rules):
        grid = create_grid(3, 1)
        grid.get_cell(0, 0).collapse_to(Category.WATER)
        grid.get_cell(2, 0).collapse_to(Category.GRASS)
        grid.get_cell(1, 0).domain = {Category.WATER, Category.GRASS}
        source = FirstChoice()
        solver = WFCSolver(grid, rules, rng=source)

        solver.step()

        assert source.calls == [[Category.WATER, Category.GRASS]]
        assert grid.get_cell(1, 0).resolved


class TestPropagation:
    """Narrowing neighbour domains after a collapse."""

    def test_water_removes_grass_from_neighbors(self, rules):
        grid = create_grid(3, 3)
        grid.get_cell(1, 1).domain = {Category.WATER}
        solver = WFCSolver(grid, rules, rng=random.Random(5))

        solver.step()

        assert grid.get_cell(1, 1).category == Category.WATER
        for pos in Position(1, 1).neighbors().values():
            assert grid.get_cell(*pos).domain == {Category.SAND, Category.WATER}
        assert solver.last_propagated == set(Position(1, 1).neighbors().values())

    def test_diagonal_cells_untouched(self, rules):
        grid = create_grid(3, 3)
        grid.get_cell(1, 1).domain = {Category.WATER}
        WFCSolver(grid, rules, rng=random.Random(5)).step()

        for x, y in [(0, 0), (2, 0), (0, 2), (2, 2)]:
            assert grid.get_cell(x, y).domain == FULL

    def test_sand_leaves_neighbors_unchanged(self, rules):
        grid = create_grid(3, 3)
        grid.get_cell(1, 1).domain = {Category.SAND}
        solver = WFCSolver(grid, rules, rng=random.Random(5))

        solver.step()

        assert solver.last_propagated == set()
        for pos in Position(1, 1).neighbors().values():
            assert grid.get_cell(*pos).domain == FULL

    def test_resolved_neighbors_not_modified(self, rules):
        grid = create_grid(2, 1)
        grid.get_cell(1, 0).collapse_to(Category.GRASS)
        grid.get_cell(0, 0).domain = {Category.WATER}
        WFCSolver(grid, rules, rng=FirstChoice()).step()

        assert grid.get_cell(1, 0).domain == {Category.GRASS}

    def test_emptied_neighbor_resets_to_full_set(self, rules):
        grid = create_grid(3, 1)
        grid.get_cell(0, 0).domain = {Category.GRASS}
        grid.get_cell(1, 0).domain = {Category.WATER}
        solver = WFCSolver(grid, rules, rng=FirstChoice())

        state = solver.step()

        assert state == SolverState.RUNNING
        assert solver.last_collapsed == Position(0, 0)
        assert grid.get_cell(1, 0).domain == FULL
        assert solver.last_reset == {Position(1, 0)}

    def test_tolerant_policy_never_gets_stuck(self, rules):
        grid = create_grid(10, 10)
        solver = WFCSolver(grid, rules, rng=random.Random(7))

        states = run_to_quiescence(solver)

        assert SolverState.STUCK not in states
        assert SolverState.CONTRADICTION not in states
        assert not grid.is_stuck()


class TestStrictPolicy:
    """The strict-fail alternative to resetting emptied domains."""

    def test_emptied_neighbor_reports_contradiction(self, rules):
        grid = create_grid(3, 1)
        grid.get_cell(0, 0).domain = {Category.GRASS}
        grid.get_cell(1, 0).domain = {Category.WATER}
        solver = WFCSolver(grid, rules, rng=FirstChoice(), policy=ContradictionPolicy.STRICT_FAIL)

        state = solver.step()

        assert state == SolverState.CONTRADICTION
        assert grid.get_cell(1, 0).domain == set()
        assert solver.last_reset == set()
        assert grid.is_stuck()

    def test_strict_run_ends_stuck(self, rules):
        grid = create_grid(3, 1)
        grid.get_cell(0, 0).domain = {Category.GRASS}
        grid.get_cell(1, 0).domain = {Category.WATER}
        solver = WFCSolver(grid, rules, rng=FirstChoice(), policy="strict")

        states = run_to_quiescence(solver)

        assert states[0] == SolverState.CONTRADICTION
        assert states[-1] == SolverState.STUCK
        assert solver.solve() is False
        assert grid.resolved_count == 2


class TestDeterminism:
    """Seeded random sources give reproducible grids."""

    def test_same_seed_same_grid(self, rules):
        grids = []
        for _ in range(2):
            grid = create_grid(12, 9)
            WFCSolver(grid, rules, rng=random.Random(42)).solve()
            grids.append(grid.category_rows())
        assert grids[0] == grids[1]

    def test_different_seeds_differ(self, rules):
        """Could theoretically be equal but extremely unlikely."""
        grids = []
        for seed in (1, 2):
            grid = create_grid(12, 9)
            WFCSolver(grid, rules, rng=random.Random(seed)).solve()
            grids.append(grid.category_rows())
        assert grids[0] != grids[1]


class TestSolverReset:
    """Solver.reset reuses the same grid."""

    def test_reset_clears_grid_and_counters(self, rules, rng):
        grid = create_grid(2, 2)
        solver = WFCSolver(grid, rules, rng=rng)
        solver.solve()

        solver.reset()

        assert solver.step_count == 0
        assert solver.last_collapsed is None
        for cell in grid.all_cells():
            assert cell.domain == FULL
            assert not cell.resolved
