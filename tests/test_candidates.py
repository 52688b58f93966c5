from itertools import permutations, product
from math import perm

import pytest

from game.errors import InvalidConfiguration
from game.ruleset import DuplicatePolicy
from solver.candidates import count_combinations, generate

NONE = DuplicatePolicy.none()
UNLIMITED = DuplicatePolicy.unlimited()


def test_unlimited_is_cartesian_power_in_stable_order():
    codes = generate(3, ["A", "B", "C", "D"], UNLIMITED)
    assert len(codes) == 4**3
    assert codes == list(product("ABCD", repeat=3))
    assert codes[0] == ("A", "A", "A")


def test_none_three_pegs_three_colors_gives_six_permutations():
    codes = generate(3, ["A", "B", "C"], NONE)
    assert len(codes) == 6
    assert len(set(codes)) == 6
    for c in codes:
        assert sorted(c) == ["A", "B", "C"]


def test_none_elements_are_pairwise_distinct():
    codes = generate(4, list("ABCDEF"), NONE)
    assert len(codes) == perm(6, 4) == 360
    assert all(len(set(c)) == 4 for c in codes)
    assert codes == list(permutations("ABCDEF", 4))


def test_none_with_too_few_colors_is_empty():
    assert generate(4, ["A", "B"], NONE) == []


def test_limited_is_ordered_subset_of_unlimited():
    colors = ["A", "B", "C"]
    limited = generate(4, colors, DuplicatePolicy.limited(2))
    expected = [
        c for c in product(colors, repeat=4)
        if all(c.count(x) <= 2 for x in colors)
    ]
    assert limited == expected
    assert len(limited) == 54


def test_limited_edge_cases_match_other_policies():
    colors = list("ABCD")
    assert generate(3, colors, DuplicatePolicy.limited(1)) == generate(3, colors, NONE)
    assert generate(3, colors, DuplicatePolicy.limited(3)) == generate(3, colors, UNLIMITED)
    assert generate(3, colors, DuplicatePolicy.limited(7)) == generate(3, colors, UNLIMITED)


@pytest.mark.parametrize("code_length,num_colors,policy", [
    (1, 1, UNLIMITED),
    (3, 4, UNLIMITED),
    (4, 6, NONE),
    (3, 3, NONE),
    (4, 3, DuplicatePolicy.limited(2)),
    (5, 4, DuplicatePolicy.limited(2)),
    (5, 3, DuplicatePolicy.limited(3)),
    (4, 5, DuplicatePolicy.limited(1)),
])
def test_count_combinations_matches_generation(code_length, num_colors, policy):
    colors = [f"c{i}" for i in range(num_colors)]
    assert count_combinations(code_length, num_colors, policy) == len(
        generate(code_length, colors, policy)
    )


def test_count_combinations_closed_forms():
    assert count_combinations(4, 6, NONE) == 360
    assert count_combinations(4, 6, UNLIMITED) == 1296
    assert count_combinations(8, 6, UNLIMITED) == 1_679_616


def test_generate_rejects_bad_input():
    with pytest.raises(InvalidConfiguration):
        generate(0, ["A"], UNLIMITED)
    with pytest.raises(InvalidConfiguration):
        generate(2, [], UNLIMITED)
