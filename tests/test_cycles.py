import itertools

from archmap.cycles import canonical_cycle, find_cycles, format_cycle
from archmap.subview import apply_subview
from archmap.model import SubView

from conftest import app_def, make_project


def as_sets(cycles):
	return [set(c) for c in cycles]


def test_acyclic_graph_has_no_cycles():
	project = make_project([app_def("a", "b", "c"), app_def("b", "c"), app_def("c"), app_def("d", "a")])
	assert find_cycles(project) == []


def test_three_node_cycle():
	project = make_project([app_def("A", "B"), app_def("B", "C"), app_def("C", "A")])
	cycles = find_cycles(project)
	assert len(cycles) == 1
	assert set(cycles[0]) == {"A", "B", "C"}
	assert format_cycle(cycles[0]) == "A -> B -> C -> A"


def test_cycle_found_for_every_declaration_order():
	apps = [app_def("A", "B"), app_def("B", "C"), app_def("C", "A"), app_def("D", "A")]
	for order in itertools.permutations(apps):
		cycles = find_cycles(make_project(list(order)))
		assert {"A", "B", "C"} in as_sets(cycles)


def test_disjoint_cycles_are_all_found():
	project = make_project([
		app_def("a", "b"), app_def("b", "a"),
		app_def("x", "y"), app_def("y", "z"), app_def("z", "x"),
		app_def("lonely"),
	])
	assert sorted(map(sorted, find_cycles(project))) == [["a", "b"], ["x", "y", "z"]]


def test_self_dependency():
	project = make_project([app_def("a", "a")])
	assert find_cycles(project) == [["a"]]


def test_duplicate_edges_report_the_cycle_once():
	project = make_project([app_def("a", "b", "b"), app_def("b", "a")])
	assert find_cycles(project) == [["a", "b"]]


def test_dangling_targets_are_ignored():
	project = make_project([app_def("a", "b"), app_def("b", "a", "outside")])
	filtered = apply_subview(project, SubView(name="only-a", applications=("a",)))
	assert find_cycles(filtered) == []
	assert find_cycles(project) == [["a", "b"]]


def test_canonical_cycle_rotation_and_direction():
	assert canonical_cycle(["b", "c", "a"]) == canonical_cycle(["a", "b", "c"])
	assert canonical_cycle(["c", "b", "a"]) != canonical_cycle(["a", "b", "c"])
	assert canonical_cycle([]) == ()
