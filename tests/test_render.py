import re

import pytest

from archmap.errors import RenderError
from archmap.render import (
	RenderOptions,
	TeamGraphOptions,
	find_icon,
	render_graph,
	render_team_graph,
)

from conftest import app_def, make_project


def edges(dot):
	return re.findall(r'"([^"]+)" -> "([^"]+)"', dot)


def sample_project():
	return make_project([
		app_def("web", "api", "search", group="frontend", team="T1", technology="React"),
		app_def("admin", "api", group="frontend", team="T1"),
		app_def("api", "db", group="backend", team="T2"),
		app_def("search", group="backend", team="T2"),
		app_def("db", team="T3"),
		app_def("next", "api", group="frontend", team="T1", status="planned"),
	])


def test_whole_system_graph():
	dot = render_graph(sample_project(), RenderOptions())
	assert dot.startswith('digraph "Test" {')
	assert ('web', 'api') in edges(dot)
	assert len(edges(dot)) == 5
	assert 'subgraph "cluster_frontend"' in dot
	assert 'style="rounded,dashed"' in dot


def test_hide_planned_removes_nodes_and_edges():
	dot = render_graph(sample_project(), RenderOptions(hide_planned=True))
	assert '"next"' not in dot
	assert all("next" not in edge for edge in edges(dot))


def test_application_neighbourhood():
	dot = render_graph(sample_project(), RenderOptions(application="api"))
	assert sorted(edges(dot)) == [("admin", "api"), ("api", "db"), ("next", "api"), ("web", "api")]
	assert '"search"' not in dot


def test_unknown_application_is_an_error():
	with pytest.raises(RenderError, match="missing"):
		render_graph(sample_project(), RenderOptions(application="missing"))


def test_hidden_focus_is_an_error():
	with pytest.raises(RenderError):
		render_graph(sample_project(), RenderOptions(application="next", hide_planned=True))


def test_team_graph_lists_every_relation():
	dot = render_team_graph(sample_project(), TeamGraphOptions())
	assert edges(dot).count(("T1", "T2")) == 4
	assert edges(dot).count(("T2", "T3")) == 1


def test_team_graph_summarized():
	project = make_project([
		app_def("a1", "b1", "b2", team="T1"),
		app_def("a2", "b1", team="T1"),
		app_def("b1", team="T2"),
		app_def("b2", "b1", team="T2"),
	])
	dot = render_team_graph(project, TeamGraphOptions(summarize_relations=True))
	assert edges(dot) == [("T1", "T2")]
	assert "3 relations" in dot


def test_team_graph_hide_planned():
	dot = render_team_graph(sample_project(), TeamGraphOptions(hide_planned=True, summarize_relations=True))
	assert "3 relations" in dot
	assert "4 relations" not in dot


def test_rendering_is_repeatable():
	project = sample_project()
	first = render_graph(project, RenderOptions())
	render_graph(project, RenderOptions(application="web", hide_planned=True))
	assert render_graph(project, RenderOptions()) == first


def test_icons(tmp_path):
	(tmp_path / "react.svg").write_text("<svg/>")
	project = sample_project()
	assert find_icon(str(tmp_path), project.get_application("web")).endswith("react.svg")
	assert find_icon(str(tmp_path), project.get_application("api")) is None
	dot = render_graph(project, RenderOptions(icon_path=str(tmp_path)))
	assert "react.svg" in dot


def test_labels_are_escaped():
	project = make_project([app_def("a", name='Say "hi"')])
	dot = render_graph(project, RenderOptions())
	assert 'label="Say \\"hi\\""' in dot


def test_application_selected_by_display_name():
	project = make_project([
		app_def("checkout", "payment", name="Checkout"),
		app_def("payment", name="Payment"),
	])
	dot = render_graph(project, RenderOptions(application="Checkout"))
	assert edges(dot) == [("checkout", "payment")]
	assert render_graph(project, RenderOptions(application="checkout")) == dot


def test_ambiguous_display_name_is_an_error():
	project = make_project([
		app_def("eu-shop", name="Shop"),
		app_def("us-shop", name="Shop"),
	])
	with pytest.raises(RenderError, match="ambiguous"):
		render_graph(project, RenderOptions(application="Shop"))
	assert '"eu-shop"' in render_graph(project, RenderOptions(application="eu-shop"))
