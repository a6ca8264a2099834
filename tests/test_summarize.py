from archmap.documentation import render_documentation
from archmap.summarize import analyze_project, format_report, list_applications

from conftest import app_def, make_project


def cyclic_project():
	return make_project([
		app_def("A", "B", group="core", team="T1", name="Alpha"),
		app_def("B", "C", group="core"),
		app_def("C", "A", "gone", status="deprecated"),
	], name="Loop")


def test_analysis_report():
	report = analyze_project(cyclic_project())
	assert report.application_count == 3
	assert report.dependency_count == 4
	assert report.status_counts == {"active": 2, "planned": 0, "deprecated": 1}
	assert report.dangling == [("C", "gone")]
	assert [set(c) for c in report.cycles] == [{"A", "B", "C"}]

	text = format_report(report)
	assert "Project Loop: 3 applications" in text
	assert "A -> B -> C -> A" in text
	assert "C -> gone" in text


def test_report_without_cycles():
	report = analyze_project(make_project([app_def("a", "b"), app_def("b")]))
	assert report.cycles == []
	assert "No cyclic dependencies" in format_report(report)


def test_list_applications():
	assert list_applications(cyclic_project())[0] == "Name: Alpha Id: A"


def test_documentation_default_template():
	html = render_documentation(cyclic_project())
	assert "<h1>Loop</h1>" in html
	assert 'id="app-A"' in html
	assert "A -&gt; B -&gt; C -&gt; A" in html
	assert "gone (unknown)" in html


def test_documentation_custom_template(tmp_path):
	template = tmp_path / "custom.tmpl"
	template.write_text("{% for app in project.applications %}{{ app.id }};{% endfor %}")
	assert render_documentation(cyclic_project(), str(template)) == "A;B;C;"
