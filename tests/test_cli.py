import json

import pytest

import cli


PROJECT = """
projectName: Shop
applications:
  - id: web
    team: T1
    dependencies: [api]
  - id: api
    team: T2
    dependencies: [web]
  - id: api
    team: T2
"""


@pytest.fixture
def config(tmp_path):
	path = tmp_path / "project.yml"
	path.write_text(PROJECT)
	return str(path)


def test_parse_flag():
	assert cli.parse_flag("true") is True
	assert cli.parse_flag(" Yes ") is True
	assert cli.parse_flag("") is False
	assert cli.parse_flag("0") is False
	with pytest.raises(Exception):
		cli.parse_flag("maybe")


def test_validate_strict_fails(config):
	assert cli.main(["--config", config, "validate"]) == 1


def test_validate_lenient(config, capsys):
	assert cli.main(["--config", config, "--skipValidation", "validate"]) == 0
	out = capsys.readouterr().out
	assert "valid" in out
	assert "api" in out


def test_list(config, capsys):
	cli.main(["--config", config, "--skipValidation", "list"])
	assert capsys.readouterr().out.splitlines() == ["Name: web Id: web", "Name: api Id: api"]


def test_analyze_json_and_fail_on_cycle(config, capsys):
	args = ["--config", config, "--skipValidation", "analyze"]
	assert cli.main(args + ["--json"]) == 0
	report = json.loads(capsys.readouterr().out)
	assert report["applicationCount"] == 2
	assert len(report["cycles"]) == 1
	assert cli.main(args + ["--failOnCycle"]) == 1


def test_graph_unknown_application(config):
	assert cli.main(["--config", config, "--skipValidation", "graph", "--application", "nope"]) == 1


def test_team_graph_output_file(config, tmp_path):
	out = tmp_path / "teams.dot"
	code = cli.main([
		"--config", config, "--skipValidation",
		"teamGraph", "--summaryRelation", "1", "--output", str(out),
	])
	assert code == 0
	assert '"T1" -> "T2"' in out.read_text()


def test_bad_flag_value_is_a_usage_error(config):
	with pytest.raises(SystemExit):
		cli.main(["--config", config, "graph", "--hidePlanned", "perhaps"])


def test_missing_config():
	assert cli.main(["validate"]) == 1
