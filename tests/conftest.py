from textwrap import dedent

import pytest

from archmap.build import build_project
from archmap.model import ProjectDefinition


@pytest.fixture
def write_yaml(tmp_path):
	def write(name, text):
		path = tmp_path / name
		path.parent.mkdir(parents=True, exist_ok=True)
		path.write_text(dedent(text))
		return str(path)
	return write


def make_project(applications, name="Test", **extra):
	"""Build a project straight from plain dicts, skipping the YAML layer."""
	data = {"projectName": name, "applications": applications}
	data.update(extra)
	return build_project(ProjectDefinition.model_validate(data))


def app_def(app_id, *targets, **fields):
	data = {"id": app_id, "dependencies": [{"target": t} for t in targets]}
	data.update(fields)
	return data
