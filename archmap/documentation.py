from __future__ import annotations

import os
from typing import Dict, Optional

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from .cycles import find_cycles
from .errors import RenderError
from .grouping import DependencyGrouping, application_views, applications_by_group
from .model import Project
from .render import find_icon


DEFAULT_TEMPLATE = os.path.join(os.path.dirname(__file__), "templates", "documentation.html")


def render_documentation(
	project: Project,
	template_path: Optional[str] = None,
	icon_path: Optional[str] = None,
	grouping: DependencyGrouping = DependencyGrouping.GROUP,
) -> str:
	"""Render the living HTML documentation of a project through a Jinja2 template."""
	template_path = template_path or DEFAULT_TEMPLATE
	env = Environment(
		loader=FileSystemLoader(os.path.dirname(os.path.abspath(template_path))),
		autoescape=select_autoescape(["html", "htm", "tmpl"]),
		trim_blocks=True,
		lstrip_blocks=True,
	)
	icons: Dict[str, str] = {}
	for app in project.applications:
		icon = find_icon(icon_path, app)
		if icon:
			icons[app.id] = icon

	try:
		template = env.get_template(os.path.basename(template_path))
		return template.render(
			project=project,
			tree=applications_by_group(project),
			views={view.id: view for view in application_views(project, grouping)},
			dependents={app.id: project.dependents_of(app.id) for app in project.applications},
			cycles=find_cycles(project),
			icons=icons,
		)
	except TemplateError as e:
		raise RenderError(f"Cannot render documentation template {template_path}: {e}") from e
