from __future__ import annotations

import logging
import os
from typing import Dict, List, Optional, Set, Tuple

from pydantic import BaseModel

from .errors import RenderError
from .grouping import applications_by_group
from .model import Application, GroupNode, Project, Status


logger = logging.getLogger(__name__)

ICON_EXTENSIONS = (".png", ".svg", ".jpg")


class RenderOptions(BaseModel):
	application: Optional[str] = None
	icon_path: Optional[str] = None
	hide_planned: bool = False


class TeamGraphOptions(BaseModel):
	summarize_relations: bool = False
	hide_planned: bool = False


def quote(value: str) -> str:
	return '"' + value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n") + '"'


def _attrs(attributes: Dict[str, str]) -> str:
	if not attributes:
		return ""
	return " [" + ", ".join(f"{key}={quote(value)}" for key, value in attributes.items()) + "]"


def find_icon(icon_path: Optional[str], application: Application) -> Optional[str]:
	"""First existing ``<icon_path>/<technology><ext>`` for the application, if any."""
	if not icon_path or not application.technology:
		return None
	stem = application.technology.strip().lower()
	for ext in ICON_EXTENSIONS:
		candidate = os.path.join(icon_path, stem + ext)
		if os.path.isfile(candidate):
			return candidate
	return None


def visible_applications(project: Project, hide_planned: bool) -> List[Application]:
	return [app for app in project.applications if not (hide_planned and app.is_planned)]


def _node(app: Application, icon_path: Optional[str], extra: Optional[Dict[str, str]] = None) -> str:
	attributes: Dict[str, str] = {"label": app.name}
	tooltip = app.summary or app.description
	if tooltip:
		attributes["tooltip"] = tooltip
	if app.status == Status.PLANNED:
		attributes["style"] = "rounded,dashed"
	elif app.status == Status.DEPRECATED:
		attributes["fillcolor"] = "lightgrey"
	icon = find_icon(icon_path, app)
	if icon:
		attributes["image"] = icon
		attributes["labelloc"] = "b"
	if extra:
		attributes.update(extra)
	return f"{quote(app.id)}{_attrs(attributes)};"


def _edge(source: str, target: str, label: Optional[str] = None) -> str:
	attributes = {"label": label} if label else {}
	return f"{quote(source)} -> {quote(target)}{_attrs(attributes)};"


def _header(name: str) -> List[str]:
	return [
		f"digraph {quote(name or 'architecture')} {{",
		"  rankdir=LR;",
		'  node [shape=box, style="rounded,filled", fillcolor=white];',
	]


def _emit_group(node: GroupNode, visible: Set[str], icon_path: Optional[str], lines: List[str], depth: int) -> None:
	indent = "  " * depth
	for app in node.applications:
		if app.id in visible:
			lines.append(indent + _node(app, icon_path))
	for child in node.sub_groups:
		if not any(app.id in visible for app in child.iter_applications()):
			continue
		lines.append(f"{indent}subgraph {quote('cluster_' + child.path)} {{")
		lines.append(f"{indent}  label={quote(child.title or child.name)};")
		_emit_group(child, visible, icon_path, lines, depth + 1)
		lines.append(f"{indent}}}")


def render_system_graph(project: Project, options: RenderOptions) -> str:
	"""One node per application (clustered by group), one edge per dependency."""
	apps = visible_applications(project, options.hide_planned)
	visible = {app.id for app in apps}

	lines = _header(project.name)
	_emit_group(applications_by_group(project), visible, options.icon_path, lines, 1)
	for app in apps:
		for dep in app.dependencies:
			# dangling targets (e.g. outside a subview) are not drawn
			if dep.target in visible:
				lines.append("  " + _edge(app.id, dep.target, dep.relation))
	lines.append("}")
	return "\n".join(lines) + "\n"


def find_application(project: Project, key: str) -> Application:
	"""Application by id, or else by its display name when that name is unique."""
	found = project.get_application(key)
	if found is not None:
		return found
	named = [app for app in project.applications if app.name == key]
	if not named:
		raise RenderError(f"Application {key!r} not found in project")
	if len(named) > 1:
		ids = ", ".join(app.id for app in named)
		raise RenderError(f"Application name {key!r} is ambiguous ({ids})")
	return named[0]


def render_application_graph(project: Project, options: RenderOptions) -> str:
	"""The named application with its direct dependencies and dependents."""
	app_id = options.application or ""
	focus = find_application(project, app_id)
	if options.hide_planned and focus.is_planned:
		raise RenderError(f"Application {app_id!r} is planned and planned applications are hidden")

	apps = visible_applications(project, options.hide_planned)
	index = {app.id: app for app in apps}
	nodes: Dict[str, Application] = {focus.id: focus}
	edges: List[str] = []

	for dep in focus.dependencies:
		target = index.get(dep.target)
		if target is None:
			continue
		nodes.setdefault(target.id, target)
		edges.append(_edge(focus.id, target.id, dep.relation))

	for source in apps:
		if source.id == focus.id:
			continue
		for dep in source.dependencies:
			if dep.target == focus.id:
				nodes.setdefault(source.id, source)
				edges.append(_edge(source.id, focus.id, dep.relation))

	lines = _header(f"{project.name} {focus.name}".strip())
	for app in nodes.values():
		extra = {"penwidth": "2"} if app.id == focus.id else None
		lines.append("  " + _node(app, options.icon_path, extra))
	lines.extend("  " + edge for edge in edges)
	lines.append("}")
	return "\n".join(lines) + "\n"


def render_graph(project: Project, options: RenderOptions) -> str:
	if options.application:
		return render_application_graph(project, options)
	return render_system_graph(project, options)


def render_team_graph(project: Project, options: TeamGraphOptions) -> str:
	"""Teams as nodes, cross-team dependencies as edges.

	With ``summarize_relations`` every ordered pair of teams gets a single edge.
	"""
	apps = visible_applications(project, options.hide_planned)
	index = {app.id: app for app in apps}

	members: Dict[str, int] = {}
	for app in apps:
		if app.team:
			members[app.team] = members.get(app.team, 0) + 1

	relations: List[Tuple[str, str, str]] = []
	for app in apps:
		if not app.team:
			continue
		for dep in app.dependencies:
			target = index.get(dep.target)
			if target is None or not target.team or target.team == app.team:
				continue
			label = f"{app.name} -> {target.name}"
			if dep.relation:
				label += f" ({dep.relation})"
			relations.append((app.team, target.team, label))

	lines = _header(f"{project.name} teams".strip())
	declared = [team.name for team in project.teams if team.name in members]
	for name in declared + [n for n in members if n not in declared]:
		count = members[name]
		label = f"{name}\n{count} application{'s' if count != 1 else ''}"
		lines.append(f"  {quote(name)}{_attrs({'label': label})};")

	if options.summarize_relations:
		counts: Dict[Tuple[str, str], int] = {}
		for source, target, _ in relations:
			counts[(source, target)] = counts.get((source, target), 0) + 1
		for (source, target), count in counts.items():
			lines.append("  " + _edge(source, target, f"{count} relation{'s' if count != 1 else ''}"))
	else:
		for source, target, label in relations:
			lines.append("  " + _edge(source, target, label))

	lines.append("}")
	logger.debug("Rendered team graph with %d relations", len(relations))
	return "\n".join(lines) + "\n"
