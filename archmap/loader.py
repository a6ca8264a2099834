from __future__ import annotations

import logging
import os
from typing import Iterable, List, Optional, Set, Union

import yaml
from pydantic import ValidationError

from .errors import ConfigParseError, UnknownSubViewError
from .fs_scan import find_definition_files
from .model import ProjectDefinition, SubView, SubViewDefinition


logger = logging.getLogger(__name__)


def _describe(error: ValidationError) -> str:
	parts: List[str] = []
	for err in error.errors():
		location = ".".join(str(p) for p in err["loc"])
		parts.append(f"{location}: {err['msg']}")
	return "; ".join(parts)


def parse_source(path: str) -> ProjectDefinition:
	"""Read one YAML/JSON definition file into an (unmerged) fragment."""
	try:
		with open(path, "r", encoding="utf-8") as fh:
			data = yaml.safe_load(fh)
	except OSError as e:
		raise ConfigParseError(path, f"cannot read file: {e}") from e
	except yaml.YAMLError as e:
		raise ConfigParseError(path, f"invalid YAML: {e}") from e

	if data is None:
		data = {}
	if not isinstance(data, dict):
		raise ConfigParseError(path, "top level of a definition must be a mapping")

	try:
		fragment = ProjectDefinition.model_validate(data)
	except ValidationError as e:
		raise ConfigParseError(path, _describe(e)) from e

	applications = [app.model_copy(update={"source": path}) for app in fragment.applications]
	return fragment.model_copy(update={"applications": applications, "sources": [path]})


def _expand_includes(including_file: str, includes: Iterable[str]) -> List[str]:
	base = os.path.dirname(os.path.abspath(including_file))
	paths: List[str] = []
	for include in includes:
		path = include if os.path.isabs(include) else os.path.join(base, include)
		if os.path.isdir(path):
			paths.extend(find_definition_files(path))
		elif os.path.isfile(path):
			paths.append(path)
		else:
			raise ConfigParseError(including_file, f"included path {include!r} does not exist")
	return paths


def collect_fragments(paths: Iterable[str]) -> List[ProjectDefinition]:
	"""Parse every source and its includes, depth first, in declaration order."""
	fragments: List[ProjectDefinition] = []
	seen: Set[str] = set()

	def visit(path: str) -> None:
		key = os.path.realpath(path)
		if key in seen:
			logger.debug("Skipping %s, already loaded", path)
			return
		seen.add(key)
		fragment = parse_source(path)
		fragments.append(fragment)
		for included in _expand_includes(path, fragment.include):
			logger.debug("Including %s from %s", included, path)
			visit(included)

	for path in paths:
		if os.path.isdir(path):
			for found in find_definition_files(path):
				visit(found)
		elif os.path.isfile(path):
			visit(path)
		else:
			raise ConfigParseError(path, "definition source does not exist")
	return fragments


def merge_fragments(fragments: List[ProjectDefinition]) -> ProjectDefinition:
	"""Concatenate fragments into one definition tree.

	Application ids seen twice are kept; the validator decides what happens to them.
	"""
	name = next((f.name for f in fragments if f.name), "")
	seen_ids: Set[str] = set()
	for fragment in fragments:
		for app in fragment.applications:
			if app.id in seen_ids:
				logger.warning("Application id %r redefined in %s", app.id, app.source)
			seen_ids.add(app.id)

	return ProjectDefinition(
		name=name,
		applications=[a for f in fragments for a in f.applications],
		groups=[g for f in fragments for g in f.groups],
		teams=[t for f in fragments for t in f.teams],
		subviews=[s for f in fragments for s in f.subviews],
		sources=[s for f in fragments for s in f.sources],
	)


def load_definition(paths: Union[str, List[str]]) -> ProjectDefinition:
	if isinstance(paths, str):
		paths = [paths]
	if not paths:
		raise ConfigParseError("<none>", "no definition source given")
	fragments = collect_fragments(paths)
	definition = merge_fragments(fragments)
	logger.info(
		"Loaded %d applications from %d definition file(s)",
		len(definition.applications),
		len(definition.sources),
	)
	return definition


def split_group_path(path: str) -> List[str]:
	"""Split ``"teamA/moduleX"`` into ``["teamA", "moduleX"]``, ignoring empty segments."""
	return [segment.strip() for segment in (path or "").split("/") if segment.strip()]


def normalize_group_path(path: str) -> str:
	return "/".join(split_group_path(path))


def subview_from_definition(definition: SubViewDefinition) -> SubView:
	return SubView(
		name=definition.name,
		description=definition.description,
		applications=tuple(definition.applications),
		groups=tuple(normalize_group_path(g) for g in definition.groups),
		teams=tuple(definition.teams),
		statuses=tuple(definition.statuses),
	)


def resolve_subview(definition: ProjectDefinition, name: Optional[str]) -> Optional[SubView]:
	"""Look up a declared subview by name. An empty name means no filtering."""
	if not name:
		return None
	for subview in definition.subviews:
		if subview.name == name:
			return subview_from_definition(subview)
	raise UnknownSubViewError(name, definition.subview_names())
