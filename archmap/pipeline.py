from __future__ import annotations

import logging
from typing import List, Optional, Union

from pydantic import BaseModel

from .build import build_project
from .loader import load_definition, resolve_subview
from .model import Project, ProjectDefinition, ValidationIssue
from .subview import apply_subview
from .validate import validate_project


logger = logging.getLogger(__name__)


class LoadResult(BaseModel):
	project: Project
	definition: ProjectDefinition
	issues: List[ValidationIssue] = []

	@property
	def warnings(self) -> List[str]:
		return [issue.message for issue in self.issues]


def load_project(
	paths: Union[str, List[str]],
	subview_name: Optional[str] = None,
	strict: bool = True,
) -> LoadResult:
	"""Load, build and validate a project, then narrow it to a subview if one is named."""
	definition = load_definition(paths)
	subview = resolve_subview(definition, subview_name)
	validated = validate_project(build_project(definition), strict=strict)

	if validated.issues:
		logger.info("Project loaded with %d integrity warning(s)", len(validated.issues))

	project = validated.project
	if subview is not None:
		project = apply_subview(project, subview)
	return LoadResult(project=project, definition=definition, issues=validated.issues)
