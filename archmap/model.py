from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class Status(str, Enum):
	ACTIVE = "active"
	PLANNED = "planned"
	DEPRECATED = "deprecated"


# Raw definitions, as read from the YAML sources. Nothing is resolved here.

class _Definition(BaseModel):
	model_config = ConfigDict(
		populate_by_name=True,
		str_strip_whitespace=True,
		coerce_numbers_to_str=True,
	)

	@model_validator(mode="before")
	@classmethod
	def _drop_nulls(cls, data: Any) -> Any:
		# "applications:" with no value in YAML yields None, treat it as absent
		if isinstance(data, dict):
			return {k: v for k, v in data.items() if v is not None}
		return data


class DependencyDefinition(_Definition):
	target: str = Field(min_length=1)
	relation: Optional[str] = None
	description: str = ""


class ApplicationDefinition(_Definition):
	id: str = Field(min_length=1)
	name: Optional[str] = None
	group: str = ""
	team: Optional[str] = None
	status: Status = Status.ACTIVE
	technology: Optional[str] = None
	summary: str = ""
	description: str = ""
	properties: Dict[str, Any] = {}
	dependencies: List[DependencyDefinition] = []
	source: str = ""

	@field_validator("status", mode="before")
	@classmethod
	def _normalize_status(cls, value: Any) -> Any:
		if isinstance(value, str):
			return value.strip().lower()
		return value

	@field_validator("dependencies", mode="before")
	@classmethod
	def _expand_shorthand(cls, value: Any) -> Any:
		if isinstance(value, list):
			return [{"target": item} if isinstance(item, (str, int)) else item for item in value]
		return value


class GroupDefinition(_Definition):
	path: str = Field(min_length=1)
	title: str = ""
	description: str = ""
	parent: Optional[str] = None


class TeamDefinition(_Definition):
	name: str = Field(min_length=1)
	description: str = ""


class SubViewDefinition(_Definition):
	name: str = Field(min_length=1)
	description: str = ""
	applications: List[str] = []
	groups: List[str] = []
	teams: List[str] = []
	statuses: List[Status] = []


class ProjectDefinition(_Definition):
	name: str = Field("", alias="projectName")
	include: List[str] = []
	applications: List[ApplicationDefinition] = []
	groups: List[GroupDefinition] = []
	teams: List[TeamDefinition] = []
	subviews: List[SubViewDefinition] = Field(default_factory=list, alias="subViews")
	sources: List[str] = []

	def subview_names(self) -> List[str]:
		return [sv.name for sv in self.subviews]


# Typed graph entities. Built once per load and never mutated.

class _Entity(BaseModel):
	model_config = ConfigDict(frozen=True)


class DependencyRef(_Entity):
	target: str
	relation: Optional[str] = None
	description: str = ""


class Application(_Entity):
	id: str
	name: str
	group: str = ""
	team: Optional[str] = None
	status: Status = Status.ACTIVE
	technology: Optional[str] = None
	summary: str = ""
	description: str = ""
	properties: Dict[str, Any] = {}
	dependencies: Tuple[DependencyRef, ...] = ()

	@property
	def is_planned(self) -> bool:
		return self.status == Status.PLANNED


class Group(_Entity):
	path: str
	name: str
	title: str = ""
	description: str = ""
	parent: Optional[str] = None
	implicit: bool = False

	@property
	def label(self) -> str:
		return self.title or self.name


class Team(_Entity):
	name: str
	description: str = ""
	applications: Tuple[str, ...] = ()
	implicit: bool = False


class SubView(_Entity):
	name: str
	description: str = ""
	applications: Tuple[str, ...] = ()
	groups: Tuple[str, ...] = ()
	teams: Tuple[str, ...] = ()
	statuses: Tuple[Status, ...] = ()

	def matches(self, application: Application, ancestry: List[str]) -> bool:
		"""True when any criterion selects the application.

		``ancestry`` holds the application's group path followed by all ancestor paths.
		"""
		if application.id in self.applications:
			return True
		if application.team is not None and application.team in self.teams:
			return True
		if application.status in self.statuses:
			return True
		return any(path in self.groups for path in ancestry)


class Project(_Entity):
	name: str
	applications: Tuple[Application, ...] = ()
	groups: Tuple[Group, ...] = ()
	teams: Tuple[Team, ...] = ()
	subviews: Tuple[SubView, ...] = ()

	def application_index(self) -> Dict[str, Application]:
		index: Dict[str, Application] = {}
		for app in self.applications:
			index.setdefault(app.id, app)
		return index

	def group_index(self) -> Dict[str, Group]:
		return {g.path: g for g in self.groups}

	def get_application(self, app_id: str) -> Optional[Application]:
		return self.application_index().get(app_id)

	def get_group(self, path: str) -> Optional[Group]:
		return self.group_index().get(path)

	def group_ancestry(self, path: str) -> List[str]:
		"""The group path followed by its ancestors, nearest first.

		Stops at a repeated path so a cyclic hierarchy cannot loop forever.
		"""
		groups = self.group_index()
		chain: List[str] = []
		cursor: Optional[str] = path
		while cursor and cursor not in chain:
			chain.append(cursor)
			group = groups.get(cursor)
			cursor = group.parent if group else None
		return chain

	def dependents_of(self, app_id: str) -> List[Application]:
		return [app for app in self.applications if any(d.target == app_id for d in app.dependencies)]

	def subview_names(self) -> List[str]:
		return [sv.name for sv in self.subviews]


# Derived, presentation-only structures.

class _Output(BaseModel):
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IssueKind(str, Enum):
	DUPLICATE_ID = "duplicate_id"
	UNRESOLVED_DEPENDENCY = "unresolved_dependency"
	GROUP_CYCLE = "group_cycle"


class ValidationIssue(_Output):
	kind: IssueKind
	entity: str
	message: str


class GroupNode(_Output):
	path: str
	name: str
	title: str = ""
	applications: List[Application] = []
	sub_groups: List[GroupNode] = []

	def iter_applications(self):
		for app in self.applications:
			yield app
		for child in self.sub_groups:
			yield from child.iter_applications()


class ResolvedDependency(_Output):
	source: str
	target: str
	target_name: str
	target_group: Optional[str] = None
	relation: Optional[str] = None
	description: str = ""
	resolved: bool = True


class DependencyBucket(_Output):
	key: Optional[str] = None
	dependencies: List[ResolvedDependency] = []


class ApplicationView(_Output):
	id: str
	name: str
	group: str
	team: Optional[str] = None
	status: Status
	technology: Optional[str] = None
	summary: str = ""
	description: str = ""
	properties: Dict[str, Any] = {}
	dependencies: List[DependencyRef] = []
	dependencies_grouped: List[DependencyBucket] = []


class AnalysisReport(_Output):
	project: str
	application_count: int
	dependency_count: int
	group_count: int
	team_count: int
	status_counts: Dict[str, int] = {}
	dangling: List[Tuple[str, str]] = []
	cycles: List[List[str]] = []
