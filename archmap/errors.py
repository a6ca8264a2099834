from __future__ import annotations

from typing import List, Optional


class ArchmapError(Exception):
	"""Base class for every error raised while loading or rendering a project."""


class ConfigParseError(ArchmapError):
	def __init__(self, source: str, message: str):
		self.source = source
		super().__init__(f"{source}: {message}")


class UnknownSubViewError(ArchmapError):
	def __init__(self, name: str, available: Optional[List[str]] = None):
		self.name = name
		self.available = list(available or [])
		known = ", ".join(self.available) if self.available else "none declared"
		super().__init__(f"Subview {name!r} is not declared (available: {known})")


class ReferentialIntegrityError(ArchmapError):
	def __init__(self, entity: str, issues: list):
		self.entity = entity
		self.issues = issues
		lines = "; ".join(issue.message for issue in issues)
		super().__init__(f"Invalid project, offending entity {entity!r}: {lines}")


class RenderError(ArchmapError):
	pass
