from __future__ import annotations

import os
from typing import List


DEFINITION_EXTENSIONS = (".yml", ".yaml", ".json")

IGNORED_DIRS = {".git", "node_modules", "dist", "build", "__pycache__"}


def is_definition_file(filename: str) -> bool:
	_, ext = os.path.splitext(filename)
	return ext.lower() in DEFINITION_EXTENSIONS


def find_definition_files(root: str) -> List[str]:
	"""All definition files below ``root``, in a stable (sorted) order."""
	files: List[str] = []
	for dirpath, dirnames, filenames in os.walk(root):
		dirnames[:] = sorted(d for d in dirnames if d not in IGNORED_DIRS)
		for filename in sorted(filenames):
			if is_definition_file(filename):
				files.append(os.path.join(dirpath, filename))
	return files


def list_static_documents(folder: str) -> List[str]:
	"""Names of the plain files directly inside ``folder``; subdirectories are skipped."""
	if not folder:
		return []
	documents: List[str] = []
	for entry in sorted(os.listdir(folder)):
		if os.path.isfile(os.path.join(folder, entry)):
			documents.append(entry)
	return documents
