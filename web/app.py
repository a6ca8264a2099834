from __future__ import annotations

import logging
import os
from typing import List, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from archmap.errors import ArchmapError, ConfigParseError
from archmap.fs_scan import list_static_documents
from archmap.grouping import DependencyGrouping, application_views, applications_by_group
from archmap.model import ApplicationView, GroupNode
from archmap.pipeline import load_project

logger = logging.getLogger(__name__)

BUNDLED_FRONTEND = os.path.join(os.path.dirname(__file__), "static")


class DataResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    available_sub_views: List[str] = []
    applications_by_group: GroupNode
    applications: List[ApplicationView] = []
    static_documentations: List[str] = []
    warnings: List[str] = []


def build_data_result(
    config_paths: List[str],
    subview: str = "",
    strict: bool = True,
    documents_folder: Optional[str] = None,
    grouping: DependencyGrouping = DependencyGrouping.GROUP,
) -> DataResult:
    """Load the project for one request and shape it for the front end."""
    result = load_project(config_paths, subview or None, strict=strict)
    project = result.project
    return DataResult(
        name=project.name,
        available_sub_views=project.subview_names(),
        applications_by_group=applications_by_group(project),
        applications=application_views(project, grouping),
        static_documentations=list_static_documents(documents_folder or ""),
        warnings=result.warnings,
    )


def create_app(
    config_paths: List[str],
    strict: bool = True,
    template_folder: Optional[str] = None,
    documents_folder: Optional[str] = None,
    grouping: DependencyGrouping = DependencyGrouping.GROUP,
) -> FastAPI:
    """Build the web app. The static file handlers are created here, once, and shared."""
    if template_folder:
        if not os.path.isdir(template_folder):
            raise ConfigParseError(template_folder, "template folder does not exist")
        logger.info("Using filesystem %s templates for serving", template_folder)
    if documents_folder and not os.path.isdir(documents_folder):
        raise ConfigParseError(documents_folder, "static documents folder does not exist")

    frontend = StaticFiles(directory=template_folder or BUNDLED_FRONTEND, html=True)
    documents = StaticFiles(directory=documents_folder) if documents_folder else None
    paths = list(config_paths)

    app = FastAPI(title="Architecture Map")

    @app.get("/data")
    def data(subview: str = ""):
        """Project tree, applications with grouped dependencies and static document names."""
        try:
            result = build_data_result(paths, subview, strict, documents_folder, grouping)
        except (ArchmapError, OSError) as e:
            logger.error("Cannot load project: %s", e)
            return JSONResponse(status_code=500, content={"Error": str(e)})
        return JSONResponse(content=result.model_dump(mode="json", by_alias=True))

    if documents is not None:
        app.mount("/documents", documents, name="documents")
    app.mount("/", frontend, name="frontend")
    return app
