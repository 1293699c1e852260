"""
Logging utilities for tracking visitor activity across the site.
"""

import logging

from flask import request

logger = logging.getLogger(__name__)


def log_project_visit(project_name, project_display_name=None):
    """
    Log a visit to a project/page.

    Args:
        project_name (str): The project identifier (e.g., 'tic_tac_toe')
        project_display_name (str, optional): Human-readable name for the description.
                                              Defaults to project_name if not provided.
    """
    display_name = project_display_name or project_name
    visitor = request.headers.get('X-Forwarded-For', request.remote_addr) or 'unknown address'

    logger.info("Visit [%s]: Anonymous user at %s visited %s",
                project_name, visitor, display_name)
