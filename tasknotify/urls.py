"""URL helpers for a deployment root URL."""

import taskcluster_urls


def ui(root_url: str, path: str) -> str:
    """User-facing URL of a page, e.g. ``ui(root, "tasks/abc")``."""
    return taskcluster_urls.ui(root_url, path)


def api(root_url: str, service: str, version: str, path: str) -> str:
    """URL of a service API endpoint."""
    return taskcluster_urls.api(root_url, service, version, path)


def task_url(root_url: str, task_id: str) -> str:
    return ui(root_url, f"tasks/{task_id}")


def task_group_url(root_url: str, task_group_id: str) -> str:
    return ui(root_url, f"tasks/groups/{task_group_id}")
