from __future__ import annotations

import logging

from sentry_metrics.adapters.sentry.sentry_client import SentryClient
from sentry_metrics.common.errors import MalformedResponseError
from sentry_metrics.domain.models import Event, Issue, Project

logger = logging.getLogger(__name__)


def fetch_projects(client: SentryClient) -> list[Project]:
    projects = [Project.from_api(p) for p in client.paginate("/0/projects/")]
    logger.info("Fetched %d projects", len(projects))
    return projects


def fetch_issue(client: SentryClient, issue_id: str) -> Issue:
    """Fetch a single issue with its activity list embedded."""
    payload = client.get_json(f"/0/issues/{issue_id}/")
    if not isinstance(payload, dict):
        raise MalformedResponseError(f"Issue {issue_id} payload is not an object")
    return Issue.from_api(payload)


def fetch_issues(client: SentryClient, project: Project) -> list[Issue]:
    # The listing endpoint omits activities; each page is hydrated before the
    # next listing page is requested.
    path = f"/0/projects/{project.organization_slug}/{project.slug}/issues/"
    issues: list[Issue] = []
    for rows in client.iter_pages(path):
        for row in rows:
            if not isinstance(row, dict) or not row.get("id"):
                raise MalformedResponseError(
                    f"Issue listing for {project.slug!r} has a row without id"
                )
            issues.append(fetch_issue(client, str(row["id"])))
    logger.info("Fetched %d issues for project %s", len(issues), project.slug)
    return issues


def fetch_events(client: SentryClient, issue: Issue) -> list[Event]:
    events = [Event.from_api(e) for e in client.paginate(f"/0/issues/{issue.id}/events/")]
    logger.debug("Fetched %d events for issue #%s", len(events), issue.id)
    return events
