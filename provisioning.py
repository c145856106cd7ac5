import logging
from typing import Callable

from starlette.concurrency import run_in_threadpool

from errors import InvalidSelectionError
from github_client import GitHubRepositoryClient
from models import Selection
from project_templates import build_template_set, repository_description, repository_name

logger = logging.getLogger(__name__)


async def provision(selection: Selection, access_token: str,
                    client_factory: Callable[[str], GitHubRepositoryClient] = GitHubRepositoryClient) -> str:
    """
    Create a starter repository for ``selection`` and push its template files

    Each GitHub call runs in the thread pool and is awaited before the next
    one starts. Errors propagate unchanged; a repository that was created
    before a later step failed is left in place.

    Args:
        selection: Framework and language to scaffold
        access_token: GitHub OAuth access token of the user

    Returns:
        Web URL of the new repository

    Raises:
        InvalidSelectionError: If framework or language is missing
    """
    if selection is None or not selection.is_complete:
        raise InvalidSelectionError("Both a framework and a language must be selected")

    client = client_factory(access_token)
    try:
        identity = await run_in_threadpool(client.get_authenticated_identity)
        logger.info(f"Provisioning {selection.framework.value}/{selection.language.value} for {identity.login}")

        repository = await run_in_threadpool(
            client.create_repository,
            repository_name(selection),
            repository_description(selection)
        )

        template_set = build_template_set(selection.framework, selection.language)
        commit_sha = await run_in_threadpool(client.commit_files, repository, template_set)
        logger.info(f"Provisioned {repository.full_name} at {commit_sha}")
    finally:
        client.close()

    return repository.url
