"""
Client for the GitHub REST API calls needed to provision a starter repository.

All network interaction with GitHub goes through GitHubRepositoryClient: the
authenticated-user lookup, repository creation and the ref/tree/commit
sequence that pushes every template file as a single commit.
"""
import logging
from typing import Any, Dict, Optional

import requests
from github import Auth, BadCredentialsException, Github, GithubException, RateLimitExceededException

from config import API_URL, GITHUB_API_VERSION, REQUEST_TIMEOUT
from errors import AuthError, ConflictError, NetworkError, ProviderError, RateLimitError
from models import Identity, RepositoryRecord

logger = logging.getLogger(__name__)

INITIAL_COMMIT_MESSAGE = 'Initial commit with project setup'
# Regular, non-executable file
BLOB_MODE = '100644'


class GitHubRepositoryClient:
    """GitHub REST client bound to one user's access token"""

    def __init__(self, access_token: str, api_url: str = API_URL,
                 timeout: float = REQUEST_TIMEOUT, session: Optional[requests.Session] = None):
        self.access_token = access_token
        self.api_url = api_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION
        }

    def close(self):
        self.session.close()

    def get_authenticated_identity(self) -> Identity:
        """
        Look up the account that owns the access token

        Raises:
            AuthError: If the token is invalid or expired
            RateLimitError: If GitHub throttles the request
        """
        g = Github(auth=Auth.Token(self.access_token), base_url=self.api_url,
                   timeout=self.timeout, retry=None)
        try:
            user = g.get_user()
            identity = Identity(
                login=user.login,
                name=user.name,
                id=user.id,
                avatar_url=user.avatar_url
            )
        except BadCredentialsException as e:
            logger.error(f"GitHub authentication error: {e.status}")
            raise AuthError("Invalid GitHub token. Please re-authenticate") from e
        except RateLimitExceededException as e:
            raise RateLimitError("GitHub API rate limit exceeded. Please try again later.") from e
        except GithubException as e:
            logger.error(f"GitHub user lookup failed: {e.status} - {e.data}")
            raise ProviderError(f"GitHub API error: {_message(e.data)}", status=e.status, body=e.data) from e
        except requests.RequestException as e:
            raise NetworkError(f"Network error calling GitHub API: {e}") from e
        finally:
            g.close()

        logger.info(f"Authenticated as GitHub user: {identity.login}")
        return identity

    def create_repository(self, name: str, description: str, private: bool = False,
                          auto_init: bool = True) -> RepositoryRecord:
        """
        Create a repository owned by the authenticated user

        Raises:
            ConflictError: If the account already has a repository with this name
            AuthError: If the token is invalid
            RateLimitError: If GitHub throttles the request
        """
        payload = {
            "name": name,
            "description": description,
            "private": private,
            "auto_init": auto_init
        }
        logger.info(f"Creating repository: {name}")
        repo_data = self._request("POST", "/user/repos", payload)

        record = RepositoryRecord(
            name=_field(repo_data, "name"),
            full_name=_field(repo_data, "full_name"),
            default_branch=repo_data.get("default_branch") or "main",
            url=_field(repo_data, "html_url")
        )
        logger.info(f"Repository created: {record.full_name}")
        return record

    def commit_files(self, repository: RepositoryRecord, template_set: Dict[str, str],
                     message: str = INITIAL_COMMIT_MESSAGE) -> str:
        """
        Push every file of ``template_set`` to the default branch as one commit

        The default branch and its head SHA are resolved first; the tree and
        commit are created next and the branch ref is moved last, so a failure
        part-way leaves the branch at its previous commit.

        Returns:
            SHA of the new commit
        """
        repo_path = f"/repos/{repository.full_name}"

        repo_data = self._request("GET", repo_path)
        default_branch = repo_data.get("default_branch") or repository.default_branch

        ref = self._request("GET", f"{repo_path}/git/ref/heads/{default_branch}")
        parent_sha = _field(ref, "object", "sha")

        tree = self._request("POST", f"{repo_path}/git/trees", {
            "base_tree": parent_sha,
            "tree": [
                {"path": path, "mode": BLOB_MODE, "type": "blob", "content": content}
                for path, content in template_set.items()
            ]
        })

        commit = self._request("POST", f"{repo_path}/git/commits", {
            "message": message,
            "tree": _field(tree, "sha"),
            "parents": [parent_sha]
        })
        commit_sha = _field(commit, "sha")

        self._request("PATCH", f"{repo_path}/git/refs/heads/{default_branch}", {
            "sha": commit_sha,
            "force": False
        })

        logger.info(f"Committed {len(template_set)} files to {repository.full_name}@{default_branch}: {commit_sha}")
        return commit_sha

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.api_url}{path}"
        logger.info(f"GitHub API request: {method} {path}")
        try:
            response = self.session.request(method, url, headers=self.headers, json=payload,
                                            timeout=self.timeout)
        except requests.Timeout as e:
            logger.error(f"GitHub API timeout after {self.timeout}s: {method} {path}")
            raise NetworkError(f"GitHub API request timed out: {method} {path}") from e
        except requests.RequestException as e:
            logger.error(f"Network error calling GitHub API: {str(e)}")
            raise NetworkError(f"Network error calling GitHub API: {str(e)}") from e

        logger.info(f"GitHub API response status: {response.status_code}")
        if response.status_code >= 400:
            _raise_for_response(method, path, response)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"GitHub API returned a non-JSON body: {response.status_code} {method} {path}")
            raise ProviderError(f"GitHub API returned an unreadable response for {method} {path}",
                                status=response.status_code, body=response.text) from e


def _raise_for_response(method: str, path: str, response: requests.Response):
    try:
        error_data = response.json()
    except ValueError:
        error_data = {"message": response.text}
    error_message = _message(error_data)
    logger.error(f"GitHub API error: {response.status_code} {method} {path} - {error_data}")

    if response.status_code == 401:
        raise AuthError(f"Invalid GitHub token. Please re-authenticate ({error_message})")
    if _is_rate_limited(response, error_message):
        raise RateLimitError("GitHub API rate limit exceeded. Please try again later.")
    if response.status_code == 409 or (response.status_code == 422 and 'already exists' in str(error_data).lower()):
        raise ConflictError(f"Repository already exists: {error_message}")
    raise ProviderError(f"GitHub API error: {error_message}", status=response.status_code, body=error_data)


def _field(data: Any, *keys: str) -> Any:
    value = data
    for key in keys:
        if not isinstance(value, dict) or key not in value:
            raise ProviderError(f"GitHub API response is missing '{'.'.join(keys)}'", body=data)
        value = value[key]
    return value


def _is_rate_limited(response: requests.Response, error_message: str) -> bool:
    if response.status_code == 429:
        return True
    if response.status_code != 403:
        return False
    return response.headers.get('X-RateLimit-Remaining') == '0' or 'rate limit' in error_message.lower()


def _message(error_data: Any) -> str:
    if isinstance(error_data, dict):
        return str(error_data.get('message', 'Unknown error'))
    return str(error_data or 'Unknown error')
