"""Tests for GitHubRepositoryClient: error mapping, repository creation, multi-file commit."""
from unittest.mock import MagicMock, patch

import pytest
import requests
from github import BadCredentialsException, GithubException, RateLimitExceededException

from conftest import make_response
from errors import AuthError, ConflictError, NetworkError, ProviderError, RateLimitError
from github_client import BLOB_MODE, INITIAL_COMMIT_MESSAGE, GitHubRepositoryClient
from models import RepositoryRecord

API = "https://api.github.com"


def _make_client(*responses):
    session = MagicMock(spec=requests.Session)
    session.request.side_effect = list(responses)
    return GitHubRepositoryClient("tok", session=session), session


def _calls(session):
    return [(c.args[0], c.args[1]) for c in session.request.call_args_list]


# ─────────────────────── create_repository ───────────────────────


class TestCreateRepository:
    def test_creates_public_auto_initialised_repository(self):
        client, session = _make_client(make_response(201, {
            "name": "vite-typescript-project",
            "full_name": "octocat/vite-typescript-project",
            "default_branch": "main",
            "html_url": "https://github.com/octocat/vite-typescript-project",
            "clone_url": "https://github.com/octocat/vite-typescript-project.git",
        }))

        record = client.create_repository("vite-typescript-project", "A vite project with typescript")

        assert record == RepositoryRecord(
            name="vite-typescript-project",
            full_name="octocat/vite-typescript-project",
            default_branch="main",
            url="https://github.com/octocat/vite-typescript-project",
        )

        call = session.request.call_args
        assert call.args == ("POST", f"{API}/user/repos")
        assert call.kwargs["json"] == {
            "name": "vite-typescript-project",
            "description": "A vite project with typescript",
            "private": False,
            "auto_init": True,
        }
        assert call.kwargs["headers"]["Authorization"] == "Bearer tok"
        assert call.kwargs["timeout"] == 30

    def test_existing_name_raises_conflict(self):
        client, _ = _make_client(make_response(422, {
            "message": "Repository creation failed.",
            "errors": [{"resource": "Repository", "field": "name", "message": "name already exists on this account"}],
        }))
        with pytest.raises(ConflictError):
            client.create_repository("vite-typescript-project", "desc")

    def test_unauthorized_raises_auth_error(self):
        client, _ = _make_client(make_response(401, {"message": "Bad credentials"}))
        with pytest.raises(AuthError):
            client.create_repository("x", "desc")

    def test_exhausted_rate_limit_raises_rate_limit_error(self):
        client, _ = _make_client(make_response(
            403, {"message": "API rate limit exceeded"}, headers={"X-RateLimit-Remaining": "0"}
        ))
        with pytest.raises(RateLimitError):
            client.create_repository("x", "desc")

    def test_too_many_requests_raises_rate_limit_error(self):
        client, _ = _make_client(make_response(429, {"message": "slow down"}))
        with pytest.raises(RateLimitError):
            client.create_repository("x", "desc")

    def test_other_failures_raise_provider_error(self):
        client, _ = _make_client(make_response(500, {"message": "boom"}))
        with pytest.raises(ProviderError) as exc_info:
            client.create_repository("x", "desc")
        assert exc_info.value.status == 500
        assert exc_info.value.body == {"message": "boom"}

    def test_plain_forbidden_is_provider_error(self):
        client, _ = _make_client(make_response(403, {"message": "Resource not accessible"}))
        with pytest.raises(ProviderError):
            client.create_repository("x", "desc")

    def test_timeout_raises_network_error(self):
        client, _ = _make_client(requests.Timeout("read timed out"))
        with pytest.raises(NetworkError):
            client.create_repository("x", "desc")

    def test_connection_error_raises_network_error(self):
        client, _ = _make_client(requests.ConnectionError("refused"))
        with pytest.raises(NetworkError):
            client.create_repository("x", "desc")


# ─────────────────────── commit_files ───────────────────────


class TestCommitFiles:
    FILES = {"README.md": "# hi", ".gitignore": "node_modules", "src/App.tsx": "app"}

    def _happy_responses(self):
        return (
            make_response(200, {"default_branch": "main"}),
            make_response(200, {"ref": "refs/heads/main", "object": {"sha": "parent-sha"}}),
            make_response(201, {"sha": "tree-sha"}),
            make_response(201, {"sha": "commit-sha"}),
            make_response(200, {"ref": "refs/heads/main", "object": {"sha": "commit-sha"}}),
        )

    def test_resolves_branch_and_sha_before_building_tree(self, repository):
        client, session = _make_client(*self._happy_responses())

        sha = client.commit_files(repository, self.FILES)

        assert sha == "commit-sha"
        repo = f"{API}/repos/octocat/vite-typescript-project"
        assert _calls(session) == [
            ("GET", repo),
            ("GET", f"{repo}/git/ref/heads/main"),
            ("POST", f"{repo}/git/trees"),
            ("POST", f"{repo}/git/commits"),
            ("PATCH", f"{repo}/git/refs/heads/main"),
        ]

    def test_one_blob_entry_per_file(self, repository):
        client, session = _make_client(*self._happy_responses())

        client.commit_files(repository, self.FILES)

        tree_body = session.request.call_args_list[2].kwargs["json"]
        assert tree_body["base_tree"] == "parent-sha"
        assert len(tree_body["tree"]) == len(self.FILES)
        assert {entry["path"]: entry["content"] for entry in tree_body["tree"]} == self.FILES
        assert all(entry["mode"] == BLOB_MODE and entry["type"] == "blob" for entry in tree_body["tree"])

    def test_commit_has_resolved_sha_as_sole_parent(self, repository):
        client, session = _make_client(*self._happy_responses())

        client.commit_files(repository, self.FILES)

        commit_body = session.request.call_args_list[3].kwargs["json"]
        assert commit_body == {"message": INITIAL_COMMIT_MESSAGE, "tree": "tree-sha", "parents": ["parent-sha"]}
        ref_body = session.request.call_args_list[4].kwargs["json"]
        assert ref_body == {"sha": "commit-sha", "force": False}

    def test_uses_branch_reported_by_repository(self, repository):
        responses = list(self._happy_responses())
        responses[0] = make_response(200, {"default_branch": "trunk"})
        client, session = _make_client(*responses)

        client.commit_files(repository, self.FILES)

        assert _calls(session)[1][1].endswith("/git/ref/heads/trunk")
        assert _calls(session)[4][1].endswith("/git/refs/heads/trunk")

    def test_failure_leaves_ref_untouched(self, repository):
        client, session = _make_client(
            make_response(200, {"default_branch": "main"}),
            make_response(200, {"object": {"sha": "parent-sha"}}),
            make_response(422, {"message": "tree invalid"}),
        )

        with pytest.raises(ProviderError):
            client.commit_files(repository, self.FILES)

        assert [method for method, _ in _calls(session)] == ["GET", "GET", "POST"]

    def test_unreadable_ref_response_raises_provider_error(self, repository):
        proxy_page = make_response(200, text="<html>proxy</html>")
        proxy_page.content = b"<html>proxy</html>"
        proxy_page.json.side_effect = ValueError("Expecting value")
        client, session = _make_client(make_response(200, {"default_branch": "main"}), proxy_page)

        with pytest.raises(ProviderError) as exc_info:
            client.commit_files(repository, self.FILES)

        assert exc_info.value.status == 200
        assert exc_info.value.body == "<html>proxy</html>"
        assert len(_calls(session)) == 2

    def test_ref_without_sha_raises_provider_error(self, repository):
        client, session = _make_client(
            make_response(200, {"default_branch": "main"}),
            make_response(200, {"ref": "refs/heads/main"}),
        )

        with pytest.raises(ProviderError, match="object.sha"):
            client.commit_files(repository, self.FILES)

        assert "PATCH" not in [method for method, _ in _calls(session)]


# ─────────────────────── get_authenticated_identity ───────────────────────


class TestAuthenticatedIdentity:
    @patch("github_client.Github")
    def test_returns_identity(self, mock_github):
        mock_github.return_value.get_user.return_value = MagicMock(
            login="octocat", id=1, avatar_url="https://avatars/1"
        )
        mock_github.return_value.get_user.return_value.name = "The Octocat"

        identity = GitHubRepositoryClient("tok").get_authenticated_identity()

        assert identity.login == "octocat"
        assert identity.name == "The Octocat"
        assert identity.id == 1
        mock_github.return_value.close.assert_called_once()

    @patch("github_client.Github")
    def test_bad_credentials_raise_auth_error(self, mock_github):
        mock_github.return_value.get_user.side_effect = BadCredentialsException(401, {"message": "Bad credentials"}, None)
        with pytest.raises(AuthError):
            GitHubRepositoryClient("tok").get_authenticated_identity()

    @patch("github_client.Github")
    def test_rate_limit_raises_rate_limit_error(self, mock_github):
        mock_github.return_value.get_user.side_effect = RateLimitExceededException(403, {"message": "rate"}, None)
        with pytest.raises(RateLimitError):
            GitHubRepositoryClient("tok").get_authenticated_identity()

    @patch("github_client.Github")
    def test_other_github_failure_raises_provider_error(self, mock_github):
        mock_github.return_value.get_user.side_effect = GithubException(502, {"message": "bad gateway"}, None)
        with pytest.raises(ProviderError) as exc_info:
            GitHubRepositoryClient("tok").get_authenticated_identity()
        assert exc_info.value.status == 502

    @patch("github_client.Github")
    def test_network_failure_raises_network_error(self, mock_github):
        mock_github.return_value.get_user.side_effect = requests.ConnectionError("down")
        with pytest.raises(NetworkError):
            GitHubRepositoryClient("tok").get_authenticated_identity()

    @patch("github_client.Github")
    def test_fractional_timeout_is_passed_through(self, mock_github):
        mock_github.return_value.get_user.return_value = MagicMock(login="octocat", id=1, avatar_url=None)
        mock_github.return_value.get_user.return_value.name = None

        GitHubRepositoryClient("tok", timeout=0.5).get_authenticated_identity()

        assert mock_github.call_args.kwargs["timeout"] == 0.5
