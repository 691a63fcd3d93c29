import pytest

from droid_factory.config import InstallerConfig
from droid_factory.errors import FetchError, RefNotFoundError
from droid_factory.fetchers import (
    GitHubClient,
    GitLabClient,
    HttpSession,
    github_raw_url,
    gitlab_raw_url,
    is_owner_repo_shorthand,
    join_repo_path,
    normalize_repo_path,
    parse_github_raw_url,
    parse_gitlab_raw_url,
    parse_repo_url,
)

TREE_URL = "https://api.github.com/repos/acme/tools/git/trees/main?recursive=1"


# --- HttpSession ---

def test_get_text(httpx_mock):
    httpx_mock.add_response(url="https://example.com/a.md", text="hello")
    with HttpSession() as session:
        assert session.get_text("https://example.com/a.md") == "hello"


def test_get_404_carries_status(httpx_mock):
    httpx_mock.add_response(url="https://example.com/missing", status_code=404)
    with HttpSession() as session, pytest.raises(FetchError) as exc_info:
        session.get("https://example.com/missing")
    assert exc_info.value.status_code == 404
    assert exc_info.value.not_found
    assert exc_info.value.url == "https://example.com/missing"


def test_get_500(httpx_mock):
    httpx_mock.add_response(url="https://example.com/boom", status_code=500)
    with HttpSession() as session, pytest.raises(FetchError, match="HTTP 500"):
        session.get("https://example.com/boom")


def test_get_follows_redirects(httpx_mock):
    httpx_mock.add_response(
        url="https://example.com/old",
        status_code=302,
        headers={"Location": "https://example.com/new"},
    )
    httpx_mock.add_response(url="https://example.com/new", text="moved")
    with HttpSession() as session:
        assert session.get_text("https://example.com/old") == "moved"


def test_too_many_redirects(httpx_mock):
    httpx_mock.add_response(
        url="https://example.com/a", status_code=302, headers={"Location": "https://example.com/b"}
    )
    httpx_mock.add_response(
        url="https://example.com/b", status_code=302, headers={"Location": "https://example.com/c"}
    )
    with HttpSession(InstallerConfig(max_redirects=1)) as session:
        with pytest.raises(FetchError, match="Too many redirects"):
            session.get("https://example.com/a")


def test_get_json_invalid(httpx_mock):
    httpx_mock.add_response(url="https://example.com/x.json", content=b"not json")
    with HttpSession() as session, pytest.raises(FetchError, match="Invalid JSON"):
        session.get_json("https://example.com/x.json")


def test_rate_limit_recorded(httpx_mock):
    httpx_mock.add_response(
        url="https://example.com/x",
        headers={
            "x-ratelimit-limit": "60",
            "x-ratelimit-remaining": "3",
            "x-ratelimit-reset": "1700000600",
        },
    )
    with HttpSession() as session:
        assert session.rate_limit is None
        session.get("https://example.com/x")
    info = session.rate_limit
    assert info is not None
    assert (info.limit, info.remaining, info.reset) == (60, 3, 1700000600)
    assert info.is_low
    assert info.seconds_until_reset(now=1700000000) == 600


def test_rate_limit_recorded_on_error(httpx_mock):
    httpx_mock.add_response(
        url="https://example.com/x", status_code=403, headers={"x-ratelimit-remaining": "0"}
    )
    with HttpSession() as session:
        with pytest.raises(FetchError):
            session.get("https://example.com/x")
        assert session.rate_limit.remaining == 0


# --- GitHub ---

def test_github_tree_fetched_once(httpx_mock):
    httpx_mock.add_response(
        url=TREE_URL,
        json={"tree": [{"path": "commands/a.md", "type": "blob"}], "truncated": False},
    )
    with HttpSession() as session:
        client = GitHubClient(session)
        first = client.get_repo_tree("acme", "tools", "main")
        second = client.get_repo_tree("acme", "tools", "main")
    assert first == second == [{"path": "commands/a.md", "type": "blob"}]
    assert len(httpx_mock.get_requests()) == 1


def test_github_tree_sends_token(httpx_mock):
    httpx_mock.add_response(
        url=TREE_URL,
        match_headers={"Authorization": "Bearer secret"},
        json={"tree": []},
    )
    with HttpSession(InstallerConfig(github_token="secret")) as session:
        assert GitHubClient(session).get_repo_tree("acme", "tools", "main") == []


def test_github_tree_ref_not_found(httpx_mock):
    httpx_mock.add_response(url=TREE_URL, status_code=404)
    with HttpSession() as session, pytest.raises(RefNotFoundError, match="acme/tools@main"):
        GitHubClient(session).get_repo_tree("acme", "tools", "main")


def test_github_tree_truncated(httpx_mock):
    httpx_mock.add_response(url=TREE_URL, json={"tree": [], "truncated": True})
    with HttpSession() as session:
        with pytest.raises(FetchError, match="truncated"):
            GitHubClient(session).get_repo_tree("acme", "tools", "main")
        assert session.github_trees == {}


def test_github_list_files_recursive_from_tree(httpx_mock):
    httpx_mock.add_response(
        url=TREE_URL,
        json={
            "tree": [
                {"path": "skills/a", "type": "tree"},
                {"path": "skills/a/SKILL.md", "type": "blob"},
                {"path": "skills/a/ref/notes.md", "type": "blob"},
                {"path": "skills/ab/SKILL.md", "type": "blob"},
            ]
        },
    )
    with HttpSession() as session:
        files = GitHubClient(session).list_files_recursive("acme", "tools", "main", "skills/a")
    assert files == ["skills/a/SKILL.md", "skills/a/ref/notes.md"]


def test_github_list_files_recursive_contents_fallback(httpx_mock):
    httpx_mock.add_response(url=TREE_URL, status_code=500)
    httpx_mock.add_response(
        url="https://api.github.com/repos/acme/tools/contents/skills/a?ref=main",
        json=[{"name": "SKILL.md", "type": "file"}, {"name": "ref", "type": "dir"}],
    )
    httpx_mock.add_response(
        url="https://api.github.com/repos/acme/tools/contents/skills/a/ref?ref=main",
        json=[{"name": "notes.md", "type": "file"}],
    )
    with HttpSession() as session:
        files = GitHubClient(session).list_files_recursive("acme", "tools", "main", "skills/a")
    assert files == ["skills/a/SKILL.md", "skills/a/ref/notes.md"]


# --- GitLab ---

def test_gitlab_list_tree_paginates(httpx_mock):
    base = "https://gitlab.com/api/v4/projects/group%2Fsub%2Ftools/repository/tree"
    httpx_mock.add_response(
        url=f"{base}?path=commands&ref=main&per_page=100",
        headers={"x-next-page": "2"},
        json=[{"name": "a.md", "path": "commands/a.md", "type": "blob"}],
    )
    httpx_mock.add_response(
        url=f"{base}?path=commands&ref=main&per_page=100&page=2",
        headers={"x-next-page": ""},
        json=[{"name": "b.md", "path": "commands/b.md", "type": "blob"}],
    )
    with HttpSession() as session:
        entries = GitLabClient(session).list_tree("group/sub/tools", "main", "commands")
    assert [e["name"] for e in entries] == ["a.md", "b.md"]


def test_gitlab_list_tree_unexpected_body(httpx_mock):
    httpx_mock.add_response(
        url="https://gitlab.com/api/v4/projects/g%2Ftools/repository/tree?path=commands&ref=main&per_page=100",
        json={"message": "nope"},
    )
    with HttpSession() as session, pytest.raises(FetchError, match="unexpected response"):
        GitLabClient(session).list_tree("g/tools", "main", "commands")


# --- URL helpers ---

def test_owner_repo_shorthand():
    assert is_owner_repo_shorthand("acme/tools")
    assert not is_owner_repo_shorthand("./acme/tools")
    assert not is_owner_repo_shorthand("acme/tools/extra")
    assert not is_owner_repo_shorthand("https://github.com/acme/tools")


def test_parse_repo_url_github():
    parsed = parse_repo_url("https://github.com/acme/tools.git")
    assert parsed.provider == "github"
    assert (parsed.owner, parsed.repo) == ("acme", "tools")


def test_parse_repo_url_gitlab_subgroups():
    parsed = parse_repo_url("https://gitlab.com/group/sub/tools/-/tree/main")
    assert parsed.provider == "gitlab"
    assert parsed.namespace_path == "group/sub/tools"
    assert parsed.repo == "tools"


def test_parse_repo_url_other_host():
    assert parse_repo_url("https://bitbucket.org/acme/tools") is None
    assert parse_repo_url("https://github.com/acme") is None


def test_github_raw_url_round_trip():
    url = github_raw_url("acme", "tools", "v1", "/plugins/x/commands/a.md")
    assert url == "https://raw.githubusercontent.com/acme/tools/v1/plugins/x/commands/a.md"
    loc = parse_github_raw_url(url)
    assert (loc.owner, loc.repo, loc.ref, loc.path) == ("acme", "tools", "v1", "plugins/x/commands/a.md")


def test_parse_github_raw_url_rejects_other_hosts():
    assert parse_github_raw_url("https://github.com/acme/tools/blob/main/a.md") is None


def test_parse_gitlab_raw_url():
    url = gitlab_raw_url("group/sub/tools", "main", "skills/a")
    assert url == "https://gitlab.com/group/sub/tools/-/raw/main/skills/a"
    loc = parse_gitlab_raw_url(url)
    assert (loc.namespace_path, loc.ref, loc.path) == ("group/sub/tools", "main", "skills/a")
    assert parse_gitlab_raw_url("https://gitlab.com/group/tools/-/blob/main/a.md") is None


def test_parse_gitlab_raw_url_decodes_slashed_ref():
    url = gitlab_raw_url("g/tools", "feature/x", "skills/a")
    assert url == "https://gitlab.com/g/tools/-/raw/feature%2Fx/skills/a"
    loc = parse_gitlab_raw_url(url)
    assert (loc.ref, loc.path) == ("feature/x", "skills/a")
    assert gitlab_raw_url(loc.namespace_path, loc.ref, loc.path) == url


def test_normalize_and_join_repo_path():
    assert normalize_repo_path("/a//b/") == "a/b"
    assert join_repo_path("", "./plugins/x") == "plugins/x"
    assert join_repo_path("base", "/plugins", "./x/../y") == "base/plugins/y"
    assert join_repo_path("", ".", "") == ""
