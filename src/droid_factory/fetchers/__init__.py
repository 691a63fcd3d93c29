from ._github import (
    GitHubClient,
    GitHubRawLocation,
    github_raw_url,
    join_repo_path,
    normalize_repo_path,
    parse_github_raw_url,
)
from ._gitlab import GitLabClient, GitLabRawLocation, gitlab_raw_url, parse_gitlab_raw_url
from ._http import HttpSession, RateLimitInfo, rate_limit_from_headers
from ._urls import RepoURL, is_owner_repo_shorthand, is_url, parse_repo_url

__all__ = [
    "GitHubClient",
    "GitHubRawLocation",
    "GitLabClient",
    "GitLabRawLocation",
    "HttpSession",
    "RateLimitInfo",
    "RepoURL",
    "github_raw_url",
    "gitlab_raw_url",
    "is_owner_repo_shorthand",
    "is_url",
    "join_repo_path",
    "normalize_repo_path",
    "parse_github_raw_url",
    "parse_gitlab_raw_url",
    "parse_repo_url",
    "rate_limit_from_headers",
]
