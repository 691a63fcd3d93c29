from pathlib import Path

import pytest

from droid_factory.config import DestDirs
from droid_factory.fetchers import github_raw_url
from droid_factory.models import (
    DiscoveredPlugin,
    GitHubLocation,
    GitHubResolved,
    LocalResolved,
    PluginOverrides,
    UnsupportedResolved,
)
from droid_factory.planner import (
    compute_marketplace_plan,
    flatten_name,
    plugin_root_locator,
    source_type,
)

DEST = DestDirs.under(Path("/home/u/.factory"))


def _local(name, root, **resources):
    return DiscoveredPlugin(
        name=name,
        description="",
        resolved=LocalResolved(local_dir=Path(root)),
        **resources,
    )


# --- flatten_name ---

@pytest.mark.parametrize(
    ("locator", "directory", "expected"),
    [
        ("/p/commands/plan.md", "commands", "plan"),
        ("/p/commands/workflows/plan.md", "commands", "workflows__plan"),
        ("/p/commands/a/b/c.md", "commands", "a__b__c"),
        ("/p/cmds/run.md", "./cmds", "run"),
        ("/elsewhere/loose.md", "commands", "loose"),
        ("C:\\p\\commands\\sub\\x.md", "commands", "sub__x"),
        ("/p/hooks/pre.tool.sh", "hooks", "pre.tool"),
    ],
)
def test_flatten_name(locator, directory, expected):
    assert flatten_name(locator, directory) == expected


def test_flatten_name_nested_never_collides():
    top = flatten_name("/p/commands/plan.md", "commands")
    nested = flatten_name("/p/commands/workflows/plan.md", "commands")
    assert top != nested


def test_flatten_name_skill_dir_keeps_dots():
    assert flatten_name("/p/skills/ui.kit", "skills", is_dir=True) == "ui.kit"


def test_flatten_name_searches_below_root():
    # the plugin itself lives under a directory named "commands"
    locator = "/src/commands/plugin/commands/go.md"
    assert flatten_name(locator, "commands") == "plugin__commands__go"
    assert flatten_name(locator, "commands", root="/src/commands/plugin") == "go"


def test_flatten_name_remote():
    url = github_raw_url("acme", "tools", "main", "plugins/p/commands/ops/deploy.md")
    root = github_raw_url("acme", "tools", "main", "plugins/p")
    assert flatten_name(url, "commands", root=root) == "ops__deploy"


def test_source_type():
    assert source_type("https://raw.githubusercontent.com/a/b/main/x.md") == "remote"
    assert source_type("HTTP://example.com/x.md") == "remote"
    assert source_type("/tmp/x.md") == "local"


def test_plugin_root_locator():
    gh = DiscoveredPlugin(
        name="g",
        description="",
        resolved=GitHubResolved(github=GitHubLocation(owner="a", repo="b", ref="main", path="p")),
    )
    assert plugin_root_locator(gh) == "https://raw.githubusercontent.com/a/b/main/p"
    assert plugin_root_locator(_local("l", "/x")) == "/x"
    unsupported = DiscoveredPlugin(
        name="u", description="", resolved=UnsupportedResolved(reason="nope")
    )
    assert plugin_root_locator(unsupported) is None


# --- compute_marketplace_plan ---

def test_plan_targets_and_destinations():
    plugin = _local(
        "demo",
        "/m/demo",
        commands=["/m/demo/commands/plan.md", "/m/demo/commands/workflows/review.md"],
        agents=["/m/demo/agents/helper.md"],
        hooks=["/m/demo/hooks/format.sh", "/m/demo/hooks/Makefile"],
        skills=["/m/demo/skills/frontend"],
    )
    plan = compute_marketplace_plan("all", [plugin], DEST)

    assert [i.name for i in plan.commands] == ["plan", "workflows__review"]
    assert plan.commands[1].dest == DEST.commands / "workflows__review.md"
    assert [i.dest for i in plan.droids] == [DEST.droids / "helper.md"]
    assert plan.droids[0].kind == "agents"
    assert [i.dest for i in plan.hooks] == [DEST.hooks / "format.sh", DEST.hooks / "Makefile"]
    assert plan.skills[0].dest == DEST.skills / "frontend"
    assert plan.skills[0].is_skill
    assert all(i.src_type == "local" for i in plan.items())
    assert plan.unresolved == []
    assert plan.conflicts == []


def test_plan_two_plugins_with_unresolved():
    good = _local(
        "good",
        "/m/good",
        commands=[
            "/m/good/commands/a.md",
            "/m/good/commands/b.md",
            "/m/good/commands/nested/a.md",
        ],
    )
    broken = DiscoveredPlugin(
        name="broken",
        description="",
        resolved=UnsupportedResolved(reason="Unknown source type"),
    )
    plan = compute_marketplace_plan("all", [good, broken], DEST)
    assert [i.name for i in plan.commands] == ["a", "b", "nested__a"]
    assert [(u.plugin, u.reason) for u in plan.unresolved] == [("broken", "Unknown source type")]


def test_plan_errors_are_unresolved_but_resources_kept():
    partial = _local(
        "partial",
        "/m/partial",
        commands=["/m/partial/commands/ok.md"],
        errors=["GitHub API error (x/hooks): HTTP 500", ""],
    )
    plan = compute_marketplace_plan("all", [partial], DEST)
    assert [i.name for i in plan.commands] == ["ok"]
    assert [u.reason for u in plan.unresolved] == ["GitHub API error (x/hooks): HTTP 500"]


def test_plan_no_components():
    plan = compute_marketplace_plan("all", [_local("empty", "/m/empty")], DEST)
    assert plan.is_empty
    assert [u.reason for u in plan.unresolved] == ["No components found"]


def test_plan_selection_filters_plugins():
    a = _local("a", "/m/a", commands=["/m/a/commands/x.md"])
    b = _local("b", "/m/b", commands=["/m/b/commands/y.md"])
    plan = compute_marketplace_plan(["b", "missing"], [a, b], DEST)
    assert [i.plugin for i in plan.commands] == ["b"]
    assert compute_marketplace_plan([], [a, b], DEST).is_empty


def test_plan_conflicts_first_plugin_wins():
    a = _local("a", "/m/a", commands=["/m/a/commands/deploy.md"])
    b = _local("b", "/m/b", commands=["/m/b/commands/deploy.md", "/m/b/commands/other.md"])
    plan = compute_marketplace_plan("all", [a, b], DEST)
    assert [(i.plugin, i.name) for i in plan.commands] == [("a", "deploy"), ("b", "other")]
    [conflict] = plan.conflicts
    assert conflict.item.plugin == "b"
    assert conflict.claimed_by == "a"


def test_plan_double_underscore_name_conflicts_with_nested():
    plugin = _local("p", "/m/p", commands=["/m/p/commands/a/b.md", "/m/p/commands/a__b.md"])
    plan = compute_marketplace_plan("all", [plugin], DEST)
    assert [i.src for i in plan.commands] == ["/m/p/commands/a/b.md"]
    [conflict] = plan.conflicts
    assert conflict.item.src == "/m/p/commands/a__b.md"
    assert conflict.item.name == "a__b"
    assert conflict.claimed_by == "p"


def test_plan_directory_override():
    plugin = DiscoveredPlugin(
        name="custom",
        description="",
        resolved=LocalResolved(
            local_dir=Path("/m/custom"), overrides=PluginOverrides(commands="./cmds")
        ),
        commands=["/m/custom/cmds/tools/lint.md"],
    )
    plan = compute_marketplace_plan("all", [plugin], DEST)
    assert plan.commands[0].name == "tools__lint"


def test_plan_remote_items():
    loc = GitHubLocation(owner="acme", repo="tools", ref="main", path="plugins/p")
    plugin = DiscoveredPlugin(
        name="remote",
        description="",
        resolved=GitHubResolved(github=loc),
        commands=[github_raw_url("acme", "tools", "main", "plugins/p/commands/go.md")],
        skills=[github_raw_url("acme", "tools", "main", "plugins/p/skills/ui")],
    )
    plan = compute_marketplace_plan("all", [plugin], DEST)
    assert plan.commands[0].src_type == "remote"
    assert plan.commands[0].dest == DEST.commands / "go.md"
    assert plan.skills[0].dest == DEST.skills / "ui"
