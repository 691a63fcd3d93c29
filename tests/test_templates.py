from droid_factory.config import DestDirs
from droid_factory.installer import install_templates
from droid_factory.planner import (
    TEMPLATES_DIR,
    compute_template_plan,
    list_basenames,
    resolve_selection,
    template_description,
)

AVAILABLE = ["code-review", "plan"]


# --- bundled templates ---

def test_bundled_templates_listed():
    assert list_basenames(TEMPLATES_DIR / "commands") == ["code-review", "plan"]
    assert list_basenames(TEMPLATES_DIR / "droids") == ["code-reviewer", "security-code-reviewer"]


def test_bundled_templates_have_descriptions():
    for kind in ("commands", "droids"):
        for path in (TEMPLATES_DIR / kind).glob("*.md"):
            assert template_description(path), path


def test_list_basenames_missing_dir(tmp_path):
    assert list_basenames(tmp_path / "nope") == []


# --- resolve_selection ---

def test_resolve_selection_empty_means_default():
    assert resolve_selection(None, AVAILABLE, "command") is None
    assert resolve_selection("", AVAILABLE, "command") is None


def test_resolve_selection_all():
    assert resolve_selection(" all ", AVAILABLE, "command") == AVAILABLE


def test_resolve_selection_list():
    selected = resolve_selection("plan.md, plan,nope,,code-review", AVAILABLE, "command")
    assert selected == ["plan", "code-review"]


def test_template_description_without_frontmatter(tmp_path):
    path = tmp_path / "x.md"
    path.write_text("no frontmatter")
    assert template_description(path) is None


# --- compute_template_plan / install_templates ---

def test_template_plan_marks_existing(tmp_path):
    dest = DestDirs.under(tmp_path)
    dest.commands.mkdir(parents=True)
    (dest.commands / "plan.md").write_text("mine")
    plan = compute_template_plan(["plan", "code-review"], ["code-reviewer"], dest)
    assert [(i.name, i.exists) for i in plan.commands] == [("plan", True), ("code-review", False)]
    assert plan.droids[0].kind == "agents"
    assert plan.droids[0].dest == dest.droids / "code-reviewer.md"
    assert plan.droids[0].description


def test_install_templates(tmp_path):
    dest = DestDirs.under(tmp_path)
    dest.commands.mkdir(parents=True)
    (dest.commands / "plan.md").write_text("mine")
    plan = compute_template_plan(["plan", "code-review"], ["code-reviewer"], dest)

    report = install_templates(plan.items())
    assert [r.status for r in report.results] == ["skipped", "created", "created"]
    assert (dest.commands / "plan.md").read_text() == "mine"
    assert (dest.droids / "code-reviewer.md").read_bytes() == (
        TEMPLATES_DIR / "droids" / "code-reviewer.md"
    ).read_bytes()

    forced = install_templates(plan.items(), force=True)
    assert forced.overwritten == 3


def test_install_templates_missing_source(tmp_path):
    plan = compute_template_plan(["ghost"], [], DestDirs.under(tmp_path), templates_dir=tmp_path)
    report = install_templates(plan.items())
    assert report.results[0].status == "skipped"
    assert report.results[0].reason == "template not found"
