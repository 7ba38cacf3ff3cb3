import pytest

from quick_alias.host import Document
from quick_alias.services.pipeline import DocumentPipeline
from quick_alias.services.settings import PluginConfig


@pytest.mark.asyncio
async def test_project_plan_aliases_are_merged(host, pipeline):
    source = host.add_note(
        "2024-01-01.md",
        "Some text [[Project Plan|plan]] more [[Project Plan|Roadmap]]",
    )
    host.add_note("Project Plan.md", aliases=["plan"])

    updated = await pipeline.process(source)

    assert updated == 1
    assert host.metadata["Project Plan.md"]["aliases"] == ["plan", "roadmap"]
    assert host.notices == ["Updated aliases in 1 referenced note(s)."]


@pytest.mark.asyncio
async def test_non_matching_name_is_not_read(host, pipeline):
    source = host.add_note("notes.md", "[[Project Plan|plan]]")
    host.add_note("Project Plan.md")

    assert await pipeline.process(source) == 0
    assert host.reads == []
    assert host.writes == []
    assert host.notices == []


@pytest.mark.asyncio
async def test_unresolved_target_is_skipped_and_others_continue(host, pipeline):
    source = host.add_note("2024-01-02.md", "[[Missing|m]] [[Present|p]]")
    host.add_note("Present.md")

    assert await pipeline.process(source) == 1
    assert host.metadata["Present.md"]["aliases"] == ["p"]
    assert host.logs == ['Skipped alias update for "Missing" (note not found)']
    assert host.notices == ["Updated aliases in 1 referenced note(s)."]


@pytest.mark.asyncio
async def test_write_failure_is_isolated_per_target(host, pipeline):
    source = host.add_note("2024-01-03.md", "[[Broken|b]] [[Fine|f]]")
    host.add_note("Broken.md")
    host.add_note("Fine.md")
    host.unwritable.add("Broken.md")

    assert await pipeline.process(source) == 1
    assert host.metadata["Fine.md"]["aliases"] == ["f"]
    assert host.notices[0].startswith("Error updating aliases in Broken")
    assert host.notices[-1] == "Updated aliases in 1 referenced note(s)."


@pytest.mark.asyncio
async def test_unreadable_source_reports_once(host, pipeline):
    source = host.add_note("2024-01-04.md", "[[Fine|f]]")
    host.add_note("Fine.md")
    host.unreadable.add("2024-01-04.md")

    assert await pipeline.process(source) == 0
    assert len(host.notices) == 1
    assert host.notices[0].startswith("Error processing file 2024-01-04")
    assert host.writes == []


@pytest.mark.asyncio
async def test_non_markdown_target_is_skipped(host, pipeline):
    source = host.add_note("2024-01-05.md", "[[diagram|pic]]")
    host.texts["diagram.png"] = ""

    assert await pipeline.process(source) == 0
    assert host.writes == []


@pytest.mark.asyncio
async def test_no_notice_when_disabled(host):
    pipeline = DocumentPipeline(host, PluginConfig(show_notice=False))
    source = host.add_note("2024-01-06.md", "[[Target|t]]")
    host.add_note("Target.md")

    assert await pipeline.process(source) == 1
    assert host.notices == []


@pytest.mark.asyncio
async def test_unchanged_targets_are_not_counted(host, pipeline):
    source = host.add_note("2024-01-07.md", "[[Target|t]]")
    host.add_note("Target.md", aliases=["t"])

    assert await pipeline.process(source) == 0
    assert host.notices == []


@pytest.mark.asyncio
async def test_new_config_applies_to_next_run(host, pipeline):
    source = host.add_note("journal.md", "[[Target|t]]")
    host.add_note("Target.md")
    assert await pipeline.process(source) == 0

    pipeline.apply_config(PluginConfig(file_pattern="journal"))
    assert await pipeline.process(source) == 1


@pytest.mark.asyncio
async def test_one_notice_for_many_targets(host, pipeline):
    source = host.add_note("2024-01-08.md", "[[A|a]] [[B|b]] [[C|c]]")
    for name in ("A", "B", "C"):
        host.add_note(f"{name}.md")

    assert await pipeline.process(Document("2024-01-08.md")) == 3
    assert host.notices == ["Updated aliases in 3 referenced note(s)."]
