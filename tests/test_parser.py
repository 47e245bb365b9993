"""Tests for the markdown checklist parser."""
from datetime import date, datetime

import pytest

from taskboard.parser import MAX_NESTING, parse, parse_date, parse_timestamp
from taskboard.task_list import TaskList


class TestChecklistLines:
    """Which lines become tasks."""

    def test_unchecked_and_checked(self):
        tasks = parse("- [ ] Buy milk\n- [x] Pay bills\n- [X] Call mum\n", "a.md")
        assert [t.title for t in tasks] == ["Buy milk", "Pay bills", "Call mum"]
        assert [t.completed for t in tasks] == [False, True, True]

    def test_other_bullets(self):
        tasks = parse("* [ ] star\n+ [ ] plus\n", "a.md")
        assert [t.title for t in tasks] == ["star", "plus"]

    @pytest.mark.parametrize("line", [
        "- [ ]",
        "- [ ]   ",
        "- [-] cancelled",
        "- [] no space",
        "-[ ] no gap",
        "- [ ]no gap",
        "[ ] no bullet",
        "# Heading",
        "plain prose",
        "",
    ])
    def test_non_task_lines_are_skipped(self, line):
        assert len(parse(line, "a.md")) == 0

    def test_prose_between_tasks_is_ignored(self):
        text = "# Today\nSome words\n- [ ] One\nmore words\n\n- [ ] Two\n"
        assert [t.title for t in parse(text, "a.md")] == ["One", "Two"]

    @pytest.mark.parametrize("text", [
        "",
        "\n\n\n",
        "- [ ] @due(",
        "- [x] @completed()",
        "- [ ] #",
        "\t\t- [ ] tabbed",
        "- [ ] a\n\t- [ ] b\n  - [ ] c\n        - [ ] d\n - [ ] e",
        "✅📅#@()[]",
        "- [ ] 📅",
        "\x00\x01- [ ] odd",
    ])
    def test_never_raises(self, text):
        assert isinstance(parse(text, "a.md"), TaskList)


class TestIds:
    """Ids come from source path and line number."""

    def test_ids_use_line_numbers(self):
        tasks = parse("intro\n- [ ] One\n\n- [ ] Two\n", "notes/today.md")
        assert [t.id for t in tasks] == ["notes/today.md:2", "notes/today.md:4"]
        assert [t.line_number for t in tasks] == [2, 4]
        assert all(t.source_path == "notes/today.md" for t in tasks)

    def test_reparse_is_deterministic(self):
        text = "- [ ] One #a\n  - [ ] Sub\n- [x] Two\n"
        assert parse(text, "a.md") == parse(text, "a.md")

    def test_only_newline_ends_a_line(self):
        text = "- [ ] One\x0cpage\n- [ ] Two\x85x\u2028y\n- [ ] Three\n"
        tasks = parse(text, "a.md")
        assert [t.id for t in tasks] == ["a.md:1", "a.md:2", "a.md:3"]
        assert tasks.items[2].title == "Three"

    def test_crlf_line_endings(self):
        tasks = parse("- [ ] One\r\n  - [ ] Sub\r\n- [x] Two\r\n", "a.md")
        assert [t.title for t in tasks] == ["One", "Two"]
        assert [t.line_number for t in tasks] == [1, 3]
        assert tasks.items[0].subtasks[0].title == "Sub"

    def test_subtask_ids_are_unique(self):
        text = "- [ ] P\n  - [ ] A\n    - [ ] B\n  - [ ] C\n"
        ids = [t.id for t in parse(text, "a.md").all_tasks()]
        assert ids == ["a.md:1", "a.md:2", "a.md:3", "a.md:4"]


class TestTags:
    """Tag tokens are moved from the title into tags."""

    def test_tag_stripped_from_title(self):
        task = parse("- [ ] Buy milk #shopping", "a.md").items[0]
        assert task.title == "Buy milk"
        assert task.tags == ("shopping",)

    def test_tag_in_middle_collapses_whitespace(self):
        task = parse("- [ ] Buy  #shopping  milk", "a.md").items[0]
        assert task.title == "Buy milk"

    def test_multiple_and_repeated_tags(self):
        task = parse("- [ ] Thing #b #a #b", "a.md").items[0]
        assert task.tags == ("a", "b")

    def test_nested_tag_characters(self):
        task = parse("- [ ] Thing #area/home-office_2", "a.md").items[0]
        assert task.tags == ("area/home-office_2",)

    def test_numeric_hash_stays_in_title(self):
        task = parse("- [ ] Close issue #123", "a.md").items[0]
        assert task.title == "Close issue #123"
        assert task.tags == ()

    def test_hash_inside_word_is_not_a_tag(self):
        task = parse("- [ ] Learn C#sharp", "a.md").items[0]
        assert task.title == "Learn C#sharp"
        assert task.tags == ()

    def test_tags_are_case_sensitive(self):
        task = parse("- [ ] x #Work #work", "a.md").items[0]
        assert task.tags == ("Work", "work")


class TestDueDates:
    """Due tokens, fallback dates and degradation."""

    def test_due_token(self):
        task = parse("- [ ] Report @due(2024-05-01)", "a.md").items[0]
        assert task.title == "Report"
        assert task.due == date(2024, 5, 1).toordinal()
        assert task.due_date == date(2024, 5, 1)

    def test_due_emoji(self):
        task = parse("- [ ] Report \U0001F4C5 2024-05-01", "a.md").items[0]
        assert task.title == "Report"
        assert task.due_date == date(2024, 5, 1)

    def test_no_due_is_undated(self):
        assert parse("- [ ] Report", "a.md").items[0].due is None

    def test_first_valid_due_wins(self):
        task = parse("- [ ] R @due(2024-05-01) @due(2024-06-01)", "a.md").items[0]
        assert task.due_date == date(2024, 5, 1)
        assert task.title == "R"

    def test_invalid_due_kept_as_text(self):
        task = parse("- [ ] Fix @due(2024-13-45)", "a.md").items[0]
        assert task.title == "Fix @due(2024-13-45)"
        assert task.due is None

    def test_invalid_due_uses_fallback(self):
        task = parse("- [ ] Fix @due(someday)", "a.md", fallback_due="2024-05-03").items[0]
        assert task.title == "Fix @due(someday)"
        assert task.due_date == date(2024, 5, 3)

    def test_fallback_applies_to_undated_only(self):
        tasks = parse("- [ ] A\n- [ ] B @due(2024-01-01)\n", "a.md", fallback_due="2024-05-03")
        assert [t.due_date for t in tasks] == [date(2024, 5, 3), date(2024, 1, 1)]

    def test_fallback_applies_to_subtasks(self):
        tasks = parse("- [ ] A\n  - [ ] B\n", "a.md", fallback_due="2024-05-03")
        assert tasks.items[0].subtasks[0].due_date == date(2024, 5, 3)

    def test_unparseable_fallback_ignored(self):
        task = parse("- [ ] A", "a.md", fallback_due="May 3rd").items[0]
        assert task.due is None


class TestCompletion:
    """Completion timestamps."""

    def test_completed_token(self):
        task = parse("- [x] Pay @completed(2024-05-02T18:30:00)", "a.md").items[0]
        assert task.title == "Pay"
        assert task.completed_at == datetime(2024, 5, 2, 18, 30)

    def test_completed_emoji_date_only(self):
        task = parse("- [x] Pay ✅ 2024-05-02", "a.md").items[0]
        assert task.completed_at == datetime(2024, 5, 2)
        assert task.title == "Pay"

    def test_completed_without_timestamp(self):
        task = parse("- [x] Pay", "a.md").items[0]
        assert task.completed
        assert task.completed_at is None

    def test_timestamp_on_open_task_is_dropped(self):
        task = parse("- [ ] Pay @completed(2024-05-02)", "a.md").items[0]
        assert task.title == "Pay"
        assert not task.completed
        assert task.completed_at is None

    def test_bad_timestamp_kept_as_text(self):
        task = parse("- [x] Pay @completed(yesterday)", "a.md").items[0]
        assert task.title == "Pay @completed(yesterday)"
        assert task.completed_at is None

    def test_offset_converted_to_utc(self):
        task = parse("- [x] Pay @completed(2024-05-02T12:00:00+02:00)", "a.md").items[0]
        assert task.completed_at == datetime(2024, 5, 2, 10, 0)

    def test_zulu_suffix(self):
        task = parse("- [x] Pay @completed(2024-05-02T12:00:00Z)", "a.md").items[0]
        assert task.completed_at == datetime(2024, 5, 2, 12, 0)

    def test_due_and_completed_are_independent(self):
        task = parse("- [x] Pay @due(2024-05-01) @completed(2024-05-02)", "a.md").items[0]
        assert task.due_date == date(2024, 5, 1)
        assert task.completed_at == datetime(2024, 5, 2)


class TestSubtasks:
    """Indentation decides nesting."""

    def test_nested_tree(self):
        text = (
            "- [ ] Parent\n"
            "  - [ ] Child A\n"
            "    - [ ] Grandchild\n"
            "  - [x] Child B\n"
            "- [ ] Sibling\n"
        )
        tasks = parse(text, "a.md")
        assert [t.title for t in tasks] == ["Parent", "Sibling"]
        parent = tasks.items[0]
        assert [s.title for s in parent.subtasks] == ["Child A", "Child B"]
        assert [s.title for s in parent.subtasks[0].subtasks] == ["Grandchild"]
        assert parent.subtasks[1].completed

    def test_nearest_shallower_line_is_parent(self):
        text = "- [ ] A\n    - [ ] B\n  - [ ] C\n"
        parent = parse(text, "a.md").items[0]
        assert [s.title for s in parent.subtasks] == ["B", "C"]
        assert parent.subtasks[0].subtasks == ()

    def test_blank_line_does_not_end_block(self):
        text = "- [ ] A\n\n  - [ ] B\n"
        tasks = parse(text, "a.md")
        assert len(tasks) == 1
        assert tasks.items[0].subtasks[0].title == "B"

    def test_tab_counts_as_four_spaces(self):
        text = "- [ ] A\n\t- [ ] B\n    - [ ] C\n      - [ ] D\n"
        parent = parse(text, "a.md").items[0]
        assert [s.title for s in parent.subtasks] == ["B", "C"]
        assert [s.title for s in parent.subtasks[1].subtasks] == ["D"]

    def test_prose_inside_block_is_skipped(self):
        text = "- [ ] A\n  a note about A\n  - [ ] B\n"
        parent = parse(text, "a.md").items[0]
        assert [s.title for s in parent.subtasks] == ["B"]

    def test_indented_task_under_prose_is_top_level(self):
        text = "Intro\n  - [ ] Lonely\n"
        tasks = parse(text, "a.md")
        assert [t.title for t in tasks] == ["Lonely"]

    def test_deep_nesting_is_flattened_not_fatal(self):
        depth = MAX_NESTING + 50
        text = "\n".join(f"{'  ' * i}- [ ] level {i}" for i in range(depth))
        tasks = parse(text, "a.md")
        assert len(tasks) == 1
        assert len(tasks.all_tasks()) == depth


class TestValueParsing:

    def test_parse_date(self):
        assert parse_date("2024-02-29") == date(2024, 2, 29)
        assert parse_date("2023-02-29") is None
        assert parse_date("20240229") is None
        assert parse_date(None) is None

    def test_parse_timestamp(self):
        assert parse_timestamp("2024-05-02T09:15") == datetime(2024, 5, 2, 9, 15)
        assert parse_timestamp("2024-05-02 09:15:30") == datetime(2024, 5, 2, 9, 15, 30)
        assert parse_timestamp("2024-05-02T25:00") is None
        assert parse_timestamp("soon") is None
