"""Tests for status inference."""

import pytest

from agent_sessions.models.session import SessionStatus
from agent_sessions.services.status_classifier import (
    LOCAL_COMMANDS,
    StatusSignals,
    determine_status,
    extract_text,
    has_content,
    has_tool_result,
    has_tool_use,
    is_interrupted_request,
    is_local_slash_command,
    status_sort_priority,
)


class TestContentHelpers:
    """Tests for content block inspection."""

    def test_has_tool_use(self):
        """Detects a tool_use block among others."""
        content = [{"type": "text", "text": "Let me look"}, {"type": "tool_use", "name": "Read"}]
        assert has_tool_use(content) is True
        assert has_tool_result(content) is False

    def test_has_tool_result(self):
        """Detects a tool_result block."""
        assert has_tool_result([{"type": "tool_result", "content": "ok"}]) is True

    def test_string_content_has_no_blocks(self):
        """String content never contains tool blocks."""
        assert has_tool_use("tool_use") is False
        assert has_tool_result("tool_result") is False

    def test_non_dict_blocks_ignored(self):
        """Blocks that aren't objects are skipped."""
        assert has_tool_use(["tool_use", 3, None]) is False

    @pytest.mark.parametrize(
        "content,expected",
        [("hi", True), ("", False), ([{"type": "text"}], True), ([], False), (None, False), (42, False)],
    )
    def test_has_content(self, content, expected):
        """Only non-empty strings and lists count as content."""
        assert has_content(content) is expected


class TestExtractText:
    """Tests for extract_text."""

    def test_string(self):
        """String content is returned as-is."""
        assert extract_text("hello") == "hello"

    def test_empty_string(self):
        """Empty string yields None."""
        assert extract_text("") is None

    def test_first_non_empty_text_block(self):
        """Skips non-text and empty text blocks."""
        content = [
            {"type": "tool_use", "name": "Bash"},
            {"type": "text", "text": ""},
            {"type": "text", "text": "second"},
            {"type": "text", "text": "third"},
        ]
        assert extract_text(content) == "second"

    def test_no_text(self):
        """Blocks without text yield None."""
        assert extract_text([{"type": "tool_result", "content": "x"}]) is None


class TestLocalSlashCommand:
    """Tests for local command recognition."""

    @pytest.mark.parametrize("command", LOCAL_COMMANDS)
    def test_every_local_command(self, command):
        """Each built-in command is recognized."""
        assert is_local_slash_command(command) is True

    def test_command_with_arguments(self):
        """Arguments after a space are allowed."""
        assert is_local_slash_command("/model sonnet") is True

    def test_surrounding_whitespace(self):
        """Leading and trailing whitespace is ignored."""
        assert is_local_slash_command("  /clear\n") is True

    def test_prefix_without_space_is_not_a_command(self):
        """'/clearall' is not '/clear'."""
        assert is_local_slash_command("/clearall") is False

    def test_custom_command(self):
        """Unknown slash commands reach the model."""
        assert is_local_slash_command("/deploy now") is False

    def test_case_sensitive(self):
        """Matching is case-sensitive."""
        assert is_local_slash_command("/CLEAR") is False

    def test_block_content(self):
        """The first block with text is checked."""
        assert is_local_slash_command([{"type": "text", "text": "/compact"}]) is True

    def test_free_text(self):
        """Ordinary prompts are not commands."""
        assert is_local_slash_command("please /clear the cache") is False


class TestInterruption:
    """Tests for interruption detection."""

    def test_string(self):
        """Marker in string content."""
        assert is_interrupted_request("[Request interrupted by user]") is True

    def test_block(self):
        """Marker in a text block."""
        content = [{"type": "tool_result"}, {"type": "text", "text": "x [Request interrupted by user] y"}]
        assert is_interrupted_request(content) is True

    def test_absent(self):
        """No marker, no interruption."""
        assert is_interrupted_request("keep going") is False


class TestDetermineStatus:
    """Tests for the status decision table."""

    def test_assistant_tool_use_is_processing(self):
        """A pending tool call means processing."""
        signals = StatusSignals(msg_type="assistant", has_tool_use=True)
        assert determine_status(signals) == SessionStatus.PROCESSING

    def test_assistant_text_stale_is_waiting(self):
        """A finished assistant reply waits for the user."""
        assert determine_status(StatusSignals(msg_type="assistant")) == SessionStatus.WAITING

    def test_assistant_text_fresh_is_processing(self):
        """An assistant reply still being written is processing."""
        signals = StatusSignals(msg_type="assistant", file_fresh=True)
        assert determine_status(signals) == SessionStatus.PROCESSING

    def test_user_prompt_is_thinking(self):
        """A plain user prompt makes the model think."""
        assert determine_status(StatusSignals(msg_type="user")) == SessionStatus.THINKING

    def test_user_local_command_is_waiting(self):
        """Local commands don't involve the model."""
        signals = StatusSignals(msg_type="user", is_local_command=True)
        assert determine_status(signals) == SessionStatus.WAITING

    def test_user_interrupted_is_waiting(self):
        """An interrupted request waits for the user."""
        signals = StatusSignals(msg_type="user", is_interrupted=True, file_fresh=True)
        assert determine_status(signals) == SessionStatus.WAITING

    def test_tool_result_fresh_is_thinking(self):
        """A just-returned tool result is being considered."""
        signals = StatusSignals(msg_type="user", has_tool_result=True, file_fresh=True)
        assert determine_status(signals) == SessionStatus.THINKING

    def test_tool_result_stale_is_processing(self):
        """A stale tool result means a long-running tool is still going."""
        signals = StatusSignals(msg_type="user", has_tool_result=True)
        assert determine_status(signals) == SessionStatus.PROCESSING

    def test_other_type_fresh_is_thinking(self):
        """Unknown record types with recent writes are thinking."""
        signals = StatusSignals(msg_type="summary", file_fresh=True)
        assert determine_status(signals) == SessionStatus.THINKING

    def test_other_type_stale_is_idle(self):
        """Unknown record types without recent writes are idle."""
        assert determine_status(StatusSignals(msg_type=None)) == SessionStatus.IDLE


class TestSortPriority:
    """Tests for status_sort_priority."""

    def test_active_first(self):
        """Thinking and processing share the top priority."""
        assert status_sort_priority(SessionStatus.THINKING) == 0
        assert status_sort_priority(SessionStatus.PROCESSING) == 0

    def test_waiting_before_idle(self):
        """Waiting sorts before idle."""
        assert status_sort_priority(SessionStatus.WAITING) == 1
        assert status_sort_priority(SessionStatus.IDLE) == 2
