import asyncio
import io

import pytest
from rich.console import Console

from hanki.config import AIConfig, Config, SpeechConfig
from hanki.services import ContentGenerator, OpenAIProvider
from hanki.ui.shell import InteractiveShell
from tests.fixtures.fakes import (
    DEFAULT,
    FakeHTTPResponse,
    FakeHTTPSession,
    FakeSpeechProvider,
    ScriptedPrompter,
    make_note_info,
)
from tests.fixtures.sample_data import SENTENCE


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=120, color_system=None)


def run_shell(store, generator, answers, console):
    prompter = ScriptedPrompter(answers)
    asyncio.run(InteractiveShell(store, generator, prompter, console).run())
    return prompter, console.file.getvalue()


@pytest.mark.unit
def test_exit_from_main_menu(store, generator, console, anki):
    prompter, output = run_shell(store, generator, ["exit"], console)
    assert "Goodbye!" in output
    assert anki.requests == []


@pytest.mark.unit
def test_browse_cards_and_generate_sentence(store, generator, ai, console):
    ai.responses["selectWords"] = {"selectedIndices": [0, 1], "reason": "school lunch"}
    ai.responses["generateSentence"] = SENTENCE

    prompter, output = run_shell(store, generator, [
        "select_deck", "Korean",
        "view_cards", "next", "back",
        "generate_sentence",
        "back",
        "exit",
    ], console)

    assert "Loaded 3 notes from 'Korean'." in output
    assert "Card 2 of 3" in output
    assert "Korean: 학교에서 밥을 빨리 먹어요." in output
    assert "Grammar notes: -에서 marks the location of an action." in output
    first_card_nav = prompter.prompts[3]["choices"]
    assert first_card_nav[0].disabled and not first_card_nav[1].disabled


@pytest.mark.unit
def test_failed_action_is_reported_and_menu_continues(store, generator, ai, console):
    ai.responses["selectWords"] = None

    prompter, output = run_shell(store, generator, [
        "select_deck", "Korean", "generate_sentence", "back", "exit",
    ], console)

    assert prompter.pauses == 1
    assert "Error:" in output
    assert "Goodbye!" in output


@pytest.mark.unit
def test_snapshot_changes_only_on_reload(store, generator, anki, console):
    shell = InteractiveShell(store, generator, ScriptedPrompter(["Korean"]), console)

    async def scenario():
        await shell._select_deck()
        anki.notes[1004] = make_note_info(1004, "물", "water")
        before = len(shell.notes)
        await shell.actions["reload"]()
        return before, len(shell.notes)

    assert asyncio.run(scenario()) == (3, 4)


@pytest.mark.unit
def test_audio_for_multiple_notes_prechecks_notes_without_audio(store, generator, anki, console):
    prompter, output = run_shell(store, generator, [
        "select_deck", "Korean", "add_audio_multiple", DEFAULT, "back", "exit",
    ], console)

    checkbox = next(p for p in prompter.prompts if p["kind"] == "checkbox")
    assert all(choice.checked for choice in checkbox["choices"])
    assert "Succeeded: 3/3 notes" in output
    assert len(anki.media) == 3


@pytest.mark.unit
def test_empty_deck_list_returns_to_main_menu(store, generator, anki, console):
    anki.decks = []
    prompter, output = run_shell(store, generator, ["select_deck", "exit"], console)
    assert "No decks found in Anki." in output


@pytest.mark.unit
def test_garbled_ai_reply_is_shown_and_menu_continues(store, console):
    provider = OpenAIProvider(AIConfig(api_key="k", base_url="http://ai.test/v1"))
    provider._session = FakeHTTPSession(FakeHTTPResponse(200, "<html>gateway hiccup</html>"))
    generator = ContentGenerator(Config(ai=provider.config), ai_provider=provider, speech_provider=FakeSpeechProvider())

    prompter, output = run_shell(store, generator, [
        "select_deck", "Korean", "generate_sentence", "back", "exit",
    ], console)

    assert prompter.pauses == 1
    assert "AI API returned an invalid body" in output
    assert "Goodbye!" in output


@pytest.mark.unit
def test_missing_speech_settings_stop_audio_batch_once(store, ai, anki, console):
    speech = FakeSpeechProvider()
    generator = ContentGenerator(
        Config(ai=AIConfig(api_key="k", base_url="u"), speech=SpeechConfig()),
        ai_provider=ai,
        speech_provider=speech,
    )

    prompter, output = run_shell(store, generator, [
        "select_deck", "Korean", "add_audio_multiple", DEFAULT, "back", "exit",
    ], console)

    assert prompter.pauses == 1
    assert output.count("ElevenLabs configuration is not complete") == 1
    assert "Succeeded:" not in output
    assert speech.calls == []
    assert anki.media == {}
