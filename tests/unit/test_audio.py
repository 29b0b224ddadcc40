import asyncio
import base64
import re

import pytest

from hanki.config import AIConfig, Config, SpeechConfig
from hanki.exceptions import ConfigurationError
from hanki.models import Note
from hanki.services import ContentGenerator
from hanki.workflows import AudioWorkflow


@pytest.fixture
def workflow(store, generator, events):
    return AudioWorkflow(store, generator, events.callback)


@pytest.fixture
def notes(store):
    return asyncio.run(store.notes_in_deck("Korean"))


@pytest.mark.unit
def test_add_audio_stores_media_and_links_it(workflow, notes, anki, speech):
    filename = asyncio.run(workflow.add_audio(notes[0]))

    assert re.fullmatch(r"note_1001_\d+\.mp3", filename)
    assert base64.b64decode(anki.media[filename]) == speech.data
    assert anki.notes[1001]["fields"]["Audio"]["value"] == f"[sound:{filename}]"
    assert speech.calls[0]["text"] == "먹다"
    assert anki.actions()[-2:] == ["storeMediaFile", "updateNoteFields"]


@pytest.mark.unit
def test_add_audio_skips_note_without_korean_text(workflow, speech, anki, events):
    blank = Note(note_id=1, fields={})

    assert asyncio.run(workflow.add_audio(blank)) is None
    assert speech.calls == []
    assert anki.requests == []
    assert events.messages() == ["No Korean text found in note"]


@pytest.mark.unit
def test_add_audio_batch_reports_failures(workflow, notes, anki):
    anki.fail_updates[1003] = "note is locked"

    outcome = asyncio.run(workflow.add_audio_batch(notes))

    assert outcome.attempted == 3
    assert outcome.succeeded == 2
    assert outcome.failures[0].note.note_id == 1003
    assert len(anki.media) == 3


@pytest.mark.unit
def test_add_audio_without_speech_settings_fails_before_any_call(store, ai, speech, notes, anki):
    generator = ContentGenerator(
        Config(ai=AIConfig(api_key="k", base_url="u"), speech=SpeechConfig()),
        ai_provider=ai,
        speech_provider=speech,
    )
    workflow = AudioWorkflow(store, generator, lambda payload: None)
    before = len(anki.requests)

    with pytest.raises(ConfigurationError):
        asyncio.run(workflow.add_audio(notes[0]))
    assert speech.calls == []
    assert len(anki.requests) == before


@pytest.mark.unit
def test_add_audio_batch_without_speech_settings_stops_at_first_note(store, ai, speech, notes, anki, events):
    generator = ContentGenerator(
        Config(ai=AIConfig(api_key="k", base_url="u"), speech=SpeechConfig()),
        ai_provider=ai,
        speech_provider=speech,
    )
    workflow = AudioWorkflow(store, generator, events.callback)

    with pytest.raises(ConfigurationError):
        asyncio.run(workflow.add_audio_batch(notes))

    assert speech.calls == []
    assert "storeMediaFile" not in anki.actions()
    progress = [e for e in events if e["event"] == "progress"]
    assert len(progress) == 1
