import pytest

from test_session_manager import FakeApi

from dreamers.client.cli import main, play
from dreamers.client.session_manager import StoryManager
from dreamers.client.storage import LocalStore


def test_play_through_to_the_end(tmp_path, capsys):
    api = FakeApi()
    manager = StoryManager(api, LocalStore(str(tmp_path / "state.json")))
    answers = iter(["1", "9", "2", "3", "1", "2", "3"])

    assert play(manager, read=lambda prompt: next(answers)) == 0

    out = capsys.readouterr().out
    assert "SELECT YOUR DREAMER" in out
    assert "Pick one of: 1, 2, 3" in out
    assert "THE END" in out
    assert api.generated[0]["character"] == "pixl_drift"
    assert len(api.generated) == 5


def test_finished_playthrough_needs_reset(tmp_path, capsys):
    state = LocalStore(str(tmp_path / "state.json"))
    state.set_item("selectedCharacter", "steve")
    state.set_item("currentPage", "6")

    assert play(StoryManager(FakeApi(), state), read=lambda prompt: "1") == 0
    assert "--reset" in capsys.readouterr().out


def test_main_reports_load_error(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr("dreamers.client.cli.StoryApiClient", lambda base_url: _FailingApi())

    code = main(["--state-file", str(tmp_path / "s.json"), "--character", "steve"])

    assert code == 1
    assert "Error loading story" in capsys.readouterr().out


class _FailingApi(FakeApi):
    def __init__(self):
        super().__init__()
        self.fail_generate = True


def test_character_option_uses_canonical_id(tmp_path, monkeypatch):
    monkeypatch.setattr("dreamers.client.cli.StoryApiClient", lambda base_url: _FailingApi())
    state_file = str(tmp_path / "s.json")

    main(["--state-file", state_file, "--character", "rik"])

    assert LocalStore(state_file).get_item("selectedCharacter") == "Rik Blahah"


@pytest.mark.parametrize("character", ["nobody", "mystery"])
def test_unknown_or_locked_character_is_rejected(tmp_path, character, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--state-file", str(tmp_path / "s.json"), "--character", character])
    assert exc.value.code == 2
    assert "unknown or locked character" in capsys.readouterr().err
