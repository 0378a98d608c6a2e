import pytest
from sqlalchemy.exc import IntegrityError

from dreamers import models
from dreamers.core.errors import SessionMismatch
from dreamers.services.story import store


def _store(db, session_id="s1", page_number=1, story="First draft.", choices=("A", "B", "C"), image=None):
    return store.store_page(
        db,
        session_id=session_id,
        character="steve",
        page_number=page_number,
        story_text=story,
        choices=list(choices),
        image_url=image,
        terminal_page=5,
    )


def test_second_write_overwrites_same_page(db):
    _store(db)
    store.save_choice(db, "s1", 1, 2)

    _store(db, story="Second draft.", choices=("X", "Y"), image="https://img/2.png")

    pages = db.query(models.StoryPage).filter_by(session_id="s1", page_number=1).all()
    assert len(pages) == 1
    assert pages[0].story_text == "Second draft."
    assert pages[0].choices == ["X", "Y"]
    assert pages[0].choice3_text is None
    assert pages[0].image_url == "https://img/2.png"
    assert pages[0].choice_made is None


def test_duplicate_row_rejected_by_constraint(db):
    _store(db)
    db.add(models.StoryPage(session_id="s1", page_number=1, story_text="dup"))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_unknown_session_is_adopted(db):
    _store(db, session_id="from-browser", page_number=2)

    session = store.get_session(db, "from-browser")
    assert session.character_type == "steve"
    assert session.current_page == 2


def test_current_page_never_goes_down(db):
    _store(db, page_number=3)
    _store(db, page_number=2)
    assert store.get_session(db, "s1").current_page == 3


def test_save_choice(db):
    _store(db)
    assert store.save_choice(db, "s1", 1, 3) is True
    assert store.get_page(db, "s1", 1).choice_made == 3

    # last write wins
    assert store.save_choice(db, "s1", 1, 1) is True
    assert store.get_page(db, "s1", 1).choice_made == 1


def test_save_choice_without_page(db):
    assert store.save_choice(db, "nope", 1, 1) is False


def test_more_than_three_choices_truncated(db):
    page = _store(db, choices=("A", "B", "C", "D"))
    assert page.choices == ["A", "B", "C"]


def test_create_session_ids_are_unique(db):
    a = store.create_session(db, "steve")
    b = store.create_session(db, "steve", player_id="player-7")
    assert a.id != b.id
    assert b.player_id == "player-7"
    assert a.current_page == 0


def test_achievement_unlock_is_idempotent(db):
    session = store.create_session(db, "FiFi")
    first = store.unlock_achievement(db, session.id, "found_easter_egg")
    second = store.unlock_achievement(db, session.id, "found_easter_egg")
    assert first.id == second.id
    assert len(store.list_achievements(db, session.id)) == 1


def test_session_reused_for_another_character_is_rejected(db):
    _store(db, session_id="owned")

    with pytest.raises(SessionMismatch):
        store.store_page(
            db,
            session_id="owned",
            character="FiFi",
            page_number=2,
            story_text="Borrowed session.",
            choices=["A"],
            image_url=None,
            terminal_page=5,
        )

    assert store.get_page(db, "owned", 2) is None
    assert store.get_session(db, "owned").current_page == 1
