from unittest.mock import patch

import pytest

from tagfield.models import Article, Note, Tag
from tagfield.models import db as _db


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing (session-scoped)."""
    with patch("tagfield.upgrade"):
        from tagfield import create_app

        _app = create_app("testing")

    yield _app


@pytest.fixture(autouse=True)
def db(app):
    """Create all tables before each test, drop them after."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def request_ctx(app, db):
    """A request context for building and rendering forms directly."""
    with app.test_request_context():
        yield


def _make_tag(title, is_hidden=False):
    """Create and persist a Tag. Callable multiple times per test."""
    tag = Tag(title=title, is_hidden=is_hidden)
    _db.session.add(tag)
    _db.session.commit()
    return tag


def _make_article(title="Test Article", tags=()):
    """Create and persist an Article linked to Tags with the given titles."""
    article = Article(title=title)
    for name in tags:
        tag = Tag.query.filter_by(title=name).first() or Tag(title=name)
        article.tags.append(tag)
    _db.session.add(article)
    _db.session.commit()
    return article


def _make_note(title="Test Note", keywords=None, is_archived=False):
    """Create and persist a Note with a raw keywords string."""
    note = Note(title=title, keywords=keywords, is_archived=is_archived)
    _db.session.add(note)
    _db.session.commit()
    return note
