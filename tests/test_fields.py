"""Tests for TagField suggest, save and binding behaviour."""

import pytest
from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from wtforms import StringField

from tagfield import tagfields
from tagfield.articles.forms import ArticleForm, NoteForm
from tagfield.errors import TagFieldConfigurationError
from tagfield.fields import TagField
from tagfield.models import Article, Note, Tag
from tagfield.models import db as _db
from tests.conftest import _make_article, _make_note, _make_tag


class SpaceNoteForm(FlaskForm):
    keywords = TagField("Keywords", topic_model=Note)


class MisconfiguredArticleForm(FlaskForm):
    title = StringField("Title")
    labels = TagField("Labels", topic_model=Article)


class AuthorTagForm(FlaskForm):
    author = TagField("Author", topic_model=Article, tag_value_attribute="name")


class UntypedForm(FlaskForm):
    tags = TagField("Tags")


class MoodForm(FlaskForm):
    mood = TagField("Mood", custom_tags=["happy", "sad", "tired"])


def _form(form_cls, **data):
    return form_cls(formdata=MultiDict(data), meta={"csrf": False})


# ── Configuration ──────────────────────────────────────────────────


def test_defaults(request_ctx):
    field = UntypedForm(meta={"csrf": False}).tags
    assert field.topic_model is None
    assert field.tag_value_attribute == "title"
    assert field.separator == " "
    assert field.custom_tags is None
    assert field.tag_filter is None
    assert field.tag_sort is None


def test_options_can_be_changed_after_construction(request_ctx):
    field = UntypedForm(meta={"csrf": False}).tags
    field.topic_model = Note
    field.separator = ";"
    field.tag_sort = Note.title
    assert field.topic_model is Note
    assert field.separator == ";"
    assert field.tag_sort is not None


def test_default_separator_comes_from_config(app, request_ctx):
    app.config["TAGFIELD_DEFAULT_SEPARATOR"] = ","
    try:
        assert UntypedForm(meta={"csrf": False}).tags.separator == ","
    finally:
        app.config["TAGFIELD_DEFAULT_SEPARATOR"] = " "


def test_record_store_is_cached_per_field(request_ctx):
    field = ArticleForm(meta={"csrf": False}).tags
    assert field.record_store() is field.record_store()
    assert field.record_store(Note) is not field.record_store()


# ── Suggest ────────────────────────────────────────────────────────


def test_suggest_relation_mode_matches_substring(request_ctx):
    for title in ("Red", "Blue", "Green"):
        _make_tag(title)

    assert ArticleForm(meta={"csrf": False}).tags.suggest("re") == ["Green", "Red"]


def test_suggest_relation_mode_skips_filtered_tags(request_ctx):
    _make_tag("Red")
    _make_tag("Redacted", is_hidden=True)

    assert ArticleForm(meta={"csrf": False}).tags.suggest("RED") == ["Red"]


def test_suggest_scalar_mode_returns_only_matching_tokens(request_ctx):
    _make_note(title="One", keywords="red blue")
    _make_note(title="Two", keywords="green")

    assert set(SpaceNoteForm(meta={"csrf": False}).keywords.suggest("re")) == {"red", "green"}


def test_suggest_scalar_mode_dedupes_case_sensitively(request_ctx):
    _make_note(title="One", keywords="Red red")
    _make_note(title="Two", keywords="red tired")

    result = SpaceNoteForm(meta={"csrf": False}).keywords.suggest("red")
    assert sorted(result) == ["Red", "red", "tired"]


def test_suggest_scalar_mode_uses_field_separator(request_ctx):
    _make_note(title="A", keywords="new york, paris")
    _make_note(title="B", keywords="york minster")
    _make_note(title="C", keywords="new york", is_archived=True)

    assert NoteForm(meta={"csrf": False}).keywords.suggest("york") == ["new york", "york minster"]


def test_suggest_custom_tags_are_returned_unfiltered(request_ctx):
    assert MoodForm(meta={"csrf": False}).mood.suggest("zzz") == ["happy", "sad", "tired"]


def test_suggest_misconfigured_field(request_ctx):
    with pytest.raises(TagFieldConfigurationError):
        MisconfiguredArticleForm(meta={"csrf": False}).labels.suggest("x")


def test_suggest_without_topic_model(request_ctx):
    with pytest.raises(TagFieldConfigurationError, match="no topic model"):
        UntypedForm(meta={"csrf": False}).tags.suggest("x")


# ── Save: relation mode ────────────────────────────────────────────


def test_save_replaces_relation_with_unique_tokens(request_ctx):
    article = _make_article(tags=["gamma"])

    form = _form(ArticleForm, title="Updated", tags="alpha alpha beta")
    form.populate_obj(article)
    _db.session.commit()

    article = _db.session.get(Article, article.id)
    assert article.title == "Updated"
    assert sorted(t.title for t in article.tags) == ["alpha", "beta"]


def test_save_reuses_existing_tag_entities(request_ctx):
    alpha = _make_tag("alpha")
    article = _make_article()

    _form(ArticleForm, title="T", tags="alpha").populate_obj(article)
    _db.session.commit()

    assert article.tags == [alpha]
    assert Tag.query.count() == 1


def test_save_persists_new_record_before_linking(request_ctx):
    article = Article()
    _form(ArticleForm, title="Fresh", tags="one two").populate_obj(article)

    assert article.id is not None
    _db.session.commit()
    assert sorted(t.title for t in _db.session.get(Article, article.id).tags) == ["one", "two"]


def test_save_with_empty_value_is_a_noop(request_ctx):
    article = _make_article(tags=["keep"])

    form = _form(ArticleForm, title="Same", tags="")
    form.tags.save_into(article)
    _db.session.commit()

    assert [t.title for t in article.tags] == ["keep"]


def test_save_misconfigured_field_writes_nothing(request_ctx):
    article = Article(title="Never saved")
    form = _form(MisconfiguredArticleForm, title="Never saved", labels="alpha")

    with pytest.raises(TagFieldConfigurationError):
        form.labels.save_into(article)

    assert article.id is None
    assert Tag.query.count() == 0


# ── Save: scalar mode ──────────────────────────────────────────────


def test_save_scalar_normalises_tokens(request_ctx):
    note = _make_note(keywords="old")

    _form(NoteForm, title="N", keywords=" b,  a ,, b ").populate_obj(note)
    _db.session.commit()

    assert _db.session.get(Note, note.id).keywords == "b,a"


def test_save_scalar_whitespace_only_value_clears_column(request_ctx):
    note = _make_note(keywords="old")

    _form(SpaceNoteForm, keywords="   ").keywords.save_into(note)
    assert note.keywords == ""


# ── Binding from an existing record ────────────────────────────────


def test_bind_relation_joins_tag_values(request_ctx):
    article = _make_article(tags=["alpha", "beta"])

    form = ArticleForm(obj=article, meta={"csrf": False})
    assert form.tags.data == "alpha beta"


def test_bind_scalar_uses_stored_value(request_ctx):
    note = _make_note(keywords="x,y")

    form = NoteForm(obj=note, meta={"csrf": False})
    assert form.keywords.data == "x,y"


def test_bind_rejects_single_valued_relation(request_ctx):
    from tagfield.models import Author

    article = Article(title="By someone", author=Author(name="Ada"))
    with pytest.raises(TagFieldConfigurationError, match="many-to-many"):
        AuthorTagForm(obj=article, meta={"csrf": False})


def test_registered_forms_have_keys():
    assert tagfields.form_key(ArticleForm) == "ArticleForm"
    assert tagfields.form_class("NoteForm") is NoteForm
    assert tagfields.form_key(SpaceNoteForm) is None


class PresetForm(FlaskForm):
    tags = TagField("Tags", topic_model=Article, default=["alpha", "beta"])


def test_bind_plain_string_list_default(request_ctx):
    form = PresetForm(meta={"csrf": False})
    assert form.tags.data == "alpha beta"
