from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional

from .. import tagfields
from ..fields import TagField
from ..models import Article, Note, Tag


@tagfields.register
class ArticleForm(FlaskForm):
    title = StringField(
        "Title",
        validators=[DataRequired(), Length(max=500)],
        render_kw={"placeholder": "Article title"},
    )
    body = TextAreaField("Body", validators=[Optional(), Length(max=20000)], render_kw={"rows": 8})
    tags = TagField(
        "Tags",
        validators=[Optional(), Length(max=1000)],
        topic_model=Article,
        tag_filter=Tag.is_hidden == False,  # noqa: E712
        tag_sort=Tag.title,
        render_kw={"placeholder": "Space-separated tags"},
    )


@tagfields.register
class NoteForm(FlaskForm):
    title = StringField("Title", validators=[DataRequired(), Length(max=500)])
    keywords = TagField(
        "Keywords",
        validators=[Optional(), Length(max=1000)],
        topic_model=Note,
        separator=",",
        tag_filter=Note.is_archived == False,  # noqa: E712
        tag_sort=Note.title,
        render_kw={"placeholder": "Comma-separated keywords"},
    )
