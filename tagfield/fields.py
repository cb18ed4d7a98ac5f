"""WTForms field for entering tags with autocompletion.

The field stores its value either in a many-to-many relationship of the
record (one tag entity per token, created on demand) or in a plain text
column holding the separator-joined tokens. Which of the two applies is
detected from the mapped model the first time the field needs it.

Example::

    class Article(db.Model):
        tags = db.relationship("Tag", secondary=article_tags)

    class Tag(db.Model):
        title = db.Column(db.String(100), unique=True)

    @tagfields.register
    class ArticleForm(FlaskForm):
        tags = TagField("Tags", topic_model=Article)

    form = ArticleForm(obj=article)
    if form.validate_on_submit():
        form.populate_obj(article)
"""

from urllib.parse import urlparse

from flask import current_app, has_app_context, url_for
from jinja2.utils import htmlsafe_json_dumps
from wtforms import StringField
from wtforms.widgets import TextInput

from .assets import page_assets
from .errors import TagFieldConfigurationError
from .store import StorageMode
from .tokens import DEFAULT_SEPARATOR, join_tags, split_tags

SUGGEST_SUFFIX = "/suggest"


def _asset_url(path):
    if path.startswith(("/", "http://", "https://")):
        return path
    return url_for("tagfield.static", filename=path)


class TagInput(TextInput):
    """Text input wired to the client-side ``tagSuggest`` behaviour."""

    def __call__(self, field, **kwargs):
        field.register_assets()
        kwargs.setdefault("autocomplete", "off")
        kwargs.setdefault("data-tagfield", "")
        return super().__call__(field, **kwargs)


class TagField(StringField):
    widget = TagInput()

    def __init__(
        self,
        label=None,
        validators=None,
        topic_model=None,
        tag_value_attribute="title",
        separator=None,
        custom_tags=None,
        tag_filter=None,
        tag_sort=None,
        **kwargs,
    ):
        self._form = kwargs.get("_form")
        super().__init__(label, validators, **kwargs)
        self.topic_model = topic_model
        self.tag_value_attribute = tag_value_attribute
        self._separator = separator
        self.custom_tags = custom_tags
        self.tag_filter = tag_filter
        self.tag_sort = tag_sort
        self._stores = {}

    @property
    def separator(self):
        if self._separator is not None:
            return self._separator
        if has_app_context():
            return current_app.config.get("TAGFIELD_DEFAULT_SEPARATOR", DEFAULT_SEPARATOR)
        return DEFAULT_SEPARATOR

    @separator.setter
    def separator(self, value):
        self._separator = value

    # ── Storage ─────────────────────────────────────────────────────

    def record_store(self, model=None):
        """Return the record store for ``model`` (default: the topic model)."""
        model = model or self.topic_model
        if model is None:
            raise TagFieldConfigurationError(f"Tag field {self.short_name!r} has no topic model")
        if model not in self._stores:
            self._stores[model] = current_app.extensions["tagfield"].record_store(model)
        return self._stores[model]

    def process_data(self, value):
        if value is None or isinstance(value, str):
            self.data = value
            return
        try:
            entities = list(value)
        except TypeError:
            raise TagFieldConfigurationError(
                f"Tag field {self.short_name!r} can only bind to a text column or a many-to-many relation"
            ) from None
        tags = [e if isinstance(e, str) else getattr(e, self.tag_value_attribute) for e in entities]
        self.data = join_tags(tags, self.separator)

    def populate_obj(self, obj, name):
        self.save_into(obj, name)

    def save_into(self, record, name=None):
        """Write the submitted tags into ``record``. Nothing happens for an empty value."""
        if not self.data:
            return
        name = name or self.short_name
        store = self.record_store(type(record))
        mode = store.storage_mode(name)
        tags = split_tags(self.data, self.separator)

        if mode is StorageMode.SCALAR:
            setattr(record, name, join_tags(tags, self.separator))
            return

        # Join rows need the record's primary key.
        store.ensure_persistent(record)
        tag_model = store.related_model(name)
        entities = [store.find_or_create(tag_model, self.tag_value_attribute, tag) for tag in tags]
        store.replace_related(record, name, entities)

    # ── Autocompletion ──────────────────────────────────────────────

    def suggest(self, query):
        """Return the tags matching ``query`` as a list of strings."""
        if self.custom_tags:
            return list(self.custom_tags)

        store = self.record_store()
        mode = store.storage_mode(self.short_name)
        if mode is StorageMode.RELATION:
            return store.search_related(
                self.short_name,
                self.tag_value_attribute,
                query,
                where=self.tag_filter,
                order_by=self.tag_sort,
            )

        needle = (query or "").lower()
        values = store.search_attribute(self.short_name, query, where=self.tag_filter, order_by=self.tag_sort)
        suggestions = []
        for value in values:
            # A record can match on the whole string; keep only the matching tags.
            for tag in split_tags(value, self.separator):
                if needle in tag.lower() and tag not in suggestions:
                    suggestions.append(tag)
        return suggestions

    @property
    def suggest_url(self):
        """URL path of the suggest endpoint for this field."""
        tagfields = current_app.extensions["tagfield"]
        form_key = tagfields.form_key(type(self._form)) if self._form is not None else None
        if form_key is None:
            raise TagFieldConfigurationError(
                f"Tag field {self.short_name!r} belongs to a form that is not registered for suggestions"
            )
        return urlparse(url_for("tagfield.suggest", form_name=form_key, field_name=self.short_name)).path

    # ── Rendering ───────────────────────────────────────────────────

    def client_options(self):
        if self.custom_tags:
            return {"tags": list(self.custom_tags)}
        return {"url": self.suggest_url, "separator": self.separator}

    def client_script(self):
        selector = htmlsafe_json_dumps(f"#{self.id}")
        options = htmlsafe_json_dumps(self.client_options())
        return f"jQuery(function() {{ jQuery({selector}).tagSuggest({options}); }});"

    def register_assets(self):
        assets = page_assets()
        for path in current_app.config["TAGFIELD_STYLES"]:
            assets.register_style(_asset_url(path))
        for path in current_app.config["TAGFIELD_SCRIPTS"]:
            assets.register_script(_asset_url(path))
        assets.register_inline(self.id, self.client_script())
