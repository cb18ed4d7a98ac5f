"""Flask extension serving autocompletion for tag fields."""

from ..assets import render_page_assets
from ..store import SQLAlchemyRecordStore


class TagFields:
    """Keeps track of the forms whose tag fields may be queried for suggestions.

    Forms are registered under a key (the class name by default) which becomes
    part of the suggest URL.
    """

    def __init__(self, app=None, db=None):
        self.db = db
        self._forms = {}
        if app is not None:
            self.init_app(app, db)

    def init_app(self, app, db=None):
        if db is not None:
            self.db = db
        app.config.setdefault("TAGFIELD_URL_PREFIX", "/_tagfield")
        app.config.setdefault("TAGFIELD_DEFAULT_SEPARATOR", " ")
        app.config.setdefault("TAGFIELD_SCRIPTS", [])
        app.config.setdefault("TAGFIELD_STYLES", [])
        app.config.setdefault("TAGFIELD_SUGGEST_RATE_LIMIT", "120 per minute")

        from .routes import suggest_bp

        app.register_blueprint(suggest_bp, url_prefix=app.config["TAGFIELD_URL_PREFIX"])
        app.add_template_global(render_page_assets, "tagfield_assets")
        app.extensions["tagfield"] = self

    def register(self, form_cls=None, name=None):
        """Register a form class. Works as a plain call or as a decorator."""

        def decorator(cls):
            self._forms[name or cls.__name__] = cls
            return cls

        if form_cls is None:
            return decorator
        return decorator(form_cls)

    def form_class(self, key):
        return self._forms.get(key)

    def form_key(self, form_cls):
        for key, cls in self._forms.items():
            if cls is form_cls:
                return key
        return None

    def record_store(self, model):
        return SQLAlchemyRecordStore(model, self.db.session)
