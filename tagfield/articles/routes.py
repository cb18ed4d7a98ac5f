from flask import Blueprint, current_app, flash, redirect, render_template, url_for
from sqlalchemy.exc import SQLAlchemyError

from ..models import Article, Note, db
from .forms import ArticleForm, NoteForm

articles_bp = Blueprint("articles", __name__)


def _save_record(record, form, template, endpoint, id_kwarg):
    if form.validate_on_submit():
        try:
            form.populate_obj(record)
            db.session.add(record)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception("Failed to save %r", record)
            flash("Could not save your changes. Please try again.", "danger")
            return render_template(template, form=form, record=record), 500
        current_app.logger.info("Saved %r", record)
        flash("Saved.", "success")
        return redirect(url_for(endpoint, **{id_kwarg: record.id}))
    return render_template(template, form=form, record=record)


@articles_bp.route("/")
def index():
    articles = Article.query.order_by(Article.title).all()
    notes = Note.query.order_by(Note.title).all()
    return render_template("index.html", articles=articles, notes=notes)


# ── Articles ───────────────────────────────────────────────────────


@articles_bp.route("/articles/new", methods=["GET", "POST"])
def article_new():
    article = Article()
    return _save_record(article, ArticleForm(obj=article), "articles/edit.html", "articles.article_edit", "article_id")


@articles_bp.route("/articles/<int:article_id>/edit", methods=["GET", "POST"])
def article_edit(article_id):
    article = db.get_or_404(Article, article_id)
    return _save_record(article, ArticleForm(obj=article), "articles/edit.html", "articles.article_edit", "article_id")


# ── Notes ──────────────────────────────────────────────────────────


@articles_bp.route("/notes/new", methods=["GET", "POST"])
def note_new():
    note = Note()
    return _save_record(note, NoteForm(obj=note), "notes/edit.html", "articles.note_edit", "note_id")


@articles_bp.route("/notes/<int:note_id>/edit", methods=["GET", "POST"])
def note_edit(note_id):
    note = db.get_or_404(Note, note_id)
    return _save_record(note, NoteForm(obj=note), "notes/edit.html", "articles.note_edit", "note_id")
