from flask import Blueprint, abort, current_app, jsonify, request

from .. import limiter
from ..fields import SUGGEST_SUFFIX, TagField

suggest_bp = Blueprint("tagfield", __name__, static_folder="static")


def _suggest_rate_limit():
    return current_app.config["TAGFIELD_SUGGEST_RATE_LIMIT"]


@suggest_bp.route("/<form_name>/<field_name>" + SUGGEST_SUFFIX)
@limiter.limit(_suggest_rate_limit)
def suggest(form_name, field_name):
    form_cls = current_app.extensions["tagfield"].form_class(form_name)
    if form_cls is None:
        abort(404)

    form = form_cls(formdata=None, meta={"csrf": False})
    field = form._fields.get(field_name)
    if not isinstance(field, TagField):
        abort(404)

    query = request.args.get("tag", "")
    return jsonify(field.suggest(query))
