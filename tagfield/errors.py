from flask import current_app, jsonify, render_template, request


class TagFieldConfigurationError(RuntimeError):
    """A tag field is wired to something that is neither a relation nor a column.

    This is a setup mistake, never a user input problem.
    """


def _wants_json():
    return request.path.startswith(current_app.config["TAGFIELD_URL_PREFIX"]) or (
        request.accept_mimetypes.best == "application/json"
    )


def register_error_handlers(app):
    @app.errorhandler(404)
    def not_found(e):
        if _wants_json():
            return jsonify(error="not found"), 404
        return render_template("errors/404.html"), 404

    @app.errorhandler(TagFieldConfigurationError)
    def misconfigured(e):
        app.logger.error("Tag field misconfigured on %s: %s", request.path, e, exc_info=e)
        if _wants_json():
            return jsonify(error="tag field misconfigured"), 500
        return render_template("errors/500.html"), 500

    @app.errorhandler(500)
    def internal_error(e):
        app.logger.exception("Internal server error: %s", e)
        if _wants_json():
            return jsonify(error="internal server error"), 500
        return render_template("errors/500.html"), 500
