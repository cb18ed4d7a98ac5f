"""Per-request registry of the scripts and styles a page needs."""

from flask import g
from markupsafe import Markup


class PageAssets:
    """Collects asset URLs and inline scripts; each is emitted once per page."""

    def __init__(self):
        self.scripts = []
        self.styles = []
        self.inline_scripts = {}

    def register_script(self, url):
        if url not in self.scripts:
            self.scripts.append(url)

    def register_style(self, url):
        if url not in self.styles:
            self.styles.append(url)

    def register_inline(self, key, code):
        """Register an inline script under ``key``; a later call replaces it."""
        self.inline_scripts[key] = code

    def render(self, nonce=None):
        nonce_attr = Markup(' nonce="{}"').format(nonce) if nonce else ""
        parts = [Markup('<link rel="stylesheet" href="{}">').format(url) for url in self.styles]
        parts += [Markup('<script src="{}"></script>').format(url) for url in self.scripts]
        parts += [
            Markup("<script{}>").format(nonce_attr) + Markup(code) + Markup("</script>")
            for code in self.inline_scripts.values()
        ]
        return Markup("\n").join(parts)


def page_assets():
    """Return the asset registry of the current request."""
    if "tagfield_assets" not in g:
        g.tagfield_assets = PageAssets()
    return g.tagfield_assets


def render_page_assets():
    return page_assets().render(nonce=g.get("csp_nonce"))
