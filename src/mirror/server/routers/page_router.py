import logging
from flask import Blueprint, Response, current_app, render_template

from fetcher.utils.url_utils import UrlUtils
from rewriter.constants import UPSTREAM_HOST

logger = logging.getLogger(__name__)

# Blueprint serving every proxied page
page_router = Blueprint('page_router', __name__)


def get_mirror_controller():
    """Retrieves the mirror controller from the Flask application context."""
    controller = current_app.config.get('MIRROR_CONTROLLER')
    if not controller:
        raise RuntimeError("MirrorController is not set in app.config['MIRROR_CONTROLLER']")
    return controller


@page_router.route('/', defaults={'path': ''})
@page_router.route('/<path:path>')
def mirror_page(path: str):
    """
    Catch-all route: maps the request path onto the upstream site,
    returns the rewritten page or the fallback error page.
    """
    upstream_path = UrlUtils.build_upstream_path(path.split('/'))

    try:
        html = get_mirror_controller().render(upstream_path)
    except Exception as e:
        # The fallback page is plain template output, never passed through the rewriter
        body = render_template(
            'error.html',
            host=UPSTREAM_HOST,
            path=upstream_path,
            message=str(e) or type(e).__name__,
        )
        return Response(body, status=502, mimetype='text/html')

    return Response(html, status=200, mimetype='text/html')
