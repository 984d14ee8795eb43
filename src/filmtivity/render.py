from flask import current_app, render_template
from markupsafe import Markup


def poster_url(path):
    if not path:
        return None
    return current_app.config['TMDB_IMAGE_BASE_URL'] + path


def render_list(movies):
    """Render the movie container with one card per movie.

    The returned markup is the whole container, so it replaces whatever
    the page showed before. An empty sequence gives an empty container.
    """
    return Markup(render_template('partials/movie_cards.html', movies=list(movies)))


def render_detail(movie):
    # movie is None when the search found nothing: the panel renders hidden
    return Markup(render_template('partials/movie_detail.html', movie=movie))


def init_app(app):
    app.add_template_filter(poster_url)
