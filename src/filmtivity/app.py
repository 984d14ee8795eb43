import logging
import os
import sys

import sentry_sdk
from flask import Flask, render_template, request, flash, send_from_directory
from flask_migrate import Migrate
from sentry_sdk.integrations.flask import FlaskIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sqlalchemy.exc import OperationalError

from filmtivity import render
from filmtivity.catalog import CatalogClient
from filmtivity.config import Config
from filmtivity.database import DatabaseGateway
from filmtivity.errors import DatabaseConnectionError, NetworkError, ValidationError
from filmtivity.models import db
from filmtivity.seed import seed_command

logger = logging.getLogger(__name__)


def configure_logging(app):
    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )


def init_sentry(app):
    dsn = app.config.get('SENTRY_DSN')
    if not dsn:
        return
    sentry_sdk.init(
        dsn=dsn,
        integrations=[FlaskIntegration(), SqlalchemyIntegration()],
        traces_sample_rate=1.0,
        profiles_sample_rate=1.0,
    )


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    configure_logging(app)
    init_sentry(app)

    gateway = DatabaseGateway(app)
    try:
        gateway.connect(app.config['SQLALCHEMY_DATABASE_URI'])
    except DatabaseConnectionError as exc:
        logger.critical('Error: %s', exc)
        sys.exit(1)
    app.extensions['database_gateway'] = gateway

    Migrate(app, db)
    try:
        gateway.create_all()
    except OperationalError:
        logger.info('Tables already exist. Skipping creation.')

    catalog = CatalogClient.from_config(app.config)
    app.extensions['catalog_client'] = catalog

    render.init_app(app)
    app.cli.add_command(seed_command)

    scripts_dir = os.path.join(app.static_folder, 'src')

    def search_or_flash(query):
        try:
            movie = catalog.search_movie(query)
        except ValidationError as exc:
            flash(str(exc), 'warning')
            return None
        except NetworkError as exc:
            logger.error('Movie search failed: %s', exc)
            flash('The movie catalog is unavailable right now. Please try again later.', 'danger')
            return None

        if movie is None:
            flash(f'No movie found for "{query.strip()}"', 'info')
        return movie

    @app.route('/')
    def home():
        movies = catalog.fetch_top_movies()
        return render_template('home.html', movie_list=render.render_list(movies))

    @app.route('/search')
    def search():
        movie = search_or_flash(request.args.get('query', ''))
        return render_template('search.html', details=render.render_detail(movie))

    @app.route('/src/<path:filename>')
    def client_script(filename):
        return send_from_directory(scripts_dir, filename)

    @app.errorhandler(404)
    def not_found(error):
        return render_template('404.html'), 404

    return app


def main():
    app = create_app()
    logger.info('Server is started on port %s', app.config['PORT'])
    app.run(port=app.config['PORT'])


if __name__ == '__main__':
    main()
