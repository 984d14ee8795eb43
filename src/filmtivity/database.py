import logging

from sqlalchemy import exc as sa_exc, text

from filmtivity.errors import DatabaseConnectionError
from filmtivity.models import db

logger = logging.getLogger(__name__)


class DatabaseGateway:
    """Owns the application's single database engine.

    Built once by the app factory and handed to whatever needs storage,
    available afterwards as ``app.extensions['database_gateway']``.
    """

    def __init__(self, app, database=db):
        self.app = app
        self.database = database
        self.engine = None

    def connect(self, connection_string):
        bound = 'sqlalchemy' in self.app.extensions
        if bound and connection_string != self.app.config.get('SQLALCHEMY_DATABASE_URI'):
            # Flask-SQLAlchemy keeps one engine per app for the app's lifetime
            raise DatabaseConnectionError(f'{self.app.name} is already bound to another database')
        if self.engine is not None:
            return self.engine

        try:
            if not bound:
                self.app.config['SQLALCHEMY_DATABASE_URI'] = connection_string
                self.database.init_app(self.app)
            with self.app.app_context():
                engine = self.database.engine
                with engine.connect() as connection:
                    connection.execute(text('SELECT 1'))
        except (sa_exc.SQLAlchemyError, ImportError) as exc:
            # ImportError: the dialect's driver is not installed
            raise DatabaseConnectionError(f'Could not connect to the database: {exc}') from exc

        self.engine = engine
        logger.info('Database connected: %s', self.host)
        return engine

    def close(self):
        if self.engine is None:
            return
        self.engine.dispose()
        self.engine = None
        logger.info('Database connection closed')

    @property
    def host(self):
        if self.engine is None:
            return None
        url = self.engine.url
        return url.host or url.database

    @property
    def session(self):
        return self.database.session

    def create_all(self):
        with self.app.app_context():
            self.database.create_all()

    def drop_all(self):
        with self.app.app_context():
            self.database.drop_all()
