import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from filmtivity.models import db, Movie, User

logger = logging.getLogger(__name__)

TEST_USER = {
    'username': 'testuser',
    'email': 'test@example.com',
    'password': 'password123',
}

TEST_MOVIES = [
    {
        'title': 'The Shawshank Redemption',
        'movie_id': '278',
        'poster_path': '/q6y0Go1tsGEsmtFryDOJo3dEmqu.jpg',
        'overview': 'Two imprisoned men bond over a number of years...',
        'release_date': '1994-09-23',
        'vote_average': 8.7,
        'original_language': 'en',
    },
    {
        'title': 'The Godfather',
        'movie_id': '238',
        'poster_path': '/3bhkrj58Vtu7enYsRolD1fZdja1.jpg',
        'overview': 'The aging patriarch of an organized crime dynasty...',
        'release_date': '1972-03-24',
        'vote_average': 8.7,
        'original_language': 'en',
    },
]


def clear_database(session):
    for table in reversed(db.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()


def seed_database(gateway):
    """Replace all data with a test user and two movies."""
    session = gateway.session
    clear_database(session)
    logger.info('Cleared existing data')

    user = User.create(session, **TEST_USER)
    movies = [Movie.create(session, **fields) for fields in TEST_MOVIES]

    # Only the first movie lists the test user as a saver; the user's
    # favorites hold both.
    movies[0].add_saver(user)
    for movie in movies:
        user.add_favorite(movie)
    session.commit()

    logger.info('Seeded %s with user %s and %d movies', gateway.host, user.username, len(movies))
    return user, movies


@click.command('seed')
@with_appcontext
def seed_command():
    """Reset the database and insert test data."""
    gateway = current_app.extensions['database_gateway']
    user, movies = seed_database(gateway)
    click.echo(f'Created test user: {user.username}')
    click.echo(f'Created {len(movies)} test movies')
    click.echo(f'Users: {User.query.count()}')
    click.echo(f'Movies: {Movie.query.count()}')
