import re
from datetime import datetime, timezone

from flask import current_app, has_app_context
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import exc as sa_exc
from sqlalchemy.orm import validates
from werkzeug.security import generate_password_hash, check_password_hash

from filmtivity.catalog import MovieSummary
from filmtivity.errors import IntegrityError, UniquenessError, ValidationError

db = SQLAlchemy()

EMAIL_PATTERN = re.compile(r'^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$')
DEFAULT_HASH_METHOD = 'pbkdf2:sha256:600000'


def _utcnow():
    return datetime.now(timezone.utc)


def _hash_method():
    if has_app_context():
        return current_app.config.get('PASSWORD_HASH_METHOD', DEFAULT_HASH_METHOD)
    return DEFAULT_HASH_METHOD


def _is_unique_violation(exc):
    # sqlite: "UNIQUE constraint failed", postgres: "violates unique constraint"
    # (SQLSTATE 23505), mysql: "Duplicate entry"
    if getattr(exc.orig, 'pgcode', None) == '23505':
        return True
    message = str(exc.orig).lower()
    return 'unique' in message or 'duplicate' in message


def _insert(session, record, unique_fields):
    session.add(record)
    try:
        session.commit()
    except sa_exc.IntegrityError as exc:
        session.rollback()
        if _is_unique_violation(exc):
            raise UniquenessError(f'{unique_fields} already exists') from exc
        raise ValidationError(f'Could not save {record!r}: {exc.orig}') from exc
    return record


# User.favorites and Movie.saved_by are stored separately and only
# link_favorite() writes both. favorited_by and saved_movies are the reverse
# views of each table, so deleting either side clears both tables.
user_favorites = db.Table(
    'user_favorites',
    db.Column('user_id', db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), primary_key=True),
    db.Column('movie_id', db.Integer, db.ForeignKey('movie.id', ondelete='CASCADE'), primary_key=True),
)

movie_saved_by = db.Table(
    'movie_saved_by',
    db.Column('movie_id', db.Integer, db.ForeignKey('movie.id', ondelete='CASCADE'), primary_key=True),
    db.Column('user_id', db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), primary_key=True),
)


class User(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(150), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    # Only ever holds a werkzeug hash, written by set_password()
    password_hash = db.Column('password', db.String(255), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)
    favorites = db.relationship(
        'Movie', secondary=user_favorites, collection_class=set, back_populates='favorited_by')
    saved_movies = db.relationship(
        'Movie', secondary=movie_saved_by, collection_class=set, back_populates='saved_by')

    @classmethod
    def create(cls, session, username, email, password):
        user = cls(username=username, email=email)
        user.set_password(password)
        return _insert(session, user, 'Username or email')

    @validates('username')
    def validate_username(self, key, username):
        if not username or len(username) < 4:
            raise ValidationError('Username must be at least 4 characters')
        return username

    @validates('email')
    def validate_email(self, key, email):
        if not email:
            raise ValidationError('Email is required')
        if not EMAIL_PATTERN.match(email):
            raise ValidationError('Please enter a valid email')
        return email

    def set_password(self, password):
        """Hash ``password`` with a fresh salt and store it."""
        if not password or len(password) < 6:
            raise ValidationError('Password must be at least 6 characters')
        self.password_hash = generate_password_hash(password, method=_hash_method())

    def verify_password(self, candidate):
        """Check ``candidate`` against the stored hash.

        Returns False on a mismatch. Raises IntegrityError when the stored
        value is not a hash werkzeug can check against.
        """
        stored = self.password_hash or ''
        if stored.count('$') < 2:
            raise IntegrityError(f'Stored password hash for {self.username!r} is malformed')
        try:
            return check_password_hash(stored, candidate or '')
        except ValueError as exc:
            raise IntegrityError(f'Stored password hash for {self.username!r} is malformed') from exc

    def add_favorite(self, movie):
        self.favorites.add(movie)

    def __repr__(self):
        return f'<User {self.username}>'


class Movie(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    # TMDB identifier, not the primary key
    movie_id = db.Column('movieId', db.String(64), unique=True, nullable=False)
    poster_path = db.Column(db.String(255))
    overview = db.Column(db.Text)
    release_date = db.Column(db.String(32))
    vote_average = db.Column(db.Float)
    original_language = db.Column(db.String(16))
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)
    saved_by = db.relationship(
        'User', secondary=movie_saved_by, collection_class=set, back_populates='saved_movies')
    favorited_by = db.relationship(
        'User', secondary=user_favorites, collection_class=set, back_populates='favorites')

    @classmethod
    def create(cls, session, **fields):
        for name in ('title', 'movie_id'):
            if fields.get(name) in (None, ''):
                raise ValidationError(f'{name} is required')
        return _insert(session, cls(**fields), f'Movie {fields["movie_id"]}')

    @classmethod
    def from_summary(cls, summary):
        return cls(
            title=summary.title,
            movie_id=summary.id,
            poster_path=summary.poster_path,
            overview=summary.overview,
            release_date=summary.release_date,
            vote_average=summary.vote_average,
            original_language=summary.original_language,
        )

    @validates('title', 'movie_id')
    def validate_required(self, key, value):
        if value is None or not str(value).strip():
            raise ValidationError(f'{key} is required')
        return value if key == 'title' else str(value)

    def add_saver(self, user):
        self.saved_by.add(user)

    def to_summary(self):
        return MovieSummary(
            id=self.movie_id,
            title=self.title,
            overview=self.overview or '',
            vote_average=self.vote_average,
            poster_path=self.poster_path,
            release_date=self.release_date or '',
            original_language=self.original_language or '',
        )

    def __repr__(self):
        return f'<Movie {self.movie_id} {self.title!r}>'


def link_favorite(user, movie):
    """Record ``movie`` as a favorite of ``user`` on both sides."""
    user.add_favorite(movie)
    movie.add_saver(user)
