import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

import unittest
from filmtivity.app import create_app
from filmtivity.catalog import MovieSummary
from filmtivity.config import TestingConfig
from filmtivity.render import render_detail, render_list


FIGHT_CLUB = MovieSummary(
    id=550,
    title='Fight Club',
    overview='A ticking-time-bomb insomniac and a soap salesman...',
    vote_average=8.4,
    poster_path='/poster.jpg',
    release_date='1999-10-15',
    original_language='en',
)


class TestRender(unittest.TestCase):
    def setUp(self):
        self.app = create_app(TestingConfig)
        self.ctx = self.app.test_request_context()
        self.ctx.push()

    def tearDown(self):
        self.ctx.pop()
        self.app.extensions['database_gateway'].close()

    def test_render_list_empty(self):
        html = render_list([])
        self.assertIn('id="movie-container"', html)
        self.assertNotIn('class="flip', html)

    def test_render_list_cards(self):
        no_poster = MovieSummary(id=1, title='No Poster Movie', overview='Plot', vote_average=None)
        html = render_list([FIGHT_CLUB, no_poster])

        self.assertEqual(html.count('class="flip flip-vertical"'), 2)
        self.assertIn('src="https://image.tmdb.org/t/p/w500/poster.jpg"', html)
        self.assertEqual(html.count('<img'), 1)
        self.assertIn('No Poster Movie', html)
        self.assertIn('8.4', html)
        self.assertIn('N/A', html)

    def test_render_list_escapes_text(self):
        html = render_list([MovieSummary(id=1, title='<script>alert(1)</script>')])
        self.assertNotIn('<script>', html)
        self.assertIn('&lt;script&gt;', html)

    def test_render_detail_hidden_when_not_found(self):
        html = render_detail(None)
        self.assertIn('id="details-page"', html)
        self.assertIn('display: none', html)
        self.assertNotIn('id="title"', html)

    def test_render_detail_fields(self):
        html = render_detail(FIGHT_CLUB)

        self.assertNotIn('display: none', html)
        self.assertIn('<h2 id="title">Fight Club</h2>', html)
        self.assertIn('<span id="release_date">1999-10-15</span>', html)
        self.assertIn('<span id="vote_average">8.4</span>', html)
        self.assertIn('<span id="original_language">en</span>', html)
        self.assertIn('id="poster" src="https://image.tmdb.org/t/p/w500/poster.jpg"', html)


if __name__ == '__main__':
    unittest.main()
