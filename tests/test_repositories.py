#!/usr/bin/env python3
"""
Unit tests for the reviewhub/repositories layer.

Run with:
    python -m pytest tests/test_repositories.py
"""
import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from reviewhub.config import Settings
from reviewhub.database import init_db, make_engine, make_session_factory
from reviewhub.repositories import GameRepository, ReviewRepository, UserRepository


# ---------------------------------------------------------------------------
# In-memory DB helper
# ---------------------------------------------------------------------------

def _make_session():
    engine = make_engine(Settings(database_url='sqlite:///:memory:'))
    init_db(engine)
    return make_session_factory(engine)()


class RepoTestCase(unittest.TestCase):

    def setUp(self):
        self.db = _make_session()
        self.users = UserRepository(self.db)
        self.games = GameRepository(self.db)
        self.reviews = ReviewRepository(self.db)

    def tearDown(self):
        self.db.close()

    def _game(self, name='Chess', platform=None):
        return self.games.insert(name=name, description='Classic', price=0,
                                 platform=platform or ['PC'])


# ===========================================================================
# Reads and inserts
# ===========================================================================

class TestInsertAndFind(RepoTestCase):

    def test_insert_assigns_identity(self):
        user = self.users.insert(name='Ada', email='ada@example.com')
        self.assertIsInstance(user.id, int)

    def test_find_by_id(self):
        user = self.users.insert(name='Ada', email='ada@example.com')
        found = self.users.find_by_id(user.id)
        self.assertEqual(found.email, 'ada@example.com')

    def test_find_by_id_missing_returns_none(self):
        self.assertIsNone(self.users.find_by_id(999))

    def test_find_by_email(self):
        self.users.insert(name='Ada', email='ada@example.com')
        self.assertEqual(self.users.find_by_email('ada@example.com').name, 'Ada')
        self.assertIsNone(self.users.find_by_email('bob@example.com'))

    def test_find_by_unknown_field_raises(self):
        with self.assertRaises(ValueError):
            self.users.find_by('nickname', 'ada')

    def test_find_all_ordered_by_id(self):
        first = self._game('Chess')
        second = self._game('Go')
        self.assertEqual([g.id for g in self.games.find_all()], [first.id, second.id])

    def test_platform_order_preserved(self):
        game = self._game(platform=['Switch', 'PC', 'PS5'])
        self.db.expire_all()
        self.assertEqual(self.games.find_by_id(game.id).platform, ['Switch', 'PC', 'PS5'])

    def test_find_by_game_and_user(self):
        user = self.users.insert(name='Ada', email='ada@example.com')
        chess = self._game('Chess')
        go = self._game('Go')
        self.reviews.insert(rating=5, comment='Great', game_id=chess.id, user_id=user.id)
        self.reviews.insert(rating=3, comment='Fine', game_id=go.id, user_id=user.id)
        self.assertEqual(len(self.reviews.find_by_game(chess.id)), 1)
        self.assertEqual(len(self.reviews.find_by_user(user.id)), 2)


# ===========================================================================
# Updates
# ===========================================================================

class TestUpdate(RepoTestCase):

    def test_update_only_given_fields(self):
        game = self._game()
        updated = self.games.update(game.id, {'price': 10})
        self.assertEqual(updated.price, 10)
        self.assertEqual(updated.name, 'Chess')
        self.assertEqual(updated.description, 'Classic')
        self.assertEqual(updated.platform, ['PC'])

    def test_update_missing_returns_none(self):
        self.assertIsNone(self.games.update(999, {'price': 10}))

    def test_update_unknown_field_raises(self):
        game = self._game()
        with self.assertRaises(ValueError):
            self.games.update(game.id, {'genre': 'board'})


# ===========================================================================
# Deletes
# ===========================================================================

class TestDelete(RepoTestCase):

    def test_delete_by_id_returns_row(self):
        game = self._game()
        game_id = game.id
        deleted = self.games.delete_by_id(game_id)
        self.assertEqual(deleted.name, 'Chess')
        self.assertIsNone(self.games.find_by_id(game_id))

    def test_delete_missing_returns_none(self):
        self.assertIsNone(self.games.delete_by_id(999))

    def test_delete_where_returns_count(self):
        user = self.users.insert(name='Ada', email='ada@example.com')
        chess = self._game('Chess')
        go = self._game('Go')
        for rating in (1, 2, 3):
            self.reviews.insert(rating=rating, comment='c', game_id=chess.id, user_id=user.id)
        self.reviews.insert(rating=4, comment='c', game_id=go.id, user_id=user.id)
        self.assertEqual(self.reviews.delete_by_game(chess.id), 3)
        self.assertEqual(self.reviews.find_by_game(chess.id), [])
        self.assertEqual(len(self.reviews.find_by_game(go.id)), 1)

    def test_delete_where_nothing_matches(self):
        self.assertEqual(self.reviews.delete_by_user(42), 0)


if __name__ == '__main__':
    unittest.main()
