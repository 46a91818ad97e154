#!/usr/bin/env python3
"""
Tests for the GraphQL schema (queries, mutations, error codes).

Run with:
    python -m pytest tests/test_schema.py
"""
import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from reviewhub.config import Settings
from reviewhub.database import User, init_db, make_engine, make_session_factory
from reviewhub.schema import build_schema
from reviewhub.services import ServiceRegistry


def _make_session(foreign_keys=True):
    engine = make_engine(Settings(database_url='sqlite:///:memory:',
                                  sqlite_foreign_keys=foreign_keys))
    init_db(engine)
    return make_session_factory(engine)()


ADD_USER = 'mutation($name: String!, $email: String!) { addUser(name: $name, email: $email) { id name email } }'
ADD_GAME = '''
mutation($name: String!) {
  addGame(name: $name, description: "Classic", price: 0, platform: ["PC", "Web"]) {
    id name description price platform
  }
}
'''
ADD_REVIEW = '''
mutation($gameId: Int!, $userId: Int!) {
  addReview(rating: 5, comment: "Great", gameId: $gameId, userId: $userId) { id rating comment }
}
'''


class SchemaTestCase(unittest.TestCase):

    foreign_keys = True

    def setUp(self):
        self.db = _make_session(self.foreign_keys)
        self.schema = build_schema()

    def tearDown(self):
        self.db.close()

    def _exec(self, query, **variables):
        return self.schema.execute(
            query,
            variable_values=variables,
            context_value={'services': ServiceRegistry(self.db)},
        )

    def _ok(self, query, **variables):
        result = self._exec(query, **variables)
        self.assertIsNone(result.errors, result.errors)
        return result.data

    def _seed(self):
        user = self._ok(ADD_USER, name='Ada', email='ada@example.com')['addUser']
        game = self._ok(ADD_GAME, name='Chess')['addGame']
        review = self._ok(ADD_REVIEW, gameId=game['id'], userId=user['id'])['addReview']
        return user, game, review


# ===========================================================================
# Queries
# ===========================================================================

class TestQueries(SchemaTestCase):

    def test_empty_lists(self):
        data = self._ok('{ users { id } games { id } reviews { id } }')
        self.assertEqual(data, {'users': [], 'games': [], 'reviews': []})

    def test_user_by_id(self):
        user, _, _ = self._seed()
        data = self._ok('query($id: Int!) { user(id: $id) { name email } }', id=user['id'])
        self.assertEqual(data['user'], {'name': 'Ada', 'email': 'ada@example.com'})

    def test_missing_game_is_not_found(self):
        result = self._exec('{ game(id: 404) { id name } }')
        self.assertEqual(result.data, {'game': None})
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(result.errors[0].extensions['code'], 'NOT_FOUND')
        self.assertIn('Game with ID 404 not found', result.errors[0].message)

    def test_nested_relationships(self):
        user, game, review = self._seed()
        data = self._ok('''
            { games { name reviews { comment user { email } game { name } } }
              users { reviews { rating } } }
        ''')
        self.assertEqual(data['games'][0]['reviews'], [
            {'comment': 'Great', 'user': {'email': 'ada@example.com'}, 'game': {'name': 'Chess'}},
        ])
        self.assertEqual(data['users'][0]['reviews'], [{'rating': 5}])

    def test_platform_round_trip(self):
        game = self._ok(ADD_GAME, name='Chess')['addGame']
        data = self._ok('query($id: Int!) { game(id: $id) { id name description price platform } }',
                        id=game['id'])
        self.assertEqual(data['game'], game)
        self.assertEqual(game['platform'], ['PC', 'Web'])


class TestInconsistentReview(SchemaTestCase):

    foreign_keys = False

    def test_review_with_missing_user_reports_not_found(self):
        user, _, review = self._seed()
        self.db.query(User).filter(User.id == user['id']).delete()
        self.db.commit()
        result = self._exec('query($id: Int!) { review(id: $id) { id user { name } } }',
                            id=review['id'])
        self.assertEqual(result.errors[0].extensions['code'], 'NOT_FOUND')
        self.assertIn('User not found for review', result.errors[0].message)


# ===========================================================================
# Mutations
# ===========================================================================

class TestMutations(SchemaTestCase):

    def test_add_user(self):
        data = self._ok(ADD_USER, name='Ada', email='ada@example.com')
        self.assertIsInstance(data['addUser']['id'], int)

    def test_duplicate_email_conflict(self):
        self._ok(ADD_USER, name='Ada', email='ada@example.com')
        result = self._exec(ADD_USER, name='Other', email='ada@example.com')
        self.assertIsNone(result.data)
        self.assertEqual(result.errors[0].extensions['code'], 'CONFLICT')

    def test_empty_user_name_rejected(self):
        result = self._exec(ADD_USER, name='  ', email='ada@example.com')
        self.assertEqual(result.errors[0].extensions['code'], 'BAD_USER_INPUT')
        self.assertEqual(self._ok('{ users { id } }')['users'], [])

    def test_duplicate_game_conflict(self):
        self._ok(ADD_GAME, name='Chess')
        result = self._exec(ADD_GAME, name='Chess')
        self.assertEqual(result.errors[0].extensions['code'], 'CONFLICT')

    def test_add_review_for_missing_game(self):
        user = self._ok(ADD_USER, name='Ada', email='ada@example.com')['addUser']
        result = self._exec(ADD_REVIEW, gameId=404, userId=user['id'])
        self.assertEqual(result.errors[0].extensions['code'], 'NOT_FOUND')
        self.assertEqual(self._ok('{ reviews { id } }')['reviews'], [])

    def test_update_game_partial(self):
        game = self._ok(ADD_GAME, name='Chess')['addGame']
        data = self._ok('''
            mutation($id: Int!) {
              updateGame(id: $id, input: {price: 10}) { name description price platform }
            }
        ''', id=game['id'])
        self.assertEqual(data['updateGame'], {
            'name': 'Chess', 'description': 'Classic', 'price': 10, 'platform': ['PC', 'Web'],
        })

    def test_update_missing_game(self):
        result = self._exec('mutation { updateGame(id: 404, input: {name: "X"}) { id } }')
        self.assertEqual(result.errors[0].extensions['code'], 'NOT_FOUND')

    def test_delete_game_cascades(self):
        _, game, review = self._seed()
        data = self._ok('mutation($id: Int!) { deleteGame(id: $id) { id name description price platform } }',
                        id=game['id'])
        self.assertEqual(data['deleteGame'], game)
        result = self._exec('query($id: Int!) { review(id: $id) { id } }', id=review['id'])
        self.assertEqual(result.errors[0].extensions['code'], 'NOT_FOUND')

    def test_delete_user_cascades(self):
        user, _, _ = self._seed()
        data = self._ok('mutation($id: Int!) { deleteUser(id: $id) { email } }', id=user['id'])
        self.assertEqual(data['deleteUser']['email'], 'ada@example.com')
        self.assertEqual(self._ok('{ reviews { id } }')['reviews'], [])

    def test_delete_review(self):
        _, _, review = self._seed()
        data = self._ok('mutation($id: Int!) { deleteReview(id: $id) { comment } }', id=review['id'])
        self.assertEqual(data['deleteReview']['comment'], 'Great')

    def test_delete_missing_user(self):
        result = self._exec('mutation { deleteUser(id: 404) { id } }')
        self.assertIsNone(result.data)
        self.assertEqual(result.errors[0].extensions['code'], 'NOT_FOUND')


if __name__ == '__main__':
    unittest.main()
