"""GraphQL schema for reviewhub, built with graphene.

Exposed types:
* **User**, **Game**, **Review**: rows, with ``reviews`` / ``user`` /
  ``game`` resolved through the services
* **Query**: ``users``, ``user(id)``, ``games``, ``game(id)``,
  ``reviews``, ``review(id)``
* **Mutation**: ``addUser``, ``addGame``, ``addReview``, ``deleteUser``,
  ``deleteGame``, ``deleteReview``, ``updateGame(id, input)``

Resolvers expect ``info.context['services']`` to hold a
:class:`~reviewhub.services.ServiceRegistry`.
"""
import functools

import graphene
from graphql import GraphQLError

from .errors import IntegrityViolation
from .services import GameUpdate, ServiceRegistry


def _services(info) -> ServiceRegistry:
    return info.context['services']


def _translate_errors(resolver):
    """Re-raise service failures as ``GraphQLError`` carrying ``extensions.code``."""
    @functools.wraps(resolver)
    def wrapper(root, info, **kwargs):
        try:
            return resolver(root, info, **kwargs)
        except IntegrityViolation as exc:
            raise GraphQLError(exc.message, extensions={'code': exc.code}) from exc
    return wrapper


class UserType(graphene.ObjectType):
    class Meta:
        name = 'User'

    id = graphene.Int(required=True)
    name = graphene.String(required=True)
    email = graphene.String(required=True)
    reviews = graphene.List(graphene.NonNull(lambda: ReviewType), required=True)

    def resolve_reviews(root, info):
        return _services(info).users.reviews_for(root.id)


class GameType(graphene.ObjectType):
    class Meta:
        name = 'Game'

    id = graphene.Int(required=True)
    name = graphene.String(required=True)
    description = graphene.String(required=True)
    price = graphene.Int(required=True)
    platform = graphene.List(graphene.NonNull(graphene.String), required=True)
    reviews = graphene.List(graphene.NonNull(lambda: ReviewType), required=True)

    def resolve_reviews(root, info):
        return _services(info).games.reviews_for(root.id)


class ReviewType(graphene.ObjectType):
    class Meta:
        name = 'Review'

    id = graphene.Int(required=True)
    rating = graphene.Int(required=True)
    comment = graphene.String(required=True)
    user = graphene.Field(UserType, required=True)
    game = graphene.Field(GameType, required=True)

    @_translate_errors
    def resolve_user(root, info):
        return _services(info).reviews.user_for(root)

    @_translate_errors
    def resolve_game(root, info):
        return _services(info).reviews.game_for(root)


class EditGameInput(graphene.InputObjectType):
    name = graphene.String()
    description = graphene.String()
    price = graphene.Int()
    platform = graphene.List(graphene.NonNull(graphene.String))


class Query(graphene.ObjectType):
    users = graphene.List(graphene.NonNull(UserType), required=True)
    user = graphene.Field(UserType, id=graphene.Int(required=True))
    games = graphene.List(graphene.NonNull(GameType), required=True)
    game = graphene.Field(GameType, id=graphene.Int(required=True))
    reviews = graphene.List(graphene.NonNull(ReviewType), required=True)
    review = graphene.Field(ReviewType, id=graphene.Int(required=True))

    def resolve_users(root, info):
        return _services(info).users.list_all()

    @_translate_errors
    def resolve_user(root, info, id):
        return _services(info).users.get(id)

    def resolve_games(root, info):
        return _services(info).games.list_all()

    @_translate_errors
    def resolve_game(root, info, id):
        return _services(info).games.get(id)

    def resolve_reviews(root, info):
        return _services(info).reviews.list_all()

    @_translate_errors
    def resolve_review(root, info, id):
        return _services(info).reviews.get(id)


class Mutation(graphene.ObjectType):
    # ``args=`` keeps ``name``/``description`` from colliding with Field kwargs.
    add_user = graphene.Field(UserType, required=True, args={
        'name': graphene.String(required=True),
        'email': graphene.String(required=True),
    })
    add_game = graphene.Field(GameType, required=True, args={
        'name': graphene.String(required=True),
        'description': graphene.String(required=True),
        'price': graphene.Int(required=True),
        'platform': graphene.List(graphene.NonNull(graphene.String), required=True),
    })
    add_review = graphene.Field(ReviewType, required=True, args={
        'rating': graphene.Int(required=True),
        'comment': graphene.String(required=True),
        'game_id': graphene.Int(required=True),
        'user_id': graphene.Int(required=True),
    })
    delete_user = graphene.Field(UserType, required=True,
                                 args={'id': graphene.Int(required=True)})
    delete_game = graphene.Field(GameType, required=True,
                                 args={'id': graphene.Int(required=True)})
    delete_review = graphene.Field(ReviewType, required=True,
                                   args={'id': graphene.Int(required=True)})
    update_game = graphene.Field(GameType, required=True, args={
        'id': graphene.Int(required=True),
        'input': EditGameInput(required=True),
    })

    @_translate_errors
    def resolve_add_user(root, info, name, email):
        if not name.strip():
            raise GraphQLError('User name must not be empty',
                              extensions={'code': 'BAD_USER_INPUT'})
        return _services(info).users.add(name, email)

    @_translate_errors
    def resolve_add_game(root, info, name, description, price, platform):
        return _services(info).games.add(name, description, price, platform)

    @_translate_errors
    def resolve_add_review(root, info, rating, comment, game_id, user_id):
        return _services(info).reviews.add(rating, comment, game_id, user_id)

    @_translate_errors
    def resolve_delete_user(root, info, id):
        return _services(info).users.delete(id)

    @_translate_errors
    def resolve_delete_game(root, info, id):
        return _services(info).games.delete(id)

    @_translate_errors
    def resolve_delete_review(root, info, id):
        return _services(info).reviews.delete(id)

    @_translate_errors
    def resolve_update_game(root, info, id, input):
        update = GameUpdate(
            name=input.get('name'),
            description=input.get('description'),
            price=input.get('price'),
            platform=input.get('platform'),
        )
        return _services(info).games.update(id, update)


def build_schema() -> graphene.Schema:
    """Return the reviewhub schema (queries and mutations)."""
    return graphene.Schema(query=Query, mutation=Mutation)
