"""
reviewhub application package.

Introduces a layered architecture:

  reviewhub/database.py     : storage adapter: engine, sessions, ORM tables.
  reviewhub/repositories/   : pure I/O: typed row CRUD per entity.
  reviewhub/services/       : integrity rules: uniqueness, existence checks
                              and cascading deletes, one transaction each.
  reviewhub/schema.py       : graphene schema mapping queries/mutations onto
                              the services.
  reviewhub/server.py       : Flask app exposing ``POST /graphql``.

The storage engine is not trusted to enforce foreign keys or uniqueness, so
every referential rule lives in the service layer.  ``ServiceRegistry`` (in
``reviewhub.services``) is the integration point: it builds all services
around one SQLAlchemy session and exposes them as public attributes
(e.g. ``registry.games``).
"""

__version__ = '0.1.0'
