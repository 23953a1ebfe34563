"""Shared fixtures: a small Star Wars schema in SDL and introspection form."""

import pytest
from graphql import build_schema, introspection_from_schema

from gql_cppgen.core.parser import schema_from_sdl

STAR_WARS_SDL = '''
"""Episodes of the original trilogy"""
enum Episode {
  NEWHOPE
  EMPIRE
  JEDI
}

"""A character in the Star Wars trilogy"""
interface Character {
  id: ID!
  name: String
  appearsIn: [Episode]!
}

type Human implements Character {
  id: ID!
  name: String
  appearsIn: [Episode]!
  height: Float
}

type Droid implements Character {
  id: ID!
  name: String
  appearsIn: [Episode]!
  primaryFunction: String
}

union SearchResult = Human | Droid

input ReviewInput {
  stars: Int!
  commentary: String
}

type Review {
  stars: Int!
  commentary: String
}

type Query {
  hero(episode: Episode): Character
  search(text: String!): [SearchResult!]!
}

type Mutation {
  """Leave a review for an episode"""
  createReview(episode: Episode!, review: ReviewInput!): Review
}
'''

CYCLIC_SDL = '''
type Query {
  node: Node
}

type Node {
  parent: Node
}
'''


@pytest.fixture
def sdl_source() -> str:
    return STAR_WARS_SDL


@pytest.fixture
def introspection_result() -> dict:
    """A full introspection response, as an endpoint would return it."""
    return {"data": introspection_from_schema(build_schema(STAR_WARS_SDL))}


@pytest.fixture
def star_wars_schema():
    return schema_from_sdl(STAR_WARS_SDL)


@pytest.fixture
def schema_file(tmp_path):
    path = tmp_path / "schema.graphqls"
    path.write_text(STAR_WARS_SDL)
    return path


@pytest.fixture
def cyclic_schema_file(tmp_path):
    path = tmp_path / "cyclic.graphql"
    path.write_text(CYCLIC_SDL)
    return path
