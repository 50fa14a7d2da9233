"""
Shared fixtures for pizza watch tests.
"""

import pytest

STATE_LITERAL = """{
  ROOT_QUERY: {__typename: 'Query', restaurant: {__ref: 'Restaurant:1'}},
  'Restaurant:1': {__typename: 'Restaurant', name: 'Benchmark Pizzeria'},
  'Menu:dinner': {
    __typename: 'Menu',
    name: 'Dinner',
    groups: [
      {
        __typename: 'MenuGroup',
        name: 'Pizza',
        items: [
          {
            __typename: 'MenuItem',
            name: 'Pepperoni',
            description: 'Tomato, mozzarella, pepperoni {spicy}',
            imageUrls: {small: 'https://img.example/pep-s.jpg', xl: 'https://img.example/pep-xl.jpg'},
          },
          {
            __typename: 'MenuItem',
            name: "  Margherita ",
            description: null,
            imageUrls: null,
          },
        ],
      },
      {__typename: 'MenuGroup', name: 'Salads', items: [{name: 'Caesar'}]},
    ],
  },
  'Menu:lunch': {
    __typename: 'Menu',
    groups: [
      {name: 'PIZZA', items: [{name: 'Bianca', description: 'No sauce', imageUrls: {xl: 'https://img.example/bianca.jpg'}}]},
    ],
  },
  'MenuGroup:stray': {__typename: 'MenuGroup', name: 'Pizza', items: [{name: 'Ghost'}]},
}"""


def make_page(state_literal: str = STATE_LITERAL) -> str:
    return f"""<!DOCTYPE html>
<html>
<head>
  <title>Benchmark Pizzeria</title>
  <script>window.dataLayer = [];</script>
  <script>window.__OO_STATE__ = {state_literal};
  window.__CONFIG__ = {{env: 'prod'}};</script>
</head>
<body><div id="footer"></div></body>
</html>"""


@pytest.fixture
def page_html():
    return make_page()
