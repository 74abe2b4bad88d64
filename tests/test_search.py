"""
Tests for Listing, Search and Filtering

Tests GET /api/v1/books:
- Free-text search (text and numeric terms)
- Field filters (author, title, isbn, publishedYear)
- Combined search and filters
- Sorting and pagination
- Clamping of bad page/limit values
"""

import pytest
from fastapi import status

from app.config import get_settings

BOOKS_URL = "/api/v1/books"


class TestListBooks:
    """Basic listing behaviour."""

    def test_list_books_empty(self, client):
        """Test listing books when database is empty."""
        response = client.get(BOOKS_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "totalBooks": 0,
            "totalPages": 0,
            "currentPage": 1,
            "books": [],
        }

    def test_list_books_with_data(self, client, sample_book):
        response = client.get(BOOKS_URL)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["totalBooks"] == 1
        assert data["totalPages"] == 1
        assert data["books"][0]["title"] == "1984"

    def test_list_books_default_sort_is_title(self, client, create_book):
        for title in ["Emma", "Beloved", "Dracula"]:
            create_book(title=title)

        titles = [book["title"] for book in client.get(BOOKS_URL).json()["books"]]

        assert titles == ["Beloved", "Dracula", "Emma"]


class TestBookSearch:
    """Tests for the search parameter."""

    @pytest.fixture
    def search_data(self, create_book):
        """Books with distinct authors, titles and years."""
        return {
            "walker": create_book(
                title="The Color Purple", author="Alice Walker",
                isbn="9780156028356", published_year=1982,
            ),
            "carroll": create_book(
                title="Alice's Adventures in Wonderland", author="Lewis Carroll",
                isbn="9780141439761", published_year=1865,
            ),
            "clarke": create_book(
                title="2001: A Space Odyssey", author="Arthur C. Clarke",
                isbn="9780451457998", published_year=1968,
            ),
            "martel": create_book(
                title="Life of Pi", author="Yann Martel",
                isbn="9780156027328", published_year=2001,
            ),
            "orwell": create_book(
                title="1984", author="George Orwell",
                isbn="9780451524935", published_year=1949,
            ),
        }

    def _ids(self, response):
        return {book["id"] for book in response.json()["books"]}

    def test_search_text_matches_author_and_title(self, client, search_data):
        """'Alice' matches an author and a title, case-insensitively."""
        response = client.get(BOOKS_URL, params={"search": "alice"})

        assert response.status_code == status.HTTP_200_OK
        assert self._ids(response) == {
            search_data["walker"].id,
            search_data["carroll"].id,
        }
        assert response.json()["totalBooks"] == 2

    def test_search_matches_isbn_substring(self, client, search_data):
        response = client.get(BOOKS_URL, params={"search": "0451524"})

        assert self._ids(response) == {search_data["orwell"].id}

    def test_search_numeric_matches_year_or_text(self, client, search_data):
        """'2001' finds the book published in 2001 and the one titled 2001."""
        response = client.get(BOOKS_URL, params={"search": "2001"})

        assert self._ids(response) == {
            search_data["clarke"].id,
            search_data["martel"].id,
        }

    def test_search_numeric_year_only(self, client, search_data):
        response = client.get(BOOKS_URL, params={"search": "1865"})

        assert self._ids(response) == {search_data["carroll"].id}

    def test_search_no_match(self, client, search_data):
        response = client.get(BOOKS_URL, params={"search": "tolkien"})

        data = response.json()
        assert data["totalBooks"] == 0
        assert data["totalPages"] == 0
        assert data["books"] == []

    def test_search_wildcards_are_literal(self, client, search_data, create_book):
        """LIKE wildcards in the search text match themselves only."""
        percent = create_book(title="100% Pure", author="Someone")

        assert self._ids(client.get(BOOKS_URL, params={"search": "%"})) == {percent.id}
        assert self._ids(client.get(BOOKS_URL, params={"search": "_"})) == set()

    def test_search_huge_integer_is_text(self, client, search_data, create_book):
        """An integer too large to be a year only matches text fields."""
        agent = create_book(title="Agent 99999999999999999999", author="Someone")

        response = client.get(BOOKS_URL, params={"search": "99999999999999999999"})

        assert response.status_code == status.HTTP_200_OK
        assert self._ids(response) == {agent.id}

    def test_empty_search_is_ignored(self, client, search_data):
        response = client.get(BOOKS_URL, params={"search": ""})

        assert response.json()["totalBooks"] == 5


class TestBookFilters:
    """Tests for the field-scoped filters."""

    @pytest.fixture
    def filter_data(self, create_book):
        return [
            create_book(title="Animal Farm", author="George Orwell",
                        isbn="9780451526342", published_year=1945),
            create_book(title="1984", author="George Orwell",
                        isbn="9780451524935", published_year=1949),
            create_book(title="Down and Out in Paris and London", author="George Orwell",
                        isbn="9780156262248", published_year=1933),
            create_book(title="Brave New World", author="Aldous Huxley",
                        isbn="9780060850524", published_year=1932),
        ]

    def test_filter_by_author(self, client, filter_data):
        response = client.get(BOOKS_URL, params={"author": "ORWELL"})

        assert response.json()["totalBooks"] == 3

    def test_filter_by_title(self, client, filter_data):
        response = client.get(BOOKS_URL, params={"title": "farm"})

        books = response.json()["books"]
        assert [book["title"] for book in books] == ["Animal Farm"]

    def test_filter_by_isbn_is_exact(self, client, filter_data):
        assert client.get(BOOKS_URL, params={"isbn": "9780451526342"}).json()["totalBooks"] == 1
        assert client.get(BOOKS_URL, params={"isbn": "978045152"}).json()["totalBooks"] == 0

    def test_filter_by_published_year(self, client, filter_data):
        response = client.get(BOOKS_URL, params={"publishedYear": "1932"})

        books = response.json()["books"]
        assert [book["title"] for book in books] == ["Brave New World"]

    def test_non_numeric_published_year_is_ignored(self, client, filter_data):
        response = client.get(BOOKS_URL, params={"publishedYear": "nineteen"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["totalBooks"] == 4

    @pytest.mark.parametrize("year", ["99999999999999999999", "10000", "-1"])
    def test_out_of_range_published_year_is_ignored(self, client, filter_data, year):
        response = client.get(BOOKS_URL, params={"publishedYear": year})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["totalBooks"] == 4

    def test_filters_are_combined(self, client, filter_data):
        """All filters must hold at once."""
        response = client.get(BOOKS_URL, params={"author": "orwell", "publishedYear": "1949"})

        books = response.json()["books"]
        assert [book["title"] for book in books] == ["1984"]

    def test_search_and_filters_are_combined(self, client, filter_data):
        """search=new matches Brave New World only; author=orwell excludes it."""
        assert client.get(BOOKS_URL, params={"search": "new"}).json()["totalBooks"] == 1

        response = client.get(BOOKS_URL, params={"search": "new", "author": "orwell"})
        assert response.json()["totalBooks"] == 0

        response = client.get(BOOKS_URL, params={"search": "and", "author": "orwell"})
        titles = [book["title"] for book in response.json()["books"]]
        assert titles == ["Down and Out in Paris and London"]


class TestPaginationAndSorting:
    """Tests for page, limit, sortBy and order."""

    @pytest.fixture
    def many_books(self, create_book):
        """25 books titled Book 01..Book 25, years 1976..2000."""
        return [
            create_book(title=f"Book {i:02d}", published_year=1975 + i)
            for i in range(1, 26)
        ]

    def test_second_page(self, client, many_books):
        response = client.get(BOOKS_URL, params={"page": "2", "limit": "10"})

        data = response.json()
        assert data["totalBooks"] == 25
        assert data["totalPages"] == 3
        assert data["currentPage"] == 2
        assert [book["title"] for book in data["books"]] == [
            f"Book {i:02d}" for i in range(11, 21)
        ]

    def test_last_page_is_partial(self, client, many_books):
        data = client.get(BOOKS_URL, params={"page": "3", "limit": "10"}).json()

        assert len(data["books"]) == 5
        assert data["books"][-1]["title"] == "Book 25"

    def test_page_past_the_end(self, client, many_books):
        data = client.get(BOOKS_URL, params={"page": "9", "limit": "10"}).json()

        assert data["books"] == []
        assert data["totalBooks"] == 25
        assert data["currentPage"] == 9

    def test_huge_page_is_capped(self, client, many_books):
        response = client.get(
            BOOKS_URL, params={"page": "99999999999999999999", "limit": "100"}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["books"] == []
        assert data["totalBooks"] == 25
        assert data["currentPage"] == get_settings().max_page

    def test_default_limit(self, client, many_books):
        data = client.get(BOOKS_URL).json()

        assert len(data["books"]) == 10
        assert data["totalPages"] == 3

    def test_sort_by_published_year_desc(self, client, many_books):
        data = client.get(
            BOOKS_URL, params={"sortBy": "publishedYear", "order": "desc", "limit": "25"}
        ).json()

        years = [book["publishedYear"] for book in data["books"]]
        assert years == sorted(years, reverse=True)
        assert years[0] == 2000

    def test_sort_desc_by_title(self, client, many_books):
        data = client.get(BOOKS_URL, params={"order": "desc", "limit": "3"}).json()

        assert [book["title"] for book in data["books"]] == ["Book 25", "Book 24", "Book 23"]

    def test_unknown_sort_field_falls_back_to_title(self, client, many_books):
        data = client.get(BOOKS_URL, params={"sortBy": "password", "limit": "2"}).json()

        assert [book["title"] for book in data["books"]] == ["Book 01", "Book 02"]

    @pytest.mark.parametrize(
        "params,expected_page,expected_count",
        [
            ({"page": "0"}, 1, 10),
            ({"page": "-3"}, 1, 10),
            ({"page": "abc"}, 1, 10),
            ({"limit": "0"}, 1, 1),
            ({"limit": "-5"}, 1, 1),
            ({"limit": "xyz"}, 1, 10),
            ({"limit": "1000"}, 1, 25),
        ],
    )
    def test_bad_page_and_limit_are_clamped(
        self, client, many_books, params, expected_page, expected_count
    ):
        response = client.get(BOOKS_URL, params=params)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["currentPage"] == expected_page
        assert len(data["books"]) == expected_count
