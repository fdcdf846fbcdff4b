import unittest
from uuid import uuid4

from app.repositories.media import OwnedMediaRepository
from app.schemas.media import MediaQueryParams, SortField, SortOrder
from app.services.media_query import build_pagination, escape_like, list_media
from tests.support import make_session_factory, seed_media


def _params(**overrides) -> MediaQueryParams:
    return MediaQueryParams.model_validate(overrides)


class TestBuildPagination(unittest.TestCase):
    def test_middle_page(self) -> None:
        block = build_pagination(25, page=2, limit=10)
        self.assertEqual(block.total_pages, 3)
        self.assertTrue(block.has_next_page)
        self.assertTrue(block.has_prev_page)

    def test_last_page(self) -> None:
        block = build_pagination(25, page=3, limit=10)
        self.assertFalse(block.has_next_page)
        self.assertTrue(block.has_prev_page)

    def test_empty_collection(self) -> None:
        block = build_pagination(0, page=1, limit=10)
        self.assertEqual(block.total_pages, 0)
        self.assertFalse(block.has_next_page)
        self.assertFalse(block.has_prev_page)

    def test_exact_multiple(self) -> None:
        self.assertEqual(build_pagination(20, page=1, limit=10).total_pages, 2)

    def test_serializes_camel_case(self) -> None:
        dumped = build_pagination(5, page=1, limit=10).model_dump(by_alias=True)
        self.assertEqual(
            set(dumped),
            {"currentPage", "totalPages", "totalItems", "itemsPerPage", "hasNextPage", "hasPrevPage"},
        )


class TestEscapeLike(unittest.TestCase):
    def test_wildcards_escaped(self) -> None:
        self.assertEqual(escape_like("100%_done"), "100\\%\\_done")

    def test_escape_char_escaped(self) -> None:
        self.assertEqual(escape_like("a\\b"), "a\\\\b")


class TestListMedia(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()
        self.owner = uuid4()
        self.repo = OwnedMediaRepository(self.db, self.owner)

    def tearDown(self) -> None:
        self.db.close()

    def _titles(self, **overrides) -> list[str]:
        rows, _ = list_media(self.repo, _params(**overrides))
        return [row.title for row in rows]

    def test_third_page_of_twenty_five(self) -> None:
        for n in range(25):
            seed_media(self.db, self.owner, title=f"Title {n:02d}")

        rows, pagination = list_media(
            self.repo, _params(sortBy="title", sortOrder="asc", page=3, limit=10)
        )

        self.assertEqual([row.title for row in rows], [f"Title {n}" for n in range(20, 25)])
        self.assertEqual(pagination.total_items, 25)
        self.assertEqual(pagination.total_pages, 3)
        self.assertFalse(pagination.has_next_page)
        self.assertTrue(pagination.has_prev_page)

    def test_page_past_end_is_empty_with_true_totals(self) -> None:
        for n in range(3):
            seed_media(self.db, self.owner, title=f"Title {n}")

        rows, pagination = list_media(self.repo, _params(page=5, limit=2))

        self.assertEqual(rows, [])
        self.assertEqual(pagination.total_items, 3)
        self.assertEqual(pagination.total_pages, 2)
        self.assertEqual(pagination.current_page, 5)
        self.assertFalse(pagination.has_next_page)

    def test_enormous_page_is_empty_not_an_error(self) -> None:
        seed_media(self.db, self.owner, title="Only")

        rows, pagination = list_media(self.repo, _params(page=10**18, limit=100))

        self.assertEqual(rows, [])
        self.assertEqual(pagination.total_items, 1)
        self.assertEqual(pagination.current_page, 10**18)
        self.assertTrue(pagination.has_prev_page)

    def test_search_is_case_insensitive_substring(self) -> None:
        seed_media(self.db, self.owner, title="Dune")
        seed_media(self.db, self.owner, title="Dune: Part Two")
        seed_media(self.db, self.owner, title="Arrival")

        self.assertEqual(
            sorted(self._titles(search="dUnE")),
            ["Dune", "Dune: Part Two"],
        )

    def test_search_treats_wildcards_literally(self) -> None:
        seed_media(self.db, self.owner, title="100% Wolf")
        seed_media(self.db, self.owner, title="1000 Wolves")
        seed_media(self.db, self.owner, title="My_Show", type="show")
        seed_media(self.db, self.owner, title="MyXShow", type="show")

        self.assertEqual(self._titles(search="100%"), ["100% Wolf"])
        self.assertEqual(self._titles(search="my_"), ["My_Show"])

    def test_blank_search_matches_everything(self) -> None:
        seed_media(self.db, self.owner, title="Dune")
        self.assertEqual(self._titles(search="   "), ["Dune"])

    def test_filters_combine(self) -> None:
        seed_media(self.db, self.owner, title="Alien", genre="Horror", status="watched")
        seed_media(self.db, self.owner, title="Hereditary", genre="Horror")
        seed_media(self.db, self.owner, title="Lost", type="show", genre="Mystery", status="watched")

        self.assertEqual(self._titles(media_type="movie", genre="Horror", status="watched"), ["Alien"])
        self.assertEqual(sorted(self._titles(status="watched")), ["Alien", "Lost"])
        self.assertEqual(self._titles(media_type="show"), ["Lost"])

    def test_other_owners_rows_never_listed(self) -> None:
        seed_media(self.db, self.owner, title="Mine")
        seed_media(self.db, uuid4(), title="Theirs")

        rows, pagination = list_media(self.repo, _params())
        self.assertEqual([row.title for row in rows], ["Mine"])
        self.assertEqual(pagination.total_items, 1)

    def test_rating_sort_puts_unrated_lowest(self) -> None:
        seed_media(self.db, self.owner, title="Eight", rating=8)
        seed_media(self.db, self.owner, title="Unrated")
        seed_media(self.db, self.owner, title="Six", rating=6)

        self.assertEqual(
            self._titles(sortBy="rating", sortOrder="desc"), ["Eight", "Six", "Unrated"]
        )
        self.assertEqual(
            self._titles(sortBy="rating", sortOrder="asc"), ["Unrated", "Six", "Eight"]
        )

    def test_release_year_sort(self) -> None:
        seed_media(self.db, self.owner, title="Old", release_year=1968)
        seed_media(self.db, self.owner, title="New", release_year=2021)
        seed_media(self.db, self.owner, title="Unknown")

        self.assertEqual(
            self._titles(sortBy=SortField.RELEASE_YEAR, sortOrder=SortOrder.DESC),
            ["New", "Old", "Unknown"],
        )

    def test_equal_sort_keys_paginate_without_overlap(self) -> None:
        for n in range(6):
            seed_media(self.db, self.owner, title=f"Same {n}", rating=5)

        seen: list[str] = []
        for page in (1, 2, 3):
            seen.extend(self._titles(sortBy="rating", page=page, limit=2))

        self.assertEqual(len(seen), 6)
        self.assertEqual(len(set(seen)), 6)

    def test_defaults(self) -> None:
        params = _params()
        self.assertEqual(params.sort_by, SortField.CREATED_AT)
        self.assertEqual(params.sort_order, SortOrder.DESC)
        self.assertEqual((params.page, params.limit), (1, 10))
