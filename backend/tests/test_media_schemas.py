import unittest

from pydantic import ValidationError

from app.db.models import Genre, MediaType, WatchStatus
from app.schemas.media import (
    CreateMediaRequest,
    UpdateMediaRequest,
    max_release_year,
    normalize_title,
)


def _create(**overrides) -> CreateMediaRequest:
    data = {"title": "Dune", "type": "movie", "genre": "Sci-Fi"}
    data.update(overrides)
    return CreateMediaRequest.model_validate(data)


class TestCreateMediaRequest(unittest.TestCase):
    def test_defaults(self) -> None:
        payload = _create()
        self.assertEqual(payload.media_type, MediaType.MOVIE)
        self.assertEqual(payload.genre, Genre.SCI_FI)
        self.assertEqual(payload.status, WatchStatus.UNWATCHED)
        self.assertIsNone(payload.rating)

    def test_title_trimmed_inner_spacing_kept(self) -> None:
        self.assertEqual(_create(title="  The Wire ").title, "The Wire")
        self.assertEqual(_create(title="Star  Wars").title, "Star  Wars")

    def test_blank_title_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _create(title="   ")

    def test_title_length_limit(self) -> None:
        _create(title="x" * 200)
        with self.assertRaises(ValidationError):
            _create(title="x" * 201)

    def test_rating_bounds(self) -> None:
        self.assertEqual(_create(rating=1).rating, 1)
        self.assertEqual(_create(rating=10).rating, 10)
        for bad in (0, 10.5, -3):
            with self.subTest(rating=bad), self.assertRaises(ValidationError):
                _create(rating=bad)

    def test_release_year_window(self) -> None:
        _create(releaseYear=1900)
        _create(releaseYear=max_release_year())
        for bad in (1899, max_release_year() + 1):
            with self.subTest(year=bad), self.assertRaises(ValidationError):
                _create(releaseYear=bad)

    def test_notes_limit(self) -> None:
        _create(notes="n" * 1000)
        with self.assertRaises(ValidationError):
            _create(notes="n" * 1001)

    def test_unknown_enum_values_rejected(self) -> None:
        for field, value in (("type", "book"), ("genre", "Opera"), ("status", "done")):
            with self.subTest(field=field), self.assertRaises(ValidationError):
                _create(**{field: value})

    def test_blank_optional_text_becomes_none(self) -> None:
        payload = _create(notes="  ", poster="", imdbId=" ")
        self.assertIsNone(payload.notes)
        self.assertIsNone(payload.poster)
        self.assertIsNone(payload.imdb_id)

    def test_imdb_id_limit(self) -> None:
        self.assertEqual(_create(imdbId="t" * 64).imdb_id, "t" * 64)
        with self.assertRaises(ValidationError):
            _create(imdbId="t" * 65)

    def test_poster_limit(self) -> None:
        base = "https://img.example.com/"
        _create(poster=base + "p" * (2048 - len(base)))
        with self.assertRaises(ValidationError):
            _create(poster=base + "p" * (2049 - len(base)))

    def test_poster_must_be_url(self) -> None:
        self.assertEqual(
            _create(poster="https://img.example.com/dune.jpg").poster,
            "https://img.example.com/dune.jpg",
        )
        with self.assertRaises(ValidationError):
            _create(poster="not a url")


class TestUpdateMediaRequest(unittest.TestCase):
    def test_changes_only_include_sent_keys(self) -> None:
        payload = UpdateMediaRequest.model_validate({"rating": None, "type": "show"})
        self.assertEqual(payload.changes(), {"rating": None, "media_type": MediaType.SHOW})

    def test_empty_body_is_no_change(self) -> None:
        self.assertEqual(UpdateMediaRequest.model_validate({}).changes(), {})

    def test_required_fields_cannot_be_nulled(self) -> None:
        for field in ("title", "type", "genre", "status"):
            with self.subTest(field=field), self.assertRaises(ValidationError):
                UpdateMediaRequest.model_validate({field: None})

    def test_same_rules_as_create(self) -> None:
        for body in ({"rating": 11}, {"imdbId": "t" * 65}, {"notes": "n" * 1001}):
            with self.subTest(body=body), self.assertRaises(ValidationError):
                UpdateMediaRequest.model_validate(body)
        self.assertEqual(UpdateMediaRequest.model_validate({"title": " Heat "}).title, "Heat")


class TestNormalizeTitle(unittest.TestCase):
    def test_strips_only_the_ends(self) -> None:
        self.assertEqual(normalize_title("\tBlade  Runner \n"), "Blade  Runner")
