import inspect
import unittest
from pathlib import Path

from app.db.models import MediaItem
from app.schemas.media import IMDB_ID_MAX_LENGTH, POSTER_MAX_LENGTH, TITLE_MAX_LENGTH
from app.services import media_query, media_service

MIGRATIONS = Path(__file__).resolve().parents[1] / "alembic" / "versions"


class TestSchemaContracts(unittest.TestCase):
    def test_unique_constraint_name_matches_model_and_migration(self) -> None:
        names = {c.name for c in MediaItem.__table__.constraints}
        self.assertIn(media_service.UNIQUE_CONSTRAINT_NAME, names)

        content = (MIGRATIONS / "0001_initial_schema.py").read_text(encoding="utf-8")
        self.assertIn(media_service.UNIQUE_CONSTRAINT_NAME, content)
        self.assertIn("chk_media_items_rating", content)
        self.assertIn("demo_accounts", content)

    def test_owner_indexes_in_migration(self) -> None:
        content = (MIGRATIONS / "0001_initial_schema.py").read_text(encoding="utf-8")
        for index in MediaItem.__table__.indexes:
            with self.subTest(index=index.name):
                self.assertIn(index.name, content)

    def test_listing_always_starts_from_owner_scope(self) -> None:
        source = inspect.getsource(media_query.list_media)
        self.assertIn("repo.query()", source)
        self.assertNotIn("db.query", source)

    def test_text_limits_match_columns(self) -> None:
        columns = MediaItem.__table__.c
        self.assertEqual(columns.title.type.length, TITLE_MAX_LENGTH)
        self.assertEqual(columns.imdb_id.type.length, IMDB_ID_MAX_LENGTH)
        self.assertEqual(columns.poster.type.length, POSTER_MAX_LENGTH)
