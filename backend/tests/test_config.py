"""
DocCRUD Backend - Settings Tests
=================================
"""

import pytest
from pydantic import ValidationError

from doccrud.config import Settings


class TestSettings:

    def test_required_collections_in_order(self):
        config = Settings()
        assert config.required_collections == ["people", "todo", "entries"]

    def test_required_collections_deduplicated(self):
        config = Settings(people_collection="shared", todo_collection="shared")
        assert config.required_collections == ["shared", "entries"]

    @pytest.mark.parametrize("name", ["1people", "has space", "a/b", ""])
    def test_invalid_collection_name(self, name):
        with pytest.raises(ValidationError):
            Settings(people_collection=name)

    def test_log_level_uppercased(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="LOUD")

    def test_cors_origins_list(self):
        config = Settings(cors_origins="http://a.test, http://b.test,")
        assert config.cors_origins_list == ["http://a.test", "http://b.test"]
