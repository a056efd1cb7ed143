"""Tests for Project, Keyword and Check models: validation and immutability."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from aeo_tracker.models.tracking import Check, Keyword, Project
from aeo_tracker.taxonomy.engine_taxonomy import DEFAULT_ENGINES, Engine


class TestProject:
    def test_domain_normalised(self):
        assert Project(domain=" Boat-Lifestyle.COM ", brand="BoAt").domain == "boat-lifestyle.com"

    @pytest.mark.parametrize("domain", ["", "two words.com"])
    def test_bad_domain(self, domain):
        with pytest.raises(ValidationError):
            Project(domain=domain, brand="BoAt")

    def test_blank_brand(self):
        with pytest.raises(ValidationError):
            Project(domain="a.com", brand="  ")

    def test_frozen(self, sample_project):
        with pytest.raises(ValidationError):
            sample_project.brand = "Other"  # type: ignore[misc]


class TestKeyword:
    def test_stripped(self):
        assert Keyword(keyword="  anc earbuds ", project_id=1).keyword == "anc earbuds"

    def test_blank_rejected(self):
        with pytest.raises(ValidationError):
            Keyword(keyword="   ", project_id=1)


class TestCheck:
    def test_naive_timestamp_becomes_utc(self):
        check = Check(keyword_id=1, engine="Claude", presence=True,
                      timestamp=datetime(2026, 3, 15, 8, 0))
        assert check.timestamp == datetime(2026, 3, 15, 8, 0, tzinfo=timezone.utc)

    def test_aware_timestamp_converted(self):
        ist = timezone(timedelta(hours=5, minutes=30))
        check = Check(keyword_id=1, engine="Claude", presence=False,
                      timestamp=datetime(2026, 3, 15, 2, 0, tzinfo=ist))
        assert check.timestamp.tzinfo == timezone.utc
        assert check.timestamp.day == 14

    def test_blank_engine(self):
        with pytest.raises(ValidationError):
            Check(keyword_id=1, engine=" ", presence=True, timestamp=datetime(2026, 1, 1))


class TestEngineTaxonomy:
    def test_default_order(self):
        assert list(DEFAULT_ENGINES) == ["ChatGPT", "Gemini", "Claude", "Perplexity"]

    def test_str_enum(self):
        assert Engine.CHATGPT == "ChatGPT"
