"""Tests for common.serialization module."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from common.models import Article, ArticleState, EmbedDescriptor, PageMetadata, Trend
from common.serialization import serialize_dataclass


@dataclass
class SampleWithDatetime:
    name: str
    created_at: datetime


@dataclass
class SampleWithNestedDict:
    name: str
    metadata: dict


@dataclass
class SampleNested:
    child: Optional[SampleWithDatetime] = None
    children: list = field(default_factory=list)


class TestSerializeDataclass:
    def test_basic_dataclass_to_dict(self) -> None:
        obj = PageMetadata(title="t", description="d", keywords=["a"])
        assert serialize_dataclass(obj) == {"title": "t", "description": "d", "keywords": ["a"]}

    def test_datetime_field_to_iso_string(self) -> None:
        dt = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        result = serialize_dataclass(SampleWithDatetime(name="test", created_at=dt))
        assert result["created_at"] == "2024-01-01T12:00:00+00:00"

    def test_nested_dict_datetime_handling(self) -> None:
        dt = datetime(2024, 6, 15, 8, 30, 0, tzinfo=timezone.utc)
        result = serialize_dataclass(SampleWithNestedDict(name="test", metadata={"updated_at": dt}))
        assert result["metadata"]["updated_at"] == "2024-06-15T08:30:00+00:00"

    def test_enum_serialized_as_value(self) -> None:
        article = Article(title="t", source_url="u", relative_age="1h ago", state=ArticleState.EXTRACTED)
        assert serialize_dataclass(article)["state"] == "extracted"

    def test_nested_dataclasses_and_lists(self) -> None:
        dt = datetime(2024, 1, 1, tzinfo=timezone.utc)
        obj = SampleNested(
            child=SampleWithDatetime(name="c", created_at=dt),
            children=[{"embed": EmbedDescriptor(src="s", html="<p/>")}],
        )
        result = serialize_dataclass(obj)
        assert result["child"] == {"name": "c", "created_at": "2024-01-01T00:00:00+00:00"}
        assert result["children"] == [{"embed": {"src": "s", "html": "<p/>"}}]

    def test_field_order_follows_definition(self) -> None:
        trend = Trend(title="Eclipse", articles=[Article(title="a", source_url="u", relative_age="1h ago")])
        result = serialize_dataclass(trend)
        assert list(result) == ["title", "related_terms", "articles", "auxiliary_content"]
        assert list(result["articles"][0])[:3] == ["title", "source_url", "relative_age"]
