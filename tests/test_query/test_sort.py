"""Tests for storyblok_client.query.sort."""

from __future__ import annotations

import pytest

from storyblok_client.exceptions import InvalidArgumentError
from storyblok_client.params import serialize_sort
from storyblok_client.query import SortBy, SortOrder, SortType


class TestSortBy:
    def test_content_field_with_order_and_type(self) -> None:
        sort = SortBy.by_content("rating", SortOrder.DESC, SortType.INT)
        assert serialize_sort(sort) == "content.rating:desc:int"

    def test_attribute_with_order(self) -> None:
        sort = SortBy.by_attribute("created_at", SortOrder.ASC)
        assert serialize_sort(sort) == "created_at:asc"

    def test_attribute_alone(self) -> None:
        assert serialize_sort(SortBy.by_attribute("name")) == "name"

    def test_type_without_order(self) -> None:
        sort = SortBy.by_content("price", type=SortType.FLOAT)
        assert serialize_sort(sort) == "content.price:float"

    def test_admin_interface(self) -> None:
        assert serialize_sort(SortBy.admin_interface()) == "position:desc"

    def test_field_ref(self) -> None:
        assert SortBy(content_field="title").field_ref == "content.title"
        assert SortBy(attribute_field="slug").field_ref == "slug"


class TestSortByValidation:
    def test_both_fields_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            SortBy(attribute_field="name", content_field="title")

    def test_neither_field_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            SortBy(order=SortOrder.ASC)

    def test_blank_name_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            SortBy.by_attribute(" ")

    def test_raw_string_order_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            SortBy.by_attribute("name", "up")  # type: ignore[arg-type]
