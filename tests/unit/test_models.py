"""Tests for esamirror.core.models."""

import pytest

from esamirror.core.errors import MetaInvalidError
from esamirror.core.models import Meta


class TestMeta:
    def test_defaults(self):
        meta = Meta()
        assert meta.tags == []
        assert meta.wip is True
        assert meta.number is None

    def test_tag_order_ignored_in_equality(self):
        assert Meta(tags=["a", "b"]) == Meta(tags=["b", "a"])
        assert Meta(tags=["a"]) != Meta(tags=["a", "b"])

    def test_number_and_wip_compared(self):
        assert Meta(number=1) != Meta(number=2)
        assert Meta(wip=True) != Meta(wip=False)

    def test_to_dict_omits_unset_number(self):
        assert Meta(tags=["a"], wip=False).to_dict() == {"tags": ["a"], "wip": False}
        assert Meta(number=3).to_dict()["number"] == 3

    def test_from_mapping(self):
        meta = Meta.from_mapping({"tags": ["x"], "wip": False, "number": 9})
        assert meta == Meta(tags=["x"], wip=False, number=9)

    @pytest.mark.parametrize(
        "data",
        [
            {"wip": True},
            {"tags": []},
            {"tags": "a,b", "wip": True},
            {"tags": [1], "wip": True},
            {"tags": [], "wip": 1},
            {"tags": [], "wip": True, "number": "7"},
            {"tags": [], "wip": True, "number": True},
            {"tags": [], "wip": True, "number": 2**64},
        ],
    )
    def test_from_mapping_rejects(self, data: dict):
        with pytest.raises(MetaInvalidError):
            Meta.from_mapping(data)
