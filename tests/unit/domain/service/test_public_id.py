"""Unit tests for PublicIdGenerator."""

import re

import pytest

from claim.domain.service import PublicIdGenerator


class TestPublicIdGenerator:
    """Tests for PublicIdGenerator.generate()."""

    def test_default_length_and_alphabet(self):
        """Generated IDs are 21 URL-safe characters by default."""
        public_id = PublicIdGenerator().generate()

        assert re.fullmatch(r"[A-Za-z0-9_-]{21}", public_id.root)

    def test_custom_length(self):
        """The length is configurable."""
        assert len(PublicIdGenerator(size=12).generate().root) == 12

    def test_ids_do_not_repeat(self):
        """A batch of IDs contains no duplicates."""
        generator = PublicIdGenerator()

        ids = {generator.generate().root for _ in range(1000)}

        assert len(ids) == 1000

    @pytest.mark.parametrize("size", [0, 7, 65])
    def test_out_of_range_size_rejected(self, size):
        """Sizes outside 8-64 are rejected."""
        with pytest.raises(ValueError):
            PublicIdGenerator(size=size)
