#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the block library."""

import pytest

from layoutslots.exceptions import ValidationError
from layoutslots.inventory import collect_slots
from layoutslots.session.blocks import BLOCKS, get_block, list_blocks
from layoutslots.session.dedup import find_duplicate_identities
from layoutslots.session.dropzone import BlockClass


@pytest.mark.unit
class TestBlockLibrary:
    """Tests for block lookup and content."""

    def test_ids_are_unique(self) -> None:
        """Test that no two blocks share an id."""
        ids = [block.id for block in BLOCKS]
        assert len(ids) == len(set(ids))

    def test_categories_match_classes(self) -> None:
        """Test that sections are structure and elements are content."""
        for block in BLOCKS:
            expected = BlockClass.STRUCTURE if block.category == "Sections" else BlockClass.CONTENT
            assert block.block_class is expected, block.id

    def test_list_blocks_by_category(self) -> None:
        """Test filtering by category keeps panel order."""
        elements = list_blocks("Elements")
        assert elements[0].id == "placeholder-headline"
        assert all(block.category == "Elements" for block in elements)
        assert len(list_blocks()) == len(BLOCKS)

    def test_get_unknown_block(self) -> None:
        """Test that unknown ids are rejected."""
        with pytest.raises(ValidationError, match="Unknown block"):
            get_block("nope")

    def test_to_nodes_returns_fresh_elements(self) -> None:
        """Test that each call parses independent elements."""
        block = get_block("placeholder-headline")
        first, second = block.to_nodes()[0], block.to_nodes()[0]
        assert first == second
        assert first is not second
        assert first.get("css-class") == "content-slot--headline"

    @pytest.mark.parametrize("block", BLOCKS, ids=lambda block: block.id)
    def test_root_tag_matches_class(self, block) -> None:
        """Test that each block parses to one root of the right kind."""
        nodes = block.to_nodes()
        assert len(nodes) == 1
        expected = "mj-section" if block.block_class is BlockClass.STRUCTURE else nodes[0].tag
        assert nodes[0].tag == expected

    def test_feature_grid_shares_icon_slot(self) -> None:
        """Test the feature grid ships two icons with the same slot id."""
        section = get_block("combo-features").to_nodes()[0]
        assert find_duplicate_identities(section) == {"image:icon": 2}

    @pytest.mark.parametrize("block_id,count", [("product-grid-2", 2), ("product-grid-3", 3), ("product-spotlight", 1)])
    def test_product_blocks(self, block_id: str, count: int) -> None:
        """Test product blocks use the shared component id."""
        inventory = collect_slots(get_block(block_id).to_nodes()[0])
        assert inventory.product_components == {"product": list(range(count))}
        assert inventory.max_products("product") == count
