import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))


@pytest.fixture
def map_from_rows():
    """Build a synced Map from ASCII rows ('#' wall, '.' floor, ',' blood, '>' stairs)."""
    from rogue.dungeon.map import Map
    from rogue.dungeon.tiles import TILE_GLYPHS

    glyph_to_tile = {glyph: tile for tile, glyph in TILE_GLYPHS.items()}

    def _build(rows):
        m = Map(len(rows[0]), len(rows))
        for y, row in enumerate(rows):
            for x, ch in enumerate(row):
                m.tiles[m.xy_idx(x, y)] = glyph_to_tile[ch]
        m.synchronize_blocked()
        m.synchronize_ok_to_spawn()
        return m

    return _build
