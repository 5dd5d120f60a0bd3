from maxborrow.bands import (
    ALL_BANDS,
    LvrBand,
    band_upper_bound,
    get_lvr_band_from_lvr,
    is_lvr_within_band,
)


def test_band_upper_bounds():
    assert {band_upper_bound(b) for b in ALL_BANDS} == {0.50, 0.60, 0.70, 0.80, 0.85}


def test_every_lvr_up_to_85_maps_to_exactly_one_band():
    for i in range(1, 8501):
        lvr = i / 10000
        band = get_lvr_band_from_lvr(lvr)
        containing = [b for b in ALL_BANDS if is_lvr_within_band(lvr, b)]
        assert containing == [band]


def test_band_edges_are_closed_above():
    assert get_lvr_band_from_lvr(0.5) is LvrBand.BAND_0_50
    assert get_lvr_band_from_lvr(0.500001) is LvrBand.BAND_50_60
    assert get_lvr_band_from_lvr(0.8) is LvrBand.BAND_70_80
    assert get_lvr_band_from_lvr(0.85) is LvrBand.BAND_80_85


def test_out_of_range_values_are_clamped():
    assert get_lvr_band_from_lvr(0) is LvrBand.BAND_0_50
    assert get_lvr_band_from_lvr(-0.2) is LvrBand.BAND_0_50
    assert get_lvr_band_from_lvr(0.95) is LvrBand.BAND_80_85
    assert get_lvr_band_from_lvr(float("nan")) is LvrBand.BAND_0_50


def test_within_band_accepts_string_values():
    assert is_lvr_within_band(0.75, "70-80")
    assert not is_lvr_within_band(0.7, "70-80")
    assert not is_lvr_within_band(0.0, "0-50")
