import geopandas as gpd
import pandas as pd
import pytest
from shapely.geometry import box

from ghm_landscape.config import CONFIG_ENV_VAR

# 3 x 3 gHM values whose classes are
# [[1, 1, 2],
#  [1, 3, 2],
#  [4, 4, 5]]
GHM_VALUES = [
    [0.005, 0.005, 0.05],
    [0.005, 0.2, 0.05],
    [0.5, 0.5, 0.8],
]
LONS = [10.0, 10.01, 10.02]
LATS = [45.02, 45.01, 45.0]


@pytest.fixture(autouse=True)
def no_config_env(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


@pytest.fixture
def ghm_pixels():
    """Pixel table as returned by extract_pixels, in shuffled order."""
    rows = []
    for r, lat in enumerate(LATS):
        for c, lon in enumerate(LONS):
            rows.append({'longitude': lon, 'latitude': lat, 'value': GHM_VALUES[r][c]})
    return pd.DataFrame(rows).sample(frac=1, random_state=0).reset_index(drop=True)


@pytest.fixture
def boundary_gdf():
    return gpd.GeoDataFrame(
        {'NAME': ['Alpha', 'Beta', 'Gamma']},
        geometry=[box(10, 45, 11, 46), box(11, 45, 12, 46), box(12, 45, 13, 46)],
        crs="EPSG:4326"
    )


@pytest.fixture
def boundary_file(tmp_path, boundary_gdf):
    path = tmp_path / "counties.gpkg"
    boundary_gdf.to_crs("EPSG:3857").to_file(path, driver="GPKG")
    return path
