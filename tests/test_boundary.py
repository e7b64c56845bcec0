import logging
from unittest.mock import MagicMock

import geopandas as gpd
import pytest
from shapely.geometry import MultiPolygon, Point, box

from ghm_landscape import boundary
from ghm_landscape.boundary import (dissolve_boundary, iter_regions, load_boundary,
                                    to_ee_geometry)


def test_load_boundary_reprojects_to_wgs84(boundary_file):
    gdf = load_boundary(boundary_file)

    assert len(gdf) == 3
    assert gdf.crs.to_epsg() == 4326
    minx, miny, maxx, maxy = gdf.total_bounds
    assert (minx, miny, maxx, maxy) == pytest.approx((10, 45, 13, 46))


def test_load_boundary_filters_by_name(boundary_file):
    gdf = load_boundary(boundary_file, name_field='NAME', names=['Beta', 'Gamma'])

    assert list(gdf['NAME']) == ['Beta', 'Gamma']


def test_load_boundary_single_name(boundary_file):
    gdf = load_boundary(boundary_file, name_field='NAME', names='Alpha')

    assert list(gdf['NAME']) == ['Alpha']


def test_load_boundary_name_filter_needs_field(boundary_file):
    with pytest.raises(ValueError, match="name_field"):
        load_boundary(boundary_file, names=['Alpha'])


def test_load_boundary_unknown_field(boundary_file):
    with pytest.raises(ValueError, match="COUNTY"):
        load_boundary(boundary_file, name_field='COUNTY', names=['Alpha'])


def test_load_boundary_empty_selection(boundary_file):
    with pytest.raises(ValueError, match="No polygon features"):
        load_boundary(boundary_file, name_field='NAME', names=['Nowhere'])


def test_iter_regions(boundary_gdf):
    names = [name for name, _ in iter_regions(boundary_gdf, 'NAME')]
    assert names == ['Alpha', 'Beta', 'Gamma']

    names = [name for name, _ in iter_regions(boundary_gdf)]
    assert names == ['0', '1', '2']


def test_dissolve_boundary(boundary_gdf):
    merged = dissolve_boundary(boundary_gdf)

    assert merged.geom_type == 'Polygon'
    assert merged.area == pytest.approx(3.0)


def test_to_ee_geometry_polygon(monkeypatch):
    fake_ee = MagicMock()
    monkeypatch.setattr(boundary, 'ee', fake_ee)

    result = to_ee_geometry(box(0, 0, 1, 1))

    assert result is fake_ee.Geometry.Polygon.return_value
    coords = fake_ee.Geometry.Polygon.call_args.args[0]
    assert isinstance(coords, list)
    assert isinstance(coords[0], list)
    assert isinstance(coords[0][0], list)
    assert len(coords[0]) == 5
    assert fake_ee.Geometry.Polygon.call_args.kwargs == {'proj': 'EPSG:4326', 'geodesic': False}


def test_to_ee_geometry_multipolygon(monkeypatch):
    fake_ee = MagicMock()
    monkeypatch.setattr(boundary, 'ee', fake_ee)

    result = to_ee_geometry(MultiPolygon([box(0, 0, 1, 1), box(2, 2, 3, 3)]))

    assert result is fake_ee.Geometry.MultiPolygon.return_value
    coords = fake_ee.Geometry.MultiPolygon.call_args.args[0]
    assert len(coords) == 2
    fake_ee.Geometry.Polygon.assert_not_called()


def test_to_ee_geometry_rejects_points():
    with pytest.raises(TypeError):
        to_ee_geometry(Point(0, 0))


def test_load_boundary_without_crs_assumes_wgs84(tmp_path, boundary_gdf, caplog):
    path = tmp_path / "no_crs.shp"
    gpd.GeoDataFrame({'NAME': boundary_gdf['NAME']}, geometry=list(boundary_gdf.geometry)).to_file(path)

    with caplog.at_level(logging.WARNING, logger='ghm_landscape.boundary'):
        gdf = load_boundary(path)

    assert gdf.crs.to_epsg() == 4326
    assert tuple(gdf.total_bounds) == pytest.approx((10, 45, 13, 46))
    assert "no CRS" in caplog.text
