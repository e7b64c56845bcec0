# Administrative boundary handling: local vector file -> Earth Engine geometry

import logging

import ee
import geopandas as gpd
from shapely.geometry import MultiPolygon, Polygon

logger = logging.getLogger(__name__)

WGS84 = "EPSG:4326"


def load_boundary(path, name_field=None, names=None):
    '''
    Reads an administrative boundary layer (shapefile, GeoJSON, GeoPackage...).

    Args:
    - path - vector file readable by geopandas
    - name_field - attribute holding the region names
    - names - optional list of names to keep (requires name_field)

    Returns:
    - GeoDataFrame in EPSG:4326 with polygon features only
    '''
    gdf = gpd.read_file(path)
    logger.info(f"Loaded {len(gdf)} features from {path}")

    if gdf.crs is None:
        logger.warning(f"{path} has no CRS, assuming {WGS84}")
        gdf = gdf.set_crs(WGS84)
    elif gdf.crs.to_epsg() != 4326:
        gdf = gdf.to_crs(WGS84)

    if names:
        if name_field is None:
            raise ValueError("Filtering boundary features by name requires name_field")
        if name_field not in gdf.columns:
            raise ValueError(f"Field '{name_field}' not in boundary attributes {list(gdf.columns)}")
        if isinstance(names, str):
            names = [names]
        gdf = gdf[gdf[name_field].astype(str).isin([str(n) for n in names])]

    gdf = gdf[gdf.geometry.geom_type.isin(["Polygon", "MultiPolygon"])]

    if gdf.empty:
        raise ValueError(f"No polygon features selected from {path}")

    return gdf.reset_index(drop=True)


def dissolve_boundary(gdf):
    '''
    Merges every feature into one polygon (the whole study area).
    '''
    return gdf.geometry.union_all()


def iter_regions(gdf, name_field=None):
    '''
    Yields (name, geometry) for each feature; falls back to the row index
    when there is no name field.
    '''
    for index, row in gdf.iterrows():
        name = str(row[name_field]) if name_field else str(index)
        yield name, row.geometry


def to_ee_geometry(geometry):
    '''
    Converts a shapely Polygon / MultiPolygon to an ee.Geometry.

    Holes are kept. Edges are straight lines in longitude/latitude
    (geodesic=False), the same edges geopandas and shapely use for a polygon
    stored in EPSG:4326.
    '''
    if not isinstance(geometry, (Polygon, MultiPolygon)):
        raise TypeError(f"Expected a Polygon or MultiPolygon, got {geometry.geom_type}")

    coords = _as_lists(geometry.__geo_interface__["coordinates"])
    if isinstance(geometry, Polygon):
        return ee.Geometry.Polygon(coords, proj=WGS84, geodesic=False)
    return ee.Geometry.MultiPolygon(coords, proj=WGS84, geodesic=False)


def _as_lists(coords):
    # shapely hands back nested tuples, the ee constructors expect lists
    if isinstance(coords, (list, tuple)) and coords and isinstance(coords[0], (list, tuple)):
        return [_as_lists(c) for c in coords]
    return list(coords)
