"""
End-to-end gHM landscape workflow.

For each region: query gHM on Earth Engine, compute the zonal statistic,
pull the pixels into local memory, rasterize, reclassify into the 5 gHM
classes and compute number of patches and largest patch index.
"""

import logging
import time
import warnings
from pathlib import Path

import pandas as pd
from tqdm import tqdm

from .boundary import dissolve_boundary, iter_regions, load_boundary, to_ee_geometry
from .config import get_config_value
from .earth_engine import (download_image, extract_pixels, initialize_earth_engine,
                           load_ghm_image, zonal_statistic)
from .logging_utils import log_pipeline_end, log_pipeline_start, log_section
from .metrics import (build_landscape, class_proportions, largest_patch_index,
                      number_of_patches)
from .rasterize import GridRaster, write_geotiff, xyz_to_grid
from .reclassify import GHM_CLASS_NAMES, reclassify_array

logger = logging.getLogger(__name__)

PIPELINE_NAME = 'ghm landscape metrics'


def fetch_grid(image, ee_region, config):
    '''
    Brings the gHM pixels of the region into a local grid, either through the
    pixel lists (then rasterized) or a GeoTIFF download.
    '''
    band = get_config_value(config, 'dataset.band', 'gHM')
    scale = get_config_value(config, 'processing.scale', 1000)
    max_pixels = get_config_value(config, 'processing.max_pixels', 1e9)
    fetch_method = get_config_value(config, 'processing.fetch_method', 'pixels')

    if fetch_method == 'pixels':
        pixels = extract_pixels(image, ee_region, band=band, scale=scale, max_pixels=max_pixels)
        return xyz_to_grid(pixels)
    if fetch_method == 'geotiff':
        return download_image(image, ee_region, scale=scale)
    raise ValueError(f"Unknown fetch_method '{fetch_method}'")


def run_region(geometry, name, config):
    '''
    Runs the full sequence for one polygon.

    Args:
    - geometry - shapely Polygon / MultiPolygon in EPSG:4326
    - name - label used in logs, output files and the summary
    - config - workflow configuration

    Returns:
    - dict summary of the region (floats rounded to 2 decimals)
    '''
    band = get_config_value(config, 'dataset.band', 'gHM')
    collection_id = get_config_value(config, 'dataset.collection_id', 'CSP/HM/GlobalHumanModification')
    scale = get_config_value(config, 'processing.scale', 1000)
    reducer = get_config_value(config, 'processing.reducer', 'median')
    nodata = get_config_value(config, 'processing.nodata', 0)
    neighborhood_rule = get_config_value(config, 'processing.neighborhood_rule', '8')
    raster_dir = get_config_value(config, 'output.raster_dir')

    log_section(logger, f"region {name}")

    ee_region = to_ee_geometry(geometry)
    image = load_ghm_image(ee_region, collection_id=collection_id, band=band)

    zonal_value = zonal_statistic(
        image, ee_region,
        band=band,
        reducer=reducer,
        scale=scale,
        max_pixels=get_config_value(config, 'processing.max_pixels', 1e9),
        best_effort=get_config_value(config, 'processing.best_effort', True)
    )
    logger.info(f"{reducer.capitalize()} {band}: {zonal_value}")

    grid = fetch_grid(image, ee_region, config)
    class_arr = reclassify_array(grid.array, nodata=nodata)
    logger.info(f"Rasterized grid of shape {grid.shape}")

    if raster_dir:
        write_geotiff(grid, Path(raster_dir) / f"{name}_{band}.tif")
        write_geotiff(
            GridRaster(array=class_arr, transform=grid.transform, crs=grid.crs, nodata=nodata),
            Path(raster_dir) / f"{name}_{band}_classes.tif"
        )

    # Nominal cell size in metres; NP and LPI do not depend on the cell unit
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", RuntimeWarning)
        landscape = build_landscape(class_arr, res=(scale, scale), nodata=nodata,
                                    neighborhood_rule=neighborhood_rule)

        summary = {
            'Region': name,
            f'{band} {reducer}': zonal_value,
            'Pixels': int((class_arr != nodata).sum()),
            'Number of Patches': number_of_patches(landscape),
            'Largest Patch Index': largest_patch_index(landscape),
        }

        proportions = class_proportions(class_arr, nodata=nodata)
        for class_val, class_name in GHM_CLASS_NAMES.items():
            summary[f'{class_name} NP'] = number_of_patches(landscape, class_val)
            summary[f'{class_name} LPI'] = largest_patch_index(landscape, class_val)
            summary[f'{class_name} %'] = proportions[class_val]

    # Round all float values to 2 decimal places
    for key, value in summary.items():
        if isinstance(value, float):
            summary[key] = round(value, 2)

    logger.info(
        f"{name}: {summary['Number of Patches']} patches, "
        f"largest patch index {summary['Largest Patch Index']}"
    )
    return summary


def run_batch(gdf, config, name_field=None):
    '''
    Runs every boundary feature in turn. A failing region is logged and
    skipped so the others still complete.

    Returns:
    - DataFrame with one row per successful region
    '''
    all_results = []

    regions = list(iter_regions(gdf, name_field))
    for name, geometry in tqdm(regions, total=len(regions), desc="Processing regions"):
        try:
            all_results.append(run_region(geometry, name, config))
        except Exception as e:
            logger.error(f"Failed on region {name}: {e}")
            continue

    logger.info(f"{len(all_results)}/{len(regions)} regions processed")
    return pd.DataFrame(all_results)


def run_workflow(config):
    '''
    Loads the boundary, initialises Earth Engine and runs either the dissolved
    study area or every feature (batch mode). Writes the results CSV when
    output.results_csv is set.

    Returns:
    - DataFrame of region summaries
    '''
    start_time = time.time()
    log_pipeline_start(logger, PIPELINE_NAME, config)

    boundary_path = get_config_value(config, 'boundary.path')
    if not boundary_path:
        raise ValueError("boundary.path must point to a vector file")

    name_field = get_config_value(config, 'boundary.name_field')
    gdf = load_boundary(
        boundary_path,
        name_field=name_field,
        names=get_config_value(config, 'boundary.names')
    )

    initialize_earth_engine(
        project=get_config_value(config, 'earth_engine.project'),
        authenticate=get_config_value(config, 'earth_engine.authenticate', False)
    )

    try:
        if get_config_value(config, 'boundary.batch', False):
            result_df = run_batch(gdf, config, name_field=name_field)
        else:
            name = Path(boundary_path).stem
            result_df = pd.DataFrame([run_region(dissolve_boundary(gdf), name, config)])
    except Exception:
        log_pipeline_end(logger, PIPELINE_NAME, success=False, elapsed_time=time.time() - start_time)
        raise

    results_csv = get_config_value(config, 'output.results_csv')
    if results_csv:
        Path(results_csv).parent.mkdir(parents=True, exist_ok=True)
        result_df.to_csv(results_csv, index=False)
        logger.info(f"Results saved to: {results_csv}")

    log_pipeline_end(logger, PIPELINE_NAME, success=True, elapsed_time=time.time() - start_time)
    return result_df
