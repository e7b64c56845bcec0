# Calls to Google Earth Engine: image query, zonal statistic and pixel export

import logging

import ee
import numpy as np
import pandas as pd
import requests
from rasterio.io import MemoryFile

from .rasterize import GridRaster

logger = logging.getLogger(__name__)

# Fill value for masked pixels in GeoTIFF downloads (gHM itself is in [0, 1])
DOWNLOAD_FILL_VALUE = -1

DOWNLOAD_ATTEMPTS = 3


def initialize_earth_engine(project=None, authenticate=False):
    '''
    Initialises the Earth Engine session, optionally running the interactive
    authentication flow first (needed once per machine).
    '''
    if authenticate:
        ee.Authenticate()
    ee.Initialize(project=project)
    logger.info(f"Earth Engine initialised (project: {project})")


def load_ghm_image(region, collection_id='CSP/HM/GlobalHumanModification', band='gHM'):
    '''
    Builds the gHM image for a region.

    Steps:
    - Filters the image collection with the region boundary
    - Mosaics the images touching the region
    - Selects the gHM band
    - Clips to the region

    Args:
    - region - ee.Geometry of the study area
    - collection_id - Earth Engine image collection ID
    - band - band name to keep

    Returns:
    - ee.Image with a single band, masked outside the region
    '''
    return (
        ee.ImageCollection(collection_id)
        .filterBounds(region)
        .mosaic()
        .select(band)
        .clip(region)
    )


def _reducer(name):
    reducers = {
        'median': ee.Reducer.median,
        'mean': ee.Reducer.mean,
        'min': ee.Reducer.min,
        'max': ee.Reducer.max,
    }
    if name not in reducers:
        raise ValueError(f"Unsupported reducer '{name}', expected one of {sorted(reducers)}")
    return reducers[name]()


def zonal_statistic(image, region, band='gHM', reducer='median', scale=1000,
                    max_pixels=1e9, best_effort=True):
    '''
    Reduces all pixels of the image inside the region to one value.

    Returns:
    - float, or None when the region holds no unmasked pixel
    '''
    value = image.reduceRegion(
        reducer=_reducer(reducer),
        geometry=region,
        scale=scale,
        maxPixels=max_pixels,
        bestEffort=best_effort
    ).get(band).getInfo()

    if value is None:
        logger.warning(f"Zonal {reducer} of {band} is empty for this region")
        return None
    return float(value)


def extract_pixels(image, region, band='gHM', scale=1000, max_pixels=1e9, best_effort=False):
    '''
    Pulls every unmasked pixel of the region into local memory.

    Pixel centre coordinates are added with ee.Image.pixelLonLat and masked
    like the data band, so the three lists returned by the toList reducer
    line up one-to-one.

    Returns:
    - DataFrame with columns longitude, latitude, value
    '''
    data_band = image.select(band)
    stacked = ee.Image.pixelLonLat().updateMask(data_band.mask()).addBands(data_band)

    lists = stacked.reduceRegion(
        reducer=ee.Reducer.toList(),
        geometry=region,
        scale=scale,
        maxPixels=max_pixels,
        bestEffort=best_effort
    ).getInfo() or {}

    longitude = lists.get('longitude') or []
    latitude = lists.get('latitude') or []
    values = lists.get(band) or []

    if not values:
        raise ValueError(f"No {band} pixels returned for the region at scale {scale}")
    if not len(longitude) == len(latitude) == len(values):
        raise ValueError(
            f"Pixel lists differ in length (lon {len(longitude)}, lat {len(latitude)}, {band} {len(values)})"
        )

    df = pd.DataFrame({'longitude': longitude, 'latitude': latitude, 'value': values})
    df = df.dropna(subset=['value']).reset_index(drop=True)
    logger.info(f"Extracted {len(df)} {band} pixels")
    return df


def download_image(image, region, scale=1000, crs=None):
    '''
    Downloads the image as a GeoTIFF and reads it in memory.

    Reads the response with rasterio.MemoryFile instead of writing temporary
    files to disk. Retries up to 3 times if the request or the read fails,
    then raises the last error.
    Documentation - https://rasterio.readthedocs.io/en/stable/topics/memory-files.html

    Returns:
    - GridRaster with NaN where the image is masked
    '''
    params = {
        'scale': scale,
        'region': region.bounds().getInfo(),
        'filePerBand': False,
        'format': 'GeoTIFF'
    }
    if crs:
        params['crs'] = crs

    url = image.unmask(DOWNLOAD_FILL_VALUE).getDownloadURL(params)

    for attempt in range(DOWNLOAD_ATTEMPTS):
        try:
            response = requests.get(url)
            response.raise_for_status()
            with MemoryFile(response.content) as memfile:
                with memfile.open() as dataset:
                    array = dataset.read(1).astype(float)
                    transform = dataset.transform
                    dataset_crs = dataset.crs.to_string() if dataset.crs else crs
            break
        except (requests.RequestException, ValueError, OSError) as e:
            logger.warning(f"Download attempt {attempt + 1}/{DOWNLOAD_ATTEMPTS} failed: {e}")
            if attempt == DOWNLOAD_ATTEMPTS - 1:
                raise

    array[array == DOWNLOAD_FILL_VALUE] = np.nan
    return GridRaster(array=array, transform=transform, crs=dataset_crs, nodata=np.nan)
