import pandas as pd

import ssp_utils.logging as logging
from exceptions import DataLoadError
logger = logging.getLogger(__name__)


def instance_from_frame(df: pd.DataFrame):
    """Rows are tools, columns are jobs. Returns a list of int lists."""
    if df.empty:
        raise DataLoadError("Instance frame is empty")
    try:
        values = df.apply(pd.to_numeric, errors="raise")
    except (ValueError, TypeError) as e:
        raise DataLoadError(f"Instance contains non-numeric cells: {e}") from e
    if values.isna().any().any():
        raise DataLoadError("Instance contains missing cells")
    return values.values.tolist()


def load_instance(path):
    """Read a headerless CSV (tools x jobs) of 0/1 entries."""
    logger.info("CHECKPOINT: loading instance from %s", path)
    try:
        df = pd.read_csv(path, header=None, skipinitialspace=True)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise DataLoadError(f"Could not read instance {path}: {e}") from e
    matrix = instance_from_frame(df)
    logger.info("Loaded instance %s: %d tools x %d jobs", path, len(matrix), len(matrix[0]))
    return matrix
