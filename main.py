import sys

from config import DEFAULT_CONFIG, check_time_limit
import data_loader
import ssp_solver
import ssp_utils.logging as logging
from exceptions import InvalidInstance

# 5 jobs, 6 tools, magazine of 3: at most 3 tools installed at the same time
REFERENCE_INSTANCE = [
    [1, 1, 0, 0, 1],
    [1, 0, 0, 1, 0],
    [0, 1, 1, 1, 0],
    [1, 0, 1, 0, 1],
    [0, 0, 1, 1, 0],
    [0, 0, 0, 0, 1],
]
REFERENCE_MAGAZINE_CAP = 3


def parse_args(argv):
    """
    [instance.csv MAGAZINE_CAP [BACKEND [TIME_LIMIT_SEC]]] ->
    (path or None, magazine_cap, config overrides).
    """
    path = argv[0] if argv else None
    magazine_cap = REFERENCE_MAGAZINE_CAP
    if len(argv) > 1:
        try:
            magazine_cap = int(argv[1])
        except ValueError:
            raise InvalidInstance(f"Magazine capacity must be an integer, got {argv[1]!r}") from None

    overrides = {}
    if len(argv) > 2:
        overrides["Backend"] = argv[2].lower()
    if len(argv) > 3:
        overrides["TimeLimit"] = check_time_limit(argv[3])
    return path, magazine_cap, overrides


def run_pipeline(argv=None):
    """
    Usage: python main.py [instance.csv MAGAZINE_CAP [BACKEND [TIME_LIMIT_SEC]]]
    Without arguments the 5x6 reference instance is solved.
    """
    argv = list(sys.argv[1:] if argv is None else argv)
    path, magazine_cap, overrides = parse_args(argv)
    cfg = DEFAULT_CONFIG.with_overrides(**overrides)

    logging.setup(log_dir=cfg.LogDir, level=cfg.LogLevel)
    logger = logging.getLogger(__name__)

    if path:
        matrix = data_loader.load_instance(path)
        instance_id = path
    else:
        matrix = REFERENCE_INSTANCE
        instance_id = "reference_5x6_C3"

    record = ssp_solver.solve_uniform_ssp(matrix, magazine_cap, config=cfg, instance_id=instance_id)

    logger.info("Objective (tool switches): %s", record.objective)
    logger.info("Gap: %s | runtime: %.3fs | status: %s", record.gap, record.runtime, record.status)
    logger.info("Job sequence: %s", list(record.job_sequence()))
    for k in range(1, len(record.job_sequence()) + 1):
        logger.info("  position %d: magazine=%s switched_in=%s",
                    k, sorted(record.magazine_at(k)), sorted(record.switches_at(k)))
    return record


def main():
    try:
        run_pipeline()
    except Exception:
        logging.getLogger(__name__).exception("Pipeline failed")
        raise

if __name__ == '__main__':
    main()
