from datetime import datetime, timezone
import time

import hydra
from hydra.utils import to_absolute_path
from loguru import logger
from omegaconf import DictConfig, OmegaConf

from revo.data import Standardizer, build_prediction_report, load_rows, write_prediction_report
from revo.evolution import Evolution, EvolutionConfig, RefinementConfig
from revo.evolution.engine import build_config
from revo.utils import setup_logger


def run_experiment(cfg: DictConfig) -> None:
    start_time = time.time()

    logger.info("=" * 80)
    logger.info("revo symbolic regression")
    logger.info("=" * 80)
    logger.info(f"Data: {cfg.data.path} (target: {cfg.data.target})")
    logger.info(f"Start time: {datetime.now(timezone.utc).isoformat()}")

    try:
        logger.info("Step 1/4: Loading data...")
        rows = load_rows(to_absolute_path(cfg.data.path))
        standardizer = Standardizer.fit(rows)
        logger.info("Fitted standardization:\n{}", standardizer.describe())

        logger.info("Step 2/4: Building configuration...")
        config = build_config(
            EvolutionConfig,
            **OmegaConf.to_container(cfg.evolution, resolve=True),
            refinement=build_config(RefinementConfig, **OmegaConf.to_container(cfg.refinement, resolve=True)),
        )

        logger.info("Step 3/4: Evolving...")
        evolution = Evolution(cfg.data.target, standardizer.standardize_rows(rows), config, rng=cfg.seed)
        model = evolution.fit(standardizer)
        logger.info("Final model:\n{}", model.describe())

        logger.info("Step 4/4: Writing report...")
        report = build_prediction_report(model, rows)
        write_prediction_report(report, cfg.report.path)

    except KeyboardInterrupt:
        logger.info("Run interrupted by user")
    except Exception as e:  # pylint: disable=broad-except
        logger.error(f"Run failed: {e}")
        raise
    finally:
        duration = time.time() - start_time
        logger.info(f"Total duration: {duration:.2f} seconds")
        logger.info(f"End time: {datetime.now(timezone.utc).isoformat()}")
        logger.info("=" * 80)


@hydra.main(version_base=None, config_path="config", config_name="config")
def main(cfg: DictConfig) -> None:
    """Main entrypoint with Hydra configuration management."""
    log_file_path = setup_logger(
        log_dir=cfg.logging.log_dir,
        level=cfg.logging.level,
        rotation=cfg.logging.rotation,
        retention=cfg.logging.retention,
        components=cfg.logging.get("components"),
    )
    logger.info(
        "Working directory: {}.",
        hydra.core.hydra_config.HydraConfig.get().runtime.output_dir,
    )
    logger.info(f"Log file: {log_file_path}")
    run_experiment(cfg)


if __name__ == "__main__":
    main()
