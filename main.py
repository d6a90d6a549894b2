"""
Headless CHIP-8 runner: load a ROM, run it for a number of cycles, show the frame.
"""

import sys

import hydra
from hydra.utils import to_absolute_path
from omegaconf import DictConfig, OmegaConf

from chipvm import Interpreter, Chip8Error, ExecutionFault
from chipvm.logging import ConsoleLogger, progress_bar
from chipvm.rendering import display_to_ascii, save_frame


def run(cfg: DictConfig, logger: ConsoleLogger) -> Interpreter:
    interpreter = Interpreter(
        seed=cfg.seed,
        sprite_wrap=cfg.sprite_wrap,
        logger=logger,
        trace=cfg.trace,
    )

    with open(to_absolute_path(cfg.rom), "rb") as f:
        interpreter.load(f.read())

    for key in cfg.held_keys:
        interpreter.set_key(int(key), True)

    beeps = 0
    with progress_bar(cfg.cycles, disable=not cfg.progress) as bar:
        for _ in range(cfg.cycles):
            interpreter.step()
            beeps += interpreter.beep
            bar.update(1)

    logger.info(
        f"Finished {cfg.cycles} cycles at PC {interpreter.program_counter:04X} "
        f"({beeps} beeps)"
    )
    return interpreter


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig) -> None:
    logger = ConsoleLogger(name="chipvm", log_level=cfg.log_level)
    logger.debug("Configuration:\n" + OmegaConf.to_yaml(cfg))

    try:
        interpreter = run(cfg, logger)
    except ExecutionFault as error:
        logger.critical(f"Program halted: {error}")
        sys.exit(1)
    except (Chip8Error, OSError) as error:
        logger.error(str(error))
        sys.exit(2)

    if cfg.ascii:
        print(display_to_ascii(interpreter.state.display))

    if cfg.output:
        output = to_absolute_path(cfg.output)
        save_frame(interpreter.state.display, output, scale=cfg.scale, color_scheme=cfg.color_scheme)
        logger.info(f"Frame saved: {output}")


if __name__ == "__main__":
    main()
